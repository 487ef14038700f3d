"""
AES-128 block transform used by the PalGate token generator.

Reproduces the vendor client's cipher routine step for step, including its
in-place key schedule walk. The two directions are separate procedures:

  FORWARD: expands the schedule to the last round key, then walks it back
           while undoing rounds (same output as AES-128 decryption).
  REVERSE: applies rounds while walking the schedule forward (same output
           as AES-128 encryption).

The caller's key is copied into a scratch buffer and never modified.
"""

from enum import Enum

from token_constants import BLOCK_SIZE, INVERSE_S_BOX, KEY_SIZE, RCON, S_BOX

ROUNDS = 10


class Direction(Enum):
    FORWARD = "forward"
    REVERSE = "reverse"


def galois_mul2(value):
    """Multiply a byte by 2 in GF(2^8) (reduction polynomial 0x11B)."""
    if value & 0x80:
        return ((value << 1) ^ 0x1B) & 0xFF
    return (value << 1) & 0xFF


def transform(block, key, direction):
    """Transform one 16-byte block under a 16-byte key.

    Args:
        block: 16 input bytes.
        key: 16 key bytes (left untouched).
        direction: Direction.FORWARD or Direction.REVERSE.

    Returns:
        16 output bytes.
    """
    if len(block) != BLOCK_SIZE or len(key) != KEY_SIZE:
        raise ValueError(
            f"State and/or key are not {BLOCK_SIZE} bytes "
            f"(state={len(block)}, key={len(key)})"
        )
    state = bytearray(block)
    scratch = bytearray(key)
    if direction is Direction.FORWARD:
        _forward(state, scratch)
    elif direction is Direction.REVERSE:
        _reverse(state, scratch)
    else:
        raise ValueError(f"unknown direction: {direction!r}")
    return bytes(state)


# --- Key schedule walk ---


def _next_round_key(key, rnd):
    key[0] ^= S_BOX[key[13]] ^ RCON[rnd]
    key[1] ^= S_BOX[key[14]]
    key[2] ^= S_BOX[key[15]]
    key[3] ^= S_BOX[key[12]]
    for i in range(4, KEY_SIZE):
        key[i] ^= key[i - 4]


def _prev_round_key(key, rnd):
    # Undo the word chaining first (high to low), then the first word.
    for i in range(KEY_SIZE - 1, 3, -1):
        key[i] ^= key[i - 4]
    key[0] ^= S_BOX[key[13]] ^ RCON[rnd]
    key[1] ^= S_BOX[key[14]]
    key[2] ^= S_BOX[key[15]]
    key[3] ^= S_BOX[key[12]]


# --- Round steps ---


def _add_key(state, key):
    for i in range(BLOCK_SIZE):
        state[i] ^= key[i]


def _shift_rows(state):
    state[1], state[5], state[9], state[13] = state[5], state[9], state[13], state[1]
    state[2], state[6], state[10], state[14] = state[10], state[14], state[2], state[6]
    state[3], state[7], state[11], state[15] = state[15], state[3], state[7], state[11]


def _inv_shift_rows(state):
    state[1], state[5], state[9], state[13] = state[13], state[1], state[5], state[9]
    state[2], state[6], state[10], state[14] = state[10], state[14], state[2], state[6]
    state[3], state[7], state[11], state[15] = state[7], state[11], state[15], state[3]


def _mix_column(state, base):
    a0, a1, a2, a3 = state[base:base + 4]
    mix = a0 ^ a1 ^ a2 ^ a3
    state[base] = a0 ^ mix ^ galois_mul2(a0 ^ a1)
    state[base + 1] = a1 ^ mix ^ galois_mul2(a1 ^ a2)
    state[base + 2] = a2 ^ mix ^ galois_mul2(a2 ^ a3)
    state[base + 3] = a3 ^ mix ^ galois_mul2(a3 ^ a0)


def _mix_columns(state):
    for base in range(0, BLOCK_SIZE, 4):
        _mix_column(state, base)


def _inv_mix_columns(state):
    for base in range(0, BLOCK_SIZE, 4):
        # Pre-multiply so the plain column mix yields the inverse mix.
        u = galois_mul2(galois_mul2(state[base] ^ state[base + 2]))
        v = galois_mul2(galois_mul2(state[base + 1] ^ state[base + 3]))
        state[base] ^= u
        state[base + 1] ^= v
        state[base + 2] ^= u
        state[base + 3] ^= v
        _mix_column(state, base)


# --- Directions ---


def _forward(state, key):
    for rnd in range(ROUNDS):
        _next_round_key(key, rnd)
    _add_key(state, key)

    for rnd in range(ROUNDS):
        _prev_round_key(key, ROUNDS - 1 - rnd)
        if rnd > 0:
            _inv_mix_columns(state)
        _inv_shift_rows(state)
        for i in range(BLOCK_SIZE):
            state[i] = INVERSE_S_BOX[state[i]] ^ key[i]


def _reverse(state, key):
    for rnd in range(ROUNDS):
        for i in range(BLOCK_SIZE):
            state[i] = S_BOX[state[i] ^ key[i]]
        _shift_rows(state)
        if rnd < ROUNDS - 1:
            _mix_columns(state)
        _next_round_key(key, rnd)
    _add_key(state, key)
