"""Tests for aes_block.py — both cipher directions, tables, input checks."""

import os
import sys

import pytest
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
from aes_block import Direction, galois_mul2, transform  # noqa: E402
from token_constants import INVERSE_S_BOX, RCON, S_BOX  # noqa: E402

# FIPS-197 Appendix C.1
FIPS_KEY = bytes.fromhex("000102030405060708090a0b0c0d0e0f")
FIPS_PLAIN = bytes.fromhex("00112233445566778899aabbccddeeff")
FIPS_CIPHER = bytes.fromhex("69c4e0d86a7b0430d8cdb78070b4c55a")

# Captured from the token derivation for secret=0*16, phone=123456789, ts=1700000000
STAGE1_KEY = bytes.fromhex("fad630915e350000075bcd151fe21031")
STAGE1_OUT = bytes.fromhex("16052c82f01fdfa685d0a9b7e396b387")
STAGE2_BLOCK = bytes.fromhex("000a0a000000000000006553f1020000")
STAGE2_OUT = bytes.fromhex("db24291bc255249bc4c8e1c3a1f42dab")


def _ecb(key):
    return Cipher(algorithms.AES(key), modes.ECB())


class TestKnownVectors:
    def test_reverse_fips_197(self):
        assert transform(FIPS_PLAIN, FIPS_KEY, Direction.REVERSE) == FIPS_CIPHER

    def test_forward_fips_197(self):
        assert transform(FIPS_CIPHER, FIPS_KEY, Direction.FORWARD) == FIPS_PLAIN

    def test_forward_stage1_fixture(self):
        assert transform(bytes(16), STAGE1_KEY, Direction.FORWARD) == STAGE1_OUT

    def test_reverse_stage2_fixture(self):
        assert transform(STAGE2_BLOCK, STAGE1_OUT, Direction.REVERSE) == STAGE2_OUT

    def test_directions_differ(self):
        block = bytes(range(16))
        assert (transform(block, FIPS_KEY, Direction.FORWARD)
                != transform(block, FIPS_KEY, Direction.REVERSE))


class TestCrossCheck:
    """Independent check against the cryptography package's AES-ECB."""

    KEYS = [
        bytes(16),
        bytes([0xFF] * 16),
        bytes(range(16)),
        bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c"),
    ]
    BLOCKS = [
        bytes(16),
        bytes([0xA5] * 16),
        bytes.fromhex("6bc1bee22e409f96e93d7e117393172a"),
    ]

    @pytest.mark.parametrize("key", KEYS)
    @pytest.mark.parametrize("block", BLOCKS)
    def test_reverse_matches_aes_encrypt(self, key, block):
        enc = _ecb(key).encryptor()
        assert transform(block, key, Direction.REVERSE) == enc.update(block) + enc.finalize()

    @pytest.mark.parametrize("key", KEYS)
    @pytest.mark.parametrize("block", BLOCKS)
    def test_forward_matches_aes_decrypt(self, key, block):
        dec = _ecb(key).decryptor()
        assert transform(block, key, Direction.FORWARD) == dec.update(block) + dec.finalize()


class TestKeyHandling:
    def test_key_not_mutated_bytearray(self):
        key = bytearray(FIPS_KEY)
        transform(FIPS_PLAIN, key, Direction.REVERSE)
        transform(FIPS_CIPHER, key, Direction.FORWARD)
        assert key == bytearray(FIPS_KEY)

    def test_block_not_mutated(self):
        block = bytearray(FIPS_PLAIN)
        transform(block, FIPS_KEY, Direction.REVERSE)
        assert block == bytearray(FIPS_PLAIN)

    def test_key_reusable_across_calls(self):
        key = bytearray(FIPS_KEY)
        first = transform(FIPS_PLAIN, key, Direction.REVERSE)
        second = transform(FIPS_PLAIN, key, Direction.REVERSE)
        assert first == second == FIPS_CIPHER

    def test_returns_bytes(self):
        out = transform(bytearray(16), bytearray(16), Direction.REVERSE)
        assert isinstance(out, bytes)
        assert len(out) == 16


class TestInputValidation:
    @pytest.mark.parametrize("length", [0, 15, 17, 32])
    def test_rejects_bad_block_length(self, length):
        with pytest.raises(ValueError, match="not 16 bytes"):
            transform(bytes(length), FIPS_KEY, Direction.REVERSE)

    @pytest.mark.parametrize("length", [0, 15, 17, 24])
    def test_rejects_bad_key_length(self, length):
        with pytest.raises(ValueError, match="not 16 bytes"):
            transform(FIPS_PLAIN, bytes(length), Direction.FORWARD)

    def test_rejects_unknown_direction(self):
        with pytest.raises(ValueError, match="unknown direction"):
            transform(FIPS_PLAIN, FIPS_KEY, "sideways")


class TestTables:
    def test_inverse_sbox_inverts_sbox(self):
        assert all(INVERSE_S_BOX[S_BOX[x]] == x for x in range(256))

    def test_sbox_is_permutation(self):
        assert sorted(S_BOX) == list(range(256))

    def test_sbox_spot_values(self):
        assert S_BOX[0x00] == 0x63
        assert S_BOX[0x53] == 0xED
        assert S_BOX[0xFF] == 0x16

    def test_rcon_is_powers_of_two_in_field(self):
        value = 1
        for rc in RCON:
            assert rc == value
            value = galois_mul2(value)


class TestGaloisMul2:
    def test_no_reduction(self):
        assert galois_mul2(0x57) == 0xAE

    def test_with_reduction(self):
        assert galois_mul2(0xAE) == 0x47
        assert galois_mul2(0x80) == 0x1B

    def test_zero(self):
        assert galois_mul2(0) == 0

    def test_stays_in_byte_range(self):
        assert all(0 <= galois_mul2(x) <= 0xFF for x in range(256))
