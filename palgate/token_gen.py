"""
Temporal token generation for the PalGate API.

Binds the long-lived session token, the phone number, the token type and the
current time into the 46-character hex value sent in the x-bt-token header.

Token layout (23 bytes, hex-encoded uppercase):
    [0]      type marker (0x01 SMS, 0x11 primary, 0x21 secondary)
    [1..6]   phone id (low 6 bytes of the big-endian uint64 phone number)
    [7..22]  stage-2 cipher output

Derivation:
    stage 1: FORWARD(session_token, master_key with phone id at bytes 6..11)
    stage 2: REVERSE(timestamp block, stage-1 output)
"""

import struct
import time

from aes_block import Direction, transform
from token_constants import (
    BLOCK_SIZE,
    PHONE_ID_SIZE,
    PHONE_KEY_OFFSET,
    T_C_KEY,
    TIMESTAMP_OFFSET,
    TOKEN_SIZE,
    TOKEN_TYPE_MARKERS,
    TS_MARKER,
    TS_MARKER_OFFSET,
    TS_VALUE_OFFSET,
    TokenType,
)


class TokenError(ValueError):
    """Base class for token input errors."""


class InvalidSecretLength(TokenError):
    pass


class UnknownTokenType(TokenError):
    pass


def _strict_int(value):
    """Return value as int if it is an int or an all-digit string, else None.

    bool, float and other numeric types are refused rather than truncated.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if text.isascii() and text.isdigit():
            return int(text)
    return None


def pack_uint64_be(num):
    """Pack a non-negative integer as 8 big-endian bytes."""
    if num < 0 or num > 0xFFFFFFFFFFFFFFFF:
        raise ValueError(f"phone number out of uint64 range: {num}")
    return struct.pack(">Q", num)


def phone_id_bytes(phone_number):
    """Return the 6 phone id bytes embedded in the key and the token."""
    number = _strict_int(phone_number)
    if number is None:
        raise ValueError(f"phone number must be a non-negative integer, got {phone_number!r}")
    return pack_uint64_be(number)[-PHONE_ID_SIZE:]


def bytes_to_hex(data):
    return data.hex()


def parse_session_token(token_hex):
    """Decode a hex session token (as stored in config) into bytes."""
    try:
        secret = bytes.fromhex(token_hex)
    except (TypeError, ValueError) as e:
        raise TokenError(f"session token is not valid hex: {e}") from None
    if len(secret) != BLOCK_SIZE:
        raise InvalidSecretLength(
            f"session token must be {BLOCK_SIZE} bytes, got {len(secret)}"
        )
    return secret


def resolve_token_type(token_type):
    """Coerce an int, all-digit string or TokenType into TokenType."""
    if isinstance(token_type, TokenType):
        return token_type
    try:
        return TokenType(_strict_int(token_type))
    except ValueError:
        raise UnknownTokenType(f"unknown token type: {token_type!r}") from None


def build_step1_key(phone_number, master_key=T_C_KEY):
    key = bytearray(master_key)
    key[PHONE_KEY_OFFSET:PHONE_KEY_OFFSET + PHONE_ID_SIZE] = phone_id_bytes(phone_number)
    return bytes(key)


def build_timestamp_block(timestamp, timestamp_offset=TIMESTAMP_OFFSET):
    block = bytearray(BLOCK_SIZE)
    struct.pack_into("<H", block, TS_MARKER_OFFSET, TS_MARKER)
    struct.pack_into(">I", block, TS_VALUE_OFFSET, (timestamp + timestamp_offset) & 0xFFFFFFFF)
    return bytes(block)


def generate_token(session_token, phone_number, token_type, timestamp=None,
                   timestamp_offset=TIMESTAMP_OFFSET, master_key=T_C_KEY):
    """Generate a temporal token.

    Args:
        session_token: 16-byte session secret.
        phone_number: Account phone number as an integer.
        token_type: TokenType (or its int value).
        timestamp: Unix seconds. Defaults to now.
        timestamp_offset: Seconds added before embedding.
        master_key: 16-byte client master key.

    Returns:
        46-character uppercase hex string.

    Raises:
        InvalidSecretLength: session_token is not 16 bytes.
        UnknownTokenType: token_type is not SMS, PRIMARY or SECONDARY.
    """
    if len(session_token) != BLOCK_SIZE:
        raise InvalidSecretLength(
            f"Invalid session token: expected {BLOCK_SIZE} bytes, got {len(session_token)}"
        )
    marker = TOKEN_TYPE_MARKERS[resolve_token_type(token_type)]
    if timestamp is None:
        timestamp = int(time.time())

    phone_id = phone_id_bytes(phone_number)
    step2_key = transform(
        bytes(session_token), build_step1_key(phone_number, master_key), Direction.FORWARD
    )
    step2_result = transform(
        build_timestamp_block(int(timestamp), timestamp_offset), step2_key, Direction.REVERSE
    )

    result = bytes([marker]) + phone_id + step2_result
    assert len(result) == TOKEN_SIZE
    return bytes_to_hex(result).upper()
