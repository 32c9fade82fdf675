"""Conversion between native values and the QUANTITY / DATA hex encodings."""

from __future__ import annotations

import re
from typing import Any, Union

from .errors import LengthMismatch, MalformedQuantity, ValueTooLarge

HEX_DIGITS_PATTERN = re.compile(r"[0-9a-fA-F]*")


def _strip_prefix(value: str) -> tuple[bool, str]:
    if value[:2] in ("0x", "0X"):
        return True, value[2:]
    return False, value


def decode_quantity(value: Any) -> int:
    """
    Return the unsigned integer behind a QUANTITY.

    Native ints (and bools) pass through. Strings with a 0x/0X prefix are
    hexadecimal and may carry leading zeros; un-prefixed strings are decimal.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        if value < 0:
            raise MalformedQuantity(value)
        return value
    if not isinstance(value, str):
        raise MalformedQuantity(value)

    candidate = value.strip()
    prefixed, body = _strip_prefix(candidate)
    if prefixed:
        if not body or not HEX_DIGITS_PATTERN.fullmatch(body):
            raise MalformedQuantity(value)
        return int(body, 16)
    if candidate.isdigit() and candidate.isascii():
        return int(candidate, 10)
    raise MalformedQuantity(value)


def encode_quantity(value: int) -> str:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise MalformedQuantity(value)
    return f"0x{value:x}"


def encode_fixed(value: Union[bytes, bytearray, int], byte_length: int) -> str:
    """Encode bytes (or an unsigned int) as exactly ``byte_length`` bytes of DATA."""
    if isinstance(value, (bytes, bytearray)):
        if len(value) > byte_length:
            raise ValueTooLarge(value, byte_length)
        return "0x" + bytes(value).hex().rjust(2 * byte_length, "0")

    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedQuantity(value)
    digits = f"{decode_quantity(value):x}"
    if len(digits) > 2 * byte_length:
        raise ValueTooLarge(value, byte_length)
    return "0x" + digits.rjust(2 * byte_length, "0")


def decode_fixed(value: str, byte_length: int) -> bytes:
    if not isinstance(value, str):
        raise MalformedQuantity(value)
    _, body = _strip_prefix(value.strip())
    if len(body) != 2 * byte_length:
        raise LengthMismatch(2 * byte_length, len(body))
    if not HEX_DIGITS_PATTERN.fullmatch(body):
        raise MalformedQuantity(value)
    return bytes.fromhex(body)


def encode_data(value: Union[bytes, bytearray]) -> str:
    return "0x" + bytes(value).hex()


def decode_data(value: str) -> bytes:
    if not isinstance(value, str):
        raise MalformedQuantity(value)
    _, body = _strip_prefix(value.strip())
    if len(body) % 2 != 0 or not HEX_DIGITS_PATTERN.fullmatch(body):
        raise MalformedQuantity(value)
    return bytes.fromhex(body)
