"""
Predicates for JSON-RPC parameter shapes.

Every predicate returns a bool. With ``strict=True`` a failed check raises
InvalidArgument(field, value) instead, so a call site can gate a parameter in
one line before it goes on the wire.
"""

import re
from typing import Any

from .errors import InvalidArgument

DATA_PATTERN = re.compile(r"0x(?:[0-9a-fA-F]{2})*")
QUANTITY_PATTERN = re.compile(r"0x[0-9a-fA-F]+")
BLOCK_TAGS = frozenset({"earliest", "latest", "pending"})

ADDRESS_HEX_DIGITS = 40
HASH_HEX_DIGITS = 64


def _result(ok: bool, value: Any, strict: bool, field: str) -> bool:
    if not ok and strict:
        raise InvalidArgument(field, value)
    return ok


def _is_data(value: Any) -> bool:
    return isinstance(value, str) and DATA_PATTERN.fullmatch(value) is not None


def is_valid_data(value: Any, strict: bool = False, field: str = "data") -> bool:
    return _result(_is_data(value), value, strict, field)


def is_valid_quantity(value: Any, strict: bool = False, field: str = "quantity") -> bool:
    if isinstance(value, bool):
        ok = False
    elif isinstance(value, int):
        ok = value >= 0
    else:
        ok = isinstance(value, str) and QUANTITY_PATTERN.fullmatch(value) is not None
    return _result(ok, value, strict, field)


def is_valid_address(value: Any, strict: bool = False, field: str = "address") -> bool:
    ok = _is_data(value) and len(value) - 2 == ADDRESS_HEX_DIGITS
    return _result(ok, value, strict, field)


def is_valid_hash(value: Any, strict: bool = False, field: str = "hash") -> bool:
    ok = _is_data(value) and len(value) - 2 == HASH_HEX_DIGITS
    return _result(ok, value, strict, field)


def is_block_param(value: Any, strict: bool = False, field: str = "block") -> bool:
    # Upstream overloads the 20-byte shape as a block identifier; kept for wire
    # compatibility only.
    ok = (isinstance(value, str) and value in BLOCK_TAGS) or is_valid_address(value)
    return _result(ok, value, strict, field)
