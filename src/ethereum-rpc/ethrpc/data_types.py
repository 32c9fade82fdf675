"""
Typed JSON-RPC values.

A TypedValue pairs one of five kinds with an already validated canonical value:

    TypedValue("integer", 100).wire()            -> "0x64"
    TypedValue("Q", "0x00000000064").native()    -> 100
    TypedValue("bool", True).wire()              -> "0x00000001"

Kinds are looked up by name or alias in a read-only table; there is no way to
register new kinds at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping, Tuple

from .errors import DataTypeError, InvalidArgument, UnknownType, ValueTooLarge
from .quantity import decode_fixed, decode_quantity, encode_fixed, encode_quantity

ADDRESS_BYTES = 20
HASH_BYTES = 32
BOOL_WORD_DIGITS = 8


@dataclass(frozen=True)
class FixedData:
    """Fixed-length DATA held as its unsigned integer value."""

    byte_length: int

    def normalize(self, value: Any) -> int:
        if isinstance(value, bool):
            raise InvalidArgument(f"D{self.byte_length}", value)
        if isinstance(value, int):
            encode_fixed(value, self.byte_length)
            return value
        if isinstance(value, (bytes, bytearray)):
            if len(value) != self.byte_length:
                raise InvalidArgument(
                    f"D{self.byte_length}", value, f"expected {self.byte_length} bytes"
                )
            return int.from_bytes(value, "big")
        if isinstance(value, str):
            candidate = value.strip()
            if candidate[:2] in ("0x", "0X"):
                return int.from_bytes(decode_fixed(candidate, self.byte_length), "big")
            number = decode_quantity(candidate)
            if number.bit_length() > 8 * self.byte_length:
                raise ValueTooLarge(value, self.byte_length)
            return number
        raise InvalidArgument(f"D{self.byte_length}", value)

    def encode(self, value: int) -> str:
        return encode_fixed(value, self.byte_length)


def _normalize_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    number = decode_quantity(value)
    if number not in (0, 1):
        raise InvalidArgument("bool", value, "expected 0 or 1")
    return bool(number)


def _encode_bool(value: bool) -> str:
    return f"0x{int(value):0{BOOL_WORD_DIGITS}x}"


def _normalize_string(value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidArgument("string", value)
    return value


def _encode_string(value: str) -> str:
    return value


@dataclass(frozen=True)
class DataKind:
    name: str
    aliases: Tuple[str, ...]
    normalize: Callable[[Any], Any]
    encode: Callable[[Any], str]


_HASH = FixedData(HASH_BYTES)
_ADDRESS = FixedData(ADDRESS_BYTES)

KINDS: Mapping[str, DataKind] = MappingProxyType(
    {
        kind.name: kind
        for kind in (
            DataKind("bool", ("bool", "boolean", "B"), _normalize_bool, _encode_bool),
            DataKind("hash", ("hash", "tx_hash", "D32"), _HASH.normalize, _HASH.encode),
            DataKind("address", ("address", "D20"), _ADDRESS.normalize, _ADDRESS.encode),
            DataKind(
                "integer",
                ("integer", "int", "quantity", "Q"),
                decode_quantity,
                encode_quantity,
            ),
            DataKind("string", ("string", "S"), _normalize_string, _encode_string),
        )
    }
)

TYPE_ALIASES: Mapping[str, str] = MappingProxyType(
    {alias: kind.name for kind in KINDS.values() for alias in kind.aliases}
)


def resolve_type(type_name: Any) -> str:
    """Return the canonical kind name for a type name or alias."""
    if isinstance(type_name, str) and type_name in TYPE_ALIASES:
        return TYPE_ALIASES[type_name]
    raise UnknownType(type_name)


@dataclass(frozen=True)
class TypedValue:
    """An immutable, validated value of one of the supported kinds."""

    type_name: str
    value: Any

    def __post_init__(self) -> None:
        kind = KINDS[resolve_type(self.type_name)]
        raw = self.value
        try:
            normalized = kind.normalize(raw)
        except DataTypeError as exc:
            reason = exc.reason if isinstance(exc, InvalidArgument) else str(exc)
            raise InvalidArgument(kind.name, raw, reason) from exc
        object.__setattr__(self, "type_name", kind.name)
        object.__setattr__(self, "value", normalized)

    def kind(self) -> str:
        return self.type_name

    def native(self) -> Any:
        """Canonical value: int for integer/hash/address, bool or str otherwise."""
        return self.value

    def wire(self) -> str:
        """JSON-RPC representation of the value."""
        return KINDS[self.type_name].encode(self.value)
