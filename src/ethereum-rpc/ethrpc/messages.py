"""Structured parameter objects for eth_sendTransaction, eth_call, filters and whisper posts."""

import re
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence, Union

from .errors import InvalidArgument
from .quantity import HEX_DIGITS_PATTERN, encode_quantity
from .validators import is_block_param, is_valid_address, is_valid_data, is_valid_quantity

SELECTOR_PATTERN = re.compile(r"0x[0-9a-fA-F]{8}")

Quantity = Union[int, str]


def quantity_param(value: Quantity, field: str) -> str:
    """Validate a QUANTITY parameter and return its wire form."""
    is_valid_quantity(value, strict=True, field=field)
    if isinstance(value, int):
        return encode_quantity(value)
    return value.lower()


def _optional_quantity(value: Optional[Quantity], field: str) -> Optional[str]:
    if value is None:
        return None
    return quantity_param(value, field)


def _drop_none(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in fields.items() if value is not None}


def _one_or_many(value: Any, field: str, allow_str: bool = True) -> List[Any]:
    """A single string or a list/tuple of entries; anything else is rejected."""
    if allow_str and isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return list(value)
    raise InvalidArgument(field, value, "expected a string or a list")


@dataclass(frozen=True)
class Transaction:
    to: Optional[str] = None
    data: Optional[str] = None
    from_address: Optional[str] = None
    gas: Optional[Quantity] = None
    gas_price: Optional[Quantity] = None
    value: Optional[Quantity] = None
    nonce: Optional[Quantity] = None

    def __post_init__(self) -> None:
        if self.to is not None:
            is_valid_address(self.to, strict=True, field="to")
        if self.from_address is not None:
            is_valid_address(self.from_address, strict=True, field="from")
        if self.data is not None:
            is_valid_data(self.data, strict=True, field="data")
        for field, value in (
            ("gas", self.gas),
            ("gasPrice", self.gas_price),
            ("value", self.value),
            ("nonce", self.nonce),
        ):
            if value is not None:
                is_valid_quantity(value, strict=True, field=field)

    def to_params(self) -> Dict[str, Any]:
        return _drop_none(
            {
                "from": self.from_address,
                "to": self.to,
                "gas": _optional_quantity(self.gas, "gas"),
                "gasPrice": _optional_quantity(self.gas_price, "gasPrice"),
                "value": _optional_quantity(self.value, "value"),
                "data": self.data,
                "nonce": _optional_quantity(self.nonce, "nonce"),
            }
        )

    def with_argument(self, selector: str, argument: str) -> "Transaction":
        """
        Return a copy whose data is a 4-byte selector followed by raw argument hex.

        The argument is taken as already ABI-encoded hex digits (no 0x prefix).
        """
        if not isinstance(selector, str) or not SELECTOR_PATTERN.fullmatch(selector):
            raise InvalidArgument("selector", selector, 'expected "0x" + 8 hex characters')
        if (
            not isinstance(argument, str)
            or not HEX_DIGITS_PATTERN.fullmatch(argument)
            or len(argument) % 2
        ):
            raise InvalidArgument("argument", argument, "contains non hex characters")
        return replace(self, data=(selector + argument).lower())


class Message(Transaction):
    """Call object for eth_call and eth_estimateGas."""


@dataclass(frozen=True)
class Filter:
    from_block: str = "latest"
    to_block: str = "latest"
    address: Optional[Union[str, Sequence[str]]] = None
    topics: Optional[Sequence[Optional[Union[str, Sequence[str]]]]] = None

    def __post_init__(self) -> None:
        is_block_param(self.from_block, strict=True, field="fromBlock")
        is_block_param(self.to_block, strict=True, field="toBlock")
        if self.address is not None:
            for item in _one_or_many(self.address, "address"):
                is_valid_address(item, strict=True, field="address")
        if self.topics is not None:
            for topic in _one_or_many(self.topics, "topics", allow_str=False):
                if topic is None:
                    continue
                for item in _one_or_many(topic, "topics"):
                    is_valid_data(item, strict=True, field="topics")

    def to_params(self) -> Dict[str, Any]:
        address: Any = self.address
        if address is not None and not isinstance(address, str):
            address = list(address)
        topics: Optional[List[Any]] = None
        if self.topics is not None:
            topics = [
                topic if topic is None or isinstance(topic, str) else list(topic)
                for topic in self.topics
            ]
        return _drop_none(
            {
                "fromBlock": self.from_block,
                "toBlock": self.to_block,
                "address": address,
                "topics": topics,
            }
        )


@dataclass(frozen=True)
class WhisperPost:
    topics: Sequence[str]
    payload: str
    priority: Quantity
    ttl: Quantity
    from_identity: Optional[str] = None
    to: Optional[str] = None

    def __post_init__(self) -> None:
        for topic in _one_or_many(self.topics, "topics", allow_str=False):
            is_valid_data(topic, strict=True, field="topics")
        is_valid_data(self.payload, strict=True, field="payload")
        is_valid_quantity(self.priority, strict=True, field="priority")
        is_valid_quantity(self.ttl, strict=True, field="ttl")
        if self.from_identity is not None:
            is_valid_data(self.from_identity, strict=True, field="from")
        if self.to is not None:
            is_valid_data(self.to, strict=True, field="to")

    def to_params(self) -> Dict[str, Any]:
        return _drop_none(
            {
                "from": self.from_identity,
                "to": self.to,
                "topics": list(self.topics),
                "payload": self.payload,
                "priority": quantity_param(self.priority, "priority"),
                "ttl": quantity_param(self.ttl, "ttl"),
            }
        )
