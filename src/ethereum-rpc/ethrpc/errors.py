from typing import Any, Optional


class EthereumRpcError(Exception):
    """Base class for every error raised by ethrpc."""


class DataTypeError(EthereumRpcError, ValueError):
    """A value failed local validation or conversion; nothing was sent."""


class InvalidArgument(DataTypeError):
    def __init__(self, field: str, value: Any, reason: Optional[str] = None) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        message = f"Invalid {field}: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class UnknownType(DataTypeError):
    def __init__(self, name: Any) -> None:
        self.name = name
        super().__init__(f"Invalid type: {name!r}")


class MalformedQuantity(DataTypeError):
    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Malformed quantity: {value!r}")


class LengthMismatch(DataTypeError):
    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected} hex digits, got {actual}.")


class ValueTooLarge(DataTypeError):
    def __init__(self, value: Any, limit: int) -> None:
        self.value = value
        self.limit = limit
        super().__init__(f"Value {value!r} does not fit in {limit} bytes.")


class TransportError(EthereumRpcError):
    """Failure reported by the node or on the way to it."""

    def __init__(
        self,
        message: str = "RPC error",
        code: Optional[int] = None,
        data: Any = None,
    ) -> None:
        self.code = code
        self.message = message
        self.data = data
        parts: list[str] = []
        if code is not None:
            parts.append(f"code {code}")
        parts.append(str(message))
        if data:
            parts.append(str(data))
        super().__init__(f"RPC error: {': '.join(parts)}")
