from typing import Any, Dict, Iterable, Optional

from .errors import InvalidArgument, MalformedQuantity
from .quantity import decode_quantity

SYNC_QUANTITY_FIELDS = ("startingBlock", "currentBlock", "highestBlock", "knownStates", "pulledStates")
BLOCK_QUANTITY_FIELDS = (
    "number",
    "difficulty",
    "totalDifficulty",
    "size",
    "gasLimit",
    "gasUsed",
    "timestamp",
    "baseFeePerGas",
)
TRANSACTION_QUANTITY_FIELDS = (
    "blockNumber",
    "gas",
    "gasPrice",
    "maxFeePerGas",
    "maxPriorityFeePerGas",
    "nonce",
    "transactionIndex",
    "value",
    "type",
    "chainId",
    "v",
)
RECEIPT_QUANTITY_FIELDS = (
    "blockNumber",
    "cumulativeGasUsed",
    "gasUsed",
    "effectiveGasPrice",
    "status",
    "transactionIndex",
    "type",
)
LOG_QUANTITY_FIELDS = ("blockNumber", "logIndex", "transactionIndex")


def decode_fields(obj: Dict[str, Any], fields: Iterable[str]) -> Dict[str, Any]:
    """Return a copy of ``obj`` with the named QUANTITY fields as ints."""
    decoded = dict(obj)
    for field in fields:
        value = decoded.get(field)
        if value is None:
            continue
        try:
            decoded[field] = decode_quantity(value)
        except MalformedQuantity as exc:
            raise InvalidArgument(field, value, "not a valid QUANTITY") from exc
    return decoded


def decode_sync_status(status: Any) -> Any:
    # eth_syncing returns false when the node is not syncing.
    if not isinstance(status, dict):
        return status
    return decode_fields(status, SYNC_QUANTITY_FIELDS)


def decode_transaction(tx: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if tx is None:
        return None
    return decode_fields(tx, TRANSACTION_QUANTITY_FIELDS)


def decode_log(entry: Any) -> Any:
    # Block filters yield plain hashes instead of log objects.
    if not isinstance(entry, dict):
        return entry
    return decode_fields(entry, LOG_QUANTITY_FIELDS)


def decode_receipt(receipt: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if receipt is None:
        return None
    decoded = decode_fields(receipt, RECEIPT_QUANTITY_FIELDS)
    if isinstance(decoded.get("logs"), list):
        decoded["logs"] = [decode_log(entry) for entry in decoded["logs"]]
    return decoded


def decode_block(block: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if block is None:
        return None
    decoded = decode_fields(block, BLOCK_QUANTITY_FIELDS)
    transactions = decoded.get("transactions")
    if isinstance(transactions, list):
        decoded["transactions"] = [
            decode_transaction(tx) if isinstance(tx, dict) else tx for tx in transactions
        ]
    return decoded
