"""
Ethereum JSON-RPC API client.

Every remote procedure of the web3_, net_, eth_, db_ and shh_ namespaces has
one method here. Parameters are validated before anything is sent; QUANTITY
results stay hex strings unless ``decode=True`` is passed (a few methods whose
results are almost always wanted as numbers decode by default).
"""

import logging
import threading
from typing import Any, Dict, List, Optional, Union

from .config import Config
from .errors import InvalidArgument
from .messages import Filter, Message, Transaction, WhisperPost, quantity_param
from .quantity import decode_quantity, encode_data, encode_quantity
from .results import (
    decode_block,
    decode_log,
    decode_receipt,
    decode_sync_status,
    decode_transaction,
)
from .rpc_transport import RpcTransport
from .validators import (
    is_block_param,
    is_valid_address,
    is_valid_data,
    is_valid_hash,
    is_valid_quantity,
)

logger = logging.getLogger(__name__)

BlockParam = Union[str, int]


class EthereumClient:
    def __init__(
        self,
        rpc_url: Optional[str] = None,
        transport: Optional[Any] = None,
        timeout: int = 10,
        max_retries: int = 3,
        backoff_seconds: float = 0.5,
    ) -> None:
        if transport is None:
            transport = RpcTransport(
                rpc_url or "",
                timeout=timeout,
                max_retries=max_retries,
                backoff_seconds=backoff_seconds,
            )
        self.transport = transport
        self._id_lock = threading.Lock()
        self._last_id = 0

    @classmethod
    def from_config(cls, config: Config) -> "EthereumClient":
        return cls(
            config.rpc_url,
            timeout=config.request_timeout,
            max_retries=config.max_retries,
            backoff_seconds=config.backoff_seconds,
        )

    def close(self) -> None:
        close = getattr(self.transport, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "EthereumClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _next_id(self) -> int:
        with self._id_lock:
            self._last_id += 1
            return self._last_id

    def request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """Send one call and return the node's result untouched."""
        request_id = self._next_id()
        logger.debug("rpc #%d %s", request_id, method)
        return self.transport.send(request_id, method, list(params or []))

    def _quantity(self, method: str, params: Optional[List[Any]], decode: bool) -> Any:
        result = self.request(method, params)
        if decode and result is not None:
            return decode_quantity(result)
        return result

    # Parameter helpers

    def _block(self, block: BlockParam, field: str = "block") -> str:
        if isinstance(block, int) and not isinstance(block, bool):
            if block < 0:
                raise InvalidArgument(field, block, "block numbers are non-negative")
            return encode_quantity(block)
        is_block_param(block, strict=True, field=field)
        return block

    def _address(self, address: str, field: str = "address") -> str:
        is_valid_address(address, strict=True, field=field)
        return address

    def _hash(self, value: str, field: str = "hash") -> str:
        is_valid_hash(value, strict=True, field=field)
        return value

    def _data(self, value: str, field: str = "data") -> str:
        is_valid_data(value, strict=True, field=field)
        return value

    def _string(self, value: Any, field: str) -> str:
        if not isinstance(value, str):
            raise InvalidArgument(field, value, "expected a string")
        return value

    def _require(self, value: Any, expected: type, field: str) -> None:
        if not isinstance(value, expected):
            raise InvalidArgument(field, value, f"expected a {expected.__name__} object")

    # web3

    def web3_client_version(self) -> str:
        return self.request("web3_clientVersion")

    def web3_sha3(self, data: str) -> str:
        """Keccak-256 (not the standardized SHA3-256) of the given data, computed by the node."""
        if not (is_valid_quantity(data) or is_valid_data(data)):
            raise InvalidArgument("data", data, "not a valid quantity or data value")
        return self.request("web3_sha3", [data])

    # net

    def net_version(self) -> str:
        return self.request("net_version")

    def net_listening(self) -> bool:
        return self.request("net_listening")

    def net_peer_count(self, decode: bool = True) -> Union[int, str]:
        count = self.request("net_peerCount")
        # Some nodes answer with a plain integer instead of a QUANTITY.
        if decode and not isinstance(count, int):
            return decode_quantity(count)
        return count

    # eth: node state

    def eth_protocol_version(self) -> str:
        return self.request("eth_protocolVersion")

    def eth_syncing(self, decode: bool = False) -> Any:
        """Sync status object, or False when the node is not syncing."""
        status = self.request("eth_syncing")
        return decode_sync_status(status) if decode else status

    def eth_coinbase(self) -> str:
        return self.request("eth_coinbase")

    def eth_mining(self) -> bool:
        return self.request("eth_mining")

    def eth_hashrate(self, decode: bool = True) -> Union[int, str]:
        return self._quantity("eth_hashrate", None, decode)

    def eth_gas_price(self, decode: bool = True) -> Union[int, str]:
        return self._quantity("eth_gasPrice", None, decode)

    def eth_accounts(self) -> List[str]:
        return self.request("eth_accounts")

    def eth_block_number(self, decode: bool = False) -> Union[int, str]:
        return self._quantity("eth_blockNumber", None, decode)

    # eth: accounts and state

    def eth_get_balance(
        self, address: str, block: BlockParam = "latest", decode: bool = True
    ) -> Union[int, str]:
        """Balance of an account in wei."""
        params = [self._address(address), self._block(block)]
        return self._quantity("eth_getBalance", params, decode)

    def eth_get_storage_at(
        self, address: str, position: Union[int, str], block: BlockParam = "latest"
    ) -> str:
        params = [
            self._address(address),
            quantity_param(position, "position"),
            self._block(block),
        ]
        return self.request("eth_getStorageAt", params)

    def eth_get_transaction_count(
        self, address: str, block: BlockParam = "latest", decode: bool = False
    ) -> Union[int, str]:
        params = [self._address(address), self._block(block)]
        return self._quantity("eth_getTransactionCount", params, decode)

    def eth_get_block_transaction_count_by_hash(
        self, block_hash: str, decode: bool = False
    ) -> Union[int, str, None]:
        params = [self._hash(block_hash, "block_hash")]
        return self._quantity("eth_getBlockTransactionCountByHash", params, decode)

    def eth_get_block_transaction_count_by_number(
        self, block: BlockParam = "latest", decode: bool = False
    ) -> Union[int, str, None]:
        return self._quantity("eth_getBlockTransactionCountByNumber", [self._block(block)], decode)

    def eth_get_uncle_count_by_block_hash(
        self, block_hash: str, decode: bool = False
    ) -> Union[int, str, None]:
        params = [self._hash(block_hash, "block_hash")]
        return self._quantity("eth_getUncleCountByBlockHash", params, decode)

    def eth_get_uncle_count_by_block_number(
        self, block: BlockParam = "latest", decode: bool = False
    ) -> Union[int, str, None]:
        return self._quantity("eth_getUncleCountByBlockNumber", [self._block(block)], decode)

    def eth_get_code(self, address: str, block: BlockParam = "latest") -> str:
        return self.request("eth_getCode", [self._address(address), self._block(block)])

    # eth: transactions and calls

    def eth_sign(self, address: str, data: str) -> str:
        return self.request("eth_sign", [self._address(address), self._data(data)])

    def eth_send_transaction(self, transaction: Transaction) -> str:
        """Submit a transaction for the node to sign with an unlocked account; returns its hash."""
        self._require(transaction, Transaction, "transaction")
        return self.request("eth_sendTransaction", [transaction.to_params()])

    def eth_call(self, message: Message, block: BlockParam = "latest") -> str:
        """Execute a message call without creating a transaction."""
        block_param = self._block(block)
        self._require(message, Message, "message")
        return self.request("eth_call", [message.to_params(), block_param])

    def eth_estimate_gas(
        self, message: Message, block: Optional[BlockParam] = None, decode: bool = False
    ) -> Union[int, str]:
        self._require(message, Message, "message")
        params: List[Any] = [message.to_params()]
        if block is not None:
            params.append(self._block(block))
        return self._quantity("eth_estimateGas", params, decode)

    # eth: blocks, transactions, receipts, uncles

    def eth_get_block_by_hash(
        self, block_hash: str, full_transactions: bool = True, decode: bool = False
    ) -> Optional[Dict[str, Any]]:
        params = [self._hash(block_hash, "block_hash"), bool(full_transactions)]
        block = self.request("eth_getBlockByHash", params)
        return decode_block(block) if decode else block

    def eth_get_block_by_number(
        self, block: BlockParam = "latest", full_transactions: bool = True, decode: bool = False
    ) -> Optional[Dict[str, Any]]:
        result = self.request("eth_getBlockByNumber", [self._block(block), bool(full_transactions)])
        return decode_block(result) if decode else result

    def eth_get_transaction_by_hash(
        self, tx_hash: str, decode: bool = False
    ) -> Optional[Dict[str, Any]]:
        tx = self.request("eth_getTransactionByHash", [self._hash(tx_hash, "tx_hash")])
        return decode_transaction(tx) if decode else tx

    def eth_get_transaction_by_block_hash_and_index(
        self, block_hash: str, index: Union[int, str], decode: bool = False
    ) -> Optional[Dict[str, Any]]:
        params = [self._hash(block_hash, "block_hash"), quantity_param(index, "index")]
        tx = self.request("eth_getTransactionByBlockHashAndIndex", params)
        return decode_transaction(tx) if decode else tx

    def eth_get_transaction_by_block_number_and_index(
        self, block: BlockParam, index: Union[int, str], decode: bool = False
    ) -> Optional[Dict[str, Any]]:
        params = [self._block(block), quantity_param(index, "index")]
        tx = self.request("eth_getTransactionByBlockNumberAndIndex", params)
        return decode_transaction(tx) if decode else tx

    def eth_get_transaction_receipt(
        self, tx_hash: str, decode: bool = False
    ) -> Optional[Dict[str, Any]]:
        """Receipt of a mined transaction, None while it is pending."""
        receipt = self.request("eth_getTransactionReceipt", [self._hash(tx_hash, "tx_hash")])
        return decode_receipt(receipt) if decode else receipt

    def eth_get_uncle_by_block_hash_and_index(
        self, block_hash: str, index: Union[int, str], decode: bool = False
    ) -> Optional[Dict[str, Any]]:
        params = [self._hash(block_hash, "block_hash"), quantity_param(index, "index")]
        uncle = self.request("eth_getUncleByBlockHashAndIndex", params)
        return decode_block(uncle) if decode else uncle

    def eth_get_uncle_by_block_number_and_index(
        self, block: BlockParam, index: Union[int, str], decode: bool = False
    ) -> Optional[Dict[str, Any]]:
        params = [self._block(block), quantity_param(index, "index")]
        uncle = self.request("eth_getUncleByBlockNumberAndIndex", params)
        return decode_block(uncle) if decode else uncle

    # eth: compilers

    def eth_get_compilers(self) -> List[str]:
        return self.request("eth_getCompilers")

    def eth_compile_solidity(self, code: str) -> Any:
        return self.request("eth_compileSolidity", [self._string(code, "code")])

    def eth_compile_lll(self, code: str) -> Any:
        return self.request("eth_compileLLL", [self._string(code, "code")])

    def eth_compile_serpent(self, code: str) -> Any:
        return self.request("eth_compileSerpent", [self._string(code, "code")])

    # eth: filters and logs

    def eth_new_filter(self, log_filter: Filter, decode: bool = False) -> Union[int, str]:
        self._require(log_filter, Filter, "filter")
        return self._quantity("eth_newFilter", [log_filter.to_params()], decode)

    def eth_new_block_filter(self, decode: bool = False) -> Union[int, str]:
        return self._quantity("eth_newBlockFilter", None, decode)

    def eth_new_pending_transaction_filter(self, decode: bool = False) -> Union[int, str]:
        return self._quantity("eth_newPendingTransactionFilter", None, decode)

    def eth_uninstall_filter(self, filter_id: Union[int, str]) -> bool:
        return self.request("eth_uninstallFilter", [quantity_param(filter_id, "filter_id")])

    def eth_get_filter_changes(self, filter_id: Union[int, str], decode: bool = False) -> List[Any]:
        """Entries since the last poll: logs for log filters, hashes for block/pending filters."""
        changes = self.request("eth_getFilterChanges", [quantity_param(filter_id, "filter_id")])
        if decode and isinstance(changes, list):
            return [decode_log(entry) for entry in changes]
        return changes

    def eth_get_filter_logs(self, filter_id: Union[int, str], decode: bool = False) -> List[Any]:
        logs = self.request("eth_getFilterLogs", [quantity_param(filter_id, "filter_id")])
        if decode and isinstance(logs, list):
            return [decode_log(entry) for entry in logs]
        return logs

    def eth_get_logs(self, log_filter: Filter, decode: bool = False) -> List[Any]:
        self._require(log_filter, Filter, "filter")
        logs = self.request("eth_getLogs", [log_filter.to_params()])
        if decode and isinstance(logs, list):
            return [decode_log(entry) for entry in logs]
        return logs

    # eth: mining

    def eth_get_work(self) -> List[str]:
        return self.request("eth_getWork")

    def eth_submit_work(self, nonce: str, pow_hash: str, mix_digest: str) -> bool:
        params = [
            self._data(nonce, "nonce"),
            self._hash(pow_hash, "pow_hash"),
            self._hash(mix_digest, "mix_digest"),
        ]
        return self.request("eth_submitWork", params)

    # db

    def db_put_string(self, db: str, key: str, value: str) -> bool:
        params = [self._string(db, "db"), self._string(key, "key"), self._string(value, "value")]
        return self.request("db_putString", params)

    def db_get_string(self, db: str, key: str) -> str:
        return self.request("db_getString", [self._string(db, "db"), self._string(key, "key")])

    def db_put_hex(self, db: str, key: str, value: str) -> bool:
        params = [self._string(db, "db"), self._string(key, "key"), self._data(value, "value")]
        return self.request("db_putHex", params)

    def db_get_hex(self, db: str, key: str) -> str:
        return self.request("db_getHex", [self._string(db, "db"), self._string(key, "key")])

    # shh

    def shh_version(self) -> str:
        return self.request("shh_version")

    def shh_post(self, post: WhisperPost) -> bool:
        self._require(post, WhisperPost, "post")
        return self.request("shh_post", [post.to_params()])

    def shh_new_identity(self) -> str:
        return self.request("shh_newIdentity")

    def shh_has_identity(self, identity: str) -> bool:
        return self.request("shh_hasIdentity", [self._data(identity, "identity")])

    def shh_new_filter(
        self, to: Optional[str] = None, topics: Optional[List[str]] = None
    ) -> Union[int, str]:
        if to is not None:
            self._data(to, "to")
        for topic in topics or []:
            self._data(topic, "topics")
        return self.request("shh_newFilter", [{"to": to, "topics": list(topics or [])}])

    def shh_uninstall_filter(self, filter_id: Union[int, str]) -> bool:
        return self.request("shh_uninstallFilter", [quantity_param(filter_id, "filter_id")])

    def shh_get_filter_changes(self, filter_id: Union[int, str]) -> List[Any]:
        return self.request("shh_getFilterChanges", [quantity_param(filter_id, "filter_id")])

    def shh_get_messages(self, filter_id: Union[int, str]) -> List[Any]:
        return self.request("shh_getMessages", [quantity_param(filter_id, "filter_id")])

    # helpers

    def get_method_signature(self, signature: str) -> str:
        """
        Return the 4-byte function selector for a signature like ``"multiply(uint256)"``.

        The Keccak hash is computed by the node through web3_sha3. Input that
        is already 0x-prefixed DATA is hashed as is.
        """
        if not is_valid_data(signature):
            signature = encode_data(self._string(signature, "signature").encode("utf-8"))
        digest = self.web3_sha3(signature)
        is_valid_hash(digest, strict=True, field="web3_sha3")
        return "0x" + digest[2:10]
