import threading

import pytest

from ethrpc.client import EthereumClient
from ethrpc.errors import InvalidArgument, MalformedQuantity, TransportError
from ethrpc.messages import Filter, Message, Transaction, WhisperPost

from conftest import ADDRESS, TX_HASH, FakeTransport


def test_request_ids_start_at_one_and_increase(client, transport):
    for _ in range(3):
        client.request("net_version")
    assert [call[0] for call in transport.calls] == [1, 2, 3]


def test_request_ids_are_unique_across_threads(client, transport):
    def worker():
        for _ in range(50):
            client.request("net_version")

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    ids = sorted(call[0] for call in transport.calls)
    assert ids == list(range(1, 201))


def test_result_is_returned_unmodified(client, transport):
    transport.results["eth_syncing"] = {"currentBlock": "0x10"}
    assert client.eth_syncing() == {"currentBlock": "0x10"}


def test_transport_errors_propagate(client, transport):
    failure = TransportError("boom", code=-32000)
    transport.results["eth_blockNumber"] = failure
    with pytest.raises(TransportError) as excinfo:
        client.eth_block_number()
    assert excinfo.value is failure


def test_block_number_decoding(client, transport):
    transport.results["eth_blockNumber"] = "0x4b7"
    assert client.eth_block_number() == "0x4b7"
    assert client.eth_block_number(decode=True) == 1207


def test_decode_of_bad_quantity_fails(client, transport):
    transport.results["eth_gasPrice"] = "0xnothex"
    with pytest.raises(MalformedQuantity):
        client.eth_gas_price()


def test_get_balance_validates_and_decodes(client, transport):
    transport.results["eth_getBalance"] = "0x0234c8a3397aab58"
    assert client.eth_get_balance(ADDRESS) == 158972490234375000
    assert transport.last_call[1:] == ("eth_getBalance", [ADDRESS, "latest"])
    assert client.eth_get_balance(ADDRESS, "pending", decode=False) == "0x0234c8a3397aab58"


def test_get_balance_rejects_before_sending(client, transport):
    with pytest.raises(InvalidArgument) as excinfo:
        client.eth_get_balance("0x1234")
    assert excinfo.value.field == "address"
    with pytest.raises(InvalidArgument) as excinfo:
        client.eth_get_balance(ADDRESS, "0x10")
    assert excinfo.value.field == "block"
    assert transport.calls == []


def test_integer_block_numbers_are_encoded(client, transport):
    client.eth_get_block_by_number(1207, full_transactions=False)
    assert transport.last_call[1:] == ("eth_getBlockByNumber", ["0x4b7", False])


def test_peer_count_accepts_native_int(client, transport):
    transport.results["net_peerCount"] = 5
    assert client.net_peer_count() == 5
    transport.results["net_peerCount"] = "0x2a"
    assert client.net_peer_count() == 42
    assert client.net_peer_count(decode=False) == "0x2a"


def test_storage_at_encodes_position(client, transport):
    client.eth_get_storage_at(ADDRESS, 0)
    assert transport.last_call[1:] == ("eth_getStorageAt", [ADDRESS, "0x0", "latest"])


def test_web3_sha3_requires_hex(client, transport):
    transport.results["web3_sha3"] = TX_HASH
    assert client.web3_sha3("0x68656c6c6f") == TX_HASH
    with pytest.raises(InvalidArgument):
        client.web3_sha3("hello")


def test_method_signature_uses_node_keccak(client, transport):
    transport.results["web3_sha3"] = "0xc6888fa1" + "0" * 56
    assert client.get_method_signature("multiply(uint256)") == "0xc6888fa1"
    assert transport.last_call[2] == ["0x" + "multiply(uint256)".encode().hex()]


@pytest.mark.parametrize("digest", [None, "0xc6888f", "c6888fa1" + "0" * 58])
def test_method_signature_rejects_malformed_digest(client, transport, digest):
    transport.results["web3_sha3"] = digest
    with pytest.raises(InvalidArgument) as excinfo:
        client.get_method_signature("multiply(uint256)")
    assert excinfo.value.field == "web3_sha3"


def test_hash_parameters_are_validated(client, transport):
    with pytest.raises(InvalidArgument) as excinfo:
        client.eth_get_transaction_receipt("0x1234")
    assert excinfo.value.field == "tx_hash"
    with pytest.raises(InvalidArgument):
        client.eth_get_block_by_hash(ADDRESS)
    assert transport.calls == []


def test_transaction_by_block_hash_and_index(client, transport):
    client.eth_get_transaction_by_block_hash_and_index(TX_HASH, 2)
    assert transport.last_call[1:] == ("eth_getTransactionByBlockHashAndIndex", [TX_HASH, "0x2"])
    with pytest.raises(InvalidArgument):
        client.eth_get_transaction_by_block_hash_and_index(TX_HASH, -1)


def test_receipt_decoding(client, transport):
    transport.results["eth_getTransactionReceipt"] = {
        "transactionHash": TX_HASH,
        "blockNumber": "0xb",
        "gasUsed": "0x5208",
        "status": "0x1",
        "logs": [{"logIndex": "0x0", "data": "0x"}],
    }
    receipt = client.eth_get_transaction_receipt(TX_HASH, decode=True)
    assert receipt["blockNumber"] == 11
    assert receipt["gasUsed"] == 21000
    assert receipt["status"] == 1
    assert receipt["transactionHash"] == TX_HASH
    assert receipt["logs"] == [{"logIndex": 0, "data": "0x"}]


def test_pending_receipt_is_none(client, transport):
    assert client.eth_get_transaction_receipt(TX_HASH, decode=True) is None


def test_send_transaction(client, transport):
    tx = Transaction(to=ADDRESS, value=10**18, gas=21000)
    client.eth_send_transaction(tx)
    assert transport.last_call[1:] == (
        "eth_sendTransaction",
        [{"to": ADDRESS, "gas": "0x5208", "value": "0xde0b6b3a7640000"}],
    )
    with pytest.raises(InvalidArgument):
        client.eth_send_transaction({"to": ADDRESS})


def test_call_sends_message_and_block(client, transport):
    message = Message(to=ADDRESS, data="0xc6888fa1")
    client.eth_call(message)
    assert transport.last_call[1:] == ("eth_call", [{"to": ADDRESS, "data": "0xc6888fa1"}, "latest"])
    with pytest.raises(InvalidArgument):
        client.eth_call(message, "0x10")


def test_estimate_gas(client, transport):
    transport.results["eth_estimateGas"] = "0x5208"
    message = Message(to=ADDRESS)
    assert client.eth_estimate_gas(message, decode=True) == 21000
    assert transport.last_call[2] == [{"to": ADDRESS}]
    client.eth_estimate_gas(message, "pending")
    assert transport.last_call[2] == [{"to": ADDRESS}, "pending"]


def test_filters(client, transport):
    transport.results["eth_newFilter"] = "0x1"
    log_filter = Filter(from_block="earliest", address=ADDRESS)
    assert client.eth_new_filter(log_filter, decode=True) == 1
    assert transport.last_call[2] == [{"fromBlock": "earliest", "toBlock": "latest", "address": ADDRESS}]

    transport.results["eth_getFilterChanges"] = [{"blockNumber": "0x10", "logIndex": "0x1"}]
    assert client.eth_get_filter_changes(1, decode=True) == [{"blockNumber": 16, "logIndex": 1}]
    assert transport.last_call[2] == ["0x1"]

    transport.results["eth_getFilterChanges"] = [TX_HASH]
    assert client.eth_get_filter_changes("0x1", decode=True) == [TX_HASH]

    client.eth_uninstall_filter(1)
    assert transport.last_call[1:] == ("eth_uninstallFilter", ["0x1"])


def test_get_logs_requires_filter(client, transport):
    with pytest.raises(InvalidArgument):
        client.eth_get_logs({"fromBlock": "latest"})
    assert transport.calls == []


def test_submit_work_validates(client, transport):
    client.eth_submit_work("0x0000000000000001", TX_HASH, TX_HASH)
    assert transport.last_call[1] == "eth_submitWork"
    with pytest.raises(InvalidArgument) as excinfo:
        client.eth_submit_work("0x1", TX_HASH, TX_HASH)
    assert excinfo.value.field == "nonce"


def test_db_methods(client, transport):
    client.db_put_string("testDB", "myKey", "myString")
    assert transport.last_call[1:] == ("db_putString", ["testDB", "myKey", "myString"])
    client.db_put_hex("testDB", "myKey", "0x68656c6c6f")
    assert transport.last_call[1:] == ("db_putHex", ["testDB", "myKey", "0x68656c6c6f"])
    with pytest.raises(InvalidArgument):
        client.db_put_hex("testDB", "myKey", "hello")


def test_shh_methods(client, transport):
    post = WhisperPost(topics=["0x776869737065722d636861742d636c69656e74"], payload="0x7b", priority=100, ttl=100)
    client.shh_post(post)
    assert transport.last_call[2][0]["priority"] == "0x64"

    client.shh_has_identity("0x04f96a")
    assert transport.last_call[1:] == ("shh_hasIdentity", ["0x04f96a"])

    client.shh_new_filter(topics=["0x12"])
    assert transport.last_call[1:] == ("shh_newFilter", [{"to": None, "topics": ["0x12"]}])

    client.shh_get_messages(7)
    assert transport.last_call[1:] == ("shh_getMessages", ["0x7"])


@pytest.mark.parametrize(
    "call,method",
    [
        (lambda c: c.web3_client_version(), "web3_clientVersion"),
        (lambda c: c.net_version(), "net_version"),
        (lambda c: c.net_listening(), "net_listening"),
        (lambda c: c.eth_protocol_version(), "eth_protocolVersion"),
        (lambda c: c.eth_coinbase(), "eth_coinbase"),
        (lambda c: c.eth_mining(), "eth_mining"),
        (lambda c: c.eth_accounts(), "eth_accounts"),
        (lambda c: c.eth_get_compilers(), "eth_getCompilers"),
        (lambda c: c.eth_get_work(), "eth_getWork"),
        (lambda c: c.eth_new_block_filter(), "eth_newBlockFilter"),
        (lambda c: c.eth_new_pending_transaction_filter(), "eth_newPendingTransactionFilter"),
        (lambda c: c.shh_version(), "shh_version"),
        (lambda c: c.shh_new_identity(), "shh_newIdentity"),
        (lambda c: c.eth_get_code(ADDRESS), "eth_getCode"),
        (lambda c: c.eth_get_transaction_count(ADDRESS), "eth_getTransactionCount"),
        (lambda c: c.eth_get_block_transaction_count_by_hash(TX_HASH), "eth_getBlockTransactionCountByHash"),
        (lambda c: c.eth_get_block_transaction_count_by_number(), "eth_getBlockTransactionCountByNumber"),
        (lambda c: c.eth_get_uncle_count_by_block_hash(TX_HASH), "eth_getUncleCountByBlockHash"),
        (lambda c: c.eth_get_uncle_count_by_block_number("earliest"), "eth_getUncleCountByBlockNumber"),
        (lambda c: c.eth_get_uncle_by_block_hash_and_index(TX_HASH, 0), "eth_getUncleByBlockHashAndIndex"),
        (lambda c: c.eth_get_uncle_by_block_number_and_index("latest", 0), "eth_getUncleByBlockNumberAndIndex"),
        (lambda c: c.eth_get_transaction_by_hash(TX_HASH), "eth_getTransactionByHash"),
        (lambda c: c.eth_get_transaction_by_block_number_and_index("latest", 1), "eth_getTransactionByBlockNumberAndIndex"),
        (lambda c: c.eth_compile_solidity("contract test {}"), "eth_compileSolidity"),
        (lambda c: c.eth_compile_lll("(returnlll)"), "eth_compileLLL"),
        (lambda c: c.eth_compile_serpent("return 1"), "eth_compileSerpent"),
        (lambda c: c.eth_get_filter_logs(1), "eth_getFilterLogs"),
        (lambda c: c.eth_get_logs(Filter()), "eth_getLogs"),
        (lambda c: c.eth_sign(ADDRESS, "0xdeadbeef"), "eth_sign"),
        (lambda c: c.eth_hashrate(decode=False), "eth_hashrate"),
        (lambda c: c.db_get_string("testDB", "myKey"), "db_getString"),
        (lambda c: c.db_get_hex("testDB", "myKey"), "db_getHex"),
        (lambda c: c.shh_uninstall_filter(1), "shh_uninstallFilter"),
        (lambda c: c.shh_get_filter_changes(1), "shh_getFilterChanges"),
    ],
)
def test_wire_method_names(client, transport, call, method):
    call(client)
    assert transport.last_call[1] == method


def test_context_manager_closes_transport():
    transport = FakeTransport()
    with EthereumClient(transport=transport):
        pass
    assert transport.closed


def test_requires_url_without_transport():
    with pytest.raises(ValueError):
        EthereumClient()
