"""
MCP server exposing Ethereum JSON-RPC calls and value conversion.
"""

import argparse
from typing import Any, Optional, Union

from mcp.server.fastmcp import FastMCP

from .client import EthereumClient
from .config import configure_logging, load_config
from .data_types import TypedValue

server = FastMCP(
    name="ethereum-rpc",
    instructions="Query an Ethereum node over JSON-RPC and convert QUANTITY/DATA values.",
)

_client: Optional[EthereumClient] = None


def _get_client() -> EthereumClient:
    global _client
    if _client is None:
        cfg = load_config()
        configure_logging(cfg)
        _client = EthereumClient.from_config(cfg)
    return _client


def _normalize_params(value: Optional[Any]) -> list:
    """
    Accept the params of a raw call as an array:
    - None: no params
    - list/tuple: keep as list
    - anything else: reject, JSON-RPC params here are positional
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    raise ValueError("params must be an array (e.g. ['0x...', 'latest']).")


@server.tool(
    name="rpc_call",
    title="Raw JSON-RPC Call",
    description="Send any JSON-RPC method with positional params. `params` must be an array. Returns the node's result unchanged.",
)
def rpc_call(method: str, params: Optional[Any] = None) -> dict:
    client = _get_client()
    result = client.request(method, _normalize_params(params))
    return {"method": method, "result": result}


@server.tool(
    name="get_block_number",
    title="Get Latest Block Number",
    description="Fetch the latest block number as an integer.",
)
def get_block_number() -> dict:
    client = _get_client()
    return {"block_number": client.eth_block_number(decode=True)}


@server.tool(
    name="get_balance",
    title="Get Account Balance",
    description="Fetch an account balance in wei. block: latest|earliest|pending or an integer block number.",
)
def get_balance(address: str, block: Union[int, str] = "latest") -> dict:
    client = _get_client()
    balance = client.eth_get_balance(address, block, decode=True)
    return {"address": address, "block": block, "balance_wei": str(balance)}


@server.tool(
    name="get_block",
    title="Get Block",
    description="Fetch a block by number or tag with QUANTITY fields decoded. Set full_transactions to include transaction objects.",
)
def get_block(block: Union[int, str] = "latest", full_transactions: bool = False) -> dict:
    client = _get_client()
    result = client.eth_get_block_by_number(block, full_transactions, decode=True)
    return {"block": result}


@server.tool(
    name="get_transaction",
    title="Get Transaction",
    description="Fetch a transaction by hash with QUANTITY fields decoded.",
)
def get_transaction(tx_hash: str) -> dict:
    client = _get_client()
    return {"transaction": client.eth_get_transaction_by_hash(tx_hash, decode=True)}


@server.tool(
    name="get_transaction_receipt",
    title="Get Transaction Receipt",
    description="Fetch a transaction receipt by hash with QUANTITY fields decoded. Returns null while pending.",
)
def get_transaction_receipt(tx_hash: str) -> dict:
    client = _get_client()
    return {"receipt": client.eth_get_transaction_receipt(tx_hash, decode=True)}


@server.tool(
    name="convert_value",
    title="Convert Typed Value",
    description="Convert a value between native and JSON-RPC wire form. type: bool|hash|address|integer|string or an alias (B, D32, D20, Q, S, ...).",
)
def convert_value(type_name: str, value: Any) -> dict:
    typed = TypedValue(type_name, value)
    native = typed.native()
    if isinstance(native, int) and not isinstance(native, bool):
        native = str(native)
    return {"type": typed.kind(), "native": native, "wire": typed.wire()}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve Ethereum JSON-RPC tools over MCP.")
    parser.add_argument(
        "--transport",
        choices=["stdio", "streamable-http"],
        default="stdio",
        help="MCP transport. Defaults to stdio.",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Bind address for streamable-http.")
    parser.add_argument("--port", type=int, default=8000, help="Port for streamable-http.")
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    args = _build_parser().parse_args(argv)
    if args.transport == "streamable-http":
        server.settings.host = args.host
        server.settings.port = args.port
    server.run(transport=args.transport)


if __name__ == "__main__":
    main()
