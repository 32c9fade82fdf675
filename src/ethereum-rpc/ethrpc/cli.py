import argparse
import json
import sys
from typing import Any, Optional

from .client import EthereumClient
from .config import configure_logging, load_config
from .data_types import TypedValue, resolve_type


def _parse_param(raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Call an Ethereum node over JSON-RPC.",
        allow_abbrev=False,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    call_parser = subparsers.add_parser("call", help="Send a raw JSON-RPC call")
    call_parser.add_argument("method", help="JSON-RPC method name, e.g. eth_getBalance.")
    call_parser.add_argument(
        "params",
        nargs="*",
        help="Positional params. Parsed as JSON when possible, otherwise sent as strings.",
    )

    subparsers.add_parser("block-number", help="Fetch the latest block number")

    balance_parser = subparsers.add_parser("balance", help="Fetch an account balance in wei")
    balance_parser.add_argument(
        "--address",
        required=True,
        help="Account address (0x-prefixed, 40 hex characters).",
    )
    balance_parser.add_argument(
        "--block",
        default="latest",
        help="Block parameter: latest, earliest or pending. Defaults to latest.",
    )
    balance_parser.add_argument(
        "--raw",
        action="store_true",
        help="Print the hex QUANTITY returned by the node instead of an integer.",
    )

    for name, help_text in (
        ("encode", "Convert a value to its JSON-RPC wire form"),
        ("decode", "Convert a JSON-RPC wire value to its native form"),
    ):
        convert_parser = subparsers.add_parser(name, help=help_text)
        convert_parser.add_argument(
            "--type",
            required=True,
            help="Type name or alias: bool, hash, address, integer, string (or B, D32, D20, Q, S, ...).",
        )
        convert_parser.add_argument("--value", required=True, help="Value to convert.")

    return parser


def _typed_value(type_name: str, raw: str) -> TypedValue:
    value: Any = raw
    if raw in ("true", "false") and resolve_type(type_name) == "bool":
        value = raw == "true"
    return TypedValue(type_name, value)


def main(argv: Optional[list[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "encode":
            typed = _typed_value(args.type, args.value)
            print(json.dumps({"type": typed.kind(), "wire": typed.wire()}, indent=2))
            return
        if args.command == "decode":
            typed = _typed_value(args.type, args.value)
            native = typed.native()
            print(json.dumps({"type": typed.kind(), "native": native}, indent=2))
            return

        config = load_config()
        configure_logging(config)
        with EthereumClient.from_config(config) as client:
            if args.command == "call":
                result = client.request(args.method, [_parse_param(p) for p in args.params])
            elif args.command == "block-number":
                result = client.eth_block_number(decode=True)
            elif args.command == "balance":
                result = client.eth_get_balance(args.address, args.block, decode=not args.raw)
            print(json.dumps(result, indent=2))
    except Exception as exc:  # pylint: disable=broad-except
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
