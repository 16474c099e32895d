import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from ._config import Config, load_config, resolve_ambiguity_policy
from ._contract_abi import ContractABI, Method
from ._errors import ABIError, ArityError
from ._format import address_formats
from ._selectors import event_topic, selector

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="abicodec",
        description="Encode and decode Ethereum contract ABI payloads.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--checksum",
        action="store_true",
        default=None,
        help="Render addresses with checksum casing. Defaults to ABICODEC_CHECKSUM env.",
    )
    parser.add_argument(
        "--ambiguity",
        required=False,
        choices=["raise", "first"],
        help="What to do when several entries share a selector. "
        "Defaults to ABICODEC_AMBIGUITY env or 'raise'.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    selector_parser = subparsers.add_parser(
        "selector", help="Compute the selector and the event topic of a signature"
    )
    selector_parser.add_argument(
        "signature",
        help="Signature, e.g. 'transfer(address,uint256)'.",
    )

    encode_parser = subparsers.add_parser("encode", help="Encode a function call")
    encode_parser.add_argument(
        "--abi",
        required=False,
        help="Path to a JSON ABI file ('-' for stdin). Not needed if a full signature is given.",
    )
    encode_parser.add_argument(
        "function",
        help="Function name, or a signature such as 'transfer(address,uint256)'.",
    )
    encode_parser.add_argument(
        "values",
        nargs="*",
        help="Argument values as text. Arrays and tuples are given as JSON arrays.",
    )

    call_parser = subparsers.add_parser("decode-call", help="Decode function call data")
    call_parser.add_argument(
        "--abi",
        required=True,
        help="Path to a JSON ABI file ('-' for stdin).",
    )
    call_parser.add_argument(
        "data",
        help="Call data as hex (0x-prefixed or not).",
    )

    log_parser = subparsers.add_parser("decode-log", help="Decode an event log")
    log_parser.add_argument(
        "--abi",
        required=True,
        help="Path to a JSON ABI file ('-' for stdin).",
    )
    log_parser.add_argument(
        "--topics",
        required=True,
        help="Log topics as a JSON array or a comma-separated list of hex strings.",
    )
    log_parser.add_argument(
        "--data",
        required=False,
        default="0x",
        help="Log data as hex. Defaults to empty.",
    )

    error_parser = subparsers.add_parser("decode-error", help="Decode a revert payload")
    error_parser.add_argument(
        "--abi",
        required=False,
        help="Path to a JSON ABI file with custom errors ('-' for stdin).",
    )
    error_parser.add_argument(
        "data",
        help="Error data as hex (0x-prefixed or not).",
    )

    checksum_parser = subparsers.add_parser(
        "checksum", help="Show the checksummed, lowercase and uppercase forms of an address"
    )
    checksum_parser.add_argument(
        "address",
        help="Address as hex, in any letter case.",
    )

    return parser


def _read_abi(path: str, config: Config) -> ContractABI:
    text = sys.stdin.read() if path == "-" else Path(path).read_text(encoding="utf-8")
    return ContractABI.from_text(text, ambiguity=config.ambiguity)


def _encode(args: argparse.Namespace, config: Config) -> dict[str, Any]:
    if args.abi:
        contract_abi = _read_abi(args.abi, config)
        method = contract_abi.find_method(args.function, arity=len(args.values))
    else:
        method = Method.from_signature(args.function)

    if len(args.values) != len(method.inputs.types):
        raise ArityError(f"Expected {len(method.inputs.types)} values, got {len(args.values)}")
    values = [
        tp.parse_text(text) for tp, text in zip(method.inputs.types, args.values, strict=True)
    ]
    call = method.encode_call(values)
    return {
        "signature": method.signature,
        "selector": "0x" + method.selector.hex(),
        "data": call.hex(),
    }


def run(args: argparse.Namespace, config: Config) -> Any:
    if args.command == "selector":
        method = Method.from_signature(args.signature)
        return {
            "signature": method.signature,
            "selector": "0x" + selector(method.signature).hex(),
            "topic": "0x" + event_topic(method.signature).hex(),
        }
    if args.command == "encode":
        return _encode(args, config)
    if args.command == "decode-call":
        result = _read_abi(args.abi, config).decode_call(args.data)
        return result.to_json(checksum=config.checksum_addresses)
    if args.command == "decode-log":
        result = _read_abi(args.abi, config).decode_log(args.topics, args.data)
        return result.to_json(checksum=config.checksum_addresses)
    if args.command == "decode-error":
        contract_abi = (
            _read_abi(args.abi, config) if args.abi else ContractABI(ambiguity=config.ambiguity)
        )
        result = contract_abi.decode_error(args.data)
        return result.to_json(checksum=config.checksum_addresses)
    if args.command == "checksum":
        return address_formats(args.address)._asdict()
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config()
        if args.ambiguity is not None:
            config.ambiguity = resolve_ambiguity_policy(args.ambiguity)
        if args.checksum is not None:
            config.checksum_addresses = args.checksum

        result = run(args, config)
        print(json.dumps(result, indent=2, ensure_ascii=False))
    except (ABIError, ValueError, OSError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
