import json
import re
from collections.abc import Sequence

from eth_utils import add_0x_prefix, decode_hex, remove_0x_prefix

from ._errors import ParseError

_HEX_RE = re.compile(r"[0-9a-fA-F]*")


def parse_hex(data: str | bytes, what: str = "data") -> bytes:
    """
    Converts a hex string (with or without the ``0x`` prefix) into bytes.
    Bytestrings are returned as is.
    """
    if isinstance(data, bytes | bytearray):
        return bytes(data)
    if not isinstance(data, str):
        raise ParseError(f"Expected {what} as a hex string, got {type(data).__name__}")

    hex_str = data.strip()
    if hex_str.startswith("0X"):
        hex_str = "0x" + hex_str[2:]
    unprefixed = remove_0x_prefix(hex_str)
    if not _HEX_RE.fullmatch(unprefixed):
        raise ParseError(f"Invalid hex string for {what}: {data!r}")
    if len(unprefixed) % 2 != 0:
        raise ParseError(f"Hex string for {what} has an odd number of digits: {data!r}")
    return decode_hex(add_0x_prefix(unprefixed))


def _strip_quotes(item: str) -> str:
    item = item.strip()
    if len(item) >= 2 and item[0] == item[-1] and item[0] in "\"'":
        item = item[1:-1]
    return item.strip()


def parse_topics(topics: str | Sequence[str | bytes]) -> list[bytes]:
    """
    Converts a list of event log topics into bytes.

    ``topics`` can be a sequence of hex strings or bytestrings,
    or a single string containing either a JSON array,
    or comma-separated hex strings (optionally in brackets and/or quotes).
    """
    if isinstance(topics, str):
        text = topics.strip()
        try:
            loaded = json.loads(text)
        except json.JSONDecodeError:
            loaded = None

        if isinstance(loaded, list):
            items = loaded
        else:
            if text.startswith("[") and text.endswith("]"):
                text = text[1:-1]
            items = [_strip_quotes(item) for item in text.split(",")]
            items = [item for item in items if item]
    else:
        items = list(topics)

    return [parse_hex(item, what="topic") for item in items]
