"""Rendering of decoded values as display strings."""

import json
from typing import Any, NamedTuple

from eth_utils import to_checksum_address

from ._entities import Address, TopicHash
from ._errors import ValidationError


def checksum_address(address: Address | bytes | str) -> str:
    """
    Returns the EIP-55 checksummed representation of an address.

    Accepts :py:class:`Address` objects, 20-byte bytestrings,
    and hex strings in any letter case.
    Applying it to an already checksummed address returns it unchanged.
    """
    if isinstance(address, str):
        address = Address.from_hex(address)
    elif isinstance(address, bytes):
        address = Address(address)
    elif not isinstance(address, Address):
        raise ValidationError(f"Expected an address, got {type(address).__name__}")
    return to_checksum_address(bytes(address))


class AddressFormats(NamedTuple):
    """Different renderings of the same address."""

    lowercase: str
    uppercase: str
    checksum: str


def address_formats(address: Address | bytes | str) -> AddressFormats:
    """Returns the lowercase, uppercase and checksummed renderings of an address."""
    checksummed = checksum_address(address)
    hex_digits = checksummed[2:]
    return AddressFormats(
        lowercase="0x" + hex_digits.lower(),
        uppercase="0x" + hex_digits.upper(),
        checksum=checksummed,
    )


def _format(value: Any, *, checksum: bool, nested: bool) -> str:
    # `bool` must be checked before `int`, since it is a subclass of it.
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, Address):
        return value.checksum if checksum else value.hex()
    if isinstance(value, TopicHash):
        return value.hex()
    if isinstance(value, bytes):
        return "0x" + value.hex()
    if isinstance(value, str):
        # Quote the nested strings so that commas in them cannot be confused with separators
        return json.dumps(value, ensure_ascii=False) if nested else value
    if isinstance(value, list):
        return "[" + ", ".join(_format(item, checksum=checksum, nested=True) for item in value) + "]"
    if isinstance(value, tuple):
        return "(" + ", ".join(_format(item, checksum=checksum, nested=True) for item in value) + ")"
    raise TypeError(f"Cannot format a value of type {type(value).__name__}")


def format_value(value: Any, *, checksum: bool = False) -> str:
    """
    Renders a decoded value as a string.

    Integers are rendered in base 10, booleans as ``true``/``false``,
    addresses as lowercase hex (or checksummed if ``checksum`` is ``True``),
    bytestrings and topic hashes as ``0x``-prefixed hex,
    arrays as ``[a, b]`` and tuples as ``(a, b)``.
    Strings are rendered as is, or JSON-quoted when inside an array or a tuple.
    """
    return _format(value, checksum=checksum, nested=False)
