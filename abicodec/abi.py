# This is the whole point of this module.
# ruff: noqa: A001

"""Aliases for various Solidity types."""

from collections.abc import Sequence

from ._abi_types import AddressType, Bool, Bytes, Int, String, Struct, Type, UInt, parse_type

_PyInt = int


def uint(bits: _PyInt = 256) -> UInt:
    """Returns the ``uint<bits>`` type."""
    return UInt(bits)


def int(bits: _PyInt = 256) -> Int:
    """Returns the ``int<bits>`` type."""
    return Int(bits)


def bytes(size: None | _PyInt = None) -> Bytes:
    """Returns the ``bytes<size>`` type, or ``bytes`` if ``size`` is ``None``."""
    return Bytes(size)


def struct(**kwargs: Type) -> Struct:
    """Returns the structure type with given named fields."""
    return Struct(kwargs)


def tuple(*types: Type) -> Struct:
    """Returns the tuple type with given anonymous fields."""
    return Struct(list(types))


def types(*type_strs: str) -> Sequence[Type]:
    """Parses a list of type strings, e.g. ``types("address", "uint256")``."""
    return [parse_type(type_str) for type_str in type_strs]


address: AddressType = AddressType()
"""
``address`` type.
"""

string: String = String()
"""``string`` type."""

bool: Bool = Bool()
"""``bool`` type."""
