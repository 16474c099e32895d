from abc import ABC, abstractmethod
from functools import cached_property
from typing import TypeVar, cast

from eth_utils import is_hex_address, to_canonical_address, to_checksum_address

from ._errors import ValidationError


class TypedData(ABC):
    def __init__(self, value: bytes):
        if not isinstance(value, bytes):
            raise ValidationError(
                f"{self.__class__.__name__} must be a bytestring, got {type(value).__name__}"
            )
        if len(value) != self._length():
            raise ValidationError(
                f"{self.__class__.__name__} must be {self._length()} bytes long, got {len(value)}"
            )
        self._value = value

    @abstractmethod
    def _length(self) -> int:
        """Returns the length of this type's values representation in bytes."""

    def __bytes__(self) -> bytes:
        return self._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __eq__(self, other: object) -> bool:
        # Subclasses are considered different types
        if type(self) != type(other):
            return False
        return self._value == cast(TypedData, other)._value

    def hex(self) -> str:
        """Returns the ``0x``-prefixed lowercase hex representation."""
        return "0x" + self._value.hex()

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(bytes.fromhex("{self._value.hex()}"))'


CustomAddress = TypeVar("CustomAddress", bound="Address")
"""A subclass of :py:class:`Address`."""


class Address(TypedData):
    """Represents an Ethereum address."""

    def _length(self) -> int:
        return 20

    @classmethod
    def from_hex(cls: type[CustomAddress], address_str: str) -> CustomAddress:
        """
        Creates the address from a hex representation
        (with or without the ``0x`` prefix, checksummed or not).
        """
        if not isinstance(address_str, str):
            raise ValidationError(
                f"Address must be a hex string, got {type(address_str).__name__}"
            )
        normalized = address_str.strip()
        if not normalized.startswith(("0x", "0X")):
            normalized = "0x" + normalized
        # Mixed-case input is accepted as is, the checksum is not enforced.
        if not is_hex_address(normalized):
            raise ValidationError(f"Invalid address: {address_str!r}")
        return cls(to_canonical_address(normalized))

    @cached_property
    def checksum(self) -> str:
        """Returns the checksummed hex representation of the address."""
        return to_checksum_address(self._value)

    def __str__(self) -> str:
        return self.checksum

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}.from_hex({self.checksum})"


class TopicHash(TypedData):
    """
    The value of an indexed event field of a reference type
    (``string``, ``bytes``, an array, or a struct).

    The log only contains the Keccak-256 hash of such a value,
    so the original value cannot be recovered.
    """

    def _length(self) -> int:
        return 32

    def __str__(self) -> str:
        return self.hex()
