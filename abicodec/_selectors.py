import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Generic, Protocol, TypeVar

from eth_utils import keccak

from ._abi_types import Type, canonical_signature

logger = logging.getLogger(__name__)

# The number of bytes in a function/error selector.
SELECTOR_LENGTH = 4

# The number of bytes in an event topic.
TOPIC_LENGTH = 32


def signature(name: str, types: Iterable[Type]) -> str:
    """
    Returns the canonical signature ``name(type1,type2,...)``
    used to derive selectors and event topics.
    """
    return name + canonical_signature(types)


def signature_hash(signature_str: str) -> bytes:
    """Returns the Keccak-256 hash of the UTF-8 encoded signature."""
    return keccak(signature_str.encode())


def selector(signature_str: str) -> bytes:
    """Returns the 4-byte function or error selector for the given signature."""
    return signature_hash(signature_str)[:SELECTOR_LENGTH]


def event_topic(signature_str: str) -> bytes:
    """Returns the 32-byte topic identifying an event with the given signature."""
    return signature_hash(signature_str)


class SelectorEntry(Protocol):
    """An ABI entry that can be identified by a selector."""

    @property
    def name(self) -> str: ...

    @property
    def signature(self) -> str: ...

    @property
    def selector(self) -> bytes: ...


EntryType = TypeVar("EntryType", bound=SelectorEntry)


class SelectorIndex(Generic[EntryType]):
    """
    A read-only mapping of selectors to the ABI entries sharing them,
    in the order the entries were given.
    """

    def __init__(self, entries: Iterable[EntryType]):
        index: dict[bytes, list[EntryType]] = {}
        for entry in entries:
            index.setdefault(entry.selector, []).append(entry)

        for entry_selector, candidates in index.items():
            if len(candidates) > 1:
                logger.warning(
                    "Selector 0x%s is shared by %d entries: %s",
                    entry_selector.hex(),
                    len(candidates),
                    ", ".join(candidate.signature for candidate in candidates),
                )

        self._index: Mapping[bytes, tuple[EntryType, ...]] = MappingProxyType(
            {entry_selector: tuple(candidates) for entry_selector, candidates in index.items()}
        )

    def candidates(self, entry_selector: bytes) -> tuple[EntryType, ...]:
        """
        Returns all the entries with the given selector in declaration order
        (an empty tuple if there are none).
        """
        return self._index.get(bytes(entry_selector), ())

    def ambiguous(self) -> dict[bytes, tuple[EntryType, ...]]:
        """Returns the selectors that are shared by more than one entry."""
        return {
            entry_selector: candidates
            for entry_selector, candidates in self._index.items()
            if len(candidates) > 1
        }

    def __contains__(self, entry_selector: object) -> bool:
        return entry_selector in self._index

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)
