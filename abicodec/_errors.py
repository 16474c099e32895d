from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover
    from ._contract_abi import DecodedResult


class ABIError(Exception):
    """The base class for all the errors raised by this library on invalid input."""


class ParseError(ABIError, ValueError):
    """
    Raised when an ABI description, a type string, or a hex string is malformed.
    """


class ArityError(ABIError, ValueError):
    """
    Raised when the number of values does not match the number of parameters.
    """


class ValidationError(ABIError, ValueError):
    """
    Raised when a value does not satisfy the constraints of its ABI type.
    """


class EncodingError(ValidationError):
    """
    Raised when an integer value does not fit into the bit width of its type.
    """


class UnknownSelectorError(ABIError):
    """
    Raised when no ABI entry matches the selector or the topic of a payload.
    """


class DecodingError(ABIError):
    """
    Raised on an error when decoding a value in an Eth ABI encoded bytestring
    (truncated data, offsets pointing outside of the data,
    or words that are out of range for their type).
    """


class AmbiguousMatchError(ABIError):
    """
    Raised when several ABI entries share the selector of a payload.
    """

    candidates: Sequence[Any]
    """All the entries sharing the selector, in declaration order."""

    result: "DecodedResult | None"
    """
    The result of decoding the payload with the first candidate
    (``None`` if the ambiguity was found before decoding).
    """

    def __init__(
        self, message: str, candidates: Sequence[Any], result: "DecodedResult | None"
    ):
        super().__init__(message)
        self.candidates = candidates
        self.result = result
