"""Ethereum contract ABI codec."""

from . import abi
from ._abi_types import (
    AddressType,
    Array,
    Bool,
    Bytes,
    Int,
    String,
    Struct,
    Type,
    UInt,
    decode_args,
    encode_args,
    parse_type,
)
from ._config import Config, load_config
from ._contract_abi import (
    AmbiguityPolicy,
    ContractABI,
    DecodedResult,
    Error,
    Event,
    EventFields,
    Fields,
    FieldValues,
    FormattedParameter,
    Method,
    MethodCall,
    MultiMethod,
    Parameter,
)
from ._entities import Address, TopicHash
from ._errors import (
    ABIError,
    AmbiguousMatchError,
    ArityError,
    DecodingError,
    EncodingError,
    ParseError,
    UnknownSelectorError,
    ValidationError,
)
from ._format import AddressFormats, address_formats, checksum_address, format_value
from ._selectors import SelectorIndex, event_topic, selector, signature
from ._utils import parse_hex, parse_topics

__all__ = [
    "ABIError",
    "Address",
    "AddressFormats",
    "AddressType",
    "AmbiguityPolicy",
    "AmbiguousMatchError",
    "ArityError",
    "Array",
    "Bool",
    "Bytes",
    "Config",
    "ContractABI",
    "DecodedResult",
    "DecodingError",
    "EncodingError",
    "Error",
    "Event",
    "EventFields",
    "FieldValues",
    "Fields",
    "FormattedParameter",
    "Int",
    "Method",
    "MethodCall",
    "MultiMethod",
    "Parameter",
    "ParseError",
    "SelectorIndex",
    "String",
    "Struct",
    "TopicHash",
    "Type",
    "UInt",
    "UnknownSelectorError",
    "ValidationError",
    "abi",
    "address_formats",
    "checksum_address",
    "decode_args",
    "encode_args",
    "event_topic",
    "format_value",
    "load_config",
    "parse_hex",
    "parse_topics",
    "parse_type",
    "selector",
    "signature",
]
