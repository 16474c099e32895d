import json
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from functools import cached_property
from typing import Any, cast

from eth_utils import keccak

from ._entities import Address, TopicHash
from ._errors import ArityError, DecodingError, EncodingError, ParseError, ValidationError

# The size of a single slot in the ABI encoding.
WORD_SIZE = 32

ABI_JSON = None | bool | int | float | str | list["ABI_JSON"] | dict[str, "ABI_JSON"]
"""Values serializable to JSON."""


def _encode_uint(val: int) -> bytes:
    return val.to_bytes(WORD_SIZE, byteorder="big")


def _pad_right(val: bytes) -> bytes:
    padding_len = (WORD_SIZE - len(val)) % WORD_SIZE
    return val + b"\x00" * padding_len


def _read_word(data: bytes, position: int) -> bytes:
    if position < 0 or position + WORD_SIZE > len(data):
        raise DecodingError(
            f"Tried to read {WORD_SIZE} bytes at offset {position}, "
            f"but the data is only {len(data)} bytes long"
        )
    return data[position : position + WORD_SIZE]


def _read_uint(data: bytes, position: int) -> int:
    return int.from_bytes(_read_word(data, position), byteorder="big")


def _read_length(data: bytes, position: int, item_size: int, what: str) -> int:
    """
    Reads a length prefix and checks that this many items of ``item_size`` bytes
    fit into the data after the prefix.
    """
    length = _read_uint(data, position)
    available = len(data) - position - WORD_SIZE
    if length * max(item_size, 1) > available:
        raise DecodingError(
            f"The {what} at offset {position} declares length {length}, "
            f"but only {available} bytes are available"
        )
    return length


class Type(ABC):
    """The base type for Solidity types."""

    @property
    @abstractmethod
    def canonical_form(self) -> str:
        """
        Returns the type as a string in the canonical form
        (as used in signatures).
        """
        ...

    @property
    def is_dynamic(self) -> bool:
        """
        ``True`` if the encoded value is stored in the tail region
        and referenced by an offset from the head region.
        """
        return False

    @property
    def head_size(self) -> int:
        """The number of bytes the type occupies in the head region."""
        return WORD_SIZE

    @property
    def is_value_type(self) -> bool:
        """
        ``True`` if the value is stored in an event topic as is,
        ``False`` if it is hashed.
        """
        return True

    @abstractmethod
    def _normalize(self, val: Any) -> Any:
        """
        Checks and possibly normalizes the value making it ready
        to be passed to ``_encode()``.
        """
        ...

    @abstractmethod
    def _encode(self, val: Any) -> bytes:
        """
        Encodes a normalized value.
        For static types this is the contents of its head slot(s),
        for dynamic types this is the contents of its tail.
        """
        ...

    @abstractmethod
    def _decode(self, data: bytes, position: int) -> Any:
        """
        Decodes a value starting from ``position`` in ``data``.
        For dynamic types, ``position`` is where the offset in the head points to.
        """
        ...

    @abstractmethod
    def _from_json(self, val: Any) -> Any:
        """
        Converts an item of a user-provided JSON array
        (or the raw text for a top-level value) into a value of this type.
        """
        ...

    def encode(self, val: Any) -> bytes:
        """
        Encodes the given value in the contract ABI format.
        """
        return self._encode(self._normalize(val))

    def decode(self, data: bytes) -> Any:
        """
        Decodes the given bytes encoded in the contract ABI format.
        """
        return self._decode(data, 0)

    def parse_text(self, text: str) -> Any:
        """
        Converts user-provided text into a value of this type
        (ready to be passed to ``encode()``).
        """
        if not isinstance(text, str):
            raise ValidationError(f"Expected a string, got {type(text).__name__}")
        return self._from_json(text)

    def encode_to_topic(self, val: Any) -> bytes:
        """
        Encodes the given value as an event topic.
        """
        # EVM uses a simpler encoding scheme for encoding values into event topics
        # because objects of reference types are just hashed,
        # and there is no need to unpack them later
        # (basically, all values are just concatenated without any length labels).

        # Before doing anything, normalize the value,
        # this will check that ensure the constituent values are actually valid.
        return self._encode_to_topic_outer(self._normalize(val))

    def _encode_to_topic_outer(self, val: Any) -> bytes:
        """
        Encodes a value of the outer indexed type.
        """
        # By default it's just the encoding of the value type.
        # May be overridden.
        return self._encode(val)

    def _encode_to_topic_inner(self, val: Any) -> bytes:
        """
        Encodes a value contained within an indexed array or struct.
        """
        # By default it's just the encoding of the value type.
        # May be overridden.
        return self._encode(val)

    def decode_from_topic(self, val: bytes) -> Any:
        """
        Decodes an encoded topic.
        Returns a :py:class:`TopicHash` if the original value was hashed.
        """
        # This method does not have inner/outer division, since all reference types are hashed,
        # and there's no need to go recursively into structs/arrays - we won't be able to recover
        # the values anyway.
        if len(val) != WORD_SIZE:
            raise DecodingError(f"A topic must be {WORD_SIZE} bytes long, got {len(val)}")
        if not self.is_value_type:
            return TopicHash(val)
        return self._decode(val, 0)

    def __str__(self) -> str:
        return self.canonical_form

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.canonical_form}>"

    def __getitem__(self, array_size: int | Any) -> "Array":
        # In Py3.10 they added EllipsisType which would work better here.
        # For now, relying on the documentation.
        if isinstance(array_size, int) and not isinstance(array_size, bool):
            return Array(self, array_size)
        if array_size == ...:
            return Array(self, None)
        raise TypeError(f"Invalid array size specifier type: {type(array_size).__name__}")


def _check_int_type(type_name: str, val: Any) -> None:
    # `bool` is a subclass of `int`, but we would rather be more strict
    # and prevent possible bugs.
    if not isinstance(val, int) or isinstance(val, bool):
        raise ValidationError(
            f"`{type_name}` must correspond to an integer, got {type(val).__name__}"
        )


# Plain decimal or `0x` hex, without `_` separators or a `+` sign
_DECIMAL_TEXT_RE = re.compile(r"-?[0-9]+")
_HEX_TEXT_RE = re.compile(r"(-?)0[xX]([0-9a-fA-F]+)")


def _int_from_text(type_name: str, val: Any) -> int:
    if isinstance(val, int) and not isinstance(val, bool):
        return val
    if isinstance(val, str):
        text = val.strip()
        if _DECIMAL_TEXT_RE.fullmatch(text):
            return int(text, 10)
        if match := _HEX_TEXT_RE.fullmatch(text):
            sign, digits = match.groups()
            return int(sign + digits, 16)
        raise ValidationError(f"`{type_name}` cannot be parsed from {val!r}")
    raise ValidationError(f"`{type_name}` cannot be created from {type(val).__name__}")


def _bytes_from_hex(type_name: str, val: str) -> bytes:
    hex_str = val.strip()
    if hex_str.startswith(("0x", "0X")):
        hex_str = hex_str[2:]
    try:
        return bytes.fromhex(hex_str)
    except ValueError as exc:
        raise ValidationError(f"`{type_name}` must be a valid hex string, got {val!r}") from exc


class UInt(Type):
    """
    Corresponds to the Solidity ``uint<bits>`` type.
    """

    def __init__(self, bits: int):
        if bits <= 0 or bits > 256 or bits % 8 != 0:
            raise ParseError(f"Incorrect `uint` bit size: {bits}")
        self._bits = bits

    @property
    def canonical_form(self) -> str:
        return f"uint{self._bits}"

    def _normalize(self, val: Any) -> int:
        _check_int_type(self.canonical_form, val)
        if val < 0:
            raise EncodingError(
                f"`{self.canonical_form}` must correspond to a non-negative integer, got {val}"
            )
        if val >> self._bits != 0:
            raise EncodingError(
                f"`{self.canonical_form}` must correspond to an unsigned integer "
                f"under {self._bits} bits, got {val}"
            )
        return int(val)

    def _encode(self, val: int) -> bytes:
        return _encode_uint(val)

    def _decode(self, data: bytes, position: int) -> int:
        val = _read_uint(data, position)
        if val >> self._bits != 0:
            raise DecodingError(
                f"The word at offset {position} does not fit into `{self.canonical_form}`"
            )
        return val

    def _from_json(self, val: Any) -> int:
        return _int_from_text(self.canonical_form, val)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, UInt) and self._bits == other._bits


class Int(Type):
    """
    Corresponds to the Solidity ``int<bits>`` type.
    """

    def __init__(self, bits: int):
        if bits <= 0 or bits > 256 or bits % 8 != 0:
            raise ParseError(f"Incorrect `int` bit size: {bits}")
        self._bits = bits

    @property
    def canonical_form(self) -> str:
        return f"int{self._bits}"

    def _normalize(self, val: Any) -> int:
        _check_int_type(self.canonical_form, val)
        if (val + (1 << (self._bits - 1))) >> self._bits != 0:
            raise EncodingError(
                f"`{self.canonical_form}` must correspond to a signed integer "
                f"under {self._bits} bits, got {val}"
            )
        return int(val)

    def _encode(self, val: int) -> bytes:
        return val.to_bytes(WORD_SIZE, byteorder="big", signed=True)

    def _decode(self, data: bytes, position: int) -> int:
        val = int.from_bytes(_read_word(data, position), byteorder="big", signed=True)
        # The value must be properly sign-extended from its bit width
        if (val + (1 << (self._bits - 1))) >> self._bits != 0:
            raise DecodingError(
                f"The word at offset {position} does not fit into `{self.canonical_form}`"
            )
        return val

    def _from_json(self, val: Any) -> int:
        return _int_from_text(self.canonical_form, val)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Int) and self._bits == other._bits


class Bytes(Type):
    """
    Corresponds to the Solidity ``bytes<size>`` type.
    """

    def __init__(self, size: None | int = None):
        if size is not None and (size <= 0 or size > 32):
            raise ParseError(f"Incorrect `bytes` size: {size}")
        self._size = size

    @property
    def canonical_form(self) -> str:
        return f"bytes{self._size if self._size else ''}"

    @property
    def is_dynamic(self) -> bool:
        return self._size is None

    @property
    def is_value_type(self) -> bool:
        # Dynamic `bytes` is a reference type and is therefore hashed.
        return self._size is not None

    def _normalize(self, val: Any) -> bytes:
        if isinstance(val, bytearray):
            val = bytes(val)
        if not isinstance(val, bytes):
            raise ValidationError(
                f"`{self.canonical_form}` must correspond to a bytestring, "
                f"got {type(val).__name__}"
            )
        if self._size is not None and len(val) != self._size:
            raise ValidationError(f"Expected {self._size} bytes, got {len(val)}")
        return val

    def _encode(self, val: bytes) -> bytes:
        if self._size is None:
            return _encode_uint(len(val)) + _pad_right(val)
        return _pad_right(val)

    def _decode(self, data: bytes, position: int) -> bytes:
        if self._size is None:
            length = _read_length(data, position, 1, "`bytes` value")
            start = position + WORD_SIZE
            return data[start : start + length]
        return _read_word(data, position)[: self._size]

    def _from_json(self, val: Any) -> bytes:
        if not isinstance(val, str):
            raise ValidationError(
                f"`{self.canonical_form}` must be given as a hex string, got {type(val).__name__}"
            )
        return _bytes_from_hex(self.canonical_form, val)

    def _encode_to_topic_outer(self, val: bytes) -> bytes:
        if self._size is None:
            return keccak(val)
        # Sized `bytes` is a value type, falls back to the base implementation.
        return super()._encode_to_topic_outer(val)

    def _encode_to_topic_inner(self, val: bytes) -> bytes:
        if self._size is None:
            # Dynamic `bytes` is padded to a multiple of 32 bytes.
            return _pad_right(val)
        # Sized `bytes` is a value type, falls back to the base implementation.
        return super()._encode_to_topic_inner(val)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Bytes) and self._size == other._size


class AddressType(Type):
    """
    Corresponds to the Solidity ``address`` type.
    Not to be confused with :py:class:`~abicodec.Address` which represents an address value.
    """

    @property
    def canonical_form(self) -> str:
        return "address"

    def _normalize(self, val: Any) -> bytes:
        if isinstance(val, Address):
            return bytes(val)
        if isinstance(val, bytes | bytearray):
            if len(val) != 20:
                raise ValidationError(f"`address` must be 20 bytes long, got {len(val)}")
            return bytes(val)
        if isinstance(val, str):
            return bytes(Address.from_hex(val))
        raise ValidationError(
            f"`address` must correspond to an `Address`, a bytestring or a hex string, "
            f"got {type(val).__name__}"
        )

    def _encode(self, val: bytes) -> bytes:
        return b"\x00" * 12 + val

    def _decode(self, data: bytes, position: int) -> Address:
        word = _read_word(data, position)
        if any(word[:12]):
            raise DecodingError(f"The word at offset {position} is not a valid `address`")
        return Address(word[12:])

    def _from_json(self, val: Any) -> Address:
        if not isinstance(val, str):
            raise ValidationError(
                f"`address` must be given as a hex string, got {type(val).__name__}"
            )
        return Address.from_hex(val)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, AddressType)


class String(Type):
    """
    Corresponds to the Solidity ``string`` type.
    """

    @property
    def canonical_form(self) -> str:
        return "string"

    @property
    def is_dynamic(self) -> bool:
        return True

    @property
    def is_value_type(self) -> bool:
        return False

    def _normalize(self, val: Any) -> str:
        if not isinstance(val, str):
            raise ValidationError(
                f"`string` must correspond to a `str`-type value, got {type(val).__name__}"
            )
        return val

    def _encode(self, val: str) -> bytes:
        # `string` is encoded and treated as dynamic `bytes`
        return Bytes()._encode(val.encode())

    def _decode(self, data: bytes, position: int) -> str:
        raw = Bytes()._decode(data, position)
        try:
            return raw.decode()
        except UnicodeDecodeError as exc:
            raise DecodingError(
                f"The `string` value at offset {position} is not valid UTF-8"
            ) from exc

    def _from_json(self, val: Any) -> str:
        if not isinstance(val, str):
            raise ValidationError(
                f"`string` must be given as a string, got {type(val).__name__}"
            )
        return val

    def _encode_to_topic_outer(self, val: str) -> bytes:
        return Bytes()._encode_to_topic_outer(val.encode())

    def _encode_to_topic_inner(self, val: str) -> bytes:
        return Bytes()._encode_to_topic_inner(val.encode())

    def __eq__(self, other: object) -> bool:
        return isinstance(other, String)


class Bool(Type):
    """
    Corresponds to the Solidity ``bool`` type.
    """

    @property
    def canonical_form(self) -> str:
        return "bool"

    def _normalize(self, val: Any) -> bool:
        if isinstance(val, bool):
            return val
        if isinstance(val, int) and val in (0, 1):
            return bool(val)
        if isinstance(val, int):
            raise ValidationError(f"`bool` must correspond to 0 or 1, got {val}")
        raise ValidationError(
            f"`bool` must correspond to a `bool`-type value, got {type(val).__name__}"
        )

    def _encode(self, val: bool) -> bytes:  # noqa: FBT001
        return _encode_uint(int(val))

    def _decode(self, data: bytes, position: int) -> bool:
        val = _read_uint(data, position)
        if val not in (0, 1):
            raise DecodingError(f"The word at offset {position} is not a valid `bool`")
        return val == 1

    def _from_json(self, val: Any) -> bool:
        if isinstance(val, bool):
            return val
        if isinstance(val, str):
            literal = val.strip().lower()
            if literal in ("true", "1"):
                return True
            if literal in ("false", "0"):
                return False
        raise ValidationError(f"`bool` must be 'true' or 'false', got {val!r}")

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Bool)


def _load_json_array(type_name: str, val: Any) -> list[Any]:
    if isinstance(val, str):
        try:
            val = json.loads(val)
        except json.JSONDecodeError as exc:
            raise ValidationError(
                f"`{type_name}` must be given as a JSON array, got {val!r}"
            ) from exc
    if not isinstance(val, list):
        raise ValidationError(f"`{type_name}` must be given as an array, got {type(val).__name__}")
    return val


def _stringify_json_item(val: Any) -> Any:
    # Numbers in JSON arrays are passed through as text so that they are parsed
    # the same way as top-level values.
    if isinstance(val, int | float) and not isinstance(val, bool):
        return str(val)
    return val


class Array(Type):
    """
    Corresponds to the Solidity array (``[<size>]``) type.
    """

    def __init__(self, element_type: Type, size: None | int = None):
        if size is not None and size <= 0:
            raise ParseError(f"Incorrect array size: {size}")
        self._element_type = element_type
        self._size = size

    @property
    def element_type(self) -> Type:
        return self._element_type

    @property
    def size(self) -> None | int:
        return self._size

    @cached_property
    def canonical_form(self) -> str:
        return (
            self._element_type.canonical_form + "[" + (str(self._size) if self._size else "") + "]"
        )

    @cached_property
    def is_dynamic(self) -> bool:
        return self._size is None or self._element_type.is_dynamic

    @cached_property
    def head_size(self) -> int:
        if self.is_dynamic:
            return WORD_SIZE
        return cast(int, self._size) * self._element_type.head_size

    @property
    def is_value_type(self) -> bool:
        return False

    def _normalize(self, val: Any) -> list[Any]:
        if isinstance(val, str | bytes | bytearray | Mapping) or not isinstance(val, Iterable):
            raise ValidationError(f"Expected an iterable, got {type(val).__name__}")
        items = list(val)
        if self._size is not None and len(items) != self._size:
            raise ValidationError(f"Expected {self._size} elements, got {len(items)}")
        return [self._element_type._normalize(item) for item in items]

    def _encode(self, val: list[Any]) -> bytes:
        encoded = _encode_sequence([self._element_type] * len(val), val)
        if self._size is None:
            return _encode_uint(len(val)) + encoded
        return encoded

    def _decode(self, data: bytes, position: int) -> list[Any]:
        if self._size is None:
            length = _read_length(
                data, position, self._element_type.head_size, f"`{self.canonical_form}` value"
            )
            return list(_decode_sequence([self._element_type] * length, data, position + WORD_SIZE))
        # The heads of a fixed-size array are laid out in place
        heads_size = self._size * self._element_type.head_size
        if position + heads_size > len(data):
            raise DecodingError(
                f"The `{self.canonical_form}` value at offset {position} "
                f"needs {heads_size} bytes, but the data is only {len(data)} bytes long"
            )
        return list(_decode_sequence([self._element_type] * self._size, data, position))

    def _from_json(self, val: Any) -> list[Any]:
        items = _load_json_array(self.canonical_form, val)
        return [self._element_type._from_json(_stringify_json_item(item)) for item in items]

    def _encode_to_topic_outer(self, val: list[Any]) -> bytes:
        return keccak(self._encode_to_topic_inner(val))

    def _encode_to_topic_inner(self, val: list[Any]) -> bytes:
        return b"".join(self._element_type._encode_to_topic_inner(elem) for elem in val)

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, Array)
            and self._element_type == other._element_type
            and self._size == other._size
        )


class Struct(Type):
    """
    Corresponds to the Solidity struct (tuple) type.
    Fields may be named or anonymous.
    """

    def __init__(
        self, fields: Mapping[str, Type] | Sequence[Type] | Sequence[tuple[str | None, Type]]
    ):
        names: tuple[str | None, ...]
        if isinstance(fields, Mapping):
            names = tuple(fields)
            types = tuple(fields.values())
        elif all(isinstance(elem, Type) for elem in fields):
            names = tuple(None for _tp in fields)
            types = tuple(cast("Sequence[Type]", fields))
        else:
            pairs = cast("Sequence[tuple[str | None, Type]]", fields)
            names = tuple(name for name, _tp in pairs)
            types = tuple(tp for _name, tp in pairs)
        if not types:
            raise ParseError("A tuple type must have at least one component")
        self._names = names
        self._types = types

    @property
    def field_names(self) -> tuple[str | None, ...]:
        return self._names

    @property
    def field_types(self) -> tuple[Type, ...]:
        return self._types

    @cached_property
    def canonical_form(self) -> str:
        return "(" + ",".join(tp.canonical_form for tp in self._types) + ")"

    @cached_property
    def is_dynamic(self) -> bool:
        return any(tp.is_dynamic for tp in self._types)

    @cached_property
    def head_size(self) -> int:
        if self.is_dynamic:
            return WORD_SIZE
        return sum(tp.head_size for tp in self._types)

    @property
    def is_value_type(self) -> bool:
        return False

    def _normalize(self, val: Any) -> list[Any]:
        if isinstance(val, Mapping):
            if None in self._names or set(val.keys()) != set(self._names):
                raise ValidationError(
                    f"Expected fields {list(self._names)}, got {list(val.keys())}"
                )
            return [tp._normalize(val[name]) for name, tp in zip(self._names, self._types)]
        if isinstance(val, str | bytes | bytearray) or not isinstance(val, Iterable):
            raise ValidationError(f"Expected an iterable, got {type(val).__name__}")
        items = list(val)
        if len(items) != len(self._types):
            raise ValidationError(f"Expected {len(self._types)} elements, got {len(items)}")
        return [tp._normalize(item) for item, tp in zip(items, self._types)]

    def _encode(self, val: list[Any]) -> bytes:
        return _encode_sequence(self._types, val)

    def _decode(self, data: bytes, position: int) -> tuple[Any, ...]:
        return _decode_sequence(self._types, data, position)

    def _from_json(self, val: Any) -> list[Any]:
        items = _load_json_array(self.canonical_form, val)
        if len(items) != len(self._types):
            raise ValidationError(f"Expected {len(self._types)} elements, got {len(items)}")
        return [tp._from_json(_stringify_json_item(item)) for item, tp in zip(items, self._types)]

    def _encode_to_topic_outer(self, val: list[Any]) -> bytes:
        return keccak(self._encode_to_topic_inner(val))

    def _encode_to_topic_inner(self, val: list[Any]) -> bytes:
        return b"".join(tp._encode_to_topic_inner(elem) for elem, tp in zip(val, self._types))

    def __str__(self) -> str:
        # Overriding  the `Type`'s implementation because we want to show the field names too
        return (
            "("
            + ", ".join(
                str(tp) + ("" if name is None else " " + name)
                for name, tp in zip(self._names, self._types)
            )
            + ")"
        )

    def __eq__(self, other: object) -> bool:
        # structs with the same fields but in different order are not equal
        return (
            isinstance(other, Struct)
            and self._types == other._types
            and self._names == other._names
        )


def _encode_sequence(types: Sequence[Type], values: Sequence[Any]) -> bytes:
    """
    Encodes normalized values as a head region followed by a tail region.
    Offsets in the head are relative to the start of the head region.
    """
    heads = []
    tails = []
    tail_offset = sum(tp.head_size for tp in types)
    for tp, val in zip(types, values, strict=True):
        encoded = tp._encode(val)
        if tp.is_dynamic:
            heads.append(_encode_uint(tail_offset))
            tails.append(encoded)
            tail_offset += len(encoded)
        else:
            heads.append(encoded)
    return b"".join(heads) + b"".join(tails)


def _decode_sequence(types: Sequence[Type], data: bytes, start: int) -> tuple[Any, ...]:
    values = []
    head_position = start
    for tp in types:
        if tp.is_dynamic:
            offset = _read_uint(data, head_position)
            target = start + offset
            if target >= len(data):
                raise DecodingError(
                    f"The offset {offset} at position {head_position} "
                    f"points outside of the data ({len(data)} bytes)"
                )
            values.append(tp._decode(data, target))
        else:
            values.append(tp._decode(data, head_position))
        head_position += tp.head_size
    return tuple(values)


_UINT_RE = re.compile(r"uint([1-9]\d*)?")
_INT_RE = re.compile(r"int([1-9]\d*)?")
_BYTES_RE = re.compile(r"bytes([1-9]\d*)?")
_ARRAY_SUFFIX_RE = re.compile(r"^(.*)\[([1-9]\d*)?\]$", re.DOTALL)

_NO_PARAMS = {
    "address": AddressType(),
    "string": String(),
    "bool": Bool(),
}


def type_from_abi_string(abi_string: str) -> Type:
    """
    Parses an elementary type name (``uint256``, ``bytes4``, ``address`` etc).
    ``uint`` and ``int`` are aliases for ``uint256`` and ``int256``.
    """
    if match := _UINT_RE.fullmatch(abi_string):
        return UInt(int(match.group(1) or 256))
    if match := _INT_RE.fullmatch(abi_string):
        return Int(int(match.group(1) or 256))
    if match := _BYTES_RE.fullmatch(abi_string):
        size = match.group(1)
        return Bytes(int(size) if size else None)
    if abi_string in _NO_PARAMS:
        return _NO_PARAMS[abi_string]
    raise ParseError(f"Unknown type: {abi_string}")


def _split_tuple_components(type_str: str) -> list[str]:
    """
    Splits the contents of ``(...)`` at the top-level commas.
    """
    inner = type_str[1:-1]
    if not inner:
        return []

    components = []
    depth = 0
    current_start = 0
    for i, char in enumerate(inner):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise ParseError(f"Unbalanced parentheses in type: {type_str}")
        elif char == "," and depth == 0:
            components.append(inner[current_start:i])
            current_start = i + 1
    if depth != 0:
        raise ParseError(f"Unbalanced parentheses in type: {type_str}")
    components.append(inner[current_start:])
    return components


def parse_type(type_str: str) -> Type:
    """
    Parses a type string in the canonical-like form,
    where tuples are written inline (e.g. ``(uint256,(bool,string)[])[2]``).
    """
    if not isinstance(type_str, str):
        raise ParseError(f"Type must be a string, got {type(type_str).__name__}")
    type_str = type_str.strip()

    if match := _ARRAY_SUFFIX_RE.match(type_str):
        size = match.group(2)
        return Array(parse_type(match.group(1)), int(size) if size else None)

    if type_str.startswith("(") or type_str.endswith(")"):
        if not (type_str.startswith("(") and type_str.endswith(")")):
            raise ParseError(f"Unbalanced parentheses in type: {type_str}")
        components = _split_tuple_components(type_str)
        return Struct([parse_type(component) for component in components])

    if "[" in type_str or "]" in type_str:
        raise ParseError(f"Incorrect type format: {type_str}")

    return type_from_abi_string(type_str)


def dispatch_type(abi_entry: Mapping[str, Any]) -> Type:
    """
    Creates a type from a JSON ABI parameter entry
    (using ``components`` for ``tuple`` types).
    """
    if not isinstance(abi_entry, Mapping):
        raise ParseError(f"ABI parameter must be an object, got {type(abi_entry).__name__}")
    if "type" not in abi_entry:
        raise ParseError(f"ABI parameter is missing a type: {abi_entry}")

    type_str = abi_entry["type"]
    if not isinstance(type_str, str):
        raise ParseError(f"Type must be a string, got {type(type_str).__name__}")

    if match := _ARRAY_SUFFIX_RE.match(type_str):
        element_entry = dict(abi_entry)
        element_entry["type"] = match.group(1)
        size = match.group(2)
        return Array(dispatch_type(element_entry), int(size) if size else None)

    if type_str == "tuple":
        components = abi_entry.get("components")
        if not isinstance(components, list):
            raise ParseError("A `tuple` parameter must have a list of `components`")
        return Struct(dispatch_parameter_types(components))

    return parse_type(type_str)


def dispatch_parameter_types(abi_entry: Iterable[Any]) -> list[tuple[str | None, Type]]:
    """
    Creates a list of optionally named types from a list of JSON ABI parameter entries.
    Empty names are replaced with ``None``.
    """
    types = []
    for entry in abi_entry:
        tp = dispatch_type(entry)
        name = entry.get("name") or None
        if name is not None and not isinstance(name, str):
            raise ParseError(f"Parameter name must be a string, got {type(name).__name__}")
        types.append((name, tp))
    return types


def canonical_signature(types: Iterable[Type]) -> str:
    return "(" + ",".join(tp.canonical_form for tp in types) + ")"


def encode_args(types: Sequence[Type], args: Sequence[Any]) -> bytes:
    """
    Encodes the given values according to the given types,
    as the arguments of a function call (without the selector).
    """
    if len(types) != len(args):
        raise ArityError(f"Expected {len(types)} values, got {len(args)}")
    return _encode_sequence(types, [tp._normalize(arg) for tp, arg in zip(types, args)])


def decode_args(types: Sequence[Type], data: bytes) -> tuple[Any, ...]:
    """
    Decodes the given bytes as a sequence of values of the given types.
    """
    try:
        return _decode_sequence(types, data, 0)
    except DecodingError as exc:
        message = (
            f"Could not decode the data "
            f"with the expected signature {canonical_signature(types)}: {exc}"
        )
        raise DecodingError(message) from exc
