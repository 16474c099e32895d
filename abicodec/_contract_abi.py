import inspect
import json
import logging
import re
from collections.abc import Iterable, Iterator, Mapping, Sequence
from collections.abc import Set as AbstractSet
from enum import Enum
from functools import cached_property
from inspect import BoundArguments
from keyword import iskeyword
from typing import Any, ClassVar, Generic, NamedTuple, TypeVar, cast

from ._abi_types import (
    ABI_JSON,
    Type,
    _split_tuple_components,
    decode_args,
    dispatch_parameter_types,
    encode_args,
    parse_type,
)
from ._errors import (
    AmbiguousMatchError,
    ArityError,
    DecodingError,
    ParseError,
    UnknownSelectorError,
)
from ._format import format_value
from ._selectors import SELECTOR_LENGTH, TOPIC_LENGTH, SelectorIndex, event_topic, selector
from ._selectors import signature as make_signature
from ._utils import parse_hex, parse_topics

logger = logging.getLogger(__name__)

# Anonymous events can have at most 4 indexed fields
ANONYMOUS_EVENT_INDEXED_FIELDS = 4

# Non-anonymous events can have at most 3 indexed fields
EVENT_INDEXED_FIELDS = 3


class Parameter(NamedTuple):
    """A parameter of a function, or a field of an event or an error."""

    name: str | None
    """The declared name, ``None`` if the parameter is anonymous."""

    type: Type
    """The parameter type."""

    indexed: bool = False
    """Whether the parameter is indexed (events only)."""

    def display_name(self, position: int) -> str:
        """Returns the declared name, or a synthesized one for anonymous parameters."""
        return self.name if self.name is not None else f"arg{position}"


class FieldValues:
    """
    A container for field values of an event, error, or a method call or return.

    Since Solidity allows fields at arbitrary positions to be anonymous,
    a dictionary cannot handle all the possibilities.
    """

    def __init__(self, values: Sequence[tuple[str | None, Any]]):
        names = [name for name, _value in values if name is not None]
        if len(names) != len(set(names)):
            raise ValueError("The values cannot have repeating names")

        self._values_seq = values
        self._values_dict = {name: value for name, value in values if name is not None}
        self._representable_as_dict = len(names) == len(self._values_seq)

    @property
    def as_dict(self) -> dict[str, Any]:
        """
        Returns the equivalent dictionary representation.

        Raises ``ValueError`` if there are anonymous fields present.
        """
        if not self._representable_as_dict:
            raise ValueError(
                "This structure has some anonymous fields "
                "and therefore is not representable as a `dict`"
            )
        return self._values_dict

    @cached_property
    def as_tuple(self) -> tuple[Any, ...]:
        """
        Returns the equivalent tuple representation
        (a tuple of the values with the field names omitted).
        """
        return tuple(item for _name, item in self._values_seq)

    def __getitem__(self, name: str) -> Any:
        """Returns the value with the given name."""
        return self._values_dict[name]

    def __getattr__(self, name: str) -> Any:
        """Returns the value with the given name."""
        try:
            return self._values_dict[name]
        except KeyError as exc:
            raise AttributeError(name) from exc

    def __len__(self) -> int:
        return len(self._values_seq)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, FieldValues) and list(self._values_seq) == list(
            other._values_seq
        )

    def __repr__(self) -> str:
        return f"FieldValues({self._values_seq!r})"


class Fields:
    """
    Describes a sequence of optionally named typed values.
    These can be method parameters, method outputs, error fields,
    or event fields.
    """

    names: tuple[str | None, ...]
    """Field names."""

    types: tuple[Type, ...]
    """Field types."""

    def __init__(
        self, fields: Mapping[str, Type] | Sequence[Type] | Sequence[tuple[str | None, Type]]
    ):
        names: tuple[str | None, ...]
        if isinstance(fields, Mapping):
            names = tuple(fields)
            types = tuple(fields.values())
        elif all(isinstance(elem, Type) for elem in fields):
            fields = cast("Sequence[Type]", fields)
            names = tuple(None for tp in fields)
            types = tuple(fields)
        else:
            fields = cast("Sequence[tuple[str | None, Type]]", fields)
            names = tuple(name for name, _tp in fields)
            types = tuple(tp for _name, tp in fields)

        named = [name for name in names if name is not None]
        if len(named) != len(set(named)):
            raise ParseError(f"Field names must be distinct, got {list(names)}")

        self.names = names
        self.types = types

    @cached_property
    def named_fields(self) -> set[str]:
        return {name for name in self.names if name is not None}

    @cached_property
    def parameters(self) -> tuple[Parameter, ...]:
        """The fields as a sequence of :py:class:`Parameter` objects."""
        return tuple(Parameter(name, tp) for name, tp in zip(self.names, self.types, strict=True))

    @cached_property
    def as_signature(self) -> inspect.Signature:
        """
        Returns the fields represented as a signature.

        .. note::

            In Solidity, it is possible to have named and anonymous method parameters
            or event/error fields in arbitrary order.
            This cannot be mapped to Python function signatures.
            Also it is possible that some parameter names are Python keywords,
            so they will be rejected by the Signature constructor.

            So the keyword names will be postfixed with a `_`,
            and anonymous fields will be given auto-generated names.
        """
        # Keep as many original names as possible
        existing_names = {name for name in self.names if name is not None and not iskeyword(name)}

        safe_names = []
        disambiguation_counter = 1
        for arg_num, name in enumerate(self.names):
            if name is None:
                base_name = "_" + str(arg_num + 1)
            elif iskeyword(name) or not name.isidentifier():
                base_name = name + "_" if name.isidentifier() else "_" + str(arg_num + 1)
            else:
                safe_names.append(name)
                continue

            # Since we renamed an existing name, there can potentially be
            # an existing one equal to it.

            safe_name = base_name
            while safe_name in existing_names:
                safe_name = base_name + "_" + str(disambiguation_counter)
                disambiguation_counter += 1

            safe_names.append(safe_name)

        return inspect.Signature(
            parameters=[
                inspect.Parameter(name, inspect.Parameter.POSITIONAL_OR_KEYWORD)
                for name in safe_names
            ]
        )

    def bind(self, *args: Any, **kwargs: Any) -> BoundArguments:
        """Binds the given arguments to the fields."""
        try:
            return self.as_signature.bind(*args, **kwargs)
        except TypeError as exc:
            raise ArityError(str(exc)) from exc

    @cached_property
    def canonical_form(self) -> str:
        """Returns the field types serialized in the canonical form as a string."""
        return "(" + ",".join(tp.canonical_form for tp in self.types) + ")"

    def encode(self, values: Sequence[Any]) -> bytes:
        """Encodes the given position values into bytes according to field types."""
        return encode_args(self.types, list(values))

    def decode(self, value_bytes: bytes) -> FieldValues:
        """
        Decodes the packed bytestring into a list of pairs
        of the original parameter/field name and the value.
        """
        return FieldValues(list(zip(self.names, decode_args(self.types, value_bytes), strict=True)))

    def to_json(self) -> ABI_JSON:
        """Returns this object's JSON ABI."""
        return [
            {"name": name if name is not None else "", "type": tp.canonical_form}
            for name, tp in zip(self.names, self.types, strict=True)
        ]

    def __len__(self) -> int:
        return len(self.types)

    def __str__(self) -> str:
        fields = ", ".join(
            tp.canonical_form + ((" " + name) if name is not None else "")
            for name, tp in zip(self.names, self.types, strict=True)
        )
        return f"({fields})"


class EventFields(Fields):
    """Fields of an event structure."""

    indexed: tuple[bool, ...]
    """A sequence indicating whether the field at the given position is indexed."""

    def __init__(
        self,
        fields: Mapping[str, Type] | Sequence[Type] | Sequence[tuple[str | None, Type]],
        indexed: AbstractSet[str] | Sequence[bool],
    ):
        super().__init__(fields)

        if isinstance(indexed, AbstractSet):
            if not set(indexed).issubset(self.named_fields):
                raise ValueError("All the names in `indexed` must be present in the fields list")
            indexed_seq = tuple(name in indexed for name in self.names)
        else:
            indexed_seq = tuple(bool(flag) for flag in indexed)
            if len(indexed_seq) != len(self.names):
                raise ValueError(
                    "If `indexed` is a sequence of booleans, "
                    "its length must match the number of fields"
                )

        self.indexed = indexed_seq

        self._indexed_types = [
            tp for tp, indexed in zip(self.types, indexed_seq, strict=True) if indexed
        ]
        self._nonindexed_types = [
            tp for tp, indexed in zip(self.types, indexed_seq, strict=True) if not indexed
        ]

    @cached_property
    def parameters(self) -> tuple[Parameter, ...]:
        return tuple(
            Parameter(name, tp, indexed)
            for name, tp, indexed in zip(self.names, self.types, self.indexed, strict=True)
        )

    def encode_log(self, *args: Any, **kwargs: Any) -> tuple[list[bytes], bytes]:
        """
        Binds the given arguments to the event fields and encodes them as
        a list of topics (for indexed fields, without the event topic)
        and the log data (for non-indexed fields).

        .. note::

            If keyword arguments are used, any field names that matched Python keywords
            need to be postfixed by a `_`.
        """
        values = self.bind(*args, **kwargs).args
        topics = [
            tp.encode_to_topic(val)
            for tp, val, indexed in zip(self.types, values, self.indexed, strict=True)
            if indexed
        ]
        data = encode_args(
            self._nonindexed_types,
            [val for val, indexed in zip(values, self.indexed, strict=True) if not indexed],
        )
        return topics, data

    def decode_log_entry(self, topics: Sequence[bytes], data: bytes) -> FieldValues:
        """
        Decodes the event fields from the given log entry data.
        ``topics`` must not include the event topic.
        """
        if len(topics) != len(self._indexed_types):
            raise DecodingError(
                f"The number of topics in the log entry ({len(topics)}) does not match "
                f"the number of indexed fields in the event ({len(self._indexed_types)})"
            )

        decoded_topics = iter(
            [tp.decode_from_topic(topic) for tp, topic in zip(self._indexed_types, topics)]
        )
        decoded_data = iter(decode_args(self._nonindexed_types, data))

        # Assemble preserving the field order
        decoded = []
        for name, indexed in zip(self.names, self.indexed, strict=True):
            source = decoded_topics if indexed else decoded_data
            decoded.append((name, next(source)))

        return FieldValues(decoded)

    def to_json(self) -> ABI_JSON:
        """Returns this object's JSON ABI."""
        return [
            {
                "indexed": indexed,
                "name": name if name is not None else "",
                "type": tp.canonical_form,
            }
            for name, tp, indexed in zip(self.names, self.types, self.indexed, strict=True)
        ]

    def __str__(self) -> str:
        params = []
        for name, tp, indexed in zip(self.names, self.types, self.indexed, strict=True):
            indexed_str = " indexed" if indexed else ""
            name_str = (" " + name) if name is not None else ""
            params.append(f"{tp.canonical_form}{indexed_str}{name_str}")
        return "(" + ", ".join(params) + ")"


def _check_entry(entry: ABI_JSON, expected_type: str, class_name: str) -> Mapping[str, Any]:
    if not isinstance(entry, Mapping):
        raise ParseError(f"ABI entry must be an object, got {type(entry).__name__}")
    # The Solidity JSON ABI allows omitting `type` for functions
    if entry.get("type", "function") != expected_type:
        raise ParseError(
            f"{class_name} object must be created from a JSON entry with type='{expected_type}'"
        )
    name = entry.get("name")
    if not isinstance(name, str) or not name:
        raise ParseError(f"{class_name}'s JSON entry must have a non-empty `name`")
    inputs = entry.get("inputs", [])
    if not isinstance(inputs, list):
        raise ParseError(f"{class_name}'s JSON entry `inputs` must be a list")
    return entry


_SIGNATURE_RE = re.compile(
    r"^\s*(?:(?:function|event|error)\s+)?([A-Za-z_$][A-Za-z0-9_$]*)\s*(\(.*\))\s*$", re.DOTALL
)
_NAMED_PARAM_RE = re.compile(r"^(.*?[^\s,])\s+([A-Za-z_$][A-Za-z0-9_$]*)$", re.DOTALL)
_TYPE_MODIFIERS = {"memory", "calldata", "storage", "indexed"}


def _parse_signature(signature_str: str) -> tuple[str, list[tuple[str | None, Type]]]:
    """
    Parses a human-readable signature like ``transfer(address to, uint256 amount)``.
    """
    match = _SIGNATURE_RE.match(signature_str)
    if not match:
        raise ParseError(f"Incorrect signature format: {signature_str}")
    name, params_str = match.groups()

    fields: list[tuple[str | None, Type]] = []
    for component in _split_tuple_components(params_str):
        param = component.strip()
        if not param:
            raise ParseError(f"Empty parameter in signature: {signature_str}")

        param_name = None
        if param_match := _NAMED_PARAM_RE.match(param):
            type_str, param_name = param_match.groups()
            words = type_str.split()
            while len(words) > 1 and words[-1] in _TYPE_MODIFIERS:
                words.pop()
            type_str = " ".join(words)
            if param_name in _TYPE_MODIFIERS:
                param_name = None
        else:
            type_str = param

        fields.append((param_name, parse_type(type_str)))

    return name, fields


class Method:
    """
    A contract method.

    .. note::

       If the name of a parameter (input or output) given to the constructor
       matches a Python keyword, ``_`` will be appended to it.
    """

    kind: ClassVar[str] = "function"

    name: str
    """The name of this method."""

    inputs: Fields
    """The input signature of this method."""

    outputs: Fields
    """The output signature of this method."""

    @classmethod
    def from_json(cls, method_entry: ABI_JSON) -> "Method":
        """Creates this object from a JSON ABI method entry."""
        method_entry_typed = _check_entry(method_entry, "function", "Method")

        name = method_entry_typed["name"]
        inputs = dispatch_parameter_types(method_entry_typed.get("inputs", []))

        outputs: None | list[tuple[str | None, Type]]
        if "outputs" not in method_entry_typed:
            outputs = None
        else:
            outputs = dispatch_parameter_types(method_entry_typed["outputs"] or [])

        return cls(name=name, inputs=inputs, outputs=outputs)

    @classmethod
    def from_signature(cls, signature_str: str) -> "Method":
        """
        Creates this object from a human-readable signature,
        e.g. ``transfer(address,uint256)`` or ``function transfer(address to, uint256 amount)``.
        """
        name, inputs = _parse_signature(signature_str)
        return cls(name=name, inputs=inputs)

    def __init__(
        self,
        name: str,
        inputs: Mapping[str, Type] | Sequence[Type] | Sequence[tuple[str | None, Type]],
        outputs: None
        | Mapping[str, Type]
        | Sequence[Type]
        | Sequence[tuple[str | None, Type]]
        | Type = None,
    ):
        self.name = name
        self.inputs = Fields(inputs)

        if outputs is None:
            outputs = []
        if isinstance(outputs, Type):
            outputs = [(None, outputs)]

        self.outputs = Fields(outputs)

    @cached_property
    def signature(self) -> str:
        """The canonical signature of this method."""
        return make_signature(self.name, self.inputs.types)

    @cached_property
    def selector(self) -> bytes:
        """Method's selector."""
        return selector(self.signature)

    def bind(self, *args: Any, **kwargs: Any) -> BoundArguments:
        """Binds the given arguments to the method's signature."""
        return self.inputs.bind(*args, **kwargs)

    def __call__(self, *args: Any, **kwargs: Any) -> "MethodCall":
        """Returns an encoded call with given arguments."""
        bound_args = self.bind(*args, **kwargs)
        return self.call_bound(bound_args)

    def call_bound(self, bound_args: BoundArguments) -> "MethodCall":
        """Creates a method call object using previously bound arguments."""
        return self.encode_call(bound_args.args)

    def encode_call(self, values: Sequence[Any]) -> "MethodCall":
        """Returns an encoded call with the given positional values."""
        input_bytes = self.inputs.encode(values)
        return MethodCall(self, self.selector + input_bytes)

    def decode_input(self, input_bytes: bytes) -> FieldValues:
        """Decodes the call arguments (without the selector)."""
        return self.inputs.decode(input_bytes)

    def decode_output(self, output_bytes: bytes) -> Any:
        """
        Decodes the output from ABI-packed bytes.

        If there is only a single output, its value is returned.
        If all the fields in the output are unnamed, it is returned as a tuple of values.
        Otherwise it is returned as a :py:class:`FieldValues` object.
        """
        results = self.outputs.decode(output_bytes)

        if len(self.outputs.names) == 1:
            return results.as_tuple[0]
        if all(name is None for name in self.outputs.names):
            return results.as_tuple

        return results

    def with_method(self, method: "Method") -> "MultiMethod":
        """Returns a multimethod resulting from joining this method with `method`."""
        return MultiMethod(self, method)

    def to_json(self) -> ABI_JSON:
        """Returns this object's JSON ABI."""
        return {
            "type": "function",
            "name": self.name,
            "inputs": self.inputs.to_json(),
            "outputs": self.outputs.to_json(),
        }

    def __str__(self) -> str:
        returns = "" if not self.outputs.names else f" returns {self.outputs}"
        return f"function {self.name}{self.inputs}{returns}"


class MultiMethod:
    """
    An overloaded contract method, containing several :py:class:`Method` objects with the same name
    but different input signatures.
    """

    def __init__(self, *methods: Method):
        if len(methods) == 0:
            raise ValueError("`methods` cannot be empty")

        first_method = methods[0]
        self._methods = {first_method.inputs.canonical_form: first_method}
        self._name = first_method.name

        for method in methods[1:]:
            self._add_method(method)

    def __getitem__(self, args: str) -> Method:
        """
        Returns the :py:class:`Method` with the given canonical form of an input signature
        (corresponding to :py:attr:`Fields.canonical_form`).
        """
        return self._methods[args]

    @property
    def name(self) -> str:
        """The name of this method."""
        return self._name

    @property
    def methods(self) -> dict[str, Method]:
        """All the overloaded methods, indexed by the canonical form of their input signatures."""
        return self._methods

    def _add_method(self, method: Method) -> None:
        if method.name != self.name:
            raise ValueError("All overloaded methods must have the same name")
        if method.inputs.canonical_form in self._methods:
            raise ValueError(
                f"A method {self.name}{method.inputs.canonical_form} "
                "is already registered in this MultiMethod"
            )
        self._methods[method.inputs.canonical_form] = method

    def with_method(self, method: Method) -> "MultiMethod":
        """Returns a new ``MultiMethod`` with the given method included."""
        new_mm = MultiMethod(*self._methods.values())
        new_mm._add_method(method)
        return new_mm

    def __call__(self, *args: Any, **kwds: Any) -> "MethodCall":
        """Returns an encoded call with given arguments."""
        for method in self._methods.values():
            try:
                bound_args = method.bind(*args, **kwds)
            except ArityError:
                # If it's a non-overloaded method, we do not want to complicate things
                if len(self._methods) == 1:
                    raise

                continue

            return method.call_bound(bound_args)

        raise ArityError("Could not find a suitable overloaded method for the given arguments")

    def to_json(self) -> list[ABI_JSON]:
        """Returns this object's JSON ABI."""
        return [method.to_json() for method in self._methods.values()]

    def __str__(self) -> str:
        return "; ".join(str(method) for method in self._methods.values())


class Event:
    """
    A contract event.

    .. note::

       If the name of a field given to the constructor matches a Python keyword,
       ``_`` will be appended to it.
    """

    kind: ClassVar[str] = "event"

    name: str
    """The name of this event."""

    fields: EventFields
    """The event fields."""

    anonymous: bool
    """Whether the event is anonymous."""

    @classmethod
    def from_json(cls, event_entry: ABI_JSON) -> "Event":
        """Creates this object from a JSON ABI event entry."""
        event_entry_typed = _check_entry(event_entry, "event", "Event")

        name = event_entry_typed["name"]
        inputs = event_entry_typed.get("inputs", [])
        fields = dispatch_parameter_types(inputs)
        indexed = [bool(input_.get("indexed", False)) for input_ in inputs]

        return cls(
            name=name,
            fields=fields,
            indexed=indexed,
            anonymous=bool(event_entry_typed.get("anonymous", False)),
        )

    def __init__(
        self,
        name: str,
        fields: Mapping[str, Type] | Sequence[tuple[str | None, Type]],
        indexed: AbstractSet[str] | Sequence[bool],
        *,
        anonymous: bool = False,
    ):
        self.name = name
        self.fields = EventFields(fields, indexed)
        self.anonymous = anonymous

        indexed_num = sum(self.fields.indexed)

        if anonymous and indexed_num > ANONYMOUS_EVENT_INDEXED_FIELDS:
            raise ParseError(
                f"Anonymous events can have at most {ANONYMOUS_EVENT_INDEXED_FIELDS} indexed fields"
            )
        if not anonymous and indexed_num > EVENT_INDEXED_FIELDS:
            raise ParseError(
                f"Non-anonymous events can have at most {EVENT_INDEXED_FIELDS} indexed fields"
            )

    @property
    def inputs(self) -> EventFields:
        """An alias for :py:attr:`fields`."""
        return self.fields

    @cached_property
    def signature(self) -> str:
        """The canonical signature of this event."""
        return make_signature(self.name, self.fields.types)

    @cached_property
    def topic(self) -> bytes:
        """The topic representing this event's signature."""
        return event_topic(self.signature)

    @property
    def selector(self) -> bytes:
        """An alias for :py:attr:`topic`."""
        return self.topic

    def encode_log(self, *args: Any, **kwargs: Any) -> tuple[list[bytes], bytes]:
        """
        Encodes a log entry for this event with the given field values.
        Returns a list of topics (starting with the event topic, unless the event is anonymous)
        and the log data.
        """
        topics, data = self.fields.encode_log(*args, **kwargs)
        if not self.anonymous:
            topics = [self.topic, *topics]
        return topics, data

    def decode_log_entry(self, topics: Sequence[bytes], data: bytes) -> FieldValues:
        """
        Decodes the event fields from the given log entry.
        Fields that cannot be decoded (indexed reference types,
        which are hashed before saving them to the log)
        are returned as :py:class:`~abicodec.TopicHash` objects.
        """
        if not self.anonymous:
            if not topics or bytes(topics[0]) != self.topic:
                raise DecodingError("This log entry belongs to a different event")
            topics = topics[1:]

        return self.fields.decode_log_entry([bytes(topic) for topic in topics], data)

    def to_json(self) -> ABI_JSON:
        """Returns this object's JSON ABI."""
        return {
            "type": "event",
            "name": self.name,
            "inputs": self.fields.to_json(),
            "anonymous": self.anonymous,
        }

    def __str__(self) -> str:
        return f"event {self.name}{self.fields}" + (" anonymous" if self.anonymous else "")


class Error:
    """A custom contract error."""

    kind: ClassVar[str] = "error"

    name: str
    """The name of the error structure."""

    fields: Fields
    """The fields of the structure."""

    @classmethod
    def from_json(cls, error_entry: ABI_JSON) -> "Error":
        """Creates this object from a JSON ABI error entry."""
        error_entry_typed = _check_entry(error_entry, "error", "Error")

        name = error_entry_typed["name"]
        fields = dispatch_parameter_types(error_entry_typed.get("inputs", []))

        return cls(name=name, fields=fields)

    def __init__(
        self,
        name: str,
        fields: Mapping[str, Type] | Sequence[Type] | Sequence[tuple[str | None, Type]],
    ):
        self.name = name
        self.fields = Fields(fields)

    @property
    def inputs(self) -> Fields:
        """An alias for :py:attr:`fields`."""
        return self.fields

    @cached_property
    def signature(self) -> str:
        """The canonical signature of this error."""
        return make_signature(self.name, self.fields.types)

    @cached_property
    def selector(self) -> bytes:
        """Error's selector."""
        return selector(self.signature)

    def encode(self, *args: Any, **kwargs: Any) -> bytes:
        """Encodes the error payload (the selector followed by the fields)."""
        bound_args = self.fields.bind(*args, **kwargs)
        return self.selector + self.fields.encode(bound_args.args)

    def decode_fields(self, data_bytes: bytes) -> FieldValues:
        """Decodes the error fields from the given packed data."""
        return self.fields.decode(data_bytes)

    def to_json(self) -> ABI_JSON:
        """Returns this object's JSON ABI."""
        return {
            "type": "error",
            "name": self.name,
            "inputs": self.fields.to_json(),
        }

    def __str__(self) -> str:
        return f"error {self.name}{self.fields}"


class MethodCall:
    """A call to a contract's regular method."""

    data_bytes: bytes
    """Encoded call arguments with the selector."""

    method: Method
    """The method object that encoded this call."""

    def __init__(self, method: Method, data_bytes: bytes):
        self.method = method
        self.data_bytes = data_bytes

    def hex(self) -> str:
        """Returns the encoded call as a ``0x``-prefixed hex string."""
        return "0x" + self.data_bytes.hex()


MethodType = TypeVar("MethodType")


class Methods(Generic[MethodType]):
    """
    A holder for named methods which can be accessed as attributes,
    or iterated over.
    """

    def __init__(self, methods_dict: Mapping[str, MethodType]):
        self._methods_dict = methods_dict

    def __getattr__(self, method_name: str) -> MethodType:
        """Returns the method by name."""
        try:
            return self._methods_dict[method_name]
        except KeyError as exc:
            raise AttributeError(method_name) from exc

    def __getitem__(self, method_name: str) -> MethodType:
        """Returns the method by name."""
        return self._methods_dict[method_name]

    def __contains__(self, method_name: object) -> bool:
        return method_name in self._methods_dict

    def __iter__(self) -> Iterator[MethodType]:
        """Returns the iterator over all methods."""
        return iter(self._methods_dict.values())


PANIC_ERROR = Error("Panic", dict(code=parse_type("uint256")))


LEGACY_ERROR = Error("Error", dict(message=parse_type("string")))


class AmbiguityPolicy(Enum):
    """What to do when several ABI entries share the selector of a decoded payload."""

    RAISE = "raise"
    """
    Raise :py:class:`~abicodec.AmbiguousMatchError`
    (the result of decoding with the first entry is attached to it).
    """

    FIRST = "first"
    """Use the first entry in declaration order and mark the result as ambiguous."""


class FormattedParameter(NamedTuple):
    """A decoded parameter rendered for display."""

    name: str
    type: str
    value: str
    indexed: bool


class DecodedResult:
    """The result of decoding a function call, an event log, or an error payload."""

    entry: Method | Event | Error
    """The matched ABI entry."""

    values: FieldValues
    """The decoded values in declaration order."""

    ambiguous: bool
    """``True`` if other entries in the ABI share the same selector."""

    def __init__(
        self, entry: Method | Event | Error, values: FieldValues, *, ambiguous: bool = False
    ):
        self.entry = entry
        self.values = values
        self.ambiguous = ambiguous

    @property
    def name(self) -> str:
        """The name of the matched entry."""
        return self.entry.name

    @property
    def kind(self) -> str:
        """``function``, ``event``, or ``error``."""
        return self.entry.kind

    @property
    def signature(self) -> str:
        """The canonical signature of the matched entry."""
        return self.entry.signature

    @property
    def selector(self) -> bytes:
        """The selector (or, for events, the topic) of the matched entry."""
        return self.entry.selector

    @property
    def parameters(self) -> list[tuple[Parameter, Any]]:
        """The decoded values paired with the corresponding parameters."""
        return list(zip(self.entry.inputs.parameters, self.values.as_tuple, strict=True))

    def formatted(self, *, checksum: bool = False) -> list[FormattedParameter]:
        """Returns the decoded parameters rendered as strings."""
        return [
            FormattedParameter(
                name=param.display_name(position),
                type=param.type.canonical_form,
                value=format_value(value, checksum=checksum),
                indexed=param.indexed,
            )
            for position, (param, value) in enumerate(self.parameters)
        ]

    def to_json(self, *, checksum: bool = False) -> ABI_JSON:
        """Returns the result as a JSON-serializable dictionary."""
        return {
            "kind": self.kind,
            "name": self.name,
            "signature": self.signature,
            "selector": "0x" + self.selector.hex(),
            "ambiguous": self.ambiguous,
            "params": [param._asdict() for param in self.formatted(checksum=checksum)],
        }

    def __repr__(self) -> str:
        return f"DecodedResult({self.signature}, {self.values!r}, ambiguous={self.ambiguous})"


class ContractABI:
    """
    A wrapper for contract ABI.

    Contract entries are grouped by type and are accessible via the attributes below.
    Decoding looks entries up by selector in indices built once on creation.
    """

    method: Methods[Method | MultiMethod]
    """Contract's regular methods."""

    event: Methods[Event]
    """Contract's events (the first declaration for each name)."""

    error: Methods[Error]
    """Contract's errors (the first declaration for each name)."""

    @classmethod
    def from_json(
        cls, json_abi: ABI_JSON, *, ambiguity: AmbiguityPolicy = AmbiguityPolicy.RAISE
    ) -> "ContractABI":
        """
        Creates this object from a JSON ABI (e.g. generated by a Solidity compiler).
        A single entry object is accepted in place of a list.
        Entries other than functions, events and errors are skipped.
        """
        if isinstance(json_abi, Mapping):
            json_abi = [json_abi]
        if not isinstance(json_abi, list):
            raise ParseError(f"JSON ABI must be a list of entries, got {type(json_abi).__name__}")

        methods: list[Method] = []
        events: list[Event] = []
        errors: list[Error] = []

        for entry in json_abi:
            if not isinstance(entry, Mapping):
                raise ParseError(f"ABI entry must be an object, got {type(entry).__name__}")

            entry_type = entry.get("type", "function")
            if entry_type == "function":
                methods.append(Method.from_json(entry))
            elif entry_type == "event":
                events.append(Event.from_json(entry))
            elif entry_type == "error":
                errors.append(Error.from_json(entry))
            else:
                logger.debug("Skipping an ABI entry of type %r", entry_type)

        return cls(methods=methods, events=events, errors=errors, ambiguity=ambiguity)

    @classmethod
    def from_text(
        cls, abi_text: str, *, ambiguity: AmbiguityPolicy = AmbiguityPolicy.RAISE
    ) -> "ContractABI":
        """Creates this object from the text of a JSON ABI."""
        try:
            json_abi = json.loads(abi_text)
        except (json.JSONDecodeError, TypeError) as exc:
            raise ParseError(f"Invalid JSON ABI: {exc}") from exc
        return cls.from_json(json_abi, ambiguity=ambiguity)

    def __init__(
        self,
        methods: None | Iterable[Method] = None,
        events: None | Iterable[Event] = None,
        errors: None | Iterable[Error] = None,
        *,
        ambiguity: AmbiguityPolicy = AmbiguityPolicy.RAISE,
    ):
        self.methods = tuple(methods or [])
        self.events = tuple(events or [])
        self.errors = tuple(errors or [])
        self.ambiguity = ambiguity

        methods_by_name: dict[str, Method | MultiMethod] = {}
        for method in self.methods:
            if method.name not in methods_by_name:
                methods_by_name[method.name] = method
                continue
            existing = methods_by_name[method.name]
            if isinstance(existing, MultiMethod):
                existing_forms = set(existing.methods)
            else:
                existing_forms = {existing.inputs.canonical_form}
            # An exact duplicate is kept in the selector index only
            if method.inputs.canonical_form not in existing_forms:
                methods_by_name[method.name] = existing.with_method(method)

        events_by_name: dict[str, Event] = {}
        for event in self.events:
            events_by_name.setdefault(event.name, event)
        errors_by_name: dict[str, Error] = {}
        for error in self.errors:
            errors_by_name.setdefault(error.name, error)

        self.method = Methods(methods_by_name)
        self.event = Methods(events_by_name)
        self.error = Methods(errors_by_name)

        self.function_index = SelectorIndex(self.methods)
        # Anonymous events do not have the event topic in their logs
        self.event_index = SelectorIndex(event for event in self.events if not event.anonymous)
        self.error_index = SelectorIndex(self.errors)

        logger.debug(
            "Indexed %d function, %d event and %d error selectors",
            len(self.function_index),
            len(self.event_index),
            len(self.error_index),
        )

    def _finalize(
        self, result: DecodedResult, candidates: Sequence[Method | Event | Error]
    ) -> DecodedResult:
        if len(candidates) == 1:
            return result
        message = (
            f"Selector 0x{result.selector.hex()} matches several entries: "
            + ", ".join(candidate.signature for candidate in candidates)
        )
        if self.ambiguity == AmbiguityPolicy.RAISE:
            raise AmbiguousMatchError(message, candidates, result)
        logger.warning("%s; using %s", message, result.signature)
        return result

    def find_method(self, function: str, arity: None | int = None) -> Method:
        """
        Finds a method by its name or by its signature (e.g. ``transfer(address,uint256)``).
        If the name is overloaded, ``arity`` (the number of arguments) is used to pick one.
        """
        if "(" in function:
            target = Method.from_signature(function).signature
            for method in self.methods:
                if method.signature == target:
                    return method
            raise UnknownSelectorError(f"No function `{target}` in the ABI")

        if function not in self.method:
            raise UnknownSelectorError(f"No function named `{function}` in the ABI")
        found = self.method[function]
        if isinstance(found, Method):
            return found

        overloads = list(found.methods.values())
        if arity is not None:
            overloads = [method for method in overloads if len(method.inputs) == arity]
        if not overloads:
            raise ArityError(f"No overload of `{function}` accepts {arity} arguments")
        if len(overloads) > 1:
            signatures = ", ".join(method.signature for method in overloads)
            raise AmbiguousMatchError(
                f"`{function}` is overloaded ({signatures}), use the full signature",
                overloads,
                None,
            )
        return overloads[0]

    def encode_call(self, function: str, values: Sequence[Any]) -> bytes:
        """
        Encodes a call to the function with the given name or signature
        with the given positional values (the selector followed by the arguments).
        """
        method = self.find_method(function, arity=len(values))
        return method.encode_call(values).data_bytes

    def decode_call(self, call_data: str | bytes) -> DecodedResult:
        """Finds the function by the selector in the call data and decodes its arguments."""
        data = parse_hex(call_data, what="call data")
        if len(data) < SELECTOR_LENGTH:
            raise DecodingError("Call data too short to contain a selector")

        call_selector, args = data[:SELECTOR_LENGTH], data[SELECTOR_LENGTH:]
        candidates = self.function_index.candidates(call_selector)
        if not candidates:
            raise UnknownSelectorError(
                f"Could not find a function with selector 0x{call_selector.hex()} in the ABI"
            )

        method = candidates[0]
        logger.debug("Selector 0x%s matched %s", call_selector.hex(), method.signature)
        result = DecodedResult(
            method, method.decode_input(args), ambiguous=len(candidates) > 1
        )
        return self._finalize(result, candidates)

    def decode_log(
        self, topics: str | Sequence[str | bytes], data: str | bytes = b""
    ) -> DecodedResult:
        """
        Finds the event by the first topic and decodes the log entry.
        Indexed fields of reference types are returned as :py:class:`~abicodec.TopicHash`.
        """
        topics_bytes = parse_topics(topics)
        data_bytes = parse_hex(data, what="log data")

        if not topics_bytes:
            raise DecodingError("The log entry has no topics, cannot identify the event")
        for topic in topics_bytes:
            if len(topic) != TOPIC_LENGTH:
                raise DecodingError(f"A topic must be {TOPIC_LENGTH} bytes long, got {len(topic)}")

        candidates = self.event_index.candidates(topics_bytes[0])
        if not candidates:
            raise UnknownSelectorError(
                f"Could not find an event with topic 0x{topics_bytes[0].hex()} in the ABI"
            )

        event = candidates[0]
        logger.debug("Topic 0x%s matched %s", topics_bytes[0].hex(), event.signature)
        result = DecodedResult(
            event, event.decode_log_entry(topics_bytes, data_bytes), ambiguous=len(candidates) > 1
        )
        return self._finalize(result, candidates)

    def decode_error(self, error_data: str | bytes) -> DecodedResult:
        """
        Given the packed error data, attempts to find the error in the ABI
        and decode the data into its fields.
        The standard ``Error(string)`` and ``Panic(uint256)`` errors are recognized
        before looking at the custom errors.
        """
        data = parse_hex(error_data, what="error data")
        if len(data) < SELECTOR_LENGTH:
            raise DecodingError("Error data too short to contain a selector")

        error_selector, fields = data[:SELECTOR_LENGTH], data[SELECTOR_LENGTH:]

        for builtin in (LEGACY_ERROR, PANIC_ERROR):
            if error_selector == builtin.selector:
                return DecodedResult(builtin, builtin.decode_fields(fields))

        candidates = self.error_index.candidates(error_selector)
        if not candidates:
            raise UnknownSelectorError(
                f"Could not find an error with selector 0x{error_selector.hex()} in the ABI"
            )

        error = candidates[0]
        logger.debug("Selector 0x%s matched %s", error_selector.hex(), error.signature)
        result = DecodedResult(error, error.decode_fields(fields), ambiguous=len(candidates) > 1)
        return self._finalize(result, candidates)

    def to_json(self) -> ABI_JSON:
        """Returns the serialized list of contract items (methods, events, errors)."""
        entries: list[Method | Event | Error] = [*self.methods, *self.events, *self.errors]
        return [entry.to_json() for entry in entries]

    def __str__(self) -> str:
        indent = "    "
        entries: list[Method | Event | Error] = [*self.methods, *self.events, *self.errors]
        return "{\n" + "\n".join(indent + str(entry) for entry in entries) + "\n}"
