"""
Member mapping for serializable dataclasses.

Two strategies decide which fields of a dataclass end up on the wire and
under which names:

- contract: a class marked with ``@data_contract`` exposes only the fields
  declared with ``member(...)``; unmarked dataclasses expose every field
  under its own name. Collections are wrapped in a container element.
- reflection: every field is exposed by convention, refined with the
  ``xml_*`` helpers (``xml_element`` flattens collections into repeated
  elements).

Declarations live in ``dataclasses.field(metadata=...)`` and can be
combined::

    code: str = field(default="", metadata=member("code") | xml_element("code"))
"""

import dataclasses
import types
from collections import abc
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from functools import lru_cache
from typing import Any, TypeVar, Union, get_args, get_origin, get_type_hints
from uuid import UUID

from globalhttp.errors import SerializationError
from globalhttp.serialization.models import SerializerKind


CONTRACT_KEY = "globalhttp.member"
XML_KEY = "globalhttp.xml"

NoneType = type(None)

SCALAR_NAMES: dict[type, str] = {
    str: "string",
    bool: "boolean",
    int: "int",
    float: "double",
    Decimal: "decimal",
    datetime: "dateTime",
    date: "date",
    UUID: "guid",
}

SEQUENCE_ORIGINS = (list, tuple, set, frozenset, abc.Sequence, abc.MutableSequence, abc.Set)


@dataclass(frozen=True)
class ContractInfo:
    """Class-level declaration for a serializable type."""
    name: str
    namespace: str = ""


@dataclass(frozen=True)
class MemberSpec:
    """Contract member declaration."""
    name: str | None = None
    attribute: bool = False
    required: bool = False
    order: int | None = None


@dataclass(frozen=True)
class XmlSpec:
    """Reflection mapping hints."""
    name: str | None = None
    attribute: bool = False
    flatten: bool = False
    item: str | None = None
    ignore: bool = False


@dataclass(frozen=True)
class Member:
    """A resolved field mapping."""
    attr: str
    name: str  # XML element or attribute name
    key: str  # JSON object key
    hint: Any
    attribute: bool = False
    flatten: bool = False
    item: str | None = None
    required: bool = False
    has_default: bool = False


def data_contract(name: str | None = None, namespace: str = ""):
    """Mark a dataclass as a contract type with an explicit root name."""
    def wrap(cls):
        cls.__data_contract__ = ContractInfo(name or cls.__name__, namespace)
        return cls
    return wrap


def xml_root(name: str | None = None, namespace: str = ""):
    """Set the root element name used by the reflection strategy."""
    def wrap(cls):
        cls.__xml_root__ = ContractInfo(name or cls.__name__, namespace)
        return cls
    return wrap


def member(
    name: str | None = None,
    *,
    attribute: bool = False,
    required: bool = False,
    order: int | None = None,
) -> dict[str, Any]:
    return {CONTRACT_KEY: MemberSpec(name, attribute, required, order)}


def xml_element(name: str | None = None) -> dict[str, Any]:
    return {XML_KEY: XmlSpec(name=name, flatten=True)}


def xml_attribute(name: str | None = None) -> dict[str, Any]:
    return {XML_KEY: XmlSpec(name=name, attribute=True)}


def xml_array(name: str | None = None, item: str | None = None) -> dict[str, Any]:
    return {XML_KEY: XmlSpec(name=name, item=item)}


def xml_ignore() -> dict[str, Any]:
    return {XML_KEY: XmlSpec(ignore=True)}


# Type helpers

def unwrap_optional(tp: Any) -> tuple[Any, bool]:
    """Split ``X | None`` into ``(X, True)``."""
    origin = get_origin(tp)
    if origin is Union or origin is types.UnionType:
        args = get_args(tp)
        rest = [a for a in args if a is not NoneType]
        optional = len(rest) < len(args)
        if len(rest) == 1:
            return rest[0], optional
        return Any, optional
    return tp, False


def substitute(tp: Any, tvars: dict) -> Any:
    """Replace type variables in ``tp`` using ``tvars``."""
    if isinstance(tp, TypeVar):
        return tvars.get(tp, Any)
    args = get_args(tp)
    if not args:
        return tp
    new_args = tuple(substitute(a, tvars) for a in args)
    origin = get_origin(tp)
    if origin is Union or origin is types.UnionType:
        return Union[new_args]
    try:
        return origin[new_args]
    except TypeError:
        return tp


def dataclass_context(tp: Any) -> tuple[type, dict] | None:
    """Return ``(cls, type variable bindings)`` for a (generic) dataclass type."""
    origin = get_origin(tp) or tp
    if isinstance(origin, type) and dataclasses.is_dataclass(origin):
        params = getattr(origin, "__parameters__", ())
        return origin, dict(zip(params, get_args(tp)))
    return None


def sequence_context(tp: Any) -> tuple[type, Any] | None:
    """Return ``(container, item type)`` for list-like types."""
    origin = get_origin(tp) or tp
    if origin not in SEQUENCE_ORIGINS:
        return None
    args = get_args(tp)
    item = args[0] if args else Any
    if origin is tuple:
        container = tuple
    elif origin in (set, abc.Set):
        container = set
    elif origin is frozenset:
        container = frozenset
    else:
        container = list
    return container, item


def is_mapping_type(tp: Any) -> bool:
    origin = get_origin(tp) or tp
    return isinstance(origin, type) and issubclass(origin, abc.Mapping)


def is_scalar_type(tp: Any) -> bool:
    if tp is Any or tp is object:
        return True
    return isinstance(tp, type) and (tp in SCALAR_NAMES or issubclass(tp, Enum))


def is_sequence_value(value: Any) -> bool:
    return isinstance(value, (list, tuple, set, frozenset))


# Member resolution

@lru_cache(maxsize=None)
def members_for(cls: type, kind: SerializerKind) -> tuple[Member, ...]:
    """Resolve the wire members of a dataclass for a serializer kind."""
    if not dataclasses.is_dataclass(cls):
        raise SerializationError(f"{cls.__name__} is not a dataclass")
    try:
        hints = get_type_hints(cls)
    except NameError as e:
        raise SerializationError(f"Cannot resolve annotations of {cls.__name__}: {e}") from e

    contract = cls.__dict__.get("__data_contract__")
    ordered = []
    for index, f in enumerate(dataclasses.fields(cls)):
        if not f.init:
            continue
        hint = hints.get(f.name, Any)
        has_default = (f.default is not dataclasses.MISSING
                       or f.default_factory is not dataclasses.MISSING)
        _, optional = unwrap_optional(hint)
        implicit_required = not has_default and not optional

        if kind is SerializerKind.CONTRACT:
            declared = f.metadata.get(CONTRACT_KEY)
            if declared is None:
                if contract is not None:
                    continue
                declared = MemberSpec()
            name = declared.name or f.name
            ordered.append((
                declared.order if declared.order is not None else index,
                Member(
                    attr=f.name,
                    name=name,
                    key=name,
                    hint=hint,
                    attribute=declared.attribute,
                    required=declared.required or implicit_required,
                    has_default=has_default,
                ),
            ))
        else:
            declared = f.metadata.get(XML_KEY) or XmlSpec()
            if declared.ignore:
                continue
            ordered.append((index, Member(
                attr=f.name,
                name=declared.name or f.name,
                key=f.name,
                hint=hint,
                attribute=declared.attribute,
                flatten=declared.flatten,
                item=declared.item,
                required=implicit_required,
                has_default=has_default,
            )))

    ordered.sort(key=lambda pair: pair[0])
    return tuple(m for _, m in ordered)


def _root_info(cls: type, kind: SerializerKind) -> ContractInfo | None:
    if kind is SerializerKind.CONTRACT:
        return cls.__dict__.get("__data_contract__")
    return cls.__dict__.get("__xml_root__")


def type_name(tp: Any, kind: SerializerKind) -> str:
    """Element name used for a value of type ``tp``."""
    tp, _ = unwrap_optional(tp)
    if tp is Any or tp is object:
        return "anyType"
    context = dataclass_context(tp)
    if context is not None:
        cls, _ = context
        info = _root_info(cls, kind)
        return info.name if info else cls.__name__
    sequence = sequence_context(tp)
    if sequence is not None:
        item = type_name(sequence[1], kind)
        return "ArrayOf" + item[:1].upper() + item[1:]
    if isinstance(tp, type):
        if tp in SCALAR_NAMES:
            return SCALAR_NAMES[tp]
        return tp.__name__
    return "anyType"


def value_name(value: Any, kind: SerializerKind) -> str:
    """Element name used for a runtime value."""
    if is_sequence_value(value):
        items = list(value)
        item = value_name(items[0], kind) if items else "anyType"
        return "ArrayOf" + item[:1].upper() + item[1:]
    return type_name(type(value), kind)


def root_namespace(tp: Any, kind: SerializerKind) -> str:
    context = dataclass_context(unwrap_optional(tp)[0])
    if context is None:
        return ""
    info = _root_info(context[0], kind)
    return info.namespace if info else ""


# Scalars

def format_scalar(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def parse_scalar(text: str, tp: Any) -> Any:
    """Convert element or attribute text to ``tp``; raises ``ValueError``."""
    if tp is Any or tp is object or tp is str:
        return text
    if isinstance(tp, type) and issubclass(tp, Enum):
        for item in tp:
            if format_scalar(item.value) == text:
                return item
        raise ValueError(f"{text!r} is not a valid {tp.__name__}")
    stripped = text.strip()
    if tp is bool:
        lowered = stripped.lower()
        if lowered in ("true", "1"):
            return True
        if lowered in ("false", "0"):
            return False
        raise ValueError(f"{text!r} is not a boolean")
    if tp is int:
        return int(stripped)
    if tp is float:
        return float(stripped)
    if tp is Decimal:
        try:
            return Decimal(stripped)
        except InvalidOperation:
            raise ValueError(f"{text!r} is not a decimal") from None
    if tp is datetime:
        return datetime.fromisoformat(stripped)
    if tp is date:
        return date.fromisoformat(stripped)
    if tp is UUID:
        return UUID(stripped)
    raise SerializationError(f"Unsupported scalar type: {tp!r}")


# Object construction

SKIP = object()


def missing_member(m: Member, owner: type, path: str) -> Any:
    """Value for a member absent from the document, or ``SKIP`` to use the default."""
    if m.required:
        raise SerializationError(
            f"{path}: required member {m.name!r} of {owner.__name__} is missing"
        )
    return SKIP if m.has_default else None


def build_instance(cls: type, values: dict[str, Any], path: str) -> Any:
    kwargs = {k: v for k, v in values.items() if v is not SKIP}
    try:
        return cls(**kwargs)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"{path}: cannot build {cls.__name__}: {e}") from e
