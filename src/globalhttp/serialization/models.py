"""
Data models shared by the serialization codecs.
"""

import codecs
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


DEFAULT_ENCODING = "utf-8"


class Format(str, Enum):
    """Wire format family."""
    XML = "xml"
    JSON = "json"

    @property
    def media_type(self) -> str:
        return f"application/{self.value}"

    @classmethod
    def coerce(cls, value: "Format | str") -> "Format":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown format: {value!r}") from None


class SerializerKind(str, Enum):
    """Codec strategy used within a format."""
    CONTRACT = "contract"  # explicit member declarations
    REFLECTION = "reflection"  # field names by convention

    @classmethod
    def coerce(cls, value: "SerializerKind | str") -> "SerializerKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown serializer: {value!r}") from None


def normalize_encoding(name: str | None) -> str:
    """Return the canonical codec name for an encoding."""
    if not name:
        return DEFAULT_ENCODING
    try:
        return codecs.lookup(name).name
    except LookupError:
        raise ValueError(f"Unknown encoding: {name!r}") from None


@dataclass(frozen=True)
class DocType:
    """
    Document type declaration written between the XML prolog and the root.

    Rendered as ``<!DOCTYPE name PUBLIC "pub" "sys" [subset]>``; the
    ``PUBLIC`` form needs a system id, ``SYSTEM`` is used when only a
    system id is given.
    """
    name: str
    public_id: str | None = None
    system_id: str | None = None
    subset: str | None = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("DOCTYPE name must not be empty")
        if self.public_id and not self.system_id:
            raise ValueError("DOCTYPE with a public id requires a system id")

    def render(self) -> str:
        parts = [f"<!DOCTYPE {self.name}"]
        if self.public_id:
            parts.append(f' PUBLIC "{self.public_id}" "{self.system_id}"')
        elif self.system_id:
            parts.append(f' SYSTEM "{self.system_id}"')
        if self.subset:
            parts.append(f" [{self.subset}]")
        parts.append(">")
        return "".join(parts)


Namespaces = Mapping[str, str]

# A single empty prefix bound to an empty URI: emit no declarations at all.
EMPTY_NAMESPACES: Namespaces = MappingProxyType({"": ""})


def effective_namespaces(namespaces: Namespaces | None) -> dict[str, str]:
    """Drop empty-prefix/empty-URI entries and validate the rest."""
    result = {}
    for prefix, uri in (namespaces or {}).items():
        prefix = prefix or ""
        uri = uri or ""
        if not prefix and not uri:
            continue
        if prefix and not uri:
            raise ValueError(f"Namespace prefix {prefix!r} needs a URI")
        result[prefix] = uri
    return result
