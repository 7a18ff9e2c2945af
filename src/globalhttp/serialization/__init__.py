"""
XML and JSON serialization for dataclasses.

Provides:
- Contract and reflection member mapping
- DOCTYPE and namespace control for XML
- String, byte and file entry points
"""

from globalhttp.serialization.helper import SerializerHelper
from globalhttp.serialization.models import (
    DEFAULT_ENCODING,
    EMPTY_NAMESPACES,
    DocType,
    Format,
    Namespaces,
    SerializerKind,
)
from globalhttp.serialization.registry import (
    content_type,
    decode,
    deserialize_from_string,
    encode,
    get_codec,
    serialize_to_string,
)
from globalhttp.serialization.schema import (
    data_contract,
    member,
    xml_array,
    xml_attribute,
    xml_element,
    xml_ignore,
    xml_root,
)

__all__ = [
    "DEFAULT_ENCODING",
    "EMPTY_NAMESPACES",
    "DocType",
    "Format",
    "Namespaces",
    "SerializerHelper",
    "SerializerKind",
    "content_type",
    "data_contract",
    "decode",
    "deserialize_from_string",
    "encode",
    "get_codec",
    "member",
    "serialize_to_string",
    "xml_array",
    "xml_attribute",
    "xml_element",
    "xml_ignore",
    "xml_root",
]
