"""
Codec registry.

Maps every (Format, SerializerKind) pair to one codec and exposes the
encode/decode entry points used by the HTTP pipeline and the serializer
helper. Codecs are stateless, so the table is built once at import.
"""

import logging
from typing import Any, Protocol

from globalhttp.serialization.json_codec import JSONCodec
from globalhttp.serialization.models import (
    DEFAULT_ENCODING,
    DocType,
    Format,
    Namespaces,
    SerializerKind,
    normalize_encoding,
)
from globalhttp.serialization.xml_codec import XMLCodec

logger = logging.getLogger(__name__)


class Codec(Protocol):
    format: Format
    kind: SerializerKind

    def encode(
        self,
        value: Any,
        encoding: str = DEFAULT_ENCODING,
        doctype: DocType | None = None,
        namespaces: Namespaces | None = None,
    ) -> bytes: ...

    def decode(self, data: str | bytes, target: Any) -> Any: ...


_CODECS: dict[tuple[Format, SerializerKind], Codec] = {
    (Format.XML, SerializerKind.CONTRACT): XMLCodec(SerializerKind.CONTRACT),
    (Format.XML, SerializerKind.REFLECTION): XMLCodec(SerializerKind.REFLECTION),
    (Format.JSON, SerializerKind.CONTRACT): JSONCodec(SerializerKind.CONTRACT),
    (Format.JSON, SerializerKind.REFLECTION): JSONCodec(SerializerKind.REFLECTION),
}


def get_codec(format: Format | str, serializer: SerializerKind | str) -> Codec:
    """Return the codec for a format and serializer kind."""
    key = (Format.coerce(format), SerializerKind.coerce(serializer))
    return _CODECS[key]


def content_type(format: Format | str, encoding: str | None = None) -> str:
    """Content-Type header value for a format, with an optional charset."""
    media_type = Format.coerce(format).media_type
    if encoding:
        return f"{media_type}; charset={normalize_encoding(encoding)}"
    return media_type


def encode(
    value: Any,
    format: Format | str = Format.XML,
    serializer: SerializerKind | str = SerializerKind.CONTRACT,
    encoding: str = DEFAULT_ENCODING,
    doctype: DocType | None = None,
    namespaces: Namespaces | None = None,
) -> bytes:
    """Serialize a value to bytes."""
    codec = get_codec(format, serializer)
    logger.debug("Encoding with %r", codec)
    return codec.encode(value, encoding=encoding, doctype=doctype, namespaces=namespaces)


def decode(
    data: str | bytes,
    target: Any,
    format: Format | str = Format.XML,
    serializer: SerializerKind | str = SerializerKind.CONTRACT,
) -> Any:
    """Deserialize bytes or text into ``target``."""
    codec = get_codec(format, serializer)
    logger.debug("Decoding %s with %r", getattr(target, "__name__", target), codec)
    return codec.decode(data, target)


def serialize_to_string(
    value: Any,
    format: Format | str = Format.XML,
    serializer: SerializerKind | str = SerializerKind.CONTRACT,
    encoding: str = DEFAULT_ENCODING,
    doctype: DocType | None = None,
    namespaces: Namespaces | None = None,
) -> str:
    """Serialize into a byte buffer, then transcode it with ``encoding``."""
    data = encode(value, format, serializer, encoding, doctype, namespaces)
    return data.decode(normalize_encoding(encoding))


def deserialize_from_string(
    text: str,
    target: Any,
    format: Format | str = Format.XML,
    serializer: SerializerKind | str = SerializerKind.CONTRACT,
) -> Any:
    """Parse text directly into ``target``."""
    return decode(text, target, format, serializer)
