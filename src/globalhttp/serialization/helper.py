"""
File and string serialization for a single target type.
"""

import logging
from os import PathLike
from typing import Any, Generic, TypeVar

from globalhttp.serialization import registry
from globalhttp.serialization.models import (
    DEFAULT_ENCODING,
    EMPTY_NAMESPACES,
    DocType,
    Format,
    Namespaces,
    SerializerKind,
    normalize_encoding,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SerializerHelper(Generic[T]):
    """
    Serialize and deserialize instances of one type.

    Usage:
        helper = SerializerHelper(Result[int])
        text = helper.serialize_to_string(result)
        helper.serialize_to_file("result.xml", result, doctype=DocType("result", system_id="result.dtd"))
        loaded = helper.deserialize_from_file("result.xml")
    """

    def __init__(
        self,
        target: Any,
        format: Format | str = Format.XML,
        serializer: SerializerKind | str = SerializerKind.CONTRACT,
        encoding: str = DEFAULT_ENCODING,
        namespaces: Namespaces | None = EMPTY_NAMESPACES,
    ):
        self.target = target
        self.format = Format.coerce(format)
        self.serializer = SerializerKind.coerce(serializer)
        self.encoding = normalize_encoding(encoding)
        self.namespaces = namespaces

    def deserialize_from_file(self, path: str | PathLike) -> T:
        """Read a document from ``path`` and deserialize it."""
        with open(path, encoding=self.encoding) as reader:
            text = reader.read()
        logger.debug("Read %d characters from %s", len(text), path)
        return self.deserialize_from_string(text)

    def deserialize_from_string(self, text: str) -> T:
        return registry.deserialize_from_string(text, self.target, self.format, self.serializer)

    def serialize_to_file(
        self,
        path: str | PathLike,
        entity: T,
        doctype: DocType | None = None,
    ) -> None:
        """Write ``entity`` to ``path`` as an encoded document."""
        data = self._encode(entity, doctype)
        with open(path, "wb") as writer:
            writer.write(data)
        logger.debug("Wrote %d bytes to %s", len(data), path)

    def serialize_to_string(self, entity: T, doctype: DocType | None = None) -> str:
        return self._encode(entity, doctype).decode(self.encoding)

    def _encode(self, entity: T, doctype: DocType | None) -> bytes:
        return registry.encode(
            entity,
            self.format,
            self.serializer,
            encoding=self.encoding,
            doctype=doctype,
            namespaces=self.namespaces,
        )

    @staticmethod
    def get_namespace(prefix_ns: Namespaces) -> dict[str, str]:
        """Copy a prefix to URI mapping into a namespace set."""
        return {prefix: uri for prefix, uri in prefix_ns.items()}

    @staticmethod
    def get_empty_namespace() -> dict[str, str]:
        """Namespace set that suppresses every declaration."""
        return dict(EMPTY_NAMESPACES)
