"""
JSON codec for dataclasses.

Mirrors the XML codec: the same members are written, keyed by member name
(contract) or field name (reflection), and the document has no root wrapper.
"""

import dataclasses
import io
import json
import logging
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from globalhttp.errors import SerializationError, UnsupportedCombinationError
from globalhttp.serialization.models import (
    DEFAULT_ENCODING,
    DocType,
    Format,
    Namespaces,
    SerializerKind,
    effective_namespaces,
    normalize_encoding,
)
from globalhttp.serialization.schema import (
    build_instance,
    dataclass_context,
    is_mapping_type,
    is_scalar_type,
    is_sequence_value,
    members_for,
    missing_member,
    parse_scalar,
    sequence_context,
    substitute,
    unwrap_optional,
)

logger = logging.getLogger(__name__)


class JSONCodec:
    """Serialize dataclasses to and from JSON documents."""

    format = Format.JSON

    def __init__(self, kind: SerializerKind = SerializerKind.CONTRACT):
        self.kind = kind

    def __repr__(self) -> str:
        return f"JSONCodec(kind={self.kind.value})"

    def encode(
        self,
        value: Any,
        encoding: str = DEFAULT_ENCODING,
        doctype: DocType | None = None,
        namespaces: Namespaces | None = None,
    ) -> bytes:
        """Serialize ``value`` to an encoded JSON document."""
        if doctype is not None:
            raise UnsupportedCombinationError("A DOCTYPE can only be written to XML documents")
        if effective_namespaces(namespaces):
            raise UnsupportedCombinationError("Namespaces can only be declared in XML documents")
        if value is None:
            raise SerializationError("Cannot serialize None")
        encoding = normalize_encoding(encoding)

        buffer = io.BytesIO()
        stream = io.TextIOWrapper(buffer, encoding=encoding, newline="")
        try:
            json.dump(self._to_primitive(value), stream, ensure_ascii=False)
            stream.flush()
            data = buffer.getvalue()
        except UnicodeEncodeError as e:
            raise SerializationError(f"Cannot encode document as {encoding}: {e}") from e
        finally:
            stream.detach()

        logger.debug("Encoded %s as JSON (%s, %d bytes)",
                     type(value).__name__, self.kind.value, len(data))
        return data

    def decode(self, data: str | bytes, target: Any) -> Any:
        """Parse a JSON document into an instance of ``target``."""
        try:
            document = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SerializationError(f"Malformed JSON document: {e}") from e
        return self._from_primitive(document, target, "$")

    # Writing

    def _to_primitive(self, value: Any) -> Any:
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            document = {}
            for m in members_for(type(value), self.kind):
                item = getattr(value, m.attr)
                if item is not None:
                    document[m.key] = self._to_primitive(item)
            return document
        if is_sequence_value(value):
            return [self._to_primitive(item) for item in value]
        if isinstance(value, Mapping):
            return {str(k): self._to_primitive(v) for k, v in value.items()}
        if isinstance(value, Enum):
            return self._to_primitive(value.value)
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        if isinstance(value, (Decimal, UUID)):
            return str(value)
        if value is None or isinstance(value, (str, int, float, bool)):
            return value
        raise SerializationError(f"Cannot serialize {type(value).__name__} to JSON")

    # Reading

    def _from_primitive(self, data: Any, tp: Any, path: str) -> Any:
        tp, optional = unwrap_optional(tp)
        if data is None:
            if optional or tp is Any:
                return None
            raise SerializationError(f"{path}: null is not allowed here")

        context = dataclass_context(tp)
        if context is not None:
            if not isinstance(data, dict):
                raise SerializationError(f"{path}: expected an object, got {type(data).__name__}")
            cls, tvars = context
            values = {}
            for m in members_for(cls, self.kind):
                member_path = f"{path}.{m.key}"
                if m.key not in data:
                    values[m.attr] = missing_member(m, cls, member_path)
                    continue
                values[m.attr] = self._from_primitive(
                    data[m.key], substitute(m.hint, tvars), member_path
                )
            return build_instance(cls, values, path)

        sequence = sequence_context(tp)
        if sequence is not None:
            if not isinstance(data, list):
                raise SerializationError(f"{path}: expected an array, got {type(data).__name__}")
            container, item_tp = sequence
            return container(
                self._from_primitive(item, item_tp, f"{path}[{i}]")
                for i, item in enumerate(data)
            )

        if is_mapping_type(tp):
            if not isinstance(data, dict):
                raise SerializationError(f"{path}: expected an object, got {type(data).__name__}")
            args = getattr(tp, "__args__", None) or (str, Any)
            return {k: self._from_primitive(v, args[-1], f"{path}.{k}") for k, v in data.items()}

        if not is_scalar_type(tp):
            raise SerializationError(f"{path}: unsupported type {tp!r}")
        return self._scalar(data, tp, path)

    def _scalar(self, data: Any, tp: Any, path: str) -> Any:
        if tp is Any or tp is object:
            return data
        if isinstance(data, (dict, list)):
            raise SerializationError(f"{path}: expected a {tp.__name__}, got {type(data).__name__}")
        if isinstance(data, bool) and tp is not bool:
            raise SerializationError(f"{path}: expected a {tp.__name__}, got a boolean")
        if tp is float and isinstance(data, int):
            return float(data)
        if type(data) is tp:
            return data
        try:
            return parse_scalar(data if isinstance(data, str) else str(data), tp)
        except ValueError as e:
            raise SerializationError(f"{path}: {e}") from e
