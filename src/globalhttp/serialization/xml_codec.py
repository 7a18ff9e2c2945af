"""
XML codec for dataclasses.

Encoding writes the prolog, the optional DOCTYPE and the root element into
an in-memory byte buffer using the requested encoding. Decoding parses the
whole document before building any object, so a failure never yields a
partially populated value.
"""

import dataclasses
import io
import logging
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from typing import Any

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
    format_scalar,
    is_mapping_type,
    is_scalar_type,
    is_sequence_value,
    members_for,
    missing_member,
    parse_scalar,
    root_namespace,
    sequence_context,
    substitute,
    type_name,
    unwrap_optional,
    value_name,
)

logger = logging.getLogger(__name__)


def local_name(tag: str) -> str:
    """Strip a ``{uri}`` prefix from an ElementTree tag."""
    if tag.startswith("{"):
        return tag.rsplit("}", 1)[1]
    return tag


def _find_attribute(element: ET.Element, name: str) -> str | None:
    if name in element.attrib:
        return element.attrib[name]
    for key, value in element.attrib.items():
        if local_name(key) == name:
            return value
    return None


def _is_empty_array(element: ET.Element, target: Any) -> bool:
    # An empty sequence carries no item type, so it is written as <ArrayOfAnyType/>.
    return (
        local_name(element.tag).startswith("ArrayOf")
        and len(element) == 0
        and sequence_context(unwrap_optional(target)[0]) is not None
    )


class XMLCodec:
    """Serialize dataclasses to and from XML documents."""

    format = Format.XML

    def __init__(self, kind: SerializerKind = SerializerKind.CONTRACT):
        self.kind = kind

    def __repr__(self) -> str:
        return f"XMLCodec(kind={self.kind.value})"

    def encode(
        self,
        value: Any,
        encoding: str = DEFAULT_ENCODING,
        doctype: DocType | None = None,
        namespaces: Namespaces | None = None,
    ) -> bytes:
        """Serialize ``value`` to an encoded XML document."""
        if value is None:
            raise SerializationError("Cannot serialize None")
        declared = effective_namespaces(namespaces)
        if doctype is not None and declared:
            raise UnsupportedCombinationError(
                "A DOCTYPE cannot be combined with namespace declarations"
            )
        encoding = normalize_encoding(encoding)

        root = self._element(value_name(value, self.kind), value)
        type_namespace = root_namespace(type(value), self.kind)
        if type_namespace:
            root.set("xmlns", type_namespace)
        for prefix, uri in declared.items():
            root.set(f"xmlns:{prefix}" if prefix else "xmlns", uri)

        buffer = io.BytesIO()
        stream = io.TextIOWrapper(
            buffer, encoding=encoding, errors="xmlcharrefreplace", newline=""
        )
        try:
            stream.write(f'<?xml version="1.0" encoding="{encoding}"?>')
            if doctype is not None:
                stream.write(doctype.render())
            ET.ElementTree(root).write(stream, encoding="unicode")
            stream.flush()
            data = buffer.getvalue()
        finally:
            stream.detach()

        logger.debug("Encoded %s as XML (%s, %d bytes)",
                     type(value).__name__, self.kind.value, len(data))
        return data

    def decode(self, data: str | bytes, target: Any) -> Any:
        """Parse an XML document into an instance of ``target``."""
        try:
            root = ET.fromstring(data)
        except ET.ParseError as e:
            raise SerializationError(f"Malformed XML document: {e}") from e

        expected = type_name(target, self.kind)
        actual = local_name(root.tag)
        if actual != expected and not _is_empty_array(root, target):
            raise SerializationError(
                f"Unexpected root element <{actual}>, expected <{expected}>"
            )
        return self._read(root, target, expected)

    # Writing

    def _element(self, tag: str, value: Any) -> ET.Element:
        element = ET.Element(tag)
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            self._fill_object(element, value)
        elif is_sequence_value(value):
            for item in value:
                if item is not None:
                    element.append(self._element(value_name(item, self.kind), item))
        elif isinstance(value, Mapping):
            raise SerializationError(f"<{tag}>: mappings cannot be serialized to XML")
        else:
            element.text = format_scalar(value)
        return element

    def _fill_object(self, element: ET.Element, value: Any) -> None:
        owner = type(value).__name__
        for m in members_for(type(value), self.kind):
            item = getattr(value, m.attr)
            if item is None:
                continue
            if m.attribute:
                if (dataclasses.is_dataclass(item) or is_sequence_value(item)
                        or isinstance(item, Mapping)):
                    raise SerializationError(
                        f"{owner}.{m.attr} cannot be written as an XML attribute"
                    )
                element.set(m.name, format_scalar(item))
            elif m.flatten and is_sequence_value(item):
                for entry in item:
                    if entry is not None:
                        element.append(self._element(m.name, entry))
            elif m.item and is_sequence_value(item):
                wrapper = ET.SubElement(element, m.name)
                for entry in item:
                    if entry is not None:
                        wrapper.append(self._element(m.item, entry))
            else:
                element.append(self._element(m.name, item))

    # Reading

    def _read(self, element: ET.Element, tp: Any, path: str) -> Any:
        tp, _ = unwrap_optional(tp)

        context = dataclass_context(tp)
        if context is not None:
            cls, tvars = context
            return self._read_object(element, cls, tvars, path)

        sequence = sequence_context(tp)
        if sequence is not None:
            container, item_tp = sequence
            return container(
                self._read(child, item_tp, f"{path}/{local_name(child.tag)}")
                for child in element
            )

        if is_mapping_type(tp):
            raise SerializationError(f"{path}: mappings are not supported by the XML codec")
        if not is_scalar_type(tp):
            raise SerializationError(f"{path}: unsupported type {tp!r}")
        return self._scalar(element.text or "", tp, path)

    def _read_object(self, element: ET.Element, cls: type, tvars: dict, path: str) -> Any:
        children = list(element)
        values = {}

        for m in members_for(cls, self.kind):
            hint = substitute(m.hint, tvars)
            member_path = f"{path}/{m.name}"

            if m.attribute:
                raw = _find_attribute(element, m.name)
                if raw is None:
                    values[m.attr] = missing_member(m, cls, member_path)
                else:
                    values[m.attr] = self._scalar(raw, unwrap_optional(hint)[0], member_path)
                continue

            unwrapped, optional = unwrap_optional(hint)
            sequence = sequence_context(unwrapped)
            if m.flatten and sequence is not None:
                container, item_tp = sequence
                matches = [c for c in children if local_name(c.tag) == m.name]
                if not matches and optional:
                    values[m.attr] = missing_member(m, cls, member_path)
                    continue
                values[m.attr] = container(
                    self._read(c, substitute(item_tp, tvars), member_path) for c in matches
                )
                continue

            child = next((c for c in children if local_name(c.tag) == m.name), None)
            if child is None:
                values[m.attr] = missing_member(m, cls, member_path)
            else:
                values[m.attr] = self._read(child, hint, member_path)

        return build_instance(cls, values, path)

    def _scalar(self, text: str, tp: Any, path: str) -> Any:
        try:
            return parse_scalar(text, tp)
        except ValueError as e:
            raise SerializationError(f"{path}: {e}") from e
