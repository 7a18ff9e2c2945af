"""
Request payload preparation.
"""

import logging
from dataclasses import dataclass
from typing import Any

from globalhttp.serialization import registry
from globalhttp.serialization.models import (
    DEFAULT_ENCODING,
    Format,
    SerializerKind,
    normalize_encoding,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreparedPayload:
    """Request body and the Content-Type header that describes it."""
    body: bytes
    content_type: str


def prepare_payload(
    payload: Any,
    format: Format | str = Format.XML,
    encoding: str = DEFAULT_ENCODING,
    serializer: SerializerKind | str = SerializerKind.CONTRACT,
) -> PreparedPayload:
    """
    Turn a payload into request bytes.

    Strings are sent verbatim (only transcoded with ``encoding``), bytes are
    sent untouched, anything else is serialized with the codec selected by
    ``format`` and ``serializer``.
    """
    if payload is None:
        raise ValueError("No payload to prepare")
    format = Format.coerce(format)
    encoding = normalize_encoding(encoding)

    if isinstance(payload, bytes):
        body = payload
        logger.debug("Using %d raw payload bytes as %s", len(body), format.value)
    elif isinstance(payload, str):
        body = payload.encode(encoding)
        logger.debug("Using string payload as %s (%s)", format.value, encoding)
    else:
        body = registry.encode(payload, format, serializer, encoding=encoding)

    return PreparedPayload(body=body, content_type=registry.content_type(format, encoding))
