"""
Response body interpretation.
"""

import logging
from typing import Any

from globalhttp.serialization import registry
from globalhttp.serialization.models import (
    DEFAULT_ENCODING,
    Format,
    SerializerKind,
)

logger = logging.getLogger(__name__)


def interpret(
    raw: str | bytes,
    target: Any = None,
    format: Format | str = Format.XML,
    serializer: SerializerKind | str = SerializerKind.CONTRACT,
    encoding: str | None = None,
) -> Any:
    """
    Convert a response body.

    Without a target the body text is returned unchanged. With a target the
    whole body is decoded into it or ``SerializationError`` is raised.
    ``encoding`` is the charset declared by the transport and only matters
    for byte input.
    """
    if isinstance(raw, bytes):
        text = raw.decode(encoding or DEFAULT_ENCODING)
    else:
        text = raw

    if target is None:
        return text

    logger.debug("Interpreting %d characters as %s", len(text), Format.coerce(format).value)
    return registry.decode(text, target, format, serializer)
