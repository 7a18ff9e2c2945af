"""
Per-call serialization options.

One ``RequestOptions`` value replaces the format/serializer/encoding
overload permutations: global defaults come from the client
configuration, facades override some fields, and each call may override
again.
"""

from dataclasses import dataclass, replace
from typing import Any

from globalhttp.serialization.models import (
    DEFAULT_ENCODING,
    Format,
    SerializerKind,
    normalize_encoding,
)

OPTION_NAMES = (
    "format",
    "serializer",
    "payload_encoding",
    "payload_format",
    "payload_serializer",
)


@dataclass(frozen=True)
class RequestOptions:
    """Serialization settings for one request/response cycle."""
    format: Format = Format.XML  # response format; payload format fallback
    serializer: SerializerKind = SerializerKind.CONTRACT
    payload_encoding: str = DEFAULT_ENCODING
    payload_format: Format | None = None
    payload_serializer: SerializerKind | None = None

    def __post_init__(self):
        object.__setattr__(self, "format", Format.coerce(self.format))
        object.__setattr__(self, "serializer", SerializerKind.coerce(self.serializer))
        object.__setattr__(self, "payload_encoding", normalize_encoding(self.payload_encoding))
        if self.payload_format is not None:
            object.__setattr__(self, "payload_format", Format.coerce(self.payload_format))
        if self.payload_serializer is not None:
            object.__setattr__(
                self, "payload_serializer", SerializerKind.coerce(self.payload_serializer)
            )

    def override(self, **changes: Any) -> "RequestOptions":
        """Return a copy with every non-None change applied."""
        unknown = set(changes) - set(OPTION_NAMES)
        if unknown:
            raise TypeError(f"Unknown request options: {', '.join(sorted(unknown))}")
        changes = {k: v for k, v in changes.items() if v is not None}
        if not changes:
            return self
        return replace(self, **changes)

    @property
    def resolved_payload_format(self) -> Format:
        return self.payload_format or self.format

    @property
    def resolved_payload_serializer(self) -> SerializerKind:
        return self.payload_serializer or self.serializer


DEFAULT_OPTIONS = RequestOptions()
