"""
Exception hierarchy for GlobalHTTP.
"""

from typing import Any


class GlobalHTTPError(Exception):
    """Base exception for GlobalHTTP errors."""
    pass


class SerializationError(GlobalHTTPError):
    """A document does not match the shape expected for the target type."""
    pass


class UnsupportedCombinationError(SerializationError):
    """Serialization options that cannot be used together."""
    pass


class TransportError(GlobalHTTPError):
    """The request could not be completed by the transport."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class HTTPStatusError(TransportError):
    """The server answered with a 4xx or 5xx status."""

    def __init__(self, message: str, url: str | None = None, response: Any = None):
        super().__init__(message, url=url)
        self.response = response

    @property
    def status_code(self) -> int | None:
        return self.response.status_code if self.response is not None else None
