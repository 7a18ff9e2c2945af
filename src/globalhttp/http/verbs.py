"""
Verb facades.

Each facade fixes the HTTP method and runs the pipeline
payload -> request -> response for one call::

    users = Get(lambda b: b.path("users"), format="json").do(returns=list[User])
    result = Put("https://api.example.com/users/42").do(user, returns=Result[int])
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from globalhttp.config import ClientConfig, get_config
from globalhttp.http.client import HTTPClient, HTTPRequest, HTTPResponse
from globalhttp.http.payload import PreparedPayload, prepare_payload
from globalhttp.http.response import interpret
from globalhttp.http.url import UrlBuilder
from globalhttp.options import RequestOptions
from globalhttp.serialization import registry

logger = logging.getLogger(__name__)

UrlSource = str | Callable[[UrlBuilder], UrlBuilder]


class Http:
    """
    Request helper for an arbitrary method.

    Args:
        url: Literal URL, or a function that receives a ``UrlBuilder``
            seeded with ``config.base_url`` and returns it
        method: HTTP method (subclasses fix it)
        options: Replaces the configured default options
        client: Shared executor; when omitted a client is opened per call
        config: Client configuration (defaults to the global one)
        headers: Extra headers sent with every call
        **defaults: Option overrides for every call made by this facade
    """

    method: str = "GET"

    def __init__(
        self,
        url: UrlSource,
        *,
        method: str | None = None,
        options: RequestOptions | None = None,
        client: HTTPClient | None = None,
        config: ClientConfig | None = None,
        headers: Mapping[str, str] | None = None,
        **defaults: Any,
    ):
        self.config = config or get_config()
        if method:
            self.method = method.upper()
        if callable(url):
            url = url(UrlBuilder(self.config.base_url)).build()
        self.url = url
        self.options = (options or self.config.defaults).override(**defaults)
        self.headers = dict(headers or {})
        self._client = client
        self._payload: PreparedPayload | None = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.url!r})"

    def set_header(self, name: str, value: str) -> None:
        self.headers[name] = value

    def set_payload(self, payload: Any, **overrides: Any) -> PreparedPayload:
        """Prepare the body for the next request; a later call replaces it."""
        options = self.options.override(**overrides)
        self._payload = None
        self._payload = prepare_payload(
            payload,
            format=options.resolved_payload_format,
            encoding=options.payload_encoding,
            serializer=options.resolved_payload_serializer,
        )
        return self._payload

    def do_request(self, returns: Any = None, **overrides: Any) -> Any:
        """Send the request and interpret the response body."""
        options = self.options.override(**overrides)
        headers = dict(self.headers)
        body = None
        if self._payload is not None:
            body = self._payload.body
            headers["Content-Type"] = self._payload.content_type
        if returns is not None:
            headers.setdefault("Accept", registry.content_type(options.format))

        request = HTTPRequest(method=self.method, url=self.url, headers=headers, body=body)
        try:
            response = self._send(request)
        finally:
            self._payload = None

        return interpret(
            response.body,
            returns,
            format=options.format,
            serializer=options.serializer,
        )

    def _send(self, request: HTTPRequest) -> HTTPResponse:
        if self._client is not None:
            return self._client.execute(request)
        with HTTPClient(self.config) as client:
            return client.execute(request)


class Get(Http):
    """GET request helper."""

    method = "GET"

    def do(self, returns: Any = None, **overrides: Any) -> Any:
        return self.do_request(returns, **overrides)


class Delete(Http):
    """DELETE request helper."""

    method = "DELETE"

    def do(self, returns: Any = None, **overrides: Any) -> Any:
        return self.do_request(returns, **overrides)


class Put(Http):
    """PUT request helper."""

    method = "PUT"

    def do(self, payload: Any = None, returns: Any = None, **overrides: Any) -> Any:
        if payload is not None:
            self.set_payload(payload, **overrides)
        return self.do_request(returns, **overrides)


class Post(Http):
    """POST request helper."""

    method = "POST"

    def do(self, payload: Any = None, returns: Any = None, **overrides: Any) -> Any:
        if payload is not None:
            self.set_payload(payload, **overrides)
        return self.do_request(returns, **overrides)
