"""
HTTP request executor.

Sends one buffered request and returns one buffered response. Transport
failures surface as ``TransportError``; nothing is retried here.
"""

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

import httpx

from globalhttp.config import ClientConfig, get_config
from globalhttp.errors import HTTPStatusError, TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HTTPRequest:
    """Request descriptor, consumed once by ``HTTPClient.execute``."""
    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = None

    def __post_init__(self):
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))


@dataclass
class HTTPResponse:
    """HTTP response details."""
    status_code: int
    status_text: str
    headers: dict[str, str]
    body: str
    body_bytes: bytes
    elapsed_ms: float
    content_type: str | None = None
    encoding: str | None = None

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_redirect(self) -> bool:
        return 300 <= self.status_code < 400

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self.status_code < 600

    @property
    def is_json(self) -> bool:
        ct = self.content_type or ""
        return "json" in ct.lower()

    @property
    def is_xml(self) -> bool:
        ct = self.content_type or ""
        return "xml" in ct.lower()


class HTTPClient:
    """
    Blocking HTTP client built on httpx.

    Usage:
        with HTTPClient() as client:
            response = client.execute(HTTPRequest("GET", "https://example.com/items"))
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.config = config or get_config()
        self.transport = transport
        self._client: httpx.Client | None = None

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _get_client(self) -> httpx.Client:
        """Get or create the underlying httpx client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                timeout=httpx.Timeout(self.config.timeout),
                verify=self.config.verify_ssl,
                follow_redirects=self.config.follow_redirects,
                headers={"User-Agent": self.config.user_agent},
                transport=self.transport,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            self._client.close()

    def execute(self, req: HTTPRequest) -> HTTPResponse:
        """Send a request and buffer the whole response."""
        log_context = {"method": req.method, "url": req.url}
        logger.debug("%s %s (%d body bytes)", req.method, req.url,
                     len(req.body or b""), extra=log_context)

        client = self._get_client()
        start_time = time.time()
        try:
            response = client.request(
                method=req.method,
                url=req.url,
                headers=dict(req.headers),
                content=req.body,
            )
        except httpx.TimeoutException as e:
            logger.warning("Request timed out: %s %s", req.method, req.url, extra=log_context)
            raise TransportError(
                f"Request timed out after {self.config.timeout}s", url=req.url
            ) from e
        except httpx.ConnectError as e:
            logger.warning("Connection failed: %s", e, extra=log_context)
            raise TransportError(f"Connection failed: {e}", url=req.url) from e
        except httpx.HTTPError as e:
            logger.warning("Transport error: %s", e, extra=log_context)
            raise TransportError(str(e), url=req.url) from e

        elapsed_ms = (time.time() - start_time) * 1000
        http_response = HTTPResponse(
            status_code=response.status_code,
            status_text=response.reason_phrase,
            headers=dict(response.headers),
            body=response.text,
            body_bytes=response.content,
            elapsed_ms=elapsed_ms,
            content_type=response.headers.get("content-type"),
            encoding=response.encoding,
        )
        logger.debug("%s %s -> %d (%d bytes, %.1f ms)", req.method, req.url,
                     http_response.status_code, len(http_response.body_bytes),
                     elapsed_ms, extra=log_context)

        if self.config.raise_for_status and http_response.status_code >= 400:
            logger.warning("%s %s returned %d", req.method, req.url,
                           http_response.status_code, extra=log_context)
            raise HTTPStatusError(
                f"{req.method} {req.url} returned {http_response.status_code} "
                f"{http_response.status_text}",
                url=req.url,
                response=http_response,
            )
        return http_response
