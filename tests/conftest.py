"""
Pytest configuration and shared fixtures for GlobalHTTP tests.
"""

import logging

import httpx
import pytest

from globalhttp.config import ClientConfig, set_config
from globalhttp.http.client import HTTPClient


BASE_URL = "https://api.example.com/v1"


class MockServer:
    """Records requests and answers with a canned response."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body = b""
        self.content_type = "application/xml; charset=utf-8"
        self.error: Exception | None = None

    def respond(self, body: bytes | str, content_type: str | None = None, status_code: int = 200):
        self.body = body.encode("utf-8") if isinstance(body, str) else body
        if content_type:
            self.content_type = content_type
        self.status_code = status_code

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(
            self.status_code,
            content=self.body,
            headers={"Content-Type": self.content_type},
        )

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture(autouse=True)
def config():
    """Install a predictable global configuration for every test."""
    config = ClientConfig(base_url=BASE_URL)
    set_config(config)
    yield config
    set_config(None)


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo handlers installed by the CLI during a test."""
    logger = logging.getLogger("globalhttp")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def server() -> MockServer:
    return MockServer()


@pytest.fixture
def client(server, config):
    with HTTPClient(config, transport=httpx.MockTransport(server.handler)) as http_client:
        yield http_client
