"""
HTTP request pipeline.

Provides:
- Verb facades (Get, Put, Post, Delete) with one options object per call
- Payload preparation from strings, bytes or dataclasses
- Typed response interpretation
- A blocking httpx-based executor
"""

from globalhttp.http.client import (
    HTTPClient,
    HTTPRequest,
    HTTPResponse,
)
from globalhttp.http.payload import PreparedPayload, prepare_payload
from globalhttp.http.response import interpret
from globalhttp.http.url import UrlBuilder
from globalhttp.http.verbs import Delete, Get, Http, Post, Put

__all__ = [
    "Delete",
    "Get",
    "HTTPClient",
    "HTTPRequest",
    "HTTPResponse",
    "Http",
    "Post",
    "PreparedPayload",
    "Put",
    "UrlBuilder",
    "interpret",
    "prepare_payload",
]
