import json
from dataclasses import dataclass

import httpx
import pytest

from globalhttp.errors import HTTPStatusError, SerializationError, TransportError
from globalhttp.http import verbs
from globalhttp.http.client import HTTPClient, HTTPRequest, HTTPResponse
from globalhttp.http.verbs import Delete, Get, Http, Post, Put
from globalhttp.models import Parameter, Result
from globalhttp.serialization import Format, SerializerKind, encode


@dataclass
class User:
    name: str
    admin: bool = False


def ok_result(value=42) -> Result:
    return Result(code="OK", successful=True, message="done",
                  parameters=[Parameter("a", "1")], value=value)


def test_get_returns_raw_text(server, client):
    server.respond("pong", content_type="text/plain; charset=utf-8")

    assert Get("https://api.example.com/v1/ping", client=client).do() == "pong"
    assert server.last.method == "GET"
    assert server.last.headers["accept"] == "*/*"


def test_builder_uses_configured_base_url(server, client):
    server.respond("ok", content_type="text/plain")

    get = Get(lambda b: b.path("users", 42).query("expand", "groups"), client=client)
    get.do()

    assert get.url == "https://api.example.com/v1/users/42?expand=groups"
    assert str(server.last.url) == get.url


def test_get_typed_response(server, client):
    server.respond(encode(ok_result()))

    result = Get("https://api.example.com/v1/result", client=client).do(returns=Result[int])

    assert result == ok_result()
    assert server.last.headers["accept"] == "application/xml"


def test_put_typed_payload_and_response(server, client):
    server.respond(encode(ok_result()))
    user = User("alice", admin=True)

    result = Put("https://api.example.com/v1/users/1", client=client).do(user, returns=Result[int])

    request = server.last
    assert result.successful is True
    assert request.method == "PUT"
    assert request.headers["content-type"] == "application/xml; charset=utf-8"
    assert request.content == encode(user)
    assert b"<User><name>alice</name><admin>true</admin></User>" in request.content


def test_put_string_payload_is_verbatim(server, client):
    server.respond("stored", content_type="text/plain")

    text = Put("https://api.example.com/v1/raw", client=client, format="json").do('{"raw": true}')

    assert text == "stored"
    assert server.last.content == b'{"raw": true}'
    assert server.last.headers["content-type"] == "application/json; charset=utf-8"


def test_post_json_round_trip(server, client):
    server.respond(encode(ok_result(), Format.JSON), content_type="application/json")

    post = Post("https://api.example.com/v1/users", client=client, format=Format.JSON)
    result = post.do(User("bob"), returns=Result[int])

    assert result == ok_result()
    assert json.loads(server.last.content) == {"name": "bob", "admin": False}
    assert server.last.headers["accept"] == "application/json"


def test_payload_and_response_options_are_independent(server, client):
    server.respond(encode(ok_result(), Format.XML, SerializerKind.REFLECTION))

    result = Put("https://api.example.com/v1/users/1", client=client).do(
        User("carol"),
        returns=Result[int],
        serializer="reflection",
        payload_format="json",
        payload_serializer="contract",
        payload_encoding="utf-16",
    )

    assert result == ok_result()
    assert server.last.headers["content-type"] == "application/json; charset=utf-16"
    assert json.loads(server.last.content.decode("utf-16")) == {"name": "carol", "admin": False}


def test_call_overrides_beat_facade_defaults(server, client):
    server.respond(encode(ok_result(), Format.JSON), content_type="application/json")

    get = Get("https://api.example.com/v1/result", client=client, format="xml")
    result = get.do(returns=Result[int], format="json")

    assert result == ok_result()
    assert get.options.format is Format.XML


def test_config_defaults_apply(server, client, config):
    config.defaults = config.defaults.override(format="json")
    server.respond(encode(ok_result(), Format.JSON), content_type="application/json")

    assert Get("https://api.example.com/v1/result", client=client).do(returns=Result[int]) == ok_result()


def test_delete_sends_no_body(server, client):
    server.respond("", content_type="text/plain")

    assert Delete("https://api.example.com/v1/users/1", client=client).do() == ""
    assert server.last.method == "DELETE"
    assert server.last.content == b""
    assert "content-type" not in server.last.headers


def test_set_header_is_sent_and_overrides_accept(server, client):
    server.respond(encode(ok_result()))
    get = Get("https://api.example.com/v1/result", client=client)
    get.set_header("X-Trace", "abc")
    get.set_header("Accept", "text/xml")

    result = get.do(returns=Result[int])

    assert result.get_parameter("a") == "1"
    assert result.get_parameter("missing") is None
    assert server.last.headers["x-trace"] == "abc"
    assert server.last.headers["accept"] == "text/xml"


def test_generic_method(server, client):
    server.respond("patched", content_type="text/plain")

    http = Http("https://api.example.com/v1/users/1", method="patch", client=client)
    http.set_payload("<User><admin>true</admin></User>")

    assert http.do_request() == "patched"
    assert server.last.method == "PATCH"


def test_last_payload_wins_and_is_consumed(server, client):
    server.respond("ok", content_type="text/plain")
    put = Put("https://api.example.com/v1/items", client=client)

    put.set_payload("first")
    put.set_payload("second")
    put.do_request()
    put.do_request()

    assert server.requests[0].content == b"second"
    assert server.requests[1].content == b""


def test_unknown_option_is_rejected(client):
    with pytest.raises(TypeError):
        Get("https://api.example.com/v1/x", client=client).do(timeout=3)


def test_status_error(server, client):
    server.respond("boom", content_type="text/plain", status_code=500)

    with pytest.raises(HTTPStatusError) as excinfo:
        Get("https://api.example.com/v1/fail", client=client).do()

    assert excinfo.value.status_code == 500
    assert excinfo.value.response.body == "boom"


def test_status_error_can_be_disabled(server, config):
    config.raise_for_status = False
    server.respond("missing", content_type="text/plain", status_code=404)

    with HTTPClient(config, transport=httpx.MockTransport(server.handler)) as client:
        assert Get("https://api.example.com/v1/nothing", client=client).do() == "missing"


def test_transport_error(server, client):
    server.error = httpx.ConnectError("connection refused")

    with pytest.raises(TransportError, match="Connection failed") as excinfo:
        Get("https://api.example.com/v1/x", client=client).do()

    assert excinfo.value.url == "https://api.example.com/v1/x"


def test_timeout_error(server, client):
    server.error = httpx.ReadTimeout("slow")

    with pytest.raises(TransportError, match="timed out"):
        Get("https://api.example.com/v1/x", client=client).do()


def test_decode_failure_is_not_partial(server, client):
    server.respond('{"code": "OK"}', content_type="application/json")

    with pytest.raises(SerializationError):
        Get("https://api.example.com/v1/x", client=client).do(returns=Result[int])


def test_serialization_failure_sends_nothing(server, client):
    @dataclass
    class Labels:
        values: dict

    with pytest.raises(SerializationError):
        Put("https://api.example.com/v1/x", client=client).do(Labels({"a": "b"}))

    assert server.requests == []


class TrackingClient(HTTPClient):
    instances: list["TrackingClient"] = []
    transport: httpx.BaseTransport | None = None

    def __init__(self, config=None, transport=None):
        super().__init__(config, transport=TrackingClient.transport)
        self.closed = False
        TrackingClient.instances.append(self)

    def close(self):
        super().close()
        self.closed = True


@pytest.mark.parametrize("status_code", [200, 503])
def test_client_per_call_is_closed(monkeypatch, server, status_code):
    server.respond("done", content_type="text/plain", status_code=status_code)
    TrackingClient.transport = httpx.MockTransport(server.handler)
    TrackingClient.instances = []
    monkeypatch.setattr(verbs, "HTTPClient", TrackingClient)

    if status_code >= 400:
        with pytest.raises(HTTPStatusError):
            Get("https://api.example.com/v1/x").do()
    else:
        assert Get("https://api.example.com/v1/x").do() == "done"

    assert len(TrackingClient.instances) == 1
    assert TrackingClient.instances[0].closed is True


def test_request_descriptor_is_read_only():
    request = HTTPRequest("get", "https://api.example.com", headers={"X-Test": "1"})

    assert request.method == "GET"
    with pytest.raises(TypeError):
        request.headers["X-Test"] = "2"


@pytest.mark.parametrize("status_code, client_error, server_error", [
    (200, False, False),
    (404, True, False),
    (502, False, True),
])
def test_response_status_classes(status_code, client_error, server_error):
    response = HTTPResponse(status_code, "", {}, "", b"", 1.0)

    assert response.is_client_error is client_error
    assert response.is_server_error is server_error
