import pytest

from globalhttp.errors import SerializationError
from globalhttp.http.payload import prepare_payload
from globalhttp.http.response import interpret
from globalhttp.models import Parameter, Result
from globalhttp.serialization import Format, SerializerKind, encode


def sample_result() -> Result[int]:
    return Result(code="OK", successful=True, message="done",
                  parameters=[Parameter("a", "1")], value=42)


class TestPreparePayload:

    def test_string_is_sent_verbatim(self):
        payload = prepare_payload("<anything><at>all</at></anything>")

        assert payload.body == b"<anything><at>all</at></anything>"
        assert payload.content_type == "application/xml; charset=utf-8"

    def test_string_content_type_follows_format(self):
        payload = prepare_payload('{"a": 1}', format=Format.JSON)

        assert payload.body == b'{"a": 1}'
        assert payload.content_type == "application/json; charset=utf-8"

    def test_string_is_transcoded(self):
        payload = prepare_payload("café", encoding="latin-1")

        assert payload.body == b"caf\xe9"
        assert payload.content_type == "application/xml; charset=iso8859-1"

    def test_bytes_pass_through(self):
        payload = prepare_payload(b"\x00\x01", format="json")

        assert payload.body == b"\x00\x01"

    @pytest.mark.parametrize("fmt", [Format.XML, Format.JSON])
    @pytest.mark.parametrize("kind", [SerializerKind.CONTRACT, SerializerKind.REFLECTION])
    def test_typed_payload_uses_codec(self, fmt, kind):
        payload = prepare_payload(sample_result(), format=fmt, serializer=kind)

        assert payload.body == encode(sample_result(), fmt, kind)
        assert payload.content_type.startswith(fmt.media_type)

    def test_defaults_are_xml_contract_utf8(self):
        payload = prepare_payload(sample_result())

        assert payload.body.startswith(b'<?xml version="1.0" encoding="utf-8"?><result>')
        assert b"<parameters>" in payload.body

    def test_missing_payload(self):
        with pytest.raises(ValueError):
            prepare_payload(None)

    def test_unknown_encoding(self):
        with pytest.raises(ValueError, match="Unknown encoding"):
            prepare_payload("x", encoding="no-such-codec")


class TestInterpret:

    @pytest.mark.parametrize("text", ["", "plain text", '{"a": 1}', "<x/>", "ünïcode ✓"])
    def test_passthrough(self, text):
        assert interpret(text) == text
        assert interpret(text.encode("utf-8")) == text

    def test_passthrough_uses_declared_encoding(self):
        assert interpret(b"caf\xe9", encoding="latin-1") == "café"

    def test_typed_xml(self):
        body = encode(sample_result()).decode("utf-8")

        assert interpret(body, Result[int]) == sample_result()

    def test_typed_json_reflection(self):
        body = encode(sample_result(), Format.JSON, SerializerKind.REFLECTION)

        result = interpret(body, Result[int], format="json", serializer="reflection")

        assert result == sample_result()

    def test_mismatch_raises(self):
        with pytest.raises(SerializationError):
            interpret('{"code": "OK"}', Result[int], format=Format.XML)

    def test_truncated_document_raises(self):
        body = encode(sample_result()).decode("utf-8")

        with pytest.raises(SerializationError):
            interpret(body[:-10], Result[int])
