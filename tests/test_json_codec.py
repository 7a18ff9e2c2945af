import json
from dataclasses import dataclass, field

import pytest

from globalhttp.errors import SerializationError, UnsupportedCombinationError
from globalhttp.models import Parameter, Result
from globalhttp.serialization import (
    DocType,
    Format,
    SerializerKind,
    decode,
    encode,
    serialize_to_string,
)

CONTRACT = SerializerKind.CONTRACT
REFLECTION = SerializerKind.REFLECTION


@dataclass
class Route:
    prefix: str
    next_hop: str | None = None
    metrics: dict[str, int] = field(default_factory=dict)


def sample_result() -> Result[int]:
    return Result(
        code="OK",
        successful=True,
        message="done",
        detailed_message="all good",
        parameters=[Parameter("a", "1")],
        value=42,
    )


@pytest.mark.parametrize("kind", [CONTRACT, REFLECTION])
def test_result_round_trip(kind):
    original = sample_result()

    decoded = decode(encode(original, Format.JSON, kind), Result[int], Format.JSON, kind)

    assert decoded == original


def test_contract_uses_member_names():
    document = json.loads(encode(sample_result(), Format.JSON, CONTRACT))

    assert document == {
        "code": "OK",
        "successful": True,
        "message": "done",
        "detailedmessage": "all good",
        "parameters": [{"key": "a", "value": "1"}],
        "value": 42,
    }


def test_reflection_uses_field_names():
    document = json.loads(encode(sample_result(), Format.JSON, REFLECTION))

    assert document["detailed_message"] == "all good"
    assert "detailedmessage" not in document


def test_none_members_are_omitted():
    document = json.loads(encode(Result(code="OK"), Format.JSON, CONTRACT))

    assert "message" not in document
    assert document["parameters"] == []


def test_mappings_round_trip():
    route = Route("10.0.0.0/8", metrics={"ospf": 10, "bgp": 20})

    assert decode(encode(route, Format.JSON), Route, Format.JSON) == route


@pytest.mark.parametrize("kind", [CONTRACT, REFLECTION])
def test_empty_collections_round_trip(kind):
    original = Result(code="OK", parameters=[], value=[])

    assert decode(encode([], Format.JSON, kind), list[Parameter], Format.JSON, kind) == []
    assert decode(encode(original, Format.JSON, kind), Result[list[int]], Format.JSON, kind) == original


@pytest.mark.parametrize("kind", [CONTRACT, REFLECTION])
def test_unparameterized_generic_keeps_raw_value(kind):
    decoded = decode(encode(sample_result(), Format.JSON, kind), Result, Format.JSON, kind)

    assert decoded.parameters == [Parameter("a", "1")]
    assert decoded.value == 42


@pytest.mark.parametrize("kind", [CONTRACT, REFLECTION])
def test_absent_optional_member_round_trip(kind):
    route = Route("10.0.0.0/8")

    assert decode(encode(route, Format.JSON, kind), Route, Format.JSON, kind) == route


def test_xml_document_fails_as_json():
    with pytest.raises(SerializationError, match="Malformed JSON"):
        decode("<result><code>OK</code></result>", Result[int], Format.JSON, CONTRACT)


def test_wrong_shape():
    with pytest.raises(SerializationError, match="expected an object"):
        decode("[1, 2]", Result[int], Format.JSON, CONTRACT)


def test_wrong_scalar():
    with pytest.raises(SerializationError, match="successful"):
        decode('{"successful": "maybe"}', Result[int], Format.JSON, CONTRACT)


def test_boolean_is_not_an_integer():
    with pytest.raises(SerializationError):
        decode('{"value": true}', Result[int], Format.JSON, CONTRACT)


def test_missing_required_key():
    with pytest.raises(SerializationError, match="prefix"):
        decode('{"next_hop": "192.0.2.1"}', Route, Format.JSON)


def test_doctype_is_xml_only():
    with pytest.raises(UnsupportedCombinationError):
        encode(sample_result(), Format.JSON, doctype=DocType("result"))


def test_non_ascii_text():
    text = serialize_to_string(Result(message="größe"), Format.JSON)

    assert "größe" in text
