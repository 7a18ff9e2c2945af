"""
Result envelope returned by services that wrap their payload.
"""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from globalhttp.serialization.schema import (
    data_contract,
    member,
    xml_element,
    xml_root,
)

T = TypeVar("T")


@data_contract(name="parameter")
@xml_root(name="parameter")
@dataclass
class Parameter:
    """A key/value pair attached to a result."""
    key: str = field(default="", metadata=member("key") | xml_element("key"))
    value: str = field(default="", metadata=member("value") | xml_element("value"))


@data_contract(name="result")
@xml_root(name="result")
@dataclass
class Result(Generic[T]):
    """
    Service response envelope.

    Contract form wraps parameters in a ``<parameters>`` element; reflection
    form writes one ``<parameter>`` element per entry.
    """
    code: str | None = field(default=None, metadata=member("code") | xml_element("code"))
    successful: bool = field(default=False, metadata=member("successful") | xml_element("successful"))
    message: str | None = field(default=None, metadata=member("message") | xml_element("message"))
    detailed_message: str | None = field(
        default=None,
        metadata=member("detailedmessage") | xml_element("detailedmessage"),
    )
    parameters: list[Parameter] = field(
        default_factory=list,
        metadata=member("parameters") | xml_element("parameter"),
    )
    value: T | None = field(default=None, metadata=member("value") | xml_element("value"))

    def get_parameter(self, key: str) -> str | None:
        for parameter in self.parameters:
            if parameter.key == key:
                return parameter.value
        return None
