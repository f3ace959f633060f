from __future__ import annotations

from datetime import datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping

from .attributes import Attributes
from .extensions import ExtensionValue
from .spec_version import SpecVersion

if TYPE_CHECKING:
    from .format.event_format import EventFormat
    from .message.binary import BaseBinaryMessage
    from .message.structured import BaseStructuredMessage


def as_data(value: Any) -> bytes | None:
    """Copy an event payload to ``bytes``; other types, ints included, are rejected."""
    if value is None:
        return None
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"data must be bytes, got {type(value).__name__}")
    return bytes(value)


def _typed(extensions: Mapping[str, Any]) -> dict[str, tuple[bool, Any]]:
    # True == 1 in Python, a boolean extension must not equal a numeric one
    return {name: (isinstance(value, bool), value) for name, value in extensions.items()}


class CloudEvent:
    """An immutable CloudEvent: attributes, extensions and an opaque payload.

    Instances are normally created through a builder (see
    :class:`~cloudevents_envelope.builder.CloudEventBuilder`) or by turning a
    message back into an event. Equality is structural.
    """

    __slots__ = ("_attributes", "_data", "_extensions")

    def __init__(self,
                 attributes: Attributes,
                 data: bytes | None = None,
                 extensions: Mapping[str, ExtensionValue] | None = None) -> None:
        if not isinstance(attributes, Attributes):
            raise TypeError(f"attributes must be an Attributes instance, got {type(attributes).__name__}")
        self._attributes = attributes
        self._data: bytes | None = as_data(data)
        self._extensions: Mapping[str, ExtensionValue] = MappingProxyType(dict(extensions or {}))

    @property
    def attributes(self) -> Attributes:
        return self._attributes

    @property
    def data(self) -> bytes | None:
        return self._data

    @property
    def extensions(self) -> Mapping[str, ExtensionValue]:
        return self._extensions

    @property
    def specversion(self) -> SpecVersion:
        return self._attributes.spec_version

    @property
    def id(self) -> str:
        return self._attributes.id

    @property
    def type(self) -> str:
        return self._attributes.type

    @property
    def source(self) -> str:
        return self._attributes.source

    @property
    def datacontenttype(self) -> str | None:
        return self._attributes.datacontenttype

    @property
    def dataschema(self) -> str | None:
        """The data schema URI (``schemaurl`` on 0.3 events)."""
        return self._attributes.data_schema

    @property
    def subject(self) -> str | None:
        return self._attributes.subject

    @property
    def time(self) -> datetime | None:
        return self._attributes.time

    def get_attribute(self, name: str) -> Any:
        """Generic attribute lookup.

        Raises:
            UnsupportedAttributeError: If ``name`` is not a context attribute
                of this event's spec version. Extension lookup goes through
                :meth:`get_extension`.
        """
        return self._attributes.get_attribute(name)

    def attribute_names(self) -> list[str]:
        return self._attributes.attribute_names()

    def get_extension(self, name: str) -> ExtensionValue | None:
        return self._extensions.get(name)

    def extension_names(self) -> frozenset[str]:
        return frozenset(self._extensions)

    def as_binary_message(self) -> BaseBinaryMessage:
        from .message.event_message import EventBinaryMessage

        return EventBinaryMessage(self)

    def as_structured_message(self, format: EventFormat) -> BaseStructuredMessage:
        from .message.event_message import EventStructuredMessage

        return EventStructuredMessage(self, format)

    def to_v03(self) -> CloudEvent:
        return CloudEvent(self._attributes.to_v03(), self._data, self._extensions)

    def to_v1(self) -> CloudEvent:
        return CloudEvent(self._attributes.to_v1(), self._data, self._extensions)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, CloudEvent):
            return NotImplemented
        return (self._attributes == other._attributes
                and self._data == other._data
                and _typed(self._extensions) == _typed(other._extensions))

    def __hash__(self) -> int:
        return hash((self._attributes, self._data, frozenset(self._extensions.items())))

    def __repr__(self) -> str:
        data = ""
        if self._data is not None:
            data = f", data={self._data.decode('utf-8', errors='replace')}"
        return f"CloudEvent(attributes={self._attributes!r}{data}, extensions={dict(self._extensions)})"
