"""Builders for :class:`~cloudevents_envelope.event.CloudEvent`.

A builder is both the fluent API used to create events by hand and the
:class:`~cloudevents_envelope.visitor.BinaryMessageVisitor` every message
feeds when it is turned back into an event. The concrete builder class is
picked from the spec version of the message through a lookup table, so the
reconstruction code never needs to know the version upfront.

Builders are single use: once :meth:`BaseCloudEventBuilder.build` (or
:meth:`BaseCloudEventBuilder.end`) has returned, every further call raises
``IllegalStateError``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, ClassVar

from pydantic import AwareDatetime, TypeAdapter, ValidationError

from .attributes import Attributes, AttributesV03, AttributesV1
from .errors import IllegalStateError, InvalidAttributeError
from .event import CloudEvent, as_data
from .extensions import ExtensionValue, extension_kind, validate_extension_name
from .spec_version import (
    DATACONTENTTYPE,
    ID,
    SOURCE,
    SPECVERSION,
    SUBJECT,
    TIME,
    TYPE,
    SpecVersion,
)
from .visitor import AttributeValue, Number

logger = logging.getLogger(__name__)

_TIME_ADAPTER = TypeAdapter(AwareDatetime)


def _decode_time(value: datetime | str) -> datetime:
    try:
        return _TIME_ADAPTER.validate_python(value)
    except ValidationError as e:
        raise InvalidAttributeError(f"Invalid time attribute {value!r}: {e}") from e


class BaseCloudEventBuilder(ABC):
    spec_version: ClassVar[SpecVersion]
    attributes_type: ClassVar[type[Attributes]]

    def __init__(self, event: CloudEvent | None = None) -> None:
        self._attributes: dict[str, Any] = {}
        self._data: bytes | None = None
        self._extensions: dict[str, ExtensionValue] = {}
        self._done = False

        if event is not None:
            attributes = self._migrate(event.attributes)
            self._attributes = {
                name: value
                for name, value in attributes.model_dump().items()
                if value is not None
            }
            self._data = event.data
            for name, value in event.extensions.items():
                self._put_extension(name, value)

    @abstractmethod
    def _migrate(self, attributes: Attributes) -> Attributes:
        """Convert ``attributes`` to the version this builder produces."""

    def _ensure_open(self) -> None:
        if self._done:
            raise IllegalStateError(
                f"{self.__class__.__name__} has already built its event and cannot be reused"
            )

    def _put_attribute(self, name: str, value: Any) -> None:
        self._ensure_open()
        if value is None:
            self._attributes.pop(name, None)
        else:
            self._attributes[name] = value

    def _put_extension(self, name: str, value: Any) -> None:
        self._ensure_open()
        validate_extension_name(name)
        extension_kind(name, value)
        self._extensions[name] = value

    # Fluent API

    def with_id(self, id: str) -> BaseCloudEventBuilder:
        self._put_attribute(ID, id)
        return self

    def with_source(self, source: str) -> BaseCloudEventBuilder:
        self._put_attribute(SOURCE, source)
        return self

    def with_type(self, type: str) -> BaseCloudEventBuilder:
        self._put_attribute(TYPE, type)
        return self

    def with_data_content_type(self, content_type: str | None) -> BaseCloudEventBuilder:
        self._put_attribute(DATACONTENTTYPE, content_type)
        return self

    def with_data_schema(self, data_schema: str | None) -> BaseCloudEventBuilder:
        """Set the data schema URI under the name this spec version uses for it."""
        self._put_attribute(self.spec_version.schema_attribute, data_schema)
        return self

    def with_subject(self, subject: str | None) -> BaseCloudEventBuilder:
        self._put_attribute(SUBJECT, subject)
        return self

    def with_time(self, time: datetime | str | None) -> BaseCloudEventBuilder:
        self._put_attribute(TIME, None if time is None else _decode_time(time))
        return self

    def with_data(
        self,
        data: bytes | None,
        *,
        content_type: str | None = None,
        data_schema: str | None = None,
    ) -> BaseCloudEventBuilder:
        """Set the payload, optionally together with its content type and schema."""
        self._ensure_open()
        if content_type is not None:
            self.with_data_content_type(content_type)
        if data_schema is not None:
            self.with_data_schema(data_schema)
        self._data = as_data(data)
        return self

    def with_extension(self, name: str, value: ExtensionValue) -> BaseCloudEventBuilder:
        """Attach an extension.

        Raises:
            InvalidAttributeError: If ``name`` is not a valid extension name.
            UnsupportedExtensionValueError: If ``value`` is not a string,
                number or boolean.
        """
        self._put_extension(name, value)
        return self

    def build(self) -> CloudEvent:
        """Create the event and close this builder.

        Raises:
            InvalidAttributeError: If a required attribute is missing or a
                value is malformed.
        """
        self._ensure_open()
        try:
            attributes = self.attributes_type(**self._attributes)
        except ValidationError as e:
            logger.error(f"Cannot build {self.spec_version.value} event from {self._attributes}: {e}")
            raise InvalidAttributeError(f"Invalid CloudEvent attributes: {e}") from e
        self._done = True
        return CloudEvent(attributes, self._data, self._extensions)

    # BinaryMessageVisitor

    def set_attribute(self, name: str, value: AttributeValue) -> None:
        """Store an attribute received from a message, decoding its type."""
        if name == SPECVERSION or name not in self.spec_version.all_attributes:
            raise InvalidAttributeError(
                f"Invalid attribute name for spec version {self.spec_version.value}: {name!r}"
            )
        if name == TIME:
            self._put_attribute(name, _decode_time(value))
            return
        if not isinstance(value, str):
            raise InvalidAttributeError(f"Attribute {name} must be a string, got {value!r}")
        self._put_attribute(name, value)

    def set_extension_string(self, name: str, value: str) -> None:
        self._put_extension(name, value)

    def set_extension_number(self, name: str, value: Number) -> None:
        self._put_extension(name, value)

    def set_extension_boolean(self, name: str, value: bool) -> None:
        self._put_extension(name, value)

    def set_body(self, value: bytes) -> None:
        self._ensure_open()
        self._data = as_data(value)

    def end(self) -> CloudEvent:
        return self.build()


class CloudEventBuilderV03(BaseCloudEventBuilder):
    spec_version = SpecVersion.V03
    attributes_type = AttributesV03

    def _migrate(self, attributes: Attributes) -> Attributes:
        return attributes.to_v03()


class CloudEventBuilderV1(BaseCloudEventBuilder):
    spec_version = SpecVersion.V1
    attributes_type = AttributesV1

    def _migrate(self, attributes: Attributes) -> Attributes:
        return attributes.to_v1()


_BUILDERS: dict[SpecVersion, type[BaseCloudEventBuilder]] = {
    SpecVersion.V03: CloudEventBuilderV03,
    SpecVersion.V1: CloudEventBuilderV1,
}


class CloudEventBuilder:
    """Entry points for creating builders."""

    @staticmethod
    def v03(event: CloudEvent | None = None) -> CloudEventBuilderV03:
        return CloudEventBuilderV03(event)

    @staticmethod
    def v1(event: CloudEvent | None = None) -> CloudEventBuilderV1:
        return CloudEventBuilderV1(event)

    @staticmethod
    def from_spec_version(spec_version: SpecVersion | str) -> BaseCloudEventBuilder:
        """Create an empty builder for ``spec_version``.

        Raises:
            UnrecognizedSpecVersionError: If the version is not 0.3 or 1.0.
        """
        version = SpecVersion.parse(spec_version)
        builder_type = _BUILDERS[version]
        logger.debug(f"Resolved builder {builder_type.__name__} for spec version {version.value}")
        return builder_type()


def default_visitor_factory(spec_version: SpecVersion | str) -> BaseCloudEventBuilder:
    """The visitor factory used by ``Message.to_event``."""
    return CloudEventBuilder.from_spec_version(spec_version)
