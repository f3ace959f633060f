"""
Header binding for transports whose headers only carry strings.

Binary mode writes every attribute and extension as a prefixed string header
and keeps the payload as the body. Structured mode writes a single content
type header naming the event format. Reading binary headers back yields
string extensions only: the typed value of an extension does not survive a
header round trip.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Optional, Tuple

from ..attributes import format_time
from ..errors import IllegalStateError, MissingDataError
from ..event import CloudEvent
from ..extensions import extension_to_string
from ..format.event_format import EventFormat
from ..message.binary import GenericBinaryMessage
from ..message.message import Message
from ..message.structured import deserialize_payload
from ..spec_version import DATACONTENTTYPE, SPECVERSION, SpecVersion
from ..visitor import AttributeValue, Number

logger = logging.getLogger(__name__)

KAFKA_HEADER_PREFIX = "ce_"
HTTP_HEADER_PREFIX = "ce-"
CONTENT_TYPE_HEADER = "content-type"

HeaderMessage = Tuple[Dict[str, str], Optional[bytes]]


class HeadersMessageWriter:
    """Binary visitor writing an event into string headers and a body.

    The writer is its own visitor factory: pass it directly to
    ``Message.visit``, which calls it with the spec version of the message.
    ``end()`` returns the ``(headers, body)`` pair. A writer writes one
    message only; create a new one for every event.
    """

    def __init__(self, prefix: str = KAFKA_HEADER_PREFIX, content_type_header: str | None = None) -> None:
        self._prefix = prefix
        self._content_type_header = content_type_header
        self._headers: Dict[str, str] = {}
        self._body: bytes | None = None
        self._started = False
        self._done = False

    def _ensure_open(self) -> None:
        if self._done:
            raise IllegalStateError("HeadersMessageWriter has already written its message and cannot be reused")

    def __call__(self, spec_version: SpecVersion) -> HeadersMessageWriter:
        self._ensure_open()
        if self._started:
            raise IllegalStateError("HeadersMessageWriter is already writing a message")
        self._started = True
        self._headers[self._prefix + SPECVERSION] = SpecVersion.parse(spec_version).value
        return self

    def set_attribute(self, name: str, value: AttributeValue) -> None:
        self._ensure_open()
        if isinstance(value, datetime):
            value = format_time(value)
        if name == DATACONTENTTYPE and self._content_type_header:
            self._headers[self._content_type_header] = str(value)
        else:
            self._headers[self._prefix + name] = str(value)

    def set_extension_string(self, name: str, value: str) -> None:
        self._ensure_open()
        self._headers[self._prefix + name] = value

    def set_extension_number(self, name: str, value: Number) -> None:
        self._ensure_open()
        self._headers[self._prefix + name] = extension_to_string(value)

    def set_extension_boolean(self, name: str, value: bool) -> None:
        self._ensure_open()
        self._headers[self._prefix + name] = extension_to_string(value)

    def set_body(self, value: bytes) -> None:
        self._ensure_open()
        self._body = bytes(value)

    def end(self) -> HeaderMessage:
        self._ensure_open()
        self._done = True
        return dict(self._headers), self._body


class _StructuredHeadersWriter:
    def __init__(self, content_type_header: str) -> None:
        self._content_type_header = content_type_header

    def set_event(self, format: EventFormat, payload: bytes) -> HeaderMessage:
        return {self._content_type_header: format.media_type}, payload


class _StructuredToBinaryWriter:
    def __init__(self, prefix: str, content_type_header: str | None) -> None:
        self._prefix = prefix
        self._content_type_header = content_type_header

    def set_event(self, format: EventFormat, payload: bytes) -> HeaderMessage:
        values = deserialize_payload(format, payload)
        if values.get("data") is None:
            logger.error(f"Structured event {values.get('id')} has no data, cannot convert to binary mode")
            raise MissingDataError("data must not be null")
        message = GenericBinaryMessage.from_structured(values)
        return message.visit(HeadersMessageWriter(self._prefix, self._content_type_header))


def to_binary_headers(event: CloudEvent,
                      *,
                      prefix: str = KAFKA_HEADER_PREFIX,
                      content_type_header: str | None = CONTENT_TYPE_HEADER) -> HeaderMessage:
    """Write ``event`` in binary mode."""
    return event.as_binary_message().visit(HeadersMessageWriter(prefix, content_type_header))


def to_structured_headers(event: CloudEvent,
                          format: EventFormat,
                          *,
                          content_type_header: str = CONTENT_TYPE_HEADER) -> HeaderMessage:
    """Write ``event`` in structured mode with ``format``."""
    return event.as_structured_message(format).visit_structured(_StructuredHeadersWriter(content_type_header))


def structured_to_binary(message: Message,
                         *,
                         prefix: str = KAFKA_HEADER_PREFIX,
                         content_type_header: str | None = CONTENT_TYPE_HEADER) -> HeaderMessage:
    """Re-encode a structured message in binary mode without building an event.

    Raises:
        MissingDataError: If the structured event carries no data.
        IllegalStateError: If ``message`` is not structured.
    """
    return message.visit_structured(_StructuredToBinaryWriter(prefix, content_type_header))

