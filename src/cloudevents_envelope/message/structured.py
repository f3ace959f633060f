from __future__ import annotations

import logging
from typing import Any, Dict

from .binary import GenericBinaryMessage
from .encoding import Encoding
from .message import Message, R
from ..errors import CloudEventError, IllegalStateError, MessageVisitError
from ..event import CloudEvent
from ..format.event_format import EventFormat
from ..visitor import (
    AttributesVisitor,
    BinaryMessageVisitorFactory,
    ExtensionsVisitor,
    StructuredMessageVisitor,
)

logger = logging.getLogger(__name__)


def deserialize_payload(format: EventFormat, payload: bytes) -> Dict[str, Any]:
    """Run ``format.deserialize``, reporting foreign codec failures as ``MessageVisitError``."""
    try:
        return format.deserialize(payload)
    except CloudEventError:
        raise
    except Exception as e:
        logger.error(f"Format {format.media_type} failed to deserialize event: {e}")
        raise MessageVisitError(f"Failed to deserialize event with {format.media_type}: {e}") from e


class _StructuredEventReader:
    """Structured visitor that parses the payload and folds it into an event."""

    def set_event(self, format: EventFormat, payload: bytes) -> CloudEvent:
        return GenericBinaryMessage.from_structured(deserialize_payload(format, payload)).to_event()


class BaseStructuredMessage(Message):
    """A message carrying the whole event as one payload serialized by a format."""

    @property
    def encoding(self) -> Encoding:
        return Encoding.STRUCTURED

    def visit(self, factory: BinaryMessageVisitorFactory[R]) -> R:
        raise IllegalStateError("This is a structured message, it cannot be visited as a binary message")

    def visit_attributes(self, visitor: AttributesVisitor) -> None:
        raise IllegalStateError("This is a structured message, it cannot be visited as a binary message")

    def visit_extensions(self, visitor: ExtensionsVisitor) -> None:
        raise IllegalStateError("This is a structured message, it cannot be visited as a binary message")

    def to_event(self) -> CloudEvent:
        return self.visit_structured(_StructuredEventReader())


class GenericStructuredMessage(BaseStructuredMessage):
    def __init__(self, format: EventFormat, payload: bytes) -> None:
        self._format = format
        self._payload = bytes(payload)

    @property
    def format(self) -> EventFormat:
        return self._format

    @property
    def payload(self) -> bytes:
        return self._payload

    def visit_structured(self, visitor: StructuredMessageVisitor[R]) -> R:
        return visitor.set_event(self._format, self._payload)
