"""Message views over an in-memory :class:`~cloudevents_envelope.event.CloudEvent`."""

from __future__ import annotations

import logging

from .binary import BaseBinaryMessage
from .message import R
from .structured import BaseStructuredMessage
from ..errors import CloudEventError, MessageVisitError
from ..event import CloudEvent
from ..extensions import visit_extensions
from ..format.event_format import EventFormat
from ..spec_version import SpecVersion
from ..visitor import AttributesVisitor, ExtensionsVisitor, StructuredMessageVisitor

logger = logging.getLogger(__name__)


class EventBinaryMessage(BaseBinaryMessage):
    def __init__(self, event: CloudEvent) -> None:
        self._event = event

    @property
    def spec_version(self) -> SpecVersion:
        return self._event.specversion

    @property
    def body(self) -> bytes | None:
        return self._event.data

    def visit_attributes(self, visitor: AttributesVisitor) -> None:
        self._event.attributes.visit_attributes(visitor)

    def visit_extensions(self, visitor: ExtensionsVisitor) -> None:
        visit_extensions(self._event.extensions, visitor)


class EventStructuredMessage(BaseStructuredMessage):
    """Serializes the event with ``format`` each time it is visited."""

    def __init__(self, event: CloudEvent, format: EventFormat) -> None:
        self._event = event
        self._format = format

    @property
    def format(self) -> EventFormat:
        return self._format

    def visit_structured(self, visitor: StructuredMessageVisitor[R]) -> R:
        try:
            payload = self._format.serialize(self._event)
        except CloudEventError:
            raise
        except Exception as e:
            logger.error(f"Format {self._format.media_type} failed to serialize event {self._event.id}: {e}")
            raise MessageVisitError(f"Failed to serialize event with {self._format.media_type}: {e}") from e
        return visitor.set_event(self._format, payload)
