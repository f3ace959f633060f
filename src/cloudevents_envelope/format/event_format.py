from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from ..event import CloudEvent


def normalize_media_type(content_type: str) -> str:
    """Strip parameters and case from a content type: ``Application/X+JSON; charset=utf-8`` -> ``application/x+json``."""
    return content_type.split(";", 1)[0].strip().lower()


class EventFormat(ABC):
    """A structured-mode codec identified by its media type.

    Implementations turn a whole event into one payload and back. The
    deserialized form is a plain dictionary keyed by unprefixed attribute
    and extension names, with the payload under ``data`` as ``bytes`` (or a
    UTF-8 ``str``); the message layer folds it into an event.
    """

    @property
    @abstractmethod
    def media_type(self) -> str:
        """The media type this format writes, e.g. ``application/cloudevents+json``."""

    def deserializable_content_types(self) -> set[str]:
        """Every content type this format can read."""
        return {normalize_media_type(self.media_type)}

    @abstractmethod
    def serialize(self, event: CloudEvent) -> bytes:
        """Serialize ``event``.

        Raises:
            EventSerializationError: If the event cannot be represented.
        """

    @abstractmethod
    def deserialize(self, payload: bytes) -> Dict[str, Any]:
        """Parse ``payload`` into a structured key/value map.

        Raises:
            EventDeserializationError: If the payload is malformed.
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(media_type={self.media_type})"
