"""Registry of structured event formats keyed by media type."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from .event_format import EventFormat, normalize_media_type
from .json_format import JsonFormat

logger = logging.getLogger(__name__)


class EventFormatProvider:
    """Thread-safe lookup of :class:`EventFormat` instances by content type.

    Content types are matched without their parameters and case, so
    ``application/cloudevents+json; charset=utf-8`` resolves to the format
    registered for ``application/cloudevents+json``.
    """

    _default: Optional[EventFormatProvider] = None
    _default_lock = threading.Lock()

    def __init__(self) -> None:
        self._formats: dict[str, EventFormat] = {}
        self._lock = threading.RLock()

    @classmethod
    def default(cls) -> EventFormatProvider:
        """Process-wide registry with the JSON format registered."""
        with cls._default_lock:
            if cls._default is None:
                provider = cls()
                provider.register(JsonFormat())
                cls._default = provider
            return cls._default

    def register(self, event_format: EventFormat) -> None:
        """Register ``event_format`` for every content type it can read.

        A later registration for the same content type replaces the earlier one.
        """
        with self._lock:
            for content_type in event_format.deserializable_content_types():
                key = normalize_media_type(content_type)
                if key in self._formats:
                    logger.warning(f"Replacing event format registered for {key}")
                self._formats[key] = event_format
                logger.debug(f"Registered event format {event_format!r} for {key}")

    def resolve(self, content_type: str | None) -> EventFormat | None:
        """Return the format for ``content_type``, or ``None`` if there is none."""
        if not content_type:
            return None
        with self._lock:
            return self._formats.get(normalize_media_type(content_type))

    def media_types(self) -> list[str]:
        with self._lock:
            return sorted(self._formats)
