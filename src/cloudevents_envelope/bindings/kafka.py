"""
Kafka protocol binding.

Attributes and extensions travel as ``ce_`` prefixed record headers in binary
mode, with ``datacontenttype`` in the ``content-type`` header and the event
data as the record value. Structured mode sets ``content-type`` to the media
type of the event format and the serialized event as the record value.

The serializer plugs into ``kstreams`` producers and the deserializer is a
``kstreams`` middleware that replaces the record value with the decoded
:class:`~cloudevents_envelope.event.CloudEvent`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from aiokafka import ConsumerRecord
from kstreams import middleware
from kstreams.serializers import Serializer

from .headers import to_binary_headers, to_structured_headers
from ..config.binding_config import BindingConfig
from ..errors import CloudEventError, IllegalStateError
from ..event import CloudEvent
from ..format.event_format import EventFormat
from ..format.registry import EventFormatProvider
from ..message.discovery import message_from_headers
from ..message.message import Message

logger = logging.getLogger(__name__)

KafkaHeaders = List[Tuple[str, bytes]]


def to_kafka_headers(event: CloudEvent,
                     config: Optional[BindingConfig] = None,
                     *,
                     format: Optional[EventFormat] = None) -> Tuple[KafkaHeaders, Optional[bytes]]:
    """Write ``event`` as Kafka record headers and value.

    Structured mode is used when ``format`` is given or the configuration
    names a structured format, binary mode otherwise.
    """
    config = config or BindingConfig()
    event_format = format or config.event_format()

    if event_format is not None:
        headers, value = to_structured_headers(
            event, event_format, content_type_header=config.content_type_header
        )
    else:
        headers, value = to_binary_headers(
            event, prefix=config.header_prefix, content_type_header=config.content_type_header
        )

    return [(name, header.encode("utf-8")) for name, header in headers.items()], value


def from_kafka_record(headers: Optional[Sequence[Tuple[str, Any]]],
                      value: Optional[bytes],
                      config: Optional[BindingConfig] = None,
                      registry: Optional[EventFormatProvider] = None) -> Message:
    """Wrap the headers and value of a Kafka record in a :class:`Message`."""
    config = config or BindingConfig()
    return message_from_headers(
        headers or (),
        value,
        prefix=config.header_prefix,
        content_type_header=config.content_type_header,
        registry=registry or config.create_registry(),
    )


class CloudEventKafkaSerializer(Serializer):
    """
    kstreams serializer for CloudEvent payloads.

    The event headers are written into the ``headers`` mapping handed over by
    the producer, so binary mode requires the caller to send with a headers
    dictionary.
    """

    def __init__(self, config: Optional[BindingConfig] = None) -> None:
        self._config = config or BindingConfig()

    async def serialize(
        self,
        payload: Any,
        headers: Optional[Dict[str, str]] = None,
        serializer_kwargs: Optional[Dict] = None
    ) -> Optional[bytes]:
        """
        Serialize the event to the record value.

        Args:
            payload: The CloudEvent to send.
            headers: Record headers, updated in place with the event headers.
            serializer_kwargs: Optional extra arguments for serialization (unused here).

        Returns:
            The record value: the event data in binary mode, the serialized
            event in structured mode.

        Raises:
            IllegalStateError: If the payload is not a CloudEvent, or binary
                mode is used without a headers mapping.
        """
        if not isinstance(payload, CloudEvent):
            raise IllegalStateError(f"Unsupported payload type: {type(payload)}")

        try:
            kafka_headers, value = to_kafka_headers(payload, self._config)
        except CloudEventError as e:
            logger.error(f"Failed to serialize event {payload.id}: {e}")
            raise

        if headers is None:
            if not self._config.is_structured:
                raise IllegalStateError("Binary mode needs a headers mapping to write the event attributes")
            logger.warning(f"Sending structured event {payload.id} without a content-type header")
            return value

        headers.update({name: header.decode("utf-8") for name, header in kafka_headers})
        return value


class CloudEventKafkaDeserializer(middleware.BaseMiddleware):
    """
    Middleware replacing ``ConsumerRecord.value`` with the decoded CloudEvent.

    Register it on a stream with
    ``Middleware(CloudEventKafkaDeserializer, config=binding_config)``.
    """

    def __init__(self,
                 *,
                 config: Optional[BindingConfig] = None,
                 registry: Optional[EventFormatProvider] = None,
                 **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._config = config or BindingConfig()
        self._registry = registry or self._config.create_registry()

    async def __call__(self, cr: ConsumerRecord):
        try:
            message = from_kafka_record(cr.headers, cr.value, self._config, self._registry)
            cr.value = message.to_event()
        except CloudEventError as e:
            logger.error(f"Failed to deserialize record {cr.topic}/{cr.partition}@{cr.offset}: {e}")
            raise

        # Pass the modified ConsumerRecord to the next middleware or handler
        return await self.next_call(cr)
