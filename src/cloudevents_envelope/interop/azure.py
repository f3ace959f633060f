"""
Conversion to and from ``azure.core.messaging.CloudEvent``.

The Azure model only knows spec version 1.0 and holds data as an arbitrary
Python object. Events are migrated to 1.0 on the way out; on the way in,
``bytes`` data is kept, ``str`` data is UTF-8 encoded and any other data is
JSON encoded.
"""

import json
import logging
from typing import Any, Optional

from azure.core.messaging import CloudEvent as AzureCloudEvent

from ..builder import CloudEventBuilder
from ..errors import EventSerializationError
from ..event import CloudEvent
from ..spec_version import SpecVersion

logger = logging.getLogger(__name__)


def to_azure_cloud_event(event: CloudEvent) -> AzureCloudEvent:
    """Convert ``event`` to an Azure SDK CloudEvent (spec version 1.0)."""
    event = event.to_v1()
    extensions = dict(event.extensions)

    return AzureCloudEvent(
        source=event.source,
        type=event.type,
        specversion=SpecVersion.V1.value,
        id=event.id,
        time=event.time,
        datacontenttype=event.datacontenttype,
        dataschema=event.dataschema,
        subject=event.subject,
        data=event.data,
        extensions=extensions or None,
    )


def _encode_data(data: Any, event_id: str) -> Optional[bytes]:
    if data is None:
        return None
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, str):
        return data.encode("utf-8")
    try:
        return json.dumps(data, ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        logger.error(f"Data of Azure CloudEvent {event_id} is not JSON serializable: {e}")
        raise EventSerializationError(f"Data of type {type(data).__name__} cannot be encoded: {e}") from e


def from_azure_cloud_event(cloud_event: AzureCloudEvent) -> CloudEvent:
    """Convert an Azure SDK CloudEvent.

    Raises:
        UnrecognizedSpecVersionError: If the Azure event carries an unknown spec version.
        InvalidAttributeError: If an attribute or extension is malformed.
        UnsupportedExtensionValueError: If an extension is not a string, number or boolean.
        EventSerializationError: If the data cannot be encoded to bytes.
    """
    builder = CloudEventBuilder.from_spec_version(cloud_event.specversion or SpecVersion.V1.value)
    builder.with_id(cloud_event.id)
    builder.with_source(cloud_event.source)
    builder.with_type(cloud_event.type)
    builder.with_data_content_type(cloud_event.datacontenttype)
    builder.with_data_schema(cloud_event.dataschema)
    builder.with_subject(cloud_event.subject)
    builder.with_time(cloud_event.time)

    data = _encode_data(cloud_event.data, cloud_event.id)
    if data is not None:
        builder.with_data(data)

    for name, value in (cloud_event.extensions or {}).items():
        builder.with_extension(name, value)

    return builder.build()
