"""
JSON event format (``application/cloudevents+json``).

The payload is embedded as a JSON value when the content type is JSON and the
bytes are exactly what this module would write back, as a string for UTF-8
text content types, and as ``data_base64`` otherwise. This keeps the format
lossless: deserializing a serialized event gives back the same data bytes.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import math
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Optional

import jsonschema

from .event_format import EventFormat, normalize_media_type
from .json_schema import get_cloudevent_json_schema
from ..attributes import format_time
from ..errors import EventDeserializationError, EventSerializationError
from ..spec_version import SpecVersion

if TYPE_CHECKING:
    from ..event import CloudEvent

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/cloudevents+json"

_MISSING = object()


def _is_json_content_type(content_type: Optional[str]) -> bool:
    # An absent datacontenttype means application/json for this format
    if content_type is None:
        return True
    media_type = normalize_media_type(content_type)
    return media_type == "application/json" or media_type.endswith("+json") or media_type == "text/json"


def _is_text_content_type(content_type: Optional[str]) -> bool:
    if content_type is None:
        return False
    media_type = normalize_media_type(content_type)
    return (media_type.startswith("text/")
            or media_type in ("application/xml", "application/javascript")
            or media_type.endswith("+xml"))


def _dump_json(value: Any) -> bytes:
    return json.dumps(value, ensure_ascii=False, allow_nan=False).encode("utf-8")


def _parse_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"Number {text} is out of range")
    return value


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a valid JSON value")


def _load_json(payload: bytes) -> Any:
    return json.loads(payload, parse_float=_parse_float, parse_constant=_reject_constant)


def _extension_to_json(value: Any) -> Any:
    if not isinstance(value, Decimal):
        return value
    if not value.is_finite():
        raise ValueError(f"Decimal {value} is not a JSON number")
    if value == value.to_integral_value():
        return int(value)
    # JSON numbers are read back as floats, only exact ones survive
    as_float = float(value)
    if Decimal(as_float) != value:
        raise ValueError(f"Decimal {value} has no exact float representation")
    return as_float


class JsonFormat(EventFormat):
    """Structured JSON codec.

    Args:
        validate_schema: Validate incoming documents against the CloudEvent
            JSON schema of their spec version before parsing them.
    """

    def __init__(self, *, validate_schema: bool = False) -> None:
        self._validate_schema = validate_schema

    @property
    def media_type(self) -> str:
        return CONTENT_TYPE

    @property
    def validate_schema(self) -> bool:
        return self._validate_schema

    def serialize(self, event: CloudEvent) -> bytes:
        try:
            return _dump_json(self._event_to_dict(event))
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to serialize event {event.id} to JSON: {e}")
            raise EventSerializationError(f"Failed to serialize event to JSON: {e}") from e

    def deserialize(self, payload: bytes) -> Dict[str, Any]:
        try:
            document = _load_json(payload)
        except (UnicodeDecodeError, ValueError) as e:
            logger.error(f"Failed to parse JSON event: {e}")
            raise EventDeserializationError(f"Invalid JSON event: {e}") from e

        if not isinstance(document, dict):
            raise EventDeserializationError(
                f"JSON event must be an object, got {type(document).__name__}"
            )

        if self._validate_schema:
            self._validate(document)

        if "data" in document and "data_base64" in document:
            raise EventDeserializationError("JSON event cannot carry both data and data_base64")

        values = {key: value for key, value in document.items() if key not in ("data", "data_base64")}
        if "data_base64" in document:
            values["data"] = self._decode_base64(document["data_base64"])
        elif document.get("data") is not None:
            try:
                values["data"] = self._decode_data(document["data"], document.get("datacontenttype"))
            except ValueError as e:
                logger.error(f"Failed to decode JSON event data: {e}")
                raise EventDeserializationError(f"Invalid JSON event data: {e}") from e
        return values

    def _validate(self, document: Dict[str, Any]) -> None:
        version = SpecVersion.parse(document.get("specversion"))
        try:
            jsonschema.validate(document, get_cloudevent_json_schema(version))
        except jsonschema.ValidationError as e:
            logger.error(f"JSON event does not match the CloudEvent {version.value} schema: {e.message}")
            raise EventDeserializationError(f"JSON event failed schema validation: {e.message}") from e

    @staticmethod
    def _decode_base64(value: Any) -> bytes:
        if not isinstance(value, str):
            raise EventDeserializationError("data_base64 must be a string")
        try:
            return base64.b64decode(value, validate=True)
        except binascii.Error as e:
            raise EventDeserializationError(f"Invalid data_base64: {e}") from e

    @staticmethod
    def _decode_data(value: Any, content_type: Optional[str]) -> bytes:
        if _is_json_content_type(content_type):
            return _dump_json(value)
        if isinstance(value, str):
            return value.encode("utf-8")
        return _dump_json(value)

    def _event_to_dict(self, event: CloudEvent) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "specversion": event.specversion.value,
            "id": event.id,
            "source": event.source,
            "type": event.type,
        }

        if event.datacontenttype is not None:
            result["datacontenttype"] = event.datacontenttype
        if event.dataschema is not None:
            result[event.specversion.schema_attribute] = event.dataschema
        if event.subject is not None:
            result["subject"] = event.subject
        if event.time is not None:
            result["time"] = format_time(event.time)

        for name, value in event.extensions.items():
            result[name] = _extension_to_json(value)

        if event.data is not None:
            self._encode_data(event.data, event.datacontenttype, result)

        return result

    @staticmethod
    def _encode_data(data: bytes, content_type: Optional[str], result: Dict[str, Any]) -> None:
        if _is_json_content_type(content_type):
            try:
                value = json.loads(data.decode("utf-8"))
            except (UnicodeDecodeError, ValueError):
                value = _MISSING
            if value is not _MISSING and value is not None:
                try:
                    if _dump_json(value) == data:
                        result["data"] = value
                        return
                except ValueError:
                    pass
        elif _is_text_content_type(content_type):
            try:
                result["data"] = data.decode("utf-8")
                return
            except UnicodeDecodeError:
                pass

        result["data_base64"] = base64.b64encode(data).decode("ascii")
