from .event_format import EventFormat, normalize_media_type
from .json_format import JsonFormat
from .json_schema import (
    get_cloudevent_json_schema,
    get_cloudevent_json_schema_compact,
    get_cloudevent_json_schema_str,
)
from .registry import EventFormatProvider

__all__ = [
    "EventFormat",
    "normalize_media_type",
    "JsonFormat",
    "EventFormatProvider",
    "get_cloudevent_json_schema",
    "get_cloudevent_json_schema_str",
    "get_cloudevent_json_schema_compact",
]
