"""
CloudEvent JSON Schema definitions.

This module provides the JSON schema of the structured JSON envelope for
both supported spec versions (0.3 and 1.0). It validates the envelope only;
the payload under ``data`` is never inspected.
"""

import json
from typing import Any, Dict

from ..spec_version import SpecVersion


def get_cloudevent_json_schema(spec_version: SpecVersion = SpecVersion.V1) -> Dict[str, Any]:
    """
    Returns the CloudEvent JSON schema as a dictionary.

    Based on the CloudEvents specification:
    https://github.com/cloudevents/spec/blob/v1.0/spec.md

    Args:
        spec_version: The spec version the schema describes. 0.3 documents
            carry ``schemaurl`` where 1.0 documents carry ``dataschema``.

    Returns:
        Dict[str, Any]: The CloudEvent JSON schema
    """
    schema_attribute = spec_version.schema_attribute
    return {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "title": "CloudEvent",
        "description": f"CloudEvent v{spec_version.value} JSON Schema",
        "type": "object",
        "properties": {
            "specversion": {
                "type": "string",
                "description": "The version of the CloudEvent spec",
                "const": spec_version.value
            },
            "type": {
                "type": "string",
                "description": "Type of event related to the originating occurrence",
                "minLength": 1
            },
            "source": {
                "type": "string",
                "description": "Identifies the context in which an event happened",
                "minLength": 1
            },
            "id": {
                "type": "string",
                "description": "An identifier for the event",
                "minLength": 1
            },
            "time": {
                "type": "string",
                "description": "Timestamp of when the occurrence happened (RFC 3339)",
                "minLength": 1
            },
            "datacontenttype": {
                "type": "string",
                "description": "Content type of data value",
                "minLength": 1
            },
            schema_attribute: {
                "type": "string",
                "description": "Identifies the schema that data adheres to",
                "minLength": 1
            },
            "subject": {
                "type": "string",
                "description": "This describes the subject of the event in the context of the event producer",
                "minLength": 1
            },
            "data": {
                "description": "Event data specific to the event type"
            },
            "data_base64": {
                "type": "string",
                "description": "Base64 encoded event data (used when data is binary)"
            }
        },
        "required": ["specversion", "type", "source", "id"],
        "additionalProperties": {
            "type": ["string", "number", "integer", "boolean"],
            "description": "CloudEvent extension attributes"
        },
        "not": {
            "allOf": [
                {"required": ["data"]},
                {"required": ["data_base64"]}
            ]
        }
    }


def get_cloudevent_json_schema_str(spec_version: SpecVersion = SpecVersion.V1) -> str:
    """
    Returns the CloudEvent JSON schema as a formatted JSON string.

    Returns:
        str: The CloudEvent JSON schema as a formatted JSON string
    """
    return json.dumps(get_cloudevent_json_schema(spec_version), indent=2)


def get_cloudevent_json_schema_compact(spec_version: SpecVersion = SpecVersion.V1) -> str:
    """
    Returns the CloudEvent JSON schema as a compact JSON string.

    Returns:
        str: The CloudEvent JSON schema as a compact JSON string
    """
    return json.dumps(get_cloudevent_json_schema(spec_version), separators=(',', ':'))
