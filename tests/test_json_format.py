"""Tests for the JSON event format, its schema and the format registry."""

import base64
import json
from decimal import Decimal

import jsonschema
import pytest

from cloudevents_envelope import (
    CloudEventBuilder,
    EventDeserializationError,
    EventFormatProvider,
    EventSerializationError,
    JsonFormat,
    SpecVersion,
    UnrecognizedSpecVersionError,
)
from cloudevents_envelope.format import (
    get_cloudevent_json_schema,
    get_cloudevent_json_schema_compact,
    get_cloudevent_json_schema_str,
)
from cloudevents_envelope.message import GenericStructuredMessage

from event_data import (
    ALL_EVENTS,
    DATASCHEMA,
    ID,
    SOURCE,
    TIME_STRING,
    TYPE,
    V03_WITH_JSON_DATA,
    V1_MIN,
    V1_WITH_JSON_DATA,
    V1_WITH_JSON_DATA_WITH_EXT,
    V1_WITH_TEXT_DATA,
    V1_WITH_XML_DATA,
    event_ids,
)
from mocks import CSVFormat


class TestJsonFormat:
    """Test serialization of events to application/cloudevents+json."""

    @pytest.mark.parametrize("event", ALL_EVENTS, ids=event_ids(ALL_EVENTS))
    def test_round_trip(self, event):
        """Test that the format is lossless, typed extensions included."""
        message = event.as_structured_message(JsonFormat())
        assert message.to_event() == event

    @pytest.mark.parametrize("value", [Decimal("2.5"), Decimal("7"), Decimal("-0.125")])
    def test_round_trip_decimal_extension(self, value):
        event = CloudEventBuilder.v1(V1_WITH_JSON_DATA).with_extension("aratio", value).build()
        assert event.as_structured_message(JsonFormat()).to_event() == event

    @pytest.mark.parametrize("value", [Decimal("0.1"), Decimal("1.23456789012345678901"), Decimal("NaN")])
    def test_inexact_decimal_extension(self, value):
        """Test that a decimal a JSON number cannot carry exactly is refused, not rounded."""
        event = CloudEventBuilder.v1(V1_MIN).with_extension("aratio", value).build()
        with pytest.raises(EventSerializationError):
            JsonFormat().serialize(event)

    def test_concrete_document(self):
        """Test the document written for the JSON event with extensions."""
        document = json.loads(JsonFormat().serialize(V1_WITH_JSON_DATA_WITH_EXT))
        assert document == {
            "specversion": "1.0",
            "id": ID,
            "source": SOURCE,
            "type": TYPE,
            "datacontenttype": "application/json",
            "dataschema": DATASCHEMA,
            "subject": "sub",
            "time": TIME_STRING,
            "astring": "aaa",
            "aboolean": True,
            "anumber": 10,
            "data": {},
        }

    def test_v03_uses_schemaurl(self):
        document = json.loads(JsonFormat().serialize(V03_WITH_JSON_DATA))
        assert document["specversion"] == "0.3"
        assert document["schemaurl"] == DATASCHEMA
        assert "dataschema" not in document

    def test_text_data_is_a_string(self):
        assert json.loads(JsonFormat().serialize(V1_WITH_TEXT_DATA))["data"] == "Hello World Lorena!"
        assert json.loads(JsonFormat().serialize(V1_WITH_XML_DATA))["data"] == "<stuff></stuff>"

    def test_non_canonical_json_is_base64(self):
        """Test that JSON bytes which would not re-encode identically go as base64."""
        event = CloudEventBuilder.v1(V1_MIN).with_data(b'{"a":1}', content_type="application/json").build()
        document = json.loads(JsonFormat().serialize(event))
        assert "data" not in document
        assert base64.b64decode(document["data_base64"]) == b'{"a":1}'
        assert JsonFormat().deserialize(JsonFormat().serialize(event))["data"] == b'{"a":1}'

    def test_binary_data_is_base64(self):
        event = CloudEventBuilder.v1(V1_MIN).with_data(b"\x00\xff", content_type="application/octet-stream").build()
        document = json.loads(JsonFormat().serialize(event))
        assert document["data_base64"] == base64.b64encode(b"\x00\xff").decode("ascii")
        assert event.as_structured_message(JsonFormat()).to_event() == event

    def test_deserialize_plain_document(self):
        """Test that a document from another producer is read back to bytes."""
        payload = json.dumps({
            "specversion": "1.0",
            "id": ID,
            "source": SOURCE,
            "type": TYPE,
            "datacontenttype": "application/json",
            "data": {"hello": "world"},
        }).encode()
        event = GenericStructuredMessage(JsonFormat(), payload).to_event()
        assert json.loads(event.data) == {"hello": "world"}

    @pytest.mark.parametrize("payload", [
        b"not json",
        b"[1, 2]",
        b'{"specversion": "1.0", "id": "1", "source": "s", "type": "t", "data": 1, "data_base64": "AA=="}',
        b'{"specversion": "1.0", "id": "1", "source": "s", "type": "t", "data_base64": "%%%"}',
        b'{"specversion": "1.0", "id": "1", "source": "s", "type": "t", "datacontenttype": "application/json", "data": NaN}',
        b'{"specversion": "1.0", "id": "1", "source": "s", "type": "t", "datacontenttype": "application/json", "data": 1e400}',
        b'{"specversion": "1.0", "id": "1", "source": "s", "type": "t", "data": [-Infinity]}',
        b'{"specversion": "1.0", "id": "1", "source": "s", "type": "t", "aratio": NaN}',
    ])
    def test_malformed_payload(self, payload):
        with pytest.raises(EventDeserializationError):
            JsonFormat().deserialize(payload)

    def test_unknown_version_in_document(self):
        payload = b'{"specversion": "2.0", "id": "1", "source": "s", "type": "t"}'
        with pytest.raises(UnrecognizedSpecVersionError):
            GenericStructuredMessage(JsonFormat(), payload).to_event()

    def test_schema_validation(self):
        """Test that a validating format rejects documents that break the envelope schema."""
        payload = b'{"specversion": "1.0", "id": "", "source": "s", "type": "t"}'
        with pytest.raises(EventDeserializationError):
            JsonFormat(validate_schema=True).deserialize(payload)
        assert JsonFormat(validate_schema=True).deserialize(JsonFormat().serialize(V1_WITH_JSON_DATA))["id"] == ID


class TestCloudEventJsonSchema:
    """Test the CloudEvent JSON schema helpers."""

    @pytest.mark.parametrize("event", ALL_EVENTS, ids=event_ids(ALL_EVENTS))
    def test_serialized_events_validate(self, event):
        document = json.loads(JsonFormat().serialize(event))
        jsonschema.validate(document, get_cloudevent_json_schema(event.specversion))

    def test_version_specific_schema_attribute(self):
        assert "schemaurl" in get_cloudevent_json_schema(SpecVersion.V03)["properties"]
        assert "dataschema" in get_cloudevent_json_schema(SpecVersion.V1)["properties"]

    def test_string_forms(self):
        assert json.loads(get_cloudevent_json_schema_str()) == get_cloudevent_json_schema()
        compact = get_cloudevent_json_schema_compact(SpecVersion.V03)
        assert compact == json.dumps(get_cloudevent_json_schema(SpecVersion.V03), separators=(",", ":"))

    def test_rejects_wrong_version(self):
        with pytest.raises(jsonschema.ValidationError):
            jsonschema.validate(
                {"specversion": "0.3", "id": "1", "source": "s", "type": "t"},
                get_cloudevent_json_schema(SpecVersion.V1),
            )


class TestEventFormatProvider:
    """Test the format registry."""

    def test_default_has_json(self):
        registry = EventFormatProvider.default()
        assert registry is EventFormatProvider.default()
        assert isinstance(registry.resolve("application/cloudevents+json"), JsonFormat)

    @pytest.mark.parametrize("content_type", [
        "application/cloudevents+json; charset=utf-8",
        "Application/CloudEvents+JSON",
        " application/cloudevents+json ",
    ])
    def test_resolve_ignores_parameters_and_case(self, content_type):
        assert isinstance(EventFormatProvider.default().resolve(content_type), JsonFormat)

    @pytest.mark.parametrize("content_type", [None, "", "application/json", "text/plain"])
    def test_resolve_unknown(self, content_type):
        assert EventFormatProvider.default().resolve(content_type) is None

    def test_register(self):
        registry = EventFormatProvider()
        csv_format = CSVFormat()
        registry.register(csv_format)
        assert registry.resolve("application/cloudevents+csv") is csv_format
        assert registry.media_types() == ["application/cloudevents+csv"]

    def test_later_registration_wins(self):
        registry = EventFormatProvider()
        first, second = JsonFormat(), JsonFormat(validate_schema=True)
        registry.register(first)
        registry.register(second)
        assert registry.resolve("application/cloudevents+json") is second
