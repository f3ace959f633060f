"""Tests for the string header binding and encoding discovery."""

import json

import pytest

from cloudevents_envelope import (
    Encoding,
    EventDeserializationError,
    IllegalStateError,
    JsonFormat,
    MessageVisitError,
    MissingDataError,
)
from cloudevents_envelope.bindings import (
    HTTP_HEADER_PREFIX,
    HeadersMessageWriter,
    structured_to_binary,
    to_binary_headers,
    to_structured_headers,
)
from cloudevents_envelope.format import EventFormatProvider
from cloudevents_envelope.message import GenericStructuredMessage, detect_encoding, message_from_headers

from event_data import (
    ALL_EVENTS,
    DATASCHEMA,
    ID,
    SOURCE,
    TIME_STRING,
    TYPE,
    V03_WITH_JSON_DATA_WITH_EXT,
    V03_WITH_JSON_DATA_WITH_EXT_STRING,
    V1_MIN,
    V1_WITH_JSON_DATA,
    V1_WITH_JSON_DATA_WITH_EXT,
    V1_WITH_JSON_DATA_WITH_EXT_STRING,
    event_ids,
)
from mocks import CSVFormat, FailingFormat


def _stringly(event):
    """The event a header round trip gives back: every extension as a string."""
    if event is V1_WITH_JSON_DATA_WITH_EXT:
        return V1_WITH_JSON_DATA_WITH_EXT_STRING
    if event is V03_WITH_JSON_DATA_WITH_EXT:
        return V03_WITH_JSON_DATA_WITH_EXT_STRING
    return event


class TestBinaryHeaders:
    """Test binary mode over string headers."""

    def test_concrete_headers(self):
        headers, body = to_binary_headers(V1_WITH_JSON_DATA_WITH_EXT)
        assert headers == {
            "ce_specversion": "1.0",
            "ce_id": ID,
            "ce_source": SOURCE,
            "ce_type": TYPE,
            "content-type": "application/json",
            "ce_dataschema": DATASCHEMA,
            "ce_subject": "sub",
            "ce_time": TIME_STRING,
            "ce_astring": "aaa",
            "ce_aboolean": "true",
            "ce_anumber": "10",
        }
        assert body == b"{}"

    def test_without_content_type_header(self):
        headers, _ = to_binary_headers(V1_WITH_JSON_DATA, prefix=HTTP_HEADER_PREFIX, content_type_header=None)
        assert headers["ce-datacontenttype"] == "application/json"
        assert "content-type" not in headers

    def test_writer_is_its_own_factory(self):
        writer = HeadersMessageWriter("ce_")
        headers, body = V1_MIN.as_binary_message().visit(writer)
        assert headers == {"ce_specversion": "1.0", "ce_id": ID, "ce_source": SOURCE, "ce_type": TYPE}
        assert body is None

    def test_writer_is_single_use(self):
        """Test that a used writer refuses a second event instead of mixing it with the first."""
        writer = HeadersMessageWriter("ce_")
        headers, body = V1_WITH_JSON_DATA.as_binary_message().visit(writer)
        assert body == b"{}"
        with pytest.raises(IllegalStateError):
            V1_MIN.as_binary_message().visit(writer)
        with pytest.raises(IllegalStateError):
            writer.set_body(b"more")
        assert to_binary_headers(V1_MIN, content_type_header=None)[1] is None

    @pytest.mark.parametrize("event", ALL_EVENTS, ids=event_ids(ALL_EVENTS))
    def test_round_trip_degrades_extensions_to_strings(self, event):
        """Test that typed extensions come back as strings after a header round trip."""
        headers, body = to_binary_headers(event)
        message = message_from_headers(headers, body)
        assert message.encoding is Encoding.BINARY
        assert message.to_event() == _stringly(event)

    def test_bytes_header_values(self):
        headers, body = to_binary_headers(V1_WITH_JSON_DATA)
        raw = [(name, value.encode("utf-8")) for name, value in headers.items()]
        assert message_from_headers(raw, body).to_event() == V1_WITH_JSON_DATA

    def test_header_names_are_case_insensitive(self):
        headers, body = to_binary_headers(V1_WITH_JSON_DATA, prefix=HTTP_HEADER_PREFIX)
        upper = {name.upper(): value for name, value in headers.items()}
        message = message_from_headers(upper, body, prefix=HTTP_HEADER_PREFIX)
        assert message.to_event() == V1_WITH_JSON_DATA


class TestStructuredHeaders:
    """Test structured mode over string headers."""

    def test_structured_headers(self):
        headers, payload = to_structured_headers(V1_WITH_JSON_DATA_WITH_EXT, JsonFormat())
        assert headers == {"content-type": "application/cloudevents+json"}
        assert json.loads(payload)["id"] == ID

    def test_structured_round_trip_keeps_types(self):
        headers, payload = to_structured_headers(V1_WITH_JSON_DATA_WITH_EXT, JsonFormat())
        message = message_from_headers(headers, payload)
        assert message.encoding is Encoding.STRUCTURED
        assert message.to_event() == V1_WITH_JSON_DATA_WITH_EXT

    def test_structured_to_binary(self):
        """Test converting a structured message to binary headers without an event."""
        headers, payload = to_structured_headers(V1_WITH_JSON_DATA_WITH_EXT, JsonFormat())
        binary_headers, body = structured_to_binary(message_from_headers(headers, payload))
        assert binary_headers == to_binary_headers(V1_WITH_JSON_DATA_WITH_EXT)[0]
        assert body == b"{}"

    def test_structured_to_binary_requires_data(self):
        headers, payload = to_structured_headers(V1_MIN, JsonFormat())
        with pytest.raises(MissingDataError, match="data must not be null"):
            structured_to_binary(message_from_headers(headers, payload))

    def test_structured_to_binary_wraps_codec_failures(self):
        with pytest.raises(MessageVisitError):
            structured_to_binary(GenericStructuredMessage(FailingFormat(), b"payload"))

    def test_structured_to_binary_rejects_non_finite_data(self):
        payload = (b'{"specversion": "1.0", "id": "1", "source": "s", "type": "t", '
                   b'"datacontenttype": "application/json", "data": NaN}')
        with pytest.raises(EventDeserializationError):
            structured_to_binary(GenericStructuredMessage(JsonFormat(), payload))

    def test_structured_to_binary_rejects_binary_message(self):
        headers, body = to_binary_headers(V1_WITH_JSON_DATA)
        with pytest.raises(IllegalStateError):
            structured_to_binary(message_from_headers(headers, body))


class TestEncodingDiscovery:
    """Test encoding detection from headers alone."""

    @pytest.mark.parametrize("headers, expected", [
        ({"content-type": "application/cloudevents+json"}, Encoding.STRUCTURED),
        ({"Content-Type": "application/cloudevents+json; charset=utf-8"}, Encoding.STRUCTURED),
        ({"ce_specversion": "1.0", "content-type": "application/json"}, Encoding.BINARY),
        ({"ce_specversion": b"1.0"}, Encoding.BINARY),
        ({"content-type": "application/json"}, Encoding.UNKNOWN),
        ({}, Encoding.UNKNOWN),
    ])
    def test_detect_encoding(self, headers, expected):
        assert detect_encoding(headers) is expected

    def test_custom_registry(self):
        registry = EventFormatProvider()
        registry.register(CSVFormat())
        headers = {"content-type": "application/cloudevents+csv"}
        assert detect_encoding(headers) is Encoding.UNKNOWN
        assert detect_encoding(headers, registry=registry) is Encoding.STRUCTURED

    def test_unknown_message_fails(self):
        message = message_from_headers({"foo": "bar"}, b"body")
        assert message.encoding is Encoding.UNKNOWN
        with pytest.raises(IllegalStateError):
            message.to_event()
