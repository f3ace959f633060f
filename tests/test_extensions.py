"""Tests for typed extensions."""

from decimal import Decimal

import pytest

from cloudevents_envelope import (
    ExtensionKind,
    IllegalStateError,
    InvalidAttributeError,
    UnsupportedExtensionValueError,
    extension_kind,
    validate_extension_name,
)
from cloudevents_envelope.extensions import extension_to_string, visit_extensions


class RecordingExtensionsVisitor:
    def __init__(self):
        self.calls = []

    def set_extension_string(self, name, value):
        self.calls.append(("string", name, value))

    def set_extension_number(self, name, value):
        self.calls.append(("number", name, value))

    def set_extension_boolean(self, name, value):
        self.calls.append(("boolean", name, value))


class TestExtensionKind:
    """Test classification of extension values."""

    @pytest.mark.parametrize("value, kind", [
        ("aaa", ExtensionKind.STRING),
        ("", ExtensionKind.STRING),
        (10, ExtensionKind.NUMBER),
        (1.5, ExtensionKind.NUMBER),
        (Decimal("2.25"), ExtensionKind.NUMBER),
        (True, ExtensionKind.BOOLEAN),
        (False, ExtensionKind.BOOLEAN),
    ])
    def test_supported_values(self, value, kind):
        assert extension_kind("ext", value) is kind

    @pytest.mark.parametrize("value", [None, b"bytes", [1], {"a": 1}, 1j, object()])
    def test_unsupported_values(self, value):
        """Test that any other runtime type is refused."""
        with pytest.raises(UnsupportedExtensionValueError) as exc_info:
            extension_kind("ext", value)
        assert isinstance(exc_info.value, IllegalStateError)
        assert exc_info.value.name == "ext"


class TestExtensionNames:
    """Test extension name validation."""

    @pytest.mark.parametrize("name", ["astring", "a1", "123"])
    def test_valid_names(self, name):
        assert validate_extension_name(name) == name

    @pytest.mark.parametrize("name", ["", "Upper", "with-dash", "with_underscore", "with space"])
    def test_malformed_names(self, name):
        with pytest.raises(InvalidAttributeError):
            validate_extension_name(name)

    @pytest.mark.parametrize("name", ["id", "specversion", "schemaurl", "dataschema", "data", "data_base64"])
    def test_reserved_names(self, name):
        """Test that context attribute names of any version are reserved."""
        with pytest.raises(InvalidAttributeError):
            validate_extension_name(name)


class TestVisitExtensions:
    """Test dispatch of extension values to the typed visitor setters."""

    def test_dispatch_by_type(self):
        visitor = RecordingExtensionsVisitor()
        visit_extensions({"astring": "aaa", "aboolean": True, "anumber": 10}, visitor)
        assert visitor.calls == [
            ("string", "astring", "aaa"),
            ("boolean", "aboolean", True),
            ("number", "anumber", 10),
        ]

    def test_unsupported_value_fails_at_visit_time(self):
        visitor = RecordingExtensionsVisitor()
        with pytest.raises(UnsupportedExtensionValueError):
            visit_extensions({"ok": "x", "bad": [1, 2]}, visitor)
        assert visitor.calls == [("string", "ok", "x")]

    @pytest.mark.parametrize("value, expected", [
        (True, "true"),
        (False, "false"),
        (10, "10"),
        (Decimal("2.50"), "2.50"),
        ("aaa", "aaa"),
    ])
    def test_extension_to_string(self, value, expected):
        assert extension_to_string(value) == expected
