"""CloudEvents envelope model.

Immutable events in spec versions 0.3 and 1.0, the builders and visitors
used to create and rebuild them, and the binary/structured message
conversion protocol.
"""

from .spec_version import SpecVersion
from .errors import (
    CloudEventError,
    EventDeserializationError,
    EventSerializationError,
    IllegalStateError,
    InvalidAttributeError,
    MessageVisitError,
    MissingDataError,
    UnrecognizedSpecVersionError,
    UnsupportedAttributeError,
    UnsupportedExtensionValueError,
)
from .attributes import Attributes, AttributesV03, AttributesV1
from .extensions import ExtensionKind, ExtensionValue, extension_kind, validate_extension_name
from .event import CloudEvent
from .builder import (
    BaseCloudEventBuilder,
    CloudEventBuilder,
    CloudEventBuilderV03,
    CloudEventBuilderV1,
    default_visitor_factory,
)
from .visitor import (
    AttributesVisitor,
    BinaryMessageVisitor,
    BinaryMessageVisitorFactory,
    ExtensionsVisitor,
    StructuredMessageVisitor,
)
from .message import Encoding, Message
from .format import EventFormat, EventFormatProvider, JsonFormat

__all__ = [
    "SpecVersion",
    "CloudEventError",
    "EventDeserializationError",
    "EventSerializationError",
    "IllegalStateError",
    "InvalidAttributeError",
    "MessageVisitError",
    "MissingDataError",
    "UnrecognizedSpecVersionError",
    "UnsupportedAttributeError",
    "UnsupportedExtensionValueError",
    "Attributes",
    "AttributesV03",
    "AttributesV1",
    "ExtensionKind",
    "ExtensionValue",
    "extension_kind",
    "validate_extension_name",
    "CloudEvent",
    "BaseCloudEventBuilder",
    "CloudEventBuilder",
    "CloudEventBuilderV03",
    "CloudEventBuilderV1",
    "default_visitor_factory",
    "AttributesVisitor",
    "BinaryMessageVisitor",
    "BinaryMessageVisitorFactory",
    "ExtensionsVisitor",
    "StructuredMessageVisitor",
    "Encoding",
    "Message",
    "EventFormat",
    "EventFormatProvider",
    "JsonFormat",
]
