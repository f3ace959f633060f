from __future__ import annotations

from .encoding import Encoding
from .message import Message, R
from ..errors import IllegalStateError
from ..event import CloudEvent
from ..visitor import (
    AttributesVisitor,
    BinaryMessageVisitorFactory,
    ExtensionsVisitor,
    StructuredMessageVisitor,
)


class UnknownEncodingMessage(Message):
    """Returned when the encoding of a transport message cannot be determined.

    Every operation fails; there is no default event.
    """

    @property
    def encoding(self) -> Encoding:
        return Encoding.UNKNOWN

    def visit(self, factory: BinaryMessageVisitorFactory[R]) -> R:
        raise IllegalStateError("Unknown encoding")

    def visit_attributes(self, visitor: AttributesVisitor) -> None:
        raise IllegalStateError("Unknown encoding")

    def visit_extensions(self, visitor: ExtensionsVisitor) -> None:
        raise IllegalStateError("Unknown encoding")

    def visit_structured(self, visitor: StructuredMessageVisitor[R]) -> R:
        raise IllegalStateError("Unknown encoding")

    def to_event(self) -> CloudEvent:
        raise IllegalStateError("Unknown encoding")
