from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, TypeVar

from .encoding import Encoding
from ..visitor import (
    AttributesVisitor,
    BinaryMessageVisitorFactory,
    ExtensionsVisitor,
    StructuredMessageVisitor,
)

if TYPE_CHECKING:
    from ..event import CloudEvent

R = TypeVar("R")


class Message(ABC):
    """A transient view over an event in one wire encoding.

    Binary messages expose attributes, extensions and body through the
    ``visit*`` operations; structured messages expose a single serialized
    payload through :meth:`visit_structured`. Operations that do not apply to
    the encoding of the message raise ``IllegalStateError``.
    """

    @property
    @abstractmethod
    def encoding(self) -> Encoding:
        ...

    @abstractmethod
    def visit(self, factory: BinaryMessageVisitorFactory[R]) -> R:
        """Feed the whole message to the visitor ``factory`` creates for its spec version."""

    @abstractmethod
    def visit_attributes(self, visitor: AttributesVisitor) -> None:
        ...

    @abstractmethod
    def visit_extensions(self, visitor: ExtensionsVisitor) -> None:
        ...

    @abstractmethod
    def visit_structured(self, visitor: StructuredMessageVisitor[R]) -> R:
        """Hand the serialized event and its format to ``visitor``."""

    @abstractmethod
    def to_event(self) -> CloudEvent:
        """Rebuild the event carried by this message."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(encoding={self.encoding.value})"
