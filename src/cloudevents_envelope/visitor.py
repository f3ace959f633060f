"""Visitor protocols used to move an event between representations.

A message never knows which concrete object it is feeding: it pushes
attributes, extensions and the body into a visitor, and a
:data:`BinaryMessageVisitorFactory` picks the visitor once the spec version
of the message is known. Builders, header writers and test mocks all
implement the same protocols.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Callable, Protocol, TypeVar, Union, runtime_checkable

if TYPE_CHECKING:
    from .format.event_format import EventFormat
    from .spec_version import SpecVersion

R = TypeVar("R", covariant=True)

Number = Union[int, float, Decimal]
AttributeValue = Union[str, datetime]


@runtime_checkable
class AttributesVisitor(Protocol):
    def set_attribute(self, name: str, value: AttributeValue) -> None:
        """Receive one context attribute.

        ``value`` is a string for every attribute except ``time``, which may
        arrive either as an aware ``datetime`` or as its ISO-8601 string.
        """
        ...


@runtime_checkable
class ExtensionsVisitor(Protocol):
    def set_extension_string(self, name: str, value: str) -> None: ...

    def set_extension_number(self, name: str, value: Number) -> None: ...

    def set_extension_boolean(self, name: str, value: bool) -> None: ...


@runtime_checkable
class BinaryMessageVisitor(AttributesVisitor, ExtensionsVisitor, Protocol[R]):
    def set_body(self, value: bytes) -> None: ...

    def end(self) -> R:
        """Finish the visit and return its result."""
        ...


BinaryMessageVisitorFactory = Callable[["SpecVersion"], BinaryMessageVisitor[R]]


@runtime_checkable
class StructuredMessageVisitor(Protocol[R]):
    def set_event(self, format: EventFormat, payload: bytes) -> R:
        """Receive a whole event serialized by ``format``."""
        ...
