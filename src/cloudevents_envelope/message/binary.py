from __future__ import annotations

import logging
from abc import abstractmethod
from typing import Any, Mapping

from .encoding import Encoding
from .message import Message, R
from ..builder import default_visitor_factory
from ..errors import EventDeserializationError, IllegalStateError
from ..event import CloudEvent
from ..extensions import visit_extensions
from ..spec_version import SPECVERSION, SpecVersion
from ..visitor import (
    AttributesVisitor,
    BinaryMessageVisitorFactory,
    ExtensionsVisitor,
    StructuredMessageVisitor,
)

logger = logging.getLogger(__name__)


class BaseBinaryMessage(Message):
    """A message whose attributes and extensions travel apart from the body.

    Subclasses provide the spec version, the body and the two attribute
    visits; :meth:`visit` drives them in the order attributes, extensions,
    body, then ``end()``.
    """

    @property
    def encoding(self) -> Encoding:
        return Encoding.BINARY

    @property
    @abstractmethod
    def spec_version(self) -> SpecVersion:
        ...

    @property
    @abstractmethod
    def body(self) -> bytes | None:
        ...

    def visit(self, factory: BinaryMessageVisitorFactory[R]) -> R:
        visitor = factory(self.spec_version)
        self.visit_attributes(visitor)
        self.visit_extensions(visitor)

        body = self.body
        if body is not None:
            visitor.set_body(body)

        return visitor.end()

    def visit_structured(self, visitor: StructuredMessageVisitor[R]) -> R:
        raise IllegalStateError("This is a binary message, it cannot be visited as a structured message")

    def to_event(self) -> CloudEvent:
        return self.visit(default_visitor_factory)


class GenericBinaryMessage(BaseBinaryMessage):
    """Binary message over a map of unprefixed attribute and extension values.

    ``specversion`` selects the attribute names of the message; every other
    key is an extension whose kind is decided by the runtime type of its
    value. Header-based transports therefore only ever produce string
    extensions.
    """

    def __init__(self, headers: Mapping[str, Any], body: bytes | None = None) -> None:
        self._headers = dict(headers)
        self._body = None if body is None else bytes(body)

    @classmethod
    def from_structured(cls, values: Mapping[str, Any]) -> GenericBinaryMessage:
        """Wrap the key/value map produced by ``EventFormat.deserialize``."""
        values = dict(values)
        data = values.pop("data", None)
        if isinstance(data, str):
            data = data.encode("utf-8")
        elif data is not None and not isinstance(data, (bytes, bytearray)):
            logger.error(f"Unsupported data entry in structured event: {type(data).__name__}")
            raise EventDeserializationError(
                f"Structured event data must be bytes or str, got {type(data).__name__}"
            )
        return cls(values, data)

    @property
    def headers(self) -> Mapping[str, Any]:
        return dict(self._headers)

    @property
    def spec_version(self) -> SpecVersion:
        if SPECVERSION not in self._headers:
            raise IllegalStateError("Binary message has no specversion attribute")
        return SpecVersion.parse(self._headers[SPECVERSION])

    @property
    def body(self) -> bytes | None:
        return self._body

    def _is_attribute(self, name: str, version: SpecVersion) -> bool:
        return name in version.all_attributes

    def visit_attributes(self, visitor: AttributesVisitor) -> None:
        version = self.spec_version
        for name, value in self._headers.items():
            if name != SPECVERSION and self._is_attribute(name, version):
                visitor.set_attribute(name, value)

    def visit_extensions(self, visitor: ExtensionsVisitor) -> None:
        version = self.spec_version
        visit_extensions(
            {name: value for name, value in self._headers.items() if not self._is_attribute(name, version)},
            visitor,
        )
