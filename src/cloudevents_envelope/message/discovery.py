"""Encoding discovery for header-carrying transports.

A transport message is structured when its content type names a registered
event format, binary when it carries the prefixed ``specversion`` header, and
of unknown encoding otherwise. Header names are matched case-insensitively;
``bytes`` header values are decoded as UTF-8.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Tuple, Union

from .binary import GenericBinaryMessage
from .encoding import Encoding
from .message import Message
from .structured import GenericStructuredMessage
from .unknown import UnknownEncodingMessage
from ..errors import EventDeserializationError
from ..format.registry import EventFormatProvider
from ..spec_version import DATACONTENTTYPE, SPECVERSION

logger = logging.getLogger(__name__)

Headers = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]


def _decode_value(name: str, value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError as e:
            logger.error(f"Header {name} is not valid UTF-8: {e}")
            raise EventDeserializationError(f"Header {name} is not valid UTF-8") from e
    return value


def decode_headers(headers: Headers) -> dict[str, Any]:
    """Normalize a header mapping or a sequence of ``(name, value)`` pairs into a dict."""
    items = headers.items() if isinstance(headers, Mapping) else headers
    return {name: _decode_value(name, value) for name, value in items}


def _lookup(headers: Mapping[str, Any], name: str) -> Any:
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def detect_encoding(headers: Headers,
                    *,
                    prefix: str = "ce_",
                    content_type_header: str | None = "content-type",
                    registry: EventFormatProvider | None = None) -> Encoding:
    """Decide the encoding of a transport message from its headers alone."""
    headers = decode_headers(headers)
    registry = registry or EventFormatProvider.default()

    if content_type_header is not None:
        content_type = _lookup(headers, content_type_header)
        if content_type and registry.resolve(content_type) is not None:
            return Encoding.STRUCTURED

    if _lookup(headers, prefix + SPECVERSION) is not None:
        return Encoding.BINARY

    return Encoding.UNKNOWN


def message_from_headers(headers: Headers,
                         body: bytes | None,
                         *,
                         prefix: str = "ce_",
                         content_type_header: str | None = "content-type",
                         registry: EventFormatProvider | None = None) -> Message:
    """Wrap a transport message in the :class:`Message` matching its encoding.

    In binary mode the prefix is stripped from every prefixed header and the
    content type header, when configured, becomes ``datacontenttype``.
    Headers without the prefix are ignored.
    """
    headers = decode_headers(headers)
    registry = registry or EventFormatProvider.default()
    encoding = detect_encoding(headers, prefix=prefix, content_type_header=content_type_header, registry=registry)

    if encoding is Encoding.STRUCTURED:
        event_format = registry.resolve(_lookup(headers, content_type_header))
        return GenericStructuredMessage(event_format, body or b"")

    if encoding is Encoding.BINARY:
        lowered_prefix = prefix.lower()
        values = {
            name[len(prefix):].lower(): value
            for name, value in headers.items()
            if name.lower().startswith(lowered_prefix)
        }
        if content_type_header is not None:
            content_type = _lookup(headers, content_type_header)
            if content_type:
                values[DATACONTENTTYPE] = content_type
        return GenericBinaryMessage(values, body)

    logger.debug(f"Could not detect the encoding of a message with headers {sorted(headers)}")
    return UnknownEncodingMessage()
