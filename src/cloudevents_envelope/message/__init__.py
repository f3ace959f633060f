from .encoding import Encoding
from .message import Message
from .binary import BaseBinaryMessage, GenericBinaryMessage
from .structured import BaseStructuredMessage, GenericStructuredMessage
from .unknown import UnknownEncodingMessage
from .event_message import EventBinaryMessage, EventStructuredMessage
from .discovery import decode_headers, detect_encoding, message_from_headers

__all__ = [
    "Encoding",
    "Message",
    "BaseBinaryMessage",
    "GenericBinaryMessage",
    "BaseStructuredMessage",
    "GenericStructuredMessage",
    "UnknownEncodingMessage",
    "EventBinaryMessage",
    "EventStructuredMessage",
    "decode_headers",
    "detect_encoding",
    "message_from_headers",
]
