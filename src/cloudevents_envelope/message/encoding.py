from enum import Enum


class Encoding(str, Enum):
    """How an event is laid out in a message.

    A message is created in one of these states and never changes it.
    """

    STRUCTURED = "structured"
    BINARY = "binary"
    UNKNOWN = "unknown"
