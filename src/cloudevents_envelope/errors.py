"""Exception hierarchy for cloudevents-envelope.

Every failure raised by the envelope model, the message layer and the
structured formats derives from :class:`CloudEventError`, so callers can
catch the whole family at the transport boundary.
"""


class CloudEventError(Exception):
    """Base class for all cloudevents-envelope errors."""
    pass


class IllegalStateError(CloudEventError, RuntimeError):
    """Raised when an operation is not supported in the current state.

    Examples are visiting a message whose encoding is unknown, calling a
    binary visit on a structured message, or reusing a builder after
    ``build()``/``end()``.
    """
    pass


class UnsupportedExtensionValueError(IllegalStateError, TypeError):
    """Raised when an extension holds a value that is not a string, number or boolean."""

    def __init__(self, name: str, value: object):
        self.name = name
        self.value = value
        super().__init__(
            f"Illegal value inside extensions map: {name}={value!r} ({type(value).__name__})"
        )


class UnrecognizedSpecVersionError(CloudEventError, ValueError):
    """Raised when a spec version discriminator does not match a known version."""

    def __init__(self, version: object):
        self.version = version
        super().__init__(f"Unrecognized spec version: {version!r}")


class InvalidAttributeError(CloudEventError, ValueError):
    """Raised when an attribute or extension name/value violates the envelope contract."""
    pass


class UnsupportedAttributeError(CloudEventError, NotImplementedError):
    """Raised by generic attribute lookup for names it does not support yet."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Attribute not supported: {name!r}")


class MessageVisitError(CloudEventError):
    """Raised when visiting a message fails."""
    pass


class EventSerializationError(MessageVisitError):
    """Raised by an event format when an event cannot be serialized."""
    pass


class EventDeserializationError(MessageVisitError):
    """Raised by an event format when a payload cannot be parsed."""
    pass


class MissingDataError(CloudEventError, ValueError):
    """Raised when a conversion path requires event data and none is present."""
    pass
