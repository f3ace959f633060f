"""Typed extension attributes.

Extension values are restricted to strings, numbers and booleans. The kind
of a value is decided by its runtime type, with ``bool`` checked before the
numeric types because ``bool`` is an ``int`` subclass in Python.
"""

import logging
import re
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Union

from .errors import InvalidAttributeError, UnsupportedExtensionValueError
from .spec_version import RESERVED_NAMES
from .visitor import ExtensionsVisitor

logger = logging.getLogger(__name__)

ExtensionValue = Union[str, int, float, Decimal, bool]

_EXTENSION_NAME = re.compile(r"^[a-z0-9]+$")


class ExtensionKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"


def extension_kind(name: str, value: Any) -> ExtensionKind:
    """Classify an extension value.

    Args:
        name: The extension name, used for the error message.
        value: The value to classify.

    Returns:
        The kind of the value.

    Raises:
        UnsupportedExtensionValueError: If the value is not a string, an
            ``int``/``float``/``Decimal`` or a ``bool``.
    """
    if isinstance(value, bool):
        return ExtensionKind.BOOLEAN
    if isinstance(value, str):
        return ExtensionKind.STRING
    if isinstance(value, (int, float, Decimal)):
        return ExtensionKind.NUMBER
    raise UnsupportedExtensionValueError(name, value)


def validate_extension_name(name: str) -> str:
    """Check that ``name`` can be used as an extension attribute name.

    Raises:
        InvalidAttributeError: If the name is empty, not lowercase
            alphanumeric, or collides with a context attribute name.
    """
    if not isinstance(name, str) or not _EXTENSION_NAME.match(name):
        raise InvalidAttributeError(
            f"Invalid extension name {name!r}: must be non-empty lowercase alphanumeric"
        )
    if name in RESERVED_NAMES:
        raise InvalidAttributeError(f"Extension name {name!r} is reserved for a context attribute")
    return name


def visit_extensions(extensions: Mapping[str, Any], visitor: ExtensionsVisitor) -> None:
    """Push every extension to ``visitor`` through the setter matching its kind."""
    for name, value in extensions.items():
        try:
            kind = extension_kind(name, value)
        except UnsupportedExtensionValueError:
            # Only reachable when the map was filled without going through a builder
            logger.error(f"Cannot visit extension {name}: unsupported value {value!r}")
            raise

        if kind is ExtensionKind.BOOLEAN:
            visitor.set_extension_boolean(name, value)
        elif kind is ExtensionKind.STRING:
            visitor.set_extension_string(name, value)
        else:
            visitor.set_extension_number(name, value)


def extension_to_string(value: ExtensionValue) -> str:
    """Canonical string form of an extension value for string-only transports."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
