from __future__ import annotations

from enum import Enum

from .errors import UnrecognizedSpecVersionError

SPECVERSION = "specversion"
ID = "id"
SOURCE = "source"
TYPE = "type"
DATACONTENTTYPE = "datacontenttype"
DATASCHEMA = "dataschema"
SCHEMAURL = "schemaurl"
SUBJECT = "subject"
TIME = "time"


class SpecVersion(str, Enum):
    """The CloudEvents specification revisions supported by this package."""

    V03 = "0.3"
    V1 = "1.0"

    @classmethod
    def parse(cls, value: SpecVersion | str | None) -> SpecVersion:
        """Resolve a version discriminator string.

        Args:
            value: ``"0.3"``, ``"1.0"`` or an existing ``SpecVersion``.

        Returns:
            The matching ``SpecVersion``.

        Raises:
            UnrecognizedSpecVersionError: For any other value. There is no
                fallback to the newest version.
        """
        if isinstance(value, SpecVersion):
            return value
        for version in cls:
            if version.value == value:
                return version
        raise UnrecognizedSpecVersionError(value)

    @property
    def mandatory_attributes(self) -> tuple[str, ...]:
        return (ID, SOURCE, SPECVERSION, TYPE)

    @property
    def optional_attributes(self) -> tuple[str, ...]:
        if self is SpecVersion.V03:
            return (DATACONTENTTYPE, SCHEMAURL, SUBJECT, TIME)
        return (DATACONTENTTYPE, DATASCHEMA, SUBJECT, TIME)

    @property
    def all_attributes(self) -> tuple[str, ...]:
        return self.mandatory_attributes + self.optional_attributes

    @property
    def schema_attribute(self) -> str:
        """Name of the attribute carrying the data schema URI in this version."""
        return SCHEMAURL if self is SpecVersion.V03 else DATASCHEMA

    def __str__(self) -> str:
        return self.value


# Names that can never be used as extension names, whatever the event version.
RESERVED_NAMES = frozenset(
    name for version in SpecVersion for name in version.all_attributes
) | {"data", "data_base64"}
