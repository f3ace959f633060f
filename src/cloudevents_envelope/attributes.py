"""Versioned CloudEvents context attributes.

The attribute set of an event is an immutable pydantic model whose concrete
class encodes the spec version: :class:`AttributesV03` calls the schema
attribute ``schemaurl`` while :class:`AttributesV1` calls it ``dataschema``.
Everything else is shared and survives migration in both directions.
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import Annotated, Any, ClassVar, Optional
from urllib.parse import urlsplit

from pydantic import AfterValidator, AwareDatetime, BaseModel, ConfigDict, StringConstraints

from .errors import UnsupportedAttributeError
from .spec_version import (
    DATACONTENTTYPE,
    ID,
    SOURCE,
    SPECVERSION,
    SUBJECT,
    TIME,
    TYPE,
    SpecVersion,
)
from .visitor import AttributesVisitor


def _check_uri(value: str) -> str:
    if any(ch.isspace() for ch in value):
        raise ValueError(f"'{value}' is not a valid URI reference")
    # urlsplit rejects malformed authorities such as unbalanced IPv6 brackets
    urlsplit(value)
    return value


NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]
UriRef = Annotated[str, StringConstraints(min_length=1), AfterValidator(_check_uri)]


class Attributes(BaseModel):
    """Fields shared by every spec version.

    Required fields are always present on a constructed instance; optional
    ones are ``None`` when absent and never empty strings.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    spec_version: ClassVar[SpecVersion]

    id: NonEmptyStr
    source: UriRef
    type: NonEmptyStr
    datacontenttype: Optional[NonEmptyStr] = None
    subject: Optional[NonEmptyStr] = None
    time: Optional[AwareDatetime] = None

    @property
    @abstractmethod
    def data_schema(self) -> str | None:
        """The data schema URI, whatever this version calls the attribute."""

    @abstractmethod
    def to_v03(self) -> AttributesV03:
        ...

    @abstractmethod
    def to_v1(self) -> AttributesV1:
        ...

    def _shared_fields(self) -> dict[str, Any]:
        return {
            ID: self.id,
            SOURCE: self.source,
            TYPE: self.type,
            DATACONTENTTYPE: self.datacontenttype,
            SUBJECT: self.subject,
            TIME: self.time,
        }

    def get_attribute(self, name: str) -> Any:
        """Look an attribute up by its CloudEvents name.

        Raises:
            UnsupportedAttributeError: If ``name`` is not an attribute of this
                spec version.
        """
        if name == SPECVERSION:
            return self.spec_version
        if name not in self.spec_version.all_attributes:
            raise UnsupportedAttributeError(name)
        return getattr(self, name)

    def attribute_names(self) -> list[str]:
        """Names of the attributes that have a value, ``specversion`` included."""
        return [
            name for name in self.spec_version.all_attributes
            if self.get_attribute(name) is not None
        ]

    def visit_attributes(self, visitor: AttributesVisitor) -> None:
        """Push every present attribute, except ``specversion``, to ``visitor``."""
        for name in self.spec_version.all_attributes:
            if name == SPECVERSION:
                continue
            value = getattr(self, name)
            if value is not None:
                visitor.set_attribute(name, value)


class AttributesV03(Attributes):
    spec_version: ClassVar[SpecVersion] = SpecVersion.V03

    schemaurl: Optional[UriRef] = None

    @property
    def data_schema(self) -> str | None:
        return self.schemaurl

    def to_v03(self) -> AttributesV03:
        return self

    def to_v1(self) -> AttributesV1:
        return AttributesV1(dataschema=self.schemaurl, **self._shared_fields())


class AttributesV1(Attributes):
    spec_version: ClassVar[SpecVersion] = SpecVersion.V1

    dataschema: Optional[UriRef] = None

    @property
    def data_schema(self) -> str | None:
        return self.dataschema

    def to_v03(self) -> AttributesV03:
        return AttributesV03(schemaurl=self.dataschema, **self._shared_fields())

    def to_v1(self) -> AttributesV1:
        return self


ATTRIBUTES_BY_VERSION: dict[SpecVersion, type[Attributes]] = {
    SpecVersion.V03: AttributesV03,
    SpecVersion.V1: AttributesV1,
}


def format_time(value: datetime) -> str:
    """Render a timestamp the way it travels in headers and JSON documents."""
    return value.isoformat()
