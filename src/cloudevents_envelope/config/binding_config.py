"""Protocol binding configuration.

A :class:`BindingConfig` describes how events are laid out on a
header-carrying transport: the attribute header prefix, the header holding
the content type, and whether events are written in structured mode.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union
import logging

from .base_config import ValidationResult, BaseConfig
from .auto_validate import auto_validate_after_init
from .config_loader import ConfigLoader, DEFAULT_ENV_PREFIX
from ..format.event_format import EventFormat
from ..format.json_format import JsonFormat
from ..format.registry import EventFormatProvider

logger = logging.getLogger(__name__)


@auto_validate_after_init
class BindingConfig(BaseConfig):
    """Configuration of a header binding.

    Args:
        header_prefix: Prefix of attribute and extension headers (``ce_`` for
            Kafka, ``ce-`` for HTTP).
        content_type_header: Header carrying ``datacontenttype`` in binary
            mode and the format media type in structured mode. ``None`` keeps
            ``datacontenttype`` as a prefixed header.
        structured_format: Media type of the event format used to write
            events in structured mode. ``None`` writes binary mode.
        validate_schema: Validate incoming JSON events against the CloudEvent
            JSON schema.
    """

    def __init__(self,
                 header_prefix: str = "ce_",
                 content_type_header: Optional[str] = "content-type",
                 structured_format: Optional[str] = None,
                 validate_schema: bool = False) -> None:
        super().__init__()
        self._header_prefix = header_prefix
        self._content_type_header = content_type_header
        self._structured_format = structured_format
        self._validate_schema = validate_schema

    @property
    def header_prefix(self) -> str:
        return self._header_prefix

    @property
    def content_type_header(self) -> Optional[str]:
        return self._content_type_header

    @property
    def structured_format(self) -> Optional[str]:
        return self._structured_format

    @property
    def validate_schema(self) -> bool:
        return self._validate_schema

    @property
    def is_structured(self) -> bool:
        return self._structured_format is not None

    def create_registry(self) -> EventFormatProvider:
        """Format registry used to read events with this configuration.

        The process-wide registry is shared unless schema validation is
        enabled, in which case a registry with a validating JSON format is
        returned.
        """
        if not self._validate_schema:
            return EventFormatProvider.default()

        registry = EventFormatProvider()
        registry.register(JsonFormat(validate_schema=True))
        return registry

    def event_format(self, registry: Optional[EventFormatProvider] = None) -> Optional[EventFormat]:
        """The format used to write structured events, or ``None`` in binary mode.

        Raises:
            ValueError: If ``structured_format`` names an unregistered media type.
        """
        if self._structured_format is None:
            return None

        registry = registry or self.create_registry()
        event_format = registry.resolve(self._structured_format)
        if event_format is None:
            logger.error(f"No event format registered for {self._structured_format}")
            raise ValueError(f"No event format registered for {self._structured_format}")
        return event_format

    def _validate_impl(self) -> ValidationResult:
        errors = []
        warnings = []

        if not self._header_prefix or not self._header_prefix.strip():
            errors.append("header_prefix cannot be empty")

        if self._content_type_header is not None and not self._content_type_header.strip():
            errors.append("content_type_header cannot be blank, use None to disable it")

        if not isinstance(self._validate_schema, bool):
            errors.append("validate_schema must be a boolean")

        if self._structured_format is not None:
            if EventFormatProvider.default().resolve(self._structured_format) is None:
                warnings.append(f"structured_format {self._structured_format} is not a registered media type")
            if self._content_type_header is None:
                errors.append("structured mode requires a content_type_header")

        if self._header_prefix and self._header_prefix[-1] not in ("_", "-", ":"):
            warnings.append(f"header_prefix {self._header_prefix!r} has no separator")

        return ValidationResult.from_messages(errors, warnings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'header_prefix': self._header_prefix,
            'content_type_header': self._content_type_header,
            'structured_format': self._structured_format,
            'validate_schema': self._validate_schema,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BindingConfig':
        """Create a BindingConfig from a dictionary.

        Expected structure:
            {
                'header_prefix': str (optional, default='ce_'),
                'content_type_header': str | None (optional, default='content-type'),
                'structured_format': str | None (optional),
                'validate_schema': bool (optional, default=False)
            }
        """
        return cls(
            header_prefix=data.get('header_prefix', 'ce_'),
            content_type_header=data.get('content_type_header', 'content-type'),
            structured_format=data.get('structured_format'),
            validate_schema=data.get('validate_schema', False)
        )

    @classmethod
    def from_file(
        cls,
        config_file: Union[str, Path],
        env_prefix: str = DEFAULT_ENV_PREFIX,
        base_config: Optional[Dict[str, Any]] = None
    ) -> 'BindingConfig':
        """Load configuration from a file with environment variable overrides.

        Raises:
            FileNotFoundError: If the configuration file doesn't exist.
            ValueError: If the file format is invalid.
        """
        merged_config = ConfigLoader.load_config(
            config_file=config_file,
            env_prefix=env_prefix,
            base_config=base_config
        )
        return cls.from_dict(merged_config)

    @classmethod
    def from_env(
        cls,
        env_prefix: str = DEFAULT_ENV_PREFIX,
        base_config: Optional[Dict[str, Any]] = None
    ) -> 'BindingConfig':
        """Load configuration from environment variables.

        Example:
            CLOUDEVENTS_HEADER_PREFIX=ce-
            CLOUDEVENTS_STRUCTURED_FORMAT=application/cloudevents+json
            CLOUDEVENTS_VALIDATE_SCHEMA=true
        """
        merged_config = ConfigLoader.load_config(
            config_file=None,
            env_prefix=env_prefix,
            base_config=base_config
        )
        return cls.from_dict(merged_config)

    def __repr__(self) -> str:
        return (
            f"BindingConfig("
            f"header_prefix='{self._header_prefix}', "
            f"content_type_header='{self._content_type_header}', "
            f"structured_format='{self._structured_format}', "
            f"validate_schema={self._validate_schema}"
            f")"
        )
