"""Base class of binding configuration objects.

Configuration objects validate lazily and keep the outcome, so a binding can
be constructed from partial data and checked once everything is in place.
An invalid outcome is kept as well and reported on every later check.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from dataclasses import dataclass, field
import threading


class ConfigValidationError(Exception):
    """Raised when a binding configuration is invalid."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__(f"Configuration validation failed: {'; '.join(self.errors)}")


@dataclass(frozen=True)
class ValidationResult:
    """Errors make a configuration unusable, warnings are only logged."""
    is_valid: bool
    errors: list[str]
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def from_messages(cls, errors: list[str], warnings: Optional[list[str]] = None) -> 'ValidationResult':
        return cls(is_valid=not errors, errors=list(errors), warnings=list(warnings or []))


class BaseConfig(ABC):
    """Lazily validated configuration.

    Subclasses implement :meth:`_validate_impl` and :meth:`to_dict`.
    """

    def __init__(self) -> None:
        self._validation_result: Optional[ValidationResult] = None
        self._validation_lock = threading.RLock()

    @property
    def is_validated(self) -> bool:
        """Whether the configuration is valid, validating it on first access."""
        try:
            self.validate()
        except ConfigValidationError:
            return False
        return True

    @property
    def validation_result(self) -> Optional[ValidationResult]:
        with self._validation_lock:
            return self._validation_result

    def validate(self) -> ValidationResult:
        """Validate once and return the kept result.

        Raises:
            ConfigValidationError: If the result has errors, on this call and
                every later one.
        """
        with self._validation_lock:
            if self._validation_result is None:
                self._validation_result = self._validate_impl()
            result = self._validation_result

        if not result.is_valid:
            raise ConfigValidationError(result.errors)
        return result

    def ensure_valid(self) -> None:
        self.validate()

    @abstractmethod
    def _validate_impl(self) -> ValidationResult:
        ...

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Plain dictionary accepted back by the subclass ``from_dict``."""

    def __repr__(self) -> str:
        with self._validation_lock:
            result = self._validation_result
        status = "?" if result is None else ("✓" if result.is_valid else "✗")
        return f"{self.__class__.__name__}(validated={status})"
