"""Configuration for cloudevents-envelope protocol bindings."""

from .base_config import BaseConfig, ConfigValidationError, ValidationResult
from .auto_validate import auto_validate_after_init
from .config_loader import ConfigLoader
from .binding_config import BindingConfig

__all__ = [
    "BaseConfig",
    "ConfigValidationError",
    "ValidationResult",
    "auto_validate_after_init",
    "ConfigLoader",
    "BindingConfig",
]
