"""Class decorator validating a configuration once its ``__init__`` has returned."""

from typing import TypeVar, Type
from functools import wraps
import logging

from .base_config import ConfigValidationError

logger = logging.getLogger(__name__)

C = TypeVar('C')


def auto_validate_after_init(cls: Type[C]) -> Type[C]:
    """Validate instances of ``cls`` as soon as they are constructed.

    An invalid configuration is still constructed: the errors are logged and
    kept on the instance, and ``validate()``/``ensure_valid()`` raise them.
    Warnings are logged once, here.
    """
    init = cls.__init__

    @wraps(init)
    def __init__(self, *args, **kwargs):
        init(self, *args, **kwargs)

        # A decorated subclass validates after its own __init__
        if type(self) is not cls:
            return

        try:
            result = self.validate()
        except ConfigValidationError as e:
            logger.warning(f"Invalid {cls.__name__}: {'; '.join(e.errors)}")
            return

        for warning in result.warnings:
            logger.warning(f"{cls.__name__}: {warning}")

    cls.__init__ = __init__
    return cls
