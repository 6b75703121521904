from .base import BaseService
from .exceptions import (
    BaseError,
    NotFoundError,
    ValidationError,
    BusinessLogicError,
)
from .config import Settings, get_settings
from .validation import ValidationIssue, ValidationResult, Severity

__all__ = [
    # Base classes
    "BaseService",

    # Exceptions
    "BaseError",
    "NotFoundError",
    "ValidationError",
    "BusinessLogicError",

    # Config
    "Settings",
    "get_settings",

    # Validation
    "ValidationIssue",
    "ValidationResult",
    "Severity",
]
