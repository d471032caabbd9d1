"""
Custom exceptions for the registrar.

Domain operations report failures through ``OperationResult``; these
exceptions are reserved for malformed arguments that reject a call outright.
"""

from typing import Optional, Any, Dict


class RegistrarException(Exception):
    """Base exception for all registrar errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ValidationError(RegistrarException):
    """Raised when data validation fails."""
    pass


class InvalidDurationError(ValidationError):
    """Raised when a time slot does not end strictly after it starts."""

    def __init__(self, message: str = "Classes must have a duration greater than zero.",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="invalid_duration", details=details)


class InvalidNameError(ValidationError):
    """Raised when a name is not exactly a first and a last name."""

    def __init__(self, name: Any, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            f"Name must be exactly 'First Last', got {name!r}",
            error_code="invalid_name",
            details=details or {"name": name},
        )
        self.name = name


class ConfigurationError(RegistrarException):
    """Raised when configuration is invalid."""
    pass
