"""
Shared error handling package.

Centralizes error-to-HTTP mapping so that every failure raised while
handling a request is translated into the same JSON envelope.
"""

from apiboot.shared.errors.types import (
    VALIDATION_ERROR_CODE,
    VALIDATION_ERROR_MESSAGE,
    ApplicationError,
    DomainError,
    ErrorKind,
    FieldFailure,
    NormalizedErrorResponse,
    ValidationFailed,
)

__all__ = [
    "VALIDATION_ERROR_CODE",
    "VALIDATION_ERROR_MESSAGE",
    "ApplicationError",
    "DomainError",
    "ErrorKind",
    "FieldFailure",
    "NormalizedErrorResponse",
    "ValidationFailed",
]
