"""
Error types understood by the response classifier.

Handlers raise these (or framework HTTP errors) and the classifier turns
them into the wire envelope. No framework imports allowed.
"""

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, Protocol, runtime_checkable

VALIDATION_ERROR_CODE = 9901
VALIDATION_ERROR_MESSAGE = "Data validation failed"

# Location prefixes pydantic/FastAPI put in front of the field path.
_LOCATION_SOURCES = frozenset({"body", "query", "path", "header", "cookie"})


class ErrorKind(str, Enum):
    """Discriminant of the error taxonomy."""

    TRANSPORT = "transport"
    VALIDATION = "validation"
    DOMAIN = "domain"
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class FieldFailure:
    """One field that failed one validation rule.

    Attributes:
        field: Dotted path of the offending field.
        rule: Identifier of the failed rule (pydantic error type).
        params: Rule parameters, e.g. ``{"min_length": 3}``.
        value: The rejected input value.
    """

    field: str
    rule: str
    params: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    value: Any = None


class ValidationFailed(Exception):
    """Raised when one or more fields fail validation."""

    def __init__(self, failures: Iterable[FieldFailure]) -> None:
        self.failures = tuple(failures)
        if not self.failures:
            raise ValueError("ValidationFailed needs at least one failure")
        super().__init__(
            "; ".join(f"{f.field}: {f.rule}" for f in self.failures)
        )

    @classmethod
    def from_pydantic(cls, errors: Iterable[Mapping[str, Any]]) -> "ValidationFailed":
        """Build from pydantic's ``errors()`` list, keeping its order."""
        return cls(field_failure(error) for error in errors)


def field_failure(error: Mapping[str, Any]) -> FieldFailure:
    """Convert a single pydantic error dict into a FieldFailure."""
    loc = [str(part) for part in error.get("loc", ())]
    if len(loc) > 1 and loc[0] in _LOCATION_SOURCES:
        loc = loc[1:]
    return FieldFailure(
        field=".".join(loc),
        rule=str(error.get("type", "")),
        params=dict(error.get("ctx") or {}),
        value=error.get("input"),
    )


@runtime_checkable
class ApplicationError(Protocol):
    """Anything exposing a caller-defined error code, message and payload."""

    error_code: int
    message: str
    data: Any


class DomainError(Exception):
    """Base error for application-specific failures.

    The classifier copies ``error_code``, ``message`` and ``data`` into
    the response verbatim.
    """

    def __init__(self, error_code: int, message: str, data: Any = None) -> None:
        self.error_code = error_code
        self.message = message
        self.data = data
        super().__init__(self.message)


@dataclass(frozen=True)
class NormalizedErrorResponse:
    """Uniform response produced for every failed request."""

    status_code: int = 500
    error_code: int = 0
    message: str = ""
    data: Any = None
    kind: ErrorKind = ErrorKind.UNCLASSIFIED

    def to_body(self) -> dict[str, Any]:
        """Return the three-field JSON body."""
        return {
            "errorCode": self.error_code,
            "message": self.message,
            "data": self.data,
        }
