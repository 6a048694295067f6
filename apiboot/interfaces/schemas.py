"""
Pydantic schemas documenting the error envelope.

Used only for the OpenAPI description of the route group; the handlers
build the body from NormalizedErrorResponse.
"""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body returned for every failed request when error handling is on.

    Attributes:
        errorCode: 0 for unclassified and HTTP errors, 9901 for validation
            failures, caller-defined for domain errors.
        message: Human-readable summary.
        data: Optional structured payload.
    """

    errorCode: int = Field(0, description="Stable numeric error code")
    message: str = Field(..., description="Error message")
    data: Any = Field(None, description="Structured error payload")


ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    "default": {"model": ErrorResponse, "description": "Error"},
}
