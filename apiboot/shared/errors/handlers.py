"""
Centralized error handlers for FastAPI.

Classifies every error that terminates a request into the uniform
``{errorCode, message, data}`` envelope. The log line for each
classified error is written after the response has been sent.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.background import BackgroundTask
from starlette.exceptions import HTTPException as StarletteHTTPException

from apiboot.shared.errors.types import (
    VALIDATION_ERROR_CODE,
    VALIDATION_ERROR_MESSAGE,
    ApplicationError,
    DomainError,
    ErrorKind,
    FieldFailure,
    NormalizedErrorResponse,
    ValidationFailed,
    field_failure,
)
from apiboot.shared.i18n import DEFAULT_LOCALE, negotiate_locale, translate

logger = logging.getLogger("apiboot.errors")

HEADER_ACCEPT_LANGUAGE = "Accept-Language"

HTTP_400 = 400
HTTP_500 = 500

_VALIDATION_TYPES = (ValidationFailed, RequestValidationError, ValidationError)


def classify_kind(exc: BaseException) -> ErrorKind:
    """Return the taxonomy branch of an error, in classification priority."""
    if isinstance(exc, StarletteHTTPException):
        return ErrorKind.TRANSPORT
    if isinstance(exc, _VALIDATION_TYPES):
        return ErrorKind.VALIDATION
    if isinstance(exc, ApplicationError):
        return ErrorKind.DOMAIN
    return ErrorKind.UNCLASSIFIED


def field_failures(exc: BaseException) -> tuple[FieldFailure, ...]:
    """Extract the ordered field failures of a validation error."""
    if isinstance(exc, ValidationFailed):
        return exc.failures
    if isinstance(exc, (RequestValidationError, ValidationError)):
        return tuple(field_failure(error) for error in exc.errors())
    raise TypeError(f"{type(exc).__name__} is not a validation error")


def request_locale(request: Request) -> str:
    """Negotiate the response locale from the Accept-Language header."""
    default = getattr(request.app.state, "default_locale", DEFAULT_LOCALE)
    return negotiate_locale(request.headers.get(HEADER_ACCEPT_LANGUAGE), default)


def classify(exc: BaseException, request: Request) -> NormalizedErrorResponse:
    """Map any error raised while handling ``request`` to a response.

    Args:
        exc: The error that terminated the request.
        request: The request being handled.

    Returns:
        The normalized status code, error code, message and payload.
    """
    kind = classify_kind(exc)
    if kind is ErrorKind.TRANSPORT:
        return NormalizedErrorResponse(
            status_code=exc.status_code,
            message=_render_detail(exc.detail),
            kind=kind,
        )
    if kind is ErrorKind.VALIDATION:
        return NormalizedErrorResponse(
            status_code=HTTP_400,
            error_code=VALIDATION_ERROR_CODE,
            message=VALIDATION_ERROR_MESSAGE,
            data=translate(request_locale(request), field_failures(exc)),
            kind=kind,
        )
    if kind is ErrorKind.DOMAIN:
        return NormalizedErrorResponse(
            status_code=HTTP_500,
            error_code=exc.error_code,
            message=exc.message,
            data=exc.data,
            kind=kind,
        )
    return NormalizedErrorResponse(
        status_code=HTTP_500,
        message=str(exc) or type(exc).__name__,
        kind=kind,
    )


async def handle_error(request: Request, exc: Exception) -> JSONResponse:
    """Exception handler that answers with the classified envelope."""
    normalized = classify(exc, request)
    return JSONResponse(
        status_code=normalized.status_code,
        content=normalized.to_body(),
        headers=getattr(exc, "headers", None),
        background=BackgroundTask(_log_error, request, exc, normalized),
    )


async def default_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler used when the error classifier capability is not installed."""
    if isinstance(exc, StarletteHTTPException):
        status_code = exc.status_code
        content = {"message": _render_detail(exc.detail)}
    else:
        status_code = HTTP_500
        content = {"message": "Internal Server Error"}
    logger.error(
        "%s %s failed: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return JSONResponse(
        status_code=status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the classifier as the app's error-handling capability.

    Args:
        app: The FastAPI application instance.
    """
    for exc_class in (
        StarletteHTTPException,
        RequestValidationError,
        ValidationError,
        ValidationFailed,
        DomainError,
    ):
        app.add_exception_handler(exc_class, handle_error)
    app.state.error_handler = handle_error


def _log_error(
    request: Request, exc: BaseException, normalized: NormalizedErrorResponse
) -> None:
    logger.error(
        "%s %s -> %d (%s, errorCode=%s): %s",
        request.method,
        request.url.path,
        normalized.status_code,
        normalized.kind.value,
        normalized.error_code,
        exc,
        exc_info=(type(exc), exc, exc.__traceback__),
    )


def _render_detail(detail: Any) -> str:
    return detail if isinstance(detail, str) else str(detail)
