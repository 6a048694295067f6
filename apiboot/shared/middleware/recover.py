"""
Panic recovery middleware.

Catches anything raised by the handlers and middleware it wraps and
hands it to the app's error-handler slot, so a failing handler yields a
normalized 500 instead of a dropped connection. Logging is left to the
error handler.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from apiboot.shared.errors.handlers import default_error_handler


class RecoverMiddleware(BaseHTTPMiddleware):
    """Turns unhandled exceptions into error responses."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            handler = getattr(request.app.state, "error_handler", None)
            return await (handler or default_error_handler)(request, exc)
