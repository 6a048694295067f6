"""
Auth context middleware.

Makes the configured auth settings visible to every handler and to the
error handlers through ``request.state.auth``.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from apiboot.core.config import AuthConfig


class AuthContextMiddleware(BaseHTTPMiddleware):
    """Injects the auth configuration into the request state."""

    def __init__(self, app: ASGIApp, auth: AuthConfig) -> None:
        super().__init__(app)
        self.auth = auth

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request.state.auth = self.auth
        return await call_next(request)
