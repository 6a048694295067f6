"""
Pre-routing request rewrites.

Both middlewares mutate the ASGI scope before the router sees it, so
routing decisions use the rewritten method and path.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

HEADER_METHOD_OVERRIDE = "X-HTTP-Method-Override"


class MethodOverrideMiddleware(BaseHTTPMiddleware):
    """Lets POST requests tunnel another method through a header."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.scope["method"] == "POST":
            override = request.headers.get(HEADER_METHOD_OVERRIDE, "").strip()
            if override:
                request.scope["method"] = override.upper()
        return await call_next(request)


class RemoveTrailingSlashMiddleware(BaseHTTPMiddleware):
    """Strips trailing slashes so ``/users/`` routes like ``/users``."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.scope["path"]
        if len(path) > 1 and path.endswith("/"):
            request.scope["path"] = path.rstrip("/") or "/"
            raw_path = request.scope.get("raw_path")
            if raw_path:
                request.scope["raw_path"] = raw_path.rstrip(b"/") or b"/"
        return await call_next(request)
