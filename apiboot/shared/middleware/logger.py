"""
Access logging middleware.

Writes one line per request. Never logs bodies or auth material.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from apiboot.shared.logging import ACCESS_LOGGER
from apiboot.shared.middleware.request_id import HEADER_REQUEST_ID

logger = logging.getLogger(ACCESS_LOGGER)


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and latency of every request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        latency_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "id=%s remote_ip=%s method=%s uri=%s status=%d latency_ms=%.2f",
            response.headers.get(HEADER_REQUEST_ID, "-"),
            request.client.host if request.client else "-",
            request.method,
            request.url.path,
            response.status_code,
            latency_ms,
        )
        return response
