"""
Baseline middleware chain.

Order, outermost first: method override, trailing-slash removal,
request logging, panic recovery, request ID, then the optional auth
context. Recovery wraps everything registered after it.
"""

from fastapi import FastAPI

from apiboot.core.config import AuthConfig
from apiboot.shared.middleware.auth import AuthContextMiddleware
from apiboot.shared.middleware.logger import RequestLoggerMiddleware
from apiboot.shared.middleware.recover import RecoverMiddleware
from apiboot.shared.middleware.request_id import RequestIDMiddleware
from apiboot.shared.middleware.rewrite import (
    MethodOverrideMiddleware,
    RemoveTrailingSlashMiddleware,
)

BASELINE_MIDDLEWARE = (
    MethodOverrideMiddleware,
    RemoveTrailingSlashMiddleware,
    RequestLoggerMiddleware,
    RecoverMiddleware,
    RequestIDMiddleware,
)


def install_middleware(app: FastAPI, auth: AuthConfig | None = None) -> None:
    """Install the baseline chain and, when configured, the auth context.

    ``add_middleware`` prepends, so the chain is added innermost first.
    Middleware already present on the app is not added again.
    """
    installed = {entry.cls for entry in app.user_middleware}
    if auth is not None and AuthContextMiddleware not in installed:
        app.add_middleware(AuthContextMiddleware, auth=auth)
    for middleware_class in reversed(BASELINE_MIDDLEWARE):
        if middleware_class not in installed:
            app.add_middleware(middleware_class)


__all__ = [
    "BASELINE_MIDDLEWARE",
    "AuthContextMiddleware",
    "MethodOverrideMiddleware",
    "RecoverMiddleware",
    "RemoveTrailingSlashMiddleware",
    "RequestIDMiddleware",
    "RequestLoggerMiddleware",
    "install_middleware",
]
