"""
apiboot: configuration-driven bootstrap for FastAPI servers.

Given a ServerConfig, builds a FastAPI app with optional validation,
default-value binding, a centralized error-to-response classifier, a
fixed baseline middleware chain and optional auth context, then serves
it with uvicorn until SIGINT and drains it within a bounded timeout.

Layers:
    - core: Configuration.
    - shared: Cross-cutting concerns (errors, i18n, binding, middleware, logging).
    - interfaces: Handler-facing context helpers and routes.
    - capabilities: Optional capability installer.
    - main: Composition root and lifecycle controller.
"""

from apiboot.core.config import AuthConfig, ServerConfig, default_config
from apiboot.interfaces.context import (
    RequestContext,
    bind,
    get_request_context,
    int64_param,
    int_param,
    validate,
)
from apiboot.main import Server, ServerState, create_app, start, start_with
from apiboot.shared.errors import DomainError, FieldFailure, ValidationFailed

__version__ = "0.1.0"

__all__ = [
    "AuthConfig",
    "DomainError",
    "FieldFailure",
    "RequestContext",
    "Server",
    "ServerConfig",
    "ServerState",
    "ValidationFailed",
    "bind",
    "create_app",
    "default_config",
    "get_request_context",
    "int64_param",
    "int_param",
    "start",
    "start_with",
    "validate",
]
