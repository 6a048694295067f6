"""
Server configuration.

Loads bootstrap settings from constructor arguments, environment
variables (``APIBOOT_*``) and a ``.env`` file. A configuration is
immutable once handed to the lifecycle controller.
"""

from typing import Callable

from fastapi import APIRouter, FastAPI
from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

InitHook = Callable[[FastAPI], None]
RouteHook = Callable[[APIRouter], None]

DEFAULT_PORT = 1323
DEFAULT_SHUTDOWN_TIMEOUT = 10.0


class AuthConfig(BaseModel):
    """Authentication settings exposed to every request context.

    The bootstrap layer never interprets these values; it only makes them
    available to handlers and error handlers.

    Attributes:
        secret_key: Key used to sign or verify tokens.
        algorithm: Token signing algorithm.
        token_lookup: Where to find the token, as ``<source>:<name>``.
        auth_scheme: Scheme prefix expected in the Authorization header.
        policy: Optional role to allowed-path mapping for authorisers.
    """

    model_config = ConfigDict(frozen=True)

    secret_key: str
    algorithm: str = "HS256"
    token_lookup: str = "header:Authorization"
    auth_scheme: str = "Bearer"
    policy: dict[str, tuple[str, ...]] | None = None


class ServerConfig(BaseSettings):
    """Declarative description of the server to bootstrap.

    Attributes:
        host: Interface to bind. Blank means all interfaces.
        port: TCP port to bind.
        base_path: Prefix for every route registered by ``route_hooks``.
        enable_validation: Attach the validator capability.
        enable_default_binder: Attach the default-value binder capability.
        enable_error_handler: Attach the error classifier capability.
        auth: Auth settings injected into each request context.
        init_hook: Called with the FastAPI app right after it is created.
        route_hooks: Called in order with the base-path route group.
        title: OpenAPI title of the app.
        version: OpenAPI version of the app.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        access_log: Log one line per request.
        default_locale: Locale used when Accept-Language does not match.
        shutdown_timeout: Seconds in-flight requests get to finish.
    """

    model_config = SettingsConfigDict(
        env_prefix="APIBOOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    host: str = ""
    port: int = DEFAULT_PORT
    base_path: str = ""
    enable_validation: bool = True
    enable_default_binder: bool = True
    enable_error_handler: bool = True
    auth: AuthConfig | None = None
    init_hook: InitHook | None = None
    route_hooks: tuple[RouteHook, ...] = ()

    title: str = "apiboot"
    version: str = "0.1.0"
    log_level: str = "INFO"
    access_log: bool = True
    default_locale: str = "en"
    shutdown_timeout: float = DEFAULT_SHUTDOWN_TIMEOUT

    def address(self) -> str:
        """Return the listen address as ``host:port`` (``:port`` when blank)."""
        if self.host.strip():
            return f"{self.host}:{self.port}"
        return f":{self.port}"

    def bind_host(self) -> str:
        """Return the host to hand to the ASGI server."""
        return self.host.strip() or "0.0.0.0"

    def route_prefix(self) -> str:
        """Normalise ``base_path`` into an APIRouter prefix."""
        prefix = self.base_path.strip().rstrip("/")
        if prefix and not prefix.startswith("/"):
            prefix = "/" + prefix
        return prefix


def default_config() -> ServerConfig:
    """Build the default configuration.

    Port 1323, validation, default binding and error handling enabled,
    no auth, no hooks.
    """
    return ServerConfig()
