"""
Server entry point.

Creates the FastAPI application from a ServerConfig and drives it
through its lifecycle:

    CREATED -> CONFIGURED -> LISTENING -> DRAINING -> STOPPED

with FAILED_TO_START and FAILED_TO_DRAIN as fatal terminal states.
No business logic belongs here.
"""

import logging
import signal
import threading
from enum import Enum
from typing import Any, Callable

import uvicorn
from fastapi import APIRouter, FastAPI

from apiboot.capabilities import install
from apiboot.core.config import ServerConfig, default_config
from apiboot.interfaces.schemas import ERROR_RESPONSES
from apiboot.shared.errors.handlers import default_error_handler
from apiboot.shared.logging import configure_logging
from apiboot.shared.middleware import install_middleware

logger = logging.getLogger(__name__)


class ServerState(str, Enum):
    """Lifecycle states of a Server."""

    CREATED = "created"
    CONFIGURED = "configured"
    LISTENING = "listening"
    DRAINING = "draining"
    STOPPED = "stopped"
    FAILED_TO_START = "failed_to_start"
    FAILED_TO_DRAIN = "failed_to_drain"


_TRANSITIONS: dict[ServerState | None, frozenset[ServerState]] = {
    None: frozenset({ServerState.CREATED}),
    ServerState.CREATED: frozenset({ServerState.CONFIGURED}),
    ServerState.CONFIGURED: frozenset({ServerState.LISTENING}),
    ServerState.LISTENING: frozenset({ServerState.DRAINING, ServerState.FAILED_TO_START}),
    ServerState.DRAINING: frozenset({ServerState.STOPPED, ServerState.FAILED_TO_DRAIN}),
}


def create_app(config: ServerConfig) -> FastAPI:
    """Create and configure the FastAPI application.

    Runs the consumer's init hook, registers the route hooks under the
    base path, installs the enabled capabilities and then the baseline
    middleware chain. This is the composition root of the server.

    Args:
        config: The server configuration.

    Returns:
        A fully configured FastAPI application instance.
    """
    app = FastAPI(title=config.title, version=config.version)
    app.state.config = config
    app.state.default_locale = config.default_locale
    app.state.error_handler = default_error_handler

    if config.init_hook is not None:
        config.init_hook(app)

    if config.route_hooks:
        group = APIRouter(
            prefix=config.route_prefix(),
            responses=ERROR_RESPONSES if config.enable_error_handler else None,
        )
        for route_hook in config.route_hooks:
            route_hook(group)
        app.include_router(group)

    install(app, config)
    install_middleware(app, config.auth)
    return app


class Server:
    """Owns one FastAPI app and one uvicorn server for a single run.

    The uvicorn server runs in a daemon thread; the calling thread blocks
    until SIGINT, then drains within ``config.shutdown_timeout`` seconds.
    Fatal failures are logged and end in ``SystemExit(1)``.
    """

    def __init__(
        self,
        config: ServerConfig,
        server_factory: Callable[[uvicorn.Config], Any] = uvicorn.Server,
    ) -> None:
        self.config = config
        self.app: FastAPI | None = None
        self._server_factory = server_factory
        self._server: Any = None
        self._thread: threading.Thread | None = None
        self._state: ServerState | None = None
        self._wake = threading.Event()
        self._interrupted = threading.Event()
        self._forced = False
        self._failure: BaseException | None = None

    @property
    def state(self) -> ServerState | None:
        """Current lifecycle state (None before run)."""
        return self._state

    def run(self) -> None:
        """Bootstrap, serve until interrupted, then drain and stop."""
        self._transition(ServerState.CREATED)
        self.app = create_app(self.config)
        self._transition(ServerState.CONFIGURED)

        self._server = self._server_factory(
            uvicorn.Config(
                self.app,
                host=self.config.bind_host(),
                port=self.config.port,
                log_config=None,
                access_log=False,
            )
        )

        previous_handler = None
        in_main_thread = threading.current_thread() is threading.main_thread()
        if in_main_thread:
            previous_handler = signal.signal(signal.SIGINT, self._on_interrupt)
        try:
            self._transition(ServerState.LISTENING)
            self._thread = threading.Thread(
                target=self._serve, name="apiboot-server", daemon=True
            )
            self._thread.start()
            logger.info("Listening on %s", self.config.address())

            self._wake.wait()
            if not self._interrupted.is_set():
                self._fatal(
                    ServerState.FAILED_TO_START,
                    "Server on %s exited before it was interrupted: %s",
                    self.config.address(),
                    self._failure or "not started",
                )
            self._drain()
        finally:
            if previous_handler is not None:
                signal.signal(signal.SIGINT, previous_handler)

    def interrupt(self) -> None:
        """Request shutdown as if SIGINT had been received."""
        self._on_interrupt(signal.SIGINT, None)

    def _on_interrupt(self, signum: int, frame: Any) -> None:
        if self._interrupted.is_set():
            # Second interrupt while draining: stop waiting for connections.
            logger.warning("Second interrupt received, forcing shutdown")
            self._forced = True
            if self._server is not None:
                self._server.force_exit = True
            return
        self._interrupted.set()
        self._wake.set()

    def _serve(self) -> None:
        try:
            self._server.run()
        except SystemExit as exc:
            # uvicorn exits this way when it cannot bind
            self._failure = exc
        except Exception as exc:
            self._failure = exc
            logger.error("Server thread crashed", exc_info=True)
        finally:
            self._wake.set()

    def _drain(self) -> None:
        timeout = self.config.shutdown_timeout
        self._transition(ServerState.DRAINING)
        logger.info("Interrupt received, draining for up to %.1fs", timeout)
        self._server.should_exit = True
        self._thread.join(timeout)
        if self._thread.is_alive():
            self._fatal(
                ServerState.FAILED_TO_DRAIN,
                "Server did not drain within %.1fs",
                timeout,
            )
        if self._forced:
            self._fatal(ServerState.FAILED_TO_DRAIN, "Drain aborted by a second interrupt")
        self._transition(ServerState.STOPPED)
        logger.info("Server stopped")

    def _transition(self, target: ServerState) -> None:
        if target not in _TRANSITIONS.get(self._state, frozenset()):
            raise RuntimeError(
                f"illegal lifecycle transition {self._state} -> {target.value}"
            )
        logger.debug("Lifecycle: %s -> %s", self._state, target.value)
        self._state = target

    def _fatal(self, state: ServerState, message: str, *args: Any) -> None:
        self._transition(state)
        logger.critical(message, *args)
        raise SystemExit(1)


def start_with(config: ServerConfig) -> None:
    """Configure logging and run a server for ``config``."""
    configure_logging(level=config.log_level, access_log=config.access_log)
    Server(config).run()


def start() -> None:
    """Run a server with the default configuration."""
    start_with(default_config())
