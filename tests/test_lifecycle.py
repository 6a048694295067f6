"""
Tests for the server lifecycle controller.

Most tests drive Server.run() against a fake uvicorn server so the
state machine can be checked without sockets; the last class runs a
real uvicorn server on a loopback port.
"""

import os
import signal
import socket
import sys
import threading
import time

import httpx
import pytest
import uvicorn
from fastapi import APIRouter

from apiboot.core.config import ServerConfig
from apiboot.main import Server, ServerState


class FakeServer:
    """Stands in for uvicorn.Server."""

    def __init__(self, config: uvicorn.Config, fail_bind: bool = False, hang: bool = False) -> None:
        self.config = config
        self.fail_bind = fail_bind
        self.hang = hang
        self.started = False
        self.force_exit = False
        self._exit = threading.Event()

    @property
    def should_exit(self) -> bool:
        return self._exit.is_set()

    @should_exit.setter
    def should_exit(self, value: bool) -> None:
        if value:
            self._exit.set()

    def run(self) -> None:
        if self.fail_bind:
            raise SystemExit(1)
        self.started = True
        self._exit.wait()
        while self.hang and not self.force_exit:
            time.sleep(0.01)


class FakeFactory:
    def __init__(self, **options) -> None:
        self.options = options
        self.servers: list[FakeServer] = []

    def __call__(self, config: uvicorn.Config) -> FakeServer:
        server = FakeServer(config, **self.options)
        self.servers.append(server)
        return server


def wait_for(condition, timeout: float = 5.0) -> None:
    deadline = time.monotonic() + timeout
    while not condition():
        if time.monotonic() > deadline:
            raise TimeoutError("condition not met")
        time.sleep(0.01)


def interrupt_when_started(server: Server, factory: FakeFactory, times: int = 1) -> threading.Thread:
    def trigger() -> None:
        wait_for(lambda: factory.servers and factory.servers[0].started)
        for _ in range(times):
            server.interrupt()
            time.sleep(0.1)

    thread = threading.Thread(target=trigger, daemon=True)
    thread.start()
    return thread


class TestCleanShutdown:
    """Interrupt while listening drains and stops."""

    def test_reaches_stopped(self) -> None:
        """An interrupt while listening ends in STOPPED."""
        factory = FakeFactory()
        server = Server(ServerConfig(host="127.0.0.1", port=8123), server_factory=factory)
        interrupt_when_started(server, factory)

        server.run()

        assert server.state is ServerState.STOPPED
        fake = factory.servers[0]
        assert fake.should_exit is True
        assert fake.config.app is server.app
        assert fake.config.host == "127.0.0.1"
        assert fake.config.port == 8123

    def test_restores_previous_sigint_handler(self) -> None:
        """The SIGINT handler is restored after the run."""
        before = signal.getsignal(signal.SIGINT)
        factory = FakeFactory()
        server = Server(ServerConfig(), server_factory=factory)
        interrupt_when_started(server, factory)

        server.run()

        assert signal.getsignal(signal.SIGINT) is before

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals only")
    def test_real_sigint(self) -> None:
        """A real SIGINT drains and stops the server."""
        factory = FakeFactory()
        server = Server(ServerConfig(), server_factory=factory)

        def send_sigint() -> None:
            wait_for(lambda: factory.servers and factory.servers[0].started)
            os.kill(os.getpid(), signal.SIGINT)

        threading.Thread(target=send_sigint, daemon=True).start()
        server.run()

        assert server.state is ServerState.STOPPED


class TestFatalPaths:
    """Startup and drain failures terminate with exit status 1."""

    def test_bind_failure(self) -> None:
        """A bind failure is fatal FAILED_TO_START."""
        server = Server(ServerConfig(), server_factory=FakeFactory(fail_bind=True))

        with pytest.raises(SystemExit) as info:
            server.run()

        assert info.value.code == 1
        assert server.state is ServerState.FAILED_TO_START

    def test_drain_timeout(self) -> None:
        """A drain past the timeout is fatal FAILED_TO_DRAIN."""
        factory = FakeFactory(hang=True)
        server = Server(ServerConfig(shutdown_timeout=0.2), server_factory=factory)
        interrupt_when_started(server, factory)

        try:
            with pytest.raises(SystemExit) as info:
                server.run()
        finally:
            factory.servers[0].force_exit = True

        assert info.value.code == 1
        assert server.state is ServerState.FAILED_TO_DRAIN

    def test_second_interrupt_forces_exit(self) -> None:
        """A second interrupt forces exit and fails the drain."""
        factory = FakeFactory(hang=True)
        server = Server(ServerConfig(shutdown_timeout=5.0), server_factory=factory)
        interrupt_when_started(server, factory, times=2)

        with pytest.raises(SystemExit):
            server.run()

        assert server.state is ServerState.FAILED_TO_DRAIN
        assert factory.servers[0].force_exit is True


class TestTransitions:
    """The state machine only moves forward."""

    def test_initial_state(self) -> None:
        """A new server has no state."""
        assert Server(ServerConfig()).state is None

    def test_illegal_transition(self) -> None:
        """Skipping a state raises."""
        server = Server(ServerConfig())
        with pytest.raises(RuntimeError, match="illegal lifecycle transition"):
            server._transition(ServerState.LISTENING)

    def test_hook_errors_propagate(self) -> None:
        """Route hook errors are not caught."""
        def broken(router: APIRouter) -> None:
            raise LookupError("bad route")

        server = Server(ServerConfig(route_hooks=(broken,)), server_factory=FakeFactory())
        with pytest.raises(LookupError):
            server.run()
        assert server.state is ServerState.CREATED


def free_port() -> int:
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class TestRealServer:
    """A real uvicorn server bound to loopback."""

    def test_in_flight_request_completes_before_stop(self) -> None:
        """A request in flight at interrupt still gets its response."""
        def routes(router: APIRouter) -> None:
            @router.get("/slow")
            def slow() -> dict:
                time.sleep(0.5)
                return {"done": True}

        port = free_port()
        server = Server(ServerConfig(host="127.0.0.1", port=port, route_hooks=(routes,)))
        result: dict = {}

        def client() -> None:
            wait_for(lambda: server._server is not None and server._server.started)
            request = threading.Thread(
                target=lambda: result.update(
                    response=httpx.get(f"http://127.0.0.1:{port}/slow", timeout=5)
                )
            )
            request.start()
            time.sleep(0.2)
            server.interrupt()
            request.join()

        client_thread = threading.Thread(target=client, daemon=True)
        client_thread.start()
        server.run()
        client_thread.join(timeout=5)

        assert server.state is ServerState.STOPPED
        assert result["response"].status_code == 200
        assert result["response"].json() == {"done": True}

    def test_address_in_use(self) -> None:
        """A port already in use is fatal FAILED_TO_START."""
        with socket.socket() as sock:
            sock.bind(("127.0.0.1", 0))
            sock.listen()
            port = sock.getsockname()[1]
            server = Server(ServerConfig(host="127.0.0.1", port=port))

            with pytest.raises(SystemExit) as info:
                server.run()

        assert info.value.code == 1
        assert server.state is ServerState.FAILED_TO_START
