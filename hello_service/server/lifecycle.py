"""Listener lifecycle for the embedded uvicorn server.

The server binds its own socket so bind failures surface as typed errors
instead of terminating the process, then hands the socket to uvicorn.
"""

import asyncio
import contextlib
import errno
import logging
import socket
from collections.abc import Iterator
from enum import Enum
from typing import Final

import uvicorn
from starlette.types import ASGIApp

from hello_service.config import config_validate_port
from hello_service.logs import logs_server_start

STARTUP_POLL_SECONDS: Final[float] = 0.01

logger = logging.getLogger(__name__)


class ServerStartError(RuntimeError):
    """Raised when the listener cannot be started."""


class ServerStopError(RuntimeError):
    """Raised when the listener cannot be closed cleanly."""


class ServerState(str, Enum):
    """Listener lifecycle states."""

    STOPPED = "stopped"
    STARTING = "starting"
    LISTENING = "listening"
    STOPPING = "stopping"


class _EmbeddedUvicornServer(uvicorn.Server):
    """Uvicorn server that leaves OS signal handling to the process entrypoint."""

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield


def server_bind_socket(host: str, port: int) -> socket.socket:
    """Bind a listening TCP socket.

    Args:
        host: Interface address to bind.
        port: TCP port to bind.

    Returns:
        socket.socket: Bound socket with address reuse enabled.

    Raises:
        OSError: Raised when the address cannot be resolved or bound.
    """

    address_info = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM, flags=socket.AI_PASSIVE)
    family, socket_type, protocol, _, address = address_info[0]
    listener = socket.socket(family, socket_type, protocol)
    try:
        listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        listener.bind(address)
    except OSError:
        listener.close()
        raise
    return listener


class ApplicationServer:
    """Start and stop one HTTP listener serving an ASGI application.

    State moves STOPPED -> STARTING -> LISTENING -> STOPPING -> STOPPED. A
    stopped server can be started again on the same port.
    """

    def __init__(self, application: ASGIApp, host: str, port: int):
        """Initialize the server.

        Args:
            application: ASGI application to serve.
            host: Interface address to bind.
            port: TCP port to bind. Validated again on every start.

        Raises:
            ValueError: Raised when application is None.
        """

        if application is None:
            raise ValueError("application must not be None")
        self._application = application
        self._host = host
        self._port = port
        self._state = ServerState.STOPPED
        self._uvicorn_server: _EmbeddedUvicornServer | None = None
        self._serve_task: asyncio.Task[None] | None = None

    @property
    def state(self) -> ServerState:
        """Return the current lifecycle state."""
        return self._state

    @property
    def port(self) -> int:
        """Return the configured listener port."""
        return self._port

    async def start(self) -> None:
        """Bind the listener and begin serving requests.

        Returns:
            None: Returns once the listener accepts connections.

        Raises:
            ServerStartError: Raised when the port is invalid, the bind fails,
                or uvicorn stops before becoming ready.
        """

        if self._state is not ServerState.STOPPED:
            raise ServerStartError(f"Server cannot start from state {self._state.value}")

        validated_port = config_validate_port(self._port)
        if validated_port is None:
            logger.error("Invalid port: %s", self._port)
            raise ServerStartError(f"Invalid port: {self._port}")

        self._state = ServerState.STARTING
        try:
            listener = server_bind_socket(self._host, validated_port)
        except OSError as error:
            self._state = ServerState.STOPPED
            if error.errno == errno.EADDRINUSE:
                logger.error("Port %s is already in use", validated_port)
            else:
                logger.error("Server error: %s", error, exc_info=error)
            raise ServerStartError(f"Failed to bind {self._host}:{validated_port}") from error

        uvicorn_server = _EmbeddedUvicornServer(
            uvicorn.Config(
                self._application,
                host=self._host,
                port=validated_port,
                access_log=False,
                log_config=None,
                lifespan="off",
            )
        )
        serve_task = asyncio.create_task(uvicorn_server.serve(sockets=[listener]))
        while not uvicorn_server.started:
            if serve_task.done():
                break
            await asyncio.sleep(STARTUP_POLL_SECONDS)

        if not uvicorn_server.started:
            self._state = ServerState.STOPPED
            listener.close()
            failure = serve_task.exception() if not serve_task.cancelled() else None
            logger.error("Server error: listener stopped before accepting connections")
            raise ServerStartError(f"Failed to start listener on {self._host}:{validated_port}") from failure

        self._uvicorn_server = uvicorn_server
        self._serve_task = serve_task
        self._state = ServerState.LISTENING
        logs_server_start(self._host, validated_port)

    async def stop(self) -> None:
        """Close the listener and wait for in-flight requests to finish.

        Stopping a server that is not listening does nothing.

        Raises:
            ServerStopError: Raised when uvicorn fails while shutting down.
        """

        if self._state is not ServerState.LISTENING or self._uvicorn_server is None or self._serve_task is None:
            return

        self._state = ServerState.STOPPING
        self._uvicorn_server.should_exit = True
        try:
            await self._serve_task
        except Exception as error:
            logger.error("Error shutting down server: %s", error, exc_info=error)
            raise ServerStopError("Server shutdown failed") from error
        finally:
            self._uvicorn_server = None
            self._serve_task = None
            self._state = ServerState.STOPPED

        logger.info("Server has been shut down")
