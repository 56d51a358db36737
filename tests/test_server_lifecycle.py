"""Tests for listener start/stop behavior over real sockets."""

import asyncio
import logging
import socket

import httpx
import pytest

from hello_service.api.application import create_api_application
from hello_service.bootstrap import bootstrap_create_server
from hello_service.config import AppSettings, config_load_settings
from hello_service.server import ApplicationServer, ServerStartError, ServerState

LOOPBACK_HOST = "127.0.0.1"


def _find_free_port() -> int:
    """Return a loopback port that is currently unbound.

    Returns:
        int: Free TCP port number.
    """

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
        probe.bind((LOOPBACK_HOST, 0))
        return probe.getsockname()[1]


def _build_server(port: int) -> ApplicationServer:
    """Create a stopped server for the test application.

    Args:
        port: Listener port.

    Returns:
        ApplicationServer: Server under test.
    """

    application = create_api_application(AppSettings(_env_file=None, app_env="test"))
    return ApplicationServer(application=application, host=LOOPBACK_HOST, port=port)


def _assert_port_not_listening(port: int) -> None:
    """Fail when a listener still holds the port."""

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
        probe.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        probe.bind((LOOPBACK_HOST, port))
        probe.listen()


def test_server_start_and_stop_twice_on_same_port() -> None:
    """Serve requests across two start/stop cycles and release the port.

    Returns:
        None: Assertions validate lifecycle transitions.

    Raises:
        AssertionError: Raised when a cycle fails or the port stays bound.
    """

    port = _find_free_port()
    server = _build_server(port)

    async def run_cycles() -> list[str]:
        response_texts: list[str] = []
        for _ in range(2):
            await server.start()
            assert server.state is ServerState.LISTENING
            async with httpx.AsyncClient(trust_env=False) as client:
                response = await client.get(f"http://{LOOPBACK_HOST}:{port}/hello")
            response_texts.append(response.text)
            await server.stop()
            assert server.state is ServerState.STOPPED
        return response_texts

    assert asyncio.run(run_cycles()) == ["Hello world", "Hello world"]
    _assert_port_not_listening(port)


def test_server_start_reports_port_in_use(caplog: pytest.LogCaptureFixture) -> None:
    """Fail start with a specific diagnostic when the port is taken.

    Args:
        caplog: Pytest log capture fixture.

    Returns:
        None: Assertions validate bind failure handling.

    Raises:
        AssertionError: Raised when the bind failure is not surfaced.
    """

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as blocker:
        blocker.bind((LOOPBACK_HOST, 0))
        blocker.listen()
        port = blocker.getsockname()[1]
        server = _build_server(port)

        with caplog.at_level(logging.ERROR):
            with pytest.raises(ServerStartError):
                asyncio.run(server.start())

    assert server.state is ServerState.STOPPED
    assert f"Port {port} is already in use" in caplog.text


@pytest.mark.parametrize("invalid_port", [0, 70000])
def test_server_start_rejects_invalid_port(invalid_port: int) -> None:
    """Fail start before binding when the port is out of range."""

    server = _build_server(invalid_port)

    with pytest.raises(ServerStartError, match="Invalid port"):
        asyncio.run(server.start())
    assert server.state is ServerState.STOPPED


def test_server_stop_without_start_is_noop(caplog: pytest.LogCaptureFixture) -> None:
    """Return immediately when the server is not listening."""

    server = _build_server(_find_free_port())

    with caplog.at_level(logging.INFO):
        asyncio.run(server.stop())

    assert server.state is ServerState.STOPPED
    assert "Server has been shut down" not in caplog.text


def test_server_start_while_listening_is_rejected() -> None:
    """Refuse a second start on a listening server.

    Returns:
        None: Assertions validate state guarding.

    Raises:
        AssertionError: Raised when a second listener is started.
    """

    server = _build_server(_find_free_port())

    async def start_twice() -> None:
        await server.start()
        try:
            with pytest.raises(ServerStartError, match="listening"):
                await server.start()
        finally:
            await server.stop()

    asyncio.run(start_twice())
    assert server.state is ServerState.STOPPED


def test_server_bootstrap_listens_on_port_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Build the server from PORT and serve requests on that port.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions validate environment-driven binding.

    Raises:
        AssertionError: Raised when the server binds a different port.
    """

    port = _find_free_port()
    monkeypatch.setenv("PORT", str(port))
    monkeypatch.setenv("HOST", LOOPBACK_HOST)
    server = bootstrap_create_server(config_load_settings(env_file=None))

    async def serve_one_request() -> httpx.Response:
        await server.start()
        try:
            async with httpx.AsyncClient(trust_env=False) as client:
                return await client.get(f"http://{LOOPBACK_HOST}:{port}/health")
        finally:
            await server.stop()

    response = asyncio.run(serve_one_request())

    assert server.port == port
    assert response.status_code == 200
    assert response.json()["status"] == "up"
    assert server.state is ServerState.STOPPED
