"""Idempotent process shutdown shared by signal and fault handlers."""

import asyncio
import logging
from typing import Protocol

from .lifecycle import ServerStopError

logger = logging.getLogger(__name__)


class StoppableServer(Protocol):
    """Port definition for a server that can be stopped."""

    async def stop(self) -> None:
        """Close the listener.

        Raises:
            ServerStopError: Raised when shutdown fails.
        """


class ProcessShutdown:
    """Collect shutdown requests and run the stop routine once.

    The first request wakes `wait()`. Later requests can only raise the exit
    code, so a fault reported during a signal-triggered shutdown still exits
    with 1.
    """

    def __init__(self, server: StoppableServer):
        self._server = server
        self._requested = asyncio.Event()
        self._exit_code = 0

    @property
    def requested(self) -> bool:
        """Return whether shutdown has been requested."""
        return self._requested.is_set()

    @property
    def exit_code(self) -> int:
        """Return the exit code collected so far."""
        return self._exit_code

    def request(self, exit_code: int = 0, reason: str | None = None) -> None:
        """Request process shutdown.

        Args:
            exit_code: 0 for a clean shutdown, 1 for a fault.
            reason: Optional text logged with the request.
        """

        if reason:
            logger.info("%s: shutting down...", reason)
        self._exit_code = max(self._exit_code, exit_code)
        self._requested.set()

    async def wait(self) -> int:
        """Wait for a request, stop the server, and return the exit code.

        Returns:
            int: Collected exit code, or 1 when stopping the server fails.
        """

        await self._requested.wait()
        try:
            await self._server.stop()
        except ServerStopError:
            logger.error("Error during shutdown")
            return 1
        return self._exit_code
