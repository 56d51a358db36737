"""Main module entrypoint for local runtime execution.

This module configures logging, validates startup configuration and runs the
HTTP server until a termination signal or an uncaught fault.
"""

import argparse
import asyncio
import logging
import signal
from collections.abc import Callable
from typing import Any

from hello_service.bootstrap import bootstrap_create_server
from hello_service.config import SettingsLoadError, config_load_settings
from hello_service.logs import LogLevel, logs_configure
from hello_service.server import ApplicationServer, ProcessShutdown, ServerStartError

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)

logger = logging.getLogger("hello_service.main")


def main_create_loop_exception_handler(
    shutdown: ProcessShutdown,
) -> Callable[[asyncio.AbstractEventLoop, dict[str, Any]], None]:
    """Create an event-loop exception handler that requests a fault shutdown.

    Args:
        shutdown: Shared shutdown routine.

    Returns:
        Callable: Handler suitable for `loop.set_exception_handler`.
    """

    def main_handle_loop_exception(_loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
        error = context.get("exception")
        message = context.get("message", "Unhandled exception in event loop")
        if error is None:
            logger.error("Uncaught exception: %s", message)
        else:
            logger.error("Uncaught exception: %s", message, exc_info=error)
        shutdown.request(exit_code=1)

    return main_handle_loop_exception


async def main_run(server: ApplicationServer) -> int:
    """Run the server until shutdown and return the process exit code.

    Args:
        server: Stopped application server.

    Returns:
        int: 0 for a clean shutdown, 1 for start, stop or uncaught failures.
    """

    loop = asyncio.get_running_loop()
    shutdown = ProcessShutdown(server)
    previous_exception_handler = loop.get_exception_handler()
    for signal_number in SHUTDOWN_SIGNALS:
        loop.add_signal_handler(
            signal_number,
            shutdown.request,
            0,
            f"{signal.Signals(signal_number).name} signal received",
        )
    loop.set_exception_handler(main_create_loop_exception_handler(shutdown))

    try:
        try:
            await server.start()
        except ServerStartError:
            logger.error("Failed to start application")
            return 1
        logger.info("Application started successfully")
        return await shutdown.wait()
    except Exception as error:
        logger.error("Uncaught exception: %s", error, exc_info=error)
        try:
            await server.stop()
        except Exception:
            logger.error("Error during shutdown after uncaught exception")
        return 1
    finally:
        for signal_number in SHUTDOWN_SIGNALS:
            loop.remove_signal_handler(signal_number)
        loop.set_exception_handler(previous_exception_handler)


def main() -> None:
    """Run the HTTP service with validated startup configuration.

    Raises:
        SystemExit: Always raised with the process exit code.
    """

    argument_parser = argparse.ArgumentParser(description="Hello service runtime entrypoint")
    argument_parser.add_argument(
        "--env-file",
        dest="env_file",
        default=".env",
        type=str,
        help="Dotenv file read in addition to process environment variables",
    )
    parsed_arguments = argument_parser.parse_args()

    logs_configure(LogLevel.INFO)
    logger.info("Starting hello service...")
    try:
        settings = config_load_settings(env_file=parsed_arguments.env_file)
    except SettingsLoadError as error:
        logger.error("Failed to load configuration: %s", error)
        raise SystemExit(1) from error
    logs_configure(settings.log_level)

    server = bootstrap_create_server(settings)
    raise SystemExit(asyncio.run(main_run(server)))


if __name__ == "__main__":
    main()
