"""Application bootstrap wiring for dependency assembly."""

from fastapi import FastAPI

from hello_service.api import create_api_application
from hello_service.config import AppSettings
from hello_service.server import ApplicationServer


def bootstrap_create_application(settings: AppSettings) -> FastAPI:
    """Assemble the runtime application from validated settings.

    Args:
        settings: Validated runtime settings.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.
    """

    return create_api_application(settings=settings)


def bootstrap_create_server(settings: AppSettings) -> ApplicationServer:
    """Build the listener lifecycle object for the runtime application.

    Args:
        settings: Validated runtime settings.

    Returns:
        ApplicationServer: Stopped server bound to the configured host and port on start.
    """

    return ApplicationServer(
        application=bootstrap_create_application(settings),
        host=settings.host,
        port=settings.port,
    )
