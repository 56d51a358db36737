"""FastAPI application factory.

Pipeline, outermost stage first: security headers, request logging, error
handling, JSON body parsing, routes. Security headers wrap everything so error
responses carry them too. Request logging wraps the error handler so 404, 405
and 500 responses are timed and logged. The error handler wraps body parsing
and routing so every downstream failure is caught.
"""

import logging
import time
from collections.abc import Callable

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from hello_service import __version__
from hello_service.config import AppSettings

from .errors import ErrorHandlerMiddleware, api_handle_http_exception, api_route_not_found
from .middleware import JsonBodyMiddleware, RequestLoggingMiddleware, SecurityHeadersMiddleware
from .routers import api_create_router

logger = logging.getLogger(__name__)


def create_api_application(
    settings: AppSettings,
    started_at: float | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings.
        started_at: Clock reading used as the uptime origin. Defaults to now.
        clock: Monotonic clock used for uptime.

    Returns:
        FastAPI: Fully wired application.
    """

    application = FastAPI(
        title="Hello Service",
        version=__version__,
        redirect_slashes=False,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    application.include_router(
        api_create_router(
            settings=settings,
            started_at=clock() if started_at is None else started_at,
            clock=clock,
        )
    )
    application.router.default = api_route_not_found
    application.add_exception_handler(StarletteHTTPException, api_handle_http_exception)

    # add_middleware wraps: the last stage added is the outermost.
    application.add_middleware(JsonBodyMiddleware)
    application.add_middleware(ErrorHandlerMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    application.add_middleware(SecurityHeadersMiddleware)

    logger.info("Application created and configured in %s environment", settings.app_env)
    return application
