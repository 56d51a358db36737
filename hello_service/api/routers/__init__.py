"""API router package for endpoint composition."""

import time
from collections.abc import Callable

from fastapi import APIRouter

from hello_service.config import AppSettings

from .health import api_create_health_router
from .hello import api_create_hello_router


def api_create_router(
    settings: AppSettings,
    started_at: float,
    clock: Callable[[], float] = time.monotonic,
) -> APIRouter:
    """Compose all endpoint routers into one router.

    Unmatched paths are not routed here; the application installs
    `api_route_not_found` as the router default.

    Args:
        settings: Validated application settings.
        started_at: Clock reading captured at application startup.
        clock: Monotonic clock used for uptime.

    Returns:
        APIRouter: Router exposing `/hello` and `/health`.
    """

    router = APIRouter()
    router.include_router(api_create_hello_router())
    router.include_router(api_create_health_router(settings=settings, started_at=started_at, clock=clock))
    return router


__all__ = ["api_create_health_router", "api_create_hello_router", "api_create_router"]
