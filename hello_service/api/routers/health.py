"""Health endpoint router reporting uptime and environment."""

import logging
import time
from collections.abc import Callable
from dataclasses import asdict

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from hello_service.config import AppSettings
from hello_service.domain import HealthStatus, domain_format_uptime

logger = logging.getLogger(__name__)


def api_create_health_router(
    settings: AppSettings,
    started_at: float,
    clock: Callable[[], float] = time.monotonic,
) -> APIRouter:
    """Create health-check router with uptime and environment status.

    Args:
        settings: Validated settings providing the environment label.
        started_at: Clock reading captured at application startup.
        clock: Clock used to measure elapsed time since `started_at`.

    Returns:
        APIRouter: Router exposing `/health` endpoint.

    Raises:
        ValueError: Raised when settings is None.
    """

    if settings is None:
        raise ValueError("settings must not be None")

    router = APIRouter(tags=["health"])

    def api_build_health_status() -> HealthStatus:
        return HealthStatus(
            status="up",
            uptime=domain_format_uptime(clock() - started_at),
            environment=settings.app_env,
        )

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        """Return process health state.

        Returns:
            JSONResponse: Health payload with status, uptime and environment.
        """

        logger.debug("Health check request received")
        return JSONResponse(content=asdict(api_build_health_status()), status_code=status.HTTP_200_OK)

    return router
