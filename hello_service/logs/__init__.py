"""Logging package for leveled console output and request summaries."""

from .logger import (
    LOGGER_NAME,
    LogLevel,
    LogLineFormatter,
    logs_configure,
    logs_request,
    logs_request_error,
    logs_server_start,
)

__all__ = [
    "LOGGER_NAME",
    "LogLevel",
    "LogLineFormatter",
    "logs_configure",
    "logs_request",
    "logs_request_error",
    "logs_server_start",
]
