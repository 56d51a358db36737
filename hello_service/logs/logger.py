"""Leveled console logging on top of the standard `logging` module.

Every line is rendered as `[YYYY-MM-DD HH:MM:SS] [LEVEL] message`. DEBUG and
INFO lines go to stdout, WARN and ERROR lines go to stderr. ERROR is the most
severe level, so it is emitted under every threshold.
"""

import logging
import sys
from enum import IntEnum
from typing import Final

LOGGER_NAME: Final[str] = "hello_service"
LOG_LINE_FORMAT: Final[str] = "[%(asctime)s] [%(level_label)s] %(message)s"
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

_HANDLER_MARKER: Final[str] = "_hello_service_handler"

_server_logger = logging.getLogger(f"{LOGGER_NAME}.server")
_request_logger = logging.getLogger(f"{LOGGER_NAME}.requests")


class LogLevel(IntEnum):
    """Application log levels ordered from most to least severe."""

    ERROR = 0
    WARN = 1
    INFO = 2
    DEBUG = 3

    @property
    def logging_level(self) -> int:
        """Return the matching standard library logging level."""
        return _LOGGING_LEVELS[self]

    @classmethod
    def from_name(cls, name: str) -> "LogLevel | None":
        """Resolve a case-insensitive level name.

        Args:
            name: Level name such as `warn` or `DEBUG`. `WARNING` is accepted
                as an alias of `WARN`.

        Returns:
            LogLevel | None: Matching level, or None for unknown names.
        """

        normalized_name = name.strip().upper()
        if normalized_name == "WARNING":
            normalized_name = "WARN"
        return cls.__members__.get(normalized_name)


_LOGGING_LEVELS: Final[dict[LogLevel, int]] = {
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARN: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
}


class LogLineFormatter(logging.Formatter):
    """Formatter producing bracketed timestamp and level prefixes."""

    def __init__(self) -> None:
        super().__init__(fmt=LOG_LINE_FORMAT, datefmt=LOG_DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        record.level_label = "WARN" if record.levelno == logging.WARNING else record.levelname
        return super().format(record)


class _BelowLevelFilter(logging.Filter):
    def __init__(self, level: int) -> None:
        super().__init__()
        self._level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self._level


def logs_configure(level: LogLevel = LogLevel.INFO) -> logging.Logger:
    """Install console handlers on the application logger.

    Calling this again replaces handlers installed by a previous call, so the
    threshold can be reset after settings are loaded.

    Args:
        level: Minimum level to emit.

    Returns:
        logging.Logger: Configured application root logger.
    """

    application_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(application_logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            application_logger.removeHandler(handler)

    formatter = LogLineFormatter()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    stdout_handler.addFilter(_BelowLevelFilter(logging.WARNING))
    setattr(stdout_handler, _HANDLER_MARKER, True)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(formatter)
    setattr(stderr_handler, _HANDLER_MARKER, True)

    application_logger.addHandler(stdout_handler)
    application_logger.addHandler(stderr_handler)
    application_logger.setLevel(level.logging_level)
    return application_logger


def logs_server_start(host: str, port: int) -> None:
    """Log the listener address after a successful bind."""

    _server_logger.info("Server running at http://%s:%s", host or "0.0.0.0", port)


def logs_request(method: str, url: str, status_code: int, elapsed_ms: int | None = None) -> None:
    """Log one completed request.

    Args:
        method: HTTP method.
        url: Request path including query string.
        status_code: Final response status code.
        elapsed_ms: Optional processing time in milliseconds.
    """

    if elapsed_ms is None:
        _request_logger.info("%s %s %s", method, url, status_code)
        return
    _request_logger.info("%s %s %s %sms", method, url, status_code, elapsed_ms)


def logs_request_error(error: BaseException, method: str | None = None, url: str | None = None) -> None:
    """Log an error with its traceback and optional request context."""

    message = "Server error"
    if method is not None and url is not None:
        message = f"Error processing request: {method} {url}"
    _request_logger.error(message, exc_info=(type(error), error, error.__traceback__))
