"""Shared pytest fixtures isolating environment and logger state."""

import logging
from collections.abc import Iterator

import pytest

from hello_service.logs import LOGGER_NAME

_SETTINGS_ENVIRONMENT_VARIABLES = ("PORT", "HOST", "APP_ENV", "LOG_LEVEL")


@pytest.fixture(autouse=True)
def isolated_settings_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove settings variables inherited from the developer shell."""

    for variable_name in _SETTINGS_ENVIRONMENT_VARIABLES:
        monkeypatch.delenv(variable_name, raising=False)


@pytest.fixture(autouse=True)
def restored_application_logger() -> Iterator[None]:
    """Restore application logger handlers and level after each test."""

    application_logger = logging.getLogger(LOGGER_NAME)
    original_handlers = list(application_logger.handlers)
    original_level = application_logger.level
    yield
    application_logger.handlers = original_handlers
    application_logger.setLevel(original_level)
