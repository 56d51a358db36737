"""Tests for runtime settings loading and fallback behavior."""

import logging

import pytest

from hello_service.config import AppSettings, SettingsLoadError, config_load_settings
from hello_service.logs import LogLevel


def test_config_load_settings_uses_defaults_without_environment() -> None:
    """Return documented defaults when no variables are set.

    Returns:
        None: Assertions validate default values.

    Raises:
        AssertionError: Raised when a default differs.
    """

    settings = config_load_settings(env_file=None)

    assert settings.port == 3000
    assert settings.host == "0.0.0.0"
    assert settings.app_env == "development"
    assert settings.log_level is LogLevel.INFO
    assert settings.is_development is True
    assert settings.is_production is False


def test_config_load_settings_reads_environment_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    """Read PORT, HOST, APP_ENV and LOG_LEVEL from the environment.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions validate loaded values.

    Raises:
        AssertionError: Raised when an environment value is ignored.
    """

    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("HOST", "127.0.0.1")
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = config_load_settings(env_file=None)

    assert settings.port == 8080
    assert settings.host == "127.0.0.1"
    assert settings.app_env == "production"
    assert settings.log_level is LogLevel.DEBUG
    assert settings.is_production is True
    assert settings.is_development is False


@pytest.mark.parametrize("raw_port", ["0", "abc", "70000", "-5"])
def test_config_load_settings_falls_back_to_default_port_with_warning(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
    raw_port: str,
) -> None:
    """Substitute port 3000 and log a warning for invalid PORT values.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
        caplog: Pytest log capture fixture.
        raw_port: Invalid PORT value.

    Returns:
        None: Assertions validate fallback and warning.

    Raises:
        AssertionError: Raised when the fallback or warning is missing.
    """

    monkeypatch.setenv("PORT", raw_port)

    with caplog.at_level(logging.WARNING):
        settings = config_load_settings(env_file=None)

    assert settings.port == 3000
    warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
    assert any(f"Invalid PORT value: {raw_port}" in record.getMessage() for record in warnings)


def test_config_load_settings_ignores_empty_port(monkeypatch: pytest.MonkeyPatch) -> None:
    """Treat an empty PORT as unset."""

    monkeypatch.setenv("PORT", "")

    assert config_load_settings(env_file=None).port == 3000


def test_config_settings_unknown_log_level_falls_back_to_info(caplog: pytest.LogCaptureFixture) -> None:
    """Resolve unknown log level names to INFO with a warning.

    Args:
        caplog: Pytest log capture fixture.

    Returns:
        None: Assertions validate fallback level.

    Raises:
        AssertionError: Raised when the unknown name is accepted.
    """

    with caplog.at_level(logging.WARNING):
        settings = AppSettings(_env_file=None, log_level="verbose")

    assert settings.log_level is LogLevel.INFO
    assert "Invalid LOG_LEVEL value: verbose" in caplog.text


def test_config_settings_log_level_is_case_insensitive() -> None:
    """Accept level names regardless of case."""

    assert AppSettings(_env_file=None, log_level="Warn").log_level is LogLevel.WARN
    assert AppSettings(_env_file=None, log_level="ERROR").log_level is LogLevel.ERROR


def test_config_load_settings_raises_for_blank_environment_name(monkeypatch: pytest.MonkeyPatch) -> None:
    """Raise SettingsLoadError for values that have no fallback.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions validate error wrapping.

    Raises:
        AssertionError: Raised when the invalid value is accepted.
    """

    monkeypatch.setenv("APP_ENV", "   ")

    with pytest.raises(SettingsLoadError, match="Startup configuration validation failed"):
        config_load_settings(env_file=None)
