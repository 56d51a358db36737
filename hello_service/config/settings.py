"""Typed runtime settings with dotenv support and startup validation."""

import logging
from typing import Any, Final

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hello_service.logs import LogLevel

from .ports import config_validate_port

DEFAULT_PORT: Final[int] = 3000
DEFAULT_HOST: Final[str] = "0.0.0.0"
DEFAULT_APP_ENV: Final[str] = "development"

logger = logging.getLogger(__name__)


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Application settings for the HTTP runtime.

    Environment variable names map directly to field names in uppercase.
    Example: `app_env` reads from `APP_ENV`.

    Attributes:
        port: Listener port. Invalid values fall back to `DEFAULT_PORT`.
        host: Host interface for listener binding.
        app_env: Runtime environment label reported by `/health`.
        log_level: Minimum log level. Unknown names fall back to INFO.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
    )

    port: int = Field(default=DEFAULT_PORT)
    host: str = Field(default=DEFAULT_HOST, min_length=1)
    app_env: str = Field(default=DEFAULT_APP_ENV, min_length=1)
    log_level: LogLevel = Field(default=LogLevel.INFO)

    @field_validator("port", mode="before")
    @classmethod
    def _validate_port(cls, value: Any) -> int:
        validated_port = config_validate_port(value)
        if validated_port is None:
            logger.warning("Invalid PORT value: %s, using default: %s", value, DEFAULT_PORT)
            return DEFAULT_PORT
        return validated_port

    @field_validator("log_level", mode="before")
    @classmethod
    def _validate_log_level(cls, value: Any) -> LogLevel:
        if isinstance(value, LogLevel):
            return value
        resolved_level = LogLevel.from_name(str(value))
        if resolved_level is None:
            logger.warning("Invalid LOG_LEVEL value: %s, using default: %s", value, LogLevel.INFO.name)
            return LogLevel.INFO
        return resolved_level

    @field_validator("host", "app_env")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @property
    def is_development(self) -> bool:
        """Return whether the runtime environment is `development`."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Return whether the runtime environment is `production`."""
        return self.app_env == "production"


def config_load_settings(env_file: str | None = ".env") -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Args:
        env_file: Dotenv file to read in addition to the process environment.
            None disables dotenv loading.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when settings are invalid beyond the
            recoverable port and log-level fallbacks.
    """

    try:
        settings = AppSettings(_env_file=env_file)
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error

    logger.debug(
        "Configuration loaded: port=%s, host=%s, app_env=%s",
        settings.port,
        settings.host,
        settings.app_env,
    )
    return settings
