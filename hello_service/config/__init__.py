"""Configuration package for runtime settings and startup validation."""

from .ports import MAX_PORT, MIN_PORT, config_validate_port
from .settings import DEFAULT_PORT, AppSettings, SettingsLoadError, config_load_settings

__all__ = [
    "AppSettings",
    "DEFAULT_PORT",
    "MAX_PORT",
    "MIN_PORT",
    "SettingsLoadError",
    "config_load_settings",
    "config_validate_port",
]
