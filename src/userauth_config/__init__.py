"""Configuration package for userauth."""

from .logging_setup import configure_logging
from .settings import (
    JwtSettings,
    LockoutSettings,
    PasswordSettings,
    Settings,
    UserSettings,
    clear_settings_cache,
    get_config_dir,
    get_settings,
)

__all__ = [
    "JwtSettings",
    "LockoutSettings",
    "PasswordSettings",
    "Settings",
    "UserSettings",
    "clear_settings_cache",
    "configure_logging",
    "get_config_dir",
    "get_settings",
]
