"""Configuration management via pydantic-settings."""

from .settings import (
    FutureRetrySettings,
    LoggingSettings,
    RetrySettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "FutureRetrySettings",
    "LoggingSettings",
    "RetrySettings",
    "get_settings",
    "clear_settings_cache",
]
