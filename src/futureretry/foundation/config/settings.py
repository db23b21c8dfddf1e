"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated defaults for retry policies and logging,
read from environment variables (and an optional .env file).

Example:
    >>> from futureretry.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.retry.max_retry
    3
    >>> settings.logging.level
    'INFO'

    # Or with environment variables:
    # FUTURERETRY_RETRY_MAX_RETRY=-1
    # FUTURERETRY_RETRY_BACKOFF=jittered
    # FUTURERETRY_LOG_FORMAT=json
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Annotated, Literal

from pydantic import Field, PositiveFloat, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from futureretry.retry.backoff import Backoff


class RetrySettings(BaseSettings):
    """Default retry policy configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FUTURERETRY_RETRY_",
        extra="ignore",
    )

    max_retry: Annotated[int, Field(ge=-1, description="Retries after the first attempt; -1 = unlimited")] = 3
    base_delay: PositiveFloat = Field(default=0.1, description="Base backoff step in seconds")
    max_delay: PositiveFloat = Field(default=3600.0, description="Backoff ceiling in seconds (capped only)")
    backoff: Literal["exponential", "capped", "jittered"] = "exponential"
    deadline: PositiveFloat | None = Field(default=None, description="Seconds from policy creation")

    @field_validator("backoff", mode="before")
    @classmethod
    def _normalize_backoff(cls, v: str) -> str:
        return v.lower() if isinstance(v, str) else v

    def build_backoff(self) -> Backoff:
        """Instantiate the configured backoff strategy."""
        from futureretry.retry.backoff import (
            CappedExponentialBackoff,
            ExponentialBackoff,
            JitteredExponentialBackoff,
        )

        match self.backoff:
            case "capped": return CappedExponentialBackoff(base=self.base_delay, ceiling=self.max_delay)
            case "jittered": return JitteredExponentialBackoff(base=self.base_delay)
            case _: return ExponentialBackoff(base=self.base_delay)


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FUTURERETRY_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class FutureRetrySettings(BaseSettings):
    """Root settings.

    Loads configuration from environment variables with FUTURERETRY_ prefix.

    Example environment variables:
        FUTURERETRY_DEBUG=true
        FUTURERETRY_RETRY_MAX_RETRY=5
        FUTURERETRY_RETRY_DEADLINE=30
        FUTURERETRY_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="FUTURERETRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    debug: bool = Field(default=False, description="Enable debug mode")

    retry: RetrySettings = Field(default_factory=RetrySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @computed_field
    @property
    def log_level(self) -> str:
        """Effective log level (debug mode forces DEBUG)."""
        return "DEBUG" if self.debug else self.logging.level


@lru_cache(maxsize=1)
def get_settings() -> FutureRetrySettings:
    """Get the global settings instance (cached)."""
    return FutureRetrySettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
