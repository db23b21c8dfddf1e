"""Tests for environment-based configuration."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from futureretry.foundation.config import (
    FutureRetrySettings,
    LoggingSettings,
    RetrySettings,
    clear_settings_cache,
    get_settings,
)
from futureretry.retry import CappedExponentialBackoff, ExponentialBackoff, JitteredExponentialBackoff


@pytest.fixture(autouse=True)
def clean_settings() -> object:
    """Reset cached settings around each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


def test_defaults() -> None:
    s = RetrySettings()
    assert s.max_retry == 3
    assert s.base_delay == 0.1
    assert s.max_delay == 3600.0
    assert s.backoff == "exponential"
    assert s.deadline is None


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FUTURERETRY_RETRY_MAX_RETRY", "-1")
    monkeypatch.setenv("FUTURERETRY_RETRY_BACKOFF", "JITTERED")
    monkeypatch.setenv("FUTURERETRY_LOG_LEVEL", "debug")
    s = get_settings()
    assert s.retry.max_retry == -1
    assert s.retry.backoff == "jittered"
    assert s.logging.level == "DEBUG"


def test_settings_cached() -> None:
    assert get_settings() is get_settings()


def test_debug_forces_debug_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FUTURERETRY_DEBUG", "true")
    assert get_settings().log_level == "DEBUG"


@pytest.mark.parametrize("kind,cls", [
    ("exponential", ExponentialBackoff),
    ("capped", CappedExponentialBackoff),
    ("jittered", JitteredExponentialBackoff),
])
def test_build_backoff(kind: str, cls: type) -> None:
    b = RetrySettings(backoff=kind, base_delay=0.2).build_backoff()
    assert isinstance(b, cls)
    assert b.base == 0.2


def test_invalid_values_rejected() -> None:
    with pytest.raises(ValidationError):
        RetrySettings(max_retry=-5)
    with pytest.raises(ValidationError):
        RetrySettings(base_delay=0)
    with pytest.raises(ValidationError):
        LoggingSettings(format="xml")


def test_root_settings_nest() -> None:
    s = FutureRetrySettings()
    assert isinstance(s.retry, RetrySettings)
    assert isinstance(s.logging, LoggingSettings)
