"""Observability for retry sequences: structured log rendering."""

from .logging import (
    ConsoleFormatter,
    JsonFormatter,
    configure_from_settings,
    configure_logging,
    get_logger,
    record_context,
    reset_logging,
)

__all__ = [
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "record_context",
    "reset_logging",
    "ConsoleFormatter",
    "JsonFormatter",
]
