"""Structured log output for the futureretry logger hierarchy.

The engine logs through stdlib ``logging`` with structured ``extra`` fields
(attempt, delay, sequence, error). This module renders those records:
- Human-readable console output for development
- JSON lines (orjson) for log aggregation

Nothing is installed at import time; applications opt in.

Quick Start:
    >>> from futureretry.observability import configure_logging
    >>> configure_logging(format="console", level="DEBUG")
    # => 10:30:45.123 [info] retry scheduled attempt=1 delay=0.2 sequence="retry-1"

    >>> configure_logging(format="json")
    # => {"timestamp": "...", "level": "info", "event": "retry scheduled", "attempt": 1, ...}
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING, TextIO

import orjson

if TYPE_CHECKING:
    from futureretry.foundation.config import FutureRetrySettings

ROOT_LOGGER = "futureretry"

# Attributes every LogRecord carries; anything else came in through `extra`
_RESERVED = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime", "taskName"}

_handler: logging.Handler | None = None


def record_context(record: logging.LogRecord) -> dict[str, object]:
    """Structured fields attached to a record via ``extra``."""
    return {k: v for k, v in vars(record).items() if k not in _RESERVED}


# ─────────────────────────────────────────────────────────────────────────────
# Formatters
# ─────────────────────────────────────────────────────────────────────────────


class ConsoleFormatter(logging.Formatter):
    """Human-readable output. Format: timestamp [level] event key=value ..."""

    def __init__(self, *, colors: bool = False, show_timestamp: bool = True) -> None:
        super().__init__()
        self.colors, self.show_timestamp = colors, show_timestamp

    def format(self, record: logging.LogRecord) -> str:
        c = _COLORS if self.colors else _NO_COLORS
        level = record.levelname.lower()
        ts = datetime.fromtimestamp(record.created, tz=UTC).strftime("%H:%M:%S.%f")[:-3]
        parts = [f"{c['dim']}{ts}{c['reset']}"] if self.show_timestamp else []
        parts += [f"{_LEVEL_COLORS.get(level, c['dim']) if self.colors else ''}[{level}]{c['reset']}",
                  f"{c['bold']}{record.getMessage()}{c['reset']}"]
        parts += [f"{c['cyan']}{k}{c['reset']}={_format_value(v)}" for k, v in sorted(record_context(record).items())]
        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class JsonFormatter(logging.Formatter):
    """JSON Lines output for log aggregation (Elasticsearch, Loki, Datadog, etc.)."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
            **record_context(record),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(payload, default=repr, option=orjson.OPT_NON_STR_KEYS).decode()


# ─────────────────────────────────────────────────────────────────────────────
# Global Configuration
# ─────────────────────────────────────────────────────────────────────────────


def configure_logging(
    format: str = "console",  # noqa: A002 - shadows builtin but matches stdlib
    level: str = "INFO",
    *,
    output: TextIO | None = None,
    colors: bool | None = None,
) -> logging.Handler | None:
    """Configure output for the futureretry loggers. Format: "console", "json", or "none".

    Replaces any handler installed by a previous call. Returns the new handler
    (None for "none").
    """
    global _handler
    logger = logging.getLogger(ROOT_LOGGER)
    if _handler is not None:
        logger.removeHandler(_handler)
        _handler = None

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    match format:
        case "console":
            stream = output or sys.stderr
            use_colors = getattr(stream, "isatty", lambda: False)() if colors is None else colors
            _handler = logging.StreamHandler(stream)
            _handler.setFormatter(ConsoleFormatter(colors=use_colors))
        case "json":
            _handler = logging.StreamHandler(output or sys.stdout)
            _handler.setFormatter(JsonFormatter())
        case "none":
            _handler = logging.NullHandler()
        case _:
            raise ValueError(f"Unknown format: {format}. Use 'console', 'json', or 'none'")

    logger.addHandler(_handler)
    logger.propagate = format != "none"
    return None if format == "none" else _handler


def reset_logging() -> None:
    """Remove the installed handler and restore stdlib defaults (useful for testing)."""
    global _handler
    logger = logging.getLogger(ROOT_LOGGER)
    if _handler is not None:
        logger.removeHandler(_handler)
        _handler = None
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def configure_from_settings(settings: FutureRetrySettings | None = None) -> logging.Handler | None:
    """Configure logging from FUTURERETRY_LOG_* environment settings."""
    if settings is None:
        from futureretry.foundation.config import get_settings
        settings = get_settings()
    return configure_logging(format=settings.logging.format, level=settings.log_level)


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger inside the futureretry hierarchy."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────


_COLORS = {"reset": "\033[0m", "bold": "\033[1m", "dim": "\033[2m", "red": "\033[31m",
           "green": "\033[32m", "yellow": "\033[33m", "cyan": "\033[36m"}
_NO_COLORS = {k: "" for k in _COLORS}
_LEVEL_COLORS = {"debug": _COLORS["dim"], "info": _COLORS["green"], "warning": _COLORS["yellow"],
                 "error": _COLORS["red"], "critical": _COLORS["red"]}


def _format_value(v: object) -> str:
    """Format a value for console output."""
    match v:
        case str(): return f'"{v}"'
        case bool(): return str(v).lower()
        case float(): return f"{v:.3f}".rstrip("0").rstrip(".") or "0"
        case int(): return str(v)
        case _: return repr(v)
