"""Tests for structured log output of retry sequences."""

from __future__ import annotations

import io
import logging

import orjson
import pytest

from futureretry import ConstantBackoff, RetryPolicy, TooManyRetriesError, retry
from futureretry.foundation.config import FutureRetrySettings, LoggingSettings
from futureretry.observability import (
    ConsoleFormatter,
    JsonFormatter,
    configure_from_settings,
    configure_logging,
    get_logger,
    record_context,
    reset_logging,
)


@pytest.fixture(autouse=True)
def clean_logging() -> object:
    reset_logging()
    yield
    reset_logging()


async def _fail() -> None:
    raise ConnectionError("refused")


@pytest.mark.asyncio
async def test_json_lines_for_retry_sequence() -> None:
    out = io.StringIO()
    configure_logging(format="json", level="INFO", output=out)

    with pytest.raises(TooManyRetriesError):
        await retry(RetryPolicy(max_retry=2, backoff=ConstantBackoff(0.0)), _fail, name="quotes")

    entries = [orjson.loads(line) for line in out.getvalue().splitlines()]
    retries = [e for e in entries if e["level"] == "info"]
    assert [e["attempt"] for e in retries] == [1, 2]
    assert all(e["sequence"] == "quotes" and e["error"] == "ConnectionError" for e in retries)
    assert entries[-1]["level"] == "warning"
    assert entries[-1]["error"] == "TOO_MANY_RETRIES"
    assert entries[-1]["logger"] == "futureretry.retry.engine"


@pytest.mark.asyncio
async def test_console_output() -> None:
    out = io.StringIO()
    configure_logging(format="console", level="DEBUG", output=out, colors=False)

    with pytest.raises(TooManyRetriesError):
        await retry(RetryPolicy(max_retry=1, backoff=ConstantBackoff(0.0)), _fail, name="console")

    text = out.getvalue()
    assert "[info]" in text
    assert "attempt=1" in text
    assert 'sequence="console"' in text
    assert "[warning]" in text


def test_level_filters_records() -> None:
    out = io.StringIO()
    configure_logging(format="json", level="WARNING", output=out)
    log = get_logger("retry.engine")
    log.info("hidden")
    log.warning("shown", extra={"attempt": 3})
    lines = out.getvalue().splitlines()
    assert len(lines) == 1
    assert orjson.loads(lines[0])["attempt"] == 3


def test_none_format_silences() -> None:
    assert configure_logging(format="none") is None
    assert logging.getLogger("futureretry").propagate is False


def test_unknown_format_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown format"):
        configure_logging(format="xml")


def test_reconfigure_replaces_handler() -> None:
    first = configure_logging(format="json", output=io.StringIO())
    second = configure_logging(format="json", output=io.StringIO())
    handlers = logging.getLogger("futureretry").handlers
    assert second in handlers
    assert first not in handlers


def test_configure_from_settings() -> None:
    settings = FutureRetrySettings(debug=True, logging=LoggingSettings(format="json"))
    handler = configure_from_settings(settings)
    assert isinstance(handler.formatter, JsonFormatter)  # type: ignore[union-attr]
    assert logging.getLogger("futureretry").level == logging.DEBUG


def test_record_context_only_extras() -> None:
    record = logging.LogRecord("futureretry", logging.INFO, __file__, 1, "msg", None, None)
    record.attempt = 2
    assert record_context(record) == {"attempt": 2}


def test_console_formatter_values() -> None:
    record = logging.LogRecord("futureretry", logging.INFO, __file__, 1, "retry scheduled", None, None)
    record.delay, record.flag = 0.25, True
    line = ConsoleFormatter(show_timestamp=False).format(record)
    assert line == "[info] retry scheduled delay=0.25 flag=true"
