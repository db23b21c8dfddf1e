"""Tests for outcomes and the error taxonomy."""

from __future__ import annotations

import traceback

import pytest

from futureretry import (
    AttemptTimeoutError,
    DeadlineExceededError,
    ErrorCode,
    Failure,
    OutcomeStatus,
    RetryError,
    Success,
    TooManyRetriesError,
)


def test_success() -> None:
    o = Success(3)
    assert o.is_success and not o.is_failure
    assert o.status is OutcomeStatus.SUCCESS
    assert o.unwrap() == 3
    assert o.map(lambda x: x * 2).unwrap() == 6
    assert repr(o) == "Success(3)"


def test_failure() -> None:
    err = KeyError("k")
    o = Failure(err)
    assert o.is_failure
    assert o.error is err
    assert o.unwrap_or(0) == 0
    assert o.map(lambda x: x * 2) is o
    with pytest.raises(KeyError):
        o.unwrap()


def test_success_with_none_value() -> None:
    assert Success(None).unwrap() is None
    assert Success(None).is_success


def test_outcomes_are_frozen() -> None:
    with pytest.raises(AttributeError):
        Success(1).value = 2  # type: ignore[misc]


def test_retry_errors_chain_cause() -> None:
    cause = ConnectionError("down")
    err = TooManyRetriesError(attempts=4, last_failure=cause)
    assert err.__cause__ is cause
    assert err.code is ErrorCode.TOO_MANY_RETRIES
    assert err.message == "too many retries"
    assert "attempts=4" in repr(err)


def test_deadline_error_without_cause() -> None:
    err = DeadlineExceededError()
    assert err.__cause__ is None
    assert err.last_failure is None
    assert err.code is ErrorCode.DEADLINE_EXCEEDED


def test_taxonomy() -> None:
    assert issubclass(TooManyRetriesError, RetryError)
    assert issubclass(DeadlineExceededError, RetryError)
    timeout = AttemptTimeoutError(0.5, attempts=1)
    assert isinstance(timeout, TimeoutError)
    assert isinstance(timeout, RetryError)
    assert "0.500s" in str(timeout)


def test_unwrap_reraises_from_recorded_traceback() -> None:
    try:
        raise KeyError("k")
    except KeyError as e:
        o = Failure(e)
    recorded = o.traceback
    assert recorded is not None

    depths = []
    for _ in range(3):
        with pytest.raises(KeyError) as caught:
            o.unwrap()
        depths.append(len(traceback.extract_tb(caught.value.__traceback__)))
    assert depths[0] == depths[1] == depths[2]
    assert o.traceback is recorded


def test_failure_without_traceback() -> None:
    o = Failure(KeyError("never raised"))
    assert o.traceback is None
    with pytest.raises(KeyError):
        o.unwrap()
