"""Error taxonomy for retry sequences.

A retry sequence resolves to one of:
- the computed value
- the last failure, unwrapped (give-up predicate fired)
- TooManyRetriesError (retry budget used up)
- DeadlineExceededError (deadline reached before a success)

AttemptTimeoutError is the failure recorded for a single attempt that ran
past the deadline. It is an ordinary attempt failure, so it goes through the
give-up predicate like any other.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    """Machine-readable classification of retry failures."""
    TOO_MANY_RETRIES = "TOO_MANY_RETRIES"
    DEADLINE_EXCEEDED = "DEADLINE_EXCEEDED"
    ATTEMPT_TIMEOUT = "ATTEMPT_TIMEOUT"


class RetryError(Exception):
    """Base for failures produced by the retry engine itself.

    The last failure seen by the attempt loop is chained as ``__cause__``
    (and exposed as ``last_failure``), so tracebacks show what actually went
    wrong underneath the classification.

    Attributes:
        code: ErrorCode for programmatic handling
        attempts: Number of invocations made before giving up
        last_failure: Failure of the final attempt, or None if nothing ran
    """

    code: ErrorCode
    default_message: str = "retry failed"

    def __init__(
        self,
        message: str | None = None,
        *,
        attempts: int = 0,
        last_failure: BaseException | None = None,
    ) -> None:
        super().__init__(message or self.default_message)
        self.attempts = attempts
        self.last_failure = last_failure
        if last_failure is not None:
            self.__cause__ = last_failure

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else self.default_message

    def __repr__(self) -> str:
        cause = type(self.last_failure).__name__ if self.last_failure else None
        code = getattr(self, "code", None)
        return f"{type(self).__name__}(code={code}, attempts={self.attempts}, cause={cause})"


class TooManyRetriesError(RetryError):
    """Retry budget exhausted without a successful attempt."""

    code = ErrorCode.TOO_MANY_RETRIES
    default_message = "too many retries"


class DeadlineExceededError(RetryError):
    """Deadline reached before a successful attempt."""

    code = ErrorCode.DEADLINE_EXCEEDED
    default_message = "deadline exceeded"


class AttemptTimeoutError(RetryError, TimeoutError):
    """A single attempt did not finish within the time left before the deadline."""

    code = ErrorCode.ATTEMPT_TIMEOUT
    default_message = "attempt timed out"

    def __init__(self, timeout: float, *, attempts: int = 0) -> None:
        super().__init__(f"attempt did not complete within {timeout:.3f}s", attempts=attempts)
        self.timeout = timeout
