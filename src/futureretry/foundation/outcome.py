"""Final outcome of a retry sequence: Success(value) or Failure(error).

Similar to JavaScript's Promise.allSettled() entries. An Outcome is what a
RetryHandle resolves to; it is immutable and can be read any number of times.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from types import TracebackType
from typing import Callable, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


class OutcomeStatus(StrEnum):
    """Status of a settled retry sequence."""
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(slots=True, frozen=True)
class Outcome(Generic[T]):
    """Settled result of a retry sequence.

    Attributes:
        status: 'success' or 'failure'
        value: Result value on success
        error: Exception on failure
        traceback: Traceback of ``error`` when the outcome was recorded
    """

    status: OutcomeStatus
    value: T | None = None
    error: BaseException | None = None
    traceback: TracebackType | None = field(default=None, repr=False, compare=False)

    @property
    def is_success(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS

    @property
    def is_failure(self) -> bool:
        return self.status == OutcomeStatus.FAILURE

    def unwrap(self) -> T:
        """Get value or raise stored error.

        The error is re-raised from its recorded traceback, so repeated
        unwraps do not stack frames onto it.
        """
        if self.is_failure:
            if self.error is None:
                raise RuntimeError("Failure with no error")
            raise self.error.with_traceback(self.traceback)
        return self.value  # type: ignore[return-value]

    def unwrap_or(self, default: T) -> T:
        """Get value or return default."""
        return self.value if self.is_success else default  # type: ignore[return-value]

    def map(self, f: Callable[[T], U]) -> Outcome[U]:
        """Apply f to a success value; failures pass through."""
        return Success(f(self.value)) if self.is_success else self  # type: ignore[arg-type,return-value]

    def __repr__(self) -> str:
        return f"Success({self.value!r})" if self.is_success else f"Failure({self.error!r})"


def Success(value: T) -> Outcome[T]:  # noqa: N802 - constructor-style factory
    """Create a successful Outcome."""
    return Outcome(OutcomeStatus.SUCCESS, value=value)


def Failure(error: BaseException) -> Outcome[T]:  # noqa: N802 - constructor-style factory
    """Create a failed Outcome."""
    return Outcome(OutcomeStatus.FAILURE, error=error, traceback=error.__traceback__)
