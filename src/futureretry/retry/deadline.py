"""Deadlines and the per-attempt deadline gate.

A Deadline is an absolute instant on the monotonic clock. The gate bounds a
single attempt by whatever time is left when the attempt starts; an attempt
that runs past it is abandoned and recorded as an AttemptTimeoutError.

Example:
    >>> d = Deadline.from_now(0.4)
    >>> d.is_overdue()
    False
    >>> value = await bounded(fetch, d)  # raises AttemptTimeoutError if too slow
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Awaitable, Callable, TypeVar

from futureretry.foundation.errors import AttemptTimeoutError

T = TypeVar("T")

_clock = time.monotonic


@dataclass(frozen=True, slots=True, order=True)
class Deadline:
    """Absolute point in time after which no attempt may start.

    Attributes:
        at: Instant on the ``time.monotonic()`` clock
    """

    at: float

    @classmethod
    def now(cls) -> Deadline:
        """A deadline that is already due."""
        return cls(_clock())

    @classmethod
    def from_now(cls, seconds: float | timedelta) -> Deadline:
        """Deadline ``seconds`` from the current instant."""
        if isinstance(seconds, timedelta):
            seconds = seconds.total_seconds()
        return cls(_clock() + seconds)

    @classmethod
    def coerce(cls, value: Deadline | float | int | timedelta | None) -> Deadline | None:
        """Accept a Deadline, a relative number of seconds, a timedelta, or None."""
        if value is None or isinstance(value, Deadline):
            return value
        if isinstance(value, bool):
            raise TypeError("deadline cannot be a bool")
        if isinstance(value, (int, float, timedelta)):
            return cls.from_now(value)
        raise TypeError(f"deadline must be a Deadline, seconds or timedelta, got {type(value).__name__}")

    def time_left(self) -> float:
        """Seconds until the deadline; negative once overdue."""
        return self.at - _clock()

    def is_overdue(self) -> bool:
        """True when the current time is at or past the deadline."""
        return _clock() >= self.at

    def __repr__(self) -> str:
        return f"Deadline(time_left={self.time_left():.3f}s)"


async def bounded(
    call: Callable[[], Awaitable[T]],
    deadline: Deadline | None,
    *,
    attempt: int = 0,
) -> T:
    """Await ``call()``, bounded by the time left until ``deadline``.

    Without a deadline the call runs unbounded. Work running on an executor
    thread cannot be interrupted; it is abandoned and keeps running there.

    Raises:
        AttemptTimeoutError: If the call does not complete in time
    """
    if deadline is None:
        return await call()

    budget = max(deadline.time_left(), 0.0)
    scope = asyncio.timeout(budget)
    try:
        async with scope:
            return await call()
    except TimeoutError:
        if not scope.expired():
            raise  # raised by the computation itself
        raise AttemptTimeoutError(budget, attempts=attempt + 1) from None
