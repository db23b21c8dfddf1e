"""Backoff strategies for retry policies.

Provides pluggable delay calculation between attempts:
- ExponentialBackoff: 2^n steps of a base delay, unbounded
- CappedExponentialBackoff: Exponential, never above a ceiling
- JitteredExponentialBackoff: Exponential with a random component per step
- ConstantBackoff: Fixed delay
- FunctionBackoff: Adapter for a plain ``attempt -> seconds`` callable

The module-level ``exponential``, ``exponential_capped`` and
``exponential_jittered`` are ready-made instances with the default 100ms base.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Callable, Protocol, runtime_checkable

# Default backoff step: 100 milliseconds
BASE_DELAY: float = 0.1
# Default ceiling for the capped variant: one hour
MAX_DELAY: float = 3600.0


@runtime_checkable
class Backoff(Protocol):
    """Protocol for backoff delay calculation.

    Implementations compute the wait before the next attempt.
    Attempt numbers are 0-indexed (wait after the first failure = attempt 0).
    """

    def delay(self, attempt: int) -> float:
        """Calculate delay in seconds for given attempt number.

        Args:
            attempt: 0-indexed attempt number that just failed

        Returns:
            Delay in seconds before the next attempt
        """
        ...


def _multiplier(attempt: int) -> int:
    if attempt < 0:
        raise ValueError(f"attempt must be non-negative, got {attempt}")
    return 1 << attempt


def _scaled(attempt: int, step: float) -> float:
    """2^attempt * step, saturating at infinity instead of overflowing."""
    m = _multiplier(attempt)
    if step == 0:
        return 0.0
    try:
        return m * step
    except OverflowError:  # int too large to convert to float
        return math.inf


def _check_base(base: float) -> None:
    if base < 0:
        raise ValueError(f"base must be non-negative, got {base}")


@dataclass(frozen=True, slots=True)
class ExponentialBackoff:
    """Exponential backoff with unbounded growth.

    Delay = 2^attempt * base

    Attributes:
        base: Step in seconds (default: 0.1)
    """

    base: float = BASE_DELAY

    def __post_init__(self) -> None:
        _check_base(self.base)

    def delay(self, attempt: int) -> float:
        return _scaled(attempt, self.base)

    __call__ = delay


@dataclass(frozen=True, slots=True)
class CappedExponentialBackoff:
    """Exponential backoff that never exceeds a ceiling.

    Delay = min(2^attempt * base, ceiling)

    Attributes:
        base: Step in seconds (default: 0.1)
        ceiling: Maximum delay in seconds (default: 3600.0)
    """

    base: float = BASE_DELAY
    ceiling: float = MAX_DELAY

    def __post_init__(self) -> None:
        _check_base(self.base)
        if self.ceiling < 0:
            raise ValueError(f"ceiling must be non-negative, got {self.ceiling}")

    def delay(self, attempt: int) -> float:
        return min(_scaled(attempt, self.base), self.ceiling)

    __call__ = delay


@dataclass(frozen=True, slots=True)
class JitteredExponentialBackoff:
    """Exponential backoff with jitter.

    Delay = 2^attempt * (base + uniform[0, base))

    Jitter desynchronizes callers that started retrying at the same time.
    Every delay falls in [2^n * base, 2^(n+1) * base).

    Attributes:
        base: Step in seconds (default: 0.1)
    """

    base: float = BASE_DELAY

    def __post_init__(self) -> None:
        _check_base(self.base)

    def delay(self, attempt: int) -> float:
        return _scaled(attempt, self.base + random.random() * self.base)

    __call__ = delay


@dataclass(frozen=True, slots=True)
class ConstantBackoff:
    """Fixed delay between attempts.

    Attributes:
        delay_seconds: Fixed delay in seconds (default: 0.1)
    """

    delay_seconds: float = BASE_DELAY

    def __post_init__(self) -> None:
        if self.delay_seconds < 0:
            raise ValueError(f"delay_seconds must be non-negative, got {self.delay_seconds}")

    def delay(self, attempt: int) -> float:
        return self.delay_seconds

    __call__ = delay


@dataclass(frozen=True, slots=True)
class FunctionBackoff:
    """Adapts a plain ``attempt -> seconds`` callable to the Backoff protocol."""

    fn: Callable[[int], float]

    def delay(self, attempt: int) -> float:
        return float(self.fn(attempt))

    __call__ = delay


def as_backoff(value: Backoff | Callable[[int], float]) -> Backoff:
    """Coerce a Backoff or bare callable into a Backoff."""
    if isinstance(value, Backoff):
        return value
    if callable(value):
        return FunctionBackoff(value)
    raise TypeError(f"backoff must be a Backoff or callable, got {type(value).__name__}")


# Reusable default schedules
exponential = ExponentialBackoff()
exponential_capped = CappedExponentialBackoff()
exponential_jittered = JitteredExponentialBackoff()
