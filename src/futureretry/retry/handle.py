"""Single-resolution handle for a running retry sequence.

The handle is returned to the caller immediately; the background attempt
loop resolves it exactly once with an Outcome. After that it is read-only
and may be inspected or awaited any number of times.

Example:
    >>> handle = retry(policy, fetch)
    >>> value = await handle          # value, or raises the final failure
    >>> handle.outcome()              # Success(...) / Failure(...)
    >>> handle.attempts               # invocations made
"""

from __future__ import annotations

import asyncio
from typing import Callable, Generator, Generic, TypeVar

from futureretry.foundation.outcome import Outcome

T = TypeVar("T")


class RetryHandle(Generic[T]):
    """Write-once result cell bridging the attempt loop to the caller.

    The underlying future carries the Outcome itself rather than a raised
    exception, so an unobserved failure never triggers asyncio's
    "exception was never retrieved" warning.

    Attributes:
        name: Sequence name (used in logs)
    """

    __slots__ = ("name", "_future", "_outcome", "_attempts")

    def __init__(self, *, name: str | None = None) -> None:
        self.name = name
        self._future: asyncio.Future[Outcome[T]] = asyncio.get_running_loop().create_future()
        self._outcome: Outcome[T] | None = None
        self._attempts = 0

    @property
    def done(self) -> bool:
        """Whether the sequence has resolved."""
        return self._outcome is not None

    @property
    def attempts(self) -> int:
        """Number of invocations of the computation so far."""
        return self._attempts

    def outcome(self) -> Outcome[T]:
        """Final outcome.

        Raises:
            asyncio.InvalidStateError: If the sequence is still running
        """
        if self._outcome is None:
            raise asyncio.InvalidStateError(f"Retry sequence {self.name!r} is still running")
        return self._outcome

    def result(self) -> T:
        """Success value, or raise the final failure."""
        return self.outcome().unwrap()

    def exception(self) -> BaseException | None:
        """Final failure, or None on success."""
        return self.outcome().error

    def add_done_callback(self, fn: Callable[[RetryHandle[T]], object]) -> None:
        """Call ``fn(handle)`` once the sequence resolves (immediately scheduled if already done)."""
        self._future.add_done_callback(lambda _: fn(self))

    async def wait(self) -> T:
        """Wait for resolution and return the value (or raise the failure)."""
        # Shielded so a cancelled waiter does not cancel the cell itself
        outcome = await asyncio.shield(self._future)
        return outcome.unwrap()

    def __await__(self) -> Generator[object, None, T]:
        return self.wait().__await__()

    # ─── Engine side ─────────────────────────────────────────────────

    def _record_attempt(self) -> None:
        self._attempts += 1

    def _resolve(self, outcome: Outcome[T]) -> bool:
        """Resolve with ``outcome``. Only the first call has an effect."""
        if self._outcome is not None:
            return False
        self._outcome = outcome
        if not self._future.done():
            self._future.set_result(outcome)
        return True

    def __repr__(self) -> str:
        state = repr(self._outcome) if self._outcome is not None else "pending"
        return f"RetryHandle(name={self.name!r}, attempts={self._attempts}, {state})"
