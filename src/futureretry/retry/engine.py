"""Retry engine: the attempt loop and the public ``retry`` entry points.

``retry()`` returns a RetryHandle immediately and drives the sequence in a
background task on the running event loop:

    check deadline → check retry budget → invoke (bounded by deadline)
        success              → Success(value)
        failure, give up     → Failure(failure)          (unwrapped)
        failure, otherwise   → sleep backoff(attempt) → loop

Attempts are strictly sequential. The deadline check runs before the budget
check, so a sequence stopped by both reports DeadlineExceededError.

Example:
    >>> policy = RetryPolicy(max_retry=3, deadline=10.0)
    >>> handle = retry(policy, fetch_quote, "BTC")
    >>> quote = await handle

    >>> # Blocking callers
    >>> quote = retry_sync(policy, fetch_quote, "BTC")
"""

from __future__ import annotations

import asyncio
import functools
import inspect
import itertools
import logging
from collections.abc import Awaitable
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from futureretry.concurrency import run_sync, spawn, to_thread
from futureretry.foundation.errors import DeadlineExceededError, RetryError, TooManyRetriesError
from futureretry.foundation.outcome import Failure, Outcome, Success

from .deadline import bounded
from .handle import RetryHandle
from .policy import RetryPolicy

T = TypeVar("T")

logger = logging.getLogger("futureretry.retry.engine")

_sequence_ids = itertools.count(1)

PolicyLike = RetryPolicy | int | None


@dataclass(frozen=True, slots=True)
class AttemptState:
    """Loop-owned progress of one sequence. Replaced, never mutated."""

    attempt: int = 0
    last_failure: BaseException | None = None

    def next(self, failure: BaseException) -> AttemptState:
        return AttemptState(self.attempt + 1, failure)


def resolve_policy(policy: PolicyLike) -> RetryPolicy:
    """Accept a RetryPolicy, a max_retry int, or None (configured defaults)."""
    if isinstance(policy, RetryPolicy):
        return policy
    if policy is None:
        return RetryPolicy.from_settings()
    if isinstance(policy, int) and not isinstance(policy, bool):
        return RetryPolicy.from_settings(max_retry=policy)
    raise TypeError(f"policy must be a RetryPolicy, int or None, got {type(policy).__name__}")


def as_async_call(
    computation: Callable[..., T | Awaitable[T]],
    args: tuple[Any, ...] = (),
    kwargs: dict[str, Any] | None = None,
    *,
    executor: Executor | None = None,
) -> Callable[[], Awaitable[T]]:
    """Normalize a computation into a zero-arg coroutine factory.

    Coroutine functions run on the event loop. Anything else runs on
    ``executor`` (default: shared thread pool) so it never blocks the loop;
    an awaitable it returns is awaited on the loop.
    """
    fn = functools.partial(computation, *args, **(kwargs or {})) if args or kwargs else computation
    if inspect.iscoroutinefunction(fn):
        return fn  # type: ignore[return-value]

    async def call() -> T:
        result = await to_thread(fn, executor=executor)
        if inspect.isawaitable(result):
            return await result
        return result

    return call


class RetryEngine(Generic[T]):
    """Drives one retry sequence for one computation.

    Owns the AttemptState for the lifetime of the sequence. Never raises out
    of ``run``: every failure of the computation becomes part of the Outcome.
    """

    __slots__ = ("policy", "handle", "_call")

    def __init__(self, policy: RetryPolicy, call: Callable[[], Awaitable[T]], handle: RetryHandle[T]) -> None:
        self.policy, self._call, self.handle = policy, call, handle

    @property
    def name(self) -> str:
        return self.handle.name or "retry"

    def _stop_reason(self, state: AttemptState) -> RetryError | None:
        """Stopping condition before an attempt; deadline wins over budget."""
        if self.policy.is_overdue():
            return DeadlineExceededError(attempts=state.attempt, last_failure=state.last_failure)
        if self.policy.is_exhausted(state.attempt):
            return TooManyRetriesError(attempts=state.attempt, last_failure=state.last_failure)
        return None

    def _backoff(self, attempt: int) -> float:
        """Backoff for ``attempt``, never sleeping past the deadline."""
        delay = self.policy.get_delay(attempt)
        if (deadline := self.policy.deadline) is not None:
            delay = min(delay, max(deadline.time_left(), 0.0))
        return max(delay, 0.0)

    async def _invoke(self) -> T:
        self.handle._record_attempt()
        return await self._call()

    async def run(self) -> Outcome[T]:
        state = AttemptState()
        while (stop := self._stop_reason(state)) is None:
            try:
                value = await bounded(self._invoke, self.policy.deadline, attempt=state.attempt)
            except Exception as e:
                if self.policy.should_give_up(e):
                    logger.info(
                        f"[{self.name}] Giving up after attempt {state.attempt + 1} ({type(e).__name__}: {e})",
                        extra={"sequence": self.name, "attempt": state.attempt + 1, "error": type(e).__name__},
                    )
                    return Failure(e)

                state = state.next(e)
                if self.policy.is_exhausted(state.attempt):
                    continue  # No point waiting for an attempt that will not run

                delay = self._backoff(state.attempt - 1)
                limit = "∞" if self.policy.is_unlimited else self.policy.max_retry
                logger.info(
                    f"[{self.name}] Retry {state.attempt}/{limit} after {delay:.3f}s ({type(e).__name__}: {e})",
                    extra={"sequence": self.name, "attempt": state.attempt, "delay": delay,
                           "error": type(e).__name__},
                )
                if self.policy.on_retry:
                    self.policy.on_retry(state.attempt - 1, e, delay)
                await asyncio.sleep(delay)
                continue

            if state.attempt:
                logger.debug(
                    f"[{self.name}] Succeeded on attempt {state.attempt + 1}",
                    extra={"sequence": self.name, "attempt": state.attempt + 1},
                )
            return Success(value)

        logger.warning(
            f"[{self.name}] {stop.message} after {stop.attempts} attempt(s)",
            extra={"sequence": self.name, "attempt": stop.attempts, "error": stop.code.value},
        )
        return Failure(stop)


async def _drive(engine: RetryEngine[T]) -> None:
    """Background task body: run the loop and resolve the handle exactly once."""
    try:
        outcome = await engine.run()
    except (asyncio.CancelledError, KeyboardInterrupt, SystemExit) as e:
        engine.handle._resolve(Failure(e))
        raise
    except BaseException as e:
        # Raised by the policy's own callables (give_up_on, backoff, on_retry),
        # or a non-Exception failure from the computation
        logger.exception(f"[{engine.name}] Retry sequence aborted: {e!r}", extra={"sequence": engine.name})
        outcome = Failure(e)
    engine.handle._resolve(outcome)


def retry(
    policy: PolicyLike,
    computation: Callable[..., T | Awaitable[T]],
    *args: Any,
    executor: Executor | None = None,
    name: str | None = None,
    **kwargs: Any,
) -> RetryHandle[T]:
    """Start a retry sequence and return its handle immediately.

    Must be called while an event loop is running; the attempt loop runs as
    a background task on it.

    Only ``Exception`` failures are retried. Anything else raised by the
    computation (a bare ``BaseException`` subclass) ends the sequence at once
    and the handle resolves with it.

    Args:
        policy: RetryPolicy, a max_retry int, or None for configured defaults
        computation: Sync or async callable to retry
        *args: Positional arguments for the computation
        executor: Where sync computations run (default: shared thread pool)
        name: Sequence name for logs (default: retry-N)
        **kwargs: Keyword arguments for the computation

    Returns:
        RetryHandle resolving to the value, the unwrapped give-up failure,
        TooManyRetriesError, or DeadlineExceededError

    Raises:
        RuntimeError: If no event loop is running
    """
    resolved = resolve_policy(policy)
    seq_name = name or f"retry-{next(_sequence_ids)}"
    handle: RetryHandle[T] = RetryHandle(name=seq_name)
    call = as_async_call(computation, args, kwargs, executor=executor)
    spawn(_drive(RetryEngine(resolved, call, handle)), name=seq_name)
    return handle


def retry_sync(
    policy: PolicyLike,
    computation: Callable[..., T | Awaitable[T]],
    *args: Any,
    executor: Executor | None = None,
    name: str | None = None,
    **kwargs: Any,
) -> T:
    """Blocking variant of ``retry`` for synchronous callers.

    Returns the value or raises the final failure.
    """
    async def main() -> T:
        return await retry(policy, computation, *args, executor=executor, name=name, **kwargs)

    return run_sync(main())


def retrying(
    policy: PolicyLike = None,
    *,
    executor: Executor | None = None,
) -> Callable[[Callable[..., T | Awaitable[T]]], Callable[..., RetryHandle[T]]]:
    """Decorator: each call of the wrapped function starts a retry sequence.

    Example:
        >>> @retrying(RetryPolicy(max_retry=5, deadline=30.0))
        ... async def fetch(url: str) -> bytes: ...
        >>> body = await fetch("https://example.com")
    """
    def decorator(func: Callable[..., T | Awaitable[T]]) -> Callable[..., RetryHandle[T]]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> RetryHandle[T]:
            return retry(policy, func, *args, executor=executor, name=func.__name__, **kwargs)
        return wrapper
    return decorator
