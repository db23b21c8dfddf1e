"""Sync/async interoperability utilities.

Bridges synchronous computations and callers into the asyncio-based engine:
    - run_sync: Run async code from sync context
    - to_thread: Offload sync code to a thread pool
    - shutdown_executor: Tear down the shared pool

These utilities handle the tricky edge cases:
    - Running in an existing event loop (e.g., FastAPI, Jupyter)
    - Caller-supplied executors
    - Context variable propagation into worker threads

Example:
    >>> # Call async from sync
    >>> result = run_sync(async_function())

    >>> # Call sync from async (in thread)
    >>> result = await to_thread(blocking_function, arg1, arg2)
"""

from __future__ import annotations

import asyncio
import contextvars
import functools
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Callable, Coroutine, TypeVar

T = TypeVar("T")

# Default thread pool for to_thread operations
_default_executor: ThreadPoolExecutor | None = None
_executor_lock = threading.Lock()


def _get_default_executor() -> ThreadPoolExecutor:
    """Get or create default thread pool executor."""
    global _default_executor
    if _default_executor is None:
        with _executor_lock:
            if _default_executor is None:
                _default_executor = ThreadPoolExecutor(thread_name_prefix="futureretry-")
    return _default_executor


def run_sync(coro: Coroutine[object, object, T]) -> T:
    """Run async coroutine from synchronous context.

    Handles two scenarios:
    1. No running loop → Use asyncio.run()
    2. Called from within event loop → Run on a private loop in a thread

    Args:
        coro: Coroutine to execute

    Returns:
        Coroutine result
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    # Inside a running loop: blocking it with run_until_complete would deadlock
    return _run_in_thread_loop(coro)


def _run_in_thread_loop(coro: Coroutine[object, object, T]) -> T:
    """Run coroutine in a new thread with its own event loop."""
    result: T | None = None
    error: BaseException | None = None
    done = threading.Event()

    def runner() -> None:
        nonlocal result, error
        try:
            result = asyncio.run(coro)
        except BaseException as e:
            error = e
        finally:
            done.set()

    thread = threading.Thread(target=runner, name="futureretry-run-sync", daemon=True)
    thread.start()
    done.wait()

    if error is not None:
        raise error
    return result  # type: ignore[return-value]


async def to_thread(
    func: Callable[..., T],
    *args: object,
    executor: Executor | None = None,
    **kwargs: object,
) -> T:
    """Run sync function in a thread pool.

    Similar to asyncio.to_thread but accepts a caller-supplied executor.
    Context variables are copied into the worker.

    Args:
        func: Sync function to call
        *args: Positional arguments
        executor: Executor to run on (default: shared pool)
        **kwargs: Keyword arguments

    Returns:
        Function result
    """
    loop = asyncio.get_running_loop()
    ctx = contextvars.copy_context()

    if kwargs:
        func = functools.partial(func, **kwargs)

    return await loop.run_in_executor(
        executor or _get_default_executor(),
        functools.partial(ctx.run, func, *args),
    )


def shutdown_executor(wait: bool = True) -> None:
    """Shutdown the shared thread pool executor.

    Abandoned attempts (timed out against a deadline) may still be running
    there; ``wait=True`` blocks until they finish.
    """
    global _default_executor
    with _executor_lock:
        if _default_executor is not None:
            _default_executor.shutdown(wait=wait)
            _default_executor = None
