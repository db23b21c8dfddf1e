"""Background task management.

Each retry sequence runs as one detached asyncio task. The event loop only
keeps weak references to tasks, so spawned tasks are held here until they
finish.

Example:
    >>> task = spawn(attempt_loop(), name="retry-1")
    >>> await checkpoint()  # Let it start
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import TypeVar

T = TypeVar("T")

# Strong references to running background tasks
_background: set[asyncio.Task[object]] = set()


def spawn(
    coro: Coroutine[object, object, T],
    *,
    name: str | None = None,
) -> asyncio.Task[T]:
    """Spawn a detached task on the running loop.

    The task may outlive its caller; its result is meant to be observed
    through a done callback.

    Args:
        coro: Coroutine to run
        name: Optional task name

    Returns:
        The scheduled asyncio.Task

    Raises:
        RuntimeError: If no event loop is running
    """
    task = asyncio.get_running_loop().create_task(coro, name=name)
    _background.add(task)  # type: ignore[arg-type]
    task.add_done_callback(_background.discard)
    return task


def pending_tasks() -> int:
    """Number of spawned tasks that have not finished yet."""
    return sum(1 for t in _background if not t.done())


async def checkpoint() -> None:
    """Cooperative cancellation checkpoint.

    Yields control to the event loop, allowing pending callbacks and
    cancellations to be processed.
    """
    await asyncio.sleep(0)
