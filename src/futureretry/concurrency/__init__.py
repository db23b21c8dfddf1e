"""Concurrency primitives the retry engine runs on.

Key Components:
    - spawn: Detached background task per retry sequence
    - checkpoint: Cooperative yield point
    - to_thread: Run sync computations off the event loop
    - run_sync: Drive async code from a sync caller

Pure asyncio (Python 3.11+), no external dependencies.
"""

from __future__ import annotations

from .interop import run_sync, shutdown_executor, to_thread
from .task import checkpoint, pending_tasks, spawn

__all__ = [
    # Task management
    "spawn",
    "checkpoint",
    "pending_tasks",
    # Interop
    "run_sync",
    "to_thread",
    "shutdown_executor",
]
