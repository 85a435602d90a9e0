"""Helpers for the background tasks owned by session services."""

import asyncio
from typing import Optional


async def cancel_task(task: Optional[asyncio.Task]) -> None:
    """Cancel ``task`` and wait for it to unwind.

    The calling task is never cancelled: services routinely stop their own
    timers from inside one of those timers' callbacks.

    ``asyncio.wait`` never raises the awaited task's outcome, so a
    cancellation delivered to the caller while it waits propagates unchanged
    instead of being mistaken for the task's own ``CancelledError``.
    """
    if task is None or task.done() or task is asyncio.current_task():
        return
    task.cancel()
    await asyncio.wait({task})
    if not task.cancelled():
        # Surface an error raised while the task was unwinding
        task.result()
