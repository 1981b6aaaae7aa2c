"""Cancellation tokens and scheduled tasks used instead of ambient timers."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]
ClockFn = Callable[[], float]


class CancelToken:
    """Flag shared between a scheduled task and whoever may stop it.

    Tasks check the token between steps; cancelling never interrupts a delay
    that is already running, it only guarantees that nothing happens after it.
    """

    __slots__ = ("_cancelled",)

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


async def run_every(
    interval: float,
    callback: Callable[[], object],
    token: CancelToken,
    *,
    sleep: SleepFn = asyncio.sleep,
) -> None:
    """Call ``callback`` every ``interval`` seconds until ``token`` is cancelled."""

    while not token.cancelled:
        await sleep(interval)
        if token.cancelled:
            break
        callback()


def schedule(coro: Awaitable[None], *, name: Optional[str] = None) -> "asyncio.Task[None]":
    task = asyncio.ensure_future(coro)
    if name:
        task.set_name(name)
    task.add_done_callback(_log_task_failure)
    return task


def _log_task_failure(task: "asyncio.Task[None]") -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Scheduled task %s failed", task.get_name(), exc_info=exc)


__all__ = ["CancelToken", "ClockFn", "SleepFn", "run_every", "schedule"]
