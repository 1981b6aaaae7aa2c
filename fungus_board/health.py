"""Idle watchdog for the game connection."""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

from app.config import IDLE_TIMEOUT_MS

from .scheduler import CancelToken, ClockFn, SleepFn, run_every, schedule
from .surface import IDLE_WARNING, RenderSurface

logger = logging.getLogger(__name__)


def idle_warning_text(idle_seconds: float) -> str:
    return f"No game data in {round(idle_seconds, 3):g} seconds"


class HealthMonitor:
    """Warn when the server has been silent for longer than ``timeout_ms``.

    The server pings regularly, so silence means the connection is stuck even
    if the socket still looks open.  Each :meth:`start` invalidates the
    previous watchdog through its token.
    """

    def __init__(
        self,
        surface: RenderSurface,
        *,
        timeout_ms: int = IDLE_TIMEOUT_MS,
        clock: ClockFn = time.monotonic,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.surface = surface
        self.timeout_ms = timeout_ms
        self._clock = clock
        self._sleep = sleep
        self.last_received = clock()
        self._token: Optional[CancelToken] = None
        self._task: Optional["asyncio.Task[None]"] = None

    @property
    def running(self) -> bool:
        return self._token is not None and not self._token.cancelled

    def touch(self) -> None:
        self.last_received = self._clock()

    def idle_seconds(self) -> float:
        return self._clock() - self.last_received

    def check(self) -> bool:
        """Update the idle warning.  Returns ``True`` if the connection is idle."""

        idle = self.idle_seconds()
        if idle * 1000 > self.timeout_ms:
            logger.warning("No game data for %.1f seconds", idle)
            self.surface.display_warning(idle_warning_text(idle), IDLE_WARNING)
            self.surface.offer_reconnect()
            return True
        self.surface.clear_area(IDLE_WARNING)
        return False

    def start(self) -> "asyncio.Task[None]":
        self.stop()
        self.touch()
        token = CancelToken()
        self._token = token
        self._task = schedule(
            run_every(self.timeout_ms / 1000, self.check, token, sleep=self._sleep),
            name="idle-watchdog",
        )
        return self._task

    def stop(self) -> None:
        if self._token is not None:
            self._token.cancel()
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._token = None
        self._task = None


__all__ = ["HealthMonitor", "idle_warning_text"]
