"""Staggered reveal of board cells changed by the last server update."""
from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Callable, Iterable, Optional, Tuple

from app.config import ANIMATION_STEP_MS

from .scheduler import CancelToken, SleepFn, schedule

logger = logging.getLogger(__name__)


class AnimationQueue:
    """Play cell repaints one by one with a fixed delay between them.

    The board data is already current when a queue starts; only the visual
    reveal is delayed.  Starting a new queue stops the previous one at once.
    """

    def __init__(
        self,
        paint: Callable[[int], None],
        *,
        step_ms: int = ANIMATION_STEP_MS,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._paint = paint
        self.step_ms = step_ms
        self._sleep = sleep
        self._token: Optional[CancelToken] = None
        self._pending: deque = deque()
        self._task: Optional["asyncio.Task[None]"] = None

    @property
    def is_animating(self) -> bool:
        return self._token is not None and not self._token.cancelled

    @property
    def pending(self) -> Tuple[int, ...]:
        return tuple(self._pending)

    @property
    def task(self) -> Optional["asyncio.Task[None]"]:
        return self._task

    def start(self, indices: Iterable[int]) -> "asyncio.Task[None]":
        self.cancel()
        token = CancelToken()
        pending = deque(indices)
        self._token = token
        self._pending = pending
        self._task = schedule(self._play(pending, token), name="board-animation")
        return self._task

    def cancel(self) -> None:
        if self._token is not None and not self._token.cancelled:
            logger.debug("Cancelling board animation with %d steps left", len(self._pending))
            self._token.cancel()

    async def _play(self, pending: deque, token: CancelToken) -> None:
        try:
            while pending and not token.cancelled:
                await self._sleep(self.step_ms / 1000)
                if token.cancelled:
                    break
                index = pending.popleft()
                logger.debug("animating %s", index)
                self._paint(index)
        finally:
            token.cancel()


__all__ = ["AnimationQueue"]
