"""Cached copy of the authoritative game board."""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, Iterable, List, Optional, Sequence

from app.config import ANIMATION_STEP_MS

from .animation import AnimationQueue
from .models import CellView, cell_owner, CELL_FLAG_BONUS_BITE, CELL_FLAG_BONUS_REROLL, CELL_FLAG_HOME
from .scheduler import SleepFn
from .surface import RenderSurface

logger = logging.getLogger(__name__)


class BoardModel:
    """Last board snapshot received from the server and its projection.

    The grid is never edited locally; every snapshot replaces it wholesale.
    ``_painted`` remembers the value each surface cell was last painted with so
    that partial repaints only touch cells that are actually out of date.
    """

    def __init__(
        self,
        surface: RenderSurface,
        *,
        step_ms: int = ANIMATION_STEP_MS,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.surface = surface
        self.cols = -1
        self.rows = -1
        self.grid: List[List[int]] = []
        self._painted: Dict[int, int] = {}
        self.animation = AnimationQueue(self.paint_cell, step_ms=step_ms, sleep=sleep)

    @property
    def cell_count(self) -> int:
        if self.cols < 0 or self.rows < 0:
            return 0
        return self.cols * self.rows

    @property
    def is_animating(self) -> bool:
        return self.animation.is_animating

    def cell(self, index: int) -> int:
        return self.grid[index // self.cols][index % self.cols]

    def cell_view(self, index: int) -> CellView:
        return CellView.from_value(self.cell(index))

    def resize(self, cols: int, rows: int) -> bool:
        """Rebuild the surface when the board dimensions change.

        Returns ``True`` if a rebuild happened.
        """

        if cols == self.cols and rows == self.rows:
            return False
        logger.info("Board resized from %sx%s to %sx%s", self.cols, self.rows, cols, rows)
        self.animation.cancel()
        self.cols = cols
        self.rows = rows
        self._painted.clear()
        self.surface.initialize_board(cols, rows)
        return True

    def apply_snapshot(self, grid: Sequence[Sequence[int]], animate: Optional[Sequence[int]] = None) -> None:
        """Replace the cached grid and bring the surface up to date.

        Without ``animate`` every cell is repainted immediately.  With it, the
        listed cells are revealed one at a time by the animation queue and no
        full repaint happens.
        """

        rows = len(grid)
        cols = len(grid[0]) if rows else 0
        self.resize(cols, rows)
        self.grid = [list(row) for row in grid]

        if animate:
            skip = set(animate)
            self.sync(skip=skip)
            self.animation.start(animate)
        else:
            self.animation.cancel()
            self.repaint()

    def paint_cell(self, index: int) -> None:
        if not 0 <= index < self.cell_count:
            logger.warning("Skipping paint of cell %s outside %sx%s board", index, self.cols, self.rows)
            return
        value = self.cell(index)
        self.surface.paint_cell(index, CellView.from_value(value))
        self._painted[index] = value

    def repaint(self) -> None:
        for index in range(self.cell_count):
            self.paint_cell(index)

    def sync(self, *, skip: Iterable[int] = ()) -> int:
        """Repaint cells whose painted value is stale, except ``skip``."""

        skipped = set(skip)
        count = 0
        for index in range(self.cell_count):
            if index in skipped:
                continue
            if self._painted.get(index) != self.cell(index):
                self.paint_cell(index)
                count += 1
        return count

    def to_text(self) -> str:
        """Plain-text dump of the grid, one token per cell."""

        lines = []
        for row in self.grid:
            tokens = []
            for cell in row:
                owner = cell_owner(cell)
                token = str(owner) if owner else "."
                if cell & CELL_FLAG_HOME:
                    token += "H"
                if cell & CELL_FLAG_BONUS_BITE:
                    token += "B"
                if cell & CELL_FLAG_BONUS_REROLL:
                    token += "R"
                tokens.append(token.ljust(3))
            lines.append("".join(tokens).rstrip())
        return "\n".join(lines)


__all__ = ["BoardModel"]
