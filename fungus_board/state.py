"""Client session state shared by every handler."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol

from app.config import ANIMATION_STEP_MS

from .board import BoardModel
from .models import NextPiece, Player, WinLossDraw, find_player
from .piece import BITE_NONE
from .scheduler import SleepFn
from .surface import RenderSurface

logger = logging.getLogger(__name__)


class PreviewKind(str, Enum):
    PIECE = "piece"
    BITE = "bite"


class Outbox(Protocol):
    async def send(self, frame: Dict[str, Any]) -> None:
        ...


@dataclass
class TurnState:
    """Whose turn it is and what the local player has selected.

    ``current_turn`` is only changed by the server; the selections are changed
    locally for optimistic previews and reset when the turn really changes.
    """

    current_turn: int = -1
    rotation: int = 0
    bite: int = BITE_NONE
    last_preview_index: int = -1
    last_preview_kind: PreviewKind = PreviewKind.PIECE
    displayed_piece_mask: int = -1


@dataclass
class SessionState:
    """All client state for one game session.

    Owned by the message dispatcher and passed by reference to every handler.
    """

    surface: RenderSurface
    board: BoardModel
    turn: TurnState = field(default_factory=TurnState)
    players: List[Player] = field(default_factory=list)
    records: List[WinLossDraw] = field(default_factory=list)
    identity: int = -1
    next_piece: Optional[NextPiece] = None
    scores: List[int] = field(default_factory=list)
    bites: List[int] = field(default_factory=list)
    rerolls: List[int] = field(default_factory=list)
    game_over: bool = False
    remote_buttons: Dict[str, bool] = field(default_factory=dict)
    outbox: Optional[Outbox] = None
    sleep: SleepFn = asyncio.sleep

    @classmethod
    def create(
        cls,
        surface: RenderSurface,
        *,
        outbox: Optional[Outbox] = None,
        step_ms: int = ANIMATION_STEP_MS,
        sleep: SleepFn = asyncio.sleep,
    ) -> "SessionState":
        board = BoardModel(surface, step_ms=step_ms, sleep=sleep)
        return cls(surface=surface, board=board, outbox=outbox, sleep=sleep)

    @property
    def player_number(self) -> int:
        return self.identity + 1

    @property
    def is_my_turn(self) -> bool:
        return self.identity >= 0 and self.turn.current_turn == self.identity

    @property
    def my_bites(self) -> int:
        if 0 <= self.identity < len(self.bites):
            return self.bites[self.identity]
        return 0

    @property
    def my_rerolls(self) -> int:
        if 0 <= self.identity < len(self.rerolls):
            return self.rerolls[self.identity]
        return 0

    @property
    def me(self) -> Optional[Player]:
        return find_player(self.players, self.identity)

    @property
    def current_player(self) -> Optional[Player]:
        return find_player(self.players, self.turn.current_turn)

    def current_piece_mask(self) -> Optional[int]:
        if self.next_piece is None:
            return None
        return self.next_piece.mask(self.turn.rotation)

    def selected_mask(self) -> Optional[int]:
        """Mask the local player would place right now: the bite or the piece."""

        if self.turn.bite != BITE_NONE:
            return self.turn.bite
        return self.current_piece_mask()

    async def send(self, frame: Dict[str, Any]) -> None:
        if self.outbox is None:
            logger.warning("Dropping %s frame, not connected", frame.get("type"))
            return
        await self.outbox.send(frame)


__all__ = ["Outbox", "PreviewKind", "SessionState", "TurnState"]
