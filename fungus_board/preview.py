"""Hover and placement previews shared with the other players.

Local intents are painted optimistically and broadcast straight away; the
server answers later with an authoritative ``game_info`` snapshot that
overwrites whatever was previewed.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .models import player_class
from .piece import BITE_NONE, placed_cells, preview_cells
from .protocol import (
    BoardAction,
    BoardInfoPreview,
    PreviewAction,
    board_update,
    board_update_preview,
)
from .state import PreviewKind, SessionState
from .surface import HOVER_BITE_LOCAL, HOVER_BITE_REMOTE, HOVER_PIECE_LOCAL, HOVER_PIECE_REMOTE
from .turn import show_next_piece, update_bite_cost

logger = logging.getLogger(__name__)

LOCAL_CLASSES = {PreviewKind.PIECE: HOVER_PIECE_LOCAL, PreviewKind.BITE: HOVER_BITE_LOCAL}
_PREVIEW_ACTIONS = {PreviewKind.PIECE: PreviewAction.PREVIEW_PIECE, PreviewKind.BITE: PreviewAction.PREVIEW_BITE}


@dataclass(frozen=True)
class PreviewIntent:
    kind: PreviewKind
    index: int
    mask: int

    def to_frame(self) -> Dict[str, Any]:
        return board_update_preview(_PREVIEW_ACTIONS[self.kind], self.index, self.mask)


def current_kind(session: SessionState) -> PreviewKind:
    return PreviewKind.BITE if session.turn.bite != BITE_NONE else PreviewKind.PIECE


def intent_for(session: SessionState, index: int) -> Optional[PreviewIntent]:
    mask = session.selected_mask()
    if mask is None:
        return None
    return PreviewIntent(kind=current_kind(session), index=index, mask=mask)


def covered(session: SessionState, index: int, mask: int) -> List[int]:
    board = session.board
    return preview_cells(index, mask, board.cols, board.cell_count)


def paint_local(session: SessionState, intent: PreviewIntent) -> None:
    session.surface.set_overlay(LOCAL_CLASSES[intent.kind], covered(session, intent.index, intent.mask))


async def send_clear(session: SessionState) -> None:
    await session.send(board_update_preview(PreviewAction.CLEAR))


async def show(session: SessionState, index: Optional[int] = None) -> Optional[PreviewIntent]:
    """Preview the current selection at ``index`` and broadcast it.

    Switching between a piece and a bite clears every hover overlay and tells
    the peers to do the same before the new preview is sent.
    """

    if not session.is_my_turn:
        return None
    state = session.turn
    if index is not None:
        state.last_preview_index = index

    kind = current_kind(session)
    if kind != state.last_preview_kind:
        session.surface.clear_overlays()
        await send_clear(session)
    state.last_preview_kind = kind

    if state.last_preview_index < 0:
        return None
    intent = intent_for(session, state.last_preview_index)
    if intent is None:
        logger.info("No piece to preview yet")
        return None
    paint_local(session, intent)
    await session.send(intent.to_frame())
    return intent


async def clear(session: SessionState) -> bool:
    """Drop the local preview when focus leaves the board."""

    if not session.is_my_turn:
        return False
    session.turn.last_preview_index = -1
    session.surface.clear_overlays()
    await send_clear(session)
    return True


async def place(session: SessionState, index: int) -> bool:
    """Optimistically place the selected piece or bite and notify the server."""

    if not session.is_my_turn:
        logger.info("Skipped placement at %s, not player's turn", index)
        return False
    board = session.board
    surface = session.surface
    bite = session.turn.bite

    if bite == BITE_NONE:
        mask = session.current_piece_mask()
        if mask is None:
            logger.info("Skipped placement at %s, no piece received yet", index)
            return False
        if mask == 0:
            logger.info("Skipped placement at %s, empty piece mask", index)
            return False
        cells = placed_cells(index, mask, board.cols, board.cell_count)
        surface.add_overlay(player_class(session.player_number), cells)
        await session.send(board_update(BoardAction.PLACE_PIECE, index, mask))
        return True

    cells = placed_cells(index, bite, board.cols, board.cell_count)
    surface.strip_owner(cells)
    await session.send(board_update(BoardAction.PLACE_BITE, index, bite))
    update_bite_cost(session, BITE_NONE)
    surface.clear_overlays()
    await send_clear(session)
    return True


def apply_remote(session: SessionState, message: BoardInfoPreview) -> bool:
    """Show a preview broadcast by the player whose turn it is."""

    surface = session.surface
    board = session.board
    action = message.action

    if action == PreviewAction.PREVIEW_PIECE.value:
        surface.set_overlay(HOVER_PIECE_REMOTE, covered(session, message.index, message.mask))
    elif action == PreviewAction.PREVIEW_BITE.value:
        surface.set_overlay(HOVER_BITE_REMOTE, covered(session, message.index, message.mask))
    elif action == PreviewAction.PLACE_PIECE.value:
        if message.index >= 0:
            surface.paint_placement(covered(session, message.index, message.mask), player_class(message.owner))
    elif action == PreviewAction.PLACE_BITE.value:
        if message.index >= 0:
            surface.paint_placement(covered(session, message.index, message.mask), HOVER_BITE_REMOTE)
    elif action == PreviewAction.CLEAR.value:
        surface.clear_overlays()
    else:
        logger.info("Unknown action %s for message type %s", action, message.type.value)
        return False

    if message.is_piece and message.mask != session.turn.displayed_piece_mask:
        show_next_piece(session, message.mask)
    logger.debug("Remote preview %s at %s on %sx%s board", action, message.index, board.cols, board.rows)
    return True


__all__ = [
    "LOCAL_CLASSES",
    "PreviewIntent",
    "PreviewKind",
    "apply_remote",
    "clear",
    "covered",
    "current_kind",
    "intent_for",
    "paint_local",
    "place",
    "send_clear",
    "show",
]
