"""Pointer, touch and keyboard input on the game board."""
from __future__ import annotations

import logging
from typing import Optional

from fungus_board import preview
from fungus_board.piece import BITE_NONE
from fungus_board.state import SessionState
from fungus_board.turn import REROLL, SKIP_TURN, cycle_bite, update_buttons

from . import commands

logger = logging.getLogger(__name__)

ARROW_KEYS = ("ArrowUp", "ArrowDown", "ArrowLeft", "ArrowRight")
NO_PIECE_SELECTED = "Could not place piece. No piece selected."


async def hover(session: SessionState, index: int) -> None:
    if not session.is_my_turn:
        return
    await preview.show(session, index)


async def leave(session: SessionState) -> None:
    """Pointer left the board or the touch gesture was cancelled."""

    await preview.clear(session)


async def touch_move(session: SessionState, index: Optional[int]) -> None:
    """Follow a finger across the board; ``None`` means it moved off the board."""

    if not session.is_my_turn:
        return
    target = -1 if index is None else index
    if target == session.turn.last_preview_index:
        return
    if target < 0:
        await preview.clear(session)
    else:
        await preview.show(session, target)


async def click(session: SessionState, index: int) -> bool:
    if not 0 <= index < session.board.cell_count:
        return False
    session.surface.clear_messages()
    logger.debug("Clicked cell at index %s", index)
    return await preview.place(session, index)


def arrow_index(session: SessionState, key: str) -> int:
    """Return the preview index after pressing an arrow key.

    Starts from the middle of the board and stops at the edges.
    """

    cols = session.board.cols
    rows = session.board.rows
    index = session.turn.last_preview_index
    if index < 0:
        return cols * rows // 2
    if key == "ArrowUp" and index >= cols:
        return index - cols
    if key == "ArrowDown" and index < cols * rows - cols:
        return index + cols
    if key == "ArrowLeft" and index % cols != 0:
        return index - 1
    if key == "ArrowRight" and index % cols != cols - 1:
        return index + 1
    return index


async def handle_key(session: SessionState, key: str) -> bool:
    """Handle one key press; returns ``True`` if the key was used."""

    if not session.is_my_turn:
        return False

    if key in ARROW_KEYS:
        await preview.show(session, arrow_index(session, key))
        return True
    if key == "Enter":
        index = session.turn.last_preview_index
        if index < 0:
            session.surface.display_warning(NO_PIECE_SELECTED)
            return True
        session.surface.clear_messages()
        await preview.place(session, index)
        return True
    if key == " ":
        if session.turn.bite == BITE_NONE:
            await commands.rotate_piece(session)
        return True
    if key == "b":
        cycle_bite(session)
        update_buttons(session)
        session.surface.clear_overlays()
        await preview.show(session)
        await commands.send_button_state(session)
        return True
    if key == "r":
        await commands.reroll(session)
        return True
    if key == "s":
        await commands.skip_turn(session)
        return True
    return False


__all__ = [
    "ARROW_KEYS",
    "NO_PIECE_SELECTED",
    "arrow_index",
    "click",
    "handle_key",
    "hover",
    "leave",
    "touch_move",
]
