"""Button commands of the game panel."""
from __future__ import annotations

import logging

from fungus_board import preview
from fungus_board.piece import BITE_NONE
from fungus_board.protocol import GameAction, button_update, game_update
from fungus_board.state import SessionState
from fungus_board.turn import (
    BITE_BY_NAME,
    REROLL,
    ROTATE_PIECE,
    SKIP_TURN,
    bite_button_states,
    can_reroll,
    next_rotation,
    show_next_piece,
    toggle_bite,
    update_bite_cost,
    update_buttons,
)

logger = logging.getLogger(__name__)


async def notify(session: SessionState, button_id: str) -> None:
    """Pulse ``button_id`` locally and ask the peers to pulse it too."""

    session.surface.notify_button(button_id)
    await session.send(button_update(notify=[button_id]))


async def send_button_state(session: SessionState) -> None:
    active, inactive = bite_button_states(session)
    await session.send(button_update(active=active, inactive=inactive))


async def rotate_piece(session: SessionState) -> bool:
    if not next_rotation(session):
        return False
    mask = session.current_piece_mask()
    show_next_piece(session, mask)
    await preview.show(session)
    await notify(session, ROTATE_PIECE)
    return True


async def select_bite(session: SessionState, button_id: str) -> int:
    """Handle a click on a bite button."""

    bite = BITE_BY_NAME.get(button_id)
    if bite is None or bite == BITE_NONE:
        logger.info("Unknown bite button %s", button_id)
        return session.turn.bite
    before = session.turn.bite
    after = toggle_bite(session, bite)
    if after == before:
        return after
    update_buttons(session)
    await send_button_state(session)
    await preview.show(session)
    return after


async def skip_turn(session: SessionState) -> bool:
    if not session.is_my_turn:
        logger.info("Skipped skip_turn, not player's turn")
        return False
    await notify(session, SKIP_TURN)
    # let the notification go out before the turn ends
    await session.sleep(0)
    await session.send(game_update(GameAction.SKIP_TURN))
    return True


async def reroll(session: SessionState) -> bool:
    if not session.is_my_turn:
        logger.info("Skipped reroll, not player's turn")
        return False
    if not can_reroll(session):
        logger.info("Skipped reroll, %s rerolls available", session.my_rerolls)
        return False
    await notify(session, REROLL)
    await session.send(game_update(GameAction.REROLL))
    return True


async def restart_game(session: SessionState) -> None:
    session.surface.clear_messages()
    session.turn.bite = BITE_NONE
    update_bite_cost(session)
    await session.send(game_update(GameAction.RESET_GAME))


async def forfeit_game(session: SessionState) -> None:
    session.surface.clear_messages()
    await session.send(game_update(GameAction.FORFEIT_GAME))


__all__ = [
    "forfeit_game",
    "notify",
    "reroll",
    "restart_game",
    "rotate_piece",
    "select_bite",
    "send_button_state",
    "skip_turn",
]
