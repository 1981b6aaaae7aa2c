"""Turn ownership, piece rotation and bite selection."""
from __future__ import annotations

import logging
from typing import List, Tuple

from .piece import BITE_LARGE, BITE_NONE, BITE_SMALL, bite_cost
from .state import SessionState

logger = logging.getLogger(__name__)

ROTATE_PIECE = "rotatePiece"
SKIP_TURN = "skipTurn"
SMALL_BITE = "smallBite"
LARGE_BITE = "largeBite"
REROLL = "reroll"
NO_BITE = "noBite"

BITE_BUTTONS = (SMALL_BITE, LARGE_BITE)
BUTTON_IDS = (ROTATE_PIECE, SKIP_TURN, SMALL_BITE, LARGE_BITE, REROLL)

# selection order used when cycling with the keyboard
BITE_ORDER = (BITE_NONE, BITE_SMALL, BITE_LARGE)
BITE_NAMES = {BITE_NONE: NO_BITE, BITE_SMALL: SMALL_BITE, BITE_LARGE: LARGE_BITE}
BITE_BY_NAME = {name: mask for mask, name in BITE_NAMES.items()}


def is_my_turn(session: SessionState) -> bool:
    return session.is_my_turn


def apply_turn(session: SessionState, turn: int) -> bool:
    """Record the authoritative turn.

    Rotation and bite are reset only when the turn actually changes, so a
    rejected move answered with the same turn keeps the player's selection.
    Returns ``True`` when the turn changed.
    """

    state = session.turn
    if state.current_turn == turn:
        return False
    logger.debug("Turn changed from %s to %s", state.current_turn, turn)
    state.current_turn = turn
    state.rotation = 0
    state.bite = BITE_NONE
    return True


def next_rotation(session: SessionState) -> bool:
    if not session.is_my_turn:
        logger.info("Skipped rotation, not player's turn")
        return False
    if session.next_piece is None:
        logger.info("Skipped rotation, no piece to rotate")
        return False
    state = session.turn
    state.rotation = (state.rotation + 1) % len(session.next_piece.masks)
    return True


def can_afford(session: SessionState, bite: int) -> bool:
    if bite == BITE_NONE:
        return True
    return session.my_bites >= bite_cost(bite)


def can_reroll(session: SessionState) -> bool:
    return session.my_rerolls >= 1


def affordable_bites(session: SessionState) -> List[int]:
    return [bite for bite in BITE_ORDER if can_afford(session, bite)]


def cycle_bite(session: SessionState) -> int:
    """Advance to the next affordable bite, wrapping back to no bite."""

    state = session.turn
    if not session.is_my_turn:
        logger.info("Skipped bite selection, not player's turn")
        return state.bite
    choices = affordable_bites(session)
    if state.bite in choices:
        state.bite = choices[(choices.index(state.bite) + 1) % len(choices)]
    else:
        state.bite = BITE_NONE
    return state.bite


def toggle_bite(session: SessionState, bite: int) -> int:
    """Select ``bite``, or go back to no bite if it is already selected."""

    state = session.turn
    if not session.is_my_turn:
        logger.info("Skipped bite selection, not player's turn")
        return state.bite
    if state.bite == bite:
        state.bite = BITE_NONE
    elif can_afford(session, bite):
        state.bite = bite
    else:
        logger.info("Ignoring %s, %s bites available", BITE_NAMES.get(bite, bite), session.my_bites)
    return state.bite


def bite_button_states(session: SessionState) -> Tuple[List[str], List[str]]:
    """Return ``(active, inactive)`` bite button ids for a button update."""

    active_name = BITE_NAMES.get(session.turn.bite, NO_BITE)
    active = [name for name in BITE_BUTTONS if name == active_name]
    inactive = [name for name in BITE_BUTTONS if name != active_name]
    return active, inactive


def update_bite_cost(session: SessionState, bite: int | None = None) -> None:
    if session.identity < 0:
        return
    if bite is None:
        bite = session.turn.bite
    cost = bite_cost(bite) if bite != BITE_NONE else 0
    text = f"(-{cost})" if cost else ""
    session.surface.set_bite_cost(session.player_number, text, session.my_bites >= cost)


def update_buttons(session: SessionState) -> None:
    """Project the turn state onto the button panel."""

    surface = session.surface
    disabled = not session.is_my_turn
    surface.set_button(ROTATE_PIECE, disabled=disabled)
    surface.set_button(SKIP_TURN, disabled=disabled)
    surface.set_button(SMALL_BITE, disabled=disabled or not can_afford(session, BITE_SMALL))
    surface.set_button(LARGE_BITE, disabled=disabled or not can_afford(session, BITE_LARGE))
    surface.set_button(REROLL, disabled=disabled or not can_reroll(session))

    active, inactive = bite_button_states(session)
    for name in active:
        surface.set_button(name, active=True)
    for name in inactive:
        surface.set_button(name, active=False)
    update_bite_cost(session)


def show_next_piece(session: SessionState, mask: int) -> None:
    session.surface.show_next_piece(session.current_player, mask)
    session.turn.displayed_piece_mask = mask


__all__ = [
    "BITE_BUTTONS",
    "BITE_BY_NAME",
    "BITE_NAMES",
    "BITE_ORDER",
    "BUTTON_IDS",
    "LARGE_BITE",
    "NO_BITE",
    "REROLL",
    "ROTATE_PIECE",
    "SKIP_TURN",
    "SMALL_BITE",
    "affordable_bites",
    "apply_turn",
    "bite_button_states",
    "can_afford",
    "can_reroll",
    "cycle_bite",
    "is_my_turn",
    "next_rotation",
    "show_next_piece",
    "toggle_bite",
    "update_bite_cost",
    "update_buttons",
]
