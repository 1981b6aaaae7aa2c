"""Interface of the render surface driven by the client core.

The core only ever writes to a surface; it never reads state back from it.
"""
from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .models import CellView, Player, WinLossDraw

# message areas
GAME_ERRORS = "game_errors"
IDLE_WARNING = "idle_warning"

# overlay classes
HOVER_PIECE_LOCAL = "hover-piece-local"
HOVER_BITE_LOCAL = "hover-bite-local"
HOVER_PIECE_REMOTE = "hover-piece-remote"
HOVER_BITE_REMOTE = "hover-bite-remote"
HOVER_CLASSES = (HOVER_PIECE_LOCAL, HOVER_BITE_LOCAL, HOVER_PIECE_REMOTE, HOVER_BITE_REMOTE)


class RenderSurface(Protocol):
    def initialize_board(self, cols: int, rows: int) -> None:
        """Rebuild the board structure with ``cols * rows`` empty cells."""

    def paint_cell(self, index: int, view: CellView) -> None:
        """Replace the owner class and glyph of one cell."""

    def set_overlay(self, css_class: str, indices: Iterable[int]) -> None:
        """Mark exactly ``indices`` with ``css_class``, unmarking every other cell."""

    def add_overlay(self, css_class: str, indices: Iterable[int]) -> None:
        ...

    def clear_overlays(self) -> None:
        ...

    def paint_placement(self, indices: Iterable[int], css_class: str) -> None:
        """Reset each cell to a bare cell carrying only ``css_class``."""

    def strip_owner(self, indices: Iterable[int]) -> None:
        ...

    def show_next_piece(self, player: Optional[Player], mask: int) -> None:
        ...

    def set_players(self, players: Sequence[Player], records: Sequence[WinLossDraw]) -> None:
        ...

    def set_scores(self, scores: Sequence[int]) -> None:
        ...

    def set_bites(self, bites: Sequence[int]) -> None:
        ...

    def set_rerolls(self, rerolls: Sequence[int]) -> None:
        ...

    def set_turn_indicator(self, turn: int) -> None:
        ...

    def set_button(self, button_id: str, *, disabled: Optional[bool] = None, active: Optional[bool] = None) -> None:
        ...

    def notify_button(self, button_id: str) -> None:
        """Play the short notification pulse on a button."""

    def set_bite_cost(self, player_number: int, text: str, affordable: bool) -> None:
        ...

    def set_game_over(self, text: str) -> None:
        ...

    def display_error(self, text: str, area: str = GAME_ERRORS) -> None:
        ...

    def display_warning(self, text: str, area: str = GAME_ERRORS) -> None:
        ...

    def clear_area(self, area: str) -> None:
        ...

    def clear_messages(self) -> None:
        ...

    def offer_reconnect(self) -> None:
        ...


__all__ = [
    "GAME_ERRORS",
    "HOVER_BITE_LOCAL",
    "HOVER_BITE_REMOTE",
    "HOVER_CLASSES",
    "HOVER_PIECE_LOCAL",
    "HOVER_PIECE_REMOTE",
    "IDLE_WARNING",
    "RenderSurface",
]
