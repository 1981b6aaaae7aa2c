"""Data models shared by the board client core."""
from __future__ import annotations

from dataclasses import dataclass, field as dc_field
from typing import Any, Dict, List, Optional, Tuple

MAX_PLAYERS = 4

# Lower byte of a cell is the owner (0 = unowned, 1 = player 1, ...), the
# upper byte holds flags.
CELL_MASK_PLAYER = 0x00FF
CELL_MASK_FLAGS = 0xFF00
CELL_FLAG_HOME = 0x0100
CELL_FLAG_BONUS_BITE = 0x0200
CELL_FLAG_BONUS_REROLL = 0x0400

CELL_GLYPHS = {
    CELL_FLAG_HOME: "🏠",
    CELL_FLAG_BONUS_BITE: "▴",
    CELL_FLAG_BONUS_REROLL: "🎲",
}


def cell_owner(cell: int) -> int:
    return cell & CELL_MASK_PLAYER


def cell_flags(cell: int) -> int:
    return cell & CELL_MASK_FLAGS


def player_class(owner: int) -> str:
    """CSS-like class used for cells owned by player number ``owner``."""

    return f"player{owner}"


@dataclass(frozen=True)
class CellView:
    """Render state derived from a single board cell value."""

    owner: int = 0
    home: bool = False
    bonus_bite: bool = False
    bonus_reroll: bool = False

    @classmethod
    def from_value(cls, cell: int) -> "CellView":
        owner = cell_owner(cell)
        return cls(
            owner=owner if 1 <= owner <= MAX_PLAYERS else 0,
            home=bool(cell & CELL_FLAG_HOME),
            bonus_bite=bool(cell & CELL_FLAG_BONUS_BITE),
            bonus_reroll=bool(cell & CELL_FLAG_BONUS_REROLL),
        )

    @property
    def css_class(self) -> str:
        if self.owner:
            return f"cell {player_class(self.owner)}"
        return "cell"

    @property
    def glyph(self) -> str:
        # only one marker fits in a cell; home wins over bonuses
        if self.home:
            return CELL_GLYPHS[CELL_FLAG_HOME]
        if self.bonus_bite:
            return CELL_GLYPHS[CELL_FLAG_BONUS_BITE]
        if self.bonus_reroll:
            return CELL_GLYPHS[CELL_FLAG_BONUS_REROLL]
        return ""


@dataclass
class WinLossDraw:
    wins: int = 0
    losses: int = 0
    draws: int = 0

    def to_payload(self) -> Dict[str, int]:
        return {"W": self.wins, "L": self.losses, "D": self.draws}

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "WinLossDraw":
        return cls(
            wins=int(data.get("W", 0)),
            losses=int(data.get("L", 0)),
            draws=int(data.get("D", 0)),
        )


@dataclass
class Player:
    """Participant of the game as announced by the server."""

    index: int
    name: str
    color: str = "#000000"
    score: int = 0
    bites: int = 0
    rerolls: int = 0
    record: WinLossDraw = dc_field(default_factory=WinLossDraw)

    @property
    def number(self) -> int:
        return self.index + 1

    @property
    def css_class(self) -> str:
        return player_class(self.number)


@dataclass(frozen=True)
class NextPiece:
    """The piece to be placed next, one mask per rotation."""

    masks: Tuple[int, ...]

    def mask(self, rotation: int) -> int:
        return self.masks[rotation % len(self.masks)]

    def to_payload(self) -> Dict[str, List[int]]:
        return {"masks": list(self.masks)}


def placeholder_player(index: int = -1) -> Player:
    return Player(index=index, name="", color="#000")


def find_player(players: List[Player], index: int) -> Optional[Player]:
    if 0 <= index < len(players):
        return players[index]
    return None


__all__ = [
    "CELL_FLAG_BONUS_BITE",
    "CELL_FLAG_BONUS_REROLL",
    "CELL_FLAG_HOME",
    "CELL_GLYPHS",
    "CELL_MASK_FLAGS",
    "CELL_MASK_PLAYER",
    "CellView",
    "MAX_PLAYERS",
    "NextPiece",
    "Player",
    "WinLossDraw",
    "cell_flags",
    "cell_owner",
    "find_player",
    "placeholder_player",
    "player_class",
]
