"""In-memory render surface that can draw the board to a PNG."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from PIL import Image, ImageDraw, ImageFont

from app.config import NOTIFY_PULSE_MS, TILE_PX

from .models import CellView, Player, WinLossDraw, player_class
from .piece import PIECE_MASK_SIZE, has
from .surface import GAME_ERRORS, HOVER_CLASSES, IDLE_WARNING

logger = logging.getLogger(__name__)

RECONNECT = "reconnect"
RECONNECT_TEXT = "Re-establish connection?"
OWNER_CLASSES = tuple(player_class(n) for n in range(1, 5))
NEXT_PIECE_MIN_GRID = 4

COLORS = {
    "bg": (255, 255, 255, 255),
    "grid": (200, 200, 200, 255),
    "cell": (240, 240, 240, 255),
    "text": (0, 0, 0, 255),
    HOVER_CLASSES[0]: (120, 120, 120, 160),
    HOVER_CLASSES[1]: (220, 0, 0, 160),
    HOVER_CLASSES[2]: (120, 120, 120, 90),
    HOVER_CLASSES[3]: (220, 0, 0, 90),
}

DEFAULT_PLAYER_COLORS = {
    1: (173, 216, 230, 255),  # light blue
    2: (144, 238, 144, 255),  # light green
    3: (255, 200, 140, 255),  # light orange
    4: (221, 160, 221, 255),  # plum
}

# glyphs drawn as plain shapes, emoji fonts are rarely available
GLYPH_MARKS = {"🏠": "H", "▴": "B", "🎲": "R"}


@dataclass
class CanvasCell:
    classes: Set[str] = field(default_factory=lambda: {"cell"})
    glyph: str = ""

    @property
    def owner(self) -> int:
        for number, name in enumerate(OWNER_CLASSES, start=1):
            if name in self.classes:
                return number
        return 0


def parse_color(value: str) -> Tuple[int, int, int, int]:
    text = value.strip().lstrip("#")
    if len(text) == 3:
        text = "".join(ch * 2 for ch in text)
    if len(text) != 6:
        raise ValueError(f"Unsupported color {value!r}")
    return int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16), 255


class BoardCanvas:
    """In-memory render surface that can be drawn to a PNG.

    Keeps the projected state (cell classes, buttons, messages) so the console
    client can print it and tests can inspect it.
    """

    def __init__(self, *, tile_px: int = TILE_PX, pulse_ms: int = NOTIFY_PULSE_MS) -> None:
        self.tile_px = tile_px
        self.pulse_ms = pulse_ms
        self.cols = 0
        self.rows = 0
        self.cells: List[CanvasCell] = []
        self.players: List[Player] = []
        self.records: List[WinLossDraw] = []
        self.scores: List[int] = []
        self.bites: List[int] = []
        self.rerolls: List[int] = []
        self.turn = -1
        self.next_piece: Tuple[Optional[Player], int] = (None, 0)
        self.buttons: Dict[str, Dict[str, bool]] = {}
        self.bite_cost: Tuple[int, str, bool] = (0, "", True)
        self.game_over = ""
        self.messages: Dict[str, Tuple[str, str]] = {}

    # -- board -------------------------------------------------------------

    def initialize_board(self, cols: int, rows: int) -> None:
        self.cols = cols
        self.rows = rows
        self.cells = [CanvasCell() for _ in range(cols * rows)]

    def _cells(self, indices: Iterable[int]) -> List[CanvasCell]:
        result = []
        for index in indices:
            if 0 <= index < len(self.cells):
                result.append(self.cells[index])
            else:
                logger.debug("Ignoring cell %s outside the canvas", index)
        return result

    def paint_cell(self, index: int, view: CellView) -> None:
        for cell in self._cells([index]):
            cell.classes = set(view.css_class.split())
            cell.glyph = view.glyph

    def set_overlay(self, css_class: str, indices: Iterable[int]) -> None:
        wanted = set(indices)
        for index, cell in enumerate(self.cells):
            if index in wanted:
                cell.classes.add(css_class)
            else:
                cell.classes.discard(css_class)

    def add_overlay(self, css_class: str, indices: Iterable[int]) -> None:
        for cell in self._cells(indices):
            cell.classes.add(css_class)

    def clear_overlays(self) -> None:
        for cell in self.cells:
            cell.classes.difference_update(HOVER_CLASSES)

    def paint_placement(self, indices: Iterable[int], css_class: str) -> None:
        for cell in self._cells(indices):
            cell.classes = {"cell", css_class}

    def strip_owner(self, indices: Iterable[int]) -> None:
        for cell in self._cells(indices):
            cell.classes.difference_update(OWNER_CLASSES)

    def cells_with(self, css_class: str) -> List[int]:
        return [index for index, cell in enumerate(self.cells) if css_class in cell.classes]

    # -- side panels -------------------------------------------------------

    def show_next_piece(self, player: Optional[Player], mask: int) -> None:
        self.next_piece = (player, mask)

    def set_players(self, players: Sequence[Player], records: Sequence[WinLossDraw]) -> None:
        self.players = list(players)
        self.records = list(records)

    def set_scores(self, scores: Sequence[int]) -> None:
        self.scores = list(scores)

    def set_bites(self, bites: Sequence[int]) -> None:
        self.bites = list(bites)

    def set_rerolls(self, rerolls: Sequence[int]) -> None:
        self.rerolls = list(rerolls)

    def set_turn_indicator(self, turn: int) -> None:
        self.turn = turn

    def set_button(self, button_id: str, *, disabled: Optional[bool] = None, active: Optional[bool] = None) -> None:
        state = self.buttons.setdefault(button_id, {"disabled": False, "active": False, "notify": False})
        if disabled is not None:
            state["disabled"] = disabled
        if active is not None:
            state["active"] = active

    def notify_button(self, button_id: str) -> None:
        self.set_button(button_id)
        self.buttons[button_id]["notify"] = True
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        loop.call_later(self.pulse_ms / 1000, self._end_notify, button_id)

    def _end_notify(self, button_id: str) -> None:
        self.buttons[button_id]["notify"] = False

    def set_bite_cost(self, player_number: int, text: str, affordable: bool) -> None:
        self.bite_cost = (player_number, text, affordable)

    def set_game_over(self, text: str) -> None:
        self.game_over = text

    # -- messages ----------------------------------------------------------

    def display_error(self, text: str, area: str = GAME_ERRORS) -> None:
        self.messages[area] = ("error", text)

    def display_warning(self, text: str, area: str = GAME_ERRORS) -> None:
        self.messages[area] = ("warning", text)

    def clear_area(self, area: str) -> None:
        self.messages.pop(area, None)

    def clear_messages(self) -> None:
        for area in (GAME_ERRORS, IDLE_WARNING, RECONNECT):
            self.clear_area(area)

    def offer_reconnect(self) -> None:
        self.messages[RECONNECT] = ("button", RECONNECT_TEXT)

    # -- output ------------------------------------------------------------

    def player_color(self, number: int) -> Tuple[int, int, int, int]:
        index = number - 1
        if 0 <= index < len(self.players):
            try:
                return parse_color(self.players[index].color)
            except ValueError:
                logger.debug("Falling back to default color for player %s", number)
        return DEFAULT_PLAYER_COLORS.get(number, COLORS["cell"])

    def status_lines(self) -> List[str]:
        lines = []
        for player in self.players:
            marker = "*" if player.index == self.turn else " "
            score = self.scores[player.index] if player.index < len(self.scores) else 0
            bites = self.bites[player.index] if player.index < len(self.bites) else 0
            rerolls = self.rerolls[player.index] if player.index < len(self.rerolls) else 0
            line = f"{marker} {player.number}. {player.name}: score {score}, bites {bites}, rerolls {rerolls}"
            if self.bite_cost[0] == player.number and self.bite_cost[1]:
                line += f" {self.bite_cost[1]}"
            lines.append(line)
        if self.game_over:
            lines.append(self.game_over)
        for area in (GAME_ERRORS, IDLE_WARNING, RECONNECT):
            if area in self.messages:
                level, text = self.messages[area]
                lines.append(f"[{level}] {text}")
        return lines

    def render_png(self) -> BytesIO:
        """Render the board and the next piece into a PNG image."""

        tile = self.tile_px
        margin = tile
        board_w = self.cols * tile
        board_h = self.rows * tile
        preview_size = max(PIECE_MASK_SIZE, NEXT_PIECE_MIN_GRID)
        width = margin * 3 + board_w + preview_size * tile
        height = margin * 2 + max(board_h, preview_size * tile)
        img = Image.new("RGBA", (width, height), COLORS["bg"])
        draw = ImageDraw.Draw(img, "RGBA")
        font = ImageFont.load_default()

        for index, cell in enumerate(self.cells):
            r, c = divmod(index, self.cols)
            x0 = margin + c * tile
            y0 = margin + r * tile
            owner = cell.owner
            fill = self.player_color(owner) if owner else COLORS["cell"]
            draw.rectangle((x0, y0, x0 + tile, y0 + tile), fill=fill, outline=COLORS["grid"])
            for css_class in HOVER_CLASSES:
                if css_class in cell.classes:
                    draw.rectangle((x0 + 2, y0 + 2, x0 + tile - 2, y0 + tile - 2), fill=COLORS[css_class])
            if cell.glyph:
                mark = GLYPH_MARKS.get(cell.glyph, cell.glyph)
                draw.text((x0 + tile // 3, y0 + tile // 4), mark, fill=COLORS["text"], font=font)

        player, mask = self.next_piece
        color = self.player_color(player.number) if player is not None else COLORS["text"]
        px0 = margin * 2 + board_w
        for r in range(preview_size):
            for c in range(preview_size):
                x0 = px0 + c * tile
                y0 = margin + r * tile
                fill = color if has(mask, r, c) else COLORS["bg"]
                draw.rectangle((x0, y0, x0 + tile, y0 + tile), fill=fill, outline=COLORS["grid"])

        buf = BytesIO()
        img.save(buf, format="PNG")
        buf.seek(0)
        return buf

    def save(self, path: Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.render_png().getvalue())
        return path


__all__ = ["BoardCanvas", "CanvasCell", "RECONNECT", "RECONNECT_TEXT", "parse_color"]
