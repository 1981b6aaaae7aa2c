"""Text commands typed into the console client."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, List, Optional

from app.config import SNAPSHOT_PATH
from fungus_board.overlay import fetch_overlay
from fungus_board.parser import ParseError, format_index, parse_index
from fungus_board.piece import to_string_2d
from fungus_board.renderer import BoardCanvas
from fungus_board.state import SessionState
from fungus_board.turn import LARGE_BITE, SMALL_BITE

from . import board_input, commands

logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  hover C4      preview the current piece or bite at C4
  place C4      place the current piece or bite at C4
  leave         clear the preview
  up/down/left/right, enter, space, b, r, s   keyboard shortcuts
  rotate        rotate the piece
  bite [small|large]   toggle a bite (cycles without an argument)
  skip          skip the turn
  reroll        reroll the piece
  reset         start a new game
  forfeit       forfeit the game
  reconnect     re-establish the connection
  show          print the board
  save [PATH]   save the board as PNG
  howto         print the how-to-play page
  help          show this help
  quit          leave the client"""

KEY_ALIASES = {
    "up": "ArrowUp",
    "down": "ArrowDown",
    "left": "ArrowLeft",
    "right": "ArrowRight",
    "enter": "Enter",
    "space": " ",
    "b": "b",
    "r": "r",
    "s": "s",
}

_TAG_RE = re.compile(r"<[^>]+>")


@dataclass
class ConsoleContext:
    session: SessionState
    canvas: BoardCanvas
    out: Callable[[str], Any] = print
    connection: Any = None
    howto_url: Optional[str] = None
    history: List[str] = field(default_factory=list)


def _index(ctx: ConsoleContext, arg: str) -> Optional[int]:
    board = ctx.session.board
    if board.cell_count == 0:
        ctx.out("No board yet")
        return None
    try:
        return parse_index(arg, board.cols, board.rows)
    except ParseError as exc:
        ctx.out(str(exc))
        return None


def render_text(ctx: ConsoleContext) -> str:
    session = ctx.session
    lines = [session.board.to_text()]
    lines.extend(ctx.canvas.status_lines())
    mask = session.current_piece_mask()
    if mask is not None:
        lines.append("Next piece:")
        lines.append(to_string_2d(mask))
    index = session.turn.last_preview_index
    if index >= 0 and session.board.cell_count:
        lines.append(f"Preview at {format_index(index, session.board.cols, session.board.rows)}")
    return "\n".join(lines)


async def run_command(ctx: ConsoleContext, line: str) -> bool:
    """Execute one command line.  Returns ``False`` when the client should quit."""

    text = line.strip()
    if not text:
        return True
    ctx.history.append(text)
    name, _, arg = text.partition(" ")
    name = name.lower()
    arg = arg.strip()
    session = ctx.session

    if name in ("quit", "exit"):
        return False
    if name == "help":
        ctx.out(HELP_TEXT)
    elif name == "hover":
        index = _index(ctx, arg)
        if index is not None:
            await board_input.hover(session, index)
    elif name == "place":
        index = _index(ctx, arg) if arg else session.turn.last_preview_index
        if index is not None and index >= 0:
            await board_input.click(session, index)
        elif index is not None:
            ctx.out(board_input.NO_PIECE_SELECTED)
    elif name == "leave":
        await board_input.leave(session)
    elif name in KEY_ALIASES:
        await board_input.handle_key(session, KEY_ALIASES[name])
    elif name == "rotate":
        await commands.rotate_piece(session)
    elif name == "bite":
        if not arg:
            await board_input.handle_key(session, "b")
        elif arg.lower() in ("small", "large"):
            await commands.select_bite(session, SMALL_BITE if arg.lower() == "small" else LARGE_BITE)
        else:
            ctx.out("Usage: bite [small|large]")
    elif name == "skip":
        await commands.skip_turn(session)
    elif name == "reroll":
        await commands.reroll(session)
    elif name == "reset":
        await commands.restart_game(session)
    elif name == "forfeit":
        await commands.forfeit_game(session)
    elif name == "reconnect":
        if ctx.connection is None:
            ctx.out("No connection configured")
        else:
            await ctx.connection.connect()
    elif name == "show":
        ctx.out(render_text(ctx))
    elif name == "save":
        path = ctx.canvas.save(Path(arg) if arg else SNAPSHOT_PATH)
        ctx.out(f"Saved {path}")
    elif name == "howto":
        if not ctx.howto_url:
            ctx.out("No server configured")
        else:
            markup = await fetch_overlay(ctx.howto_url)
            ctx.out(_TAG_RE.sub("", markup).strip())
    else:
        ctx.out(f"Unknown command {name!r}, type help")
    return True


__all__ = ["ConsoleContext", "HELP_TEXT", "KEY_ALIASES", "render_text", "run_command"]
