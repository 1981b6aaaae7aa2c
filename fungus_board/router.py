"""Dispatch of inbound server frames to session handlers."""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from app.config import DEBUG_PROTOCOL

from . import preview
from .protocol import (
    BoardInfoPreview,
    ButtonInfo,
    ErrorInfo,
    GameInfo,
    InboundMessage,
    MessageType,
    Ping,
    PlayerInfo,
    ProtocolError,
    UnknownMessage,
    parse_frame,
    pong,
)
from .piece import BITE_NONE
from .state import SessionState
from .turn import apply_turn, show_next_piece, update_buttons

logger = logging.getLogger(__name__)

PARSE_FAILURE_TEXT = "Failed to parse message from server"
NO_WINNER = "Nobody"

Handler = Callable[[SessionState, Any], Awaitable[None]]


async def handle_ping(session: SessionState, message: Ping) -> None:
    await session.send(pong())


async def handle_error(session: SessionState, message: ErrorInfo) -> None:
    logger.info("Server reported error: %s", message.message)
    session.surface.display_error(message.message)


async def handle_player_info(session: SessionState, message: PlayerInfo) -> None:
    session.identity = message.identity
    session.players = list(message.players)
    session.records = list(message.records)
    for player, record in zip(session.players, session.records):
        player.record = record
    logger.info("Joined as player %s of %s", session.player_number, len(session.players))
    session.surface.set_players(session.players, session.records)


async def handle_button_info(session: SessionState, message: ButtonInfo) -> None:
    # the local player's own selections are authoritative on their turn
    if session.is_my_turn:
        return
    surface = session.surface
    for button_id in message.inactive:
        session.remote_buttons[button_id] = False
        surface.set_button(button_id, active=False)
    for button_id in message.active:
        session.remote_buttons[button_id] = True
        surface.set_button(button_id, active=True)
    for button_id in message.notify:
        surface.notify_button(button_id)


def winner_name(session: SessionState, scores) -> str:
    for index, score in enumerate(scores):
        if score > 0:
            if index < len(session.players):
                return session.players[index].name
            break
    return NO_WINNER


async def clear_stale_preview(session: SessionState) -> None:
    """Drop the preview left over from the previous turn.

    Runs after the turn has already moved on, so it bypasses the turn gate
    of :func:`preview.clear`.
    """

    session.turn.last_preview_index = -1
    session.surface.clear_overlays()
    await preview.send_clear(session)


async def handle_game_info(session: SessionState, message: GameInfo) -> None:
    surface = session.surface

    session.scores = list(message.scores)
    session.bites = list(message.bites)
    session.rerolls = list(message.rerolls)
    for player in session.players:
        if player.index < len(message.scores):
            player.score = message.scores[player.index]
        if player.index < len(message.bites):
            player.bites = message.bites[player.index]
        if player.index < len(message.rerolls):
            player.rerolls = message.rerolls[player.index]
    surface.set_scores(session.scores)
    surface.set_bites(session.bites)
    surface.set_rerolls(session.rerolls)

    session.game_over = message.game_over
    if message.game_over:
        surface.clear_messages()
        session.turn.bite = BITE_NONE
        surface.set_game_over(f"{winner_name(session, message.scores)} wins!")
    else:
        surface.set_game_over("")

    session.board.apply_snapshot(message.board, message.animate or None)

    session.next_piece = message.next_piece
    if apply_turn(session, message.turn):
        await clear_stale_preview(session)
    update_buttons(session)
    surface.set_turn_indicator(session.turn.current_turn)
    show_next_piece(session, session.next_piece.mask(session.turn.rotation))


async def handle_board_info_preview(session: SessionState, message: BoardInfoPreview) -> None:
    preview.apply_remote(session, message)


HANDLERS: Dict[MessageType, Handler] = {
    MessageType.PING: handle_ping,
    MessageType.ERROR: handle_error,
    MessageType.PLAYER_INFO: handle_player_info,
    MessageType.BUTTON_INFO: handle_button_info,
    MessageType.GAME_INFO: handle_game_info,
    MessageType.BOARD_INFO_PREVIEW: handle_board_info_preview,
}


class MessageDispatcher:
    """Route inbound frames to the handler of their ``type``.

    ``monitor`` is anything with a ``touch()`` method; it is refreshed for
    every frame before parsing so a malformed frame still counts as traffic.
    """

    def __init__(self, session: SessionState, monitor: Optional[Any] = None) -> None:
        self.session = session
        self.monitor = monitor
        self.handlers: Dict[MessageType, Handler] = dict(HANDLERS)

    async def handle(self, raw: Union[str, bytes, Dict[str, Any]]) -> Optional[InboundMessage]:
        """Parse and apply one frame.  Raises :class:`ProtocolError`."""

        if DEBUG_PROTOCOL:
            logger.debug("<- %s", raw)
        message = parse_frame(raw)
        if isinstance(message, UnknownMessage):
            logger.warning("Unknown message type %s: %s", message.type, message.data)
            return None
        handler = self.handlers.get(message.type)
        if handler is None:
            logger.warning("No handler for message type %s", message.type.value)
            return None
        await handler(self.session, message)
        return message

    async def dispatch(self, raw: Union[str, bytes, Dict[str, Any]]) -> Optional[InboundMessage]:
        if self.monitor is not None:
            self.monitor.touch()
        try:
            return await self.handle(raw)
        except ProtocolError as exc:
            logger.warning("Failed to parse message %r: %s", raw, exc)
            self.session.surface.display_error(PARSE_FAILURE_TEXT)
            self.session.surface.offer_reconnect()
            return None
        except Exception:
            logger.exception("Failed to handle message %r", raw)
            self.session.surface.display_error(PARSE_FAILURE_TEXT)
            self.session.surface.offer_reconnect()
            return None


__all__ = [
    "HANDLERS",
    "MessageDispatcher",
    "NO_WINNER",
    "PARSE_FAILURE_TEXT",
    "clear_stale_preview",
    "handle_board_info_preview",
    "handle_button_info",
    "handle_error",
    "handle_game_info",
    "handle_player_info",
    "handle_ping",
    "winner_name",
]
