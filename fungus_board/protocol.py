"""Typed messages exchanged with the game server over the WebSocket.

Every frame is a JSON object ``{"type": ..., "payload": ...}``.  Inbound
frames are parsed into one of the message classes below; a frame is validated
completely before any of it is applied, so a bad frame never leaves the
session half updated.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from .models import NextPiece, Player, WinLossDraw


class ProtocolError(ValueError):
    """Raised when an inbound frame is malformed or incomplete."""


class MessageType(str, Enum):
    PING = "ping"
    PONG = "pong"
    BOARD_INFO_PREVIEW = "board_info_preview"
    BUTTON_INFO = "button_info"
    GAME_INFO = "game_info"
    PLAYER_INFO = "player_info"
    ERROR = "error"
    GAME_UPDATE = "game_update"
    BOARD_UPDATE = "board_update"
    BOARD_UPDATE_PREVIEW = "board_update_preview"
    BUTTON_UPDATE = "button_update"


INBOUND_TYPES = frozenset(
    {
        MessageType.PING,
        MessageType.BOARD_INFO_PREVIEW,
        MessageType.BUTTON_INFO,
        MessageType.GAME_INFO,
        MessageType.PLAYER_INFO,
        MessageType.ERROR,
    }
)


class GameAction(str, Enum):
    SKIP_TURN = "skip_turn"
    REROLL = "reroll"
    RESET_GAME = "reset_game"
    FORFEIT_GAME = "forfeit_game"


class BoardAction(str, Enum):
    PLACE_PIECE = "place_piece"
    PLACE_BITE = "place_bite"


class PreviewAction(str, Enum):
    PREVIEW_PIECE = "preview_piece"
    PREVIEW_BITE = "preview_bite"
    PLACE_PIECE = "place_piece"
    PLACE_BITE = "place_bite"
    CLEAR = "clear"


# ---------------------------------------------------------------------------
# Inbound messages
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Ping:
    type = MessageType.PING


@dataclass(frozen=True)
class ErrorInfo:
    message: str

    type = MessageType.ERROR


@dataclass(frozen=True)
class PlayerInfo:
    identity: int
    players: Tuple[Player, ...]
    records: Tuple[WinLossDraw, ...]

    type = MessageType.PLAYER_INFO


@dataclass(frozen=True)
class ButtonInfo:
    active: Tuple[str, ...] = ()
    inactive: Tuple[str, ...] = ()
    notify: Tuple[str, ...] = ()

    type = MessageType.BUTTON_INFO


@dataclass(frozen=True)
class GameInfo:
    board: Tuple[Tuple[int, ...], ...]
    next_piece: NextPiece
    turn: int
    scores: Tuple[int, ...]
    bites: Tuple[int, ...]
    rerolls: Tuple[int, ...]
    game_over: bool
    animate: Tuple[int, ...] = ()

    type = MessageType.GAME_INFO

    @property
    def rows(self) -> int:
        return len(self.board)

    @property
    def cols(self) -> int:
        return len(self.board[0])


@dataclass(frozen=True)
class BoardInfoPreview:
    action: str
    index: int = -1
    mask: int = 0
    owner: int = 0

    type = MessageType.BOARD_INFO_PREVIEW

    @property
    def is_piece(self) -> bool:
        return self.action.endswith("_piece")


@dataclass(frozen=True)
class UnknownMessage:
    type: str
    data: Dict[str, Any]


InboundMessage = Union[Ping, ErrorInfo, PlayerInfo, ButtonInfo, GameInfo, BoardInfoPreview]


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _missing(message_type: str, detail: str) -> ProtocolError:
    return ProtocolError(f"Missing expected payload for message type {message_type}: {detail}")


def _require_payload(message_type: str, payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise _missing(message_type, "payload")
    return payload


def _int_list(message_type: str, payload: Dict[str, Any], key: str) -> Tuple[int, ...]:
    value = payload.get(key)
    if not isinstance(value, list) or not value:
        raise _missing(message_type, key)
    if not all(_is_int(item) for item in value):
        raise ProtocolError(f"Field {key} of {message_type} must contain integers")
    return tuple(value)


def _str_list(message_type: str, payload: Dict[str, Any], key: str) -> Tuple[str, ...]:
    value = payload.get(key)
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ProtocolError(f"Field {key} of {message_type} must be a list of strings")
    return tuple(value)


def _parse_error(payload: Any) -> ErrorInfo:
    data = _require_payload(MessageType.ERROR.value, payload)
    message = data.get("message")
    if message is None:
        raise _missing(MessageType.ERROR.value, "message")
    return ErrorInfo(message=str(message))


def _parse_player_info(payload: Any) -> PlayerInfo:
    name = MessageType.PLAYER_INFO.value
    data = _require_payload(name, payload)

    raw_players = data.get("players")
    if not isinstance(raw_players, list) or not raw_players:
        raise _missing(name, "players")
    identity = data.get("identity")
    if not _is_int(identity) or identity < 0:
        raise _missing(name, "identity")
    raw_records = data.get("win_loss_draw_record")
    if not isinstance(raw_records, list) or not raw_records:
        raise _missing(name, "win_loss_draw_record")
    if identity >= len(raw_players):
        raise ProtocolError(f"identity {identity} is not one of {len(raw_players)} players")

    players: List[Player] = []
    for index, item in enumerate(raw_players):
        if not isinstance(item, dict) or item.get("name") is None:
            raise _missing(name, f"players[{index}]")
        players.append(
            Player(
                index=index,
                name=str(item["name"]),
                color=str(item.get("color") or "#000000"),
            )
        )

    records: List[WinLossDraw] = []
    for index, item in enumerate(raw_records):
        if not isinstance(item, dict):
            raise _missing(name, f"win_loss_draw_record[{index}]")
        try:
            records.append(WinLossDraw.from_payload(item))
        except (TypeError, ValueError) as exc:
            raise ProtocolError(f"Invalid win/loss/draw record at {index}: {item!r}") from exc

    return PlayerInfo(identity=identity, players=tuple(players), records=tuple(records))


def _parse_button_info(payload: Any) -> ButtonInfo:
    name = MessageType.BUTTON_INFO.value
    data = _require_payload(name, payload)
    return ButtonInfo(
        active=_str_list(name, data, "active"),
        inactive=_str_list(name, data, "inactive"),
        notify=_str_list(name, data, "notify"),
    )


def _parse_board(name: str, value: Any) -> Tuple[Tuple[int, ...], ...]:
    if not isinstance(value, list) or not value:
        raise _missing(name, "board")
    width: Optional[int] = None
    rows: List[Tuple[int, ...]] = []
    for r, row in enumerate(value):
        if not isinstance(row, list) or not row:
            raise _missing(name, f"board[{r}]")
        if width is None:
            width = len(row)
        elif len(row) != width:
            raise ProtocolError(f"Board row {r} has {len(row)} cells, expected {width}")
        if not all(_is_int(cell) for cell in row):
            raise ProtocolError(f"Board row {r} contains non-integer cells")
        rows.append(tuple(row))
    return tuple(rows)


def _parse_game_info(payload: Any) -> GameInfo:
    name = MessageType.GAME_INFO.value
    data = _require_payload(name, payload)

    board = _parse_board(name, data.get("board"))

    next_piece = data.get("next_piece")
    if not isinstance(next_piece, dict):
        raise _missing(name, "next_piece")
    masks = _int_list(name, next_piece, "masks")

    turn = data.get("turn")
    if not _is_int(turn):
        raise _missing(name, "turn")

    scores = _int_list(name, data, "scores")
    bites = _int_list(name, data, "bites")
    rerolls = _int_list(name, data, "rerolls")

    game_over = data.get("game_over")
    if not isinstance(game_over, bool):
        raise _missing(name, "game_over")

    raw_animate = data.get("board_updates_to_animate")
    animate: Tuple[int, ...] = ()
    if raw_animate is not None:
        if not isinstance(raw_animate, list) or not all(_is_int(i) for i in raw_animate):
            raise ProtocolError("board_updates_to_animate must be a list of integers")
        cell_count = len(board) * len(board[0])
        for index in raw_animate:
            if not 0 <= index < cell_count:
                raise ProtocolError(f"Animated index {index} is outside the board")
        animate = tuple(raw_animate)

    return GameInfo(
        board=board,
        next_piece=NextPiece(masks=masks),
        turn=turn,
        scores=scores,
        bites=bites,
        rerolls=rerolls,
        game_over=game_over,
        animate=animate,
    )


def _parse_board_info_preview(payload: Any) -> BoardInfoPreview:
    name = MessageType.BOARD_INFO_PREVIEW.value
    data = _require_payload(name, payload)

    action = data.get("action")
    if not isinstance(action, str) or not action:
        raise _missing(name, "action")

    index = data.get("index")
    mask = data.get("mask")
    if action == PreviewAction.CLEAR.value:
        return BoardInfoPreview(action=action)
    if not _is_int(index):
        raise _missing(name, "index")
    if not _is_int(mask):
        raise _missing(name, "mask")
    owner = data.get("owner")
    if owner is not None and not _is_int(owner):
        raise ProtocolError("owner must be an integer")
    return BoardInfoPreview(action=action, index=index, mask=mask, owner=owner or 0)


_PARSERS = {
    MessageType.PING: lambda payload: Ping(),
    MessageType.ERROR: _parse_error,
    MessageType.PLAYER_INFO: _parse_player_info,
    MessageType.BUTTON_INFO: _parse_button_info,
    MessageType.GAME_INFO: _parse_game_info,
    MessageType.BOARD_INFO_PREVIEW: _parse_board_info_preview,
}


def parse_frame(raw: Union[str, bytes, Dict[str, Any]]) -> Union[InboundMessage, UnknownMessage]:
    """Decode one inbound frame into a typed message.

    Unknown ``type`` values yield :class:`UnknownMessage`; anything malformed
    raises :class:`ProtocolError`.
    """

    if isinstance(raw, dict):
        data = raw
    else:
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as exc:
            raise ProtocolError(f"Frame is not valid JSON: {raw!r}") from exc
    if not isinstance(data, dict):
        raise ProtocolError(f"Frame must be a JSON object, got {type(data).__name__}")

    message_type = data.get("type")
    if not isinstance(message_type, str) or not message_type:
        raise ProtocolError("Frame has no type")

    try:
        known = MessageType(message_type)
    except ValueError:
        return UnknownMessage(type=message_type, data=data)
    if known not in INBOUND_TYPES:
        return UnknownMessage(type=message_type, data=data)
    return _PARSERS[known](data.get("payload"))


# ---------------------------------------------------------------------------
# Outbound frames
# ---------------------------------------------------------------------------


def _frame(message_type: MessageType, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    frame: Dict[str, Any] = {"type": message_type.value}
    if payload is not None:
        frame["payload"] = payload
    return frame


def pong() -> Dict[str, Any]:
    return _frame(MessageType.PONG)


def game_update(action: GameAction) -> Dict[str, Any]:
    return _frame(MessageType.GAME_UPDATE, {"action": GameAction(action).value})


def board_update(action: BoardAction, index: int, mask: int) -> Dict[str, Any]:
    return _frame(
        MessageType.BOARD_UPDATE,
        {"action": BoardAction(action).value, "index": index, "mask": mask},
    )


def board_update_preview(
    action: PreviewAction,
    index: Optional[int] = None,
    mask: Optional[int] = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"action": PreviewAction(action).value}
    if index is not None:
        payload["index"] = index
    if mask is not None:
        payload["mask"] = mask
    return _frame(MessageType.BOARD_UPDATE_PREVIEW, payload)


def button_update(
    *,
    active: Optional[List[str]] = None,
    inactive: Optional[List[str]] = None,
    notify: Optional[List[str]] = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    if active is not None:
        payload["active"] = list(active)
    if inactive is not None:
        payload["inactive"] = list(inactive)
    if notify is not None:
        payload["notify"] = list(notify)
    return _frame(MessageType.BUTTON_UPDATE, payload)


def encode_frame(frame: Dict[str, Any]) -> str:
    return json.dumps(frame, ensure_ascii=False)


__all__ = [
    "BoardAction",
    "BoardInfoPreview",
    "ButtonInfo",
    "ErrorInfo",
    "GameAction",
    "GameInfo",
    "InboundMessage",
    "MessageType",
    "Ping",
    "PlayerInfo",
    "PreviewAction",
    "ProtocolError",
    "UnknownMessage",
    "board_update",
    "board_update_preview",
    "button_update",
    "encode_frame",
    "game_update",
    "parse_frame",
    "pong",
]
