import json

import pytest

from fungus_board.protocol import (
    BoardAction,
    BoardInfoPreview,
    ButtonInfo,
    ErrorInfo,
    GameAction,
    GameInfo,
    Ping,
    PlayerInfo,
    PreviewAction,
    ProtocolError,
    UnknownMessage,
    board_update,
    board_update_preview,
    button_update,
    encode_frame,
    game_update,
    parse_frame,
    pong,
)
from tests.utils import DOMINO_H, DOMINO_V, game_info_frame, player_info_frame


def _board(cols=6, rows=4):
    return [[0] * cols for _ in range(rows)]


def test_parse_ping_from_text():
    assert isinstance(parse_frame('{"type": "ping"}'), Ping)
    assert isinstance(parse_frame(b'{"type": "ping"}'), Ping)


@pytest.mark.parametrize("raw", ["not json", "[1, 2]", '{"payload": {}}', '{"type": ""}'])
def test_malformed_frames_raise(raw):
    with pytest.raises(ProtocolError):
        parse_frame(raw)


def test_unknown_and_outbound_types_are_not_dispatched():
    message = parse_frame({"type": "lobby_info", "payload": {}})
    assert isinstance(message, UnknownMessage)
    assert message.type == "lobby_info"
    assert isinstance(parse_frame({"type": "pong"}), UnknownMessage)


def test_parse_error_message():
    message = parse_frame({"type": "error", "payload": {"message": "Not your turn"}})
    assert message == ErrorInfo(message="Not your turn")
    with pytest.raises(ProtocolError):
        parse_frame({"type": "error"})


def test_parse_game_info():
    frame = game_info_frame(_board(), turn=1, animate=[3, 3])
    message = parse_frame(json.dumps(frame))

    assert isinstance(message, GameInfo)
    assert message.cols == 6
    assert message.rows == 4
    assert message.turn == 1
    assert message.next_piece.masks == (DOMINO_V, DOMINO_H)
    assert message.animate == (3, 3)
    assert message.game_over is False


@pytest.mark.parametrize(
    "change",
    [
        lambda p: p.pop("board"),
        lambda p: p.update(board=[[0, 0], [0]]),
        lambda p: p.update(board=[[0, "x"]]),
        lambda p: p.update(next_piece={"masks": []}),
        lambda p: p.pop("turn"),
        lambda p: p.update(turn=True),
        lambda p: p.update(scores=[]),
        lambda p: p.pop("bites"),
        lambda p: p.update(rerolls=None),
        lambda p: p.update(game_over=None),
        lambda p: p.update(board_updates_to_animate=[99]),
        lambda p: p.update(board_updates_to_animate="3"),
    ],
)
def test_invalid_game_info_raises(change):
    frame = game_info_frame(_board())
    change(frame["payload"])
    with pytest.raises(ProtocolError):
        parse_frame(frame)


def test_parse_player_info():
    message = parse_frame(player_info_frame(identity=1))

    assert isinstance(message, PlayerInfo)
    assert message.identity == 1
    assert [p.name for p in message.players] == ["Alice", "Bob"]
    assert message.players[1].number == 2
    assert message.records[0].wins == 1
    assert message.records[0].draws == 2


@pytest.mark.parametrize("identity", [-1, 2, None])
def test_player_info_requires_valid_identity(identity):
    frame = player_info_frame()
    frame["payload"]["identity"] = identity
    with pytest.raises(ProtocolError):
        parse_frame(frame)


def test_parse_button_info_defaults_to_empty():
    message = parse_frame({"type": "button_info", "payload": {"notify": ["reroll"]}})
    assert message == ButtonInfo(active=(), inactive=(), notify=("reroll",))
    with pytest.raises(ProtocolError):
        parse_frame({"type": "button_info"})


def test_parse_board_info_preview():
    message = parse_frame(
        {"type": "board_info_preview", "payload": {"action": "place_piece", "index": 4, "mask": DOMINO_H, "owner": 2}}
    )
    assert message == BoardInfoPreview(action="place_piece", index=4, mask=DOMINO_H, owner=2)
    assert message.is_piece

    clear = parse_frame({"type": "board_info_preview", "payload": {"action": "clear"}})
    assert clear.action == "clear"
    assert not clear.is_piece

    with pytest.raises(ProtocolError):
        parse_frame({"type": "board_info_preview", "payload": {"action": "preview_bite", "index": 3}})


def test_outbound_frames():
    assert pong() == {"type": "pong"}
    assert game_update(GameAction.SKIP_TURN) == {"type": "game_update", "payload": {"action": "skip_turn"}}
    assert game_update("reroll")["payload"]["action"] == "reroll"
    assert board_update(BoardAction.PLACE_BITE, 7, 1) == {
        "type": "board_update",
        "payload": {"action": "place_bite", "index": 7, "mask": 1},
    }
    assert board_update_preview(PreviewAction.CLEAR) == {
        "type": "board_update_preview",
        "payload": {"action": "clear"},
    }
    assert button_update(notify=["reroll"]) == {"type": "button_update", "payload": {"notify": ["reroll"]}}
    assert json.loads(encode_frame(pong())) == {"type": "pong"}
