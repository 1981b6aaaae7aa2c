import asyncio

from fungus_board.models import NextPiece, Player
from fungus_board.piece import mask_at
from fungus_board.renderer import BoardCanvas
from fungus_board.state import SessionState

# 2x1 vertical domino and its horizontal rotation
DOMINO_V = mask_at(0, 0) | mask_at(1, 0)
DOMINO_H = mask_at(0, 0) | mask_at(0, 1)


class FakeOutbox:
    def __init__(self):
        self.frames = []

    async def send(self, frame):
        self.frames.append(frame)

    @property
    def types(self):
        return [frame["type"] for frame in self.frames]

    @property
    def actions(self):
        return [frame.get("payload", {}).get("action") for frame in self.frames]


class FakeSleep:
    """Records requested delays and only yields to the loop."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)
        await asyncio.sleep(0)


def _grid(cols, rows, value=0):
    return [[value] * cols for _ in range(rows)]


def make_session(cols=6, rows=6, identity=0, turn=0, bites=(3, 3), rerolls=(1, 1), masks=(DOMINO_V, DOMINO_H), sleep=None):
    canvas = BoardCanvas()
    outbox = FakeOutbox()
    session = SessionState.create(canvas, outbox=outbox, step_ms=350, sleep=sleep or FakeSleep())
    session.identity = identity
    session.players = [Player(index=i, name=f"P{i + 1}") for i in range(len(bites))]
    session.bites = list(bites)
    session.rerolls = list(rerolls)
    session.next_piece = NextPiece(masks=tuple(masks))
    session.turn.current_turn = turn
    session.board.apply_snapshot(_grid(cols, rows))
    return session, canvas, outbox


def game_info_frame(board, turn=0, masks=(DOMINO_V, DOMINO_H), scores=(0, 0), bites=(3, 3), rerolls=(1, 1), game_over=False, animate=None):
    payload = {
        "board": board,
        "next_piece": {"masks": list(masks)},
        "turn": turn,
        "scores": list(scores),
        "bites": list(bites),
        "rerolls": list(rerolls),
        "game_over": game_over,
    }
    if animate is not None:
        payload["board_updates_to_animate"] = list(animate)
    return {"type": "game_info", "payload": payload}


def player_info_frame(identity=0, names=("Alice", "Bob")):
    return {
        "type": "player_info",
        "payload": {
            "identity": identity,
            "players": [{"name": name, "color": "#ff0000"} for name in names],
            "win_loss_draw_record": [{"W": 1, "L": 0, "D": 2} for _ in names],
        },
    }
