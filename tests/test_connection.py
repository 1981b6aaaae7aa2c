import asyncio
import json

from websockets.exceptions import ConnectionClosedError

from fungus_board.connection import CLOSED_TEXT, UNEXPECTED_ERROR_TEXT, GameConnection
from fungus_board.health import HealthMonitor
from fungus_board.renderer import RECONNECT
from fungus_board.router import MessageDispatcher
from fungus_board.surface import GAME_ERRORS
from tests.utils import make_session


class FakeSocket:
    def __init__(self, frames=(), block=False, fail=None, close_error=None):
        self.frames = list(frames)
        self.block = block
        self.fail = fail
        self.close_error = close_error
        self.sent = []
        self.closed = asyncio.Event()

    def __aiter__(self):
        return self._iter()

    async def _iter(self):
        for frame in self.frames:
            yield frame
        if self.fail is not None:
            raise self.fail
        if self.block:
            await self.closed.wait()

    async def send(self, data):
        self.sent.append(data)

    async def close(self):
        self.closed.set()
        if self.close_error is not None:
            raise self.close_error


def _connection(sockets, calls=None, headers=None):
    session, canvas, _ = make_session()
    monitor = HealthMonitor(canvas, timeout_ms=6000)
    dispatcher = MessageDispatcher(session)

    async def fake_connect(url, **kwargs):
        if calls is not None:
            calls.append((url, kwargs))
        result = sockets.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    connection = GameConnection("ws://host/game/ws", dispatcher, monitor, connect=fake_connect, headers=headers)
    return connection, session, canvas, monitor


def test_connect_reads_frames_and_answers_ping():
    async def run_test():
        ws = FakeSocket(frames=['{"type": "ping"}'])
        calls = []
        connection, session, canvas, monitor = _connection([ws], calls, headers={"Cookie": "id=1"})

        assert await connection.connect()
        assert session.outbox is connection
        await connection._reader

        assert calls == [("ws://host/game/ws", {"additional_headers": {"Cookie": "id=1"}})]
        assert [json.loads(data) for data in ws.sent] == [{"type": "pong"}]
        # the socket ran out of frames, which is a close
        assert canvas.messages[GAME_ERRORS] == ("error", CLOSED_TEXT)
        assert RECONNECT in canvas.messages
        assert not monitor.running
        assert not connection.connected

    asyncio.run(run_test())


def test_socket_error_offers_reconnect():
    async def run_test():
        ws = FakeSocket(fail=ConnectionClosedError(None, None))
        connection, _, canvas, _ = _connection([ws])

        await connection.connect()
        await connection._reader

        assert canvas.messages[GAME_ERRORS] == ("error", UNEXPECTED_ERROR_TEXT)
        assert RECONNECT in canvas.messages

    asyncio.run(run_test())


def test_close_of_replaced_socket_is_ignored():
    async def run_test():
        old = FakeSocket(block=True)
        new = FakeSocket(block=True)
        connection, _, canvas, monitor = _connection([old, new])

        await connection.connect()
        old_reader = connection._reader
        await asyncio.sleep(0)
        await connection.connect()
        await old_reader

        assert old.closed.is_set()
        assert connection.ws is new
        assert GAME_ERRORS not in canvas.messages
        assert monitor.running

        await connection.close()
        assert not monitor.running

    asyncio.run(run_test())


def test_close_errors_are_swallowed_on_reconnect():
    async def run_test():
        old = FakeSocket(block=True, close_error=RuntimeError("boom"))
        new = FakeSocket(block=True)
        connection, _, _, _ = _connection([old, new])

        await connection.connect()
        assert await connection.connect()
        assert connection.ws is new

        await connection.close()

    asyncio.run(run_test())


def test_failed_connect_offers_reconnect():
    async def run_test():
        connection, _, canvas, monitor = _connection([OSError("refused")])

        assert await connection.connect() is False
        assert canvas.messages[GAME_ERRORS] == ("error", UNEXPECTED_ERROR_TEXT)
        assert RECONNECT in canvas.messages
        assert not monitor.running

    asyncio.run(run_test())


def test_send_while_disconnected_is_dropped():
    async def run_test():
        connection, session, _, _ = _connection([])

        await session.send({"type": "pong"})

        assert not connection.connected

    asyncio.run(run_test())


def test_failed_reconnect_stops_old_watchdog():
    async def run_test():
        old = FakeSocket(block=True)
        connection, _, canvas, monitor = _connection([old, OSError("refused")])

        assert await connection.connect()
        assert monitor.running

        assert await connection.connect() is False

        assert not monitor.running
        assert not connection.connected
        assert old.closed.is_set()
        assert RECONNECT in canvas.messages

    asyncio.run(run_test())
