import asyncio
from unittest.mock import AsyncMock

from handlers.console import HELP_TEXT, ConsoleContext, run_command
from tests.utils import make_session


def _context(**kwargs):
    session, canvas, outbox = make_session()
    lines = []
    ctx = ConsoleContext(session=session, canvas=canvas, out=lines.append, **kwargs)
    return ctx, lines, outbox


def test_hover_by_coordinate():
    async def run_test():
        ctx, lines, outbox = _context()

        assert await run_command(ctx, "hover C4")

        assert outbox.frames[0]["payload"]["index"] == 20
        assert ctx.session.turn.last_preview_index == 20
        assert lines == []

    asyncio.run(run_test())


def test_bad_coordinate_is_reported():
    async def run_test():
        ctx, lines, outbox = _context()

        await run_command(ctx, "hover Z99")

        assert outbox.frames == []
        assert len(lines) == 1

    asyncio.run(run_test())


def test_place_without_preview_warns():
    async def run_test():
        ctx, lines, outbox = _context()

        await run_command(ctx, "place")

        assert outbox.frames == []
        assert lines == ["Could not place piece. No piece selected."]

    asyncio.run(run_test())


def test_show_prints_board_and_preview():
    async def run_test():
        ctx, lines, _ = _context()
        await run_command(ctx, "hover C4")

        await run_command(ctx, "show")

        assert "Preview at C4" in lines[-1]
        assert "Next piece:" in lines[-1]

    asyncio.run(run_test())


def test_reconnect_uses_connection():
    async def run_test():
        connection = AsyncMock()
        ctx, _, _ = _context(connection=connection)

        await run_command(ctx, "reconnect")

        connection.connect.assert_awaited_once_with()

    asyncio.run(run_test())


def test_help_unknown_and_quit():
    async def run_test():
        ctx, lines, _ = _context()

        assert await run_command(ctx, "help")
        assert await run_command(ctx, "dance")
        assert await run_command(ctx, "   ")
        assert await run_command(ctx, "quit") is False

        assert lines[0] == HELP_TEXT
        assert lines[1].startswith("Unknown command 'dance'")
        assert ctx.history == ["help", "dance", "quit"]

    asyncio.run(run_test())
