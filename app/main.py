"""Console client entry point."""
from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from typing import Dict, List, Optional

import storage
from app.config import HOW_TO_PLAY_PATH, SERVER_URL
from app.endpoint_utils import game_ws_url, http_url, normalize_server_base
from fungus_board.connection import GameConnection
from fungus_board.health import HealthMonitor
from fungus_board.renderer import BoardCanvas
from fungus_board.router import MessageDispatcher
from fungus_board.state import SessionState
from handlers.console import ConsoleContext, run_command


logger = logging.getLogger(__name__)

PREF_SERVER = "server_url"
PREF_COOKIE = "cookie"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fungus-client", description="Console client for Fungus Wars")
    parser.add_argument("--server", help="server base URL, remembered between runs")
    parser.add_argument("--cookie", help="session cookie issued by the lobby, remembered between runs")
    parser.add_argument("--log-level", default="INFO", help="logging level (default: INFO)")
    return parser


def resolve_settings(args: argparse.Namespace) -> Dict[str, Optional[str]]:
    """Merge command line options with the stored preferences and save them."""

    prefs = storage.load_preferences()
    server = args.server or prefs.get(PREF_SERVER) or SERVER_URL
    cookie = args.cookie or prefs.get(PREF_COOKIE)
    server = normalize_server_base(server)
    if args.server:
        storage.set(PREF_SERVER, server)
    if args.cookie:
        storage.set(PREF_COOKIE, args.cookie)
    return {"server": server, "cookie": cookie}


def _handle_exit(sig: int, frame: object | None) -> None:
    logger.info("Received shutdown signal %s", sig)
    raise KeyboardInterrupt


async def _read_line() -> str:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, sys.stdin.readline)


async def run(server: str, cookie: Optional[str] = None) -> None:
    canvas = BoardCanvas()
    session = SessionState.create(canvas)
    monitor = HealthMonitor(canvas)
    dispatcher = MessageDispatcher(session, monitor)
    headers = {"Cookie": cookie} if cookie else None
    connection = GameConnection(game_ws_url(server), dispatcher, monitor, headers=headers)
    ctx = ConsoleContext(
        session=session,
        canvas=canvas,
        connection=connection,
        howto_url=http_url(server, HOW_TO_PLAY_PATH),
    )

    logger.info("Connecting to %s", connection.url)
    await connection.connect()
    print("Type help for a list of commands.")
    try:
        while True:
            line = await _read_line()
            if not line:
                break
            try:
                if not await run_command(ctx, line):
                    break
            except Exception:
                logger.exception("Command %r failed", line.strip())
    finally:
        await connection.close()
        logger.info("Client stopped")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.INFO))
    signal.signal(signal.SIGTERM, _handle_exit)

    try:
        settings = resolve_settings(args)
        game_ws_url(settings["server"])
    except ValueError as exc:
        logger.error("Invalid server address: %s", exc)
        return 2

    try:
        asyncio.run(run(settings["server"], settings["cookie"]))
    except KeyboardInterrupt:
        logger.info("Interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
