"""WebSocket transport for one game session."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, Optional

from websockets.asyncio.client import connect as ws_connect
from websockets.exceptions import ConnectionClosed, WebSocketException

from app.config import DEBUG_PROTOCOL

from .health import HealthMonitor
from .protocol import encode_frame
from .router import MessageDispatcher
from .scheduler import schedule

logger = logging.getLogger(__name__)

CLOSED_TEXT = "Game connection closed."
UNEXPECTED_ERROR_TEXT = "Game connection had unexpected error."


class GameConnection:
    """Own the active socket, its reader task and the idle watchdog.

    Reconnecting replaces the socket; events from a replaced socket are
    ignored so they can never tear down the new connection.
    """

    def __init__(
        self,
        url: str,
        dispatcher: MessageDispatcher,
        monitor: HealthMonitor,
        *,
        connect: Callable[..., Any] = ws_connect,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.url = url
        self.dispatcher = dispatcher
        self.monitor = monitor
        self._connect = connect
        self.headers = headers or {}
        self.ws: Any = None
        self._reader: Optional["asyncio.Task[None]"] = None
        dispatcher.monitor = monitor
        dispatcher.session.outbox = self

    @property
    def surface(self):
        return self.dispatcher.session.surface

    @property
    def connected(self) -> bool:
        return self.ws is not None

    async def connect(self) -> bool:
        if self.ws is not None:
            self.surface.clear_messages()
            self.monitor.stop()
            old, self.ws = self.ws, None
            try:
                await old.close()
            except Exception:
                logger.exception("Closing previous game socket failed")

        try:
            ws = await self._connect(self.url, additional_headers=self.headers or None)
        except (OSError, asyncio.TimeoutError, WebSocketException) as exc:
            logger.warning("Could not connect to %s: %s", self.url, exc)
            self.surface.display_error(UNEXPECTED_ERROR_TEXT)
            self.surface.offer_reconnect()
            return False

        logger.info("WebSocket connection established with %s", self.url)
        self.ws = ws
        self.monitor.start()
        self._reader = schedule(self._read(ws), name="game-socket-reader")
        return True

    async def _read(self, ws: Any) -> None:
        error = False
        try:
            async for raw in ws:
                await self.dispatcher.dispatch(raw)
        except ConnectionClosed as exc:
            logger.warning("Game socket closed with error: %s", exc)
            error = True
        except OSError:
            logger.exception("Game socket failed")
            error = True
        self._on_closed(ws, error=error)

    def _on_closed(self, ws: Any, *, error: bool = False) -> None:
        if ws is not self.ws:
            logger.info("Ignoring close of a replaced game socket")
            return
        logger.info("WebSocket connection closed.")
        self.ws = None
        self.monitor.stop()
        self.surface.display_error(UNEXPECTED_ERROR_TEXT if error else CLOSED_TEXT)
        self.surface.offer_reconnect()

    async def send(self, frame: Dict[str, Any]) -> None:
        ws = self.ws
        if ws is None:
            logger.warning("Dropping %s frame, not connected", frame.get("type"))
            return
        if DEBUG_PROTOCOL:
            logger.debug("-> %s", frame)
        try:
            await ws.send(encode_frame(frame))
        except ConnectionClosed as exc:
            logger.warning("Dropping %s frame, socket closed: %s", frame.get("type"), exc)

    async def close(self) -> None:
        ws, self.ws = self.ws, None
        self.monitor.stop()
        if ws is not None:
            try:
                await ws.close()
            except Exception:
                logger.exception("Closing game socket failed")
        if self._reader is not None and not self._reader.done():
            self._reader.cancel()
        self._reader = None


__all__ = ["CLOSED_TEXT", "GameConnection", "UNEXPECTED_ERROR_TEXT"]
