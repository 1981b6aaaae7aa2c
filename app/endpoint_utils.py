"""Utilities for normalising the game server address."""
from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit

from .config import GAME_WS_PATH

_WS_SCHEMES = {"http": "ws", "https": "wss", "ws": "ws", "wss": "wss"}


def normalize_server_base(raw_url: str) -> str:
    """Normalise a server base URL by removing trailing slashes and suffixes.

    Operators may configure the server with or without the WebSocket path,
    potentially including extra trailing slashes.  This helper always returns
    the bare base URL so the final endpoint path is predictable.
    """

    normalized = raw_url.strip().rstrip("/")
    if normalized.endswith(GAME_WS_PATH):
        normalized = normalized[: -len(GAME_WS_PATH)]
        normalized = normalized.rstrip("/")
    return normalized


def game_ws_url(raw_url: str) -> str:
    """Return the ``ws://`` or ``wss://`` URL of the game endpoint.

    ``http`` maps to ``ws`` and ``https`` to ``wss``; a URL without a scheme is
    treated as plain ``ws``.
    """

    base = normalize_server_base(raw_url)
    if "://" not in base:
        base = f"ws://{base}"
    parts = urlsplit(base)
    scheme = _WS_SCHEMES.get(parts.scheme.lower())
    if scheme is None:
        raise ValueError(f"Unsupported server scheme: {parts.scheme!r}")
    path = parts.path.rstrip("/") + GAME_WS_PATH
    return urlunsplit((scheme, parts.netloc, path, parts.query, ""))


def http_url(raw_url: str, path: str) -> str:
    """Return an ``http(s)`` URL for ``path`` on the game server."""

    base = normalize_server_base(raw_url)
    if "://" not in base:
        base = f"http://{base}"
    parts = urlsplit(base)
    scheme = {"ws": "http", "wss": "https"}.get(parts.scheme.lower(), parts.scheme.lower())
    return urlunsplit((scheme, parts.netloc, parts.path.rstrip("/") + path, "", ""))


__all__ = ["game_ws_url", "http_url", "normalize_server_base"]
