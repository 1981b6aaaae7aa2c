"""Runtime configuration read from environment variables."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Final


def env_flag(name: str, *, default: bool = False) -> bool:
    """Return a boolean flag from environment variables.

    Common truthy values (``1``, ``true``, ``yes``, ``on``) map to ``True`` and
    common falsy ones (``0``, ``false``, ``no``, ``off``) to ``False``.  Unset or
    unrecognised values fall back to ``default``.
    """
    value = os.getenv(name)
    if value is None:
        return default

    normalised = value.strip().lower()
    if normalised in {"1", "true", "yes", "on"}:
        return True
    if normalised in {"0", "false", "no", "off"}:
        return False
    return default


def env_int(name: str, *, default: int) -> int:
    """Return an integer from the environment, ignoring unparsable values."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


SERVER_URL: Final[str] = os.getenv("FUNGUS_SERVER_URL", "http://localhost:8080")
GAME_WS_PATH: Final[str] = "/game/ws"
HOW_TO_PLAY_PATH: Final[str] = "/static/modal/how_to_play.html"

IDLE_TIMEOUT_MS: Final[int] = env_int("FUNGUS_IDLE_TIMEOUT_MS", default=6000)
ANIMATION_STEP_MS: Final[int] = env_int("FUNGUS_ANIMATION_STEP_MS", default=350)
NOTIFY_PULSE_MS: Final[int] = env_int("FUNGUS_NOTIFY_PULSE_MS", default=250)
DEBUG_PROTOCOL: Final[bool] = env_flag("FUNGUS_DEBUG_PROTOCOL", default=False)

PREFS_FILE: Final[Path] = Path(os.getenv("FUNGUS_PREFS_FILE_PATH", "fungus_prefs.json"))
SNAPSHOT_PATH: Final[Path] = Path(os.getenv("FUNGUS_SNAPSHOT_PATH", "artifacts/board.png"))
TILE_PX: Final[int] = env_int("FUNGUS_TILE_PX", default=32)

__all__ = [
    "ANIMATION_STEP_MS",
    "DEBUG_PROTOCOL",
    "GAME_WS_PATH",
    "HOW_TO_PLAY_PATH",
    "IDLE_TIMEOUT_MS",
    "NOTIFY_PULSE_MS",
    "PREFS_FILE",
    "SERVER_URL",
    "SNAPSHOT_PATH",
    "TILE_PX",
    "env_flag",
    "env_int",
]
