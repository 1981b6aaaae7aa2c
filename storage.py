from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional

from app.config import PREFS_FILE


logger = logging.getLogger(__name__)


DATA_FILE = Path(PREFS_FILE)

_lock = Lock()


def _file_load_all() -> Dict[str, Any]:
    if DATA_FILE.exists():
        try:
            data = json.loads(DATA_FILE.read_text(encoding="utf-8")) or {}
        except json.JSONDecodeError:
            logger.warning("Preferences file is corrupted or empty, returning {}")
            return {}
        if not isinstance(data, dict):
            logger.warning("Preferences file does not hold an object, returning {}")
            return {}
        return data
    return {}


def _file_save_all(data: Dict[str, Any]) -> None:
    DATA_FILE.parent.mkdir(parents=True, exist_ok=True)
    tmp = DATA_FILE.with_suffix(".tmp")
    tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    tmp.replace(DATA_FILE)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def load_preferences() -> Dict[str, Any]:
    with _lock:
        return _file_load_all()


def save_preferences(prefs: Dict[str, Any]) -> Optional[str]:
    payload = dict(prefs)
    payload["updated_at"] = datetime.utcnow().isoformat()
    try:
        with _lock:
            _file_save_all(payload)
    except OSError as exc:
        logger.exception("Failed to persist preferences to %s", DATA_FILE)
        return str(exc)
    return None


def get(key: str, default: Any = None) -> Any:
    return load_preferences().get(key, default)


def set(key: str, value: Any) -> Optional[str]:
    """Store one preference, keeping the others."""

    try:
        with _lock:
            data = _file_load_all()
            data[key] = value
            data["updated_at"] = datetime.utcnow().isoformat()
            _file_save_all(data)
    except OSError as exc:
        logger.exception("Failed to persist preference %s", key)
        return str(exc)
    return None


def forget(key: str) -> None:
    with _lock:
        data = _file_load_all()
        if key in data:
            del data[key]
            _file_save_all(data)


__all__ = ["DATA_FILE", "forget", "get", "load_preferences", "save_preferences", "set"]
