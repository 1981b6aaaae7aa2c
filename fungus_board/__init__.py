"""Synchronisation core of the Fungus Wars board client."""

from . import preview, protocol, router, turn
from .board import BoardModel
from .connection import GameConnection
from .health import HealthMonitor
from .renderer import BoardCanvas
from .router import MessageDispatcher
from .state import SessionState, TurnState

__all__ = [
    "preview",
    "protocol",
    "router",
    "turn",
    "BoardCanvas",
    "BoardModel",
    "GameConnection",
    "HealthMonitor",
    "MessageDispatcher",
    "SessionState",
    "TurnState",
]
