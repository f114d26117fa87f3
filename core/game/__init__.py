"""Game engine, session and state management."""

from core.game.events import CommandResult, CommandType, EventEmitter, EventType, GameEvent
from core.game.state import GameState
from core.game.engine import BlackjackGame, Round
from core.game.session import GameSession

__all__ = [
    "CommandResult",
    "CommandType",
    "EventEmitter",
    "EventType",
    "GameEvent",
    "GameState",
    "BlackjackGame",
    "Round",
    "GameSession",
]
