"""Round state, streaks and the session facade."""

from .session import DIFFICULTY_KEY, GameSession
from .state import GamePhase, GameState, GameStateMachine
from .streak import StreakTracker

__all__ = [
    "DIFFICULTY_KEY",
    "GamePhase",
    "GameSession",
    "GameState",
    "GameStateMachine",
    "StreakTracker",
]
