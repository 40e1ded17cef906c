"""Rules engine for the Encore dice game."""

from .game_engine import GameEngine
from .models import GameEvent, GamePhase, GameState, Position

__version__ = "1.0.0"

__all__ = ["GameEngine", "GameEvent", "GamePhase", "GameState", "Position"]
