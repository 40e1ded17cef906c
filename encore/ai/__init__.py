"""AI players for Encore."""

from .base import BaseAI
from .factory import AIFactory
from .heuristic_ai import HeuristicAI
from .heuristic_weights import HEURISTIC_WEIGHT_PROFILES, get_weights

__all__ = [
    "AIFactory",
    "BaseAI",
    "HEURISTIC_WEIGHT_PROFILES",
    "HeuristicAI",
    "get_weights",
]
