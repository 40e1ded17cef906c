"""Rules layer: move validation, scoring and turn transitions."""

from .scoring import (
    COLUMN_FIRST_PLAYER_POINTS,
    COLUMN_SECOND_PLAYER_POINTS,
    TOTAL_STARS,
    calculate_column_score,
    calculate_final_score,
    standings,
)
from .validator import is_valid_move, validate_move

__all__ = [
    "COLUMN_FIRST_PLAYER_POINTS",
    "COLUMN_SECOND_PLAYER_POINTS",
    "TOTAL_STARS",
    "calculate_column_score",
    "calculate_final_score",
    "is_valid_move",
    "standings",
    "validate_move",
]
