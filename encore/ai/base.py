"""
Base AI Player class for Encore
Abstract base class that all AI implementations inherit from
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import AIConfig, AIDecision, DiceKind, Die, GameState, Player
from ..rules.scoring import calculate_final_score


class BaseAI(ABC):
    """Abstract base class for all AI implementations"""

    def __init__(self, player_index: int, config: AIConfig):
        """
        Initialize AI player

        Args:
            player_index: Seat of the player this AI controls (0-based)
            config: AI configuration settings
        """
        self.player_index = player_index
        self.config = config
        self.move_count = 0

    @abstractmethod
    def select_move(self, game_state: GameState) -> Optional[AIDecision]:
        """
        Select the best dice pair and squares for the current roll

        Args:
            game_state: Current game state

        Returns:
            Selected decision, or None when no legal crossing exists
        """
        pass

    def evaluate_position(self, game_state: GameState) -> float:
        """
        Evaluate the current position from this AI's perspective

        Uses the running final score of the controlled player.
        """
        return float(calculate_final_score(self.get_player(game_state)).total_score)

    def get_player(self, game_state: GameState) -> Player:
        return game_state.players[self.player_index]

    def get_available_dice(
        self, game_state: GameState, kind: DiceKind
    ) -> List[Die]:
        """Unused dice of ``kind`` in roll order"""
        return [d for d in game_state.dice if d.kind == kind and not d.used]

    def __repr__(self) -> str:
        """String representation of AI"""
        return (
            f"{self.__class__.__name__}"
            f"(player={self.player_index}, "
            f"profile={self.config.profile_id})"
        )
