"""
Heuristic AI implementation for Encore

Scores every (colour die, number die, component) combination of the
current roll with a small set of weighted features and plays the best one.
"""

from __future__ import annotations

import logging
import time
from typing import List, Optional

from ..board_manager import Board, BoardManager
from ..metrics import AI_DECISION_LATENCY, AI_DECISIONS
from ..models import (
    AIConfig,
    AIDecision,
    DiceKind,
    Die,
    GameColor,
    GameState,
    Position,
)
from ..rules.validator import is_valid_move
from .base import BaseAI
from .heuristic_weights import DEFAULT_PROFILE_ID, get_weights

logger = logging.getLogger(__name__)

# Order a wild colour die is resolved in; ties keep the earliest colour.
WILD_COLOR_ORDER = (
    GameColor.RED,
    GameColor.YELLOW,
    GameColor.GREEN,
    GameColor.BLUE,
    GameColor.ORANGE,
)


class HeuristicAI(BaseAI):
    """Single-ply heuristic player.

    For each unused colour die and each unused, non-wild number die ``N``
    it takes, for every uncrossed component of the resolved colour that
    holds at least ``N`` squares, the first ``N`` squares of that component
    in flood-fill order. Valid candidates are scored with the ``WEIGHT_*``
    features below; the highest score wins and ties go to the candidate
    found first.
    """

    WEIGHT_CELL = 1.0
    WEIGHT_GROUP_COMPLETE = 50.0
    WEIGHT_COLOR_FINISH = 200.0
    WEIGHT_COLUMN_FINISH = 100.0
    WEIGHT_WILD_COLOR_PENALTY = 5.0
    USE_WILD_COLOR = 1.0

    def __init__(self, player_index: int, config: AIConfig):
        super().__init__(player_index, config)
        self.profile_id = config.profile_id or DEFAULT_PROFILE_ID
        for name, value in get_weights(self.profile_id).items():
            setattr(self, name, value)

    def candidate_colors(self, color_die: Die) -> List[GameColor]:
        if not color_die.is_wild:
            return [color_die.color_value()]
        if self.USE_WILD_COLOR:
            return list(WILD_COLOR_ORDER)
        return []

    def score_candidate(
        self,
        squares: List[Position],
        component_size: int,
        color: GameColor,
        board: Board,
        wild_color: bool,
    ) -> float:
        """Heuristic value of crossing ``squares`` (already validated)."""
        number = len(squares)
        score = self.WEIGHT_CELL * number

        if component_size == number:
            score += self.WEIGHT_GROUP_COMPLETE

        uncrossed_in_color = BoardManager.count_uncrossed_for_color(board, color)
        if 0 < uncrossed_in_color <= number:
            score += self.WEIGHT_COLOR_FINISH

        for col in sorted({p.col for p in squares}):
            uncrossed_in_col = BoardManager.count_uncrossed_in_column(board, col)
            marking = sum(1 for p in squares if p.col == col)
            if 0 < uncrossed_in_col <= marking:
                score += self.WEIGHT_COLUMN_FINISH

        if wild_color:
            score -= self.WEIGHT_WILD_COLOR_PENALTY
        return score

    def select_move(self, game_state: GameState) -> Optional[AIDecision]:
        started = time.perf_counter()
        player = self.get_player(game_state)
        board = player.board

        best: Optional[AIDecision] = None
        for color_die in self.get_available_dice(game_state, DiceKind.COLOR):
            for number_die in self.get_available_dice(game_state, DiceKind.NUMBER):
                if number_die.is_wild:
                    continue
                jokers_needed = 1 if color_die.is_wild else 0
                if jokers_needed > player.jokers_remaining:
                    continue
                number = number_die.number_value()

                for color in self.candidate_colors(color_die):
                    for component in BoardManager.find_connected_components(
                        board, color
                    ):
                        if len(component) < number:
                            continue
                        candidate = component[:number]
                        if not is_valid_move(candidate, color, board):
                            continue
                        score = self.score_candidate(
                            candidate, len(component), color, board,
                            color_die.is_wild,
                        )
                        if best is None or score > best.score:
                            best = AIDecision(
                                colorDie=color_die,
                                numberDie=number_die,
                                color=color,
                                squares=candidate,
                                score=score,
                            )

        AI_DECISION_LATENCY.labels(self.profile_id).observe(
            time.perf_counter() - started
        )
        if best is None:
            AI_DECISIONS.labels(self.profile_id, "none").inc()
            logger.debug(f"{player.name}: no valid crossing for this roll")
            return None

        AI_DECISIONS.labels(self.profile_id, "found").inc()
        self.move_count += 1
        logger.debug(
            f"{player.name}: {best.color.value} x{len(best.squares)} "
            f"scored {best.score}"
        )
        return best
