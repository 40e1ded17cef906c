"""AI factory for Encore.

Maps :class:`AIType` values to implementations and builds the AI for the
seat that has to act. ``simple_heuristic`` is the heuristic player pinned
to the ``heuristic_v1_simple`` profile.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from ..errors import AIError
from ..models import AIConfig, AIType, GameState
from .base import BaseAI
from .heuristic_ai import HeuristicAI
from .heuristic_weights import DEFAULT_PROFILE_ID, HEURISTIC_WEIGHT_PROFILES

logger = logging.getLogger(__name__)

SIMPLE_PROFILE_ID = "heuristic_v1_simple"


def _create_simple(player_index: int, config: AIConfig) -> BaseAI:
    return HeuristicAI(
        player_index, config.model_copy(update={"profile_id": SIMPLE_PROFILE_ID})
    )


class AIFactory:
    """Centralized factory for creating AI instances."""

    _registry: dict[AIType, Callable[[int, AIConfig], BaseAI]] = {
        AIType.HEURISTIC: HeuristicAI,
        AIType.SIMPLE_HEURISTIC: _create_simple,
    }

    @classmethod
    def create(
        cls, ai_type: AIType, player_index: int, config: Optional[AIConfig] = None
    ) -> BaseAI:
        """Create an AI instance with explicit type and configuration.

        Raises:
            AIError: the type has no implementation or the profile is unknown
        """
        config = config or AIConfig(aiType=ai_type)
        if config.profile_id and config.profile_id not in HEURISTIC_WEIGHT_PROFILES:
            raise AIError(
                f"Unknown heuristic profile: {config.profile_id}",
                context={"profile_id": config.profile_id},
            )
        constructor = cls._registry.get(ai_type)
        if constructor is None:
            raise AIError(f"Unsupported AI type: {ai_type}")
        return constructor(player_index, config)

    @classmethod
    def create_for_player(
        cls, game_state: GameState, profile_id: Optional[str] = None
    ) -> BaseAI:
        """Build the AI for the seat whose selection is being processed."""
        profile_id = profile_id or DEFAULT_PROFILE_ID
        ai_type = (
            AIType.SIMPLE_HEURISTIC
            if profile_id == SIMPLE_PROFILE_ID
            else AIType.HEURISTIC
        )
        config = AIConfig(aiType=ai_type, profileId=profile_id)
        logger.debug(
            f"Creating {ai_type.value} AI for seat {game_state.current_player}"
        )
        return cls.create(ai_type, game_state.current_player, config)
