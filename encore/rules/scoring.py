"""Scoring and completion bookkeeping.

Column and colour bonuses come in two sizes: the first player ever to
complete a column (or colour) claims the higher award in the game-wide
registry, everybody after that gets the lower one. The registry is part of
:class:`GameState` and is only written by :func:`record_completions`.
"""

from __future__ import annotations

import logging

from ..board_manager import BoardManager
from ..models import (
    BOARD_COLUMNS,
    COLUMN_LABELS,
    FinalScore,
    GameState,
    Player,
    Standing,
)

logger = logging.getLogger(__name__)

# Symmetric, peaked at the edges; column H scores least.
COLUMN_FIRST_PLAYER_POINTS = (5, 3, 3, 3, 2, 2, 2, 1, 2, 2, 2, 3, 3, 3, 5)
COLUMN_SECOND_PLAYER_POINTS = (3, 2, 2, 2, 1, 1, 1, 0, 1, 1, 1, 2, 2, 2, 3)

COLOR_FIRST_PLAYER_POINTS = 5
COLOR_SECOND_PLAYER_POINTS = 3

TOTAL_STARS = 15


def calculate_column_score(player: Player) -> int:
    """Sum the column awards recorded for ``player``.

    A column listed as both first and not-first scores the first-player
    points only.
    """
    total = 0
    for index, label in enumerate(COLUMN_LABELS):
        if label in player.completed_columns_first:
            total += COLUMN_FIRST_PLAYER_POINTS[index]
        elif label in player.completed_columns_not_first:
            total += COLUMN_SECOND_PLAYER_POINTS[index]
    return total


def calculate_color_score(player: Player) -> int:
    return (
        COLOR_FIRST_PLAYER_POINTS * len(player.completed_colors_first)
        + COLOR_SECOND_PLAYER_POINTS * len(player.completed_colors_not_first)
    )


def calculate_final_score(player: Player) -> FinalScore:
    """Score breakdown derived purely from the player's recorded lists."""
    columns_score = calculate_column_score(player)
    jokers_score = player.jokers_remaining
    colors_score = calculate_color_score(player)
    star_penalty = TOTAL_STARS - player.stars_collected
    return FinalScore(
        columnsScore=columns_score,
        jokersScore=jokers_score,
        colorsScore=colors_score,
        starPenalty=star_penalty,
        totalScore=columns_score + jokers_score + colors_score - star_penalty,
    )


def standings(game_state: GameState) -> list[Standing]:
    """Players ordered by total score (stable on seat order for ties)."""
    rows = [
        Standing(
            playerIndex=index,
            playerId=player.id,
            name=player.name,
            score=calculate_final_score(player),
        )
        for index, player in enumerate(game_state.players)
    ]
    if not rows:
        return rows
    best = max(row.score.total_score for row in rows)
    for row in rows:
        row.is_leader = row.score.total_score == best
    return sorted(rows, key=lambda row: -row.score.total_score)


def record_completions(game_state: GameState, player_index: int) -> None:
    """
    Scan the player's board for newly completed columns and colours and
    append them to the first / not-first lists, claiming first bonuses in
    the game-wide registries when still free.

    Mutates ``game_state`` in place; callers pass their own copy.
    """
    player = game_state.players[player_index]
    board = player.board

    for col in range(BOARD_COLUMNS):
        label = COLUMN_LABELS[col]
        if label in player.completed_columns:
            continue
        if not BoardManager.is_column_complete(board, col):
            continue
        if label not in game_state.claimed_first_column_bonus:
            game_state.claimed_first_column_bonus[label] = player.id
            player.completed_columns_first.append(label)
            logger.info(f"{player.name} completed column {label} first")
        else:
            player.completed_columns_not_first.append(label)
            logger.info(f"{player.name} completed column {label}")

    for color in BoardManager.board_colors(board):
        if color in player.completed_colors:
            continue
        if not BoardManager.is_color_complete(board, color):
            continue
        player.completed_colors.append(color)
        if color.value not in game_state.claimed_first_color_bonus:
            game_state.claimed_first_color_bonus[color.value] = player.id
            player.completed_colors_first.append(color)
            logger.info(f"{player.name} completed {color.value} first")
        else:
            player.completed_colors_not_first.append(color)
            logger.info(f"{player.name} completed {color.value}")
