"""Move validation for square crossings.

A proposal is a list of squares plus the colour they are claimed for. The
rules are checked in a fixed order and the first failure wins:

1. ``non-empty``: at least one square.
2. ``on-board`` / ``distinct``: squares are on the board and not repeated.
3. ``color-match``: every square is uncrossed and of the claimed colour.
4. ``connected``: the squares form one orthogonally connected group *by
   themselves* (cells outside the proposal do not bridge gaps).
5. ``anchor-column`` / ``adjacency``: the first crossing of a colour must
   include column H; later crossings must touch an already crossed square
   of any colour.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..board_manager import Board, BoardManager
from ..errors import RulesViolationError
from ..models import ANCHOR_COLUMN, GameColor, Position

logger = logging.getLogger(__name__)


def validate_move(
    squares: Sequence[Position], color: GameColor, board: Board
) -> None:
    """Raise :class:`RulesViolationError` on the first rule ``squares`` break."""
    if not squares:
        raise RulesViolationError("No squares proposed", rule_ref="non-empty")

    keys = set()
    for p in squares:
        if not BoardManager.in_bounds(p.row, p.col, board):
            raise RulesViolationError(
                "Square is off the board",
                rule_ref="on-board",
                context={"square": p.to_key()},
            )
        keys.add((p.row, p.col))
    if len(keys) != len(squares):
        raise RulesViolationError("Square proposed twice", rule_ref="distinct")

    for p in squares:
        square = board[p.row][p.col]
        if square.crossed or square.color != color:
            raise RulesViolationError(
                f"Square is not an uncrossed {color.value} square",
                rule_ref="color-match",
                context={"square": p.to_key()},
            )

    if len(squares) > 1 and not BoardManager.is_connected(squares):
        raise RulesViolationError(
            "Squares do not form a connected group", rule_ref="connected"
        )

    if not BoardManager.has_crossed_color(board, color):
        if not any(p.col == ANCHOR_COLUMN for p in squares):
            raise RulesViolationError(
                f"First {color.value} crossing must include column H",
                rule_ref="anchor-column",
            )
    elif not any(BoardManager.touches_crossed(p, board) for p in squares):
        raise RulesViolationError(
            "Squares must touch an already crossed square",
            rule_ref="adjacency",
        )


def is_valid_move(
    squares: Sequence[Position], color: GameColor, board: Board
) -> bool:
    """Return True if ``squares`` may be crossed for ``color`` on ``board``.

    Never mutates ``board``; failures are logged at DEBUG only.
    """
    try:
        validate_move(squares, color, board)
    except RulesViolationError as e:
        logger.debug(f"Rejected {color.value} move: {e}")
        return False
    return True
