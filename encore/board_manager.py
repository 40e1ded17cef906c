"""Board-level helpers for the Encore rules engine.

Player boards are ``Square[row][col]`` grids of fixed size 7x15. Everything
here is side-effect-free except :meth:`BoardManager.cross_squares`, which
mutates the board it is given; the engine only calls it on its own copy.
"""
from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from .models import (
    COLUMN_LABELS,
    BoardConfiguration,
    GameColor,
    Position,
    Square,
)

__all__ = ["Board", "BoardManager"]

Board = list[list[Square]]

# Von Neumann neighbourhood
_DIRECTIONS = ((-1, 0), (1, 0), (0, -1), (0, 1))


class BoardManager:
    """Helper for board-level operations.

    Provides board construction from a :class:`BoardConfiguration`,
    neighbour enumeration, connected-group discovery over uncrossed
    squares of one colour, and the per-colour / per-column counts used by
    completion scoring and the AI heuristic.
    """

    @staticmethod
    def create_board(config: BoardConfiguration) -> Board:
        """Build a fresh, uncrossed player board from ``config``."""
        stars = {(p.row, p.col) for p in config.star_positions}
        board: Board = []
        for row, colors in enumerate(config.color_layout):
            board.append([
                Square(
                    color=color,
                    hasStar=(row, col) in stars,
                    crossed=False,
                    column=COLUMN_LABELS[col],
                    row=row,
                )
                for col, color in enumerate(colors)
            ])
        return board

    @staticmethod
    def in_bounds(row: int, col: int, board: Board) -> bool:
        return 0 <= row < len(board) and 0 <= col < len(board[0])

    @staticmethod
    def neighbors(row: int, col: int, board: Board) -> list[Position]:
        """Orthogonal neighbours of ``(row, col)`` that lie on the board."""
        return [
            Position(row=row + dr, col=col + dc)
            for dr, dc in _DIRECTIONS
            if BoardManager.in_bounds(row + dr, col + dc, board)
        ]

    @staticmethod
    def find_connected_group(
        row: int, col: int, color: GameColor, board: Board
    ) -> list[Position]:
        """
        Breadth-first flood fill from ``(row, col)`` over uncrossed squares
        of ``color``.

        Returns the maximal connected component containing the start
        square, in discovery order, or an empty list when the start is off
        the board, of another colour, or already crossed.
        """
        if not BoardManager.in_bounds(row, col, board):
            return []
        start = board[row][col]
        if start.color != color or start.crossed:
            return []

        group: list[Position] = []
        visited = {(row, col)}
        queue = deque([(row, col)])
        while queue:
            r, c = queue.popleft()
            group.append(Position(row=r, col=c))
            for dr, dc in _DIRECTIONS:
                nr, nc = r + dr, c + dc
                if (nr, nc) in visited:
                    continue
                if not BoardManager.in_bounds(nr, nc, board):
                    continue
                square = board[nr][nc]
                if square.color == color and not square.crossed:
                    visited.add((nr, nc))
                    queue.append((nr, nc))
        return group

    @staticmethod
    def find_connected_components(
        board: Board, color: GameColor
    ) -> list[list[Position]]:
        """All uncrossed components of ``color``, scanned in row-major order."""
        components: list[list[Position]] = []
        seen: set[tuple[int, int]] = set()
        for r, row in enumerate(board):
            for c, square in enumerate(row):
                if (r, c) in seen or square.crossed or square.color != color:
                    continue
                component = BoardManager.find_connected_group(r, c, color, board)
                seen.update((p.row, p.col) for p in component)
                components.append(component)
        return components

    @staticmethod
    def is_connected(squares: Iterable[Position]) -> bool:
        """True if ``squares`` form one 4-connected group on their own.

        Only adjacency inside the set counts: two squares that are joined
        through cells outside the set are *not* connected here.
        """
        cells = {(p.row, p.col) for p in squares}
        if not cells:
            return False
        first = next(iter(cells))
        visited = {first}
        stack = [first]
        while stack:
            r, c = stack.pop()
            for dr, dc in _DIRECTIONS:
                nxt = (r + dr, c + dc)
                if nxt in cells and nxt not in visited:
                    visited.add(nxt)
                    stack.append(nxt)
        return len(visited) == len(cells)

    @staticmethod
    def has_crossed_color(board: Board, color: GameColor) -> bool:
        return any(sq.crossed and sq.color == color for row in board for sq in row)

    @staticmethod
    def touches_crossed(position: Position, board: Board) -> bool:
        """True if any orthogonal neighbour of ``position`` is crossed."""
        return any(
            board[n.row][n.col].crossed
            for n in BoardManager.neighbors(position.row, position.col, board)
        )

    @staticmethod
    def count_uncrossed_for_color(board: Board, color: GameColor) -> int:
        return sum(
            1 for row in board for sq in row
            if sq.color == color and not sq.crossed
        )

    @staticmethod
    def count_uncrossed_in_column(board: Board, col: int) -> int:
        return sum(1 for row in board if not row[col].crossed)

    @staticmethod
    def is_color_complete(board: Board, color: GameColor) -> bool:
        """A colour is complete once every square of it is crossed.

        Colours absent from the board (purple on the official layouts) are
        never complete.
        """
        present = False
        for row in board:
            for sq in row:
                if sq.color == color:
                    present = True
                    if not sq.crossed:
                        return False
        return present

    @staticmethod
    def is_column_complete(board: Board, col: int) -> bool:
        return BoardManager.count_uncrossed_in_column(board, col) == 0

    @staticmethod
    def cross_squares(squares: Iterable[Position], board: Board) -> int:
        """Cross ``squares`` in place and return the number of stars collected."""
        stars = 0
        for p in squares:
            square = board[p.row][p.col]
            square.crossed = True
            if square.has_star:
                stars += 1
        return stars

    @staticmethod
    def board_colors(board: Board) -> list[GameColor]:
        """Colours present on ``board``, in enum order."""
        present = {sq.color for row in board for sq in row}
        return [c for c in GameColor if c in present]
