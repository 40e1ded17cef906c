"""
Board layouts for Encore.

Five official boards plus a ``random`` option that derives a new layout
from an official one by mirroring, 180 degree rotation and a colour
permutation. Those transforms preserve every structural constraint, so a
random board never needs repairing.

Structural constraints on a board (checked by :func:`validate_board`):

- 7 rows by 15 columns;
- 21 squares of each of the five board colours;
- the components of each colour have sizes exactly 1, 2, 3, 4, 5 and 6;
- 15 stars, one per column, three per colour.
"""

from __future__ import annotations

import logging
import random
from collections import Counter
from typing import Optional

from .errors import InvalidBoardError
from .models import (
    BOARD_COLUMNS,
    BOARD_ROWS,
    DICE_COLORS,
    BoardConfiguration,
    BoardValidationResult,
    GameColor,
    Position,
)

logger = logging.getLogger(__name__)

RANDOM_BOARD_ID = "random"
DEFAULT_BOARD_ID = "classic"

BOARD_COLORS = DICE_COLORS
EXPECTED_CELLS_PER_COLOR = 21
EXPECTED_GROUP_SIZES = [1, 2, 3, 4, 5, 6]
EXPECTED_STARS = 15
EXPECTED_STARS_PER_COLOR = 3

_COLOR_CODES = {
    "Y": GameColor.YELLOW,
    "G": GameColor.GREEN,
    "B": GameColor.BLUE,
    "R": GameColor.RED,
    "O": GameColor.ORANGE,
}

# One string per row, one letter per square (see _COLOR_CODES).
_OFFICIAL_LAYOUTS: dict[str, tuple[tuple[str, ...], tuple[tuple[int, int], ...]]] = {
    "classic": (
        (
            "GGGYYYYGBBBOYYY",
            "OGYGYYOORBBOOGG",
            "BGRGGGGRRRYYOGG",
            "BRRGOOBBGGYYORB",
            "ROOOORBBOOORRRR",
            "RBBRRRRYYORBBBO",
            "YYBBBBRYYYGGGOO",
        ),
        (
            (2, 0), (5, 1), (1, 2), (5, 3), (1, 4), (3, 5), (2, 6), (0, 7),
            (5, 8), (1, 9), (5, 10), (0, 11), (6, 12), (3, 13), (5, 14),
        ),
    ),
    "blue": (
        (
            "RRGGYYYGGRRRROO",
            "ORRBBGYGGRGYROO",
            "BOOBGGGROGGGGGY",
            "BBOOOGRROOOOBBY",
            "GBBRRRBBBBOBYYG",
            "GGYYRBBYYYBBOYB",
            "YYYYROOORYYBORR",
        ),
        (
            (1, 0), (2, 1), (5, 2), (1, 3), (6, 4), (1, 5), (0, 6), (4, 7),
            (6, 8), (1, 9), (4, 10), (1, 11), (3, 12), (2, 13), (4, 14),
        ),
    ),
    "green": (
        (
            "OGBBRRRGGGYYYRR",
            "GGGGRYGRGGRYYRY",
            "BBOGYYGBRRRROOY",
            "BOOOOGGBBBBOROO",
            "BRORBOOOBYOORYO",
            "RRRRBBBYYYOBGGG",
            "YYYYGBYYOOGGBBB",
        ),
        (
            (0, 0), (4, 1), (4, 2), (2, 3), (6, 4), (6, 5), (2, 6), (1, 7),
            (4, 8), (4, 9), (0, 10), (5, 11), (3, 12), (4, 13), (4, 14),
        ),
    ),
    "red": (
        (
            "GGOOORRRYBBBBBR",
            "ROOYGGBYYYGOOOR",
            "BBBRGGBYRRROGOO",
            "BBRRRGGOORYGGGG",
            "BRRBBBOBBOYYYYB",
            "OYGGBOOGBOOYRRY",
            "YYYGYYYGGGORRRY",
        ),
        (
            (2, 0), (0, 1), (6, 2), (2, 3), (0, 4), (1, 5), (2, 6), (3, 7),
            (0, 8), (3, 9), (1, 10), (5, 11), (5, 12), (1, 13), (4, 14),
        ),
    ),
    "orange": (
        (
            "YGGRRRGGGBRYYYY",
            "OBBGGGYYGYYRRRY",
            "OOBYYYYBBBOORGG",
            "OGGBOOOOBGOOGGG",
            "GGGBYYOORRRORRR",
            "OGOBYRRBBRRYRRR",
            "OOBBBOOBBBYYYBB",
        ),
        (
            (2, 0), (6, 1), (4, 2), (2, 3), (6, 4), (1, 5), (6, 6), (0, 7),
            (4, 8), (0, 9), (1, 10), (5, 11), (2, 12), (6, 13), (5, 14),
        ),
    ),
}


def _decode(board_id: str) -> BoardConfiguration:
    rows, stars = _OFFICIAL_LAYOUTS[board_id]
    return BoardConfiguration(
        id=board_id,
        colorLayout=[[_COLOR_CODES[code] for code in row] for row in rows],
        starPositions=[Position(row=r, col=c) for r, c in stars],
    )


OFFICIAL_BOARDS: dict[str, BoardConfiguration] = {
    board_id: _decode(board_id) for board_id in _OFFICIAL_LAYOUTS
}


def list_board_ids() -> list[str]:
    """Board ids a player may choose, ``random`` last."""
    return list(OFFICIAL_BOARDS) + [RANDOM_BOARD_ID]


def get_board_configuration(
    board_id: str, rng: Optional[random.Random] = None
) -> Optional[BoardConfiguration]:
    """Return the layout for ``board_id``; ``random`` builds a new one."""
    if board_id == RANDOM_BOARD_ID:
        return generate_random_board(rng)
    config = OFFICIAL_BOARDS.get(board_id)
    if config is None:
        return None
    return config.model_copy(deep=True)


# =============================================================================
# Random boards
# =============================================================================


def _mirror_horizontal(
    layout: list[list[GameColor]], stars: list[Position]
) -> tuple[list[list[GameColor]], list[Position]]:
    cols = len(layout[0])
    return (
        [list(reversed(row)) for row in layout],
        [Position(row=p.row, col=cols - 1 - p.col) for p in stars],
    )


def _mirror_vertical(
    layout: list[list[GameColor]], stars: list[Position]
) -> tuple[list[list[GameColor]], list[Position]]:
    rows = len(layout)
    return (
        [list(row) for row in reversed(layout)],
        [Position(row=rows - 1 - p.row, col=p.col) for p in stars],
    )


def _rotate_180(
    layout: list[list[GameColor]], stars: list[Position]
) -> tuple[list[list[GameColor]], list[Position]]:
    layout, stars = _mirror_horizontal(layout, stars)
    return _mirror_vertical(layout, stars)


def generate_random_board(rng: Optional[random.Random] = None) -> BoardConfiguration:
    """
    Derive a fresh board from a randomly chosen official one.

    Applies, each with probability 1/2, a horizontal mirror, a vertical
    mirror and a 180 degree rotation, then permutes the five colours.
    """
    rng = rng or random.Random()
    template = OFFICIAL_BOARDS[rng.choice(sorted(OFFICIAL_BOARDS))]

    layout = [list(row) for row in template.color_layout]
    stars = list(template.star_positions)

    if rng.random() < 0.5:
        layout, stars = _mirror_horizontal(layout, stars)
    if rng.random() < 0.5:
        layout, stars = _mirror_vertical(layout, stars)
    if rng.random() < 0.5:
        layout, stars = _rotate_180(layout, stars)

    shuffled = list(BOARD_COLORS)
    rng.shuffle(shuffled)
    mapping = dict(zip(BOARD_COLORS, shuffled))
    layout = [[mapping[color] for color in row] for row in layout]

    logger.debug(f"Generated random board from template {template.id}")
    return BoardConfiguration(
        id=RANDOM_BOARD_ID, colorLayout=layout, starPositions=stars
    )


# =============================================================================
# Validation
# =============================================================================


def _group_sizes(layout: list[list[GameColor]], color: GameColor) -> list[int]:
    rows, cols = len(layout), len(layout[0])
    seen: set[tuple[int, int]] = set()
    sizes: list[int] = []
    for r in range(rows):
        for c in range(cols):
            if (r, c) in seen or layout[r][c] != color:
                continue
            size = 0
            stack = [(r, c)]
            seen.add((r, c))
            while stack:
                cr, cc = stack.pop()
                size += 1
                for nr, nc in ((cr - 1, cc), (cr + 1, cc), (cr, cc - 1), (cr, cc + 1)):
                    if (
                        0 <= nr < rows and 0 <= nc < cols
                        and (nr, nc) not in seen
                        and layout[nr][nc] == color
                    ):
                        seen.add((nr, nc))
                        stack.append((nr, nc))
            sizes.append(size)
    return sorted(sizes)


def validate_board(config: BoardConfiguration) -> BoardValidationResult:
    """Check ``config`` against every structural constraint.

    All violations are reported, not just the first one.
    """
    errors: list[str] = []
    layout = config.color_layout

    if len(layout) != BOARD_ROWS:
        errors.append(f"Board must have {BOARD_ROWS} rows, found {len(layout)}")
    for index, row in enumerate(layout):
        if len(row) != BOARD_COLUMNS:
            errors.append(
                f"Row {index} must have {BOARD_COLUMNS} columns, found {len(row)}"
            )
    if errors:
        # Group and star checks assume the grid shape.
        return BoardValidationResult(valid=False, errors=errors)

    counts = Counter(color for row in layout for color in row)
    for color in counts:
        if color not in BOARD_COLORS:
            errors.append(f"Invalid color found: {color.value}")
    for color in BOARD_COLORS:
        if counts[color] != EXPECTED_CELLS_PER_COLOR:
            errors.append(
                f"Color {color.value} must have exactly "
                f"{EXPECTED_CELLS_PER_COLOR} cells, found {counts[color]}"
            )
        sizes = _group_sizes(layout, color)
        if sizes != EXPECTED_GROUP_SIZES:
            errors.append(
                f"Color {color.value} must have groups of sizes "
                f"{EXPECTED_GROUP_SIZES}, found {sizes}"
            )

    stars = {(p.row, p.col) for p in config.star_positions}
    if len(stars) != EXPECTED_STARS:
        errors.append(
            f"Board must have exactly {EXPECTED_STARS} stars, found {len(stars)}"
        )
    star_columns: set[int] = set()
    stars_by_color: Counter = Counter()
    for r, c in sorted(stars):
        if not (0 <= r < BOARD_ROWS and 0 <= c < BOARD_COLUMNS):
            errors.append(f"Invalid star position: {r},{c}")
            continue
        star_columns.add(c)
        stars_by_color[layout[r][c]] += 1
    if len(star_columns) != BOARD_COLUMNS:
        errors.append(
            "Each column must have exactly one star, found stars in "
            f"{len(star_columns)} columns"
        )
    for color in BOARD_COLORS:
        if stars_by_color[color] != EXPECTED_STARS_PER_COLOR:
            errors.append(
                f"Color {color.value} must have exactly "
                f"{EXPECTED_STARS_PER_COLOR} stars, found {stars_by_color[color]}"
            )

    return BoardValidationResult(valid=not errors, errors=errors)


def ensure_valid_board(config: BoardConfiguration) -> BoardConfiguration:
    """Return ``config`` or raise :class:`InvalidBoardError`."""
    result = validate_board(config)
    if not result.valid:
        raise InvalidBoardError(
            "Board configuration violates structural constraints",
            errors=result.errors,
            board_id=config.id,
        )
    return config
