"""
Shared pytest fixtures for the Encore tests.

Game state fixtures are function-scoped so every test gets its own boards.
Most tests run on the ``classic`` layout:

    col  A B C D E F G H I J K L M N O
    r0   G G G Y Y Y Y G B B B O Y Y Y
    r1   O G Y G Y Y O O R B B O O G G
    r2   B G R G G G G R R R Y Y O G G
    r3   B R R G O O B B G G Y Y O R B
    r4   R O O O O R B B O O O R R R R
    r5   R B B R R R R Y Y O R B B B O
    r6   Y Y B B B B R Y Y Y G G G O O
"""

import random
from typing import Callable, List, Optional, Sequence, Union

import pytest

from encore.board_manager import Board, BoardManager
from encore.boards import OFFICIAL_BOARDS
from encore.game_engine import GameEngine
from encore.models import (
    DiceKind,
    Die,
    GameColor,
    GamePhase,
    GameState,
    Player,
)


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def board_factory() -> Callable[..., Board]:
    """Factory for fresh boards, optionally with some squares pre-crossed."""

    def _create_board(
        board_id: str = "classic",
        crossed: Sequence[tuple] = (),
    ) -> Board:
        board = BoardManager.create_board(OFFICIAL_BOARDS[board_id])
        for row, col in crossed:
            board[row][col].crossed = True
        return board

    return _create_board


@pytest.fixture
def player_factory(board_factory) -> Callable[..., Player]:
    """Factory for creating Player instances with customizable defaults."""

    def _create_player(
        index: int = 0,
        name: Optional[str] = None,
        is_ai: bool = False,
        board: Optional[Board] = None,
        jokers_remaining: int = 8,
        stars_collected: int = 0,
    ) -> Player:
        return Player(
            id=f"player-{index}",
            name=name or f"Player{index}",
            isAI=is_ai,
            board=board if board is not None else board_factory(),
            jokersRemaining=jokers_remaining,
            starsCollected=stars_collected,
        )

    return _create_player


@pytest.fixture
def die_factory() -> Callable[..., Die]:
    """Factory for dice with readable ids (``c-yellow``, ``n-3``)."""

    def _create_die(
        value: Union[str, int, GameColor],
        kind: Optional[DiceKind] = None,
        die_id: Optional[str] = None,
        used: bool = False,
    ) -> Die:
        if isinstance(value, GameColor):
            value = value.value
        if kind is None:
            kind = DiceKind.NUMBER if isinstance(value, int) else DiceKind.COLOR
        if die_id is None:
            die_id = f"{kind.value[0]}-{value}"
        return Die(id=die_id, kind=kind, value=value, used=used)

    return _create_die


@pytest.fixture
def game_state_factory(player_factory) -> Callable[..., GameState]:
    """Factory for creating GameState instances with full customization."""

    def _create_game_state(
        num_players: int = 2,
        ai_players: Optional[List[bool]] = None,
        players: Optional[List[Player]] = None,
        phase: GamePhase = GamePhase.ROLLING,
        current_player: int = 0,
        active_player: int = 0,
        dice: Optional[List[Die]] = None,
    ) -> GameState:
        if players is None:
            flags = ai_players or [False] * num_players
            players = [
                player_factory(i, is_ai=flags[i]) for i in range(len(flags))
            ]
        return GameState(
            id="test-game",
            players=players,
            phase=phase,
            currentPlayer=current_player,
            activePlayer=active_player,
            dice=dice or [],
        )

    return _create_game_state


@pytest.fixture
def rolled_state(game_state_factory, die_factory) -> Callable[..., GameState]:
    """A state in a selection phase with a chosen roll.

    ``colors`` and ``numbers`` are die faces; ids are ``c<i>`` / ``n<i>``.
    """

    def _create(
        colors: Sequence[Union[str, GameColor]] = ("yellow", "green", "blue"),
        numbers: Sequence[Union[int, str]] = (1, 2, 3),
        phase: GamePhase = GamePhase.ACTIVE_SELECTION,
        **kwargs,
    ) -> GameState:
        dice = [
            die_factory(c, DiceKind.COLOR, f"c{i}") for i, c in enumerate(colors)
        ]
        dice += [
            die_factory(n, DiceKind.NUMBER, f"n{i}") for i, n in enumerate(numbers)
        ]
        return game_state_factory(phase=phase, dice=dice, **kwargs)

    return _create


@pytest.fixture
def select() -> Callable[..., GameState]:
    """Select several dice by id, asserting each selection is accepted."""

    def _select(state: GameState, *die_ids: str) -> GameState:
        for die_id in die_ids:
            new_state = GameEngine.select_die(state, die_id)
            assert new_state is not state, f"selection of {die_id} rejected"
            state = new_state
        return state

    return _select


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)
