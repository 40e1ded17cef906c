"""Core game engine for Encore.

Every operation is a pure transition ``(state, input) -> state``: the input
``GameState`` is never mutated, an accepted operation returns a new deep
copy, and a rejected one returns the *same* object it was given. Callers
detect rejection with ``new_state is old_state``; nothing is raised for
wrong-phase calls, used dice, joker limits or illegal squares.

Phase flow for one round (``-ai`` variants follow the same shape)::

    rolling -> active-selection -> player-switching
            -> passive-selection -> player-switching -> ... -> rolling

A move that completes a player's second colour ends the game immediately.
Timer-driven steps (AI thinking, the switch pause) live in
:mod:`encore.session`; here they are the explicit ``play_ai_step`` and
``complete_player_switch`` transitions.
"""

from __future__ import annotations

import logging
import random
import string
import uuid
from collections.abc import Sequence
from typing import Optional

from .ai.base import BaseAI
from .ai.factory import AIFactory
from .board_manager import BoardManager
from .boards import DEFAULT_BOARD_ID, ensure_valid_board, get_board_configuration
from .errors import EncoreError, InvalidMoveError, InvalidSetupError, RulesViolationError
from .metrics import (
    GAMES_FINISHED,
    GAMES_STARTED,
    MOVES_ACCEPTED,
    MOVES_REJECTED,
    TURNS_SKIPPED,
    actor_label,
    phase_label,
)
from .models import (
    COLORS_TO_FINISH,
    DICE_COLORS,
    DICE_NUMBERS,
    WILD,
    DiceKind,
    Die,
    EventType,
    GameColor,
    GameEvent,
    GamePhase,
    GameState,
    Player,
    Position,
    SelectedDice,
    SelectedFromJoker,
)
from .rules import phase_machine
from .rules.scoring import record_completions
from .rules.validator import is_valid_move, validate_move

logger = logging.getLogger(__name__)

DICE_PER_KIND = 3
COLOR_FACES: tuple[str, ...] = tuple(c.value for c in DICE_COLORS) + (WILD,)
NUMBER_FACES: tuple = DICE_NUMBERS + (WILD,)

_DIE_ID_ALPHABET = string.ascii_lowercase + string.digits
_DIE_ID_LENGTH = 9

HUMAN_SELECTION_PHASES = (GamePhase.ACTIVE_SELECTION, GamePhase.PASSIVE_SELECTION)
AI_SELECTION_PHASES = (GamePhase.ACTIVE_SELECTION_AI, GamePhase.PASSIVE_SELECTION_AI)


def roll_six_dice(rng: Optional[random.Random] = None) -> list[Die]:
    """Three colour dice then three number dice, all unused."""
    rng = rng or random.Random()

    def new_id() -> str:
        return "".join(rng.choice(_DIE_ID_ALPHABET) for _ in range(_DIE_ID_LENGTH))

    dice = [
        Die(id=new_id(), kind=DiceKind.COLOR, value=rng.choice(COLOR_FACES))
        for _ in range(DICE_PER_KIND)
    ]
    dice += [
        Die(id=new_id(), kind=DiceKind.NUMBER, value=rng.choice(NUMBER_FACES))
        for _ in range(DICE_PER_KIND)
    ]
    return dice


class GameEngine:
    """Turn/phase state machine of an Encore game."""

    @staticmethod
    def initialize_game(
        player_names: Sequence[str],
        ai_players: Optional[Sequence[bool]] = None,
        board_ids: Optional[Sequence[Optional[str]]] = None,
        *,
        rng: Optional[random.Random] = None,
        game_id: Optional[str] = None,
        default_board: str = DEFAULT_BOARD_ID,
    ) -> GameState:
        """Create players and boards and hand the dice to seat 0.

        Raises:
            InvalidSetupError: no players, argument lengths disagree, or a
                board id is unknown
            InvalidBoardError: a board configuration breaks the structural
                invariants
        """
        if not player_names:
            raise InvalidSetupError("At least one player is required")
        num_players = len(player_names)
        ai_flags = list(ai_players) if ai_players is not None else [False] * num_players
        choices = list(board_ids) if board_ids is not None else [None] * num_players
        if len(ai_flags) != num_players or len(choices) != num_players:
            raise InvalidSetupError(
                "Player names, AI flags and board choices must have the same length",
                context={
                    "players": num_players,
                    "ai_flags": len(ai_flags),
                    "board_ids": len(choices),
                },
            )

        players: list[Player] = []
        for index, name in enumerate(player_names):
            board_id = choices[index] or default_board
            config = get_board_configuration(board_id, rng)
            if config is None:
                raise InvalidSetupError(
                    f"Unknown board: {board_id}", context={"player": index}
                )
            ensure_valid_board(config)
            players.append(
                Player(
                    id=f"player-{index}",
                    name=name,
                    isAI=bool(ai_flags[index]),
                    boardId=board_id,
                    board=BoardManager.create_board(config),
                )
            )

        state = GameState(id=game_id or str(uuid.uuid4()), players=players)
        state.phase = phase_machine.rolling_phase_for(state, 0)

        GAMES_STARTED.labels(str(num_players)).inc()
        logger.info(
            f"Game {state.id} started with {num_players} players "
            f"({sum(1 for p in players if p.is_ai)} AI)"
        )
        return state

    # ------------------------------------------------------------------
    # Rejection helper
    # ------------------------------------------------------------------

    @staticmethod
    def _reject(game_state: GameState, operation: str, reason: str) -> GameState:
        MOVES_REJECTED.labels(operation, reason).inc()
        logger.debug(
            f"{operation} rejected in phase {game_state.phase.value}: {reason}"
        )
        return game_state

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    @staticmethod
    def roll_dice(
        game_state: GameState, rng: Optional[random.Random] = None
    ) -> GameState:
        """Roll six fresh dice and open the active selection."""
        if not game_state.phase.is_rolling:
            return GameEngine._reject(game_state, "roll_dice", "wrong-phase")

        new_state = game_state.model_copy(deep=True)
        new_state.dice = roll_six_dice(rng)
        phase_machine.clear_pending_selection(new_state)
        new_state.active_player = new_state.current_player
        new_state.phase = (
            GamePhase.ACTIVE_SELECTION_AI
            if game_state.phase == GamePhase.ROLLING_AI
            else GamePhase.ACTIVE_SELECTION
        )
        logger.debug(
            f"{new_state.current().name} rolled "
            f"{[d.value for d in new_state.dice]}"
        )
        return new_state

    @staticmethod
    def select_die(game_state: GameState, die_id: str) -> GameState:
        """Make ``die_id`` the pending choice of its kind.

        Only a human selection phase accepts this. A die that is unknown,
        already used this roll, or that would push the pending wild count
        above the player's jokers is rejected here rather than at move time.
        """
        if game_state.phase not in HUMAN_SELECTION_PHASES:
            return GameEngine._reject(game_state, "select_die", "wrong-phase")

        die = next((d for d in game_state.dice if d.id == die_id), None)
        if die is None:
            return GameEngine._reject(game_state, "select_die", "unknown-die")
        if die.used:
            return GameEngine._reject(game_state, "select_die", "die-used")

        if die.kind == DiceKind.COLOR:
            pending = SelectedDice(color=die, number=game_state.selected_dice.number)
        else:
            pending = SelectedDice(color=game_state.selected_dice.color, number=die)
        if pending.wild_count() > game_state.current().jokers_remaining:
            return GameEngine._reject(game_state, "select_die", "not-enough-jokers")

        new_state = game_state.model_copy(deep=True)
        new_state.selected_dice = pending.model_copy(deep=True)
        new_state.selected_from_joker = SelectedFromJoker(
            color=pending.color is not None and pending.color.is_wild,
            number=pending.number is not None and pending.number.is_wild,
        )
        return new_state

    @staticmethod
    def resolve_move(
        game_state: GameState, squares: Sequence[Position]
    ) -> GameColor:
        """
        Resolve the pending dice against ``squares`` and validate the move.

        A wild colour takes the colour of the first proposed square, a wild
        number the count of proposed squares. Returns the resolved colour.

        Raises:
            InvalidMoveError: dice missing or spent, or not enough jokers
            RulesViolationError: the squares break a crossing rule
        """
        pending = game_state.selected_dice
        if pending.color is None or pending.number is None:
            raise InvalidMoveError("Select a colour die and a number die first")
        for die in (pending.color, pending.number):
            rolled = next((d for d in game_state.dice if d.id == die.id), None)
            if rolled is None or rolled.used:
                raise InvalidMoveError(
                    "Pending die is not available", context={"die": die.id}
                )

        player = game_state.current()
        if pending.wild_count() > player.jokers_remaining:
            raise InvalidMoveError(
                "Not enough jokers",
                context={"needed": pending.wild_count(),
                         "remaining": player.jokers_remaining},
            )

        board = player.board
        if pending.color.is_wild:
            if not squares:
                raise RulesViolationError(
                    "Wild colour needs at least one square", rule_ref="non-empty"
                )
            first = squares[0]
            if not BoardManager.in_bounds(first.row, first.col, board):
                raise RulesViolationError(
                    "Square is off the board",
                    rule_ref="on-board",
                    context={"square": first.to_key()},
                )
            color = board[first.row][first.col].color
        else:
            color = pending.color.color_value()

        number = len(squares) if pending.number.is_wild else pending.number.number_value()
        if len(squares) != number:
            raise RulesViolationError(
                f"Expected {number} squares, got {len(squares)}",
                rule_ref="square-count",
            )

        validate_move(squares, color, board)
        return color

    @staticmethod
    def _commit_move(
        game_state: GameState, squares: Sequence[Position], color: GameColor
    ) -> GameState:
        """Apply an already resolved move to a copy of ``game_state``."""
        new_state = game_state.model_copy(deep=True)
        index = new_state.current_player
        player = new_state.players[index]
        phase = new_state.phase

        player.stars_collected += BoardManager.cross_squares(squares, player.board)
        record_completions(new_state, index)
        player.jokers_remaining -= new_state.selected_dice.wild_count()

        spent = {new_state.selected_dice.color.id, new_state.selected_dice.number.id}
        for die in new_state.dice:
            if die.id in spent:
                die.used = True

        MOVES_ACCEPTED.labels(actor_label(player.is_ai), phase_label(phase)).inc()
        logger.info(
            f"{player.name} crossed {len(squares)} {color.value} "
            f"({', '.join(p.column_label + str(p.row) for p in squares)})"
        )

        if len(player.completed_colors) >= COLORS_TO_FINISH:
            new_state.phase = GamePhase.GAME_OVER
            new_state.last_phase = None
            new_state.winner = index
            phase_machine.clear_pending_selection(new_state)
            GAMES_FINISHED.labels(str(len(new_state.players))).inc()
            logger.info(f"Game {new_state.id} over: {player.name} wins")
            return new_state

        phase_machine.enter_player_switch(new_state)
        return new_state

    @staticmethod
    def propose_move(
        game_state: GameState, squares: Sequence[Position]
    ) -> GameState:
        """Cross ``squares`` with the pending dice (human selection only)."""
        if game_state.phase not in HUMAN_SELECTION_PHASES:
            return GameEngine._reject(game_state, "propose_move", "wrong-phase")
        try:
            color = GameEngine.resolve_move(game_state, squares)
        except RulesViolationError as e:
            return GameEngine._reject(game_state, "propose_move", e.rule_ref or "rules")
        except InvalidMoveError as e:
            logger.debug(f"Move not applicable: {e}")
            return GameEngine._reject(game_state, "propose_move", "invalid-move")
        return GameEngine._commit_move(game_state, squares, color)

    @staticmethod
    def skip_turn(game_state: GameState) -> GameState:
        """Pass the current selection without touching the board."""
        if not game_state.phase.is_selection:
            return GameEngine._reject(game_state, "skip_turn", "wrong-phase")

        new_state = game_state.model_copy(deep=True)
        player = new_state.current()
        TURNS_SKIPPED.labels(
            actor_label(player.is_ai), phase_label(new_state.phase)
        ).inc()
        logger.debug(f"{player.name} skipped ({new_state.phase.value})")
        phase_machine.enter_player_switch(new_state)
        return new_state

    @staticmethod
    def complete_player_switch(game_state: GameState) -> GameState:
        """Leave ``player-switching`` for the next actor."""
        if game_state.phase != GamePhase.PLAYER_SWITCHING:
            return GameEngine._reject(
                game_state, "complete_player_switch", "wrong-phase"
            )
        new_state = game_state.model_copy(deep=True)
        phase_machine.advance_after_switch(new_state)
        logger.debug(
            f"Switched to {new_state.current().name} ({new_state.phase.value})"
        )
        return new_state

    @staticmethod
    def play_ai_step(
        game_state: GameState,
        ai: Optional[BaseAI] = None,
        rng: Optional[random.Random] = None,
        profile_id: Optional[str] = None,
    ) -> GameState:
        """
        Perform the pending computer-controlled step.

        In ``rolling-ai`` this rolls; in an AI selection phase it asks the AI
        for a decision and feeds it through the same resolution and commit
        path as a human move. No decision, or one the rules reject, skips
        the turn.
        """
        if game_state.phase == GamePhase.ROLLING_AI:
            return GameEngine.roll_dice(game_state, rng)
        if game_state.phase not in AI_SELECTION_PHASES:
            return GameEngine._reject(game_state, "ai_step", "wrong-phase")

        if ai is None or ai.player_index != game_state.current_player:
            ai = AIFactory.create_for_player(game_state, profile_id)
        decision = ai.select_move(game_state)
        if decision is None:
            return GameEngine.skip_turn(game_state)

        pending = SelectedDice(color=decision.color_die, number=decision.number_die)
        staged = game_state.model_copy(
            update={
                "selected_dice": pending,
                "selected_from_joker": SelectedFromJoker(
                    color=decision.color_die.is_wild,
                    number=decision.number_die.is_wild,
                ),
            }
        )
        try:
            color = GameEngine.resolve_move(staged, decision.squares)
        except EncoreError as e:
            logger.warning(f"AI decision rejected, skipping: {e}")
            return GameEngine.skip_turn(game_state)
        return GameEngine._commit_move(staged, decision.squares, color)

    @staticmethod
    def is_valid_move(squares, color, board) -> bool:
        return is_valid_move(squares, color, board)

    @staticmethod
    def apply_event(
        game_state: GameState,
        event: GameEvent,
        *,
        ai: Optional[BaseAI] = None,
        rng: Optional[random.Random] = None,
        profile_id: Optional[str] = None,
    ) -> GameState:
        """Dispatch ``event`` to the matching transition."""
        if event.type == EventType.ROLL_DICE:
            return GameEngine.roll_dice(game_state, rng)
        if event.type == EventType.SELECT_DIE:
            if event.die_id is None:
                return GameEngine._reject(game_state, "select_die", "missing-die-id")
            return GameEngine.select_die(game_state, event.die_id)
        if event.type == EventType.PROPOSE_MOVE:
            return GameEngine.propose_move(game_state, event.squares)
        if event.type == EventType.SKIP_TURN:
            return GameEngine.skip_turn(game_state)
        if event.type == EventType.COMPLETE_PLAYER_SWITCH:
            return GameEngine.complete_player_switch(game_state)
        if event.type == EventType.AI_STEP:
            return GameEngine.play_ai_step(game_state, ai, rng, profile_id)
        return GameEngine._reject(game_state, "apply_event", "unknown-event")
