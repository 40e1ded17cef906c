"""Tests for the Encore phase state machine."""

import random

import pytest

from encore.errors import InvalidBoardError, InvalidSetupError
from encore.game_engine import GameEngine
from encore.models import (
    BoardConfiguration,
    DiceKind,
    EventType,
    GameColor,
    GameEvent,
    GamePhase,
    Position,
)


def pos(row, col):
    return Position(row=row, col=col)


class TestInitializeGame:

    def test_humans_start_rolling(self):
        state = GameEngine.initialize_game(["Ann", "Ben"])
        assert state.phase == GamePhase.ROLLING
        assert state.current_player == 0
        assert state.active_player == 0
        assert state.dice == []
        assert [p.id for p in state.players] == ["player-0", "player-1"]
        assert all(p.jokers_remaining == 8 for p in state.players)
        assert state.winner is None

    def test_ai_first_player_starts_rolling_ai(self):
        state = GameEngine.initialize_game(["Bot", "Ann"], [True, False])
        assert state.phase == GamePhase.ROLLING_AI
        assert state.players[0].is_ai and not state.players[1].is_ai

    def test_board_choices(self, rng):
        state = GameEngine.initialize_game(
            ["A", "B", "C"], board_ids=["blue", None, "random"], rng=rng
        )
        assert [p.board_id for p in state.players] == ["blue", "classic", "random"]
        assert state.players[0].board[0][0].color == GameColor.RED

    def test_no_players(self):
        with pytest.raises(InvalidSetupError):
            GameEngine.initialize_game([])

    def test_mismatched_lengths(self):
        with pytest.raises(InvalidSetupError):
            GameEngine.initialize_game(["A", "B"], [True])

    def test_unknown_board(self):
        with pytest.raises(InvalidSetupError):
            GameEngine.initialize_game(["A"], board_ids=["plaid"])

    def test_malformed_board_fails_at_setup(self, monkeypatch):
        broken = BoardConfiguration(
            id="broken",
            colorLayout=[[GameColor.YELLOW] * 15 for _ in range(7)],
            starPositions=[],
        )
        monkeypatch.setattr(
            "encore.game_engine.get_board_configuration",
            lambda board_id, rng=None: broken,
        )
        with pytest.raises(InvalidBoardError) as exc:
            GameEngine.initialize_game(["A"])
        assert exc.value.errors


class TestRollDice:

    def test_roll_produces_three_of_each_kind(self, game_state_factory, rng):
        state = game_state_factory()
        rolled = GameEngine.roll_dice(state, rng)

        kinds = [d.kind for d in rolled.dice]
        assert kinds.count(DiceKind.COLOR) == 3
        assert kinds.count(DiceKind.NUMBER) == 3
        assert not any(d.used for d in rolled.dice)
        assert len({d.id for d in rolled.dice}) == 6
        assert rolled.phase == GamePhase.ACTIVE_SELECTION
        assert state.dice == []

    def test_faces(self, game_state_factory):
        state = game_state_factory()
        r = random.Random(7)
        for _ in range(50):
            for die in GameEngine.roll_dice(state, r).dice:
                if die.kind == DiceKind.COLOR:
                    assert die.value in {"yellow", "green", "blue", "red", "orange", "wild"}
                else:
                    assert die.value in {1, 2, 3, 4, 5, "wild"}

    def test_ai_suffix_kept(self, game_state_factory, rng):
        state = game_state_factory(ai_players=[True, False], phase=GamePhase.ROLLING_AI)
        assert GameEngine.roll_dice(state, rng).phase == GamePhase.ACTIVE_SELECTION_AI

    def test_active_player_follows_current(self, game_state_factory, rng):
        state = game_state_factory(num_players=3, current_player=2, active_player=0)
        rolled = GameEngine.roll_dice(state, rng)
        assert rolled.active_player == 2

    def test_roll_outside_rolling_rejected(self, rolled_state, rng):
        state = rolled_state()
        assert GameEngine.roll_dice(state, rng) is state


class TestSelectDie:

    def test_pending_choice_replaced_by_same_kind(self, rolled_state, select):
        state = select(rolled_state(), "c0", "n0", "c1")
        assert state.selected_dice.color.id == "c1"
        assert state.selected_dice.number.id == "n0"
        assert not any(d.used for d in state.dice)

    def test_unknown_die_rejected(self, rolled_state):
        state = rolled_state()
        assert GameEngine.select_die(state, "nope") is state

    def test_used_die_rejected(self, rolled_state):
        state = rolled_state()
        state.dice[0].used = True
        assert GameEngine.select_die(state, "c0") is state

    def test_wrong_phase_rejected(self, rolled_state):
        for phase in (
            GamePhase.ROLLING,
            GamePhase.PLAYER_SWITCHING,
            GamePhase.ACTIVE_SELECTION_AI,
            GamePhase.GAME_OVER,
        ):
            state = rolled_state(phase=phase)
            assert GameEngine.select_die(state, "c0") is state

    def test_joker_flags(self, rolled_state, select):
        state = select(rolled_state(colors=("wild", "red", "blue")), "c0", "n0")
        assert state.selected_from_joker.color
        assert not state.selected_from_joker.number

    def test_second_joker_rejected_at_selection(self, rolled_state, player_factory, select):
        players = [player_factory(0, jokers_remaining=1), player_factory(1)]
        state = rolled_state(
            colors=("wild", "red", "blue"), numbers=("wild", 2, 3), players=players
        )
        state = select(state, "c0")
        assert GameEngine.select_die(state, "n0") is state

    def test_replacing_joker_frees_budget(self, rolled_state, player_factory, select):
        players = [player_factory(0, jokers_remaining=1), player_factory(1)]
        state = rolled_state(
            colors=("wild", "red", "blue"), numbers=("wild", 2, 3), players=players
        )
        state = select(state, "c0", "c1", "n0")
        assert state.selected_dice.wild_count() == 1

    def test_no_jokers_left(self, rolled_state, player_factory):
        players = [player_factory(0, jokers_remaining=0), player_factory(1)]
        state = rolled_state(colors=("wild", "red", "blue"), players=players)
        assert GameEngine.select_die(state, "c0") is state


class TestProposeMove:

    def test_accepted_move_applies_everything(self, rolled_state, select):
        state = select(rolled_state(colors=("green", "red", "blue")), "c0", "n0")
        after = GameEngine.propose_move(state, [pos(0, 7)])

        assert after is not state
        player = after.players[0]
        assert player.board[0][7].crossed
        assert player.stars_collected == 1
        assert player.jokers_remaining == 8
        assert [d.id for d in after.dice if d.used] == ["c0", "n0"]
        assert after.phase == GamePhase.PLAYER_SWITCHING
        assert after.last_phase == GamePhase.ACTIVE_SELECTION
        assert after.selected_dice.color is None
        # Original state untouched.
        assert not state.players[0].board[0][7].crossed
        assert not any(d.used for d in state.dice)

    def test_requires_both_dice(self, rolled_state, select):
        state = select(rolled_state(colors=("green", "red", "blue")), "c0")
        assert GameEngine.propose_move(state, [pos(0, 7)]) is state

    def test_square_count_must_match(self, rolled_state, select):
        state = select(rolled_state(colors=("yellow", "red", "blue")), "c0", "n1")
        assert GameEngine.propose_move(state, [pos(5, 7)]) is state

    def test_invalid_squares_rejected(self, rolled_state, select):
        state = select(rolled_state(colors=("red", "green", "blue")), "c0", "n0")
        assert GameEngine.propose_move(state, [pos(3, 2)]) is state

    def test_wild_color_takes_first_square_color(self, rolled_state, select):
        state = select(rolled_state(colors=("wild", "red", "blue")), "c0", "n1")
        after = GameEngine.propose_move(state, [pos(1, 6), pos(1, 7)])

        assert after is not state
        player = after.players[0]
        assert player.board[1][6].crossed and player.board[1][7].crossed
        assert player.jokers_remaining == 7

    def test_wild_color_with_empty_squares_rejected(self, rolled_state, select):
        state = select(
            rolled_state(colors=("wild", "red", "blue"), numbers=("wild", 2, 3)),
            "c0", "n0",
        )
        assert GameEngine.propose_move(state, []) is state

    def test_wild_number_uses_square_count(self, rolled_state, select):
        state = select(
            rolled_state(colors=("yellow", "red", "blue"), numbers=("wild", 2, 3)),
            "c0", "n0",
        )
        squares = [pos(5, 7), pos(6, 7), pos(6, 8)]
        after = GameEngine.propose_move(state, squares)

        assert after is not state
        assert sum(sq.crossed for row in after.players[0].board for sq in row) == 3
        assert after.players[0].jokers_remaining == 7

    def test_two_jokers(self, rolled_state, select):
        state = select(
            rolled_state(colors=("wild", "red", "blue"), numbers=("wild", 2, 3)),
            "c0", "n0",
        )
        after = GameEngine.propose_move(state, [pos(0, 7)])
        assert after.players[0].jokers_remaining == 6

    def test_passive_player_uses_remaining_dice(self, rolled_state, select):
        state = select(rolled_state(colors=("green", "yellow", "blue")), "c0", "n0")
        state = GameEngine.propose_move(state, [pos(0, 7)])
        state = GameEngine.complete_player_switch(state)
        assert state.phase == GamePhase.PASSIVE_SELECTION
        assert state.current_player == 1

        assert GameEngine.select_die(state, "c0") is state
        assert GameEngine.select_die(state, "n0") is state
        state = select(state, "c1", "n1")
        after = GameEngine.propose_move(state, [pos(5, 7), pos(6, 7)])
        assert after.players[1].board[5][7].crossed
        assert not after.players[0].board[5][7].crossed
        assert {d.id for d in after.dice if d.used} == {"c0", "n0", "c1", "n1"}

    def test_game_over_on_second_color(self, rolled_state, select):
        state = rolled_state(colors=("yellow", "red", "blue"))
        player = state.players[0]
        for row in player.board:
            for square in row:
                if square.color == GameColor.YELLOW:
                    square.crossed = True
        player.board[5][7].crossed = False
        player.completed_colors = [GameColor.GREEN]
        player.completed_colors_first = [GameColor.GREEN]

        state = select(state, "c0", "n0")
        after = GameEngine.propose_move(state, [pos(5, 7)])

        assert after.phase == GamePhase.GAME_OVER
        assert after.winner == 0
        assert after.players[0].completed_colors == [GameColor.GREEN, GameColor.YELLOW]
        assert after.claimed_first_color_bonus == {"yellow": "player-0"}

        # Nothing is accepted afterwards.
        assert GameEngine.skip_turn(after) is after
        assert GameEngine.complete_player_switch(after) is after
        assert GameEngine.roll_dice(after) is after
        assert GameEngine.select_die(after, "c1") is after

    def test_game_over_from_passive_selection(self, rolled_state, select):
        # Seat 2 (AI) still has its passive turn pending when seat 1 wins.
        state = rolled_state(
            colors=("yellow", "red", "blue"), ai_players=[False, False, True]
        )
        state = GameEngine.complete_player_switch(GameEngine.skip_turn(state))
        assert (state.phase, state.current_player) == (GamePhase.PASSIVE_SELECTION, 1)

        player = state.players[1]
        for row in player.board:
            for square in row:
                if square.color == GameColor.YELLOW:
                    square.crossed = True
        player.board[5][7].crossed = False
        player.completed_colors = [GameColor.BLUE]
        player.completed_colors_not_first = [GameColor.BLUE]

        state = select(state, "c0", "n0")
        after = GameEngine.propose_move(state, [pos(5, 7)])

        assert after.phase == GamePhase.GAME_OVER
        assert after.winner == 1
        assert after.players[1].completed_colors == [GameColor.BLUE, GameColor.YELLOW]

        assert GameEngine.complete_player_switch(after) is after
        assert GameEngine.roll_dice(after, random.Random(0)) is after
        assert GameEngine.play_ai_step(after, rng=random.Random(0)) is after
        assert GameEngine.skip_turn(after) is after
        assert GameEngine.select_die(after, "c1") is after


class TestSkipAndSwitch:

    def test_skip_records_last_phase(self, rolled_state):
        state = rolled_state()
        after = GameEngine.skip_turn(state)
        assert after.phase == GamePhase.PLAYER_SWITCHING
        assert after.last_phase == GamePhase.ACTIVE_SELECTION
        assert after.players[0].board == state.players[0].board

    def test_skip_outside_selection_rejected(self, game_state_factory):
        state = game_state_factory(phase=GamePhase.ROLLING)
        assert GameEngine.skip_turn(state) is state

    def test_switch_outside_switching_rejected(self, rolled_state):
        state = rolled_state()
        assert GameEngine.complete_player_switch(state) is state

    def test_three_player_round(self, rolled_state):
        state = rolled_state(num_players=3)

        state = GameEngine.complete_player_switch(GameEngine.skip_turn(state))
        assert (state.phase, state.current_player) == (GamePhase.PASSIVE_SELECTION, 1)

        state = GameEngine.complete_player_switch(GameEngine.skip_turn(state))
        assert (state.phase, state.current_player) == (GamePhase.PASSIVE_SELECTION, 2)
        assert state.dice

        state = GameEngine.complete_player_switch(GameEngine.skip_turn(state))
        assert state.phase == GamePhase.ROLLING
        assert state.current_player == state.active_player == 1
        assert state.dice == []
        assert state.round_number == 2

    def test_round_wraps_to_first_seat(self, rolled_state):
        state = rolled_state(num_players=2, current_player=1, active_player=1)
        state = GameEngine.complete_player_switch(GameEngine.skip_turn(state))
        assert state.current_player == 0
        state = GameEngine.complete_player_switch(GameEngine.skip_turn(state))
        assert state.phase == GamePhase.ROLLING
        assert state.active_player == 0

    def test_solo_game_rolls_again(self, rolled_state):
        state = rolled_state(num_players=1)
        state = GameEngine.complete_player_switch(GameEngine.skip_turn(state))
        assert state.phase == GamePhase.ROLLING
        assert state.active_player == 0
        assert state.round_number == 2

    def test_ai_phases_follow_seat(self, rolled_state):
        state = rolled_state(ai_players=[False, True, False])
        state = GameEngine.complete_player_switch(GameEngine.skip_turn(state))
        assert state.phase == GamePhase.PASSIVE_SELECTION_AI
        state = GameEngine.complete_player_switch(GameEngine.skip_turn(state))
        assert state.phase == GamePhase.PASSIVE_SELECTION
        state = GameEngine.complete_player_switch(GameEngine.skip_turn(state))
        assert state.phase == GamePhase.ROLLING_AI


class TestAIStep:

    def test_rolls_in_rolling_ai(self, game_state_factory, rng):
        state = game_state_factory(ai_players=[True, True], phase=GamePhase.ROLLING_AI)
        after = GameEngine.play_ai_step(state, rng=rng)
        assert after.phase == GamePhase.ACTIVE_SELECTION_AI
        assert len(after.dice) == 6

    def test_plays_best_move(self, rolled_state):
        state = rolled_state(
            colors=("yellow", "red", "blue"),
            numbers=(5, 5, 5),
            ai_players=[True, False],
            phase=GamePhase.ACTIVE_SELECTION_AI,
        )
        after = GameEngine.play_ai_step(state)
        board = after.players[0].board
        for r, c in ((5, 7), (6, 7), (5, 8), (6, 8), (6, 9)):
            assert board[r][c].crossed
        assert after.phase == GamePhase.PLAYER_SWITCHING
        assert after.last_phase == GamePhase.ACTIVE_SELECTION_AI

    def test_no_move_skips(self, rolled_state):
        state = rolled_state(
            colors=("red", "red", "red"),
            numbers=(5, 5, 5),
            ai_players=[True, False],
            phase=GamePhase.ACTIVE_SELECTION_AI,
        )
        after = GameEngine.play_ai_step(state)
        assert after.phase == GamePhase.PLAYER_SWITCHING
        assert not any(sq.crossed for row in after.players[0].board for sq in row)

    def test_not_in_human_phase(self, rolled_state):
        state = rolled_state()
        assert GameEngine.play_ai_step(state) is state


class TestApplyEvent:

    def test_dispatches_to_transitions(self, rolled_state):
        state = rolled_state(colors=("green", "red", "blue"))
        state = GameEngine.apply_event(
            state, GameEvent(type=EventType.SELECT_DIE, dieId="c0")
        )
        state = GameEngine.apply_event(
            state, GameEvent(type=EventType.SELECT_DIE, dieId="n0")
        )
        state = GameEngine.apply_event(
            state, GameEvent(type=EventType.PROPOSE_MOVE, squares=[pos(0, 7)])
        )
        assert state.phase == GamePhase.PLAYER_SWITCHING
        state = GameEngine.apply_event(
            state, GameEvent(type=EventType.COMPLETE_PLAYER_SWITCH)
        )
        assert state.phase == GamePhase.PASSIVE_SELECTION

    def test_select_without_die_id_rejected(self, rolled_state):
        state = rolled_state()
        assert GameEngine.apply_event(state, GameEvent(type=EventType.SELECT_DIE)) is state
