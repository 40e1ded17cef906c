"""
Turn and phase transitions.

The rolling player (``active_player``) resolves the roll first, then every
other seat in order gets a passive selection on the same dice. Between two
selections the game sits in ``player-switching`` so the host can pause;
:func:`advance_after_switch` decides who acts next from ``last_phase``.

All helpers mutate the ``GameState`` they are given; the engine only hands
them its private copy.
"""

from __future__ import annotations

from ..models import GamePhase, GameState, SelectedDice, SelectedFromJoker


def rolling_phase_for(game_state: GameState, player_index: int) -> GamePhase:
    if game_state.players[player_index].is_ai:
        return GamePhase.ROLLING_AI
    return GamePhase.ROLLING


def active_phase_for(game_state: GameState, player_index: int) -> GamePhase:
    if game_state.players[player_index].is_ai:
        return GamePhase.ACTIVE_SELECTION_AI
    return GamePhase.ACTIVE_SELECTION


def passive_phase_for(game_state: GameState, player_index: int) -> GamePhase:
    if game_state.players[player_index].is_ai:
        return GamePhase.PASSIVE_SELECTION_AI
    return GamePhase.PASSIVE_SELECTION


def clear_pending_selection(game_state: GameState) -> None:
    game_state.selected_dice = SelectedDice()
    game_state.selected_from_joker = SelectedFromJoker()


def enter_player_switch(game_state: GameState) -> None:
    """Leave a selection phase, remembering it for the next transition."""
    game_state.last_phase = game_state.phase
    game_state.phase = GamePhase.PLAYER_SWITCHING
    clear_pending_selection(game_state)


def start_round(game_state: GameState, player_index: int) -> None:
    """Hand the dice to ``player_index`` for a fresh roll."""
    game_state.active_player = player_index
    game_state.current_player = player_index
    game_state.phase = rolling_phase_for(game_state, player_index)
    game_state.dice = []
    clear_pending_selection(game_state)


def advance_after_switch(game_state: GameState) -> None:
    """Pick the next actor once the switch pause is over.

    After the active selection the seat after the roller gets a passive
    selection; after a passive selection the next seat does, until the turn
    order wraps back to the roller, which ends the round and passes the
    dice to the following seat.
    """
    num_players = len(game_state.players)
    last_phase = game_state.last_phase
    game_state.last_phase = None

    if last_phase is not None and last_phase.is_active_selection:
        next_index = (game_state.active_player + 1) % num_players
        if next_index == game_state.active_player:
            # Solo game: nobody plays passively, the roller rolls again.
            game_state.round_number += 1
            start_round(game_state, game_state.active_player)
            return
        game_state.current_player = next_index
        game_state.phase = passive_phase_for(game_state, next_index)
        return

    next_index = (game_state.current_player + 1) % num_players
    if next_index == game_state.active_player:
        game_state.round_number += 1
        start_round(game_state, (game_state.active_player + 1) % num_players)
        return
    game_state.current_player = next_index
    game_state.phase = passive_phase_for(game_state, next_index)
