"""
Game session: the current state plus the timers that drive it.

The engine is a pure state machine; a session owns the single mutable slot
holding the latest ``GameState`` and turns "AI should act now" and "switch
pause is over" into ordinary :class:`GameEvent` inputs fired from a
scheduler.

Stale timers are harmless: every callback carries the revision and phase it
was scheduled for and does nothing if either changed. Starting a new game
cancels whatever is in flight.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from typing import Optional

from .config import EncoreSettings, check_settings, get_settings
from .errors import InvalidStateError
from .game_engine import GameEngine
from .models import EventType, GameEvent, GamePhase, GameState, Position
from .scheduler import ManualScheduler, Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class GameSession:
    """One game in progress and its pending timer (at most one)."""

    def __init__(
        self,
        scheduler: Scheduler,
        settings: Optional[EncoreSettings] = None,
        rng: Optional[random.Random] = None,
    ):
        self.scheduler = scheduler
        self.settings = (
            check_settings(settings) if settings is not None else get_settings()
        )
        self.rng = rng or random.Random(self.settings.rng_seed)
        self.state: Optional[GameState] = None
        self.revision = 0
        self._timer: Optional[TimerHandle] = None

    @property
    def has_pending_timer(self) -> bool:
        return self._timer is not None

    def new_game(
        self,
        player_names: Sequence[str],
        ai_players: Optional[Sequence[bool]] = None,
        board_ids: Optional[Sequence[Optional[str]]] = None,
        game_id: Optional[str] = None,
    ) -> GameState:
        """Replace the current game; any outstanding timer is cancelled."""
        self.cancel_timer()
        state = GameEngine.initialize_game(
            player_names,
            ai_players,
            board_ids,
            rng=self.rng,
            game_id=game_id,
            default_board=self.settings.default_board,
        )
        self._set_state(state)
        return state

    def dispatch(self, event: GameEvent) -> GameState:
        """Feed ``event`` to the engine; rejected events change nothing."""
        if self.state is None:
            raise InvalidStateError("No game in progress")
        new_state = GameEngine.apply_event(
            self.state, event, rng=self.rng, profile_id=self.settings.ai_profile
        )
        if new_state is not self.state:
            self._set_state(new_state)
        return new_state

    # Convenience wrappers for UI input

    def roll(self) -> GameState:
        return self.dispatch(GameEvent(type=EventType.ROLL_DICE))

    def select_die(self, die_id: str) -> GameState:
        return self.dispatch(GameEvent(type=EventType.SELECT_DIE, dieId=die_id))

    def propose_move(self, squares: Sequence[Position]) -> GameState:
        return self.dispatch(
            GameEvent(type=EventType.PROPOSE_MOVE, squares=list(squares))
        )

    def skip(self) -> GameState:
        return self.dispatch(GameEvent(type=EventType.SKIP_TURN))

    def complete_switch(self) -> GameState:
        return self.dispatch(GameEvent(type=EventType.COMPLETE_PLAYER_SWITCH))

    # Timer handling

    def cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _set_state(self, state: GameState) -> None:
        self.cancel_timer()
        self.state = state
        self.revision += 1
        self._schedule_next()

    def _schedule_next(self) -> None:
        phase = self.state.phase
        if phase == GamePhase.PLAYER_SWITCHING:
            if not self.settings.auto_switch:
                return
            delay = self.settings.switch_pause_s
            event_type = EventType.COMPLETE_PLAYER_SWITCH
        elif phase.is_ai:
            delay = self.settings.ai_think_delay_s
            event_type = EventType.AI_STEP
        else:
            return

        revision = self.revision
        self._timer = self.scheduler.schedule(
            delay, lambda: self._on_timer(revision, phase, event_type)
        )

    def _on_timer(
        self, revision: int, phase: GamePhase, event_type: EventType
    ) -> None:
        if revision != self.revision or self.state is None or self.state.phase != phase:
            logger.debug(f"Ignoring stale {event_type.value} timer")
            return
        self._timer = None
        self.dispatch(GameEvent(type=event_type))


def play_out(session: GameSession, max_steps: int = 10_000) -> GameState:
    """Run an all-AI game on a manual clock until it is over.

    Switches are completed by hand when the session does not auto-switch.

    Raises:
        InvalidStateError: the game stalls on a human phase or does not end
            within ``max_steps`` scheduler drains
    """
    if not isinstance(session.scheduler, ManualScheduler):
        raise InvalidStateError("play_out needs a ManualScheduler")
    if session.state is None:
        raise InvalidStateError("No game in progress")

    for _ in range(max_steps):
        session.scheduler.run_until_idle()
        state = session.state
        if state.phase == GamePhase.GAME_OVER:
            return state
        if state.phase == GamePhase.PLAYER_SWITCHING:
            session.complete_switch()
            continue
        raise InvalidStateError(
            f"Game waiting for human input in phase {state.phase.value}"
        )
    raise InvalidStateError(f"Game did not finish within {max_steps} steps")
