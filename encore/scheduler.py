"""Delayed-callback schedulers for the session timer layer.

The engine never sleeps; a :class:`~encore.session.GameSession` asks a
scheduler to call it back after the AI think delay or the switch pause.
Production hosts use :class:`AsyncioScheduler`; tests drive a
:class:`ManualScheduler` clock explicitly.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def schedule(self, delay: float, callback: Callback) -> TimerHandle:
        """Run ``callback`` once, ``delay`` seconds from now."""
        ...


class AsyncioScheduler:
    """Schedules callbacks with ``loop.call_later``.

    Without an explicit loop the running loop is looked up on every call,
    so the scheduler must be used from inside that loop (an async request
    handler, for instance).
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def schedule(self, delay: float, callback: Callback) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(delay, 0.0), callback)


class _ManualTimer:
    __slots__ = ("due", "callback", "cancelled")

    def __init__(self, due: float, callback: Callback):
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Virtual clock: timers only fire when the clock is advanced.

    Example:
        scheduler = ManualScheduler()
        session = GameSession(scheduler)
        scheduler.advance(1.0)  # fires everything due within one second
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._heap: list[tuple[float, int, _ManualTimer]] = []
        self._seq = itertools.count()

    def schedule(self, delay: float, callback: Callback) -> _ManualTimer:
        timer = _ManualTimer(self.now + max(delay, 0.0), callback)
        heapq.heappush(self._heap, (timer.due, next(self._seq), timer))
        return timer

    @property
    def pending(self) -> int:
        return sum(1 for _, _, t in self._heap if not t.cancelled)

    def _pop_due(self, until: float) -> Optional[_ManualTimer]:
        while self._heap and self._heap[0][0] <= until:
            _, _, timer = heapq.heappop(self._heap)
            if not timer.cancelled:
                return timer
        return None

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing due timers in order.

        Timers scheduled by a callback fire in the same call if they fall
        inside the window. Returns the number of callbacks run.
        """
        target = self.now + seconds
        fired = 0
        while True:
            timer = self._pop_due(target)
            if timer is None:
                break
            self.now = timer.due
            timer.callback()
            fired += 1
        self.now = target
        return fired

    def run_until_idle(self, max_callbacks: int = 100_000) -> int:
        """Fire timers, jumping the clock, until none are left.

        Raises:
            RuntimeError: more than ``max_callbacks`` fired
        """
        fired = 0
        while True:
            timer = self._pop_due(float("inf"))
            if timer is None:
                return fired
            if fired >= max_callbacks:
                raise RuntimeError(f"Scheduler still busy after {fired} callbacks")
            self.now = max(self.now, timer.due)
            timer.callback()
            fired += 1
