"""Prometheus metrics for the Encore rules engine.

Counters are recorded by :mod:`encore.game_engine` on the accepted and
rejected paths and by the AI layer when it decides; the HTTP host exposes
them on ``/metrics``. Labels stay coarse (actor kind, phase family) so the
series count is bounded.
"""

from __future__ import annotations

from typing import Final

from prometheus_client import Counter, Histogram


MOVES_ACCEPTED: Final[Counter] = Counter(
    "encore_moves_accepted_total",
    "Total accepted square crossings, labeled by actor and phase family.",
    labelnames=("actor", "phase"),
)

MOVES_REJECTED: Final[Counter] = Counter(
    "encore_moves_rejected_total",
    (
        "Total rejected operations (wrong phase, used die, joker limit, "
        "invalid squares), labeled by operation and reason."
    ),
    labelnames=("operation", "reason"),
)

TURNS_SKIPPED: Final[Counter] = Counter(
    "encore_turns_skipped_total",
    "Total skipped selections, labeled by actor and phase family.",
    labelnames=("actor", "phase"),
)

AI_DECISIONS: Final[Counter] = Counter(
    "encore_ai_decisions_total",
    "Total AI move searches, labeled by profile and outcome (found/none).",
    labelnames=("profile", "outcome"),
)

AI_DECISION_LATENCY: Final[Histogram] = Histogram(
    "encore_ai_decision_latency_seconds",
    "Time spent enumerating and scoring AI candidates.",
    labelnames=("profile",),
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0),
)

GAMES_STARTED: Final[Counter] = Counter(
    "encore_games_started_total",
    "Total games initialised, labeled by player count.",
    labelnames=("num_players",),
)

GAMES_FINISHED: Final[Counter] = Counter(
    "encore_games_finished_total",
    "Total games that reached game-over, labeled by player count.",
    labelnames=("num_players",),
)


def actor_label(is_ai: bool) -> str:
    return "ai" if is_ai else "human"


def phase_label(phase) -> str:
    """Collapse a :class:`GamePhase` to active / passive / other."""
    if phase.is_active_selection:
        return "active"
    if phase.is_passive_selection:
        return "passive"
    return "other"
