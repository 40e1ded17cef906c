"""Heuristic weight profiles for the Encore AI.

Profiles are plain ``dict[str, float]`` so they stay JSON-serialisable. The
keys mirror the attribute names on :class:`HeuristicAI`
(``WEIGHT_CELL``, ``WEIGHT_COLOR_FINISH``, ...) and are applied with
``setattr`` when an instance is built with a ``profile_id``.

Two base profiles ship with the engine:

* ``heuristic_v1_simple``: ignores wild colour dice entirely.
* ``heuristic_v1_rich``: also tries every wild colour die against each of
  the five dice colours, at a small penalty for spending the joker.

Neither profile plays wild number dice.
"""

from __future__ import annotations

HeuristicWeights = dict[str, float]


BASE_V1_WEIGHTS: HeuristicWeights = {
    # Per square crossed.
    "WEIGHT_CELL": 1.0,
    # Candidate uses up a whole component.
    "WEIGHT_GROUP_COMPLETE": 50.0,
    # Candidate crosses the last squares of its colour.
    "WEIGHT_COLOR_FINISH": 200.0,
    # Per column the candidate completes.
    "WEIGHT_COLUMN_FINISH": 100.0,
    # Subtracted when the colour die is wild.
    "WEIGHT_WILD_COLOR_PENALTY": 5.0,
    # 1.0 to resolve wild colour dice, 0.0 to skip them.
    "USE_WILD_COLOR": 1.0,
}

HEURISTIC_V1_SIMPLE: HeuristicWeights = {
    **BASE_V1_WEIGHTS,
    "USE_WILD_COLOR": 0.0,
}

HEURISTIC_V1_RICH: HeuristicWeights = dict(BASE_V1_WEIGHTS)

DEFAULT_PROFILE_ID = "heuristic_v1_rich"

HEURISTIC_WEIGHT_PROFILES: dict[str, HeuristicWeights] = {
    "heuristic_v1_simple": HEURISTIC_V1_SIMPLE,
    "heuristic_v1_rich": HEURISTIC_V1_RICH,
}


def get_weights(profile_id: str) -> HeuristicWeights:
    """Return the weight profile for ``profile_id``.

    A missing id yields an empty mapping, meaning "keep the class
    defaults".
    """
    return HEURISTIC_WEIGHT_PROFILES.get(profile_id, {})
