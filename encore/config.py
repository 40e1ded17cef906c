"""Runtime settings read from ``ENCORE_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .ai.heuristic_weights import HEURISTIC_WEIGHT_PROFILES
from .errors import ConfigurationError

TRUTHY = {"1", "true", "yes", "on"}
FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class EncoreSettings:
    """Timing and defaults for a game session.

    Delays are in milliseconds, matching the UI's animation timings.
    """
    ai_think_delay_ms: int = 1000
    switch_pause_ms: int = 1500
    auto_switch: bool = True
    default_board: str = "classic"
    ai_profile: str = "heuristic_v1_rich"
    log_level: str = "INFO"
    rng_seed: Optional[int] = None

    @property
    def ai_think_delay_s(self) -> float:
        return self.ai_think_delay_ms / 1000.0

    @property
    def switch_pause_s(self) -> float:
        return self.switch_pause_ms / 1000.0


def _int_env(name: str, default: Optional[int], minimum: int = 0) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be an integer", context={"value": raw}
        ) from None
    if value < minimum:
        raise ConfigurationError(
            f"{name} must be >= {minimum}", context={"value": raw}
        )
    return value


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    lowered = raw.strip().lower()
    if lowered in TRUTHY:
        return True
    if lowered in FALSY:
        return False
    raise ConfigurationError(f"{name} must be a boolean", context={"value": raw})


def check_settings(settings: EncoreSettings) -> EncoreSettings:
    """Reject settings a session could only fail on later, mid-game."""
    if settings.ai_profile not in HEURISTIC_WEIGHT_PROFILES:
        raise ConfigurationError(
            f"Unknown AI profile: {settings.ai_profile}",
            context={"known": sorted(HEURISTIC_WEIGHT_PROFILES)},
        )
    return settings


def get_settings() -> EncoreSettings:
    """Build settings from the current environment.

    Raises:
        ConfigurationError: a numeric or boolean variable does not parse,
            or the AI profile is unknown.
    """
    defaults = EncoreSettings()
    settings = EncoreSettings(
        ai_think_delay_ms=_int_env(
            "ENCORE_AI_THINK_DELAY_MS", defaults.ai_think_delay_ms
        ),
        switch_pause_ms=_int_env("ENCORE_SWITCH_PAUSE_MS", defaults.switch_pause_ms),
        auto_switch=_bool_env("ENCORE_AUTO_SWITCH", defaults.auto_switch),
        default_board=os.getenv("ENCORE_DEFAULT_BOARD", defaults.default_board),
        ai_profile=os.getenv("ENCORE_AI_PROFILE", defaults.ai_profile),
        log_level=os.getenv("ENCORE_LOG_LEVEL", defaults.log_level).upper(),
        rng_seed=_int_env("ENCORE_RNG_SEED", None, minimum=-(2**63)),
    )
    return check_settings(settings)
