"""
Typed configuration domain objects.

Immutable, Pydantic-validated config consumed by the metrics engine:
- ScoreOptions   (daily_score.py)
- MetricsConfig  (day_summary.py, analytics.py, cli.py)
"""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

logger = logging.getLogger(__name__)

VALID_WEEK_STARTS = (0, 1)
DEFAULT_WEEK_START = 1


def coerce_week_starts_on(value: Any, fallback: int = DEFAULT_WEEK_START) -> int:
    """Coerce a stored week-start value to 0 (Sunday) or 1 (Monday).

    Values persisted as strings ("0", "1") are accepted; anything else
    falls back to the default rather than failing.
    """
    try:
        number = int(value)
    except (TypeError, ValueError):
        logger.warning("Invalid week_starts_on %r, using %s", value, fallback)
        return fallback
    if number not in VALID_WEEK_STARTS:
        logger.warning("Invalid week_starts_on %r, using %s", value, fallback)
        return fallback
    return number


# ---------------------------------------------------------------------------
# Daily score
# ---------------------------------------------------------------------------


class ScoreOptions(BaseModel):
    """Tunable knobs of the daily score.

    penalty_factor: points lost per overflow unit, as a multiple of the
        habit's weight (1.0 = full weight per unit).
    allow_negative_bad: let a break habit contribute below zero. The total
        score is clamped to [0, 100] either way.
    """

    model_config = ConfigDict(frozen=True)

    penalty_factor: float = 1.0
    allow_negative_bad: bool = False

    @field_validator("penalty_factor")
    @classmethod
    def penalty_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("penalty_factor must be >= 0")
        return v


# ---------------------------------------------------------------------------
# Metrics engine
# ---------------------------------------------------------------------------


class MetricsConfig(BaseModel):
    """Engine-wide defaults loaded from config/defaults.yaml and env."""

    model_config = ConfigDict(frozen=True)

    week_starts_on: int = DEFAULT_WEEK_START
    score: ScoreOptions = ScoreOptions()
    streak_lookback_days: int = 3650
    summary_cache_size: int = 366

    @field_validator("week_starts_on")
    @classmethod
    def week_start_valid(cls, v: int) -> int:
        if v not in VALID_WEEK_STARTS:
            raise ValueError(f"week_starts_on must be one of {VALID_WEEK_STARTS}, got {v}")
        return v

    @field_validator("streak_lookback_days", "summary_cache_size")
    @classmethod
    def positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be > 0")
        return v
