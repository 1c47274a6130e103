"""
Daily Score (Model B): a 100-point budget shared equally by active habits.

- Build habits earn their full weight when completed, nothing otherwise.
- Break habits earn their weight by default. Overflow caused on the scored
  date removes credit: ``weight - weight * penalty_factor * overflow``,
  clamped at 0 unless ``allow_negative_bad`` is set.
- Only overflow logged on the scored date is penalized, so a breach on one
  day is not charged again when a later day of the same week or month is
  scored.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from ..core.typed_config import ScoreOptions
from .aggregates import (
    active_habits_on,
    effective_target,
    get_habit_current_value,
    is_break_habit,
    is_habit_completed,
    round_half_up,
)
from .calendar_dates import DEFAULT_WEEK_STARTS_ON
from .entry_lookup import EntriesLike, EntryIndex

logger = logging.getLogger(__name__)

DEFAULT_SCORE_OPTIONS = ScoreOptions()


@dataclass(frozen=True)
class HabitContribution:
    """Points one habit adds to (or removes from) the day's score."""

    habit_id: str
    goal_type: str
    weight: float
    overflow: float
    points: float


def get_overflow_count_on_date(
    habit: Any,
    entries: EntriesLike,
    date: str,
    week_starts_on: int = DEFAULT_WEEK_STARTS_ON,
) -> float:
    """Overflow units of a break habit attributable to ``date``.

    The part of the period's overage that the value logged on ``date`` could
    account for: ``min(value_on_date, period_value - target)``. Zero when the
    period is within the limit or nothing was logged on the date.

    Example: weekly limit 3, 2 logged earlier in the week, 2 logged today.
    The period holds 4, overage 1, and today is charged min(2, 1) = 1.
    """
    index = EntryIndex.of(entries)
    target = effective_target(habit)
    period_value = get_habit_current_value(habit, index, date, week_starts_on)
    if period_value <= target:
        return 0

    value_on_date = index.value(habit.id, date)
    if value_on_date <= 0:
        return 0

    overage = period_value - target
    return min(value_on_date, overage)


def score_breakdown(
    habits: Iterable[Any],
    entries: EntriesLike,
    date: str,
    week_starts_on: int = DEFAULT_WEEK_STARTS_ON,
    options: Optional[ScoreOptions] = None,
) -> List[HabitContribution]:
    """Per-habit contributions to the day's score, in input order."""
    options = options or DEFAULT_SCORE_OPTIONS
    index = EntryIndex.of(entries)
    active = active_habits_on(habits, date)
    if not active:
        return []

    weight = 100 / len(active)
    contributions: List[HabitContribution] = []

    for habit in active:
        if not is_break_habit(habit):
            completed = is_habit_completed(habit, index, date, week_starts_on)
            contributions.append(
                HabitContribution(
                    habit_id=habit.id,
                    goal_type="build",
                    weight=weight,
                    overflow=0,
                    points=weight if completed else 0,
                )
            )
            continue

        overflow = get_overflow_count_on_date(habit, index, date, week_starts_on)
        points = weight - weight * options.penalty_factor * overflow
        if not options.allow_negative_bad:
            points = max(0, points)
        contributions.append(
            HabitContribution(
                habit_id=habit.id,
                goal_type="break",
                weight=weight,
                overflow=overflow,
                points=points,
            )
        )

    return contributions


def calculate_daily_score(
    habits: Iterable[Any],
    entries: EntriesLike,
    date: str,
    week_starts_on: int = DEFAULT_WEEK_STARTS_ON,
    options: Optional[ScoreOptions] = None,
) -> float:
    """Daily score for ``date`` in [0, 100], rounded to 2 decimals.

    Args:
        habits: All habits; only those active on the date are scored.
        entries: All log entries, or a prepared EntryIndex.
        date: Day to score (YYYY-MM-DD).
        week_starts_on: 0 = Sunday, 1 = Monday; bounds weekly windows.
        options: Penalty factor and negative-contribution switch.

    Returns:
        0 when no habit is active on the date.
    """
    contributions = score_breakdown(habits, entries, date, week_starts_on, options)
    if not contributions:
        return 0
    raw = sum(c.points for c in contributions)
    return max(0, min(100, round_half_up(raw, 2)))
