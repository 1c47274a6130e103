"""
Per-habit and per-day aggregates derived from habits and their entries.

Pure functions: no database, no clock, no I/O. Every function returns a
defined number for any input (zero habits, missing entries, malformed
dates all yield 0) so callers on a render path never need a try/except.
"""

import logging
import math
from typing import Any, Callable, Iterable, List, NamedTuple, Optional, Sequence

from ..models.value_objects import Frequency, GoalType, HabitKind
from .calendar_dates import (
    DEFAULT_WEEK_STARTS_ON,
    add_days,
    dates_in_range,
    get_month_range,
    get_week_dates,
    parse_date,
)
from .entry_lookup import EntriesLike, EntryIndex

logger = logging.getLogger(__name__)


class CompletionCount(NamedTuple):
    completed: int
    total: int

    @property
    def percent(self) -> int:
        return completion_percent(self.completed, self.total)


class PeriodScore(NamedTuple):
    """Mean daily completion over a week or month."""

    start: str
    end: str
    score: int
    completed_days: int  # days at 100%
    total_days: int


# ---------------------------------------------------------------------------
# Rounding
# ---------------------------------------------------------------------------


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with halves going up (2.5 -> 3), unlike Python's banker's round."""
    if not math.isfinite(value):
        return 0
    factor = 10**ndigits
    rounded = math.floor(value * factor + 0.5) / factor
    return int(rounded) if ndigits == 0 else rounded


def completion_percent(completed: float, total: float) -> int:
    """round(100 * completed / total); 0 when there is nothing to complete."""
    if total <= 0:
        return 0
    return int(round_half_up(100 * completed / total))


# ---------------------------------------------------------------------------
# Habit attributes
# ---------------------------------------------------------------------------


def is_break_habit(habit: Any) -> bool:
    """Break habits stay under a limit; a missing goal type means build."""
    return habit.goal_type == GoalType.BREAK


def effective_target(habit: Any) -> float:
    """The habit's goal or limit; boolean habits always target 1."""
    if habit.kind == HabitKind.BOOLEAN:
        return 1
    target = habit.target
    if isinstance(target, bool) or not isinstance(target, (int, float)):
        return 1
    return target if math.isfinite(target) else 1


def habit_progress_percent(habit: Any, value: float) -> int:
    """Fill level (0-100) of a progress ring for ``value`` against the target."""
    target = effective_target(habit)
    if target <= 0:
        target = 1
    return max(0, min(100, completion_percent(value, target)))


# ---------------------------------------------------------------------------
# Activity
# ---------------------------------------------------------------------------


def is_habit_active_on_date(habit: Any, date: str) -> bool:
    """True unless the habit was paused or archived on or before ``date``.

    Pausing or archiving only affects the given day and later ones, so past
    history is never hidden. Callers check ``created_at`` separately.
    """
    if habit.paused_at and habit.paused_at <= date:
        return False
    if habit.archived_at and habit.archived_at <= date:
        return False
    return True


def habit_exists_on(habit: Any, date: str) -> bool:
    return not habit.created_at or habit.created_at <= date


def active_habits_on(habits: Iterable[Any], date: str) -> List[Any]:
    """Habits that exist on ``date`` and are neither paused nor archived."""
    if parse_date(date) is None:
        logger.warning("No active habits for malformed date %r", date)
        return []
    return [
        h for h in habits if habit_exists_on(h, date) and is_habit_active_on_date(h, date)
    ]


# ---------------------------------------------------------------------------
# Habit-level values
# ---------------------------------------------------------------------------


def period_dates(
    habit: Any, date: str, week_starts_on: int = DEFAULT_WEEK_STARTS_ON
) -> List[str]:
    """Dates of the aggregation window containing ``date`` for this habit."""
    if habit.frequency == Frequency.WEEKLY:
        return get_week_dates(date, week_starts_on)
    if habit.frequency == Frequency.MONTHLY:
        start, end = get_month_range(date)
        return dates_in_range(start, end)
    return [date]


def get_habit_current_value(
    habit: Any,
    entries: EntriesLike,
    date: str,
    week_starts_on: int = DEFAULT_WEEK_STARTS_ON,
) -> float:
    """Progress toward the habit's goal for the period containing ``date``.

    - daily:   the entry logged on that exact date
    - weekly:  sum of entries across the week containing the date
    - monthly: sum of entries across the calendar month of the date
    """
    index = EntryIndex.of(entries)
    return sum(index.value(habit.id, d) for d in period_dates(habit, date, week_starts_on))


def is_habit_completed(
    habit: Any,
    entries: EntriesLike,
    date: str,
    week_starts_on: int = DEFAULT_WEEK_STARTS_ON,
) -> bool:
    """Build: reached the target. Break: still at or under the limit."""
    value = get_habit_current_value(habit, entries, date, week_starts_on)
    if is_break_habit(habit):
        return value <= effective_target(habit)
    return value >= effective_target(habit)


def is_over_limit(
    habit: Any,
    entries: EntriesLike,
    date: str,
    week_starts_on: int = DEFAULT_WEEK_STARTS_ON,
) -> bool:
    """True only for break habits whose period value exceeds the limit."""
    if not is_break_habit(habit):
        return False
    value = get_habit_current_value(habit, entries, date, week_starts_on)
    return value > effective_target(habit)


# ---------------------------------------------------------------------------
# Day-level rollups
# ---------------------------------------------------------------------------


def _count_completed(
    habits: Iterable[Any],
    entries: EntriesLike,
    date: str,
    week_starts_on: int,
    include: Optional[Callable[[Any], bool]] = None,
) -> CompletionCount:
    index = EntryIndex.of(entries)
    active = active_habits_on(habits, date)
    if include is not None:
        active = [h for h in active if include(h)]
    completed = sum(
        1 for h in active if is_habit_completed(h, index, date, week_starts_on)
    )
    return CompletionCount(completed=completed, total=len(active))


def _is_daily(habit: Any) -> bool:
    return habit.frequency == Frequency.DAILY


def _is_weekly(habit: Any) -> bool:
    return habit.frequency == Frequency.WEEKLY


def daily_completed_count(
    habits: Iterable[Any],
    entries: EntriesLike,
    date: str,
    week_starts_on: int = DEFAULT_WEEK_STARTS_ON,
) -> CompletionCount:
    """Completed vs. total over every habit active on the date."""
    return _count_completed(habits, entries, date, week_starts_on)


def daily_completion(
    habits: Iterable[Any],
    entries: EntriesLike,
    date: str,
    week_starts_on: int = DEFAULT_WEEK_STARTS_ON,
) -> int:
    """Completion % (0-100) over every habit active on the date."""
    return daily_completed_count(habits, entries, date, week_starts_on).percent


def daily_only_completed_count(
    habits: Iterable[Any],
    entries: EntriesLike,
    date: str,
    week_starts_on: int = DEFAULT_WEEK_STARTS_ON,
) -> CompletionCount:
    """Like daily_completed_count, restricted to daily habits.

    Weekly and monthly habits still in progress do not hold the day's ring
    below 100%.
    """
    return _count_completed(habits, entries, date, week_starts_on, include=_is_daily)


def daily_only_completion(
    habits: Iterable[Any],
    entries: EntriesLike,
    date: str,
    week_starts_on: int = DEFAULT_WEEK_STARTS_ON,
) -> int:
    return daily_only_completed_count(habits, entries, date, week_starts_on).percent


def weekly_habit_progress(
    habits: Iterable[Any],
    entries: EntriesLike,
    date: str,
    week_starts_on: int = DEFAULT_WEEK_STARTS_ON,
) -> CompletionCount:
    """Completed vs. total for weekly habits in the week containing the date."""
    return _count_completed(habits, entries, date, week_starts_on, include=_is_weekly)


def daily_over_limit_count(
    habits: Iterable[Any],
    entries: EntriesLike,
    date: str,
    week_starts_on: int = DEFAULT_WEEK_STARTS_ON,
) -> int:
    """Number of active daily break habits currently over their limit."""
    index = EntryIndex.of(entries)
    return sum(
        1
        for h in active_habits_on(habits, date)
        if _is_daily(h) and is_over_limit(h, index, date, week_starts_on)
    )


# ---------------------------------------------------------------------------
# Week / month rollups
# ---------------------------------------------------------------------------


def weekly_score(
    habits: Iterable[Any],
    entries: EntriesLike,
    week_start: str,
    week_starts_on: int = DEFAULT_WEEK_STARTS_ON,
) -> int:
    """Mean daily completion % over the 7 days starting at ``week_start``.

    A plain mean of the seven daily percentages, not weighted by how many
    habits were active on each day.
    """
    if parse_date(week_start) is None:
        return 0
    habits = list(habits)
    index = EntryIndex.of(entries)
    scores = [
        daily_completion(habits, index, add_days(week_start, i), week_starts_on)
        for i in range(7)
    ]
    return int(round_half_up(sum(scores) / 7))


def _summarize_days(
    habits: Sequence[Any],
    index: EntryIndex,
    days: List[str],
    week_starts_on: int,
    through: Optional[str],
) -> PeriodScore:
    if not days:
        return PeriodScore(start="", end="", score=0, completed_days=0, total_days=0)
    counted = [d for d in days if through is None or d <= through]
    scores = [daily_completion(habits, index, d, week_starts_on) for d in counted]
    score = int(round_half_up(sum(scores) / len(scores))) if scores else 0
    return PeriodScore(
        start=days[0],
        end=days[-1],
        score=score,
        completed_days=sum(1 for s in scores if s == 100),
        total_days=len(counted),
    )


def summarize_week(
    habits: Iterable[Any],
    entries: EntriesLike,
    date: str,
    week_starts_on: int = DEFAULT_WEEK_STARTS_ON,
    through: Optional[str] = None,
) -> PeriodScore:
    """Score of the week containing ``date``.

    Days after ``through`` (typically today) are left out, so the current
    week reports a partial ``total_days``.
    """
    return _summarize_days(
        list(habits),
        EntryIndex.of(entries),
        get_week_dates(date, week_starts_on),
        week_starts_on,
        through,
    )


def summarize_month(
    habits: Iterable[Any],
    entries: EntriesLike,
    date: str,
    week_starts_on: int = DEFAULT_WEEK_STARTS_ON,
    through: Optional[str] = None,
) -> PeriodScore:
    """Score of the calendar month containing ``date``."""
    start, end = get_month_range(date)
    return _summarize_days(
        list(habits),
        EntryIndex.of(entries),
        dates_in_range(start, end),
        week_starts_on,
        through,
    )
