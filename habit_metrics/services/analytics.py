"""
Time-bucketed completion series and streaks.

Pure domain logic for the analytics views. Bars cover contiguous date
spans; each bar sums (completed, target) over its days, where target is the
number of habits active on each day (or 1 per day for a single-habit view).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional

from .aggregates import (
    active_habits_on,
    completion_percent,
    daily_completion,
    habit_exists_on,
    is_habit_active_on_date,
    is_habit_completed,
)
from .calendar_dates import (
    DEFAULT_WEEK_STARTS_ON,
    DateSpan,
    add_days,
    dates_in_range,
    format_date_title,
    get_last_n_month_ranges,
    get_month_range,
    get_month_week_segments,
    get_week_dates,
    parse_date,
    today as local_today,
)
from .entry_lookup import EntriesLike, EntryIndex

logger = logging.getLogger(__name__)

DEFAULT_STREAK_LOOKBACK_DAYS = 3650

_WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


class AnalyticsRange(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    SIX_MONTHS = "6month"
    YEAR = "year"


@dataclass(frozen=True)
class BarPoint:
    """One bar of a completion chart."""

    label: str
    start: str
    end: str
    completed: int
    target: int
    percent: int


@dataclass(frozen=True)
class DailyPoint:
    date: str
    completion: int  # 0-100


@dataclass(frozen=True)
class StreakInfo:
    # consecutive completed days up to today (or yesterday)
    current: int
    longest: int


@dataclass(frozen=True)
class HabitAnalytics:
    habit_id: str
    streak: StreakInfo
    total_completed: int
    completion_rate: int  # completed days / active days, 0-100
    daily_series: List[DailyPoint] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Buckets
# ---------------------------------------------------------------------------


def build_buckets(
    range_: AnalyticsRange,
    end_date: str,
    week_starts_on: int = DEFAULT_WEEK_STARTS_ON,
    today_str: Optional[str] = None,
) -> List[DateSpan]:
    """Ordered date spans covering ``range_`` and ending around ``end_date``.

    - day:    the single day ``end_date``
    - week:   one bar per day of the week containing ``end_date``
    - month:  7-day segments of the month containing ``end_date``
    - 6month: the last 6 calendar months, oldest first
    - year:   the last 12 calendar months, oldest first
    """
    if parse_date(end_date) is None:
        logger.warning("No buckets for malformed end date %r", end_date)
        return []

    range_ = AnalyticsRange(range_)
    if range_ is AnalyticsRange.DAY:
        return [DateSpan(end_date, end_date, format_date_title(end_date, today_str))]
    if range_ is AnalyticsRange.WEEK:
        return [
            DateSpan(d, d, _WEEKDAY_LABELS[(i + week_starts_on) % 7])
            for i, d in enumerate(get_week_dates(end_date, week_starts_on))
        ]
    if range_ is AnalyticsRange.MONTH:
        month_start, _ = get_month_range(end_date)
        return get_month_week_segments(month_start)

    months = 6 if range_ is AnalyticsRange.SIX_MONTHS else 12
    return [
        DateSpan(m.start, m.end, m.label)
        for m in get_last_n_month_ranges(end_date, months)
    ]


def bucket_percent(completed: int, target: int) -> int:
    """Bar height 0-100; an empty bucket is 0 rather than a division error."""
    return max(0, min(100, completion_percent(completed, target)))


def completion_series(
    habits: Iterable[Any],
    entries: EntriesLike,
    range_: AnalyticsRange,
    end_date: str,
    week_starts_on: int = DEFAULT_WEEK_STARTS_ON,
    habit_id: Optional[str] = None,
    today_str: Optional[str] = None,
) -> List[BarPoint]:
    """Chart-ready bars for a range ending at ``end_date``.

    Days after ``end_date`` contribute nothing, so the bars of a week or
    month still in progress only reflect elapsed days. With ``habit_id``
    each day the habit is active counts as a target of 1; an unknown habit
    yields empty bars.
    """
    habits = list(habits)
    index = EntryIndex.of(entries)
    selected = None
    if habit_id is not None:
        selected = next((h for h in habits if h.id == habit_id), None)

    points: List[BarPoint] = []
    for bucket in build_buckets(range_, end_date, week_starts_on, today_str):
        completed = 0
        target = 0
        for day in dates_in_range(bucket.start, min(bucket.end, end_date)):
            if habit_id is not None:
                if selected is None:
                    continue
                if habit_exists_on(selected, day) and is_habit_active_on_date(selected, day):
                    target += 1
                    if is_habit_completed(selected, index, day, week_starts_on):
                        completed += 1
                continue

            active = active_habits_on(habits, day)
            target += len(active)
            completed += sum(
                1 for h in active if is_habit_completed(h, index, day, week_starts_on)
            )

        points.append(
            BarPoint(
                label=bucket.label,
                start=bucket.start,
                end=bucket.end,
                completed=completed,
                target=target,
                percent=bucket_percent(completed, target),
            )
        )
    return points


# ---------------------------------------------------------------------------
# Streaks
# ---------------------------------------------------------------------------


def _walk_back(
    is_done: Callable[[str], bool],
    start_day: str,
    floor: str,
    skip: Optional[Callable[[str], bool]] = None,
) -> int:
    streak = 0
    day = start_day
    while day >= floor:
        if skip is None or not skip(day):
            if not is_done(day):
                break
            streak += 1
        previous = add_days(day, -1)
        if previous == day:
            # start of the calendar
            break
        day = previous
    return streak


def compute_streak(
    habits: Iterable[Any],
    entries: EntriesLike,
    today_str: Optional[str] = None,
    week_starts_on: int = DEFAULT_WEEK_STARTS_ON,
    lookback_days: int = DEFAULT_STREAK_LOOKBACK_DAYS,
) -> int:
    """Consecutive days at 100% completion, ending today or yesterday.

    A today still below 100% does not break the streak; counting starts
    from yesterday instead. The walk stops at the first day below 100% or
    ``lookback_days`` before today.
    """
    today_str = today_str or local_today()
    if parse_date(today_str) is None:
        return 0
    habits = list(habits)
    index = EntryIndex.of(entries)

    def is_done(day: str) -> bool:
        return daily_completion(habits, index, day, week_starts_on) == 100

    start = today_str if is_done(today_str) else add_days(today_str, -1)
    return _walk_back(is_done, start, add_days(today_str, -lookback_days))


def compute_habit_streak(
    habit: Any,
    entries: EntriesLike,
    today_str: Optional[str] = None,
    week_starts_on: int = DEFAULT_WEEK_STARTS_ON,
    lookback_days: int = DEFAULT_STREAK_LOOKBACK_DAYS,
) -> int:
    """Per-habit streak: same walk as compute_streak, never before creation.

    Paused and archived days are passed over, neither counting nor breaking
    the streak, so it covers the same days as the habit_analytics series.
    """
    today_str = today_str or local_today()
    if parse_date(today_str) is None:
        return 0
    index = EntryIndex.of(entries)

    def is_done(day: str) -> bool:
        return is_habit_completed(habit, index, day, week_starts_on)

    floor = add_days(today_str, -lookback_days)
    if habit.created_at and habit.created_at > floor:
        floor = habit.created_at

    def is_inactive(day: str) -> bool:
        return not is_habit_active_on_date(habit, day)

    if is_inactive(today_str) or is_done(today_str):
        start = today_str
    else:
        start = add_days(today_str, -1)
    return _walk_back(is_done, start, floor, skip=is_inactive)


def _longest_run(flags: Iterable[bool]) -> int:
    longest = current = 0
    for flag in flags:
        current = current + 1 if flag else 0
        longest = max(longest, current)
    return longest


def streak_info(
    habits: Iterable[Any],
    entries: EntriesLike,
    today_str: Optional[str] = None,
    week_starts_on: int = DEFAULT_WEEK_STARTS_ON,
    lookback_days: int = DEFAULT_STREAK_LOOKBACK_DAYS,
) -> StreakInfo:
    """Current and longest all-habits streak, from the first habit to today."""
    today_str = today_str or local_today()
    habits = list(habits)
    index = EntryIndex.of(entries)
    current = compute_streak(habits, index, today_str, week_starts_on, lookback_days)

    created = [h.created_at for h in habits if h.created_at]
    first = max(min(created), add_days(today_str, -lookback_days)) if created else today_str
    longest = _longest_run(
        daily_completion(habits, index, d, week_starts_on) == 100
        for d in dates_in_range(first, today_str)
    )
    return StreakInfo(current=current, longest=max(longest, current))


def habit_analytics(
    habit: Any,
    entries: EntriesLike,
    today_str: Optional[str] = None,
    week_starts_on: int = DEFAULT_WEEK_STARTS_ON,
    lookback_days: int = DEFAULT_STREAK_LOOKBACK_DAYS,
) -> HabitAnalytics:
    """Streaks, totals and a daily series for one habit since its creation.

    Days the habit was paused or archived are left out of the series and
    of the completion rate.
    """
    today_str = today_str or local_today()
    index = EntryIndex.of(entries)
    first = habit.created_at or today_str

    series: List[DailyPoint] = []
    for day in dates_in_range(first, today_str):
        if not is_habit_active_on_date(habit, day):
            continue
        done = is_habit_completed(habit, index, day, week_starts_on)
        series.append(DailyPoint(date=day, completion=100 if done else 0))

    total_completed = sum(1 for p in series if p.completion == 100)
    current = compute_habit_streak(habit, index, today_str, week_starts_on, lookback_days)
    longest = _longest_run(p.completion == 100 for p in series)

    return HabitAnalytics(
        habit_id=habit.id,
        streak=StreakInfo(current=current, longest=max(longest, current)),
        total_completed=total_completed,
        completion_rate=completion_percent(total_completed, len(series)),
        daily_series=series,
    )
