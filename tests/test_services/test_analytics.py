"""
Tests for analytics bucketing, completion series and streaks.

Covers:
- Bucket layout for day, week, month, 6month and year ranges
- Bars summing completed/target over their days
- Single-habit series
- All-habits and per-habit streaks
- Per-habit analytics summary
"""

import pytest

from habit_metrics.models.habit import Habit, HabitEntry
from habit_metrics.services.analytics import (
    AnalyticsRange,
    bucket_percent,
    build_buckets,
    completion_series,
    compute_habit_streak,
    compute_streak,
    habit_analytics,
    streak_info,
)

TODAY = "2026-10-18"  # a Sunday


def _make_habit(habit_id: str = "h1", **kwargs) -> Habit:
    """Create a detached Habit instance for unit tests (no DB)."""
    return Habit(
        id=habit_id,
        name=habit_id,
        goal_type=kwargs.get("goal_type", "build"),
        kind=kwargs.get("kind", "boolean"),
        frequency=kwargs.get("frequency", "daily"),
        target=kwargs.get("target", 1),
        created_at=kwargs.get("created_at", "2026-10-01"),
        paused_at=kwargs.get("paused_at", None),
        archived_at=kwargs.get("archived_at", None),
        sort_order=0,
    )


def _done(habit_id: str, *days: int, month: int = 10):
    return [
        HabitEntry(habit_id=habit_id, date=f"2026-{month:02d}-{d:02d}", value=1)
        for d in days
    ]


class TestBuildBuckets:
    def test_day(self):
        buckets = build_buckets(AnalyticsRange.DAY, TODAY, today_str=TODAY)
        assert len(buckets) == 1
        assert buckets[0].start == buckets[0].end == TODAY
        assert buckets[0].label == "Today"

    def test_week_monday_start(self):
        buckets = build_buckets(AnalyticsRange.WEEK, TODAY, 1)
        assert [b.label for b in buckets] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
        assert buckets[0].start == "2026-10-12"
        assert buckets[-1].end == TODAY

    def test_week_sunday_start(self):
        buckets = build_buckets(AnalyticsRange.WEEK, TODAY, 0)
        assert [b.label for b in buckets][:2] == ["Sun", "Mon"]
        assert buckets[0].start == TODAY
        assert buckets[-1].end == "2026-10-24"

    def test_month_segments(self):
        buckets = build_buckets(AnalyticsRange.MONTH, TODAY)
        assert len(buckets) == 5
        assert buckets[0].start == "2026-10-01"
        assert buckets[-1].label == "Oct 29-31"

    def test_six_months(self):
        buckets = build_buckets(AnalyticsRange.SIX_MONTHS, TODAY)
        assert [b.label for b in buckets] == ["May", "Jun", "Jul", "Aug", "Sep", "Oct"]

    def test_year(self):
        buckets = build_buckets(AnalyticsRange.YEAR, TODAY)
        assert len(buckets) == 12
        assert buckets[0].start == "2025-11-01"
        assert buckets[-1].end == "2026-10-31"

    def test_accepts_plain_string(self):
        assert len(build_buckets("6month", TODAY)) == 6

    def test_malformed_end_date(self):
        assert build_buckets(AnalyticsRange.WEEK, "18.10.2026") == []

    def test_bucket_percent(self):
        assert bucket_percent(0, 0) == 0
        assert bucket_percent(2, 7) == 29
        assert bucket_percent(9, 3) == 100


class TestCompletionSeries:
    def test_week_bars_stop_at_end_date(self):
        habits = [_make_habit()]
        entries = _done("h1", 12, 13)
        bars = completion_series(habits, entries, AnalyticsRange.WEEK, "2026-10-14", 1)

        assert [(b.completed, b.target) for b in bars] == [
            (1, 1),
            (1, 1),
            (0, 1),
            (0, 0),
            (0, 0),
            (0, 0),
            (0, 0),
        ]
        assert [b.percent for b in bars][:3] == [100, 100, 0]

    def test_month_bars_sum_over_segment(self):
        habits = [_make_habit()]
        entries = _done("h1", 12, 13)
        bars = completion_series(habits, entries, AnalyticsRange.MONTH, "2026-10-14", 1)

        assert (bars[0].completed, bars[0].target) == (0, 7)
        assert (bars[1].completed, bars[1].target) == (2, 7)
        assert bars[1].percent == 29
        assert bars[2].target == 0

    def test_target_counts_active_habits_per_day(self):
        habits = [_make_habit("a"), _make_habit("b", created_at="2026-10-13")]
        entries = _done("a", 12, 13) + _done("b", 13)
        bars = completion_series(habits, entries, AnalyticsRange.WEEK, "2026-10-13", 1)

        assert (bars[0].completed, bars[0].target) == (1, 1)
        assert (bars[1].completed, bars[1].target) == (2, 2)

    def test_single_habit_view(self):
        habits = [_make_habit("a"), _make_habit("b")]
        entries = _done("a", 12) + _done("b", 12, 13)
        bars = completion_series(
            habits, entries, AnalyticsRange.WEEK, "2026-10-13", 1, habit_id="b"
        )
        assert (bars[0].completed, bars[0].target) == (1, 1)
        assert (bars[1].completed, bars[1].target) == (1, 1)

    def test_single_habit_view_skips_paused_days(self):
        habits = [_make_habit("a", paused_at="2026-10-13")]
        entries = _done("a", 12, 13)
        bars = completion_series(
            habits, entries, AnalyticsRange.WEEK, "2026-10-14", 1, habit_id="a"
        )
        assert bars[0].target == 1
        assert bars[1].target == 0

    def test_unknown_habit_yields_empty_bars(self):
        bars = completion_series(
            [_make_habit()], _done("h1", 12), AnalyticsRange.WEEK, TODAY, 1, habit_id="nope"
        )
        assert len(bars) == 7
        assert all(b.target == 0 and b.percent == 0 for b in bars)

    def test_no_habits(self):
        bars = completion_series([], [], AnalyticsRange.YEAR, TODAY)
        assert len(bars) == 12
        assert all(b.percent == 0 for b in bars)


class TestStreaks:
    def test_unfinished_today_does_not_break_streak(self):
        habits = [_make_habit()]
        assert compute_streak(habits, _done("h1", 15, 16, 17), TODAY) == 3

    def test_finished_today_extends_streak(self):
        habits = [_make_habit()]
        assert compute_streak(habits, _done("h1", 15, 16, 17, 18), TODAY) == 4

    def test_gap_ends_streak(self):
        habits = [_make_habit()]
        assert compute_streak(habits, _done("h1", 14, 16, 17), TODAY) == 2

    def test_no_habits_no_streak(self):
        assert compute_streak([], [], TODAY) == 0

    def test_lookback_limits_walk(self):
        habits = [_make_habit(goal_type="break", kind="numeric", target=1, created_at="2026-01-01")]
        assert compute_streak(habits, [], TODAY, lookback_days=2) == 3

    def test_habit_streak_stops_at_creation(self):
        # a break habit with nothing logged is compliant every day
        habit = _make_habit(goal_type="break", kind="numeric", target=1, created_at="2026-10-10")
        assert compute_habit_streak(habit, [], TODAY) == 9

    def test_habit_streak(self):
        habit = _make_habit()
        assert compute_habit_streak(habit, _done("h1", 16, 17), TODAY) == 2

    def test_habit_streak_passes_over_paused_days(self):
        habit = _make_habit(paused_at="2026-10-15")
        assert compute_habit_streak(habit, _done("h1", 12, 13, 14), TODAY) == 3

    @pytest.mark.parametrize("today_str", [TODAY, "2026-10-30"])
    def test_archived_break_habit_streak_is_frozen(self, today_str):
        habit = _make_habit(goal_type="break", kind="numeric", target=1, archived_at="2026-10-15")
        assert compute_habit_streak(habit, [], today_str) == 14

    def test_malformed_today(self):
        assert compute_streak([_make_habit()], [], "today") == 0
        assert compute_habit_streak(_make_habit(), [], "today") == 0

    def test_streak_info_current_and_longest(self):
        habits = [_make_habit()]
        entries = _done("h1", 1, 2, 3, 4, 5, 10, 11, 12, 17, 18)
        info = streak_info(habits, entries, TODAY)
        assert info.current == 2
        assert info.longest == 5


class TestHabitAnalytics:
    def test_summary(self):
        habit = _make_habit(created_at="2026-10-10")
        result = habit_analytics(habit, _done("h1", 10, 11, 12, 17, 18), TODAY)

        assert result.habit_id == "h1"
        assert len(result.daily_series) == 9
        assert result.total_completed == 5
        assert result.completion_rate == 56
        assert result.streak.current == 2
        assert result.streak.longest == 3

    def test_paused_days_left_out(self):
        habit = _make_habit(created_at="2026-10-10", paused_at="2026-10-15")
        result = habit_analytics(habit, _done("h1", 10, 11, 12), TODAY)

        assert [p.date for p in result.daily_series][-1] == "2026-10-14"
        assert len(result.daily_series) == 5
        assert result.completion_rate == 60

    def test_archived_break_habit_streaks_agree_with_series(self):
        habit = _make_habit(goal_type="break", kind="numeric", target=1, archived_at="2026-10-15")
        result = habit_analytics(habit, [], TODAY)

        assert len(result.daily_series) == 14
        assert result.streak.current == 14
        assert result.streak.longest == 14

    @pytest.mark.parametrize("created_at", ["2026-10-18", "2026-10-19"])
    def test_new_habit(self, created_at):
        result = habit_analytics(_make_habit(created_at=created_at), [], TODAY)
        assert result.total_completed == 0
        assert result.completion_rate == 0
