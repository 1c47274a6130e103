"""
Day summary: the three numbers every view shows for a date.

Home ring, calendar cells and analytics all read a day through
``get_day_summary`` so they can never disagree about the same date.
"""

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Hashable, Iterable, Optional, Sequence, Tuple

from ..core.typed_config import ScoreOptions
from .aggregates import daily_completion, daily_only_completion
from .calendar_dates import DEFAULT_WEEK_STARTS_ON
from .daily_score import calculate_daily_score
from .entry_lookup import EntriesLike, EntryIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DaySummary:
    # Model B score, 0-100
    daily_score: float
    # daily habits only; drives the home ring and week strip
    daily_only_completion_pct: int
    # all habits; drives calendar and analytics
    completion_pct: int


def get_day_summary(
    habits: Iterable[Any],
    entries: EntriesLike,
    date: str,
    week_starts_on: int = DEFAULT_WEEK_STARTS_ON,
    options: Optional[ScoreOptions] = None,
) -> DaySummary:
    """Compute the day summary for ``date`` from habits and entries."""
    habits = list(habits)
    index = EntryIndex.of(entries)
    return DaySummary(
        daily_score=calculate_daily_score(habits, index, date, week_starts_on, options),
        daily_only_completion_pct=daily_only_completion(habits, index, date, week_starts_on),
        completion_pct=daily_completion(habits, index, date, week_starts_on),
    )


class DaySummaryCache:
    """
    Bounded, thread-safe memo of day summaries.

    Keyed by (date, habits_version, entries_version, week_starts_on, options).
    Callers bump a version whenever the store changes, so stale summaries
    are simply never looked up again and age out of the LRU order.
    """

    def __init__(self, max_size: int = 366):
        self._cache: "OrderedDict[Tuple[Hashable, ...], DaySummary]" = OrderedDict()
        self._max_size = max_size
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get_or_compute(
        self,
        habits: Sequence[Any],
        entries: EntriesLike,
        date: str,
        *,
        habits_version: int,
        entries_version: int,
        week_starts_on: int = DEFAULT_WEEK_STARTS_ON,
        options: Optional[ScoreOptions] = None,
    ) -> DaySummary:
        key = (date, habits_version, entries_version, week_starts_on, options)
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
                self.hits += 1
                return self._cache[key]

        summary = get_day_summary(habits, entries, date, week_starts_on, options)

        with self._lock:
            self.misses += 1
            self._cache[key] = summary
            self._cache.move_to_end(key)
            while len(self._cache) > self._max_size:
                self._cache.popitem(last=False)
        return summary

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
