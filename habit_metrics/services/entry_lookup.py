"""
Lookup of logged values by (habit, date).

Engine functions accept either a prepared ``EntryIndex`` or any iterable of
entry-like objects (``habit_id``, ``date``, ``value`` attributes). Top-level
computations build the index once and pass it down, so each value lookup is
a dict access instead of a scan of the whole log.
"""

import logging
import math
from typing import Any, Dict, Iterable, Iterator, Union

from ..models.value_objects import EntryKey, entry_id

logger = logging.getLogger(__name__)

__all__ = ["EntryIndex", "EntryKey", "EntriesLike", "entry_id", "entry_value"]


def _coerce_value(raw: Any) -> float:
    """Turn a stored value into a finite number; anything else counts as 0."""
    if isinstance(raw, bool):
        return int(raw)
    if isinstance(raw, (int, float)):
        return raw if math.isfinite(raw) else 0
    try:
        number = float(raw)
    except (TypeError, ValueError):
        return 0
    return number if math.isfinite(number) else 0


class EntryIndex:
    """Mapping of ``EntryKey(habit_id, date)`` to the logged value.

    When the source holds two entries for the same key the later one wins,
    matching upsert semantics of the store.
    """

    __slots__ = ("_values",)

    def __init__(self, entries: Iterable[Any] = ()) -> None:
        self._values: Dict[EntryKey, float] = {}
        for entry in entries:
            self._values[EntryKey(entry.habit_id, entry.date)] = _coerce_value(
                entry.value
            )

    @classmethod
    def of(cls, entries: "EntriesLike") -> "EntryIndex":
        """Return ``entries`` itself if already indexed, else index it."""
        if isinstance(entries, EntryIndex):
            return entries
        return cls(entries)

    def value(self, habit_id: str, date: str) -> float:
        return self._values.get(EntryKey(habit_id, date), 0)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[EntryKey]:
        return iter(self._values)


EntriesLike = Union[EntryIndex, Iterable[Any]]


def entry_value(entries: EntriesLike, habit_id: str, date: str) -> float:
    """Logged value for a habit on a date, or 0 when nothing was logged."""
    return EntryIndex.of(entries).value(habit_id, date)
