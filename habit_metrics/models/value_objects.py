"""Domain value objects shared by the ORM models and the metrics engine."""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple

ENTRY_ID_SEPARATOR = "_"


class GoalType(str, Enum):
    """Direction of a habit.

    BUILD accumulates toward a target; BREAK stays under a limit.
    """

    BUILD = "build"
    BREAK = "break"


class HabitKind(str, Enum):
    BOOLEAN = "boolean"
    NUMERIC = "numeric"


class Frequency(str, Enum):
    """Aggregation window for a habit's current value."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class EntryKey(NamedTuple):
    """Identity of a log entry: one habit on one calendar day.

    Kept as two fields so habit ids containing the separator can never
    collide with another habit's entries.
    """

    habit_id: str
    date: str

    @property
    def entry_id(self) -> str:
        return entry_id(self.habit_id, self.date)


def entry_id(habit_id: str, date: str) -> str:
    """Flat string form of an entry's identity (``habitId_date``)."""
    return f"{habit_id}{ENTRY_ID_SEPARATOR}{date}"
