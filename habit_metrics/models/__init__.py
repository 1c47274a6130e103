from .base import Base, TimestampMixin
from .habit import Habit, HabitEntry
from .preferences import Preferences
from .store_version import StoreVersion
from .value_objects import EntryKey, Frequency, GoalType, HabitKind, entry_id

__all__ = [
    "Base",
    "TimestampMixin",
    "Habit",
    "HabitEntry",
    "Preferences",
    "StoreVersion",
    "EntryKey",
    "Frequency",
    "GoalType",
    "HabitKind",
    "entry_id",
]
