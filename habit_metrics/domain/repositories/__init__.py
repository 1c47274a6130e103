from .entry_repository import EntryRepository
from .habit_repository import HabitRepository
from .version_repository import VersionRepository

__all__ = ["EntryRepository", "HabitRepository", "VersionRepository"]
