from .sqlalchemy_entry_repository import SqlAlchemyEntryRepository
from .sqlalchemy_habit_repository import SqlAlchemyHabitRepository
from .sqlalchemy_version_repository import SqlAlchemyVersionRepository

__all__ = [
    "SqlAlchemyEntryRepository",
    "SqlAlchemyHabitRepository",
    "SqlAlchemyVersionRepository",
]
