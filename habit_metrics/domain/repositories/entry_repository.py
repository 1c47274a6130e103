"""EntryRepository protocol — defines log entry persistence contract."""

from typing import List, Optional, Protocol, runtime_checkable


@runtime_checkable
class EntryRepository(Protocol):
    """Repository interface for HabitEntry access and persistence.

    Entries are identified by (habit_id, date); there is at most one per
    habit per day.
    """

    async def get(self, habit_id: str, date: str) -> Optional[object]:
        """The entry for a habit on a date, or None."""
        ...

    async def upsert(self, habit_id: str, date: str, value: float) -> object:
        """Create or overwrite the entry for (habit_id, date).

        Args:
            habit_id: Owning habit.
            date: Local YYYY-MM-DD.
            value: New logged value (replaces any previous one).

        Returns:
            The persisted HabitEntry.
        """
        ...

    async def delete(self, habit_id: str, date: str) -> int:
        """Remove one entry. Returns the number of rows removed."""
        ...

    async def delete_for_habit(self, habit_id: str) -> int:
        """Remove every entry of a habit. Returns the number removed."""
        ...

    async def list_all(self) -> List[object]:
        """Every entry, ordered by date then habit."""
        ...

    async def list_in_range(self, from_date: str, to_date: str) -> List[object]:
        """Entries with from_date <= date <= to_date."""
        ...
