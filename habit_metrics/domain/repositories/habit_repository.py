"""HabitRepository protocol — defines habit persistence contract."""

from typing import List, Optional, Protocol, runtime_checkable


@runtime_checkable
class HabitRepository(Protocol):
    """Repository interface for Habit entity access and persistence."""

    async def get(self, habit_id: str) -> Optional[object]:
        """Look up a habit by ID.

        Returns:
            The Habit object, or None if not found.
        """
        ...

    async def list_all(self) -> List[object]:
        """Every habit, archived ones included, ordered by sort_order."""
        ...

    async def add(self, habit: object) -> object:
        """Persist a new habit and return it."""
        ...

    async def delete(self, habit_id: str) -> int:
        """Delete a habit row. Returns the number of rows removed."""
        ...
