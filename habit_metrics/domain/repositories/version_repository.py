"""VersionRepository protocol — persisted habits/entries change counters."""

from typing import Protocol, Tuple, runtime_checkable


@runtime_checkable
class VersionRepository(Protocol):
    """Counters that only ever increase for a given store.

    Readers key memoized results on ``(habits_version, entries_version)``,
    so the values must survive across sessions and service instances.
    """

    async def get(self) -> Tuple[int, int]:
        """Current ``(habits_version, entries_version)``; ``(0, 0)`` when unset."""
        ...

    async def bump(self, *, habits: bool = False, entries: bool = False) -> Tuple[int, int]:
        """Increment the selected counters in the pending transaction.

        Returns:
            The new ``(habits_version, entries_version)``.
        """
        ...
