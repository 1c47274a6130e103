"""
Habit/entry store actions.

Persistence collaborator for the metrics engine: creates, edits and logs
habits through the repositories, committing one transaction per action.
Each commit bumps a persisted version counter in the same transaction, so
readers can key memoized summaries (see DaySummaryCache) on
(habits_version, entries_version) across sessions.
"""

import logging
import math
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..domain.errors import HabitNotFound, InvalidEntryDate, InvalidHabitDefinition
from ..domain.repositories import EntryRepository, HabitRepository, VersionRepository
from ..infrastructure.repositories import (
    SqlAlchemyEntryRepository,
    SqlAlchemyHabitRepository,
    SqlAlchemyVersionRepository,
)
from ..models.habit import Habit, HabitEntry
from ..models.value_objects import Frequency, GoalType, HabitKind
from .calendar_dates import parse_date, today

logger = logging.getLogger(__name__)

# Fields a caller may change through update_habit.
_EDITABLE_FIELDS = frozenset(
    {
        "name",
        "icon",
        "goal_type",
        "kind",
        "frequency",
        "target",
        "unit",
        "reminder_time",
        "paused_at",
        "archived_at",
        "sort_order",
    }
)

_ENUM_FIELDS = {
    "goal_type": GoalType,
    "kind": HabitKind,
    "frequency": Frequency,
}


@dataclass(frozen=True)
class StoreSnapshot:
    """Habits and entries read together, with the versions they reflect."""

    habits: List[Habit]
    entries: List[HabitEntry]
    habits_version: int
    entries_version: int


def _new_habit_id() -> str:
    # hex only: never contains the entry-id separator
    return uuid.uuid4().hex


def _validate_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    clean: Dict[str, Any] = {}
    for name, value in fields.items():
        if name not in _EDITABLE_FIELDS:
            raise InvalidHabitDefinition(name, value)
        if name in _ENUM_FIELDS and value is not None:
            try:
                value = _ENUM_FIELDS[name](value).value
            except ValueError:
                raise InvalidHabitDefinition(name, value) from None
        if name == "target":
            if (
                isinstance(value, bool)
                or not isinstance(value, (int, float))
                or not math.isfinite(value)
                or value <= 0
            ):
                raise InvalidHabitDefinition(name, value)
        if name in ("paused_at", "archived_at") and value is not None:
            if parse_date(value) is None:
                raise InvalidHabitDefinition(name, value)
        clean[name] = value
    if clean.get("kind") == HabitKind.BOOLEAN.value:
        clean["target"] = 1
    return clean


class HabitStoreService:
    """Store actions over habits and entries.

    Args:
        session: Async session used for commits (and to build the default
            SQLAlchemy repositories).
        habits: Optional HabitRepository override.
        entries: Optional EntryRepository override.
        versions: Optional VersionRepository override.
        clock: Returns today's local date; injectable for tests.
    """

    def __init__(
        self,
        session: AsyncSession,
        habits: Optional[HabitRepository] = None,
        entries: Optional[EntryRepository] = None,
        clock: Callable[[], str] = today,
        versions: Optional[VersionRepository] = None,
    ) -> None:
        self._session = session
        self._habits = habits or SqlAlchemyHabitRepository(session)
        self._entries = entries or SqlAlchemyEntryRepository(session)
        self._versions = versions or SqlAlchemyVersionRepository(session)
        self._clock = clock
        # last persisted versions this instance committed or read
        self.habits_version = 0
        self.entries_version = 0

    # --- Internal helpers ---

    async def _require(self, habit_id: str) -> Habit:
        habit = await self._habits.get(habit_id)
        if habit is None:
            raise HabitNotFound(habit_id)
        return habit

    async def _commit(self, *, habits: bool = False, entries: bool = False) -> None:
        versions = await self._versions.bump(habits=habits, entries=entries)
        await self._session.commit()
        self.habits_version, self.entries_version = versions

    async def _commit_habits(self) -> None:
        await self._commit(habits=True)

    async def _commit_entries(self) -> None:
        await self._commit(entries=True)

    def _check_date(self, date: str) -> str:
        if parse_date(date) is None:
            raise InvalidEntryDate(date)
        return date

    async def _next_sort_order(self) -> int:
        orders = [h.sort_order for h in await self._habits.list_all() if h.archived_at is None]
        return max(orders) + 1 if orders else 0

    # --- Habit actions ---

    async def add_habit(
        self,
        name: str,
        *,
        kind: str = HabitKind.BOOLEAN.value,
        frequency: str = Frequency.DAILY.value,
        target: float = 1,
        goal_type: str = GoalType.BUILD.value,
        unit: Optional[str] = None,
        icon: Optional[str] = None,
        reminder_time: Optional[str] = None,
    ) -> Habit:
        """Create a habit starting today, appended to the end of the list."""
        fields = _validate_fields(
            {
                "name": name,
                "kind": kind,
                "frequency": frequency,
                "target": target,
                "goal_type": goal_type,
                "unit": unit,
                "icon": icon,
                "reminder_time": reminder_time,
            }
        )
        habit = Habit(
            id=_new_habit_id(),
            created_at=self._clock(),
            paused_at=None,
            archived_at=None,
            sort_order=await self._next_sort_order(),
            **fields,
        )
        await self._habits.add(habit)
        await self._commit_habits()
        logger.info("Added habit %s (%s, %s)", habit.id, habit.goal_type, habit.frequency)
        return habit

    async def update_habit(self, habit_id: str, **patch: Any) -> Habit:
        """Apply a partial update; ``id`` and ``created_at`` cannot change."""
        habit = await self._require(habit_id)
        fields = _validate_fields(patch)
        for name, value in fields.items():
            setattr(habit, name, value)
        if habit.kind == HabitKind.BOOLEAN.value:
            habit.target = 1
        await self._commit_habits()
        return habit

    async def pause_habit(self, habit_id: str, on_date: Optional[str] = None) -> Habit:
        """Stop counting the habit from ``on_date`` (default today) forward."""
        habit = await self._require(habit_id)
        habit.paused_at = _validate_fields({"paused_at": on_date or self._clock()})[
            "paused_at"
        ]
        await self._commit_habits()
        return habit

    async def unpause_habit(self, habit_id: str) -> Habit:
        habit = await self._require(habit_id)
        habit.paused_at = None
        await self._commit_habits()
        return habit

    async def archive_habit(self, habit_id: str) -> Habit:
        """Soft delete from today forward; history and entries are kept."""
        habit = await self._require(habit_id)
        habit.archived_at = self._clock()
        await self._commit_habits()
        logger.info("Archived habit %s on %s", habit_id, habit.archived_at)
        return habit

    async def unarchive_habit(self, habit_id: str) -> Habit:
        """Restore an archived habit at the end of the active list."""
        habit = await self._require(habit_id)
        habit.sort_order = await self._next_sort_order()
        habit.archived_at = None
        await self._commit_habits()
        return habit

    async def delete_habit(self, habit_id: str) -> None:
        """Hard delete: removes the habit and all of its entries."""
        await self._require(habit_id)
        removed = await self._entries.delete_for_habit(habit_id)
        await self._habits.delete(habit_id)
        await self._commit(habits=True, entries=True)
        logger.info("Deleted habit %s and %d entries", habit_id, removed)

    async def reorder_habits(self, ordered_ids: List[str]) -> None:
        """Assign sort_order from position in ``ordered_ids``; others untouched."""
        positions = {habit_id: i for i, habit_id in enumerate(ordered_ids)}
        for habit in await self._habits.list_all():
            if habit.id in positions:
                habit.sort_order = positions[habit.id]
        await self._commit_habits()

    # --- Entry actions ---

    async def log_entry(self, habit_id: str, date: str, value: float) -> HabitEntry:
        """Upsert the entry for (habit_id, date), replacing any previous value."""
        await self._require(habit_id)
        self._check_date(date)
        entry = await self._entries.upsert(habit_id, date, value)
        await self._commit_entries()
        return entry

    async def increment_entry(
        self, habit_id: str, date: str, step: float = 1
    ) -> HabitEntry:
        """Add ``step`` to the day's value, starting from 0 when unlogged."""
        await self._require(habit_id)
        self._check_date(date)
        existing = await self._entries.get(habit_id, date)
        current = existing.value if existing is not None else 0
        entry = await self._entries.upsert(habit_id, date, current + step)
        await self._commit_entries()
        return entry

    async def decrement_entry(
        self, habit_id: str, date: str, step: float = 1
    ) -> Optional[HabitEntry]:
        """Subtract ``step``, clamped at 0; an entry reaching 0 is removed.

        Returns:
            The updated entry, or None when it was removed.
        """
        await self._require(habit_id)
        self._check_date(date)
        existing = await self._entries.get(habit_id, date)
        current = existing.value if existing is not None else 0
        new_value = max(0, current - step)
        if new_value == 0:
            if existing is not None:
                await self._entries.delete(habit_id, date)
                await self._commit_entries()
            return None
        entry = await self._entries.upsert(habit_id, date, new_value)
        await self._commit_entries()
        return entry

    async def delete_entry(self, habit_id: str, date: str) -> None:
        removed = await self._entries.delete(habit_id, date)
        if removed:
            await self._commit_entries()

    # --- Reads ---

    async def list_habits(self) -> List[Habit]:
        return await self._habits.list_all()

    async def list_entries(self) -> List[HabitEntry]:
        return await self._entries.list_all()

    async def active_habits(self) -> List[Habit]:
        """Non-archived habits by sort_order."""
        habits = [h for h in await self._habits.list_all() if h.archived_at is None]
        return sorted(habits, key=lambda h: h.sort_order)

    async def archived_habits(self) -> List[Habit]:
        """Archived habits, most recently archived first."""
        habits = [h for h in await self._habits.list_all() if h.archived_at is not None]
        return sorted(habits, key=lambda h: h.archived_at, reverse=True)

    async def get_habit(self, habit_id: str) -> Habit:
        return await self._require(habit_id)

    async def get_entry(self, habit_id: str, date: str) -> Optional[HabitEntry]:
        return await self._entries.get(habit_id, date)

    async def entries_for_date(self, date: str) -> List[HabitEntry]:
        return await self._entries.list_in_range(date, date)

    async def entries_in_range(self, from_date: str, to_date: str) -> List[HabitEntry]:
        return await self._entries.list_in_range(from_date, to_date)

    async def snapshot(self) -> StoreSnapshot:
        """Everything the metrics engine needs, read in one go.

        Versions are read before the rows, so a snapshot is never labelled
        newer than its data.
        """
        self.habits_version, self.entries_version = await self._versions.get()
        return StoreSnapshot(
            habits=await self._habits.list_all(),
            entries=await self._entries.list_all(),
            habits_version=self.habits_version,
            entries_version=self.entries_version,
        )
