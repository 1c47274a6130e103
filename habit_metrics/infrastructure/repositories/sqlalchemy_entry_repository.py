"""SQLAlchemy implementation of EntryRepository."""

import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from habit_metrics.models.base import utc_now
from habit_metrics.models.habit import HabitEntry

logger = logging.getLogger(__name__)


class SqlAlchemyEntryRepository:
    """Concrete EntryRepository backed by SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, habit_id: str, date: str) -> Optional[HabitEntry]:
        return await self._session.get(HabitEntry, (habit_id, date))

    async def upsert(self, habit_id: str, date: str, value: float) -> HabitEntry:
        """Create or overwrite the entry for (habit_id, date)."""
        entry = await self.get(habit_id, date)
        if entry is None:
            entry = HabitEntry(habit_id=habit_id, date=date, value=value, logged_at=utc_now())
            self._session.add(entry)
        else:
            entry.value = value
            entry.logged_at = utc_now()
        await self._session.flush()
        return entry

    async def delete(self, habit_id: str, date: str) -> int:
        result = await self._session.execute(
            delete(HabitEntry).where(
                HabitEntry.habit_id == habit_id,
                HabitEntry.date == date,
            )
        )
        return result.rowcount  # type: ignore[attr-defined]

    async def delete_for_habit(self, habit_id: str) -> int:
        result = await self._session.execute(
            delete(HabitEntry).where(HabitEntry.habit_id == habit_id)
        )
        return result.rowcount  # type: ignore[attr-defined]

    async def list_all(self) -> List[HabitEntry]:
        result = await self._session.execute(
            select(HabitEntry).order_by(HabitEntry.date, HabitEntry.habit_id)
        )
        return list(result.scalars().all())

    async def list_in_range(self, from_date: str, to_date: str) -> List[HabitEntry]:
        result = await self._session.execute(
            select(HabitEntry)
            .where(HabitEntry.date >= from_date, HabitEntry.date <= to_date)
            .order_by(HabitEntry.date, HabitEntry.habit_id)
        )
        return list(result.scalars().all())
