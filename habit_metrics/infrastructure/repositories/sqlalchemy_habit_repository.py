"""SQLAlchemy implementation of HabitRepository."""

import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from habit_metrics.models.habit import Habit

logger = logging.getLogger(__name__)


class SqlAlchemyHabitRepository:
    """Concrete HabitRepository backed by SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, habit_id: str) -> Optional[Habit]:
        """Look up a habit by ID."""
        return await self._session.get(Habit, habit_id)

    async def list_all(self) -> List[Habit]:
        """Every habit ordered by sort_order, then creation date."""
        result = await self._session.execute(
            select(Habit).order_by(Habit.sort_order, Habit.created_at, Habit.id)
        )
        return list(result.scalars().all())

    async def add(self, habit: Habit) -> Habit:
        """Persist a new habit and return it."""
        self._session.add(habit)
        await self._session.flush()
        return habit

    async def delete(self, habit_id: str) -> int:
        result = await self._session.execute(delete(Habit).where(Habit.id == habit_id))
        return result.rowcount  # type: ignore[attr-defined]
