"""SQLAlchemy implementation of VersionRepository."""

from typing import Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from habit_metrics.models.store_version import STORE_VERSION_ROW_ID, StoreVersion


class SqlAlchemyVersionRepository:
    """Concrete VersionRepository over the single ``store_versions`` row."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self) -> Tuple[int, int]:
        row = await self._session.get(
            StoreVersion, STORE_VERSION_ROW_ID, populate_existing=True
        )
        if row is None:
            return 0, 0
        return row.habits_version, row.entries_version

    async def bump(self, *, habits: bool = False, entries: bool = False) -> Tuple[int, int]:
        row = await self._session.get(
            StoreVersion, STORE_VERSION_ROW_ID, populate_existing=True
        )
        if row is None:
            row = StoreVersion(id=STORE_VERSION_ROW_ID, habits_version=0, entries_version=0)
            self._session.add(row)
        if habits:
            row.habits_version += 1
        if entries:
            row.entries_version += 1
        await self._session.flush()
        return row.habits_version, row.entries_version
