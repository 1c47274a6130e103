"""Settings provider: the user's week-start preference.

Every weekly aggregation takes ``week_starts_on``; this service is where
callers read it from.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.typed_config import DEFAULT_WEEK_START, coerce_week_starts_on
from ..models.preferences import PREFERENCES_ROW_ID, Preferences

logger = logging.getLogger(__name__)


class PreferencesService:
    """Reads and writes the single preferences row."""

    def __init__(self, session: AsyncSession, default_week_starts_on: int = DEFAULT_WEEK_START) -> None:
        self._session = session
        self._default = coerce_week_starts_on(default_week_starts_on)

    async def _row(self) -> Optional[Preferences]:
        return await self._session.get(Preferences, PREFERENCES_ROW_ID)

    async def get_week_starts_on(self) -> int:
        """0 (Sunday) or 1 (Monday); the configured default when unset."""
        row = await self._row()
        if row is None:
            return self._default
        return coerce_week_starts_on(row.week_starts_on, self._default)

    async def set_week_starts_on(self, value: object) -> int:
        """Store a week start; anything other than 0/1 is stored as the default."""
        week_starts_on = coerce_week_starts_on(value, self._default)
        row = await self._row()
        if row is None:
            row = Preferences(id=PREFERENCES_ROW_ID, week_starts_on=week_starts_on)
            self._session.add(row)
        else:
            row.week_starts_on = week_starts_on
        await self._session.commit()
        logger.info("Week now starts on %s", week_starts_on)
        return week_starts_on
