"""
Persisted change counters for the habit store.
"""

from sqlalchemy import Integer
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

STORE_VERSION_ROW_ID = 1


class StoreVersion(Base):
    """Single-row table; each store commit bumps the counter it touched."""

    __tablename__ = "store_versions"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, default=STORE_VERSION_ROW_ID
    )
    habits_version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    entries_version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return (
            f"<StoreVersion(habits={self.habits_version}, "
            f"entries={self.entries_version})>"
        )
