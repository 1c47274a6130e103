"""
Persisted user preferences consumed by the metrics engine.
"""

from sqlalchemy import Integer
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin

PREFERENCES_ROW_ID = 1


class Preferences(Base, TimestampMixin):
    """Single-row table holding the user's display preferences."""

    __tablename__ = "preferences"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, default=PREFERENCES_ROW_ID
    )
    week_starts_on: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1
    )  # 0 = Sunday, 1 = Monday

    def __repr__(self) -> str:
        return f"<Preferences(week_starts_on={self.week_starts_on})>"
