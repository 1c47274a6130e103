"""
Habit definitions and their daily log entries.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, utc_now
from .value_objects import EntryKey, entry_id


class Habit(Base):
    """
    A habit the user tracks toward a goal (build) or under a limit (break).

    Dates are local ``YYYY-MM-DD`` strings. ``paused_at`` and ``archived_at``
    only take effect from their own date forward, so past history is kept.
    """

    __tablename__ = "habits"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    icon: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)

    goal_type: Mapped[Optional[str]] = mapped_column(
        String(10), nullable=True, default="build"
    )  # build, break
    kind: Mapped[str] = mapped_column(
        String(10), nullable=False, default="boolean"
    )  # boolean, numeric
    frequency: Mapped[str] = mapped_column(
        String(10), nullable=False, default="daily"
    )  # daily, weekly, monthly
    target: Mapped[float] = mapped_column(Float, nullable=False, default=1)
    unit: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    reminder_time: Mapped[Optional[str]] = mapped_column(
        String(5), nullable=True
    )  # HH:MM

    # Lifecycle
    created_at: Mapped[str] = mapped_column(String(10), nullable=False)
    paused_at: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    archived_at: Mapped[Optional[str]] = mapped_column(
        String(10), nullable=True, index=True
    )

    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return (
            f"<Habit(id={self.id}, name={self.name}, goal_type={self.goal_type}, "
            f"frequency={self.frequency}, target={self.target})>"
        )


class HabitEntry(Base):
    """Logged value for one habit on one local calendar day."""

    __tablename__ = "habit_entries"

    habit_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("habits.id", ondelete="CASCADE"), primary_key=True
    )
    date: Mapped[str] = mapped_column(String(10), primary_key=True)

    # boolean habits store 0 or 1
    value: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    logged_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    @property
    def key(self) -> EntryKey:
        return EntryKey(self.habit_id, self.date)

    @property
    def id(self) -> str:
        return entry_id(self.habit_id, self.date)

    def __repr__(self) -> str:
        return f"<HabitEntry(habit_id={self.habit_id}, date={self.date}, value={self.value})>"
