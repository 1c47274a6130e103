"""
Typed domain errors for the habit store.

The metrics engine itself never raises for bad data; these cover store
actions where the caller asked for something that does not exist or
cannot be represented.
"""


class DomainError(Exception):
    """Base class for all domain-specific errors."""


class HabitNotFound(DomainError):
    """Habit with the given ID does not exist."""

    def __init__(self, habit_id: str) -> None:
        self.habit_id = habit_id
        super().__init__(f"Habit {habit_id} not found")


class InvalidHabitDefinition(DomainError):
    """A habit draft or patch carries a value outside its allowed set."""

    def __init__(self, field: str, value: object) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Invalid value for {field}: {value!r}")


class InvalidEntryDate(DomainError):
    """An entry write named a date that is not a local YYYY-MM-DD day."""

    def __init__(self, date: object) -> None:
        self.date = date
        super().__init__(f"Invalid entry date: {date!r}")
