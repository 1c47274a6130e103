"""Tests for typed domain errors."""

import pytest

from habit_metrics.domain.errors import (
    DomainError,
    HabitNotFound,
    InvalidEntryDate,
    InvalidHabitDefinition,
)


class TestDomainErrors:
    def test_hierarchy(self):
        assert issubclass(HabitNotFound, DomainError)
        assert issubclass(InvalidHabitDefinition, DomainError)
        assert issubclass(InvalidEntryDate, DomainError)

    def test_habit_not_found_carries_id(self):
        err = HabitNotFound("abc")
        assert err.habit_id == "abc"
        assert "abc" in str(err)

    def test_invalid_definition_carries_field(self):
        err = InvalidHabitDefinition("target", -1)
        assert err.field == "target"
        assert err.value == -1
        assert "target" in str(err)

    def test_invalid_entry_date_carries_date(self):
        err = InvalidEntryDate("2026-13-01")
        assert err.date == "2026-13-01"
        assert "2026-13-01" in str(err)

    def test_catchable_as_domain_error(self):
        with pytest.raises(DomainError):
            raise HabitNotFound("x")
