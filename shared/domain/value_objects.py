"""
Common Value Objects

Value objects used across multiple apps:
- DateRange: an inclusive range of calendar days (rental start to end)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from shared.domain.base import ValueObject


def as_date(value) -> date | None:
    """Coerce a datetime or ISO string to a calendar date; empty stays None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    raise TypeError(f"Cannot convert {value!r} to date")


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents a range from start_date to end_date, both inclusive.
    A rental that starts and ends on the same day occupies that day.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        # Validation
        if self.start_date > self.end_date:
            raise ValueError(f"Start date ({self.start_date}) must not be after end date ({self.end_date})")

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Check if this range overlaps with another

        Both ends are inclusive, so ranges sharing a boundary day overlap.

        Examples:
            - DateRange(10, 15) overlaps with DateRange(15, 20) -> True
            - DateRange(10, 15) overlaps with DateRange(16, 20) -> False
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")

        return (self.start_date <= other.end_date and
                self.end_date >= other.start_date)

    def __str__(self):
        return f"{self.start_date.strftime('%d.%m.%Y')} - {self.end_date.strftime('%d.%m.%Y')}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"
