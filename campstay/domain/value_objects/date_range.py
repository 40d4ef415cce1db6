"""Value Object DateRange - half-open stay interval."""

import math
from dataclasses import dataclass
from datetime import date, timedelta

from campstay.domain.errors import InvalidDateRangeError


@dataclass(frozen=True)
class DateRange:
    """
    Immutable `[start, end)` interval of calendar dates.

    `start` is the check-in date and `end` the check-out date, so the night
    of `end` is not part of the stay.

    Attributes:
        start: First night of the stay.
        end: Check-out date (exclusive).
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise InvalidDateRangeError(
                f"end date must be after start date: {self.start} >= {self.end}"
            )

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def nights(self) -> int:
        """Number of nights, any partial day counting as a full one."""
        return math.ceil(self.duration.total_seconds() / timedelta(days=1).total_seconds())

    def overlaps_with(self, other: "DateRange") -> bool:
        """Half-open overlap: touching boundaries do not collide."""
        return self.start < other.end and other.start < self.end

    def starts_before(self, day: date) -> bool:
        return self.start < day

    def __str__(self) -> str:
        return f"{self.start.isoformat()} -> {self.end.isoformat()}"

    @classmethod
    def for_stay(cls, start: date, end: date, today: date) -> "DateRange":
        """Build a range for a new stay, rejecting past check-in dates."""
        stay = cls(start=start, end=end)
        if stay.starts_before(today):
            raise InvalidDateRangeError(f"start date {start} is in the past")
        return stay
