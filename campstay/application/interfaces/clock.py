"""Clock port - abstraction over the system time."""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone


class Clock(ABC):
    """
    Source of "now" for the use cases.

    Lets tests inject a fixed time so date rules stay deterministic.
    """

    @abstractmethod
    def now(self) -> datetime:
        """
        Current date and time.

        Returns:
            timezone-aware UTC datetime.
        """
        raise NotImplementedError

    def today(self) -> date:
        """Current calendar date in UTC."""
        return self.now().date()


class FakeClock(Clock):
    """
    Fixed clock for tests.
    """

    def __init__(self, fixed_time: datetime | None = None):
        """
        Args:
            fixed_time: Time to report. Defaults to the real time at construction.
        """
        self._fixed_time = fixed_time or datetime.now(timezone.utc)

    def now(self) -> datetime:
        return self._fixed_time

    def set_time(self, new_time: datetime) -> None:
        self._fixed_time = new_time

    def advance(self, days: int = 0, hours: int = 0) -> None:
        self._fixed_time = self._fixed_time + timedelta(days=days, hours=hours)
