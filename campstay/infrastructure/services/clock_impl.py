from datetime import datetime, timezone

from campstay.application.interfaces.clock import Clock


class SystemClock(Clock):
    """Wall clock in UTC. Tests use `FakeClock` instead."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
