"""Infrastructure services."""

from campstay.infrastructure.services.clock_impl import SystemClock

__all__ = [
    "SystemClock",
]
