"""Value objects of the booking domain."""

from campstay.domain.value_objects.date_range import DateRange
from campstay.domain.value_objects.money import Money

__all__ = [
    "DateRange",
    "Money",
]
