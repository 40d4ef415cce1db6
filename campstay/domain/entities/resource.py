"""Read-only views of the resource catalog."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from campstay.domain.value_objects.date_range import DateRange


@dataclass(frozen=True)
class Resource:
    id: int
    owner_id: int
    nightly_price: Decimal
    currency: str = "eur"

    def is_owned_by(self, user_id: int) -> bool:
        return self.owner_id == user_id


@dataclass(frozen=True)
class UnavailabilityWindow:
    """Owner-declared blackout, half-open like bookings."""

    id: int | None
    resource_id: int
    start_date: date
    end_date: date
    reason: str | None = None

    @property
    def date_range(self) -> DateRange:
        return DateRange(start=self.start_date, end=self.end_date)
