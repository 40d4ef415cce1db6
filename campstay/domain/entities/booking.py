"""Booking entity - a renter's reservation of a resource."""

from dataclasses import dataclass, fields
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from campstay.domain.value_objects.date_range import DateRange
from campstay.domain.value_objects.money import Money


class BookingStatus(str, Enum):
    """Closed set of booking states."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def active(cls) -> tuple["BookingStatus", ...]:
        """States that still hold the resource and can be cancelled."""
        return (cls.PENDING, cls.CONFIRMED)

    @property
    def is_final(self) -> bool:
        return self in (BookingStatus.COMPLETED, BookingStatus.CANCELLED)


@dataclass
class Booking:
    id: int | None
    resource_id: int
    renter_id: int
    start_date: date
    end_date: date
    status: BookingStatus
    total_price: Decimal
    payment_intent_ref: str | None = None
    created_at: datetime | None = None
    cancellation_date: datetime | None = None

    @property
    def date_range(self) -> DateRange:
        return DateRange(start=self.start_date, end=self.end_date)

    @property
    def holds_resource(self) -> bool:
        return self.status != BookingStatus.CANCELLED

    def can_be_managed_by(self, user_id: int, owner_id: int | None) -> bool:
        """Renter and resource owner may view or cancel a booking."""
        return user_id == self.renter_id or (owner_id is not None and user_id == owner_id)


@dataclass(frozen=True)
class BookingChanges:
    """
    Explicit update descriptor for a booking.

    Every field that is not None is written; absent fields are left untouched.
    Repositories turn it into a single parameterized UPDATE.
    """

    status: BookingStatus | None = None
    payment_intent_ref: str | None = None
    cancellation_date: datetime | None = None

    def as_values(self) -> dict[str, Any]:
        values = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if value is None:
                continue
            values[item.name] = value.value if isinstance(value, Enum) else value
        return values

    def is_empty(self) -> bool:
        return not self.as_values()


@dataclass(frozen=True)
class StayQuote:
    """Server-side price of a stay; fixed on the booking at creation."""

    nights: int
    nightly_price: Money
    service_fee: Money

    @property
    def total(self) -> Money:
        return self.nightly_price * self.nights + self.service_fee

    @classmethod
    def for_stay(
        cls,
        stay: DateRange,
        nightly_price: Decimal,
        currency_code: str,
        service_fee: Decimal = Decimal("0"),
    ) -> "StayQuote":
        return cls(
            nights=stay.nights,
            nightly_price=Money(amount=nightly_price, currency_code=currency_code),
            service_fee=Money(amount=service_fee, currency_code=currency_code),
        )
