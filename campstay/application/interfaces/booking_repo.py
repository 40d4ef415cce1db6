from datetime import date
from typing import Collection, Sequence

from campstay.domain.entities.booking import Booking, BookingChanges, BookingStatus
from campstay.domain.value_objects.date_range import DateRange


class BookingRepo:
    async def add(self, booking: Booking) -> Booking:
        raise NotImplementedError

    async def get(self, booking_id: int) -> Booking | None:
        raise NotImplementedError

    async def find_by_payment_intent(self, intent_id: str) -> Booking | None:
        raise NotImplementedError

    async def count_overlapping(
        self,
        resource_id: int,
        stay: DateRange,
        excluding_booking_id: int | None = None,
    ) -> int:
        """Non-cancelled bookings of the resource whose range overlaps `stay`."""
        raise NotImplementedError

    async def apply_changes(
        self,
        booking_id: int,
        changes: BookingChanges,
        expected_statuses: Collection[BookingStatus] | None = None,
        only_if_intent_unset: bool = False,
    ) -> int:
        """
        Conditionally update one booking.

        Returns the number of affected rows; 0 means the guard did not match.
        """
        raise NotImplementedError

    async def list_due_for_completion(self, today: date) -> Sequence[int]:
        """Ids of confirmed bookings whose end date is before `today`."""
        raise NotImplementedError
