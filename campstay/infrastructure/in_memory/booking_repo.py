from dataclasses import replace
from datetime import date
from typing import Collection, Sequence

from campstay.application.interfaces.booking_repo import BookingRepo
from campstay.domain.entities.booking import Booking, BookingChanges, BookingStatus
from campstay.domain.value_objects.date_range import DateRange


class InMemoryBookingRepo(BookingRepo):
    def __init__(self) -> None:
        self.bookings: dict[int, Booking] = {}
        self._next_id = 1

    async def add(self, booking: Booking) -> Booking:
        booking.id = self._next_id
        self._next_id += 1
        self.bookings[booking.id] = replace(booking)
        return booking

    async def get(self, booking_id: int) -> Booking | None:
        booking = self.bookings.get(booking_id)
        return replace(booking) if booking else None

    async def find_by_payment_intent(self, intent_id: str) -> Booking | None:
        for booking in self.bookings.values():
            if booking.payment_intent_ref == intent_id:
                return replace(booking)
        return None

    async def count_overlapping(
        self,
        resource_id: int,
        stay: DateRange,
        excluding_booking_id: int | None = None,
    ) -> int:
        return sum(
            1
            for booking in self.bookings.values()
            if booking.resource_id == resource_id
            and booking.holds_resource
            and booking.id != excluding_booking_id
            and booking.date_range.overlaps_with(stay)
        )

    async def apply_changes(
        self,
        booking_id: int,
        changes: BookingChanges,
        expected_statuses: Collection[BookingStatus] | None = None,
        only_if_intent_unset: bool = False,
    ) -> int:
        booking = self.bookings.get(booking_id)
        if booking is None or changes.is_empty():
            return 0
        if expected_statuses is not None and booking.status not in expected_statuses:
            return 0
        if only_if_intent_unset and booking.payment_intent_ref is not None:
            return 0
        if changes.status is not None:
            booking.status = changes.status
        if changes.payment_intent_ref is not None:
            booking.payment_intent_ref = changes.payment_intent_ref
        if changes.cancellation_date is not None:
            booking.cancellation_date = changes.cancellation_date
        return 1

    async def list_due_for_completion(self, today: date) -> Sequence[int]:
        return sorted(
            booking.id
            for booking in self.bookings.values()
            if booking.status == BookingStatus.CONFIRMED and booking.end_date < today
        )
