from datetime import date
from typing import Collection, Sequence

from sqlalchemy import func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from campstay.application.interfaces.booking_repo import BookingRepo
from campstay.domain.entities.booking import Booking, BookingChanges, BookingStatus
from campstay.domain.value_objects.date_range import DateRange
from campstay.infrastructure.db.tables import bookings


class BookingRepoSQL(BookingRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, booking: Booking) -> Booking:
        stmt = insert(bookings).values(
            resource_id=booking.resource_id,
            renter_id=booking.renter_id,
            start_date=booking.start_date,
            end_date=booking.end_date,
            status=booking.status.value,
            total_price=booking.total_price,
            payment_intent_ref=booking.payment_intent_ref,
            created_at=booking.created_at,
        )
        result = await self._session.execute(stmt)
        booking.id = result.inserted_primary_key[0]
        return booking

    async def get(self, booking_id: int) -> Booking | None:
        stmt = select(bookings).where(bookings.c.id == booking_id)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return self._map_booking(row) if row else None

    async def find_by_payment_intent(self, intent_id: str) -> Booking | None:
        stmt = (
            select(bookings)
            .where(bookings.c.payment_intent_ref == intent_id)
            .order_by(bookings.c.id)
            .limit(1)
        )
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return self._map_booking(row) if row else None

    async def count_overlapping(
        self,
        resource_id: int,
        stay: DateRange,
        excluding_booking_id: int | None = None,
    ) -> int:
        where_clause = [
            bookings.c.resource_id == resource_id,
            bookings.c.status != BookingStatus.CANCELLED.value,
            bookings.c.start_date < stay.end,
            bookings.c.end_date > stay.start,
        ]
        if excluding_booking_id is not None:
            where_clause.append(bookings.c.id != excluding_booking_id)
        stmt = select(func.count()).select_from(bookings).where(*where_clause)
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def apply_changes(
        self,
        booking_id: int,
        changes: BookingChanges,
        expected_statuses: Collection[BookingStatus] | None = None,
        only_if_intent_unset: bool = False,
    ) -> int:
        values = changes.as_values()
        if not values:
            return 0
        where_clause = [bookings.c.id == booking_id]
        if expected_statuses is not None:
            where_clause.append(bookings.c.status.in_([s.value for s in expected_statuses]))
        if only_if_intent_unset:
            where_clause.append(bookings.c.payment_intent_ref.is_(None))
        stmt = update(bookings).where(*where_clause).values(**values)
        result = await self._session.execute(stmt)
        return result.rowcount

    async def list_due_for_completion(self, today: date) -> Sequence[int]:
        stmt = (
            select(bookings.c.id)
            .where(
                bookings.c.status == BookingStatus.CONFIRMED.value,
                bookings.c.end_date < today,
            )
            .order_by(bookings.c.id)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    def _map_booking(self, row) -> Booking:
        return Booking(
            id=row["id"],
            resource_id=row["resource_id"],
            renter_id=row["renter_id"],
            start_date=row["start_date"],
            end_date=row["end_date"],
            status=BookingStatus(row["status"]),
            total_price=row["total_price"],
            payment_intent_ref=row.get("payment_intent_ref"),
            created_at=row.get("created_at"),
            cancellation_date=row.get("cancellation_date"),
        )
