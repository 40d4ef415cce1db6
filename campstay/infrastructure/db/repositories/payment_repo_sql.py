from decimal import Decimal

from sqlalchemy import case, func, select, update
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from campstay.application.interfaces.clock import Clock
from campstay.application.interfaces.payment_repo import PaymentRepo
from campstay.domain.entities.payment import Payment, PaymentStatus
from campstay.infrastructure.db.tables import bookings, payments
from campstay.infrastructure.services.clock_impl import SystemClock


class PaymentRepoSQL(PaymentRepo):
    def __init__(self, session: AsyncSession, clock: Clock | None = None) -> None:
        self._session = session
        self._clock = clock or SystemClock()

    def _dialect_name(self) -> str:
        return self._session.get_bind().dialect.name

    def _booking_for_intent(self, external_intent_id: str):
        """Booking referencing the intent, resolved by the upsert statement itself."""
        return (
            select(bookings.c.id)
            .where(bookings.c.payment_intent_ref == external_intent_id)
            .order_by(bookings.c.id)
            .limit(1)
            .scalar_subquery()
        )

    async def upsert_from_event(
        self,
        external_intent_id: str,
        status: PaymentStatus,
        amount: Decimal,
        currency: str,
        booking_id: int | None,
    ) -> Payment:
        now = self._clock.now()
        values = dict(
            external_intent_id=external_intent_id,
            booking_id=booking_id if booking_id is not None else self._booking_for_intent(external_intent_id),
            amount=amount,
            currency=currency,
            status=status.value,
            created_at=now,
            updated_at=now,
        )
        dialect = self._dialect_name()
        if dialect == "mysql":
            stmt = mysql.insert(payments).values(**values)
            new = stmt.inserted
        elif dialect in ("sqlite", "postgresql"):
            insert_fn = sqlite.insert if dialect == "sqlite" else postgresql.insert
            stmt = insert_fn(payments).values(**values)
            new = stmt.excluded
        else:
            raise RuntimeError(f"Atomic payment upsert is not supported on {dialect}")

        changes = {
            # refunded is terminal; a replayed success must not undo it
            "status": case(
                (payments.c.status == PaymentStatus.REFUNDED.value, payments.c.status),
                else_=new.status,
            ),
            "amount": new.amount,
            "currency": new.currency,
            "updated_at": new.updated_at,
            "booking_id": func.coalesce(payments.c.booking_id, new.booking_id),
        }
        if dialect == "mysql":
            stmt = stmt.on_duplicate_key_update(changes)
        else:
            stmt = stmt.on_conflict_do_update(
                index_elements=[payments.c.external_intent_id],
                set_=changes,
            )

        await self._session.execute(stmt)
        payment = await self.find_by_intent(external_intent_id)
        if payment is None:
            raise RuntimeError(f"Payment {external_intent_id} missing after upsert")
        return payment

    async def link_booking(self, external_intent_id: str, booking_id: int) -> int:
        stmt = (
            update(payments)
            .where(
                payments.c.external_intent_id == external_intent_id,
                payments.c.booking_id.is_(None),
            )
            .values(booking_id=booking_id, updated_at=self._clock.now())
        )
        result = await self._session.execute(stmt)
        return result.rowcount

    async def mark_refunded(self, external_intent_id: str) -> int:
        stmt = (
            update(payments)
            .where(
                payments.c.external_intent_id == external_intent_id,
                payments.c.status == PaymentStatus.SUCCEEDED.value,
            )
            .values(status=PaymentStatus.REFUNDED.value, updated_at=self._clock.now())
        )
        result = await self._session.execute(stmt)
        return result.rowcount

    async def find_by_intent(self, external_intent_id: str) -> Payment | None:
        stmt = select(payments).where(payments.c.external_intent_id == external_intent_id)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return self._map_payment(row) if row else None

    async def find_by_booking(self, booking_id: int) -> Payment | None:
        stmt = (
            select(payments)
            .where(payments.c.booking_id == booking_id)
            .order_by(payments.c.id.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return self._map_payment(row) if row else None

    def _map_payment(self, row) -> Payment:
        return Payment(
            id=row["id"],
            external_intent_id=row["external_intent_id"],
            booking_id=row.get("booking_id"),
            amount=row["amount"],
            currency=row["currency"],
            status=PaymentStatus(row["status"]),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )
