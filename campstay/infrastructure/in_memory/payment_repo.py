from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal

from campstay.application.interfaces.payment_repo import PaymentRepo
from campstay.domain.entities.payment import Payment, PaymentStatus


class InMemoryPaymentRepo(PaymentRepo):
    """Payments keyed by intent id, the same uniqueness the SQL table enforces."""

    def __init__(self) -> None:
        self.by_intent: dict[str, Payment] = {}
        self._next_id = 1

    async def upsert_from_event(
        self,
        external_intent_id: str,
        status: PaymentStatus,
        amount: Decimal,
        currency: str,
        booking_id: int | None,
    ) -> Payment:
        now = datetime.now(timezone.utc)
        payment = self.by_intent.get(external_intent_id)
        if payment is None:
            payment = Payment(
                id=self._next_id,
                external_intent_id=external_intent_id,
                amount=amount,
                currency=currency,
                status=status,
                booking_id=booking_id,
                created_at=now,
                updated_at=now,
            )
            self._next_id += 1
            self.by_intent[external_intent_id] = payment
        else:
            if payment.status != PaymentStatus.REFUNDED:
                payment.status = status
            payment.amount = amount
            payment.currency = currency
            payment.updated_at = now
            if payment.booking_id is None:
                payment.booking_id = booking_id
        return replace(payment)

    async def link_booking(self, external_intent_id: str, booking_id: int) -> int:
        payment = self.by_intent.get(external_intent_id)
        if payment is None or payment.booking_id is not None:
            return 0
        payment.booking_id = booking_id
        return 1

    async def mark_refunded(self, external_intent_id: str) -> int:
        payment = self.by_intent.get(external_intent_id)
        if payment is None or payment.status != PaymentStatus.SUCCEEDED:
            return 0
        payment.status = PaymentStatus.REFUNDED
        return 1

    async def find_by_intent(self, external_intent_id: str) -> Payment | None:
        payment = self.by_intent.get(external_intent_id)
        return replace(payment) if payment else None

    async def find_by_booking(self, booking_id: int) -> Payment | None:
        matches = [p for p in self.by_intent.values() if p.booking_id == booking_id]
        if not matches:
            return None
        return replace(max(matches, key=lambda p: p.id))
