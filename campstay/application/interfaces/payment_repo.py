from decimal import Decimal

from campstay.domain.entities.payment import Payment, PaymentStatus


class PaymentRepo:
    async def upsert_from_event(
        self,
        external_intent_id: str,
        status: PaymentStatus,
        amount: Decimal,
        currency: str,
        booking_id: int | None,
    ) -> Payment:
        """
        Single atomic insert-or-update keyed on the intent id.

        status/amount/currency are overwritten; booking_id is only filled
        while the stored value is still null.
        """
        raise NotImplementedError

    async def link_booking(self, external_intent_id: str, booking_id: int) -> int:
        raise NotImplementedError

    async def mark_refunded(self, external_intent_id: str) -> int:
        raise NotImplementedError

    async def find_by_intent(self, external_intent_id: str) -> Payment | None:
        raise NotImplementedError

    async def find_by_booking(self, booking_id: int) -> Payment | None:
        raise NotImplementedError
