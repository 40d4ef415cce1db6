import logging

from campstay.application.dtos.booking_dto import WebhookOutcome
from campstay.application.interfaces.booking_repo import BookingRepo
from campstay.application.interfaces.payment_gateway import PaymentGateway
from campstay.application.interfaces.payment_repo import PaymentRepo
from campstay.application.interfaces.transaction_manager import TransactionManager
from campstay.domain.entities.payment import PaymentEvent
from campstay.domain.errors import WebhookVerificationError


class HandlePaymentEventUseCase:
    """
    Reconciles gateway events against payment rows.

    Deliveries are at-least-once and unordered with respect to booking
    creation, so every event becomes one upsert keyed on the intent id.
    Independent of the transport: the HTTP webhook and a queue consumer
    both call `execute` with the raw body and signature.
    """

    def __init__(
        self,
        payment_repo: PaymentRepo,
        booking_repo: BookingRepo,
        payment_gateway: PaymentGateway,
        transaction_manager: TransactionManager,
    ) -> None:
        self._payment_repo = payment_repo
        self._booking_repo = booking_repo
        self._payment_gateway = payment_gateway
        self._transaction_manager = transaction_manager
        self._logger = logging.getLogger(__name__)

    async def execute(self, raw_payload: bytes, signature: str | None) -> WebhookOutcome:
        try:
            event = await self._payment_gateway.verify_webhook(raw_payload, signature)
        except WebhookVerificationError as exc:
            self._logger.warning(
                "Payment webhook rejected: verification failed",
                extra={"reason": exc.message},
            )
            return WebhookOutcome.REJECTED

        kind = event.kind
        if kind is None:
            self._logger.info(
                "Payment webhook ignored: unhandled event type",
                extra={"event_id": event.event_id, "event_type": event.type},
            )
            return WebhookOutcome.ACK

        if not event.intent_id or event.amount is None:
            self._logger.warning(
                "Payment webhook rejected: event without intent or amount",
                extra={"event_id": event.event_id, "event_type": event.type},
            )
            return WebhookOutcome.REJECTED

        await self._apply(event)
        return WebhookOutcome.ACK

    async def _apply(self, event: PaymentEvent) -> None:
        status = event.kind.resulting_status
        async with self._transaction_manager.start():
            booking = await self._booking_repo.find_by_payment_intent(event.intent_id)
            booking_id = booking.id if booking else None
            payment = await self._payment_repo.upsert_from_event(
                external_intent_id=event.intent_id,
                status=status,
                amount=event.amount.amount,
                currency=event.amount.currency_code,
                booking_id=booking_id,
            )

        log_extra = {
            "event_id": event.event_id,
            "payment_intent_id": event.intent_id,
            "payment_status": status.value,
            "booking_id": payment.booking_id,
        }
        if payment.booking_id is None:
            self._logger.info("Payment recorded before its booking exists", extra=log_extra)
        if event.failure_reason:
            log_extra["failure_reason"] = event.failure_reason
            self._logger.warning("Payment webhook processed: payment failed", extra=log_extra)
        else:
            self._logger.info("Payment webhook processed", extra=log_extra)
