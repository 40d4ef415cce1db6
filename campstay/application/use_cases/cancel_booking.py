import logging

from campstay.application.dtos.booking_dto import CancellationResultDTO, RefundOutcome
from campstay.application.interfaces.booking_repo import BookingRepo
from campstay.application.interfaces.clock import Clock
from campstay.application.interfaces.payment_gateway import PaymentGateway
from campstay.application.interfaces.payment_repo import PaymentRepo
from campstay.application.interfaces.resource_catalog import ResourceCatalog
from campstay.application.interfaces.transaction_manager import TransactionManager
from campstay.domain.entities.booking import Booking, BookingChanges, BookingStatus
from campstay.domain.entities.payment import Payment
from campstay.domain.errors import AlreadyFinalizedError, AuthorizationError, BookingNotFoundError

# Stripe settles card refunds asynchronously; "pending" is an accepted refund.
ACCEPTED_REFUND_STATUSES = frozenset({"succeeded", "pending"})


class CancelBookingUseCase:
    """
    Cancels a booking, then refunds its payment on a best-effort basis.

    The cancellation is authoritative once committed: a failed refund is
    reported back and logged for manual follow-up, never rolled back.
    """

    def __init__(
        self,
        booking_repo: BookingRepo,
        payment_repo: PaymentRepo,
        resource_catalog: ResourceCatalog,
        payment_gateway: PaymentGateway,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._booking_repo = booking_repo
        self._payment_repo = payment_repo
        self._resource_catalog = resource_catalog
        self._payment_gateway = payment_gateway
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(self, booking_id: int, requesting_user_id: int) -> CancellationResultDTO:
        booking = await self._booking_repo.get(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)

        resource = await self._resource_catalog.get_resource(booking.resource_id)
        owner_id = resource.owner_id if resource else None
        if not booking.can_be_managed_by(requesting_user_id, owner_id):
            raise AuthorizationError(
                f"User {requesting_user_id} cannot cancel booking {booking_id}"
            )

        async with self._transaction_manager.start():
            affected = await self._booking_repo.apply_changes(
                booking_id,
                BookingChanges(status=BookingStatus.CANCELLED, cancellation_date=self._clock.now()),
                expected_statuses=BookingStatus.active(),
            )
        if affected == 0:
            # sweeper or a concurrent cancel finalized it first
            raise AlreadyFinalizedError(
                booking_id, booking.status.value if booking.status.is_final else None
            )

        self._logger.info(
            "Booking cancelled",
            extra={"booking_id": booking_id, "cancelled_by": requesting_user_id},
        )
        outcome = await self._refund(booking)
        return CancellationResultDTO(
            booking_id=booking_id,
            status=BookingStatus.CANCELLED.value,
            refund_outcome=outcome,
        )

    async def _find_payment(self, booking: Booking) -> Payment | None:
        payment = None
        if booking.payment_intent_ref:
            payment = await self._payment_repo.find_by_intent(booking.payment_intent_ref)
        if payment is None:
            payment = await self._payment_repo.find_by_booking(booking.id)
        return payment

    async def _refund(self, booking: Booking) -> str:
        payment = await self._find_payment(booking)
        if payment is None or not payment.is_refundable:
            return RefundOutcome.NOT_APPLICABLE

        intent_id = payment.external_intent_id
        reconciliation = {
            "booking_id": booking.id,
            "payment_intent_id": intent_id,
            "amount": str(payment.amount),
            "currency": payment.currency,
        }
        try:
            result = await self._payment_gateway.refund(intent_id)
        except Exception as exc:  # noqa: BLE001
            reason = str(exc) or exc.__class__.__name__
            self._logger.error(
                "Refund failed after cancellation; manual reconciliation required",
                exc_info=exc,
                extra=reconciliation,
            )
            return RefundOutcome.failed(reason)

        if result.status not in ACCEPTED_REFUND_STATUSES:
            self._logger.error(
                "Refund rejected after cancellation; manual reconciliation required",
                extra={**reconciliation, "refund_id": result.refund_id, "refund_status": result.status},
            )
            return RefundOutcome.failed(result.status)

        async with self._transaction_manager.start():
            await self._payment_repo.mark_refunded(intent_id)
        self._logger.info(
            "Refund issued",
            extra={"booking_id": booking.id, "payment_intent_id": intent_id},
        )
        return RefundOutcome.SUCCEEDED
