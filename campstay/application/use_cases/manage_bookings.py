import logging

from campstay.application.interfaces.booking_repo import BookingRepo
from campstay.application.interfaces.payment_repo import PaymentRepo
from campstay.application.interfaces.resource_catalog import ResourceCatalog
from campstay.application.interfaces.transaction_manager import TransactionManager
from campstay.domain.entities.booking import Booking, BookingChanges, BookingStatus
from campstay.domain.errors import AuthorizationError, BookingNotFoundError, ConflictError


class GetBookingUseCase:
    def __init__(self, booking_repo: BookingRepo, resource_catalog: ResourceCatalog) -> None:
        self._booking_repo = booking_repo
        self._resource_catalog = resource_catalog

    async def execute(self, booking_id: int, requesting_user_id: int) -> Booking:
        booking = await self._booking_repo.get(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        resource = await self._resource_catalog.get_resource(booking.resource_id)
        if not booking.can_be_managed_by(requesting_user_id, resource.owner_id if resource else None):
            raise AuthorizationError(f"User {requesting_user_id} cannot view booking {booking_id}")
        return booking


class AttachPaymentIntentUseCase:
    """
    Records the intent reference of a booking created before its intent was known.

    The reference is set at most once; a payment row already written by the
    webhook for that intent gets linked in the same transaction.
    """

    def __init__(
        self,
        booking_repo: BookingRepo,
        payment_repo: PaymentRepo,
        transaction_manager: TransactionManager,
    ) -> None:
        self._booking_repo = booking_repo
        self._payment_repo = payment_repo
        self._transaction_manager = transaction_manager
        self._logger = logging.getLogger(__name__)

    async def execute(self, booking_id: int, requesting_user_id: int, intent_id: str) -> Booking:
        booking = await self._booking_repo.get(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        if booking.renter_id != requesting_user_id:
            raise AuthorizationError(
                f"Only the renter can attach a payment to booking {booking_id}"
            )
        if booking.payment_intent_ref == intent_id:
            return booking

        async with self._transaction_manager.start():
            affected = await self._booking_repo.apply_changes(
                booking_id,
                BookingChanges(payment_intent_ref=intent_id),
                expected_statuses=(BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.COMPLETED),
                only_if_intent_unset=True,
            )
            if affected == 0:
                raise ConflictError(
                    f"Booking {booking_id} is cancelled or already has a payment intent",
                    code="PAYMENT_INTENT_ALREADY_SET",
                )
            await self._payment_repo.link_booking(intent_id, booking_id)
        async with self._transaction_manager.start():
            # covers an event recorded while the attach was uncommitted
            await self._payment_repo.link_booking(intent_id, booking_id)

        self._logger.info(
            "Payment intent attached to booking",
            extra={"booking_id": booking_id, "payment_intent_id": intent_id},
        )
        booking.payment_intent_ref = intent_id
        return booking
