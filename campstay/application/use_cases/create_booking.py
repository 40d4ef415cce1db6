import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from campstay.application.dtos.booking_dto import BookingCreatedDTO
from campstay.application.interfaces.booking_repo import BookingRepo
from campstay.application.interfaces.clock import Clock
from campstay.application.interfaces.payment_repo import PaymentRepo
from campstay.application.interfaces.resource_catalog import ResourceCatalog, ResourceLock
from campstay.application.interfaces.transaction_manager import TransactionManager
from campstay.application.use_cases.check_availability import AvailabilityChecker
from campstay.domain.entities.booking import Booking, BookingStatus, StayQuote
from campstay.domain.entities.resource import Resource
from campstay.domain.errors import (
    BookingConflictError,
    PriceMismatchError,
    ResourceNotFoundError,
    SelfBookingForbiddenError,
)
from campstay.domain.value_objects.date_range import DateRange


@dataclass(frozen=True)
class QuotedStay:
    resource: Resource
    stay: DateRange
    quote: StayQuote


class StayQuoter:
    """Validates a stay request and prices it on the server."""

    def __init__(
        self,
        resource_catalog: ResourceCatalog,
        clock: Clock,
        service_fee: Decimal = Decimal("0"),
    ) -> None:
        self._resource_catalog = resource_catalog
        self._clock = clock
        self._service_fee = service_fee

    async def quote(self, resource_id: int, renter_id: int, start_date: date, end_date: date) -> QuotedStay:
        stay = DateRange.for_stay(start_date, end_date, today=self._clock.today())
        resource = await self._resource_catalog.get_resource(resource_id)
        if resource is None:
            raise ResourceNotFoundError(resource_id)
        if resource.is_owned_by(renter_id):
            raise SelfBookingForbiddenError(resource_id)
        quote = StayQuote.for_stay(
            stay,
            nightly_price=resource.nightly_price,
            currency_code=resource.currency,
            service_fee=self._service_fee,
        )
        return QuotedStay(resource=resource, stay=stay, quote=quote)


class CreateBookingUseCase:
    def __init__(
        self,
        booking_repo: BookingRepo,
        payment_repo: PaymentRepo,
        availability_checker: AvailabilityChecker,
        quoter: StayQuoter,
        resource_lock: ResourceLock,
        transaction_manager: TransactionManager,
        clock: Clock,
        price_tolerance: Decimal = Decimal("0.01"),
    ) -> None:
        self._booking_repo = booking_repo
        self._payment_repo = payment_repo
        self._availability_checker = availability_checker
        self._quoter = quoter
        self._resource_lock = resource_lock
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._price_tolerance = price_tolerance
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        resource_id: int,
        renter_id: int,
        start_date: date,
        end_date: date,
        client_total: Decimal | None = None,
        payment_intent_id: str | None = None,
    ) -> BookingCreatedDTO:
        quoted = await self._quoter.quote(resource_id, renter_id, start_date, end_date)
        total = quoted.quote.total
        if client_total is not None and total.differs_from(client_total, self._price_tolerance):
            raise PriceMismatchError(client_total=client_total, computed_total=total.amount)

        async with self._transaction_manager.start():
            async with self._resource_lock.hold(resource_id):
                if not await self._availability_checker.is_available(resource_id, quoted.stay):
                    self._logger.info(
                        "Booking rejected: dates unavailable",
                        extra={
                            "resource_id": resource_id,
                            "start_date": str(start_date),
                            "end_date": str(end_date),
                        },
                    )
                    raise BookingConflictError(resource_id, start_date, end_date)

                booking = await self._booking_repo.add(
                    Booking(
                        id=None,
                        resource_id=resource_id,
                        renter_id=renter_id,
                        start_date=quoted.stay.start,
                        end_date=quoted.stay.end,
                        status=BookingStatus.CONFIRMED,
                        total_price=total.amount,
                        payment_intent_ref=payment_intent_id,
                        created_at=self._clock.now(),
                    )
                )
                if payment_intent_id:
                    # payment event may have arrived first
                    await self._payment_repo.link_booking(payment_intent_id, booking.id)

        if payment_intent_id:
            # An event handled while this booking was uncommitted recorded the
            # payment unlinked; link it now that the booking is visible.
            async with self._transaction_manager.start():
                await self._payment_repo.link_booking(payment_intent_id, booking.id)

        self._logger.info(
            "Booking created",
            extra={
                "booking_id": booking.id,
                "resource_id": resource_id,
                "renter_id": renter_id,
                "nights": quoted.quote.nights,
                "total_price": str(total.amount),
                "payment_intent_id": payment_intent_id,
            },
        )
        return BookingCreatedDTO(
            booking_id=booking.id,
            resource_id=resource_id,
            start_date=booking.start_date,
            end_date=booking.end_date,
            nights=quoted.quote.nights,
            total_price=total.amount,
            currency=total.currency_code,
            status=booking.status.value,
            payment_intent_ref=payment_intent_id,
        )
