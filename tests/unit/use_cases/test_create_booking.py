import asyncio
from datetime import date
from decimal import Decimal

import pytest

from campstay.domain.entities import BookingStatus, PaymentStatus, UnavailabilityWindow
from campstay.domain.errors import (
    BookingConflictError,
    InvalidDateRangeError,
    PriceMismatchError,
    ResourceNotFoundError,
    SelfBookingForbiddenError,
)
from conftest import OTHER_RESOURCE_ID, OWNER_ID, RENTER_ID, RESOURCE_ID

def jan(day: int) -> date:
    return date(2031, 1, day)


class TestCreateBooking:
    async def test_books_and_prices_on_server(self, use_cases, bundle):
        created = await use_cases["create_booking"].execute(
            resource_id=RESOURCE_ID, renter_id=RENTER_ID, start_date=jan(10), end_date=jan(12)
        )

        assert created.nights == 2
        assert created.total_price == Decimal("100.00")
        assert created.status == "confirmed"
        stored = bundle["booking_repo"].bookings[created.booking_id]
        assert stored.status is BookingStatus.CONFIRMED
        assert stored.created_at == bundle["clock"].now()

    async def test_overlap_conflicts_but_boundary_touch_succeeds(self, use_cases):
        create = use_cases["create_booking"]
        await create.execute(RESOURCE_ID, RENTER_ID, jan(10), jan(12))

        with pytest.raises(BookingConflictError):
            await create.execute(RESOURCE_ID, RENTER_ID, jan(11), jan(13))

        touching = await create.execute(RESOURCE_ID, RENTER_ID, jan(12), jan(14))
        assert touching.status == "confirmed"

    async def test_cancelled_booking_frees_dates(self, use_cases, bundle):
        create = use_cases["create_booking"]
        first = await create.execute(RESOURCE_ID, RENTER_ID, jan(10), jan(12))
        bundle["booking_repo"].bookings[first.booking_id].status = BookingStatus.CANCELLED

        again = await create.execute(RESOURCE_ID, RENTER_ID, jan(10), jan(12))
        assert again.booking_id != first.booking_id

    async def test_blackout_window_conflicts(self, use_cases, bundle):
        await bundle["unavailability_repo"].add(
            UnavailabilityWindow(id=None, resource_id=RESOURCE_ID, start_date=date(2031, 2, 1), end_date=date(2031, 2, 5))
        )

        with pytest.raises(BookingConflictError):
            await use_cases["create_booking"].execute(
                RESOURCE_ID, RENTER_ID, date(2031, 2, 3), date(2031, 2, 4)
            )

    async def test_other_resource_is_independent(self, use_cases):
        create = use_cases["create_booking"]
        await create.execute(RESOURCE_ID, RENTER_ID, jan(10), jan(12))

        other = await create.execute(OTHER_RESOURCE_ID, RENTER_ID, jan(10), jan(12))
        assert other.total_price == Decimal("70.00")

    @pytest.mark.parametrize(
        "start,end",
        [(jan(12), jan(10)), (jan(10), jan(10)), (date(2030, 12, 30), jan(2))],
    )
    async def test_invalid_ranges(self, use_cases, start, end):
        with pytest.raises(InvalidDateRangeError):
            await use_cases["create_booking"].execute(RESOURCE_ID, RENTER_ID, start, end)

    async def test_unknown_resource(self, use_cases):
        with pytest.raises(ResourceNotFoundError):
            await use_cases["create_booking"].execute(999, RENTER_ID, jan(10), jan(12))

    async def test_owner_cannot_book_own_resource(self, use_cases):
        with pytest.raises(SelfBookingForbiddenError):
            await use_cases["create_booking"].execute(RESOURCE_ID, OWNER_ID, jan(10), jan(12))

    async def test_client_total_must_match_quote(self, use_cases, bundle):
        create = use_cases["create_booking"]

        with pytest.raises(PriceMismatchError):
            await create.execute(RESOURCE_ID, RENTER_ID, jan(10), jan(12), client_total=Decimal("90.00"))
        assert bundle["booking_repo"].bookings == {}

        within_tolerance = await create.execute(
            RESOURCE_ID, RENTER_ID, jan(10), jan(12), client_total=Decimal("100.01")
        )
        assert within_tolerance.total_price == Decimal("100.00")

    async def test_concurrent_overlapping_requests_one_wins(self, use_cases, bundle):
        create = use_cases["create_booking"]

        results = await asyncio.gather(
            *(create.execute(RESOURCE_ID, RENTER_ID, jan(10), jan(10 + n)) for n in range(2, 8)),
            return_exceptions=True,
        )

        successes = [r for r in results if not isinstance(r, Exception)]
        conflicts = [r for r in results if isinstance(r, BookingConflictError)]
        assert len(successes) == 1
        assert len(conflicts) == len(results) - 1
        assert len(bundle["booking_repo"].bookings) == 1


class TestPaymentLinkingOnCreate:
    async def test_links_payment_that_arrived_first(self, use_cases, bundle):
        payments = bundle["payment_repo"]
        await payments.upsert_from_event("pi_early", PaymentStatus.SUCCEEDED, Decimal("100.00"), "eur", None)

        created = await use_cases["create_booking"].execute(
            RESOURCE_ID, RENTER_ID, jan(10), jan(12), payment_intent_id="pi_early"
        )

        payment = await payments.find_by_intent("pi_early")
        assert payment.booking_id == created.booking_id
        assert len(payments.by_intent) == 1

    async def test_without_prior_payment_nothing_is_created(self, use_cases, bundle):
        created = await use_cases["create_booking"].execute(
            RESOURCE_ID, RENTER_ID, jan(10), jan(12), payment_intent_id="pi_later"
        )

        assert created.payment_intent_ref == "pi_later"
        assert bundle["payment_repo"].by_intent == {}

    async def test_payment_recorded_during_create_is_linked_after_commit(self, use_cases, bundle):
        payments = bundle["payment_repo"]
        link_booking = payments.link_booking
        calls = []

        async def link_then_event_lands(intent_id, booking_id):
            affected = await link_booking(intent_id, booking_id)
            if not calls:
                # the event was handled before this booking became visible to it
                await payments.upsert_from_event(intent_id, PaymentStatus.SUCCEEDED, Decimal("100.00"), "eur", None)
            calls.append(affected)
            return affected

        payments.link_booking = link_then_event_lands

        created = await use_cases["create_booking"].execute(
            RESOURCE_ID, RENTER_ID, jan(10), jan(12), payment_intent_id="pi_race"
        )

        assert calls == [0, 1]
        assert (await payments.find_by_intent("pi_race")).booking_id == created.booking_id
