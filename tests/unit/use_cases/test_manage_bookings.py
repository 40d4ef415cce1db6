from datetime import date
from decimal import Decimal

import pytest

from campstay.domain.entities import BookingStatus, PaymentStatus
from campstay.domain.errors import AuthorizationError, BookingNotFoundError, ConflictError
from conftest import OTHER_USER_ID, OWNER_ID, RENTER_ID, RESOURCE_ID


async def _book(use_cases, intent_id: str | None = None) -> int:
    created = await use_cases["create_booking"].execute(
        RESOURCE_ID, RENTER_ID, date(2031, 1, 10), date(2031, 1, 12), payment_intent_id=intent_id
    )
    return created.booking_id


class TestGetBooking:
    async def test_renter_and_owner_can_read(self, use_cases):
        booking_id = await _book(use_cases)
        get = use_cases["get_booking"]

        assert (await get.execute(booking_id, RENTER_ID)).id == booking_id
        assert (await get.execute(booking_id, OWNER_ID)).total_price == Decimal("100.00")

    async def test_stranger_and_unknown(self, use_cases):
        booking_id = await _book(use_cases)

        with pytest.raises(AuthorizationError):
            await use_cases["get_booking"].execute(booking_id, OTHER_USER_ID)
        with pytest.raises(BookingNotFoundError):
            await use_cases["get_booking"].execute(999, RENTER_ID)


class TestAttachPaymentIntent:
    async def test_sets_reference_and_links_early_payment(self, use_cases, bundle):
        booking_id = await _book(use_cases)
        await bundle["payment_repo"].upsert_from_event(
            "pi_att", PaymentStatus.SUCCEEDED, Decimal("100.00"), "eur", None
        )

        booking = await use_cases["attach_payment_intent"].execute(booking_id, RENTER_ID, "pi_att")

        assert booking.payment_intent_ref == "pi_att"
        assert (await bundle["booking_repo"].get(booking_id)).payment_intent_ref == "pi_att"
        assert (await bundle["payment_repo"].find_by_intent("pi_att")).booking_id == booking_id

    async def test_payment_recorded_during_attach_is_linked_after_commit(self, use_cases, bundle):
        booking_id = await _book(use_cases)
        payments = bundle["payment_repo"]
        link_booking = payments.link_booking
        calls = []

        async def link_then_event_lands(intent_id, linked_booking_id):
            affected = await link_booking(intent_id, linked_booking_id)
            if not calls:
                await payments.upsert_from_event(intent_id, PaymentStatus.SUCCEEDED, Decimal("100.00"), "eur", None)
            calls.append(affected)
            return affected

        payments.link_booking = link_then_event_lands

        await use_cases["attach_payment_intent"].execute(booking_id, RENTER_ID, "pi_att_race")

        assert calls == [0, 1]
        assert (await payments.find_by_intent("pi_att_race")).booking_id == booking_id

    async def test_same_intent_is_a_noop(self, use_cases):
        booking_id = await _book(use_cases, "pi_same")

        booking = await use_cases["attach_payment_intent"].execute(booking_id, RENTER_ID, "pi_same")

        assert booking.payment_intent_ref == "pi_same"

    async def test_different_intent_conflicts(self, use_cases):
        booking_id = await _book(use_cases, "pi_first")

        with pytest.raises(ConflictError):
            await use_cases["attach_payment_intent"].execute(booking_id, RENTER_ID, "pi_second")

    async def test_cancelled_booking_conflicts(self, use_cases, bundle):
        booking_id = await _book(use_cases)
        bundle["booking_repo"].bookings[booking_id].status = BookingStatus.CANCELLED

        with pytest.raises(ConflictError):
            await use_cases["attach_payment_intent"].execute(booking_id, RENTER_ID, "pi_late")

    async def test_only_renter_may_attach(self, use_cases):
        booking_id = await _book(use_cases)

        with pytest.raises(AuthorizationError):
            await use_cases["attach_payment_intent"].execute(booking_id, OWNER_ID, "pi_owner")
