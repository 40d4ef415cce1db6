"""
Booking lifecycle over the SQL adapters.

Same use cases the API serves in SQL mode, with the FakeClock and the stub
payment gateway in place of Stripe.
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from campstay.api.dependencies import build_use_cases
from campstay.application.dtos import RefundOutcome, WebhookOutcome
from campstay.domain.entities import BookingStatus, PaymentStatus
from campstay.domain.errors import AlreadyFinalizedError, BookingConflictError
from campstay.infrastructure.db.repositories.booking_repo_sql import BookingRepoSQL
from campstay.infrastructure.db.repositories.payment_repo_sql import PaymentRepoSQL
from campstay.infrastructure.db.repositories.resource_catalog_sql import (
    ResourceCatalogSQL,
    SQLResourceLock,
    UnavailabilityRepoSQL,
)
from campstay.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager
from campstay.infrastructure.in_memory import StubPaymentGateway
from conftest import OWNER_ID, RENTER_ID, RESOURCE_ID, WEBHOOK_SECRET, make_stripe_event

pytestmark = pytest.mark.integration


@pytest.fixture
def gateway() -> StubPaymentGateway:
    return StubPaymentGateway(webhook_secret=WEBHOOK_SECRET)


@pytest.fixture
def sql_use_cases(settings, db_session, clock, gateway) -> dict:
    return build_use_cases(
        settings,
        booking_repo=BookingRepoSQL(db_session),
        payment_repo=PaymentRepoSQL(db_session, clock=clock),
        resource_catalog=ResourceCatalogSQL(db_session),
        unavailability_repo=UnavailabilityRepoSQL(db_session),
        resource_lock=SQLResourceLock(db_session),
        payment_gateway=gateway,
        tx_manager=SQLAlchemyTransactionManager(db_session),
        clock=clock,
    )


class TestSQLBookingFlow:
    async def test_book_pay_cancel_refund(self, sql_use_cases, db_session, gateway):
        created = await sql_use_cases["create_booking"].execute(
            RESOURCE_ID, RENTER_ID, date(2031, 1, 10), date(2031, 1, 12), payment_intent_id="pi_sql"
        )
        assert created.total_price == Decimal("100.00")

        outcome = await sql_use_cases["handle_payment_event"].execute(make_stripe_event("pi_sql"), WEBHOOK_SECRET)
        assert outcome is WebhookOutcome.ACK

        payment = await PaymentRepoSQL(db_session).find_by_intent("pi_sql")
        assert payment.booking_id == created.booking_id

        result = await sql_use_cases["cancel_booking"].execute(created.booking_id, OWNER_ID)

        assert result.refund_outcome == RefundOutcome.SUCCEEDED
        assert gateway.refunded_intents == ["pi_sql"]
        assert (await PaymentRepoSQL(db_session).find_by_intent("pi_sql")).status is PaymentStatus.REFUNDED
        assert (await BookingRepoSQL(db_session).get(created.booking_id)).status is BookingStatus.CANCELLED

    async def test_payment_before_booking_is_linked_on_create(self, sql_use_cases, db_session):
        await sql_use_cases["handle_payment_event"].execute(make_stripe_event("pi_early"), WEBHOOK_SECRET)

        created = await sql_use_cases["create_booking"].execute(
            RESOURCE_ID, RENTER_ID, date(2031, 1, 10), date(2031, 1, 12), payment_intent_id="pi_early"
        )

        payment = await PaymentRepoSQL(db_session).find_by_intent("pi_early")
        assert payment.booking_id == created.booking_id

    async def test_overlap_is_rejected_and_nothing_is_written(self, sql_use_cases, db_session):
        create = sql_use_cases["create_booking"]
        await create.execute(RESOURCE_ID, RENTER_ID, date(2031, 1, 10), date(2031, 1, 12))

        with pytest.raises(BookingConflictError):
            await create.execute(RESOURCE_ID, RENTER_ID, date(2031, 1, 11), date(2031, 1, 13))

        assert await sql_use_cases["check_availability"].execute(
            RESOURCE_ID, date(2031, 1, 12), date(2031, 1, 14)
        )
        assert not await sql_use_cases["check_availability"].execute(
            RESOURCE_ID, date(2031, 1, 9), date(2031, 1, 11)
        )

    async def test_sweep_completes_finished_stays(self, sql_use_cases, db_session, clock):
        created = await sql_use_cases["create_booking"].execute(
            RESOURCE_ID, RENTER_ID, date(2031, 1, 2), date(2031, 1, 4)
        )

        result = await sql_use_cases["run_status_sweep"].execute(
            now=datetime(2031, 1, 5, 0, 0, tzinfo=timezone.utc)
        )

        assert result.transitioned_count == 1
        assert (await BookingRepoSQL(db_session).get(created.booking_id)).status is BookingStatus.COMPLETED
        with pytest.raises(AlreadyFinalizedError):
            await sql_use_cases["cancel_booking"].execute(created.booking_id, RENTER_ID)

    async def test_blackout_blocks_booking(self, sql_use_cases):
        start = date(2031, 2, 1)
        await sql_use_cases["manage_unavailability"].add_window(
            RESOURCE_ID, OWNER_ID, start, start + timedelta(days=3), "maintenance"
        )

        with pytest.raises(BookingConflictError):
            await sql_use_cases["create_booking"].execute(
                RESOURCE_ID, RENTER_ID, start + timedelta(days=1), start + timedelta(days=2)
            )
