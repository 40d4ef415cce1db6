"""
Shared fixtures.

- FakeClock pinned to 2031-01-01 so scenario dates in January are in the future
- In-memory adapters plus the use cases wired over them
- SQLite (aiosqlite, in-memory) engine and session for the SQL repositories
- FastAPI TestClient over the in-memory bundle
"""

import json
from datetime import datetime, timezone
from decimal import Decimal
from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from campstay.api.dependencies import _in_memory_bundle, build_use_cases
from campstay.application.interfaces.clock import FakeClock
from campstay.config import Settings
from campstay.infrastructure.circuit_breaker import stripe_breaker
from campstay.infrastructure.db.tables import metadata, resources
from campstay.infrastructure.in_memory import (
    InMemoryBookingRepo,
    InMemoryPaymentRepo,
    InMemoryResourceCatalog,
    InMemoryResourceLock,
    InMemoryUnavailabilityRepo,
    NoopTransactionManager,
    StubPaymentGateway,
)

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
WEBHOOK_SECRET = "whsec_test"

RESOURCE_ID = 1
OTHER_RESOURCE_ID = 2
OWNER_ID = 100
RENTER_ID = 7
OTHER_USER_ID = 55


def make_stripe_event(
    intent_id: str,
    amount_cents: int = 10000,
    currency: str = "eur",
    event_type: str = "payment_intent.succeeded",
    event_id: str = "evt_test",
    failure_message: str | None = None,
) -> bytes:
    obj = {"id": intent_id, "object": "payment_intent", "amount": amount_cents, "currency": currency}
    if failure_message:
        obj["last_payment_error"] = {"message": failure_message}
    return json.dumps({"id": event_id, "type": event_type, "data": {"object": obj}}).encode()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2031, 1, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def settings() -> Settings:
    return Settings(use_in_memory=True, stripe_webhook_secret=WEBHOOK_SECRET)


@pytest.fixture
def bundle(clock):
    catalog = InMemoryResourceCatalog()
    catalog.add_resource(RESOURCE_ID, owner_id=OWNER_ID, nightly_price="50.00")
    catalog.add_resource(OTHER_RESOURCE_ID, owner_id=OWNER_ID, nightly_price="35.00")
    return {
        "booking_repo": InMemoryBookingRepo(),
        "payment_repo": InMemoryPaymentRepo(),
        "resource_catalog": catalog,
        "unavailability_repo": InMemoryUnavailabilityRepo(),
        "resource_lock": InMemoryResourceLock(),
        "payment_gateway": StubPaymentGateway(webhook_secret=WEBHOOK_SECRET),
        "tx_manager": NoopTransactionManager(),
        "clock": clock,
    }


@pytest.fixture
def use_cases(settings, bundle) -> dict:
    return build_use_cases(settings, **bundle)


# ============================================================================
# SQL
# ============================================================================


@pytest_asyncio.fixture
async def test_engine():
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
        await conn.execute(
            insert(resources),
            [
                {"id": RESOURCE_ID, "owner_id": OWNER_ID, "nightly_price": Decimal("50.00"), "currency": "eur"},
                {"id": OTHER_RESOURCE_ID, "owner_id": OWNER_ID, "nightly_price": Decimal("35.00"), "currency": "eur"},
            ],
        )
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_maker = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session


# ============================================================================
# HTTP
# ============================================================================


@pytest.fixture
def memory_bundle() -> Generator[dict, None, None]:
    """Fresh in-memory bundle behind the app, with two seeded resources."""
    _in_memory_bundle.cache_clear()
    memory = _in_memory_bundle()
    memory["payment_gateway"].webhook_secret = WEBHOOK_SECRET
    memory["resource_catalog"].add_resource(RESOURCE_ID, owner_id=OWNER_ID, nightly_price="50.00")
    memory["resource_catalog"].add_resource(OTHER_RESOURCE_ID, owner_id=OWNER_ID, nightly_price="35.00")
    yield memory
    _in_memory_bundle.cache_clear()


@pytest.fixture
def client(memory_bundle) -> Generator[TestClient, None, None]:
    from campstay.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def reset_circuit_breakers():
    """Keep an open breaker from one test out of the next."""
    stripe_breaker.close()
    yield
    stripe_breaker.close()


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "integration: tests that run against a SQL database (SQLite in-memory by default)",
    )
    config.addinivalue_line(
        "markers",
        "deadlock: deadlock retry scenarios",
    )
