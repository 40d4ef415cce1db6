from functools import lru_cache

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from campstay.api.deps import AsyncSessionLocal
from campstay.application.interfaces.booking_repo import BookingRepo
from campstay.application.interfaces.clock import Clock
from campstay.application.interfaces.payment_gateway import PaymentGateway
from campstay.application.interfaces.payment_repo import PaymentRepo
from campstay.application.interfaces.resource_catalog import (
    ResourceCatalog,
    ResourceLock,
    UnavailabilityRepo,
)
from campstay.application.interfaces.transaction_manager import TransactionManager
from campstay.application.use_cases.cancel_booking import CancelBookingUseCase
from campstay.application.use_cases.check_availability import (
    AvailabilityChecker,
    CheckAvailabilityUseCase,
)
from campstay.application.use_cases.create_booking import CreateBookingUseCase, StayQuoter
from campstay.application.use_cases.create_payment_intent import CreatePaymentIntentUseCase
from campstay.application.use_cases.handle_payment_event import HandlePaymentEventUseCase
from campstay.application.use_cases.manage_bookings import (
    AttachPaymentIntentUseCase,
    GetBookingUseCase,
)
from campstay.application.use_cases.manage_unavailability import ManageUnavailabilityUseCase
from campstay.application.use_cases.run_status_sweep import RunStatusSweepUseCase
from campstay.config import Settings, get_settings
from campstay.infrastructure.db.repositories.booking_repo_sql import BookingRepoSQL
from campstay.infrastructure.db.repositories.payment_repo_sql import PaymentRepoSQL
from campstay.infrastructure.db.repositories.resource_catalog_sql import (
    ResourceCatalogSQL,
    SQLResourceLock,
    UnavailabilityRepoSQL,
)
from campstay.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager
from campstay.infrastructure.gateways.stripe_gateway import StripePaymentGateway
from campstay.infrastructure.in_memory import (
    InMemoryBookingRepo,
    InMemoryPaymentRepo,
    InMemoryResourceCatalog,
    InMemoryResourceLock,
    InMemoryUnavailabilityRepo,
    NoopTransactionManager,
    StubPaymentGateway,
)
from campstay.infrastructure.services.clock_impl import SystemClock


async def get_session(settings: Settings = Depends(get_settings)) -> AsyncSession | None:
    if settings.use_in_memory:
        yield None
        return
    async with AsyncSessionLocal() as session:
        yield session


def get_current_user_id(
    user_id: int | None = Header(default=None, alias="X-User-Id"),
) -> int:
    """Caller identity, set by the authenticating gateway in front of this service."""
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Id header is required",
        )
    return user_id


@lru_cache(maxsize=1)
def _in_memory_bundle():
    settings = get_settings()
    return {
        "booking_repo": InMemoryBookingRepo(),
        "payment_repo": InMemoryPaymentRepo(),
        "resource_catalog": InMemoryResourceCatalog(),
        "unavailability_repo": InMemoryUnavailabilityRepo(),
        "resource_lock": InMemoryResourceLock(),
        "payment_gateway": StubPaymentGateway(webhook_secret=settings.stripe_webhook_secret),
        "tx_manager": NoopTransactionManager(),
        "clock": SystemClock(),
    }


def build_use_cases(
    settings: Settings,
    booking_repo: BookingRepo,
    payment_repo: PaymentRepo,
    resource_catalog: ResourceCatalog,
    unavailability_repo: UnavailabilityRepo,
    resource_lock: ResourceLock,
    payment_gateway: PaymentGateway,
    tx_manager: TransactionManager,
    clock: Clock,
) -> dict:
    availability_checker = AvailabilityChecker(
        booking_repo=booking_repo,
        unavailability_repo=unavailability_repo,
    )
    quoter = StayQuoter(
        resource_catalog=resource_catalog,
        clock=clock,
        service_fee=settings.service_fee,
    )
    return {
        "check_availability": CheckAvailabilityUseCase(
            availability_checker=availability_checker,
            resource_catalog=resource_catalog,
        ),
        "create_booking": CreateBookingUseCase(
            booking_repo=booking_repo,
            payment_repo=payment_repo,
            availability_checker=availability_checker,
            quoter=quoter,
            resource_lock=resource_lock,
            transaction_manager=tx_manager,
            clock=clock,
            price_tolerance=settings.price_tolerance,
        ),
        "get_booking": GetBookingUseCase(
            booking_repo=booking_repo,
            resource_catalog=resource_catalog,
        ),
        "cancel_booking": CancelBookingUseCase(
            booking_repo=booking_repo,
            payment_repo=payment_repo,
            resource_catalog=resource_catalog,
            payment_gateway=payment_gateway,
            transaction_manager=tx_manager,
            clock=clock,
        ),
        "attach_payment_intent": AttachPaymentIntentUseCase(
            booking_repo=booking_repo,
            payment_repo=payment_repo,
            transaction_manager=tx_manager,
        ),
        "manage_unavailability": ManageUnavailabilityUseCase(
            resource_catalog=resource_catalog,
            unavailability_repo=unavailability_repo,
            transaction_manager=tx_manager,
        ),
        "create_payment_intent": CreatePaymentIntentUseCase(
            quoter=quoter,
            payment_gateway=payment_gateway,
        ),
        "handle_payment_event": HandlePaymentEventUseCase(
            payment_repo=payment_repo,
            booking_repo=booking_repo,
            payment_gateway=payment_gateway,
            transaction_manager=tx_manager,
        ),
        "run_status_sweep": RunStatusSweepUseCase(
            booking_repo=booking_repo,
            transaction_manager=tx_manager,
            clock=clock,
        ),
    }


def build_sql_use_cases(settings: Settings, session: AsyncSession) -> dict:
    clock = SystemClock()
    return build_use_cases(
        settings,
        booking_repo=BookingRepoSQL(session),
        payment_repo=PaymentRepoSQL(session, clock=clock),
        resource_catalog=ResourceCatalogSQL(session),
        unavailability_repo=UnavailabilityRepoSQL(session),
        resource_lock=SQLResourceLock(session),
        payment_gateway=StripePaymentGateway(
            api_key=settings.stripe_api_key,
            webhook_secret=settings.stripe_webhook_secret,
        ),
        tx_manager=SQLAlchemyTransactionManager(session),
        clock=clock,
    )


def get_use_cases(
    settings: Settings = Depends(get_settings),
    session: AsyncSession | None = Depends(get_session),
):
    if settings.use_in_memory:
        return build_use_cases(settings, **_in_memory_bundle())

    if not session:
        raise RuntimeError("DB session not available")
    return build_sql_use_cases(settings, session)
