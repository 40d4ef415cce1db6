"""In-memory adapters for development and tests."""

from campstay.infrastructure.in_memory.booking_repo import InMemoryBookingRepo
from campstay.infrastructure.in_memory.payment_repo import InMemoryPaymentRepo
from campstay.infrastructure.in_memory.resource_catalog import (
    InMemoryResourceCatalog,
    InMemoryResourceLock,
    InMemoryUnavailabilityRepo,
)
from campstay.infrastructure.in_memory.stripe_gateway import StubPaymentGateway
from campstay.infrastructure.in_memory.transaction_manager import NoopTransactionManager

__all__ = [
    # Repositories
    "InMemoryBookingRepo",
    "InMemoryPaymentRepo",
    "InMemoryResourceCatalog",
    "InMemoryUnavailabilityRepo",
    # Gateways
    "StubPaymentGateway",
    # Concurrency
    "InMemoryResourceLock",
    "NoopTransactionManager",
]
