"""Ports of the application layer."""

from campstay.application.interfaces.booking_repo import BookingRepo
from campstay.application.interfaces.clock import Clock, FakeClock
from campstay.application.interfaces.payment_gateway import (
    PaymentGateway,
    PaymentIntentResult,
    RefundResult,
)
from campstay.application.interfaces.payment_repo import PaymentRepo
from campstay.application.interfaces.resource_catalog import (
    ResourceCatalog,
    ResourceLock,
    UnavailabilityRepo,
)
from campstay.application.interfaces.transaction_manager import TransactionManager

__all__ = [
    # Repositories
    "BookingRepo",
    "PaymentRepo",
    "ResourceCatalog",
    "UnavailabilityRepo",
    # Concurrency
    "ResourceLock",
    "TransactionManager",
    # Gateways
    "PaymentGateway",
    "PaymentIntentResult",
    "RefundResult",
    # Services
    "Clock",
    "FakeClock",
]
