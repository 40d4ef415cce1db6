"""
Domain layer - campsite booking core.

Pure business rules with no framework dependencies.

Layout:
- entities/: Booking, Payment, Resource and UnavailabilityWindow
- value_objects/: DateRange and Money
- errors.py: typed domain exceptions
"""

from campstay.domain.entities import (
    Booking,
    BookingChanges,
    BookingStatus,
    Payment,
    PaymentEvent,
    PaymentEventType,
    PaymentStatus,
    Resource,
    StayQuote,
    UnavailabilityWindow,
)
from campstay.domain.errors import (
    AlreadyFinalizedError,
    AuthorizationError,
    BookingConflictError,
    BookingNotFoundError,
    ConflictError,
    DomainError,
    ExternalServiceError,
    InvalidDateRangeError,
    NotFoundError,
    PriceMismatchError,
    ResourceNotFoundError,
    SelfBookingForbiddenError,
    UnavailabilityNotFoundError,
    ValidationError,
    WebhookVerificationError,
)
from campstay.domain.value_objects import DateRange, Money

__all__ = [
    # Entities
    "Booking",
    "BookingChanges",
    "BookingStatus",
    "StayQuote",
    "Payment",
    "PaymentEvent",
    "PaymentEventType",
    "PaymentStatus",
    "Resource",
    "UnavailabilityWindow",
    # Value Objects
    "DateRange",
    "Money",
    # Errors
    "DomainError",
    "ValidationError",
    "InvalidDateRangeError",
    "PriceMismatchError",
    "AuthorizationError",
    "SelfBookingForbiddenError",
    "NotFoundError",
    "ResourceNotFoundError",
    "BookingNotFoundError",
    "UnavailabilityNotFoundError",
    "ConflictError",
    "BookingConflictError",
    "AlreadyFinalizedError",
    "ExternalServiceError",
    "WebhookVerificationError",
]
