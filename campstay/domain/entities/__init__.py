"""Entities of the booking domain."""

from campstay.domain.entities.booking import Booking, BookingChanges, BookingStatus, StayQuote
from campstay.domain.entities.payment import Payment, PaymentEvent, PaymentEventType, PaymentStatus
from campstay.domain.entities.resource import Resource, UnavailabilityWindow

__all__ = [
    # Booking
    "Booking",
    "BookingChanges",
    "BookingStatus",
    "StayQuote",
    # Payment
    "Payment",
    "PaymentEvent",
    "PaymentEventType",
    "PaymentStatus",
    # Catalog
    "Resource",
    "UnavailabilityWindow",
]
