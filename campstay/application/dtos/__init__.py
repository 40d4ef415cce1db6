"""DTOs of the application layer."""

from campstay.application.dtos.booking_dto import (
    BookingCreatedDTO,
    CancellationResultDTO,
    RefundOutcome,
    SweepResultDTO,
    WebhookOutcome,
)

__all__ = [
    "BookingCreatedDTO",
    "CancellationResultDTO",
    "RefundOutcome",
    "SweepResultDTO",
    "WebhookOutcome",
]
