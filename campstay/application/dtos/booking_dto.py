"""DTOs returned by the booking use cases."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum


@dataclass
class BookingCreatedDTO:
    booking_id: int
    resource_id: int
    start_date: date
    end_date: date
    nights: int
    total_price: Decimal
    currency: str
    status: str
    payment_intent_ref: str | None = None


class RefundOutcome:
    """Values reported in `refund_outcome` after a cancellation."""

    SUCCEEDED = "succeeded"
    NOT_APPLICABLE = "not_applicable"

    @staticmethod
    def failed(reason: str) -> str:
        return f"failed:{reason}"


@dataclass
class CancellationResultDTO:
    booking_id: int
    status: str
    refund_outcome: str

    @property
    def refund_failed(self) -> bool:
        return self.refund_outcome.startswith("failed:")


class WebhookOutcome(str, Enum):
    ACK = "ack"
    REJECTED = "rejected"


@dataclass
class SweepResultDTO:
    transitioned_count: int
    failed_count: int = 0
