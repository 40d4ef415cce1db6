"""Payment entity - gateway charge reconciled against a booking."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from campstay.domain.value_objects.money import Money


class PaymentStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentEventType(str, Enum):
    """Gateway events the reconciliation processor applies."""

    INTENT_SUCCEEDED = "payment_intent.succeeded"
    INTENT_FAILED = "payment_intent.payment_failed"

    @property
    def resulting_status(self) -> PaymentStatus:
        if self is PaymentEventType.INTENT_SUCCEEDED:
            return PaymentStatus.SUCCEEDED
        return PaymentStatus.FAILED


@dataclass
class Payment:
    """
    One row per external intent id.

    `booking_id` stays None until a booking referencing the intent exists,
    and is never overwritten once set.
    """

    id: int | None
    external_intent_id: str
    amount: Decimal
    currency: str
    status: PaymentStatus
    booking_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_refundable(self) -> bool:
        return self.status == PaymentStatus.SUCCEEDED


@dataclass(frozen=True)
class PaymentEvent:
    """Verified gateway event, already reduced to what reconciliation needs."""

    event_id: str | None
    type: str
    intent_id: str | None = None
    amount: Money | None = None
    failure_reason: str | None = None

    @property
    def kind(self) -> PaymentEventType | None:
        try:
            return PaymentEventType(self.type)
        except ValueError:
            return None

    @classmethod
    def from_stripe_event(cls, event: dict) -> "PaymentEvent":
        data = event.get("data")
        obj = (data.get("object") or {}) if isinstance(data, dict) else {}
        amount = None
        if obj.get("amount") is not None and obj.get("currency"):
            amount = Money.from_cents(int(obj["amount"]), obj["currency"])
        last_error = obj.get("last_payment_error") or {}
        return cls(
            event_id=event.get("id"),
            type=event.get("type") or "",
            intent_id=obj.get("id") or obj.get("payment_intent"),
            amount=amount,
            failure_reason=last_error.get("message"),
        )
