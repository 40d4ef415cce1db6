from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, condecimal, constr

from campstay.domain.entities.booking import BookingStatus

Money = condecimal(max_digits=12, decimal_places=2)
IntentId = constr(strip_whitespace=True, min_length=1, max_length=64)


class StayRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    resource_id: int
    start_date: date
    end_date: date


class CreateBookingRequest(StayRequest):
    total_price: Money | None = Field(
        default=None,
        description="Total shown to the renter; rejected if it differs from the server quote.",
    )
    payment_intent_id: IntentId | None = None


class BookingCreatedResponse(BaseModel):
    booking_id: int
    resource_id: int
    start_date: date
    end_date: date
    nights: int
    total_price: Decimal
    currency: str
    status: str
    payment_intent_ref: str | None = None


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    resource_id: int
    renter_id: int
    start_date: date
    end_date: date
    status: BookingStatus
    total_price: Decimal
    payment_intent_ref: str | None = None
    created_at: datetime | None = None
    cancellation_date: datetime | None = None


class CancellationResponse(BaseModel):
    booking_id: int
    status: str
    refund_outcome: str


class AttachPaymentIntentRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    payment_intent_id: IntentId


class AvailabilityResponse(BaseModel):
    resource_id: int
    start_date: date
    end_date: date
    available: bool


class CreateUnavailabilityRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    start_date: date
    end_date: date
    reason: constr(strip_whitespace=True, max_length=255) | None = None


class UnavailabilityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    resource_id: int
    start_date: date
    end_date: date
    reason: str | None = None


class CreatePaymentIntentRequest(StayRequest):
    pass


class PaymentIntentResponse(BaseModel):
    intent_id: str
    client_secret: str
    amount: Decimal
    currency: str


class WebhookResponse(BaseModel):
    outcome: str


class SweepResponse(BaseModel):
    transitioned_count: int
    failed_count: int = 0
