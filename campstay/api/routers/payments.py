from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from campstay.api.dependencies import get_current_user_id, get_use_cases
from campstay.api.schemas.bookings import (
    CreatePaymentIntentRequest,
    PaymentIntentResponse,
    WebhookResponse,
)
from campstay.application.dtos.booking_dto import WebhookOutcome

router = APIRouter()


@router.post(
    "/payments/intents",
    response_model=PaymentIntentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_payment_intent(
    payload: CreatePaymentIntentRequest,
    user_id: Annotated[int, Depends(get_current_user_id)],
    use_cases: Annotated[dict, Depends(get_use_cases)],
) -> PaymentIntentResponse:
    intent = await use_cases["create_payment_intent"].execute(
        resource_id=payload.resource_id,
        renter_id=user_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
    )
    return PaymentIntentResponse(
        intent_id=intent.intent_id,
        client_secret=intent.client_secret,
        amount=intent.amount,
        currency=intent.currency,
    )


@router.post("/webhooks/stripe", response_model=WebhookResponse)
async def stripe_webhook(
    request: Request,
    use_cases: Annotated[dict, Depends(get_use_cases)],
):
    raw_body = await request.body()
    signature = request.headers.get("Stripe-Signature")
    outcome = await use_cases["handle_payment_event"].execute(
        raw_payload=raw_body, signature=signature
    )
    if outcome is WebhookOutcome.REJECTED:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"outcome": outcome.value},
        )
    return WebhookResponse(outcome=outcome.value)
