from typing import Annotated

from fastapi import APIRouter, Depends, status

from campstay.api.dependencies import get_current_user_id, get_use_cases
from campstay.api.schemas.bookings import (
    AttachPaymentIntentRequest,
    BookingCreatedResponse,
    BookingResponse,
    CancellationResponse,
    CreateBookingRequest,
)
from campstay.infrastructure.db.retry import retry_on_deadlock

router = APIRouter()


@router.post(
    "/bookings",
    response_model=BookingCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_booking(
    payload: CreateBookingRequest,
    user_id: Annotated[int, Depends(get_current_user_id)],
    use_cases: Annotated[dict, Depends(get_use_cases)],
) -> BookingCreatedResponse:
    """
    Create a booking with automatic deadlock retry.

    Concurrent requests for the same resource serialize on its lock; a waiter
    aborted by the database is replayed, then sees the winner's booking.
    """

    async def execute_create():
        return await use_cases["create_booking"].execute(
            resource_id=payload.resource_id,
            renter_id=user_id,
            start_date=payload.start_date,
            end_date=payload.end_date,
            client_total=payload.total_price,
            payment_intent_id=payload.payment_intent_id,
        )

    created = await retry_on_deadlock(execute_create, max_attempts=3, base_delay=0.1)
    return BookingCreatedResponse(**vars(created))


@router.get("/bookings/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: int,
    user_id: Annotated[int, Depends(get_current_user_id)],
    use_cases: Annotated[dict, Depends(get_use_cases)],
) -> BookingResponse:
    booking = await use_cases["get_booking"].execute(
        booking_id=booking_id, requesting_user_id=user_id
    )
    return BookingResponse.model_validate(booking)


@router.post("/bookings/{booking_id}/cancel", response_model=CancellationResponse)
async def cancel_booking(
    booking_id: int,
    user_id: Annotated[int, Depends(get_current_user_id)],
    use_cases: Annotated[dict, Depends(get_use_cases)],
) -> CancellationResponse:
    result = await use_cases["cancel_booking"].execute(
        booking_id=booking_id, requesting_user_id=user_id
    )
    return CancellationResponse(
        booking_id=result.booking_id,
        status=result.status,
        refund_outcome=result.refund_outcome,
    )


@router.put("/bookings/{booking_id}/payment-intent", response_model=BookingResponse)
async def attach_payment_intent(
    booking_id: int,
    payload: AttachPaymentIntentRequest,
    user_id: Annotated[int, Depends(get_current_user_id)],
    use_cases: Annotated[dict, Depends(get_use_cases)],
) -> BookingResponse:
    booking = await use_cases["attach_payment_intent"].execute(
        booking_id=booking_id,
        requesting_user_id=user_id,
        intent_id=payload.payment_intent_id,
    )
    return BookingResponse.model_validate(booking)
