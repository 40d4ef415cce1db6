from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from campstay.api.dependencies import get_current_user_id, get_use_cases
from campstay.api.schemas.bookings import (
    AvailabilityResponse,
    CreateUnavailabilityRequest,
    UnavailabilityResponse,
)

router = APIRouter()


@router.get("/resources/{resource_id}/availability", response_model=AvailabilityResponse)
async def check_availability(
    resource_id: int,
    use_cases: Annotated[dict, Depends(get_use_cases)],
    start_date: date = Query(...),
    end_date: date = Query(...),
) -> AvailabilityResponse:
    available = await use_cases["check_availability"].execute(
        resource_id=resource_id, start_date=start_date, end_date=end_date
    )
    return AvailabilityResponse(
        resource_id=resource_id,
        start_date=start_date,
        end_date=end_date,
        available=available,
    )


@router.get(
    "/resources/{resource_id}/unavailability",
    response_model=list[UnavailabilityResponse],
)
async def list_unavailability(
    resource_id: int,
    use_cases: Annotated[dict, Depends(get_use_cases)],
) -> list[UnavailabilityResponse]:
    windows = await use_cases["manage_unavailability"].list_windows(resource_id)
    return [UnavailabilityResponse.model_validate(w) for w in windows]


@router.post(
    "/resources/{resource_id}/unavailability",
    response_model=UnavailabilityResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_unavailability(
    resource_id: int,
    payload: CreateUnavailabilityRequest,
    user_id: Annotated[int, Depends(get_current_user_id)],
    use_cases: Annotated[dict, Depends(get_use_cases)],
) -> UnavailabilityResponse:
    window = await use_cases["manage_unavailability"].add_window(
        resource_id=resource_id,
        owner_id=user_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        reason=payload.reason,
    )
    return UnavailabilityResponse.model_validate(window)


@router.delete(
    "/resources/{resource_id}/unavailability/{window_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_unavailability(
    resource_id: int,
    window_id: int,
    user_id: Annotated[int, Depends(get_current_user_id)],
    use_cases: Annotated[dict, Depends(get_use_cases)],
) -> None:
    await use_cases["manage_unavailability"].delete_window(
        resource_id=resource_id, window_id=window_id, owner_id=user_id
    )
