from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from campstay.api.dependencies import get_use_cases
from campstay.api.schemas.bookings import SweepResponse

router = APIRouter()


@router.post(
    "/workers/status-sweep",
    response_model=SweepResponse,
    status_code=status.HTTP_200_OK,
)
async def run_status_sweep(
    use_cases: Annotated[dict, Depends(get_use_cases)],
    now: datetime | None = Query(default=None),
) -> SweepResponse:
    """Promote finished confirmed bookings to completed; safe to call repeatedly."""
    result = await use_cases["run_status_sweep"].execute(now=now)
    return SweepResponse(
        transitioned_count=result.transitioned_count,
        failed_count=result.failed_count,
    )
