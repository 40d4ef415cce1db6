import logging
from datetime import datetime

from campstay.application.dtos.booking_dto import SweepResultDTO
from campstay.application.interfaces.booking_repo import BookingRepo
from campstay.application.interfaces.clock import Clock
from campstay.application.interfaces.transaction_manager import TransactionManager
from campstay.domain.entities.booking import BookingChanges, BookingStatus


class RunStatusSweepUseCase:
    """
    Promotes confirmed bookings whose stay has ended to completed.

    Each row is its own conditional update guarded by status='confirmed', so a
    concurrent cancellation wins and re-running the sweep is a no-op.
    """

    def __init__(
        self,
        booking_repo: BookingRepo,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._booking_repo = booking_repo
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(self, now: datetime | None = None) -> SweepResultDTO:
        today = (now or self._clock.now()).date()
        booking_ids = await self._booking_repo.list_due_for_completion(today)
        transitioned = 0
        failed = 0

        for booking_id in booking_ids:
            try:
                async with self._transaction_manager.start():
                    transitioned += await self._booking_repo.apply_changes(
                        booking_id,
                        BookingChanges(status=BookingStatus.COMPLETED),
                        expected_statuses=(BookingStatus.CONFIRMED,),
                    )
            except Exception as exc:  # noqa: BLE001
                failed += 1
                self._logger.error(
                    "Status sweep failed for booking; skipping",
                    exc_info=exc,
                    extra={"booking_id": booking_id},
                )

        self._logger.info(
            "Status sweep finished",
            extra={
                "sweep_date": today.isoformat(),
                "candidates": len(booking_ids),
                "transitioned_count": transitioned,
                "failed_count": failed,
            },
        )
        return SweepResultDTO(transitioned_count=transitioned, failed_count=failed)
