"""Background driver for the status lifecycle sweep."""

import asyncio
import logging
from typing import Awaitable, Callable
from uuid import uuid4

from campstay.application.dtos.booking_dto import SweepResultDTO

logger = logging.getLogger(__name__)

SweepRunner = Callable[[], Awaitable[SweepResultDTO]]


class StatusSweepWorker:
    """
    Runs the status sweep on a fixed interval until stopped.

    `run_sweep` is called once per iteration and is expected to build its own
    storage session, so a broken connection does not outlive one iteration.
    Errors inside an iteration are logged and the loop keeps going.
    """

    def __init__(
        self,
        run_sweep: SweepRunner,
        interval_seconds: float = 3600.0,
        worker_id: str | None = None,
    ) -> None:
        self._run_sweep = run_sweep
        self._interval = interval_seconds
        self._worker_id = worker_id or f"sweeper-{uuid4().hex[:8]}"
        self._running = False
        self._stopped = asyncio.Event()

    @property
    def worker_id(self) -> str:
        return self._worker_id

    @property
    def is_running(self) -> bool:
        return self._running

    async def run_once(self) -> SweepResultDTO | None:
        try:
            return await self._run_sweep()
        except Exception:
            logger.exception("Status sweep iteration failed", extra={"worker_id": self._worker_id})
            return None

    async def start(self) -> None:
        self._running = True
        self._stopped.clear()
        logger.info("StatusSweepWorker started", extra={"worker_id": self._worker_id})

        while self._running:
            await self.run_once()
            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                continue

        logger.info("StatusSweepWorker stopped", extra={"worker_id": self._worker_id})

    async def stop(self) -> None:
        self._running = False
        self._stopped.set()
