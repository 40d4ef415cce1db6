"""
Run the booking status sweep against the configured database.

    python scripts/run_status_sweep.py           # one pass, for cron
    python scripts/run_status_sweep.py --loop    # poll every SWEEP_INTERVAL_SECONDS
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add project root to sys.path
project_root = Path(__file__).resolve().parent.parent
sys.path.append(str(project_root))

from campstay.application.dtos.booking_dto import SweepResultDTO  # noqa: E402
from campstay.application.use_cases.run_status_sweep import RunStatusSweepUseCase  # noqa: E402
from campstay.config import get_settings  # noqa: E402
from campstay.infrastructure.db.engine import build_engine, build_sessionmaker, session_scope  # noqa: E402
from campstay.infrastructure.db.repositories.booking_repo_sql import BookingRepoSQL  # noqa: E402
from campstay.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager  # noqa: E402
from campstay.infrastructure.messaging import StatusSweepWorker  # noqa: E402
from campstay.infrastructure.services.clock_impl import SystemClock  # noqa: E402


async def main(loop: bool) -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    engine = build_engine(settings)
    session_maker = build_sessionmaker(engine)

    async def sweep_once() -> SweepResultDTO:
        async with session_scope(session_maker) as session:
            use_case = RunStatusSweepUseCase(
                booking_repo=BookingRepoSQL(session),
                transaction_manager=SQLAlchemyTransactionManager(session),
                clock=SystemClock(),
            )
            return await use_case.execute()

    try:
        if loop:
            worker = StatusSweepWorker(sweep_once, interval_seconds=settings.sweep_interval_seconds)
            await worker.start()
        else:
            result = await sweep_once()
            print(f"Transitioned {result.transitioned_count} bookings ({result.failed_count} failed).")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--loop", action="store_true", help="keep running on an interval")
    args = parser.parse_args()
    asyncio.run(main(loop=args.loop))
