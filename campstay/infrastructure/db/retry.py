"""
Retries for transactions that lose a lock race.

Booking creation serializes on a row lock of the resource; under contention
the database may abort one of the waiters (MySQL deadlock / lock wait timeout,
PostgreSQL deadlock, SQLite busy). The whole unit of work is safe to replay
because nothing was committed.
"""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError

logger = logging.getLogger(__name__)

T = TypeVar("T")

MYSQL_DEADLOCK_ERROR = "1213"
MYSQL_LOCK_WAIT_TIMEOUT = "1205"
POSTGRES_DEADLOCK_DETECTED = "deadlock detected"
SQLITE_DATABASE_LOCKED = "database is locked"

_TRANSIENT_MARKERS = (
    MYSQL_DEADLOCK_ERROR,
    MYSQL_LOCK_WAIT_TIMEOUT,
    POSTGRES_DEADLOCK_DETECTED,
    SQLITE_DATABASE_LOCKED,
)


def is_deadlock_error(error: Exception) -> bool:
    """True when `error` is a lock conflict that a replay can resolve."""
    if isinstance(error, (OperationalError, DBAPIError)):
        error_str = str(error)
        return any(marker in error_str for marker in _TRANSIENT_MARKERS)
    return False


async def retry_on_deadlock(
    func: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 0.1,
    on_retry: Callable[[], Awaitable[None]] | None = None,
) -> T:
    """
    Run `func`, replaying it with exponential backoff on deadlocks.

    Args:
        func: Zero-argument coroutine function wrapping one unit of work.
        max_attempts: Total attempts, including the first.
        base_delay: Delay before the first replay; doubled each attempt.
        on_retry: Awaited before each replay, e.g. to reset the session.

    Raises:
        The last error when attempts run out, or any non-deadlock error at once.
    """
    for attempt in range(max_attempts):
        try:
            return await func()
        except Exception as e:
            if not is_deadlock_error(e):
                raise

            if attempt >= max_attempts - 1:
                logger.error(
                    "Database deadlock persists after max retries",
                    extra={"attempts": max_attempts, "error": str(e)},
                )
                raise

            delay = base_delay * (2 ** attempt)
            logger.warning(
                "Database deadlock detected, retrying",
                extra={
                    "attempt": attempt + 1,
                    "max_attempts": max_attempts,
                    "retry_delay": delay,
                    "error": str(e),
                },
            )
            await asyncio.sleep(delay)
            if on_retry is not None:
                await on_retry()

    raise RuntimeError("retry_on_deadlock called with max_attempts < 1")
