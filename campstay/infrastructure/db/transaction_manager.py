from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from campstay.application.interfaces.transaction_manager import TransactionManager


class SQLAlchemyTransactionManager(TransactionManager):
    """
    Commits on leaving the outermost `start()`, rolls back on error.

    The outermost `start()` always opens a fresh transaction. Reads done before
    it (autobegun by the session) are committed first, so the unit of work
    does not inherit their snapshot: under REPEATABLE READ a snapshot taken
    before the resource row lock would hide bookings committed while waiting
    for that lock.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._depth = 0

    @asynccontextmanager
    async def start(self) -> AsyncIterator[None]:
        if self._depth:
            yield
            return
        if self._session.in_transaction():
            await self._session.commit()
        self._depth += 1
        try:
            yield
        except BaseException:
            await self._session.rollback()
            raise
        else:
            await self._session.commit()
        finally:
            self._depth -= 1
