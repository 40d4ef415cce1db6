from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Sequence

from sqlalchemy import delete, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from campstay.application.interfaces.resource_catalog import (
    ResourceCatalog,
    ResourceLock,
    UnavailabilityRepo,
)
from campstay.domain.entities.resource import Resource, UnavailabilityWindow
from campstay.domain.errors import ResourceNotFoundError
from campstay.domain.value_objects.date_range import DateRange
from campstay.infrastructure.db.tables import resources, unavailability_windows


class ResourceCatalogSQL(ResourceCatalog):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_resource(self, resource_id: int) -> Resource | None:
        stmt = select(resources).where(resources.c.id == resource_id)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        if not row:
            return None
        return Resource(
            id=row["id"],
            owner_id=row["owner_id"],
            nightly_price=row["nightly_price"],
            currency=row["currency"],
        )


class UnavailabilityRepoSQL(UnavailabilityRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_resource(self, resource_id: int) -> Sequence[UnavailabilityWindow]:
        stmt = (
            select(unavailability_windows)
            .where(unavailability_windows.c.resource_id == resource_id)
            .order_by(unavailability_windows.c.start_date, unavailability_windows.c.id)
        )
        result = await self._session.execute(stmt)
        return [self._map_window(row) for row in result.mappings().all()]

    async def count_overlapping(self, resource_id: int, stay: DateRange) -> int:
        stmt = (
            select(func.count())
            .select_from(unavailability_windows)
            .where(
                unavailability_windows.c.resource_id == resource_id,
                unavailability_windows.c.start_date < stay.end,
                unavailability_windows.c.end_date > stay.start,
            )
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def add(self, window: UnavailabilityWindow) -> UnavailabilityWindow:
        stmt = insert(unavailability_windows).values(
            resource_id=window.resource_id,
            start_date=window.start_date,
            end_date=window.end_date,
            reason=window.reason,
        )
        result = await self._session.execute(stmt)
        return UnavailabilityWindow(
            id=result.inserted_primary_key[0],
            resource_id=window.resource_id,
            start_date=window.start_date,
            end_date=window.end_date,
            reason=window.reason,
        )

    async def delete(self, resource_id: int, window_id: int) -> int:
        stmt = delete(unavailability_windows).where(
            unavailability_windows.c.id == window_id,
            unavailability_windows.c.resource_id == resource_id,
        )
        result = await self._session.execute(stmt)
        return result.rowcount

    def _map_window(self, row) -> UnavailabilityWindow:
        return UnavailabilityWindow(
            id=row["id"],
            resource_id=row["resource_id"],
            start_date=row["start_date"],
            end_date=row["end_date"],
            reason=row.get("reason"),
        )


class SQLResourceLock(ResourceLock):
    """
    Row lock on the resource for the rest of the current transaction.

    Must be entered inside `TransactionManager.start()`; the lock is released
    by that commit or rollback, not on leaving `hold()`. SQLite ignores FOR
    UPDATE; there the engine begins every transaction with BEGIN IMMEDIATE
    (see `use_immediate_transactions`), which already holds the database
    write lock for the whole unit of work.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @asynccontextmanager
    async def hold(self, resource_id: int) -> AsyncIterator[None]:
        stmt = select(resources.c.id).where(resources.c.id == resource_id).with_for_update()
        result = await self._session.execute(stmt)
        if result.first() is None:
            raise ResourceNotFoundError(resource_id)
        yield
