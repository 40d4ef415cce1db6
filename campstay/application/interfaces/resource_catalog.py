from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Protocol, Sequence

from campstay.domain.entities.resource import Resource, UnavailabilityWindow
from campstay.domain.value_objects.date_range import DateRange


class ResourceCatalog:
    async def get_resource(self, resource_id: int) -> Resource | None:
        raise NotImplementedError


class UnavailabilityRepo:
    async def list_for_resource(self, resource_id: int) -> Sequence[UnavailabilityWindow]:
        raise NotImplementedError

    async def count_overlapping(self, resource_id: int, stay: DateRange) -> int:
        raise NotImplementedError

    async def add(self, window: UnavailabilityWindow) -> UnavailabilityWindow:
        raise NotImplementedError

    async def delete(self, resource_id: int, window_id: int) -> int:
        raise NotImplementedError


class ResourceLock(Protocol):
    """Per-resource critical section around check-and-insert."""

    @asynccontextmanager
    async def hold(self, resource_id: int) -> AsyncIterator[None]:
        yield
