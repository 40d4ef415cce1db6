import asyncio
from collections import defaultdict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Sequence

from campstay.application.interfaces.resource_catalog import (
    ResourceCatalog,
    ResourceLock,
    UnavailabilityRepo,
)
from campstay.domain.entities.resource import Resource, UnavailabilityWindow
from campstay.domain.value_objects.date_range import DateRange


class InMemoryResourceCatalog(ResourceCatalog):
    def __init__(self, resources: Sequence[Resource] = ()) -> None:
        self.resources: dict[int, Resource] = {r.id: r for r in resources}

    def add_resource(
        self,
        resource_id: int,
        owner_id: int,
        nightly_price: Decimal | str,
        currency: str = "eur",
    ) -> Resource:
        resource = Resource(
            id=resource_id,
            owner_id=owner_id,
            nightly_price=Decimal(str(nightly_price)),
            currency=currency,
        )
        self.resources[resource_id] = resource
        return resource

    async def get_resource(self, resource_id: int) -> Resource | None:
        return self.resources.get(resource_id)


class InMemoryUnavailabilityRepo(UnavailabilityRepo):
    def __init__(self) -> None:
        self.windows: dict[int, UnavailabilityWindow] = {}
        self._next_id = 1

    async def list_for_resource(self, resource_id: int) -> Sequence[UnavailabilityWindow]:
        return sorted(
            (w for w in self.windows.values() if w.resource_id == resource_id),
            key=lambda w: (w.start_date, w.id),
        )

    async def count_overlapping(self, resource_id: int, stay: DateRange) -> int:
        return sum(
            1
            for w in self.windows.values()
            if w.resource_id == resource_id and w.date_range.overlaps_with(stay)
        )

    async def add(self, window: UnavailabilityWindow) -> UnavailabilityWindow:
        stored = UnavailabilityWindow(
            id=self._next_id,
            resource_id=window.resource_id,
            start_date=window.start_date,
            end_date=window.end_date,
            reason=window.reason,
        )
        self._next_id += 1
        self.windows[stored.id] = stored
        return stored

    async def delete(self, resource_id: int, window_id: int) -> int:
        window = self.windows.get(window_id)
        if window is None or window.resource_id != resource_id:
            return 0
        del self.windows[window_id]
        return 1


class InMemoryResourceLock(ResourceLock):
    """One asyncio.Lock per resource; different resources never contend."""

    def __init__(self) -> None:
        self._locks: defaultdict[int, asyncio.Lock] = defaultdict(asyncio.Lock)

    @asynccontextmanager
    async def hold(self, resource_id: int) -> AsyncIterator[None]:
        async with self._locks[resource_id]:
            yield
