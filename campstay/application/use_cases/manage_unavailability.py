import logging
from datetime import date
from typing import Sequence

from campstay.application.interfaces.resource_catalog import ResourceCatalog, UnavailabilityRepo
from campstay.application.interfaces.transaction_manager import TransactionManager
from campstay.domain.entities.resource import Resource, UnavailabilityWindow
from campstay.domain.errors import (
    AuthorizationError,
    ResourceNotFoundError,
    UnavailabilityNotFoundError,
)
from campstay.domain.value_objects.date_range import DateRange


class ManageUnavailabilityUseCase:
    """Owner-side blackout windows: add, list, delete."""

    def __init__(
        self,
        resource_catalog: ResourceCatalog,
        unavailability_repo: UnavailabilityRepo,
        transaction_manager: TransactionManager,
    ) -> None:
        self._resource_catalog = resource_catalog
        self._unavailability_repo = unavailability_repo
        self._transaction_manager = transaction_manager
        self._logger = logging.getLogger(__name__)

    async def _owned_resource(self, resource_id: int, owner_id: int) -> Resource:
        resource = await self._resource_catalog.get_resource(resource_id)
        if resource is None:
            raise ResourceNotFoundError(resource_id)
        if not resource.is_owned_by(owner_id):
            raise AuthorizationError(
                f"User {owner_id} does not own resource {resource_id}"
            )
        return resource

    async def add_window(
        self,
        resource_id: int,
        owner_id: int,
        start_date: date,
        end_date: date,
        reason: str | None = None,
    ) -> UnavailabilityWindow:
        DateRange(start=start_date, end=end_date)
        await self._owned_resource(resource_id, owner_id)
        async with self._transaction_manager.start():
            window = await self._unavailability_repo.add(
                UnavailabilityWindow(
                    id=None,
                    resource_id=resource_id,
                    start_date=start_date,
                    end_date=end_date,
                    reason=reason,
                )
            )
        self._logger.info(
            "Unavailability window added",
            extra={"resource_id": resource_id, "window_id": window.id},
        )
        return window

    async def list_windows(self, resource_id: int) -> Sequence[UnavailabilityWindow]:
        if await self._resource_catalog.get_resource(resource_id) is None:
            raise ResourceNotFoundError(resource_id)
        return await self._unavailability_repo.list_for_resource(resource_id)

    async def delete_window(self, resource_id: int, window_id: int, owner_id: int) -> None:
        await self._owned_resource(resource_id, owner_id)
        async with self._transaction_manager.start():
            deleted = await self._unavailability_repo.delete(resource_id, window_id)
        if not deleted:
            raise UnavailabilityNotFoundError(resource_id, window_id)
        self._logger.info(
            "Unavailability window deleted",
            extra={"resource_id": resource_id, "window_id": window_id},
        )
