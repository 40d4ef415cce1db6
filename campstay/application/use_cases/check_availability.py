from datetime import date

from campstay.application.interfaces.booking_repo import BookingRepo
from campstay.application.interfaces.resource_catalog import ResourceCatalog, UnavailabilityRepo
from campstay.domain.errors import ResourceNotFoundError
from campstay.domain.value_objects.date_range import DateRange


class AvailabilityChecker:
    """
    Decides whether a resource is free for a stay.

    Looks at every non-cancelled booking and every owner blackout window of the
    resource. On its own this is not race-free: callers that insert afterwards
    must hold the resource lock for the whole check-and-insert.
    """

    def __init__(self, booking_repo: BookingRepo, unavailability_repo: UnavailabilityRepo) -> None:
        self._booking_repo = booking_repo
        self._unavailability_repo = unavailability_repo

    async def is_available(
        self,
        resource_id: int,
        stay: DateRange,
        excluding_booking_id: int | None = None,
    ) -> bool:
        overlapping = await self._booking_repo.count_overlapping(
            resource_id=resource_id,
            stay=stay,
            excluding_booking_id=excluding_booking_id,
        )
        if overlapping:
            return False
        blackouts = await self._unavailability_repo.count_overlapping(
            resource_id=resource_id, stay=stay
        )
        return blackouts == 0


class CheckAvailabilityUseCase:
    def __init__(self, availability_checker: AvailabilityChecker, resource_catalog: ResourceCatalog) -> None:
        self._availability_checker = availability_checker
        self._resource_catalog = resource_catalog

    async def execute(self, resource_id: int, start_date: date, end_date: date) -> bool:
        stay = DateRange(start=start_date, end=end_date)
        if await self._resource_catalog.get_resource(resource_id) is None:
            raise ResourceNotFoundError(resource_id)
        return await self._availability_checker.is_available(resource_id, stay)
