from datetime import date

import pytest

from campstay.domain.errors import (
    AuthorizationError,
    InvalidDateRangeError,
    ResourceNotFoundError,
    UnavailabilityNotFoundError,
)
from conftest import OTHER_RESOURCE_ID, OWNER_ID, RENTER_ID, RESOURCE_ID


class TestManageUnavailability:
    async def test_owner_adds_lists_and_deletes(self, use_cases):
        manage = use_cases["manage_unavailability"]

        window = await manage.add_window(
            RESOURCE_ID, OWNER_ID, date(2031, 2, 1), date(2031, 2, 5), reason="maintenance"
        )
        assert window.id is not None
        assert [w.id for w in await manage.list_windows(RESOURCE_ID)] == [window.id]
        assert await manage.list_windows(OTHER_RESOURCE_ID) == []

        await manage.delete_window(RESOURCE_ID, window.id, OWNER_ID)
        assert await manage.list_windows(RESOURCE_ID) == []

    async def test_window_blocks_availability(self, use_cases):
        await use_cases["manage_unavailability"].add_window(
            RESOURCE_ID, OWNER_ID, date(2031, 2, 1), date(2031, 2, 5)
        )
        check = use_cases["check_availability"]

        assert not await check.execute(RESOURCE_ID, date(2031, 2, 3), date(2031, 2, 4))
        assert await check.execute(RESOURCE_ID, date(2031, 2, 5), date(2031, 2, 7))

    async def test_non_owner_cannot_write(self, use_cases):
        manage = use_cases["manage_unavailability"]

        with pytest.raises(AuthorizationError):
            await manage.add_window(RESOURCE_ID, RENTER_ID, date(2031, 2, 1), date(2031, 2, 5))

        window = await manage.add_window(RESOURCE_ID, OWNER_ID, date(2031, 2, 1), date(2031, 2, 5))
        with pytest.raises(AuthorizationError):
            await manage.delete_window(RESOURCE_ID, window.id, RENTER_ID)

    async def test_errors(self, use_cases):
        manage = use_cases["manage_unavailability"]

        with pytest.raises(InvalidDateRangeError):
            await manage.add_window(RESOURCE_ID, OWNER_ID, date(2031, 2, 5), date(2031, 2, 1))
        with pytest.raises(ResourceNotFoundError):
            await manage.list_windows(999)
        with pytest.raises(UnavailabilityNotFoundError):
            await manage.delete_window(RESOURCE_ID, 12345, OWNER_ID)
