from datetime import date, datetime, time, timedelta, timezone

from campstay.domain.entities import BookingStatus
from conftest import RENTER_ID, RESOURCE_ID

SWEEP_URL = "/api/v1/workers/status-sweep"


def _book(client, start: date, end: date) -> int:
    response = client.post(
        "/api/v1/bookings",
        json={"resource_id": RESOURCE_ID, "start_date": start.isoformat(), "end_date": end.isoformat()},
        headers={"X-User-Id": str(RENTER_ID)},
    )
    return response.json()["booking_id"]


def _at(day: date) -> str:
    return datetime.combine(day, time(0, 0), tzinfo=timezone.utc).isoformat()


def test_sweep_with_nothing_due(client):
    response = client.post(SWEEP_URL)

    assert response.status_code == 200
    assert response.json() == {"transitioned_count": 0, "failed_count": 0}


def test_sweep_completes_finished_stays(client, memory_bundle):
    start = date.today() + timedelta(days=10)
    finished = _book(client, start, start + timedelta(days=2))
    ongoing = _book(client, start + timedelta(days=2), start + timedelta(days=6))

    response = client.post(SWEEP_URL, params={"now": _at(start + timedelta(days=3))})

    assert response.json()["transitioned_count"] == 1
    bookings = memory_bundle["booking_repo"].bookings
    assert bookings[finished].status is BookingStatus.COMPLETED
    assert bookings[ongoing].status is BookingStatus.CONFIRMED


def test_sweep_is_idempotent(client):
    start = date.today() + timedelta(days=10)
    _book(client, start, start + timedelta(days=2))
    params = {"now": _at(start + timedelta(days=5))}

    assert client.post(SWEEP_URL, params=params).json()["transitioned_count"] == 1
    assert client.post(SWEEP_URL, params=params).json()["transitioned_count"] == 0


def test_completed_booking_cannot_be_cancelled(client):
    start = date.today() + timedelta(days=10)
    booking_id = _book(client, start, start + timedelta(days=2))
    client.post(SWEEP_URL, params={"now": _at(start + timedelta(days=5))})

    response = client.post(
        f"/api/v1/bookings/{booking_id}/cancel", headers={"X-User-Id": str(RENTER_ID)}
    )

    assert response.status_code == 409
    assert response.json()["code"] == "ALREADY_FINALIZED"
