"""
End-to-end tests for the booking HTTP routes over the mock salon API.
"""

from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient

from salon_booking.application.use_cases.availability import LoadAvailabilityUseCase
from salon_booking.application.use_cases.catalog import CatalogUseCase
from salon_booking.application.use_cases.reservation_submission import ReservationSubmissionUseCase
from salon_booking.domain.entities.auth_session import AuthSession
from salon_booking.domain.entities.business_hours import BusinessHours
from salon_booking.infrastructure.salon_api.mock_api import MockSalonApi
from salon_booking.infrastructure.store.memory_store import MemorySelectionStore
from salon_booking.main import app
from salon_booking.wiring.dependencies import (
    get_availability_use_case,
    get_business_hours,
    get_catalog_use_case,
    get_clock,
    get_selection_store,
    get_submission_use_case,
)

DAY = "2026-01-20"  # seeded: 10:00 10:30 14:00 14:30 15:00 16:00


def _today() -> date:
    return date(2026, 1, 15)


@pytest.fixture
def api():
    return MockSalonApi(session=AuthSession(access_token="mock-token-1"), hours=BusinessHours())


@pytest.fixture
def client(api):
    store = MemorySelectionStore()
    availability = LoadAvailabilityUseCase(reservations=api)
    app.dependency_overrides[get_catalog_use_case] = lambda: CatalogUseCase(catalog=api)
    app.dependency_overrides[get_availability_use_case] = lambda: availability
    app.dependency_overrides[get_submission_use_case] = lambda: ReservationSubmissionUseCase(
        reservations=api, availability=availability
    )
    app.dependency_overrides[get_selection_store] = lambda: store
    app.dependency_overrides[get_business_hours] = lambda: BusinessHours()
    app.dependency_overrides[get_clock] = lambda: _today
    yield TestClient(app)
    app.dependency_overrides.clear()


def _start(client: TestClient, menu_id: str = "cut-female") -> str:
    resp = client.post("/api/v1/bookings", json={"menu_id": menu_id})
    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "no_date"
    return body["session_id"]


def _slots(client: TestClient, session_id: str) -> dict[str, dict]:
    resp = client.get(f"/api/v1/bookings/{session_id}/slots")
    assert resp.status_code == 200
    return {slot["time"]: slot for slot in resp.json()["slots"]}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_list_menus_and_filter_by_category(client):
    menus = client.get("/api/v1/menus").json()
    assert len(menus) == 8

    perms = client.get("/api/v1/menus", params={"category": "perm"}).json()
    assert {m["id"] for m in perms} == {"perm-down", "perm-normal", "perm-magic", "perm-volume-magic"}

    assert client.get("/api/v1/menus/nope").status_code == 404


def test_full_booking_flow(client):
    session_id = _start(client)

    resp = client.post(f"/api/v1/bookings/{session_id}/date", json={"date": DAY})
    assert resp.json()["status"] == "date_chosen"
    assert resp.json()["required_slots"] == 2

    slots = _slots(client, session_id)
    assert slots["13:30"]["startable"] is False
    assert slots["13:00"]["startable"] is True

    resp = client.post(f"/api/v1/bookings/{session_id}/time", json={"time": "13:30"})
    assert resp.status_code == 422
    assert resp.json()["detail"]["kind"] == "validation"

    resp = client.post(f"/api/v1/bookings/{session_id}/time", json={"time": "13:00"})
    assert resp.status_code == 200
    assert resp.json()["end_time"] == "14:00"

    resp = client.post(f"/api/v1/bookings/{session_id}/submit")
    assert resp.status_code == 200
    body = resp.json()
    assert body["reservation"]["start_time"] == "13:00"
    assert body["reservation"]["end_time"] == "14:00"
    assert body["reservation"]["status"] == "CONFIRMED"
    assert body["selection"]["status"] == "submitted"
    assert body["selection"]["date"] is None


def test_choose_time_before_date_is_rejected(client):
    session_id = _start(client)

    resp = client.post(f"/api/v1/bookings/{session_id}/time", json={"time": "13:00"})

    assert resp.status_code == 409
    assert resp.json()["detail"]["kind"] == "invalid_state"


def test_toggling_option_changes_required_slots(client):
    session_id = _start(client, "cut-male")
    client.post(f"/api/v1/bookings/{session_id}/date", json={"date": DAY})
    assert _slots(client, session_id)["13:30"]["startable"] is True

    resp = client.post(f"/api/v1/bookings/{session_id}/options/opt-shampoo")
    assert resp.json()["option_ids"] == ["opt-shampoo"]
    assert resp.json()["required_slots"] == 2
    assert _slots(client, session_id)["13:30"]["startable"] is False

    assert client.post(f"/api/v1/bookings/{session_id}/options/opt-missing").status_code == 422


def test_conflict_returns_fresh_slots(client, api):
    session_id = _start(client)
    client.post(f"/api/v1/bookings/{session_id}/date", json={"date": DAY})
    _slots(client, session_id)
    client.post(f"/api/v1/bookings/{session_id}/time", json={"time": "11:00"})
    api.fail_next_with_conflict()

    resp = client.post(f"/api/v1/bookings/{session_id}/submit")

    assert resp.status_code == 409
    detail = resp.json()["detail"]
    assert detail["kind"] == "slot_conflict"
    assert detail["error_code"] == "RESERVATION_CONFLICT"
    assert detail["selection"]["status"] == "date_chosen"
    assert detail["selection"]["start_time"] is None
    assert len(detail["slots"]) == BusinessHours().slot_count

    resp = client.post(f"/api/v1/bookings/{session_id}/time", json={"time": "11:00"})
    assert resp.status_code == 200


def test_reset_and_unknown_session(client):
    session_id = _start(client)
    client.post(f"/api/v1/bookings/{session_id}/date", json={"date": DAY})

    resp = client.post(f"/api/v1/bookings/{session_id}/reset")
    assert resp.json()["status"] == "no_date"

    resp = client.get("/api/v1/bookings/missing")
    assert resp.status_code == 404
    assert resp.json()["detail"]["kind"] == "not_found"


def test_past_date_is_rejected(client):
    session_id = _start(client)

    resp = client.post(f"/api/v1/bookings/{session_id}/date", json={"date": "2026-01-14"})

    assert resp.status_code == 422
    assert resp.json()["detail"]["kind"] == "validation"
    assert client.get(f"/api/v1/bookings/{session_id}").json()["status"] == "no_date"
