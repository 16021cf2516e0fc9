"""
Tests for the httpx salon API adapters, using httpx.MockTransport.
"""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from salon_booking.application.exceptions import (
    NetworkError,
    NotFoundError,
    SelectionValidationError,
    ServerError,
    SlotConflict,
    UnauthorizedError,
)
from salon_booking.core.config import settings
from salon_booking.domain.entities.auth_session import AuthSession
from salon_booking.domain.entities.menu import MenuDraft, MenuOptionDraft
from salon_booking.domain.entities.reservation import ReservationStatus
from salon_booking.domain.entities.user import SignupForm
from salon_booking.infrastructure.salon_api.auth_client import HttpAuth
from salon_booking.infrastructure.salon_api.catalog_client import HttpCatalog
from salon_booking.infrastructure.salon_api.http_client import SalonApiClient
from salon_booking.infrastructure.salon_api.payloads import parse_reserved_times
from salon_booking.infrastructure.salon_api.reservation_client import HttpReservations

BASE_URL = "https://salon.test"


def _ok(data) -> httpx.Response:
    return httpx.Response(200, json={"isSuccess": True, "data": data})


def _error(status: int, code: str, message: str = "failed") -> httpx.Response:
    return httpx.Response(status, json={"isSuccess": False, "error": {"errorCode": code, "errorMessage": message}})


def _client(handler, token: str | None = "token-123") -> SalonApiClient:
    return SalonApiClient(
        session=AuthSession(access_token=token),
        base_url=BASE_URL,
        transport=httpx.MockTransport(handler),
    )


def test_unwraps_envelope_and_sends_bearer_token():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        seen["path"] = request.url.path
        return _ok({"hello": "world"})

    data = asyncio.run(_client(handler).get("/api/v1/ping"))

    assert data == {"hello": "world"}
    assert seen == {"auth": "Bearer token-123", "path": "/api/v1/ping"}


def test_no_authorization_header_without_token():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        return _ok([])

    asyncio.run(_client(handler, token=None).get("/api/v1/menus"))
    assert seen["auth"] is None


@pytest.mark.parametrize(
    ("response", "error_type"),
    [
        (_error(409, "SOMETHING"), SlotConflict),
        (_error(400, "RESERVATION_CONFLICT"), SlotConflict),
        (_error(200, "SLOT_ALREADY_RESERVED"), SlotConflict),
        (_error(400, "INVALID_INPUT"), SelectionValidationError),
        (_error(401, "UNAUTHORIZED"), UnauthorizedError),
        (_error(404, "MENU_NOT_FOUND"), NotFoundError),
        (_error(500, "INTERNAL"), ServerError),
        (httpx.Response(502, text="<html>bad gateway</html>"), ServerError),
        (httpx.Response(200, text="not json"), ServerError),
    ],
)
def test_failures_are_classified(response, error_type):
    client = _client(lambda request: response)
    with pytest.raises(error_type):
        asyncio.run(client.get("/api/v1/anything"))


def test_error_message_and_code_are_preserved():
    client = _client(lambda request: _error(409, "RESERVATION_CONFLICT", "방금 다른 사용자가 예약했어요."))
    with pytest.raises(SlotConflict) as exc_info:
        asyncio.run(client.post("/api/v1/reservations", json={}))
    assert exc_info.value.error_code == "RESERVATION_CONFLICT"
    assert exc_info.value.message == "방금 다른 사용자가 예약했어요."


def test_transport_errors_become_network_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkError):
        asyncio.run(_client(handler).get("/api/v1/menus"))


def test_requires_base_url(monkeypatch):
    monkeypatch.setattr(settings, "SALON_API_BASE_URL", None)
    with pytest.raises(ValueError):
        SalonApiClient(session=AuthSession(), base_url="")


def test_fetch_menu_detail_parses_options():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v1/menus/7"
        return _ok(
            {
                "id": 7,
                "name": "여자 컷",
                "price": 15000,
                "minDuration": 60,
                "maxDuration": 90,
                "options": [{"id": 3, "name": "샴푸", "price": 3000, "duration": 10}],
                "categories": [{"id": 1, "name": "cut"}],
            }
        )

    menu = asyncio.run(HttpCatalog(_client(handler)).fetch_menu_detail("7"))

    assert menu.id == "7"
    assert menu.base_price == 15000
    assert menu.base_duration_minutes == 60
    assert menu.category == "cut"
    assert menu.options[0].id == "3"
    assert menu.options[0].additional_minutes == 10


def test_create_menu_payload():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return _ok(None)

    draft = MenuDraft(
        name="일반 펌",
        description="기본 펌",
        min_duration=120,
        max_duration=150,
        price=50000,
        options=(MenuOptionDraft(name="컷트 추가", duration=30, price=10000),),
        category_ids=("3",),
    )
    asyncio.run(HttpCatalog(_client(handler)).create_menu(draft))

    assert seen["body"]["minDuration"] == 120
    assert seen["body"]["categoryIds"] == [3]
    assert seen["body"]["options"][0] == {"name": "컷트 추가", "duration": 30, "price": 10000, "description": ""}


def test_fetch_reserved_times_normalizes_api_times():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return _ok(["10:00:00", "14:30:00"])

    reserved = asyncio.run(HttpReservations(_client(handler)).fetch_reserved_times("2026-01-20", "7", ["3", "4"]))

    assert reserved == {"10:00", "14:30"}
    assert seen["params"] == {"date": "2026-01-20", "menuId": "7", "optionIds": "3,4"}


def test_fetch_reserved_times_accepts_slot_objects():
    def handler(request: httpx.Request) -> httpx.Response:
        return _ok([{"time": "10:00:00", "reserved": True}, {"time": "10:30:00", "reserved": False}])

    reserved = asyncio.run(HttpReservations(_client(handler)).fetch_reserved_times("2026-01-20", "7", []))
    assert reserved == {"10:00"}


@pytest.mark.parametrize(
    "payload",
    [
        {"date": "2026-01-20", "slots": [{"time": "10:00", "available": True}, {"time": "10:30", "available": False}]},
        [{"time": "10:00:00", "disabled": False}, {"time": "10:30:00", "disabled": True}],
        [{"time": "10:00:00", "status": "AVAILABLE"}, {"time": "10:30:00", "status": "RESERVED"}],
        {"reservedTimes": ["10:30:00"]},
    ],
)
def test_slot_payload_shapes_only_report_taken_slots(payload):
    assert parse_reserved_times(payload) == {"10:30"}


@pytest.mark.parametrize(
    "payload",
    [
        5,
        "10:00",
        [{"time": "10:00"}],
        [{"available": True}],
        [{"time": 1000, "reserved": True}],
        [None],
    ],
)
def test_malformed_slot_payloads_are_server_errors(payload):
    with pytest.raises(ServerError) as exc_info:
        parse_reserved_times(payload)
    assert exc_info.value.error_code == "MALFORMED_RESPONSE"


def test_non_list_availability_body_is_server_error():
    client = _client(lambda request: _ok(5))
    with pytest.raises(ServerError) as exc_info:
        asyncio.run(HttpReservations(client).fetch_reserved_times("2026-01-20", "7", []))
    assert exc_info.value.error_code == "MALFORMED_RESPONSE"


@pytest.mark.parametrize(
    ("data", "call"),
    [
        ([{"name": "cut"}], lambda client: HttpCatalog(client).fetch_categories()),
        ({"menus": []}, lambda client: HttpCatalog(client).fetch_menus()),
        (["not-a-menu"], lambda client: HttpCatalog(client).fetch_menus()),
        ({"email": "a@b.c"}, lambda client: HttpAuth(client).fetch_me()),
        ({"id": 1, "role": "OWNER"}, lambda client: HttpAuth(client).fetch_me()),
        ([{"id": 1, "startTime": 1000, "endTime": "11:00:00"}], lambda client: HttpReservations(client).fetch_my_reservations()),
    ],
)
def test_malformed_entity_payloads_are_server_errors(data, call):
    client = _client(lambda request: _ok(data))
    with pytest.raises(ServerError):
        asyncio.run(call(client))


def test_submit_reservation_payload_and_record():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return _ok(
            {
                "id": 42,
                "reservationDate": "2026-01-20",
                "startTime": "13:00:00",
                "endTime": "14:30:00",
                "status": "CONFIRMED",
                "menuName": "뿌리 염색",
                "options": [{"id": 3, "name": "컷트 추가"}],
                "totalPrice": 40000,
            }
        )

    record = asyncio.run(
        HttpReservations(_client(handler)).submit_reservation("2026-01-20", "13:00", "7", ["3"])
    )

    assert seen["body"] == {"reservationDate": "2026-01-20", "startTime": "13:00:00", "menuId": 7, "optionIds": [3]}
    assert record.id == "42"
    assert record.start_time == "13:00"
    assert record.end_time == "14:30"
    assert record.status == ReservationStatus.CONFIRMED
    assert record.option_ids == ("3",)
    assert record.option_names == ("컷트 추가",)


def test_admin_reservation_actions_hit_expected_paths():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append((request.method, request.url.path))
        return _ok(None)

    reservations = HttpReservations(_client(handler))
    asyncio.run(reservations.complete_reservation("5"))
    asyncio.run(reservations.cancel_reservation("6"))
    asyncio.run(reservations.cancel_my_reservation("7"))

    assert calls == [
        ("PATCH", "/api/v1/admin/reservations/5/complete"),
        ("PATCH", "/api/v1/admin/reservations/6/cancel"),
        ("PATCH", "/api/v1/reservations/7/cancel"),
    ]


def test_signup_normalizes_phone_and_age():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return _ok({"id": 1, "email": "a@b.c", "username": "홍길동", "role": "USER", "age": 30, "phone": "01012345678"})

    form = SignupForm(name="홍길동", age="30", email="a@b.c", phone="010-1234-5678", password="pw")
    user = asyncio.run(HttpAuth(_client(handler)).signup(form))

    assert seen["body"]["phone"] == "01012345678"
    assert seen["body"]["age"] == 30
    assert user.username == "홍길동"


def test_login_without_token_is_server_error():
    client = _client(lambda request: _ok({}))
    with pytest.raises(ServerError):
        asyncio.run(HttpAuth(client).login("a@b.c", "pw"))
