from __future__ import annotations

import logging

from salon_booking.application.exceptions import ServerError
from salon_booking.application.ports.reservations import ReservationPort
from salon_booking.application.utils.formatting import display_time_to_api
from salon_booking.domain.entities.reservation import ReservationRecord
from salon_booking.infrastructure.salon_api.http_client import SalonApiClient, wire_id
from salon_booking.infrastructure.salon_api.payloads import parse_list, parse_reservation, parse_reserved_times


class HttpReservations(ReservationPort):
    def __init__(self, client: SalonApiClient) -> None:
        self._client = client
        self._logger = logging.getLogger(__name__)

    async def fetch_reserved_times(self, date: str, menu_id: str, option_ids: list[str]) -> set[str]:
        params = {"date": date, "menuId": menu_id}
        if option_ids:
            params["optionIds"] = ",".join(option_ids)
        data = await self._client.get("/api/v1/reservations/reserved-times", params=params)
        return parse_reserved_times(data)

    async def submit_reservation(
        self,
        date: str,
        start_time: str,
        menu_id: str,
        option_ids: list[str],
    ) -> ReservationRecord:
        payload = {
            "reservationDate": date,
            "startTime": display_time_to_api(start_time),
            "menuId": wire_id(menu_id),
            "optionIds": [wire_id(o) for o in option_ids],
        }
        data = await self._client.post("/api/v1/reservations", json=payload)
        if not data:
            raise ServerError("reservation created without a record", error_code="MALFORMED_RESPONSE")
        return parse_reservation(data)

    async def fetch_my_reservations(self) -> list[ReservationRecord]:
        data = await self._client.get("/api/v1/reservations/me")
        return parse_list(data, parse_reservation)

    async def cancel_my_reservation(self, reservation_id: str) -> None:
        await self._client.patch(f"/api/v1/reservations/{reservation_id}/cancel")

    async def fetch_reservations_for_date(self, date: str) -> list[ReservationRecord]:
        data = await self._client.get("/api/v1/admin/reservations", params={"date": date})
        return parse_list(data, parse_reservation)

    async def cancel_reservation(self, reservation_id: str) -> None:
        await self._client.patch(f"/api/v1/admin/reservations/{reservation_id}/cancel")

    async def complete_reservation(self, reservation_id: str) -> None:
        await self._client.patch(f"/api/v1/admin/reservations/{reservation_id}/complete")
