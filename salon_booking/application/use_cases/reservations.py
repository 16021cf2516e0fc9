from __future__ import annotations

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass
from datetime import date, timedelta

from salon_booking.application.exceptions import BookingError, InvalidSelectionState, SelectionValidationError
from salon_booking.application.ports.reservations import ReservationPort
from salon_booking.domain.entities.reservation import ReservationRecord, ReservationStatus

MAX_ADMIN_RANGE_DAYS = 31


def is_upcoming(reservation: ReservationRecord, today: date) -> bool:
    return reservation.is_active and reservation.date >= today.isoformat()


def is_past(reservation: ReservationRecord, today: date) -> bool:
    return (
        reservation.status in (ReservationStatus.COMPLETED, ReservationStatus.CANCELLED)
        or reservation.date < today.isoformat()
    )


def sort_by_schedule(reservations: list[ReservationRecord]) -> list[ReservationRecord]:
    return sorted(reservations, key=lambda r: (r.date, r.start_time))


def dates_between(start: date, end: date) -> list[date]:
    days = (end - start).days
    return [start + timedelta(days=i) for i in range(days + 1)]


def _require_confirmed(reservation: ReservationRecord | None, reservation_id: str) -> None:
    if reservation is not None and not reservation.is_active:
        raise InvalidSelectionState(
            f"reservation {reservation_id} is {reservation.status.value.lower()} and cannot be changed"
        )


@dataclass(frozen=True)
class MyReservations:
    all: list[ReservationRecord]
    upcoming: list[ReservationRecord]
    past: list[ReservationRecord]


class MyReservationsUseCase:
    def __init__(self, reservations: ReservationPort) -> None:
        self._reservations = reservations
        self._logger = logging.getLogger(__name__)

    async def overview(self, today: date | None = None) -> MyReservations:
        today = today or date.today()
        records = await self._reservations.fetch_my_reservations()
        return MyReservations(
            all=records,
            upcoming=[r for r in records if is_upcoming(r, today)],
            past=[r for r in records if is_past(r, today)],
        )

    async def cancel(self, reservation_id: str) -> None:
        records = await self._reservations.fetch_my_reservations()
        _require_confirmed(next((r for r in records if r.id == reservation_id), None), reservation_id)
        await self._reservations.cancel_my_reservation(reservation_id)
        self._logger.info("Reservation cancelled by customer", extra={"reservation_id": reservation_id})


@dataclass(frozen=True)
class AdminReservationView:
    reservations: list[ReservationRecord]  # filtered and sorted
    counts: dict[str, int]  # "ALL" plus one entry per status


class AdminReservationsUseCase:
    def __init__(self, reservations: ReservationPort) -> None:
        self._reservations = reservations
        self._logger = logging.getLogger(__name__)

    async def fetch_range(self, start: date, end: date) -> list[ReservationRecord]:
        days = dates_between(start, end)
        if not days or len(days) > MAX_ADMIN_RANGE_DAYS:
            raise SelectionValidationError(
                f"date range must cover 1 to {MAX_ADMIN_RANGE_DAYS} days, got {start} ~ {end}"
            )
        results = await asyncio.gather(*(self._fetch_day(day) for day in days))
        return [record for day_records in results for record in day_records]

    async def view(
        self,
        start: date,
        end: date,
        status: ReservationStatus | None = None,
    ) -> AdminReservationView:
        records = await self.fetch_range(start, end)
        counts = Counter(r.status.value for r in records)
        summary = {"ALL": len(records)}
        summary.update({s.value: counts.get(s.value, 0) for s in ReservationStatus})
        filtered = records if status is None else [r for r in records if r.status == status]
        return AdminReservationView(reservations=sort_by_schedule(filtered), counts=summary)

    async def complete(self, reservation: ReservationRecord) -> None:
        _require_confirmed(reservation, reservation.id)
        await self._reservations.complete_reservation(reservation.id)
        self._logger.info("Reservation completed", extra={"reservation_id": reservation.id})

    async def cancel(self, reservation: ReservationRecord) -> None:
        _require_confirmed(reservation, reservation.id)
        await self._reservations.cancel_reservation(reservation.id)
        self._logger.info("Reservation cancelled by admin", extra={"reservation_id": reservation.id})

    async def _fetch_day(self, day: date) -> list[ReservationRecord]:
        try:
            return await self._reservations.fetch_reservations_for_date(day.isoformat())
        except BookingError as e:
            self._logger.warning(
                "Skipping day in admin listing",
                extra={"date": day.isoformat(), "kind": e.kind.value, "error_code": e.error_code},
            )
            return []
