from __future__ import annotations

import logging
from dataclasses import dataclass

from salon_booking.application.exceptions import BookingError, BookingFailure
from salon_booking.application.ports.reservations import ReservationPort
from salon_booking.application.use_cases.booking_selection import AvailabilityKey, BookingSelection
from salon_booking.domain.entities.slot import Slot


@dataclass(frozen=True)
class AvailabilityResult:
    key: AvailabilityKey | None
    slots: list[Slot]
    stale: bool = False  # selection changed while the fetch was in flight
    failure: BookingFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None and not self.stale

    @property
    def no_availability(self) -> bool:
        """Nothing on this date can fit the booking. A normal empty result, not an error."""
        return self.ok and not any(slot.startable for slot in self.slots)


class LoadAvailabilityUseCase:
    def __init__(self, reservations: ReservationPort) -> None:
        self._reservations = reservations
        self._logger = logging.getLogger(__name__)

    async def execute(self, selection: BookingSelection) -> AvailabilityResult:
        try:
            key = selection.begin_availability_fetch()
        except BookingError as e:
            return AvailabilityResult(key=None, slots=[], failure=BookingFailure.from_error(e))

        # the option ids are read before awaiting so the request matches the key
        option_ids = selection.option_ids
        try:
            reserved = await self._reservations.fetch_reserved_times(key.date, selection.menu.id, option_ids)
        except BookingError as e:
            self._logger.warning(
                "Availability fetch failed",
                extra={"date": key.date, "kind": e.kind.value, "error_code": e.error_code},
            )
            return AvailabilityResult(key=key, slots=[], failure=BookingFailure.from_error(e))

        if not selection.apply_availability(key, reserved):
            return AvailabilityResult(key=key, slots=[], stale=True)

        slots = selection.slots or []
        self._logger.info(
            "Availability loaded",
            extra={
                "date": key.date,
                "menu_id": selection.menu.id,
                "required_slots": key.required_slots,
                "startable": sum(1 for s in slots if s.startable),
            },
        )
        return AvailabilityResult(key=key, slots=slots)
