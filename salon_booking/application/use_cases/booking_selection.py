from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date as date_type
from enum import Enum
from typing import Any

from salon_booking.application.exceptions import InvalidSelectionState, SelectionValidationError
from salon_booking.application.utils.slot_calendar import (
    available_slots,
    calculate_end_time,
    normalize_time,
    required_slot_count,
)
from salon_booking.domain.entities.business_hours import BusinessHours
from salon_booking.domain.entities.menu import Menu, MenuOption
from salon_booking.domain.entities.reservation import ReservationRecord
from salon_booking.domain.entities.slot import Slot


class SelectionStatus(str, Enum):
    NO_DATE = "no_date"
    DATE_CHOSEN = "date_chosen"
    TIME_CHOSEN = "time_chosen"
    SUBMITTED = "submitted"


@dataclass(frozen=True)
class AvailabilityKey:
    """Identifies the selection state an availability fetch was started for."""

    date: str
    required_slots: int


class BookingSelection:
    """
    In-progress booking for one menu.

    Price, duration and required slot count are derived from the chosen
    options on every read. Changing the date or the options drops the chosen
    start time and any loaded availability, since both decide which slots
    are startable.
    """

    def __init__(
        self,
        menu: Menu,
        hours: BusinessHours,
        clock: Callable[[], date_type] = date_type.today,
    ) -> None:
        self._menu = menu
        self._hours = hours
        self._clock = clock
        self._status = SelectionStatus.NO_DATE
        self._date: str | None = None
        self._start_time: str | None = None
        self._option_ids: set[str] = set()
        self._slots: list[Slot] | None = None
        self._slots_key: AvailabilityKey | None = None
        self._submitting = False
        self._last_reservation: ReservationRecord | None = None
        self._logger = logging.getLogger(__name__)

    @property
    def menu(self) -> Menu:
        return self._menu

    @property
    def hours(self) -> BusinessHours:
        return self._hours

    @property
    def status(self) -> SelectionStatus:
        return self._status

    @property
    def date(self) -> str | None:
        return self._date

    @property
    def start_time(self) -> str | None:
        return self._start_time

    @property
    def option_ids(self) -> list[str]:
        # menu order, so requests are stable regardless of toggle order
        return [option.id for option in self.selected_options]

    @property
    def selected_options(self) -> list[MenuOption]:
        return [option for option in self._menu.options if option.id in self._option_ids]

    @property
    def total_price(self) -> int:
        return self._menu.base_price + sum(option.price for option in self.selected_options)

    @property
    def total_duration_minutes(self) -> int:
        return self._menu.base_duration_minutes + sum(
            option.additional_minutes for option in self.selected_options
        )

    @property
    def required_slots(self) -> int:
        return required_slot_count(self.total_duration_minutes, self._hours.slot_minutes)

    @property
    def end_time(self) -> str | None:
        if self._start_time is None:
            return None
        return calculate_end_time(self._start_time, self.total_duration_minutes)

    @property
    def slots(self) -> list[Slot] | None:
        """Annotated slots for the current date and duration, or None until loaded."""
        if self._slots is None or self._slots_key != self.availability_key():
            return None
        return list(self._slots)

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    @property
    def last_reservation(self) -> ReservationRecord | None:
        return self._last_reservation

    def choose_date(self, value: str) -> None:
        try:
            parsed = date_type.fromisoformat(value)
        except (TypeError, ValueError):
            raise SelectionValidationError(f"invalid date: {value!r}")
        if parsed < self._clock():
            raise SelectionValidationError(f"{parsed.isoformat()} is in the past")
        self._date = parsed.isoformat()
        self._start_time = None
        self._invalidate_availability()
        self._status = SelectionStatus.DATE_CHOSEN
        self._logger.debug("Date chosen", extra={"date": self._date, "menu_id": self._menu.id})

    def toggle_option(self, option_id: str) -> None:
        if self._menu.get_option(option_id) is None:
            raise SelectionValidationError(f"unknown option {option_id!r} for menu {self._menu.id}")
        if option_id in self._option_ids:
            self._option_ids.remove(option_id)
        else:
            self._option_ids.add(option_id)
        self._start_time = None
        self._invalidate_availability()
        if self._status == SelectionStatus.TIME_CHOSEN:
            self._status = SelectionStatus.DATE_CHOSEN

    def choose_time(self, value: str) -> None:
        if self._status not in (SelectionStatus.DATE_CHOSEN, SelectionStatus.TIME_CHOSEN) or not self._date:
            raise InvalidSelectionState("choose a date before choosing a time")
        slots = self.slots
        if slots is None:
            raise InvalidSelectionState("availability for the chosen date is not loaded")

        time = normalize_time(value)
        slot = next((s for s in slots if s.time == time), None)
        if slot is None:
            raise SelectionValidationError(f"{value!r} is not a slot on {self._date}")
        if not slot.startable:
            raise SelectionValidationError(
                f"{slot.time} cannot start a {self.total_duration_minutes} minute booking"
            )
        self._start_time = slot.time
        self._status = SelectionStatus.TIME_CHOSEN

    def reset(self) -> None:
        self._status = SelectionStatus.NO_DATE
        self._date = None
        self._start_time = None
        self._option_ids = set()
        self._invalidate_availability()

    def availability_key(self) -> AvailabilityKey | None:
        if self._date is None:
            return None
        return AvailabilityKey(date=self._date, required_slots=self.required_slots)

    def begin_availability_fetch(self) -> AvailabilityKey:
        key = self.availability_key()
        if key is None:
            raise InvalidSelectionState("choose a date before loading availability")
        return key

    def apply_availability(self, key: AvailabilityKey, reserved_times: Iterable[str]) -> bool:
        """Store a fetch result. Returns False and drops it if the selection has moved on."""
        if key != self.availability_key():
            self._logger.info(
                "Discarding stale availability",
                extra={"date": key.date, "required_slots": key.required_slots},
            )
            return False
        self._slots = available_slots(self._hours, reserved_times, key.required_slots)
        self._slots_key = key
        return True

    def begin_submission(self) -> None:
        if self._submitting:
            raise InvalidSelectionState("a reservation is already being submitted")
        if self._status != SelectionStatus.TIME_CHOSEN or not self._date or not self._start_time:
            raise InvalidSelectionState("choose a date and a start time before submitting")
        self._submitting = True

    def end_submission(self) -> None:
        self._submitting = False

    def mark_submitted(self, reservation: ReservationRecord) -> None:
        self._last_reservation = reservation
        self._date = None
        self._start_time = None
        self._option_ids = set()
        self._invalidate_availability()
        self._status = SelectionStatus.SUBMITTED

    def revert_after_conflict(self) -> None:
        """The chosen time was taken by someone else; it must be chosen again from fresh slots."""
        self._start_time = None
        self._invalidate_availability()
        self._status = SelectionStatus.DATE_CHOSEN

    def snapshot(self) -> dict[str, Any]:
        return {
            "status": self._status.value,
            "menu_id": self._menu.id,
            "date": self._date,
            "start_time": self._start_time,
            "end_time": self.end_time,
            "option_ids": self.option_ids,
            "total_price": self.total_price,
            "total_duration_minutes": self.total_duration_minutes,
            "required_slots": self.required_slots,
        }

    def _invalidate_availability(self) -> None:
        self._slots = None
        self._slots_key = None
