from __future__ import annotations

import logging
from dataclasses import dataclass

from salon_booking.application.exceptions import BookingError, BookingFailure, FailureKind
from salon_booking.application.ports.reservations import ReservationPort
from salon_booking.application.use_cases.availability import AvailabilityResult, LoadAvailabilityUseCase
from salon_booking.application.use_cases.booking_selection import BookingSelection
from salon_booking.domain.entities.reservation import ReservationRecord


@dataclass(frozen=True)
class SubmissionResult:
    reservation: ReservationRecord | None = None
    failure: BookingFailure | None = None
    # fresh slots loaded after a conflict
    refreshed: AvailabilityResult | None = None

    @property
    def ok(self) -> bool:
        return self.reservation is not None


class ReservationSubmissionUseCase:
    """
    Submit a selection with a chosen time.

    Failures come back as typed results. A slot conflict sends the selection
    back to time selection and reloads availability; every other failure
    leaves the selection as it was so the user can submit again.
    """

    def __init__(self, reservations: ReservationPort, availability: LoadAvailabilityUseCase) -> None:
        self._reservations = reservations
        self._availability = availability
        self._logger = logging.getLogger(__name__)

    async def submit(self, selection: BookingSelection) -> SubmissionResult:
        try:
            selection.begin_submission()
        except BookingError as e:
            return SubmissionResult(failure=BookingFailure.from_error(e))

        date = selection.date
        start_time = selection.start_time
        try:
            reservation = await self._reservations.submit_reservation(
                date=date,
                start_time=start_time,
                menu_id=selection.menu.id,
                option_ids=selection.option_ids,
            )
        except BookingError as e:
            failure = BookingFailure.from_error(e)
            self._logger.warning(
                "Reservation submission failed",
                extra={
                    "menu_id": selection.menu.id,
                    "date": date,
                    "start_time": start_time,
                    "kind": e.kind.value,
                    "error_code": e.error_code,
                },
            )
        else:
            selection.mark_submitted(reservation)
            self._logger.info(
                "Reservation created",
                extra={"reservation_id": reservation.id, "date": date, "start_time": start_time},
            )
            return SubmissionResult(reservation=reservation)
        finally:
            selection.end_submission()

        if failure.kind == FailureKind.SLOT_CONFLICT:
            selection.revert_after_conflict()
            refreshed = await self._availability.execute(selection)
            return SubmissionResult(failure=failure, refreshed=refreshed)

        return SubmissionResult(failure=failure)
