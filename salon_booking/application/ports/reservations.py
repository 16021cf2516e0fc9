from __future__ import annotations

from abc import ABC, abstractmethod

from salon_booking.domain.entities.reservation import ReservationRecord


class ReservationPort(ABC):
    @abstractmethod
    async def fetch_reserved_times(
        self,
        date: str,
        menu_id: str,
        option_ids: list[str],
    ) -> set[str]:
        """
        Get the slot times already occupied on a date.
        Startability is computed client-side from this set.
        """
        raise NotImplementedError

    @abstractmethod
    async def submit_reservation(
        self,
        date: str,
        start_time: str,
        menu_id: str,
        option_ids: list[str],
    ) -> ReservationRecord:
        """Create a reservation. Raises SlotConflict if any slot in the span was taken."""
        raise NotImplementedError

    @abstractmethod
    async def fetch_my_reservations(self) -> list[ReservationRecord]:
        raise NotImplementedError

    @abstractmethod
    async def cancel_my_reservation(self, reservation_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def fetch_reservations_for_date(self, date: str) -> list[ReservationRecord]:
        """Admin: all reservations on a date."""
        raise NotImplementedError

    @abstractmethod
    async def cancel_reservation(self, reservation_id: str) -> None:
        """Admin cancel."""
        raise NotImplementedError

    @abstractmethod
    async def complete_reservation(self, reservation_id: str) -> None:
        raise NotImplementedError
