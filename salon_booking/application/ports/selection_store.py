from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from salon_booking.application.use_cases.booking_selection import BookingSelection


class SelectionStorePort(ABC):
    @abstractmethod
    def create(self, selection: "BookingSelection") -> str:
        """Store a new booking flow and return its session id."""
        raise NotImplementedError

    @abstractmethod
    def get(self, session_id: str) -> "BookingSelection | None":
        raise NotImplementedError

    @abstractmethod
    def discard(self, session_id: str) -> None:
        raise NotImplementedError
