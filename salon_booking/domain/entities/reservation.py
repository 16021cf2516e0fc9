from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ReservationStatus(str, Enum):
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


@dataclass(frozen=True)
class ReservationRecord:
    id: str
    date: str  # YYYY-MM-DD
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    status: ReservationStatus = ReservationStatus.CONFIRMED
    menu_id: str | None = None
    menu_name: str | None = None
    option_ids: tuple[str, ...] = field(default_factory=tuple)
    option_names: tuple[str, ...] = field(default_factory=tuple)
    total_price: int | None = None
    duration_minutes: int | None = None
    created_at: str | None = None
    # admin listings only
    customer_name: str | None = None
    customer_phone: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status == ReservationStatus.CONFIRMED
