from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BusinessHours:
    opening_hour: int = 10
    closing_hour: int = 20  # exclusive: last slot starts before this hour
    slot_minutes: int = 30

    def __post_init__(self) -> None:
        if not 0 <= self.opening_hour < self.closing_hour <= 24:
            raise ValueError(
                f"invalid business hours: {self.opening_hour}-{self.closing_hour}"
            )
        if self.slot_minutes <= 0 or 60 % self.slot_minutes != 0:
            raise ValueError(f"slot_minutes must divide 60, got {self.slot_minutes}")

    @property
    def slot_count(self) -> int:
        return (self.closing_hour - self.opening_hour) * 60 // self.slot_minutes
