"""
Time-slot availability for a single business day.

Every function here is pure: the same inputs always produce the same slot list,
and nothing is cached between calls. Slot order is ascending by time and is
the order consumers must display.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from salon_booking.domain.entities.business_hours import BusinessHours
from salon_booking.domain.entities.slot import Slot


def parse_time(value: str) -> tuple[int, int] | None:
    """Parse "HH:MM" or "HH:MM:SS" into (hour, minute). Returns None if malformed."""
    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        return None
    try:
        hour, minute = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return hour, minute


def normalize_time(value: str) -> str | None:
    parsed = parse_time(value)
    if parsed is None:
        return None
    return f"{parsed[0]:02d}:{parsed[1]:02d}"


def index_to_time(hours: BusinessHours, index: int) -> str:
    total_minutes = hours.opening_hour * 60 + index * hours.slot_minutes
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def time_to_index(hours: BusinessHours, time: str) -> int | None:
    """Slot index for a time on the grid, or None if it falls outside business hours or between slots."""
    parsed = parse_time(time)
    if parsed is None:
        return None
    offset = parsed[0] * 60 + parsed[1] - hours.opening_hour * 60
    if offset < 0 or offset % hours.slot_minutes != 0:
        return None
    index = offset // hours.slot_minutes
    if index >= hours.slot_count:
        return None
    return index


def required_slot_count(duration_minutes: int, slot_minutes: int) -> int:
    if duration_minutes <= 0:
        return 0
    return -(-duration_minutes // slot_minutes)


def calculate_end_time(start_time: str, duration_minutes: int) -> str:
    parsed = parse_time(start_time)
    if parsed is None:
        raise ValueError(f"invalid start time: {start_time!r}")
    total = parsed[0] * 60 + parsed[1] + duration_minutes
    return f"{total // 60:02d}:{total % 60:02d}"


def generate_slots(hours: BusinessHours) -> list[Slot]:
    return [Slot(index=i, time=index_to_time(hours, i)) for i in range(hours.slot_count)]


def mark_reserved(slots: list[Slot], reserved_times: Iterable[str]) -> list[Slot]:
    # Times the server reports outside the grid (buffers, closed hours) are ignored.
    reserved = {t for t in (normalize_time(r) for r in reserved_times) if t is not None}
    return [replace(slot, reserved=True) if slot.time in reserved else slot for slot in slots]


def compute_startability(slots: list[Slot], required_slots: int) -> list[Slot]:
    """
    A slot is startable when it and the next required_slots - 1 slots are all
    unreserved and the run ends before closing.
    """
    if required_slots <= 0:
        return [replace(slot, startable=not slot.reserved) for slot in slots]

    total = len(slots)
    # reserved_before[j] = number of reserved slots in slots[:j]
    reserved_before = [0] * (total + 1)
    for position, slot in enumerate(slots):
        reserved_before[position + 1] = reserved_before[position] + (1 if slot.reserved else 0)

    result: list[Slot] = []
    for position, slot in enumerate(slots):
        end = position + required_slots
        startable = end <= total and reserved_before[end] - reserved_before[position] == 0
        result.append(replace(slot, startable=startable))
    return result


def available_slots(
    hours: BusinessHours,
    reserved_times: Iterable[str],
    required_slots: int,
) -> list[Slot]:
    slots = generate_slots(hours)
    slots = mark_reserved(slots, reserved_times)
    return compute_startability(slots, required_slots)


def startable_times(slots: Iterable[Slot]) -> list[str]:
    return [slot.time for slot in slots if slot.startable]


def reserved_span(hours: BusinessHours, start_time: str, duration_minutes: int) -> list[str]:
    """Slot times a booking starting at start_time occupies, clipped to business hours."""
    start_index = time_to_index(hours, start_time)
    if start_index is None:
        return []
    count = required_slot_count(duration_minutes, hours.slot_minutes)
    last = min(start_index + count, hours.slot_count)
    return [index_to_time(hours, i) for i in range(start_index, last)]
