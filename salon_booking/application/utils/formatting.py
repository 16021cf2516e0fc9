from __future__ import annotations

from salon_booking.application.utils.slot_calendar import normalize_time


def format_duration(minutes: int) -> str:
    """Format minutes as "2시간", "1시간 30분" or "30분"."""
    hours, mins = divmod(minutes, 60)
    if hours == 0:
        return f"{mins}분"
    if mins == 0:
        return f"{hours}시간"
    return f"{hours}시간 {mins}분"


def format_price(price: int) -> str:
    return f"{price:,}원"


def format_time_range(start_time: str, end_time: str) -> str:
    return f"{start_time} ~ {end_time}"


def api_time_to_display(value: str) -> str:
    """"10:00:00" -> "10:00". Unparseable values are returned unchanged."""
    return normalize_time(value) or value


def display_time_to_api(value: str) -> str:
    """"10:00" -> "10:00:00"."""
    normalized = normalize_time(value)
    if normalized is None:
        raise ValueError(f"invalid time: {value!r}")
    return f"{normalized}:00"


def normalize_phone(phone: str) -> str:
    return "".join(ch for ch in phone if ch.isdigit())


def format_phone(phone: str) -> str:
    digits = normalize_phone(phone)
    if len(digits) == 11:
        return f"{digits[:3]}-{digits[3:7]}-{digits[7:]}"
    return phone
