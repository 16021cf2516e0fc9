from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from salon_booking.application.exceptions import ServerError
from salon_booking.application.utils.formatting import api_time_to_display
from salon_booking.domain.entities.menu import Category, Menu, MenuOption
from salon_booking.domain.entities.reservation import ReservationRecord, ReservationStatus
from salon_booking.domain.entities.user import User, UserRole

T = TypeVar("T")


def _first(payload: dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return default


def _str_or_none(value: Any) -> str | None:
    return None if value is None else str(value)


def parse_list(data: Any, parse: Callable[[Any], T]) -> list[T]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise ServerError(f"expected a list, got {type(data).__name__}", error_code="MALFORMED_RESPONSE")
    return [parse(item) for item in data]


def parse_option(payload: dict[str, Any]) -> MenuOption:
    return MenuOption(
        id=str(payload["id"]),
        name=payload.get("name", ""),
        price=int(_first(payload, "price", default=0)),
        additional_minutes=int(_first(payload, "duration", "additionalMinutes", default=0)),
        description=payload.get("description"),
    )


def parse_menu(payload: dict[str, Any]) -> Menu:
    try:
        categories = payload.get("categories") or []
        category = _first(payload, "category")
        if category is None and categories:
            first = categories[0]
            category = first.get("name") if isinstance(first, dict) else str(first)
        return Menu(
            id=str(payload["id"]),
            name=payload.get("name", ""),
            base_price=int(_first(payload, "price", "basePrice", default=0)),
            base_duration_minutes=int(_first(payload, "minDuration", "durationMinutes", default=0)),
            options=tuple(parse_option(o) for o in payload.get("options") or []),
            category=category,
            description=payload.get("description"),
            price_note=payload.get("priceNote"),
            image_url=_first(payload, "mainImage", "imageUrl"),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ServerError(f"malformed menu payload: {e}", error_code="MALFORMED_RESPONSE") from e


def parse_category(payload: dict[str, Any]) -> Category:
    try:
        return Category(id=str(payload["id"]), name=str(payload["name"]))
    except (KeyError, TypeError, AttributeError) as e:
        raise ServerError(f"malformed category payload: {e}", error_code="MALFORMED_RESPONSE") from e


def _slot_is_reserved(item: dict[str, Any]) -> bool:
    if "reserved" in item:
        return bool(item["reserved"])
    if "available" in item:
        return not item["available"]
    if "disabled" in item:
        # server-side startability; a disabled start is never offered
        return bool(item["disabled"])
    if "status" in item:
        return str(item["status"]).lower() == "reserved"
    raise ServerError(f"slot without availability flag: {item!r}", error_code="MALFORMED_RESPONSE")


def _slot_time(value: Any) -> str:
    if not isinstance(value, str):
        raise ServerError(f"slot time must be a string, got {value!r}", error_code="MALFORMED_RESPONSE")
    return api_time_to_display(value)


def parse_reserved_times(data: Any) -> set[str]:
    """
    Reserved start times from an availability payload.

    Accepts a list of times (["10:00:00", ...]), a list of slot objects
    flagged with one of reserved / available / disabled / status, or either
    list wrapped as {"reservedTimes": [...]} or {"date": ..., "slots": [...]}.
    """
    if data is None:
        return set()
    if isinstance(data, dict):
        data = data.get("reservedTimes") or data.get("slots") or []
    if not isinstance(data, list):
        raise ServerError(f"reserved times must be a list, got {type(data).__name__}", error_code="MALFORMED_RESPONSE")
    times: set[str] = set()
    for item in data:
        if isinstance(item, dict):
            if "time" not in item:
                raise ServerError(f"slot without time: {item!r}", error_code="MALFORMED_RESPONSE")
            if _slot_is_reserved(item):
                times.add(_slot_time(item["time"]))
        else:
            times.add(_slot_time(item))
    return times


def parse_reservation(payload: dict[str, Any]) -> ReservationRecord:
    try:
        options = payload.get("options") or []
        raw_option_ids = _first(payload, "optionIds", default=options)
        return ReservationRecord(
            id=str(payload["id"]),
            date=_first(payload, "reservationDate", "date"),
            start_time=api_time_to_display(payload["startTime"]),
            end_time=api_time_to_display(payload["endTime"]),
            status=ReservationStatus(_first(payload, "status", default="CONFIRMED")),
            menu_id=_str_or_none(_first(payload, "menuId")),
            menu_name=_first(payload, "menuName"),
            option_ids=tuple(str(o["id"]) if isinstance(o, dict) else str(o) for o in raw_option_ids),
            option_names=tuple(o["name"] for o in options if isinstance(o, dict) and "name" in o),
            total_price=_first(payload, "totalPrice"),
            duration_minutes=_first(payload, "durationMinutes", "totalDuration"),
            created_at=_first(payload, "createdAt"),
            customer_name=_first(payload, "username", "userName", "customerName"),
            customer_phone=_first(payload, "phone", "userPhone"),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ServerError(f"malformed reservation payload: {e}", error_code="MALFORMED_RESPONSE") from e


def parse_user(payload: dict[str, Any]) -> User:
    try:
        return User(
            id=str(payload["id"]),
            email=payload.get("email", ""),
            username=payload.get("username", ""),
            role=UserRole(payload.get("role", "USER")),
            age=payload.get("age"),
            phone=payload.get("phone"),
            registered_at=payload.get("registeredAt"),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ServerError(f"malformed user payload: {e}", error_code="MALFORMED_RESPONSE") from e
