#!/usr/bin/env python3
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

"""
Interactive local booking harness (no HTTP, mock salon API).

Usage:
  python3 scripts/book_local.py

What it does:
- Lists menus and starts a booking flow for the one you pick
- Lets you choose a date, toggle options, load slots, pick a time and submit
- Prints the slot grid the way the booking page shows it
"""

import asyncio

from dotenv import load_dotenv

from salon_booking.application.exceptions import BookingError
from salon_booking.application.use_cases.availability import LoadAvailabilityUseCase
from salon_booking.application.use_cases.booking_selection import BookingSelection
from salon_booking.application.use_cases.reservation_submission import ReservationSubmissionUseCase
from salon_booking.application.utils.formatting import format_duration, format_price, format_time_range
from salon_booking.domain.entities.auth_session import AuthSession
from salon_booking.domain.entities.business_hours import BusinessHours
from salon_booking.infrastructure.salon_api.mock_api import MockSalonApi


def _print_help() -> None:
    print("Commands:")
    print("  date YYYY-MM-DD   choose a date")
    print("  opt <option_id>   toggle an option")
    print("  slots             load and show slots")
    print("  time HH:MM        choose a start time")
    print("  submit            create the reservation")
    print("  conflict          make the next submission lose a race")
    print("  reset | /quit | /help")


def _print_summary(selection: BookingSelection) -> None:
    print(
        f"[{selection.status.value}] {selection.menu.name} "
        f"{format_price(selection.total_price)} / {format_duration(selection.total_duration_minutes)} "
        f"({selection.required_slots} slots)"
    )
    if selection.date:
        print(f"  date: {selection.date}")
    if selection.start_time:
        print(f"  time: {format_time_range(selection.start_time, selection.end_time)}")


def _print_slots(selection: BookingSelection) -> None:
    slots = selection.slots or []
    if slots and not any(s.startable for s in slots):
        print("이 날짜에는 예약 가능한 시간이 없습니다. 다른 날짜를 선택해보세요.")
        return
    for slot in slots:
        if slot.reserved:
            label = "예약됨"
        elif not slot.startable:
            label = "시간 부족"
        else:
            label = ""
        print(f"  {slot.time} {label}")


async def main() -> None:
    hours = BusinessHours()
    session = AuthSession(access_token="mock-token-1")
    api = MockSalonApi(session=session, hours=hours)
    availability = LoadAvailabilityUseCase(reservations=api)
    submission = ReservationSubmissionUseCase(reservations=api, availability=availability)

    menus = await api.fetch_menus()
    for i, menu in enumerate(menus, 1):
        options = ", ".join(f"{o.id}(+{o.additional_minutes}m)" for o in menu.options)
        print(f"{i}. {menu.name} {format_price(menu.base_price)} {format_duration(menu.base_duration_minutes)} {options}")
    choice = input("menu number> ").strip()
    if not choice.isdigit() or not 1 <= int(choice) <= len(menus):
        print("invalid menu")
        return
    selection = BookingSelection(menu=menus[int(choice) - 1], hours=hours)
    _print_help()

    while True:
        line = input("> ").strip()
        if not line:
            continue
        command, _, arg = line.partition(" ")
        if command == "/quit":
            return
        if command == "/help":
            _print_help()
            continue
        try:
            if command == "date":
                selection.choose_date(arg)
            elif command == "opt":
                selection.toggle_option(arg)
            elif command == "slots":
                result = await availability.execute(selection)
                if result.failure:
                    print(f"error: {result.failure.kind.value}: {result.failure.message}")
                else:
                    _print_slots(selection)
            elif command == "time":
                selection.choose_time(arg)
            elif command == "conflict":
                api.fail_next_with_conflict()
            elif command == "submit":
                result = await submission.submit(selection)
                if result.ok:
                    print(f"booked {result.reservation.id} {result.reservation.date} {result.reservation.start_time}")
                else:
                    print(f"error: {result.failure.kind.value}: {result.failure.message}")
                    if result.refreshed is not None:
                        _print_slots(selection)
            elif command == "reset":
                selection.reset()
            else:
                print("unknown command, try /help")
                continue
        except BookingError as e:
            print(f"error: {e.kind.value}: {e.message}")
        _print_summary(selection)


if __name__ == "__main__":
    load_dotenv()
    asyncio.run(main())
