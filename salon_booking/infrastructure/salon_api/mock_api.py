from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone

from salon_booking.application.exceptions import (
    NotFoundError,
    SelectionValidationError,
    SlotConflict,
    UnauthorizedError,
)
from salon_booking.application.ports.auth import AuthPort
from salon_booking.application.ports.catalog import CatalogPort
from salon_booking.application.ports.reservations import ReservationPort
from salon_booking.application.utils.formatting import normalize_phone
from salon_booking.application.utils.slot_calendar import (
    calculate_end_time,
    normalize_time,
    reserved_span,
    time_to_index,
)
from salon_booking.domain.entities.auth_session import AuthSession
from salon_booking.domain.entities.business_hours import BusinessHours
from salon_booking.domain.entities.menu import Category, Menu, MenuDraft, MenuOption
from salon_booking.domain.entities.reservation import ReservationRecord, ReservationStatus
from salon_booking.domain.entities.user import SignupForm, User, UserRole

CONFLICT_MESSAGE = "방금 다른 사용자가 예약했어요. 다른 시간을 선택해주세요."

_SHAMPOO = MenuOption(id="opt-shampoo", name="샴푸", price=3000, additional_minutes=10, description="컷트 시 샴푸")
_CUT_ADD = MenuOption(id="opt-cut-color", name="컷트 추가", price=10000, additional_minutes=30, description="염색 시 컷트")

MOCK_MENUS: tuple[Menu, ...] = (
    Menu("cut-male", "남자 컷", 10000, 30, (_SHAMPOO,), category="cut", description="샴푸 별도"),
    Menu("cut-female", "여자 컷", 15000, 60, (_SHAMPOO,), category="cut", description="샴푸 별도"),
    Menu("color-root", "뿌리 염색", 30000, 90, (_CUT_ADD,), category="color", description="새치/부분 염색"),
    Menu("color-full", "전체 염색", 50000, 120, (_CUT_ADD,), category="color", price_note="~"),
    Menu("perm-down", "다운펌", 20000, 60, category="perm", description="볼륨/결 정리"),
    Menu("perm-normal", "일반 펌", 50000, 120, category="perm", price_note="~"),
    Menu("perm-magic", "매직", 60000, 150, category="perm", price_note="~"),
    Menu("perm-volume-magic", "볼륨 매직", 70000, 180, category="perm", price_note="~"),
)

MOCK_RESERVED_TIMES: dict[str, list[str]] = {
    "2026-01-20": ["10:00", "10:30", "14:00", "14:30", "15:00", "16:00"],
    "2026-01-21": ["11:00", "11:30", "15:00", "15:30", "16:00", "16:30"],
    "2026-01-22": ["10:00", "10:30", "11:00", "11:30", "12:00", "12:30"],
}


class MockSalonApi(CatalogPort, ReservationPort, AuthPort):
    """
    In-memory stand-in for the salon API, for local runs and tests.

    Conflicts happen for real when a new reservation overlaps an occupied
    slot, and can be forced with fail_next_with_conflict().
    """

    def __init__(
        self,
        session: AuthSession | None = None,
        hours: BusinessHours | None = None,
        menus: tuple[Menu, ...] = MOCK_MENUS,
        reserved_times: dict[str, list[str]] | None = None,
    ) -> None:
        self._session = session or AuthSession()
        self._hours = hours or BusinessHours()
        self._menus: dict[str, Menu] = {menu.id: menu for menu in menus}
        self._categories: dict[str, Category] = {}
        for menu in menus:
            if menu.category and menu.category not in self._categories:
                self._categories[menu.category] = Category(id=menu.category, name=menu.category)
        source = MOCK_RESERVED_TIMES if reserved_times is None else reserved_times
        self._blocked: dict[str, set[str]] = {day: set(times) for day, times in source.items()}
        self._reservations: dict[str, ReservationRecord] = {}
        self._owners: dict[str, str] = {}
        self._users: dict[str, User] = {
            "1": User(id="1", email="user@example.com", username="홍길동", role=UserRole.USER, age=30, phone="01012345678"),
            "2": User(id="2", email="admin@example.com", username="관리자", role=UserRole.ADMIN),
        }
        self._passwords: dict[str, str] = {"user@example.com": "password", "admin@example.com": "admin"}
        self._fail_next_conflict = False
        self._logger = logging.getLogger(__name__)

    def fail_next_with_conflict(self) -> None:
        self._fail_next_conflict = True

    # catalog

    async def fetch_menus(self) -> list[Menu]:
        return list(self._menus.values())

    async def fetch_menus_by_category(self, category: str) -> list[Menu]:
        return [menu for menu in self._menus.values() if menu.category == category]

    async def fetch_menu_detail(self, menu_id: str) -> Menu:
        menu = self._menus.get(menu_id)
        if menu is None:
            raise NotFoundError(f"menu {menu_id} not found", error_code="MENU_NOT_FOUND")
        return menu

    async def fetch_categories(self) -> list[Category]:
        return list(self._categories.values())

    async def create_category(self, name: str) -> Category:
        self._require_admin()
        category = Category(id=str(len(self._categories) + 1), name=name)
        self._categories[category.id] = category
        return category

    async def create_menu(self, draft: MenuDraft) -> None:
        self._require_admin()
        menu_id = f"menu-{len(self._menus) + 1}"
        options = tuple(
            MenuOption(
                id=f"{menu_id}-opt-{i + 1}",
                name=option.name,
                price=option.price,
                additional_minutes=option.duration,
                description=option.description,
            )
            for i, option in enumerate(draft.options)
        )
        category = draft.category_ids[0] if draft.category_ids else None
        self._menus[menu_id] = Menu(
            id=menu_id,
            name=draft.name,
            base_price=draft.price,
            base_duration_minutes=draft.min_duration,
            options=options,
            category=category,
            description=draft.description,
            image_url=draft.main_image or None,
        )

    # reservations

    async def fetch_reserved_times(self, date: str, menu_id: str, option_ids: list[str]) -> set[str]:
        return set(self._occupied(date))

    async def submit_reservation(
        self,
        date: str,
        start_time: str,
        menu_id: str,
        option_ids: list[str],
    ) -> ReservationRecord:
        user = self._current_user()
        menu = await self.fetch_menu_detail(menu_id)
        options = [menu.get_option(o) for o in option_ids]
        if any(o is None for o in options):
            raise SelectionValidationError("unknown option", error_code="INVALID_OPTION")
        start = normalize_time(start_time)
        if start is None or time_to_index(self._hours, start) is None:
            raise SelectionValidationError(f"{start_time} is outside business hours", error_code="INVALID_TIME")

        duration = menu.base_duration_minutes + sum(o.additional_minutes for o in options)
        span = reserved_span(self._hours, start, duration)
        if len(span) * self._hours.slot_minutes < duration:
            raise SelectionValidationError("booking runs past closing time", error_code="INVALID_TIME")
        occupied = self._occupied(date)
        if self._fail_next_conflict or any(t in occupied for t in span):
            self._fail_next_conflict = False
            raise SlotConflict(CONFLICT_MESSAGE, error_code="RESERVATION_CONFLICT")

        reservation_id = f"mock_reservation_{len(self._reservations) + 1}"
        record = ReservationRecord(
            id=reservation_id,
            date=date,
            start_time=start,
            end_time=calculate_end_time(start, duration),
            status=ReservationStatus.CONFIRMED,
            menu_id=menu.id,
            menu_name=menu.name,
            option_ids=tuple(o.id for o in options),
            option_names=tuple(o.name for o in options),
            total_price=menu.base_price + sum(o.price for o in options),
            duration_minutes=duration,
            created_at=datetime.now(timezone.utc).isoformat(),
            customer_name=user.username,
            customer_phone=user.phone,
        )
        self._reservations[reservation_id] = record
        self._owners[reservation_id] = user.id
        self._logger.info(
            "Mock reservation created",
            extra={"reservation_id": reservation_id, "date": date, "start_time": start},
        )
        return record

    async def fetch_my_reservations(self) -> list[ReservationRecord]:
        user = self._current_user()
        return [r for r in self._reservations.values() if self._owners.get(r.id) == user.id]

    async def cancel_my_reservation(self, reservation_id: str) -> None:
        user = self._current_user()
        if self._owners.get(reservation_id) != user.id:
            raise NotFoundError(f"reservation {reservation_id} not found", error_code="RESERVATION_NOT_FOUND")
        self._set_status(reservation_id, ReservationStatus.CANCELLED)

    async def fetch_reservations_for_date(self, date: str) -> list[ReservationRecord]:
        self._require_admin()
        return [r for r in self._reservations.values() if r.date == date]

    async def cancel_reservation(self, reservation_id: str) -> None:
        self._require_admin()
        self._set_status(reservation_id, ReservationStatus.CANCELLED)

    async def complete_reservation(self, reservation_id: str) -> None:
        self._require_admin()
        self._set_status(reservation_id, ReservationStatus.COMPLETED)

    # auth

    async def signup(self, form: SignupForm) -> User:
        if form.email in self._passwords:
            raise SelectionValidationError("email already registered", error_code="DUPLICATE_EMAIL")
        user = User(
            id=str(len(self._users) + 1),
            email=form.email,
            username=form.name,
            role=UserRole.USER,
            age=int(form.age),
            phone=normalize_phone(form.phone),
            registered_at=datetime.now(timezone.utc).isoformat(),
        )
        self._users[user.id] = user
        self._passwords[form.email] = form.password
        return user

    async def login(self, email: str, password: str) -> str:
        return self._token_for(email, password, UserRole.USER)

    async def admin_login(self, email: str, password: str) -> str:
        return self._token_for(email, password, UserRole.ADMIN)

    async def fetch_me(self) -> User:
        return self._current_user()

    async def fetch_users(self) -> list[User]:
        self._require_admin()
        return list(self._users.values())

    def _occupied(self, date: str) -> set[str]:
        occupied = set(self._blocked.get(date, set()))
        for record in self._reservations.values():
            if record.date == date and record.status == ReservationStatus.CONFIRMED:
                occupied.update(reserved_span(self._hours, record.start_time, record.duration_minutes or 0))
        return occupied

    def _set_status(self, reservation_id: str, status: ReservationStatus) -> None:
        record = self._reservations.get(reservation_id)
        if record is None:
            raise NotFoundError(f"reservation {reservation_id} not found", error_code="RESERVATION_NOT_FOUND")
        if record.status != ReservationStatus.CONFIRMED:
            raise SelectionValidationError(
                f"reservation {reservation_id} is already {record.status.value}",
                error_code="INVALID_STATUS",
            )
        self._reservations[reservation_id] = replace(record, status=status)

    def _token_for(self, email: str, password: str, role: UserRole) -> str:
        user = next((u for u in self._users.values() if u.email == email), None)
        if user is None or self._passwords.get(email) != password or user.role != role:
            raise UnauthorizedError("이메일 또는 비밀번호가 올바르지 않습니다.", error_code="INVALID_CREDENTIALS")
        return f"mock-token-{user.id}"

    def _current_user(self) -> User:
        token = self._session.access_token or ""
        user = self._users.get(token.removeprefix("mock-token-"))
        if not token or user is None:
            raise UnauthorizedError("로그인이 필요합니다.", error_code="UNAUTHORIZED")
        return user

    def _require_admin(self) -> None:
        if self._current_user().role != UserRole.ADMIN:
            raise UnauthorizedError("관리자 권한이 필요합니다.", error_code="FORBIDDEN")
