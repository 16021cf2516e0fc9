from __future__ import annotations

from dataclasses import dataclass

from salon_booking.domain.entities.user import User, UserRole


@dataclass
class AuthSession:
    """Login state for one client. Passed explicitly to whatever needs the token."""

    access_token: str | None = None
    user: User | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.role == UserRole.ADMIN

    def login(self, access_token: str) -> None:
        self.access_token = access_token

    def set_user(self, user: User) -> None:
        self.user = user

    def logout(self) -> None:
        self.access_token = None
        self.user = None
