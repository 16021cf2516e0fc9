from __future__ import annotations

from abc import ABC, abstractmethod

from salon_booking.domain.entities.user import SignupForm, User


class AuthPort(ABC):
    @abstractmethod
    async def signup(self, form: SignupForm) -> User:
        raise NotImplementedError

    @abstractmethod
    async def login(self, email: str, password: str) -> str:
        """Returns an access token."""
        raise NotImplementedError

    @abstractmethod
    async def admin_login(self, email: str, password: str) -> str:
        raise NotImplementedError

    @abstractmethod
    async def fetch_me(self) -> User:
        raise NotImplementedError

    @abstractmethod
    async def fetch_users(self) -> list[User]:
        """Admin: registered users."""
        raise NotImplementedError
