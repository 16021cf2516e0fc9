from __future__ import annotations

import logging

from salon_booking.application.exceptions import BookingError, SelectionValidationError, UnauthorizedError
from salon_booking.application.ports.auth import AuthPort
from salon_booking.domain.entities.auth_session import AuthSession
from salon_booking.domain.entities.user import SignupForm, User


class AuthUseCase:
    def __init__(self, auth: AuthPort, session: AuthSession) -> None:
        self._auth = auth
        self._session = session
        self._logger = logging.getLogger(__name__)

    @property
    def session(self) -> AuthSession:
        return self._session

    async def signup(self, form: SignupForm) -> User:
        if not form.age.strip().isdigit():
            raise SelectionValidationError(f"age must be a number, got {form.age!r}")
        return await self._auth.signup(form)

    async def login(self, email: str, password: str, admin: bool = False) -> User:
        if admin:
            token = await self._auth.admin_login(email, password)
        else:
            token = await self._auth.login(email, password)
        return await self.login_with_token(token)

    async def login_with_token(self, token: str) -> User:
        """Adopt a token issued elsewhere (e.g. an OAuth redirect) and load its user."""
        if not token.strip():
            raise SelectionValidationError("access token is required")
        self._session.login(token)
        try:
            user = await self._auth.fetch_me()
        except BookingError:
            self._session.logout()
            raise
        self._session.set_user(user)
        self._logger.info("Logged in", extra={"user_id": user.id, "role": user.role.value})
        return user

    async def list_users(self) -> list[User]:
        if not self._session.is_admin:
            raise UnauthorizedError("관리자 권한이 필요합니다.", error_code="FORBIDDEN")
        return await self._auth.fetch_users()

    def logout(self) -> None:
        self._session.logout()
