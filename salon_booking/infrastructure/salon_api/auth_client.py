from __future__ import annotations

from salon_booking.application.exceptions import ServerError
from salon_booking.application.ports.auth import AuthPort
from salon_booking.application.utils.formatting import normalize_phone
from salon_booking.domain.entities.user import SignupForm, User
from salon_booking.infrastructure.salon_api.http_client import SalonApiClient
from salon_booking.infrastructure.salon_api.payloads import parse_list, parse_user


class HttpAuth(AuthPort):
    def __init__(self, client: SalonApiClient) -> None:
        self._client = client

    async def signup(self, form: SignupForm) -> User:
        payload = {
            "username": form.name,
            "age": int(form.age),
            "email": form.email,
            "phone": normalize_phone(form.phone),
            "password": form.password,
        }
        data = await self._client.post("/api/v1/auth/sign-up", json=payload)
        return parse_user(data)

    async def login(self, email: str, password: str) -> str:
        data = await self._client.post("/api/v1/auth/login", json={"email": email, "password": password})
        return _access_token(data)

    async def admin_login(self, email: str, password: str) -> str:
        data = await self._client.post("/api/v1/admin/auth/login", json={"email": email, "password": password})
        return _access_token(data)

    async def fetch_me(self) -> User:
        return parse_user(await self._client.get("/api/v1/users/me"))

    async def fetch_users(self) -> list[User]:
        data = await self._client.get("/api/v1/admin/users")
        return parse_list(data, parse_user)


def _access_token(data: object) -> str:
    if isinstance(data, dict) and data.get("accessToken"):
        return str(data["accessToken"])
    raise ServerError("login response did not include an access token", error_code="MALFORMED_RESPONSE")
