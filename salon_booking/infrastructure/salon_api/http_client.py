from __future__ import annotations

import logging
from typing import Any

import httpx

from salon_booking.application.exceptions import (
    BookingError,
    NetworkError,
    NotFoundError,
    SelectionValidationError,
    ServerError,
    SlotConflict,
    UnauthorizedError,
)
from salon_booking.core.config import settings
from salon_booking.domain.entities.auth_session import AuthSession

CONFLICT_ERROR_CODES = {
    "RESERVATION_CONFLICT",
    "RESERVATION_TIME_CONFLICT",
    "SLOT_ALREADY_RESERVED",
    "TIME_SLOT_UNAVAILABLE",
    "DUPLICATE_RESERVATION",
}

DEFAULT_ERROR_MESSAGE = "알 수 없는 오류가 발생했습니다."


class SalonApiClient:
    """
    Thin JSON client for the salon REST API.

    Every response is an envelope {"isSuccess": bool, "data": ..., "error":
    {"errorCode", "errorMessage"}}. Failures are raised as BookingError
    subclasses so callers never see httpx exceptions.
    """

    def __init__(
        self,
        session: AuthSession,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._session = session
        self._base_url = base_url or settings.SALON_API_BASE_URL
        if not self._base_url:
            raise ValueError("SALON_API_BASE_URL is required for the salon API client")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout or settings.SALON_API_TIMEOUT,
            transport=transport,
        )
        self._logger = logging.getLogger(__name__)

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: dict[str, Any] | None = None) -> Any:
        return await self.request("POST", path, json=json)

    async def patch(self, path: str, json: dict[str, Any] | None = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        headers = {"Content-Type": "application/json"}
        if self._session.access_token:
            headers["Authorization"] = f"Bearer {self._session.access_token}"

        try:
            resp = await self._client.request(method, path, params=params, json=json, headers=headers)
        except httpx.HTTPError as e:
            self._logger.error("Salon API request failed", extra={"path": path, "error": str(e)})
            raise NetworkError(f"could not reach the salon API: {e}") from e

        try:
            body = resp.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            if resp.status_code >= 400:
                raise _classify(resp.status_code, None, resp.text or DEFAULT_ERROR_MESSAGE)
            raise ServerError(f"unexpected response from {path}", error_code="MALFORMED_RESPONSE")

        if resp.status_code >= 400 or not body.get("isSuccess") or body.get("error"):
            error = body.get("error") or {}
            error_code = error.get("errorCode") or "UNKNOWN_ERROR"
            message = error.get("errorMessage") or DEFAULT_ERROR_MESSAGE
            self._logger.warning(
                "Salon API returned an error",
                extra={"path": path, "status": resp.status_code, "error_code": error_code},
            )
            raise _classify(resp.status_code, error_code, message)

        return body.get("data")

    async def aclose(self) -> None:
        await self._client.aclose()


def _classify(status: int, error_code: str | None, message: str) -> BookingError:
    if status == 409 or (error_code and error_code in CONFLICT_ERROR_CODES):
        return SlotConflict(message, error_code=error_code)
    if status in (401, 403):
        return UnauthorizedError(message, error_code=error_code)
    if status == 404:
        return NotFoundError(message, error_code=error_code)
    if status in (400, 422):
        return SelectionValidationError(message, error_code=error_code)
    if status >= 500:
        return ServerError(message, error_code=error_code)
    # 200 with isSuccess=false and an unknown code
    return ServerError(message, error_code=error_code)


def wire_id(value: str) -> int | str:
    """The API uses numeric ids; mock and legacy ids are strings."""
    return int(value) if value.isdigit() else value
