from collections.abc import Callable
from datetime import date
from functools import lru_cache
import logging

from salon_booking.core.config import settings
from salon_booking.application.ports.auth import AuthPort
from salon_booking.application.ports.catalog import CatalogPort
from salon_booking.application.ports.reservations import ReservationPort
from salon_booking.application.ports.selection_store import SelectionStorePort
from salon_booking.application.use_cases.availability import LoadAvailabilityUseCase
from salon_booking.application.use_cases.catalog import CatalogUseCase
from salon_booking.application.use_cases.reservation_submission import ReservationSubmissionUseCase
from salon_booking.domain.entities.auth_session import AuthSession
from salon_booking.domain.entities.business_hours import BusinessHours
from salon_booking.infrastructure.salon_api.auth_client import HttpAuth
from salon_booking.infrastructure.salon_api.catalog_client import HttpCatalog
from salon_booking.infrastructure.salon_api.http_client import SalonApiClient
from salon_booking.infrastructure.salon_api.mock_api import MockSalonApi
from salon_booking.infrastructure.salon_api.reservation_client import HttpReservations
from salon_booking.infrastructure.store.memory_store import MemorySelectionStore


_selection_store: MemorySelectionStore | None = None


def use_mock_api() -> bool:
    return settings.USE_MOCK_API or not settings.SALON_API_BASE_URL


@lru_cache
def get_business_hours() -> BusinessHours:
    return BusinessHours(
        opening_hour=settings.OPENING_HOUR,
        closing_hour=settings.CLOSING_HOUR,
        slot_minutes=settings.SLOT_MINUTES,
    )


@lru_cache
def get_auth_session() -> AuthSession:
    token = settings.SALON_API_TOKEN
    if not token and use_mock_api():
        # mock customer account
        token = "mock-token-1"
    return AuthSession(access_token=token)


@lru_cache
def get_mock_api() -> MockSalonApi:
    logger = logging.getLogger(__name__)
    logger.info("Using MockSalonApi (USE_MOCK_API=%s, base url set=%s)", settings.USE_MOCK_API, bool(settings.SALON_API_BASE_URL))
    return MockSalonApi(session=get_auth_session(), hours=get_business_hours())


@lru_cache
def get_api_client() -> SalonApiClient:
    return SalonApiClient(session=get_auth_session())


def get_catalog() -> CatalogPort:
    if use_mock_api():
        return get_mock_api()
    return HttpCatalog(get_api_client())


def get_reservations() -> ReservationPort:
    if use_mock_api():
        return get_mock_api()
    return HttpReservations(get_api_client())


def get_auth() -> AuthPort:
    if use_mock_api():
        return get_mock_api()
    return HttpAuth(get_api_client())


def get_clock() -> Callable[[], date]:
    return date.today


def get_selection_store() -> SelectionStorePort:
    global _selection_store
    if _selection_store is None:
        _selection_store = MemorySelectionStore()
    return _selection_store


def get_catalog_use_case() -> CatalogUseCase:
    return CatalogUseCase(catalog=get_catalog())


def get_availability_use_case() -> LoadAvailabilityUseCase:
    return LoadAvailabilityUseCase(reservations=get_reservations())


def get_submission_use_case() -> ReservationSubmissionUseCase:
    return ReservationSubmissionUseCase(
        reservations=get_reservations(),
        availability=get_availability_use_case(),
    )
