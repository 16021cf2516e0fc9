from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from fastapi import APIRouter, Depends, HTTPException

from salon_booking.api.v1.schemas import (
    ChooseDateRequestSchema,
    ChooseTimeRequestSchema,
    MenuSchema,
    ReservationSchema,
    SelectionSchema,
    SlotSchema,
    SlotsResponseSchema,
    StartBookingRequestSchema,
    SubmitResponseSchema,
)
from salon_booking.application.exceptions import BookingError, BookingFailure, FailureKind
from salon_booking.application.ports.selection_store import SelectionStorePort
from salon_booking.application.use_cases.availability import LoadAvailabilityUseCase
from salon_booking.application.use_cases.booking_selection import BookingSelection
from salon_booking.application.use_cases.catalog import CatalogUseCase
from salon_booking.application.use_cases.reservation_submission import ReservationSubmissionUseCase
from salon_booking.domain.entities.business_hours import BusinessHours
from salon_booking.wiring.dependencies import (
    get_availability_use_case,
    get_business_hours,
    get_catalog_use_case,
    get_clock,
    get_selection_store,
    get_submission_use_case,
)

router = APIRouter()
logger = logging.getLogger(__name__)

FAILURE_STATUS = {
    FailureKind.INVALID_STATE: 409,
    FailureKind.SLOT_CONFLICT: 409,
    FailureKind.VALIDATION: 422,
    FailureKind.NETWORK: 502,
    FailureKind.SERVER: 502,
    FailureKind.UNAUTHORIZED: 401,
    FailureKind.NOT_FOUND: 404,
}


def _http_error(failure: BookingFailure, **extra) -> HTTPException:
    detail = {"kind": failure.kind.value, "message": failure.message, "error_code": failure.error_code}
    detail.update(extra)
    return HTTPException(status_code=FAILURE_STATUS.get(failure.kind, 500), detail=detail)


def _selection_schema(session_id: str, selection: BookingSelection) -> SelectionSchema:
    return SelectionSchema(session_id=session_id, **selection.snapshot())


def _get_selection(session_id: str, store: SelectionStorePort) -> BookingSelection:
    selection = store.get(session_id)
    if selection is None:
        raise HTTPException(status_code=404, detail={"kind": FailureKind.NOT_FOUND.value, "message": "unknown booking session"})
    return selection


@router.get("/menus", response_model=list[MenuSchema])
async def list_menus(category: str | None = None, uc: CatalogUseCase = Depends(get_catalog_use_case)):
    try:
        menus = await uc.list_menus(category)
    except BookingError as e:
        raise _http_error(BookingFailure.from_error(e))
    return [MenuSchema.from_menu(m) for m in menus]


@router.get("/menus/{menu_id}", response_model=MenuSchema)
async def get_menu(menu_id: str, uc: CatalogUseCase = Depends(get_catalog_use_case)):
    try:
        menu = await uc.get_menu(menu_id)
    except BookingError as e:
        raise _http_error(BookingFailure.from_error(e))
    return MenuSchema.from_menu(menu)


@router.post("/bookings", response_model=SelectionSchema, status_code=201)
async def start_booking(
    req: StartBookingRequestSchema,
    uc: CatalogUseCase = Depends(get_catalog_use_case),
    store: SelectionStorePort = Depends(get_selection_store),
    hours: BusinessHours = Depends(get_business_hours),
    clock: Callable[[], date] = Depends(get_clock),
):
    try:
        menu = await uc.get_menu(req.menu_id)
    except BookingError as e:
        raise _http_error(BookingFailure.from_error(e))
    selection = BookingSelection(menu=menu, hours=hours, clock=clock)
    session_id = store.create(selection)
    logger.info("Booking flow started", extra={"session_id": session_id, "menu_id": menu.id})
    return _selection_schema(session_id, selection)


@router.get("/bookings/{session_id}", response_model=SelectionSchema)
def get_booking(session_id: str, store: SelectionStorePort = Depends(get_selection_store)):
    return _selection_schema(session_id, _get_selection(session_id, store))


@router.post("/bookings/{session_id}/date", response_model=SelectionSchema)
def choose_date(
    session_id: str,
    req: ChooseDateRequestSchema,
    store: SelectionStorePort = Depends(get_selection_store),
):
    selection = _get_selection(session_id, store)
    try:
        selection.choose_date(req.date)
    except BookingError as e:
        raise _http_error(BookingFailure.from_error(e))
    return _selection_schema(session_id, selection)


@router.post("/bookings/{session_id}/options/{option_id}", response_model=SelectionSchema)
def toggle_option(session_id: str, option_id: str, store: SelectionStorePort = Depends(get_selection_store)):
    selection = _get_selection(session_id, store)
    try:
        selection.toggle_option(option_id)
    except BookingError as e:
        raise _http_error(BookingFailure.from_error(e))
    return _selection_schema(session_id, selection)


@router.get("/bookings/{session_id}/slots", response_model=SlotsResponseSchema)
async def load_slots(
    session_id: str,
    store: SelectionStorePort = Depends(get_selection_store),
    uc: LoadAvailabilityUseCase = Depends(get_availability_use_case),
):
    selection = _get_selection(session_id, store)
    result = await uc.execute(selection)
    if result.failure:
        raise _http_error(result.failure)
    if result.stale:
        raise HTTPException(
            status_code=409,
            detail={"kind": "stale", "message": "selection changed while availability was loading"},
        )
    return SlotsResponseSchema(
        date=result.key.date,
        required_slots=result.key.required_slots,
        no_availability=result.no_availability,
        slots=[SlotSchema.from_slot(s) for s in result.slots],
    )


@router.post("/bookings/{session_id}/time", response_model=SelectionSchema)
def choose_time(
    session_id: str,
    req: ChooseTimeRequestSchema,
    store: SelectionStorePort = Depends(get_selection_store),
):
    selection = _get_selection(session_id, store)
    try:
        selection.choose_time(req.time)
    except BookingError as e:
        raise _http_error(BookingFailure.from_error(e))
    return _selection_schema(session_id, selection)


@router.post("/bookings/{session_id}/submit", response_model=SubmitResponseSchema)
async def submit_booking(
    session_id: str,
    store: SelectionStorePort = Depends(get_selection_store),
    uc: ReservationSubmissionUseCase = Depends(get_submission_use_case),
):
    selection = _get_selection(session_id, store)
    result = await uc.submit(selection)
    if result.failure:
        extra = {}
        if result.refreshed is not None and result.refreshed.ok:
            extra["slots"] = [SlotSchema.from_slot(s).model_dump() for s in result.refreshed.slots]
        raise _http_error(result.failure, selection=selection.snapshot(), **extra)
    return SubmitResponseSchema(
        reservation=ReservationSchema.from_record(result.reservation),
        selection=_selection_schema(session_id, selection),
    )


@router.post("/bookings/{session_id}/reset", response_model=SelectionSchema)
def reset_booking(session_id: str, store: SelectionStorePort = Depends(get_selection_store)):
    selection = _get_selection(session_id, store)
    selection.reset()
    return _selection_schema(session_id, selection)
