from pydantic import BaseModel, Field

from salon_booking.domain.entities.menu import Menu
from salon_booking.domain.entities.reservation import ReservationRecord
from salon_booking.domain.entities.slot import Slot


class MenuOptionSchema(BaseModel):
    id: str
    name: str
    price: int
    additional_minutes: int
    description: str | None = None


class MenuSchema(BaseModel):
    id: str
    name: str
    base_price: int
    base_duration_minutes: int
    category: str | None = None
    description: str | None = None
    price_note: str | None = None
    options: list[MenuOptionSchema] = Field(default_factory=list)

    @classmethod
    def from_menu(cls, menu: Menu) -> "MenuSchema":
        return cls(
            id=menu.id,
            name=menu.name,
            base_price=menu.base_price,
            base_duration_minutes=menu.base_duration_minutes,
            category=menu.category,
            description=menu.description,
            price_note=menu.price_note,
            options=[
                MenuOptionSchema(
                    id=o.id,
                    name=o.name,
                    price=o.price,
                    additional_minutes=o.additional_minutes,
                    description=o.description,
                )
                for o in menu.options
            ],
        )


class StartBookingRequestSchema(BaseModel):
    menu_id: str


class ChooseDateRequestSchema(BaseModel):
    date: str = Field(description="YYYY-MM-DD")


class ChooseTimeRequestSchema(BaseModel):
    time: str = Field(description="HH:MM")


class SelectionSchema(BaseModel):
    session_id: str
    status: str
    menu_id: str
    date: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    option_ids: list[str] = Field(default_factory=list)
    total_price: int
    total_duration_minutes: int
    required_slots: int


class SlotSchema(BaseModel):
    index: int
    time: str
    reserved: bool
    startable: bool

    @classmethod
    def from_slot(cls, slot: Slot) -> "SlotSchema":
        return cls(index=slot.index, time=slot.time, reserved=slot.reserved, startable=slot.startable)


class SlotsResponseSchema(BaseModel):
    date: str
    required_slots: int
    no_availability: bool
    slots: list[SlotSchema]


class ReservationSchema(BaseModel):
    id: str
    date: str
    start_time: str
    end_time: str
    status: str
    menu_id: str | None = None
    menu_name: str | None = None
    option_ids: list[str] = Field(default_factory=list)
    total_price: int | None = None
    created_at: str | None = None

    @classmethod
    def from_record(cls, record: ReservationRecord) -> "ReservationSchema":
        return cls(
            id=record.id,
            date=record.date,
            start_time=record.start_time,
            end_time=record.end_time,
            status=record.status.value,
            menu_id=record.menu_id,
            menu_name=record.menu_name,
            option_ids=list(record.option_ids),
            total_price=record.total_price,
            created_at=record.created_at,
        )


class SubmitResponseSchema(BaseModel):
    reservation: ReservationSchema
    selection: SelectionSchema
