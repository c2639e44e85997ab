# backend/fitstudio/schemas/slots.py

from .common import CamelModel


class TimeSlotRead(CamelModel):
    id: str
    trainer_id: str
    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    is_booked: bool


class SlotsResponse(CamelModel):
    slots: list[TimeSlotRead]
    on_vacation: bool = False
