# backend/fitstudio/schemas/bookings.py

from typing import Optional

from .common import CamelModel


class BookingCreate(CamelModel):
    """Public booking request; field-level rules are enforced by the ledger."""
    trainer_id: str
    trainer_name: Optional[str] = None
    slot_id: str
    date: str
    time: str
    client_name: str
    client_email: str
    client_phone: str


class AdminBookingCreate(CamelModel):
    """Staff-entered booking; the slot id is derived from trainer/date/time."""
    trainer_id: str
    trainer_name: Optional[str] = None
    date: str
    time: str
    client_name: str
    client_email: str
    client_phone: str


class BookingReschedule(CamelModel):
    client_email: str
    new_slot_id: str
    new_trainer_id: Optional[str] = None


class BookingStatusUpdate(CamelModel):
    action: str  # "approve" | "reject"


class BookingRead(CamelModel):
    id: str
    trainer_id: str
    trainer_name: str
    slot_id: str
    date: str
    time: str
    client_name: str
    client_email: str
    client_phone: str
    booked_at: str
    status: str
