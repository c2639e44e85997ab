# backend/fitstudio/routers/bookings.py
"""
Public booking API (client self-service).

POST   /bookings                 → pending booking (rate limited per origin)
DELETE /bookings?id=…[&email=…]  → cancel, frees the slot
GET    /bookings/{id}?email=…    → booking when the email matches
PATCH  /bookings/{id}            → reschedule (12h edit lock)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_event_emitter
from ..errors import ValidationError
from ..ratelimit.dependency import enforce_booking_admission
from ..schemas.bookings import BookingCreate, BookingRead, BookingReschedule
from ..schemas.common import SuccessResponse
from ..services import ledger
from ..services.events import EventEmitter

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post(
    "",
    response_model=BookingRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(enforce_booking_admission)],
)
def create_booking(
    data: BookingCreate,
    db: Session = Depends(get_db),
    emitter: EventEmitter = Depends(get_event_emitter),
):
    return ledger.reserve_slot(
        db,
        trainer_id=data.trainer_id,
        slot_id=data.slot_id,
        date_str=data.date,
        time_str=data.time,
        client_name=data.client_name,
        client_email=data.client_email,
        client_phone=data.client_phone,
        trainer_name=data.trainer_name,
        initial_status="pending",
        emitter=emitter,
    )


@router.delete("", response_model=SuccessResponse)
def cancel_booking(
    id: Optional[str] = Query(None),
    email: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    emitter: EventEmitter = Depends(get_event_emitter),
):
    if not id:
        raise ValidationError("Booking ID is required")
    ledger.cancel_booking(db, id, client_email=email, emitter=emitter)
    return SuccessResponse(message="Booking cancelled successfully")


@router.get("/{booking_id}", response_model=BookingRead)
def get_booking(
    booking_id: str,
    email: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    if not email:
        raise ValidationError("Email is required")
    return ledger.get_booking_for_client(db, booking_id, email)


@router.patch("/{booking_id}", response_model=BookingRead)
def reschedule_booking(
    booking_id: str,
    data: BookingReschedule,
    db: Session = Depends(get_db),
    emitter: EventEmitter = Depends(get_event_emitter),
):
    return ledger.reschedule_booking(
        db,
        booking_id,
        client_email=data.client_email,
        new_slot_id=data.new_slot_id,
        new_trainer_id=data.new_trainer_id,
        emitter=emitter,
    )
