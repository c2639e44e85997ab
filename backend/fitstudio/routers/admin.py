# backend/fitstudio/routers/admin.py
# All routes require X-Admin-Token

from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_event_emitter, require_admin
from ..errors import NotFoundError, ValidationError
from ..schemas.availability import (
    ScheduleChangeResponse,
    ScheduleEntryCreate,
    ScheduleEntryRead,
    VacationCreate,
    VacationRead,
)
from ..schemas.bookings import AdminBookingCreate, BookingRead, BookingStatusUpdate
from ..schemas.common import SuccessResponse
from ..services import availability, ledger
from ..services.events import EventEmitter
from ..services.slots import make_slot_id

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


# ===== Bookings =====

@router.get("/bookings", response_model=list[BookingRead])
def list_bookings(
    status_filter: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    return ledger.list_bookings(db, status=status_filter)


@router.post(
    "/bookings", response_model=BookingRead, status_code=status.HTTP_201_CREATED
)
def create_booking(
    data: AdminBookingCreate,
    db: Session = Depends(get_db),
    emitter: EventEmitter = Depends(get_event_emitter),
):
    return ledger.reserve_slot(
        db,
        trainer_id=data.trainer_id,
        slot_id=make_slot_id(data.trainer_id, data.date, data.time),
        date_str=data.date,
        time_str=data.time,
        client_name=data.client_name,
        client_email=data.client_email,
        client_phone=data.client_phone,
        trainer_name=data.trainer_name,
        initial_status="confirmed",
        create_missing_slot=True,
        emitter=emitter,
    )


@router.patch("/bookings/{booking_id}", response_model=BookingRead)
def update_booking_status(
    booking_id: str,
    data: BookingStatusUpdate,
    db: Session = Depends(get_db),
    emitter: EventEmitter = Depends(get_event_emitter),
):
    return ledger.transition_status(db, booking_id, data.action, emitter=emitter)


@router.delete("/bookings/{booking_id}", response_model=SuccessResponse)
def delete_booking(
    booking_id: str,
    db: Session = Depends(get_db),
    emitter: EventEmitter = Depends(get_event_emitter),
):
    ledger.cancel_booking(db, booking_id, emitter=emitter)
    return SuccessResponse(message="Booking cancelled successfully")


# ===== Weekly schedule =====

@router.get("/schedules", response_model=list[ScheduleEntryRead])
def list_schedules(
    trainer_id: Optional[str] = Query(None, alias="trainerId"),
    db: Session = Depends(get_db),
):
    return availability.list_schedule_entries(db, trainer_id)


@router.post("/schedules", response_model=ScheduleChangeResponse)
def add_schedule(data: ScheduleEntryCreate, db: Session = Depends(get_db)):
    created, resynced = availability.add_schedule_entry(
        db, data.trainer_id, data.weekday, data.time
    )
    return ScheduleChangeResponse(changed=created, resynced_dates=resynced)


@router.delete("/schedules", response_model=ScheduleChangeResponse)
def remove_schedule(
    id: Optional[int] = Query(None),
    trainer_id: Optional[str] = Query(None, alias="trainerId"),
    weekday: Optional[int] = Query(None),
    time: Optional[str] = Query(None),
    body: Optional[ScheduleEntryCreate] = Body(None),
    db: Session = Depends(get_db),
):
    if id is not None:
        removed, resynced = availability.remove_schedule_entry_by_id(db, id)
        return ScheduleChangeResponse(changed=removed, resynced_dates=resynced)

    if body is not None:
        trainer_id, weekday, time = body.trainer_id, body.weekday, body.time
    if not trainer_id or weekday is None or not time:
        raise ValidationError("Provide id, or trainerId, weekday and time")

    removed, resynced = availability.remove_schedule_entry(db, trainer_id, weekday, time)
    return ScheduleChangeResponse(changed=removed, resynced_dates=resynced)


# ===== Vacations =====

@router.get("/vacations", response_model=list[VacationRead])
def list_vacations(
    trainer_id: Optional[str] = Query(None, alias="trainerId"),
    db: Session = Depends(get_db),
):
    return availability.list_vacations(db, trainer_id)


@router.post(
    "/vacations", response_model=VacationRead, status_code=status.HTTP_201_CREATED
)
def add_vacation(data: VacationCreate, db: Session = Depends(get_db)):
    return availability.add_vacation(
        db, data.trainer_id, data.start_date, data.end_date, data.note
    )


@router.delete("/vacations", response_model=SuccessResponse)
def remove_vacation(
    id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    if id is None:
        raise ValidationError("Vacation ID is required")
    if not availability.remove_vacation(db, id):
        raise NotFoundError("Vacation not found")
    return SuccessResponse(message="Vacation removed")
