# backend/fitstudio/services/ledger.py
"""
Booking ledger: the authoritative set of bookings and their lifecycle.

State machine (Bookings.status):
  pending   → confirmed (approve) | rejected (reject)   [client requests]
  confirmed                                           [staff-entered, initial]
  confirmed → confirmed with another slot/trainer      [reschedule]
  any       → deleted                                  [cancel]

Every mutation of is_booked / status happens inside one transaction built
from conditional UPDATE/DELETE statements; a statement that matches zero
rows means we lost a race, and the whole unit is rolled back. No
read-then-write across two round trips.

Notifications are emitted after commit, best-effort.
"""

import logging
import time as _time
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import delete, func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import ConflictError, NotFoundError, ValidationError
from ..models import BOOKING_STATUSES, LIVE_BOOKING_STATUSES, Bookings, TimeSlots, Trainers
from .edit_guard import ensure_change_allowed
from .events import EventEmitter
from .notifications import (
    booking_details,
    notify_booking_cancelled,
    notify_booking_confirmed,
    notify_booking_created,
    notify_booking_rejected,
    notify_booking_updated,
)
from .slots.config import local_now, make_slot_id, time_str_to_minutes
from .slots.synchronizer import create_slot_if_absent
from .trainers import get_trainer
from .validation import require_date, require_not_past, require_time, require_valid_client

logger = logging.getLogger(__name__)

ACTIONS = {
    "approve": "confirmed",
    "reject": "rejected",
}


def new_booking_id() -> str:
    return f"booking-{int(_time.time() * 1000)}-{uuid4().hex[:9]}"


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _trainer_phone(db: Session, trainer_id: str) -> str | None:
    return db.query(Trainers.phone).filter(Trainers.id == trainer_id).scalar()


def _notify(notify, emitter: EventEmitter | None, db: Session, booking: Bookings, **kwargs) -> None:
    if emitter is None:
        return
    try:
        details = booking_details(booking, _trainer_phone(db, booking.trainer_id))
        notify(emitter, details, **kwargs)
    except Exception:
        logger.exception(f"Notification dispatch failed for booking {booking.id}")


# ──────────────────────────────────────────────────────────────────────────────
# Reads
# ──────────────────────────────────────────────────────────────────────────────

def get_booking(db: Session, booking_id: str) -> Bookings:
    booking = db.get(Bookings, booking_id)
    if booking is None:
        raise NotFoundError("Booking not found")
    return booking


def get_booking_for_client(db: Session, booking_id: str, client_email: str) -> Bookings:
    """Self-service lookup: the stored email must match, case-insensitively."""
    booking = (
        db.query(Bookings)
        .filter(
            Bookings.id == booking_id,
            func.lower(Bookings.client_email) == (client_email or "").strip().lower(),
        )
        .first()
    )
    if booking is None:
        raise NotFoundError("Booking not found")
    return booking


def list_bookings(db: Session, status: str | None = None) -> list[Bookings]:
    query = db.query(Bookings)
    if status is not None:
        if status not in BOOKING_STATUSES:
            raise ValidationError(f"Unknown status {status!r}")
        query = query.filter(Bookings.status == status)
    return query.order_by(Bookings.date, Bookings.time).all()


# ──────────────────────────────────────────────────────────────────────────────
# Reserve
# ──────────────────────────────────────────────────────────────────────────────

def reserve_slot(
    db: Session,
    *,
    trainer_id: str,
    slot_id: str,
    date_str: str,
    time_str: str,
    client_name: str,
    client_email: str,
    client_phone: str,
    initial_status: str = "pending",
    trainer_name: str | None = None,
    create_missing_slot: bool = False,
    emitter: EventEmitter | None = None,
    now: datetime | None = None,
) -> Bookings:
    """
    Reserve a slot and create its booking in one atomic unit.

    Steps:
    1. Validate client fields and date/time (before touching storage)
    2. Resolve trainer and slot (staff path creates a missing slot)
    3. Flip is_booked 0 → 1 conditionally + insert booking, all-or-nothing
    4. Notify client and trainer (best-effort)
    """
    if initial_status not in LIVE_BOOKING_STATUSES:
        raise ValueError(f"initial_status must be one of {LIVE_BOOKING_STATUSES}")
    now = now or local_now()

    # Step 1: Validation
    require_valid_client(client_name, client_email, client_phone)
    target_date = require_date(date_str)
    require_time(time_str)
    require_not_past(target_date, now.date())

    # Step 2: Trainer and slot
    trainer = get_trainer(db, trainer_id)

    slot = db.get(TimeSlots, slot_id)
    if slot is None:
        if not create_missing_slot:
            raise NotFoundError("Slot not found")
        if slot_id != make_slot_id(trainer_id, date_str, time_str):
            raise ValidationError("Slot id does not match trainer, date and time")
        create_slot_if_absent(db, trainer_id, date_str, time_str)
    elif (slot.trainer_id, slot.date, slot.time) != (trainer_id, date_str, time_str):
        raise ValidationError("Slot does not match the requested trainer, date and time")

    booking = Bookings(
        id=new_booking_id(),
        trainer_id=trainer_id,
        trainer_name=trainer_name or trainer.name,
        slot_id=slot_id,
        date=date_str,
        time=time_str,
        client_name=client_name.strip(),
        client_email=client_email.strip(),
        client_phone=client_phone.strip(),
        booked_at=_utc_timestamp(),
        status=initial_status,
    )

    # Step 3: Atomic unit
    try:
        result = db.execute(
            update(TimeSlots)
            .where(TimeSlots.id == slot_id, TimeSlots.is_booked == 0)
            .values(is_booked=1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            db.rollback()
            raise ConflictError("This slot has already been booked")

        db.add(booking)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("This slot has already been booked") from None

    db.refresh(booking)

    logger.info(
        f"Booking reserved: booking_id={booking.id}, trainer={trainer_id}, "
        f"slot={slot_id}, status={booking.status}"
    )

    # Step 4: Notify
    _notify(notify_booking_created, emitter, db, booking)

    return booking


# ──────────────────────────────────────────────────────────────────────────────
# Status transitions
# ──────────────────────────────────────────────────────────────────────────────

def transition_status(
    db: Session,
    booking_id: str,
    action: str,
    emitter: EventEmitter | None = None,
) -> Bookings:
    """
    Staff approval/rejection of a pending booking.

    reject releases the slot in the same transaction.
    """
    new_status = ACTIONS.get(action)
    if new_status is None:
        raise ValidationError('Invalid action. Must be "approve" or "reject".')

    booking = get_booking(db, booking_id)
    slot_id = booking.slot_id

    result = db.execute(
        update(Bookings)
        .where(Bookings.id == booking_id, Bookings.status == "pending")
        .values(status=new_status)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        current = db.query(Bookings.status).filter(Bookings.id == booking_id).scalar()
        if current is None:
            raise NotFoundError("Booking not found")
        raise ConflictError(f"Booking is already {current}")

    if new_status == "rejected":
        db.execute(
            update(TimeSlots)
            .where(TimeSlots.id == slot_id)
            .values(is_booked=0)
            .execution_options(synchronize_session=False)
        )
    db.commit()
    db.refresh(booking)

    logger.info(f"Booking {booking_id} {action}d → {new_status}")

    if new_status == "confirmed":
        _notify(notify_booking_confirmed, emitter, db, booking)
    else:
        _notify(notify_booking_rejected, emitter, db, booking)

    return booking


# ──────────────────────────────────────────────────────────────────────────────
# Cancel
# ──────────────────────────────────────────────────────────────────────────────

def cancel_booking(
    db: Session,
    booking_id: str,
    client_email: str | None = None,
    emitter: EventEmitter | None = None,
    now: datetime | None = None,
) -> None:
    """
    Delete a booking and release its slot.

    Staff path (no client_email): any status. A rejected booking's slot was
    already released and may belong to a newer booking, so it is left alone.
    Self-service path (client_email given): ownership check, confirmed
    bookings only, and the edit lock window applies.
    """
    if client_email is not None:
        booking = get_booking_for_client(db, booking_id, client_email)
        ensure_change_allowed(booking.date, booking.time, now)
        if booking.status != "confirmed":
            raise ConflictError(f"Only confirmed bookings can be cancelled (booking is {booking.status})")
    else:
        booking = get_booking(db, booking_id)

    observed_status = booking.status
    slot_id = booking.slot_id
    details = booking_details(booking, _trainer_phone(db, booking.trainer_id))

    result = db.execute(
        delete(Bookings)
        .where(Bookings.id == booking_id, Bookings.status == observed_status)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        if db.query(Bookings.id).filter(Bookings.id == booking_id).first() is None:
            raise NotFoundError("Booking not found")
        raise ConflictError("Booking changed while cancelling, please retry")

    if observed_status in LIVE_BOOKING_STATUSES:
        db.execute(
            update(TimeSlots)
            .where(TimeSlots.id == slot_id)
            .values(is_booked=0)
            .execution_options(synchronize_session=False)
        )
    db.commit()

    logger.info(f"Booking cancelled: booking_id={booking_id}, slot={slot_id}, was={observed_status}")

    if emitter is not None:
        try:
            notify_booking_cancelled(emitter, details)
        except Exception:
            logger.exception(f"Notification dispatch failed for booking {booking_id}")


# ──────────────────────────────────────────────────────────────────────────────
# Reschedule
# ──────────────────────────────────────────────────────────────────────────────

def reschedule_booking(
    db: Session,
    booking_id: str,
    client_email: str,
    new_slot_id: str,
    new_trainer_id: str | None = None,
    emitter: EventEmitter | None = None,
    now: datetime | None = None,
) -> Bookings:
    """
    Move a confirmed booking to another slot (and optionally trainer).

    The edit lock window is checked before anything else is looked up or
    mutated. Status is preserved.
    """
    now = now or local_now()

    # 1. Authenticate by email
    booking = get_booking_for_client(db, booking_id, client_email)

    # 2. Edit lock window
    ensure_change_allowed(booking.date, booking.time, now)

    if booking.status != "confirmed":
        raise ConflictError(f"Only confirmed bookings can be changed (booking is {booking.status})")

    # 3. Validate the new slot
    new_slot = db.get(TimeSlots, new_slot_id)
    if new_slot is None:
        raise NotFoundError("The selected slot does not exist")
    if new_slot.is_booked:
        raise ConflictError("The selected slot is not available")

    old_trainer_id = booking.trainer_id
    old_slot_id = booking.slot_id
    resolved_trainer_id = new_trainer_id or old_trainer_id
    if new_slot.trainer_id != resolved_trainer_id:
        raise ValidationError("Slot does not belong to the selected trainer")
    new_slot_date = require_date(new_slot.date)
    if new_slot_date < now.date():
        raise ValidationError("Cannot move a booking into the past")
    # Same rule as the listing: a slot that has started today is gone
    if new_slot_date == now.date() and time_str_to_minutes(new_slot.time) <= now.hour * 60 + now.minute:
        raise ValidationError("Cannot move a booking into the past")

    new_trainer = get_trainer(db, resolved_trainer_id)
    old_trainer_phone = _trainer_phone(db, old_trainer_id)
    new_date, new_time = new_slot.date, new_slot.time

    # 4. Atomic swap
    try:
        reserved = db.execute(
            update(TimeSlots)
            .where(TimeSlots.id == new_slot_id, TimeSlots.is_booked == 0)
            .values(is_booked=1)
            .execution_options(synchronize_session=False)
        )
        if reserved.rowcount == 0:
            db.rollback()
            raise ConflictError("The selected slot is not available")

        moved = db.execute(
            update(Bookings)
            .where(
                Bookings.id == booking_id,
                Bookings.slot_id == old_slot_id,
                Bookings.status == "confirmed",
            )
            .values(
                slot_id=new_slot_id,
                date=new_date,
                time=new_time,
                trainer_id=resolved_trainer_id,
                trainer_name=new_trainer.name,
            )
            .execution_options(synchronize_session=False)
        )
        if moved.rowcount == 0:
            db.rollback()
            raise ConflictError("Booking changed while rescheduling, please retry")

        db.execute(
            update(TimeSlots)
            .where(TimeSlots.id == old_slot_id)
            .values(is_booked=0)
            .execution_options(synchronize_session=False)
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("The selected slot is not available") from None

    db.refresh(booking)

    logger.info(
        f"Booking rescheduled: booking_id={booking_id}, "
        f"{old_slot_id} → {new_slot_id}, trainer={resolved_trainer_id}"
    )

    # 5. Notify
    _notify(
        notify_booking_updated,
        emitter,
        db,
        booking,
        previous_trainer_phone=old_trainer_phone,
        trainer_changed=resolved_trainer_id != old_trainer_id,
    )

    return booking
