# backend/fitstudio/services/slots/synchronizer.py
"""
Slot synchronizer: derives concrete time_slots rows from weekly templates.

Slots are not pre-generated for a calendar horizon. They are materialized
lazily for a (trainer, date) pair right before it is queried
(`ensure_slots_fresh`, a cache-fill step), and re-synced for already
materialized future dates when a schedule entry changes (`resync_weekday`).

Ownership:
✓ Creates unbooked rows
✓ Deletes unbooked rows whose time left the template

Never:
✗ Touches is_booked (Booking Ledger owns it)
✗ Deletes booked rows, even if their time left the template
"""

import logging
from datetime import date, datetime
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import Bookings, TimeSlots, TrainerSchedules
from .config import (
    BookingConfig,
    get_booking_config,
    local_now,
    make_slot_id,
    time_str_to_minutes,
)

logger = logging.getLogger(__name__)


def get_template_times(
    db: Session,
    trainer_id: str,
    weekday: int,
    config: BookingConfig | None = None,
) -> list[str]:
    """
    Times the trainer offers on `weekday` (0 = Monday).

    A trainer with no schedule entries at all falls back to the default
    template; a configured trainer with no entries for this weekday gets [].
    """
    config = config or get_booking_config()

    rows = (
        db.query(TrainerSchedules.time)
        .filter(
            TrainerSchedules.trainer_id == trainer_id,
            TrainerSchedules.weekday == weekday,
        )
        .order_by(TrainerSchedules.time)
        .all()
    )
    if rows:
        return [r.time for r in rows]

    has_any = (
        db.query(TrainerSchedules.id)
        .filter(TrainerSchedules.trainer_id == trainer_id)
        .first()
    )
    if has_any:
        return []
    return list(config.default_times)


def create_slot_if_absent(
    db: Session,
    trainer_id: str,
    slot_date: str,
    time_str: str,
) -> bool:
    """
    Insert an unbooked slot unless it already exists.

    Returns True if this call created the row. A concurrent insert of the
    same deterministic id loses quietly (returns False).
    """
    slot_id = make_slot_id(trainer_id, slot_date, time_str)
    if db.get(TimeSlots, slot_id) is not None:
        return False

    db.add(TimeSlots(
        id=slot_id,
        trainer_id=trainer_id,
        date=slot_date,
        time=time_str,
        is_booked=0,
    ))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return False
    return True


def ensure_slots_fresh(
    db: Session,
    trainer_id: str,
    target_date: date,
    config: BookingConfig | None = None,
) -> None:
    """
    Bring time_slots for (trainer, date) in line with the current template.

    Adds missing template times, removes unbooked rows whose time is no
    longer offered. Idempotent.
    """
    config = config or get_booking_config()
    date_str = target_date.isoformat()

    template = get_template_times(db, trainer_id, target_date.weekday(), config)
    template_set = set(template)

    existing = (
        db.query(TimeSlots.id, TimeSlots.time, TimeSlots.is_booked)
        .filter(
            TimeSlots.trainer_id == trainer_id,
            TimeSlots.date == date_str,
        )
        .all()
    )
    existing_times = {row.time for row in existing}

    # Step 1: Add missing rows
    created = 0
    for time_str in template:
        if time_str not in existing_times:
            if create_slot_if_absent(db, trainer_id, date_str, time_str):
                created += 1

    # Step 2: Prune stale unbooked rows. Conditional on is_booked = 0 so a
    # slot reserved meanwhile survives; rows still referenced by a rejected
    # booking stay as history (and are hidden by list_available_slots)
    stale_ids = [
        row.id for row in existing
        if row.time not in template_set and not row.is_booked
    ]
    removed = 0
    if stale_ids:
        result = db.execute(
            delete(TimeSlots)
            .where(
                TimeSlots.id.in_(stale_ids),
                TimeSlots.is_booked == 0,
                ~select(Bookings.id)
                .where(Bookings.slot_id == TimeSlots.id)
                .correlate(TimeSlots)
                .exists(),
            )
            .execution_options(synchronize_session=False)
        )
        db.commit()
        removed = result.rowcount or 0

    if created or removed:
        logger.info(
            f"Slots synced: trainer={trainer_id}, date={date_str}, "
            f"created={created}, removed={removed}"
        )


def list_available_slots(
    db: Session,
    trainer_id: str,
    target_date: date,
    now: datetime | None = None,
    config: BookingConfig | None = None,
) -> list[TimeSlots]:
    """
    Unbooked slots for (trainer, date) whose time is in the current
    template, ordered by time.

    For today, slots whose time-of-day has already passed are hidden
    (the rows stay in place).
    """
    now = now or local_now()
    template = get_template_times(db, trainer_id, target_date.weekday(), config)
    if not template:
        return []

    slots = (
        db.query(TimeSlots)
        .filter(
            TimeSlots.trainer_id == trainer_id,
            TimeSlots.date == target_date.isoformat(),
            TimeSlots.is_booked == 0,
            TimeSlots.time.in_(template),
        )
        .order_by(TimeSlots.time)
        .all()
    )

    if target_date == now.date():
        current_minutes = now.hour * 60 + now.minute
        slots = [s for s in slots if time_str_to_minutes(s.time) > current_minutes]

    return slots


def resync_weekday(
    db: Session,
    trainer_id: str,
    weekday: int,
    today: date | None = None,
    config: BookingConfig | None = None,
) -> int:
    """
    Re-sync already materialized dates >= today that fall on `weekday`.

    Called after a schedule entry for (trainer, weekday) is added or removed.
    Past dates are left alone. Returns the number of dates re-synced.
    """
    today = today or local_now().date()

    dates = (
        db.query(TimeSlots.date)
        .filter(
            TimeSlots.trainer_id == trainer_id,
            TimeSlots.date >= today.isoformat(),
        )
        .distinct()
        .all()
    )

    touched = 0
    for (date_str,) in dates:
        slot_date = date.fromisoformat(date_str)
        if slot_date.weekday() != weekday:
            continue
        ensure_slots_fresh(db, trainer_id, slot_date, config)
        touched += 1

    return touched
