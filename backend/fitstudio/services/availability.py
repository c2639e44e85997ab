# backend/fitstudio/services/availability.py
"""
Availability store: weekly schedule entries and vacation ranges.

Plain CRUD. Schedule changes re-sync already materialized future slots for
the affected (trainer, weekday); vacations never touch slots or bookings
(a trainer may be sent on vacation over a confirmed session).
"""

import logging
from datetime import date
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import ValidationError
from ..models import TrainerSchedules, TrainerVacations
from .slots.synchronizer import resync_weekday
from .trainers import get_trainer
from .validation import require_date, require_time

logger = logging.getLogger(__name__)


def _require_weekday(weekday: int) -> int:
    if not isinstance(weekday, int) or not 0 <= weekday <= 6:
        raise ValidationError("weekday must be between 0 (Monday) and 6 (Sunday)")
    return weekday


# ── Weekly schedule ──────────────────────────────────────────────────────


def list_schedule_entries(db: Session, trainer_id: str | None = None) -> list[TrainerSchedules]:
    query = db.query(TrainerSchedules)
    if trainer_id is not None:
        query = query.filter(TrainerSchedules.trainer_id == trainer_id)
    return query.order_by(
        TrainerSchedules.trainer_id,
        TrainerSchedules.weekday,
        TrainerSchedules.time,
    ).all()


def add_schedule_entry(
    db: Session,
    trainer_id: str,
    weekday: int,
    time_str: str,
    today: date | None = None,
) -> tuple[bool, int]:
    """
    Create-if-absent. Returns (created, resynced_dates).
    """
    _require_weekday(weekday)
    require_time(time_str)
    get_trainer(db, trainer_id)

    exists = (
        db.query(TrainerSchedules.id)
        .filter(
            TrainerSchedules.trainer_id == trainer_id,
            TrainerSchedules.weekday == weekday,
            TrainerSchedules.time == time_str,
        )
        .first()
    )
    if exists:
        return False, 0

    db.add(TrainerSchedules(trainer_id=trainer_id, weekday=weekday, time=time_str))
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against an identical insert
        db.rollback()
        return False, 0

    resynced = resync_weekday(db, trainer_id, weekday, today)
    logger.info(
        f"Schedule entry added: trainer={trainer_id}, weekday={weekday}, "
        f"time={time_str}, resynced_dates={resynced}"
    )
    return True, resynced


def remove_schedule_entry(
    db: Session,
    trainer_id: str,
    weekday: int,
    time_str: str,
    today: date | None = None,
) -> tuple[bool, int]:
    """
    Idempotent delete. Returns (removed, resynced_dates).
    """
    _require_weekday(weekday)

    deleted = (
        db.query(TrainerSchedules)
        .filter(
            TrainerSchedules.trainer_id == trainer_id,
            TrainerSchedules.weekday == weekday,
            TrainerSchedules.time == time_str,
        )
        .delete(synchronize_session=False)
    )
    db.commit()
    if not deleted:
        return False, 0

    resynced = resync_weekday(db, trainer_id, weekday, today)
    logger.info(
        f"Schedule entry removed: trainer={trainer_id}, weekday={weekday}, "
        f"time={time_str}, resynced_dates={resynced}"
    )
    return True, resynced


def remove_schedule_entry_by_id(
    db: Session,
    entry_id: int,
    today: date | None = None,
) -> tuple[bool, int]:
    entry = db.get(TrainerSchedules, entry_id)
    if entry is None:
        return False, 0
    return remove_schedule_entry(db, entry.trainer_id, entry.weekday, entry.time, today)


# ── Vacations ────────────────────────────────────────────────────────────


def list_vacations(db: Session, trainer_id: str | None = None) -> list[TrainerVacations]:
    query = db.query(TrainerVacations)
    if trainer_id is not None:
        query = query.filter(TrainerVacations.trainer_id == trainer_id)
    return query.order_by(TrainerVacations.start_date, TrainerVacations.id).all()


def add_vacation(
    db: Session,
    trainer_id: str,
    start_date: str,
    end_date: str,
    note: str | None = None,
) -> TrainerVacations:
    start = require_date(start_date)
    end = require_date(end_date)
    if start > end:
        raise ValidationError("startDate must be before or equal to endDate")
    get_trainer(db, trainer_id)

    vacation = TrainerVacations(
        trainer_id=trainer_id,
        start_date=start.isoformat(),
        end_date=end.isoformat(),
        note=note,
    )
    db.add(vacation)
    db.commit()
    db.refresh(vacation)

    logger.info(f"Vacation added: trainer={trainer_id}, {vacation.start_date}..{vacation.end_date}")
    return vacation


def remove_vacation(db: Session, vacation_id: int) -> bool:
    deleted = (
        db.query(TrainerVacations)
        .filter(TrainerVacations.id == vacation_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return bool(deleted)
