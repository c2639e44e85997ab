# backend/fitstudio/services/edit_guard.py
"""
Edit/cancellation guard: no self-service changes close to the appointment.

Evaluated fresh on every attempt; never cached.
"""

from datetime import date, datetime, time

from ..errors import EditWindowError
from .slots.config import BookingConfig, get_booking_config, local_now


def appointment_datetime(slot_date: str | date, slot_time: str) -> datetime:
    if isinstance(slot_date, str):
        slot_date = date.fromisoformat(slot_date)
    hour, minute = (int(p) for p in slot_time.split(":"))
    return datetime.combine(slot_date, time(hour, minute))


def hours_until(slot_date: str | date, slot_time: str, now: datetime | None = None) -> float:
    now = now or local_now()
    delta = appointment_datetime(slot_date, slot_time) - now
    return delta.total_seconds() / 3600


def ensure_change_allowed(
    slot_date: str | date,
    slot_time: str,
    now: datetime | None = None,
    config: BookingConfig | None = None,
) -> None:
    config = config or get_booking_config()
    lock_hours = config.edit_lock_hours
    if hours_until(slot_date, slot_time, now) < lock_hours:
        raise EditWindowError(
            f"Changes are only allowed up to {lock_hours:g} hours before the appointment."
        )
