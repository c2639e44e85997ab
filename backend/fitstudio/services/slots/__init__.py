# backend/fitstudio/services/slots/__init__.py
"""
Slots module.

Weekly templates + vacations -> concrete, date-stamped time_slots rows,
materialized lazily per (trainer, date).
"""

from .config import BookingConfig, get_booking_config, make_slot_id
from .synchronizer import (
    ensure_slots_fresh,
    list_available_slots,
    resync_weekday,
    create_slot_if_absent,
)
from .vacations import is_on_vacation

__all__ = [
    "BookingConfig",
    "get_booking_config",
    "make_slot_id",
    "ensure_slots_fresh",
    "list_available_slots",
    "resync_weekday",
    "create_slot_if_absent",
    "is_on_vacation",
]
