# backend/fitstudio/services/slots/config.py
"""
Booking configuration and time helpers for the slots system.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from functools import lru_cache
from zoneinfo import ZoneInfo

from ...config import settings


TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


@dataclass(frozen=True)
class BookingConfig:
    """
    Configuration for the booking/slots system.

    Attributes:
        default_times: Template used for trainers without any schedule entries
        edit_lock_hours: Self-service changes are refused closer than this
            to the appointment
    """
    default_times: tuple[str, ...] = (
        "09:00", "10:30", "12:00", "13:30",
        "15:00", "16:30", "18:00", "19:30",
    )
    edit_lock_hours: float = 12.0

    def __post_init__(self):
        """Validate configuration."""
        for t in self.default_times:
            if not TIME_RE.match(t):
                raise ValueError(f"default_times must be HH:MM strings, got {t!r}")
        if self.edit_lock_hours < 0:
            raise ValueError(f"edit_lock_hours must be >= 0, got {self.edit_lock_hours}")


@lru_cache
def get_booking_config() -> BookingConfig:
    """Get booking configuration (singleton)."""
    return BookingConfig()


# ── Time helpers ─────────────────────────────────────────────────────────


def is_valid_time_str(value: str) -> bool:
    return bool(TIME_RE.match(value or ""))


def time_str_to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight."""
    hour, minute = value.split(":")
    return int(hour) * 60 + int(minute)


def parse_date_str(value: str) -> date:
    """Parse strict "YYYY-MM-DD". Raises ValueError on anything else."""
    if not re.match(r"^\d{4}-\d{2}-\d{2}$", value or ""):
        raise ValueError("Date must be in YYYY-MM-DD format")
    return date.fromisoformat(value)


def make_slot_id(trainer_id: str, slot_date: str, time_str: str) -> str:
    return f"{trainer_id}-{slot_date}-{time_str}"


def local_now() -> datetime:
    """
    Current wall-clock time of the studio as a naive datetime.

    Uses STUDIO_TIMEZONE when configured, server local time otherwise.
    """
    if settings.studio_timezone:
        return datetime.now(ZoneInfo(settings.studio_timezone)).replace(tzinfo=None)
    return datetime.now()
