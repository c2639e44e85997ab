from datetime import date, datetime

import pytest

from fitstudio.errors import EditWindowError
from fitstudio.services.edit_guard import ensure_change_allowed, hours_until
from fitstudio.services.slots import BookingConfig


def test_hours_until_accepts_strings_and_dates():
    now = datetime(2030, 1, 6, 10, 30)

    assert hours_until("2030-01-07", "10:30", now) == 24.0
    assert hours_until(date(2030, 1, 7), "10:30", now) == 24.0


def test_hours_until_is_negative_for_past_appointments():
    assert hours_until("2030-01-07", "10:30", datetime(2030, 1, 7, 11, 30)) == -1.0


def test_exactly_twelve_hours_is_allowed():
    ensure_change_allowed("2030-01-07", "09:00", datetime(2030, 1, 6, 21, 0))


def test_just_under_twelve_hours_is_refused():
    with pytest.raises(EditWindowError) as exc_info:
        ensure_change_allowed("2030-01-07", "09:00", datetime(2030, 1, 6, 21, 0, 4))

    assert exc_info.value.code == "TOO_LATE_TO_CHANGE"
    assert exc_info.value.status_code == 422


def test_lock_window_is_configurable():
    config = BookingConfig(edit_lock_hours=2.0)

    ensure_change_allowed("2030-01-07", "09:00", datetime(2030, 1, 7, 6, 0), config)
    with pytest.raises(EditWindowError):
        ensure_change_allowed("2030-01-07", "09:00", datetime(2030, 1, 7, 7, 30), config)


def test_booking_config_validates_times():
    with pytest.raises(ValueError):
        BookingConfig(default_times=("9:00",))
