from datetime import date

import pytest

from fitstudio.errors import NotFoundError, ValidationError
from fitstudio.models import TimeSlots
from fitstudio.services import availability
from fitstudio.services.slots import ensure_slots_fresh, is_on_vacation

TODAY = date(2030, 1, 1)
MONDAY = date(2030, 1, 7)


def monday_times(db, trainer_id="trainer-1"):
    rows = (
        db.query(TimeSlots.time)
        .filter(TimeSlots.trainer_id == trainer_id, TimeSlots.date == MONDAY.isoformat())
        .order_by(TimeSlots.time)
        .all()
    )
    return [r.time for r in rows]


def test_add_schedule_entry_is_create_if_absent(db):
    assert availability.add_schedule_entry(db, "trainer-1", 0, "09:00", today=TODAY) == (True, 0)
    assert availability.add_schedule_entry(db, "trainer-1", 0, "09:00", today=TODAY) == (False, 0)

    entries = availability.list_schedule_entries(db, "trainer-1")
    assert [(e.weekday, e.time) for e in entries] == [(0, "09:00")]


def test_add_schedule_entry_validates(db):
    with pytest.raises(ValidationError):
        availability.add_schedule_entry(db, "trainer-1", 7, "09:00")
    with pytest.raises(ValidationError):
        availability.add_schedule_entry(db, "trainer-1", 0, "9am")
    with pytest.raises(NotFoundError):
        availability.add_schedule_entry(db, "trainer-9", 0, "09:00")


def test_schedule_change_resyncs_materialized_dates(db):
    availability.add_schedule_entry(db, "trainer-1", 0, "09:00", today=TODAY)
    ensure_slots_fresh(db, "trainer-1", MONDAY)

    created, resynced = availability.add_schedule_entry(db, "trainer-1", 0, "18:00", today=TODAY)
    assert (created, resynced) == (True, 1)
    assert monday_times(db) == ["09:00", "18:00"]

    removed, resynced = availability.remove_schedule_entry(db, "trainer-1", 0, "09:00", today=TODAY)
    assert (removed, resynced) == (True, 1)
    assert monday_times(db) == ["18:00"]


def test_remove_schedule_entry_is_idempotent(db):
    assert availability.remove_schedule_entry(db, "trainer-1", 0, "09:00") == (False, 0)
    assert availability.remove_schedule_entry_by_id(db, 12345) == (False, 0)


def test_remove_schedule_entry_by_id(db):
    availability.add_schedule_entry(db, "trainer-2", 3, "11:00", today=TODAY)
    [entry] = availability.list_schedule_entries(db, "trainer-2")

    removed, _ = availability.remove_schedule_entry_by_id(db, entry.id, today=TODAY)

    assert removed is True
    assert availability.list_schedule_entries(db, "trainer-2") == []


def test_list_schedule_entries_ordering(db):
    availability.add_schedule_entry(db, "trainer-2", 1, "10:00", today=TODAY)
    availability.add_schedule_entry(db, "trainer-1", 2, "09:00", today=TODAY)
    availability.add_schedule_entry(db, "trainer-1", 0, "18:00", today=TODAY)
    availability.add_schedule_entry(db, "trainer-1", 0, "08:00", today=TODAY)

    entries = availability.list_schedule_entries(db)

    assert [(e.trainer_id, e.weekday, e.time) for e in entries] == [
        ("trainer-1", 0, "08:00"),
        ("trainer-1", 0, "18:00"),
        ("trainer-1", 2, "09:00"),
        ("trainer-2", 1, "10:00"),
    ]


def test_vacation_bounds_are_inclusive(db):
    availability.add_vacation(db, "trainer-1", "2030-01-07", "2030-01-09", note="Ski trip")

    assert not is_on_vacation(db, "trainer-1", date(2030, 1, 6))
    assert is_on_vacation(db, "trainer-1", date(2030, 1, 7))
    assert is_on_vacation(db, "trainer-1", date(2030, 1, 9))
    assert not is_on_vacation(db, "trainer-1", date(2030, 1, 10))
    assert not is_on_vacation(db, "trainer-2", date(2030, 1, 8))


def test_single_day_and_overlapping_vacations(db):
    availability.add_vacation(db, "trainer-1", "2030-01-07", "2030-01-07")
    availability.add_vacation(db, "trainer-1", "2030-01-05", "2030-01-08")

    assert is_on_vacation(db, "trainer-1", date(2030, 1, 7))
    assert len(availability.list_vacations(db, "trainer-1")) == 2


def test_vacation_range_must_be_ordered(db):
    with pytest.raises(ValidationError, match="startDate must be before or equal to endDate"):
        availability.add_vacation(db, "trainer-1", "2030-01-09", "2030-01-07")


def test_vacation_for_unknown_trainer(db):
    with pytest.raises(NotFoundError):
        availability.add_vacation(db, "trainer-9", "2030-01-07", "2030-01-07")


def test_remove_vacation(db):
    vacation_id = availability.add_vacation(db, "trainer-1", "2030-01-07", "2030-01-08").id

    assert availability.remove_vacation(db, vacation_id) is True
    assert availability.remove_vacation(db, vacation_id) is False
    assert not is_on_vacation(db, "trainer-1", date(2030, 1, 7))
