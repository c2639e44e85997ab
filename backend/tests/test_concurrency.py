"""
Two clients racing for the same slot against a real file database:
exactly one reservation wins, the other gets a conflict.
"""

import threading

import pytest
from sqlalchemy.orm import sessionmaker

from fitstudio.database import build_engine
from fitstudio.errors import ConflictError
from fitstudio.models import Base, Bookings, TimeSlots
from fitstudio.services import ledger
from fitstudio.services.slots import create_slot_if_absent, make_slot_id

from .conftest import seed_trainers


@pytest.fixture
def file_sessions(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'race.db'}")
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    db = factory()
    seed_trainers(db)
    db.close()

    yield factory
    engine.dispose()


def test_concurrent_reservations_have_one_winner(file_sessions):
    setup = file_sessions()
    create_slot_if_absent(setup, "trainer-1", "2030-01-07", "10:30")
    setup.close()
    slot_id = make_slot_id("trainer-1", "2030-01-07", "10:30")

    barrier = threading.Barrier(2)
    outcomes: list[str] = []
    lock = threading.Lock()

    def attempt(email):
        db = file_sessions()
        try:
            barrier.wait()
            ledger.reserve_slot(
                db,
                trainer_id="trainer-1",
                slot_id=slot_id,
                date_str="2030-01-07",
                time_str="10:30",
                client_name="Racer",
                client_email=email,
                client_phone="+39 333 1234567",
            )
            result = "ok"
        except ConflictError:
            result = "conflict"
        finally:
            db.close()
        with lock:
            outcomes.append(result)

    threads = [
        threading.Thread(target=attempt, args=(f"racer{i}@example.com",))
        for i in range(2)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)

    assert sorted(outcomes) == ["conflict", "ok"]

    check = file_sessions()
    try:
        assert check.query(Bookings).filter(Bookings.slot_id == slot_id).count() == 1
        assert check.get(TimeSlots, slot_id).is_booked == 1
    finally:
        check.close()
