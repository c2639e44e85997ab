"""
Bootstrap: create tables and seed the studio trainers.

Idempotent: existing trainers and schedule rows are left untouched, so the
script is safe to re-run after deploys. Use `alembic upgrade head` (from
backend/) instead when the database is managed by migrations.
"""

from dotenv import load_dotenv

# ======================================================
# ENV
# ======================================================

load_dotenv()

from fitstudio.database import SessionLocal, engine  # noqa: E402
from fitstudio.models import Base, Trainers, TrainerSchedules  # noqa: E402
from fitstudio.services.slots import get_booking_config  # noqa: E402


# ======================================================
# SEED DATA
# ======================================================

TRAINERS = [
    {
        "id": "trainer-1",
        "name": "Giorgio",
        "specialty": "Strength & Conditioning",
        "image": "/trainers/giorgio.jpg",
        "description": "Former professional athlete with 10+ years of experience in strength training and athletic performance.",
        "rating": 4.9,
    },
    {
        "id": "trainer-2",
        "name": "Teresa",
        "specialty": "HIIT & Cardio",
        "image": "/trainers/teresa.jpg",
        "description": "Certified HIIT specialist known for high-energy sessions that maximize calorie burn and endurance.",
        "rating": 4.8,
    },
    {
        "id": "trainer-3",
        "name": "Diego",
        "specialty": "Yoga & Flexibility",
        "image": "/trainers/diego.jpg",
        "description": "Yoga master with expertise in power yoga, vinyasa flow, and mobility training for all levels.",
        "rating": 5.0,
    },
    {
        "id": "trainer-4",
        "name": "Cleo",
        "specialty": "Boxing & Combat",
        "image": "/trainers/cleo.jpg",
        "description": "Professional boxing coach focusing on technique, conditioning, and confidence building.",
        "rating": 4.9,
    },
    {
        "id": "trainer-5",
        "name": "Filippo",
        "specialty": "Pilates & Core",
        "image": "/trainers/filippo.jpg",
        "description": "Expert in pilates and core strengthening with a focus on posture correction and injury prevention.",
        "rating": 4.9,
    },
]

WORKING_WEEKDAYS = range(0, 6)  # Monday..Saturday


# ======================================================
# MAIN LOGIC
# ======================================================

def seed(db) -> tuple[int, int]:
    """Returns (trainers_created, schedule_entries_created)."""
    default_times = get_booking_config().default_times
    trainers_created = 0
    entries_created = 0

    for data in TRAINERS:
        if db.get(Trainers, data["id"]) is not None:
            continue
        db.add(Trainers(**data))
        trainers_created += 1

        for weekday in WORKING_WEEKDAYS:
            for time_str in default_times:
                db.add(TrainerSchedules(trainer_id=data["id"], weekday=weekday, time=time_str))
                entries_created += 1

    db.commit()
    return trainers_created, entries_created


def main():
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        trainers_created, entries_created = seed(db)
    finally:
        db.close()

    if trainers_created:
        print(f"[INIT] Seeded {trainers_created} trainers, {entries_created} schedule entries")
    else:
        print("[INIT] Trainers already exist, nothing to do")


# ======================================================
# ENTRYPOINT
# ======================================================

if __name__ == "__main__":
    main()
