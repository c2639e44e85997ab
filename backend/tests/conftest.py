"""
Shared fixtures: an in-memory SQLite database per test, seeded trainers,
and a TestClient wired to it with a recording event emitter and a
deterministic admission controller.
"""

import os

# Keep a developer's .env (file DB, Redis, timezone) out of the test run
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = ""
os.environ["STUDIO_TIMEZONE"] = ""
os.environ["RATE_LIMIT_BACKEND"] = "memory"
os.environ["TRUST_PROXY_HEADERS"] = "false"

from datetime import date, timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from fitstudio.config import settings  # noqa: E402
from fitstudio.database import build_engine, get_db  # noqa: E402
from fitstudio.main import app  # noqa: E402
from fitstudio.models import Base, Trainers  # noqa: E402
from fitstudio.ratelimit.admission import SlidingWindowAdmission  # noqa: E402
from fitstudio.services.events import EventEmitter  # noqa: E402

ADMIN_TOKEN = "test-admin-token"

SEED_TRAINERS = [
    ("trainer-1", "Giorgio", "+39 333 000 0001"),
    ("trainer-2", "Teresa", "+39 333 000 0002"),
    ("trainer-3", "Diego", None),
]


class RecordingEmitter(EventEmitter):
    def __init__(self):
        self.events: list[tuple[str, dict]] = []

    def emit(self, event_type: str, payload: dict) -> None:
        self.events.append((event_type, payload))

    def types(self) -> list[str]:
        return [event_type for event_type, _ in self.events]

    def recipients(self, event_type: str) -> list[str]:
        return [p["recipient"] for t, p in self.events if t == event_type]


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def future_date(days: int = 7) -> str:
    return (date.today() + timedelta(days=days)).isoformat()


def seed_trainers(db) -> None:
    for trainer_id, name, phone in SEED_TRAINERS:
        db.add(Trainers(
            id=trainer_id,
            name=name,
            specialty="Strength",
            image=f"/trainers/{name.lower()}.jpg",
            description=f"{name} trains people.",
            rating=4.9,
            phone=phone,
        ))
    db.commit()


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    seed_trainers(session)
    yield session
    session.close()


@pytest.fixture
def emitter():
    return RecordingEmitter()


@pytest.fixture
def admission():
    return SlidingWindowAdmission(limit=1000, window=60, clock=FakeClock())


@pytest.fixture
def admin_token(monkeypatch):
    monkeypatch.setattr(settings, "admin_token", ADMIN_TOKEN)
    return ADMIN_TOKEN


@pytest.fixture
def admin_headers(admin_token):
    return {"X-Admin-Token": admin_token}


@pytest.fixture
def client(db, session_factory, emitter, admission, monkeypatch):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(app.state, "event_emitter", emitter)
    monkeypatch.setattr(app.state, "admission_control", admission)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
