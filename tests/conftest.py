import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from src.api.dependencies import get_event_repository
from src.application.booking_coordinator import BookingCoordinator
from src.application.event_locks import EventLockRegistry
from src.application.event_service import EventService
from src.domain.roles import Attendee, EventOrganizer
from src.domain.seat_layout import SectionSpec
from src.infrastructure.db.models import Base
from src.infrastructure.repositories.event_repository import (
    InMemoryEventRepository,
    SqlAlchemyEventRepository,
)
from src.main import app


TEST_JWT_SECRET = "seat-booking-test-secret-0123456789abcdef"


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False)
    engine.dispose()


@pytest.fixture
def sql_repository(session_factory):
    return SqlAlchemyEventRepository(session_factory=session_factory)


@pytest.fixture
def memory_repository():
    return InMemoryEventRepository()


@pytest.fixture
def locks():
    return EventLockRegistry()


@pytest.fixture
def coordinator(memory_repository, locks):
    return BookingCoordinator(
        repository=memory_repository,
        locks=locks,
        max_seats_per_attendee=6,
        lock_timeout=1.0,
    )


@pytest.fixture
def organizer():
    return EventOrganizer("organizer-1")


@pytest.fixture
def event_service(memory_repository, locks):
    return EventService(repository=memory_repository, locks=locks, lock_timeout=1.0)


@pytest.fixture
def gold_event(event_service, organizer):
    # Ten seats: A1..A5, B1..B5
    return event_service.create_event(
        organizer=organizer,
        title="Gold Night",
        sections=[SectionSpec(section_name="Gold", rows=2, seats_per_row=5)],
    )


@pytest.fixture
def alice():
    return Attendee("alice")


def make_token(user_id: str, role: str) -> str:
    return jwt.encode({"id": user_id, "role": role}, TEST_JWT_SECRET, algorithm="HS256")


@pytest.fixture
def auth_headers():
    def _headers(user_id: str, role: str) -> dict:
        return {"Authorization": f"Bearer {make_token(user_id, role)}"}

    return _headers


@pytest.fixture
def client(sql_repository, monkeypatch):
    monkeypatch.setenv("JWT_SECRET", TEST_JWT_SECRET)
    monkeypatch.setenv("JWT_ALGORITHM", "HS256")
    app.dependency_overrides[get_event_repository] = lambda: sql_repository
    yield TestClient(app)
    app.dependency_overrides.clear()
