import socket

import pytest
from sqlalchemy import select

from src.infrastructure.db.models import EventRecord
from src.infrastructure.db.session import DEFAULT_DATABASE_URL, build_engine, get_db_session


def test_building_the_engine_opens_no_connection(monkeypatch):
    def refuse(*args, **kwargs):
        raise AssertionError("unexpected network connection")

    monkeypatch.setattr(socket, "create_connection", refuse)
    monkeypatch.setattr(socket.socket, "connect", refuse)

    engine = build_engine(DEFAULT_DATABASE_URL)

    assert engine.url.port == 5432
    assert engine.url.database == "seat_booking"
    engine.dispose()


def test_session_scope_commits(session_factory):
    with get_db_session(session_factory) as session:
        session.add(EventRecord(id="event-1", organizer_id="organizer-1", title="Kept"))

    with get_db_session(session_factory) as session:
        assert session.execute(select(EventRecord.title)).scalar_one() == "Kept"


def test_session_scope_rolls_back_on_error(session_factory):
    with pytest.raises(RuntimeError):
        with get_db_session(session_factory) as session:
            session.add(EventRecord(id="event-1", organizer_id="organizer-1", title="Lost"))
            session.flush()
            raise RuntimeError("boom")

    with get_db_session(session_factory) as session:
        assert session.execute(select(EventRecord)).first() is None
