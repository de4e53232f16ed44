# src/infrastructure/repositories/event_repository.py

from abc import ABC, abstractmethod
from collections import Counter
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterator, Mapping
import logging
import threading

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import OperationalError, TimeoutError as SQLAlchemyTimeoutError
from sqlalchemy.orm import Session, sessionmaker

from src.domain.event import Event
from src.domain.exceptions import (
    CapacityExceededError,
    EventNotFoundError,
    PersistenceFailureError,
)
from src.domain.seat_layout import Seat, SeatState
from src.infrastructure.db.models import EventRecord, SeatRecord
from src.infrastructure.db.session import SessionLocal, get_db_session


logger = logging.getLogger(__name__)


def _check_swap_arguments(
    expected: Mapping[str, SeatState],
    new: Mapping[str, SeatState],
) -> None:
    if not expected:
        raise ValueError("compare_and_swap_seats needs at least one seat")
    if set(expected) != set(new):
        raise ValueError("expected and new states must name the same seats")


def _assigned_seats(new: Mapping[str, SeatState]) -> Counter:
    return Counter(state.attendee_id for state in new.values() if state.occupied)


def _check_holder_limit(event_id: str, attendee_id: str, held_after: int, assigned: int, limit: int) -> None:
    if held_after > limit:
        logger.info(
            "Seat swap over attendee cap. event_id=%s attendee_id=%s held=%s limit=%s",
            event_id,
            attendee_id,
            held_after,
            limit,
        )
        raise CapacityExceededError(held=held_after - assigned, requested=assigned, limit=limit)


class EventRepository(ABC):
    """Durable storage for events and their seating layouts."""

    @abstractmethod
    def add(self, event: Event) -> Event:
        pass

    @abstractmethod
    def load(self, event_id: str) -> Event | None:
        pass

    @abstractmethod
    def list_events(self, organizer_id: str | None = None) -> list[Event]:
        pass

    @abstractmethod
    def delete(self, event_id: str) -> bool:
        pass

    @abstractmethod
    def compare_and_swap_seats(
        self,
        event_id: str,
        expected: Mapping[str, SeatState],
        new: Mapping[str, SeatState],
        holder_limit: int | None = None,
    ) -> bool:
        """
        Atomically replace the state of every named seat, but only if each
        seat currently matches its expected state. On any mismatch nothing
        is written and False is returned.

        With holder_limit set, the swap is also refused with
        CapacityExceededError when an attendee the new states assign seats
        to would end up holding more than holder_limit seats of the event.
        Seat checks, the count and the write form one atomic step per event.
        """


class InMemoryEventRepository(EventRepository):
    """
    Process-local repository. Event values are immutable, so handing them
    out never exposes the stored layout to mutation.
    """

    def __init__(self):
        self._events: dict[str, Event] = {}
        self._lock = threading.Lock()

    def add(self, event: Event) -> Event:
        with self._lock:
            if event.id in self._events:
                raise ValueError(f"Event {event.id} already exists")
            if event.created_at is None:
                event = replace(event, created_at=datetime.now(timezone.utc))
            self._events[event.id] = event
        return event

    def load(self, event_id: str) -> Event | None:
        with self._lock:
            return self._events.get(event_id)

    def list_events(self, organizer_id: str | None = None) -> list[Event]:
        with self._lock:
            events = list(self._events.values())
        if organizer_id is not None:
            events = [event for event in events if event.organizer_id == organizer_id]
        return events

    def delete(self, event_id: str) -> bool:
        with self._lock:
            return self._events.pop(event_id, None) is not None

    def compare_and_swap_seats(
        self,
        event_id: str,
        expected: Mapping[str, SeatState],
        new: Mapping[str, SeatState],
        holder_limit: int | None = None,
    ) -> bool:
        _check_swap_arguments(expected, new)

        with self._lock:
            event = self._events.get(event_id)
            if event is None:
                raise EventNotFoundError(event_id)

            inventory = event.inventory
            for seat_id, state in expected.items():
                seat = inventory.get(seat_id)
                if seat is None or seat.state != state:
                    logger.info(
                        "Seat swap rejected. event_id=%s seat_id=%s",
                        event_id,
                        seat_id,
                    )
                    return False

            updated = event.with_seat_states(new)
            if holder_limit is not None:
                for attendee_id, assigned in _assigned_seats(new).items():
                    held_after = len(updated.inventory.occupied_by(attendee_id))
                    _check_holder_limit(event_id, attendee_id, held_after, assigned, holder_limit)

            self._events[event_id] = updated
        return True


class SqlAlchemyEventRepository(EventRepository):
    """
    Relational repository. The compare-and-swap is a single transaction that
    locks the event row (SELECT ... FOR UPDATE) and then runs conditional
    UPDATEs, one per seat; a miss on any seat rolls back the seats already
    flipped in that attempt.
    """

    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with get_db_session(self._session_factory) as session:
                yield session
        except (OperationalError, SQLAlchemyTimeoutError) as exc:
            logger.exception("Event store unavailable.")
            raise PersistenceFailureError(f"Event store unavailable: {exc}") from exc

    def add(self, event: Event) -> Event:
        with self._session() as session:
            record = EventRecord(
                id=event.id,
                organizer_id=event.organizer_id,
                venue_id=event.venue_id,
                title=event.title,
            )
            session.add(record)
            session.flush()

            session.add_all(
                SeatRecord(
                    event_id=record.id,
                    seat_id=seat.id,
                    position=position,
                    row=seat.row,
                    column=seat.column,
                    section_type=seat.section_type,
                    occupied=seat.occupied,
                    attendee_id=seat.attendee_id,
                )
                for position, seat in enumerate(event.seats)
            )
            session.flush()
            session.refresh(record)
            stored = self._to_domain(session, record)

        logger.info(
            "Stored event. event_id=%s organizer_id=%s seats=%s",
            stored.id,
            stored.organizer_id,
            len(stored.seats),
        )
        return stored

    def load(self, event_id: str) -> Event | None:
        with self._session() as session:
            record = session.execute(
                select(EventRecord).where(EventRecord.id == event_id)
            ).scalar_one_or_none()
            if record is None:
                return None
            return self._to_domain(session, record)

    def list_events(self, organizer_id: str | None = None) -> list[Event]:
        with self._session() as session:
            stmt = select(EventRecord).order_by(EventRecord.created_at, EventRecord.id)
            if organizer_id is not None:
                stmt = stmt.where(EventRecord.organizer_id == organizer_id)
            records = list(session.execute(stmt).scalars().all())
            return [self._to_domain(session, record) for record in records]

    def delete(self, event_id: str) -> bool:
        with self._session() as session:
            session.execute(delete(SeatRecord).where(SeatRecord.event_id == event_id))
            result = session.execute(delete(EventRecord).where(EventRecord.id == event_id))
            return result.rowcount > 0

    def compare_and_swap_seats(
        self,
        event_id: str,
        expected: Mapping[str, SeatState],
        new: Mapping[str, SeatState],
        holder_limit: int | None = None,
    ) -> bool:
        _check_swap_arguments(expected, new)

        with self._session() as session:
            # Row lock on the event serializes swaps on it across processes.
            locked = session.execute(
                select(EventRecord.id)
                .where(EventRecord.id == event_id)
                .with_for_update()
            ).scalar_one_or_none()
            if locked is None:
                raise EventNotFoundError(event_id)

            for seat_id, before in expected.items():
                after = new[seat_id]
                if before.attendee_id is None:
                    attendee_matches = SeatRecord.attendee_id.is_(None)
                else:
                    attendee_matches = SeatRecord.attendee_id == before.attendee_id

                stmt = (
                    update(SeatRecord)
                    .where(SeatRecord.event_id == event_id)
                    .where(SeatRecord.seat_id == seat_id)
                    .where(SeatRecord.occupied == before.occupied)
                    .where(attendee_matches)
                    .values(occupied=after.occupied, attendee_id=after.attendee_id)
                    .execution_options(synchronize_session=False)
                )
                if session.execute(stmt).rowcount != 1:
                    session.rollback()
                    logger.info(
                        "Seat swap rejected. event_id=%s seat_id=%s",
                        event_id,
                        seat_id,
                    )
                    return False

            if holder_limit is not None:
                for attendee_id, assigned in _assigned_seats(new).items():
                    held_after = session.execute(
                        select(func.count())
                        .select_from(SeatRecord)
                        .where(SeatRecord.event_id == event_id)
                        .where(SeatRecord.attendee_id == attendee_id)
                    ).scalar_one()
                    # Raising rolls back the updates above.
                    _check_holder_limit(event_id, attendee_id, held_after, assigned, holder_limit)

            return True

    @staticmethod
    def _to_domain(session: Session, record: EventRecord) -> Event:
        seat_stmt = (
            select(SeatRecord)
            .where(SeatRecord.event_id == record.id)
            .order_by(SeatRecord.position)
        )
        seats = tuple(
            Seat(
                id=row.seat_id,
                row=row.row,
                column=row.column,
                section_type=row.section_type,
                occupied=row.occupied,
                attendee_id=row.attendee_id,
            )
            for row in session.execute(seat_stmt).scalars().all()
        )
        return Event(
            id=record.id,
            organizer_id=record.organizer_id,
            venue_id=record.venue_id,
            title=record.title,
            seats=seats,
            created_at=record.created_at,
        )
