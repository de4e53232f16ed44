# src/application/event_service.py

from typing import Iterable
import logging

from src.application.booking_coordinator import BOOKING_LOCK_TIMEOUT_SECONDS
from src.application.event_locks import EventLockRegistry
from src.domain.event import Event
from src.domain.exceptions import (
    EventNotFoundError,
    InvalidSeatingLayoutError,
    PermissionDeniedError,
)
from src.domain.roles import Principal
from src.domain.seat_layout import Seat, SectionSpec, generate_seating_layout
from src.infrastructure.repositories.event_repository import EventRepository


logger = logging.getLogger(__name__)


class EventService:
    """Event creation, lookup and deletion around the seating layout."""

    def __init__(
        self,
        repository: EventRepository,
        locks: EventLockRegistry,
        lock_timeout: float = BOOKING_LOCK_TIMEOUT_SECONDS,
    ):
        self.repository = repository
        self.locks = locks
        self.lock_timeout = lock_timeout

    def create_event(
        self,
        organizer: Principal,
        title: str,
        sections: Iterable[SectionSpec],
        venue_id: str | None = None,
        max_capacity: int | None = None,
    ) -> Event:
        if not organizer.can_create_events():
            raise PermissionDeniedError(
                f"{organizer.role.value} {organizer.user_id} may not create events"
            )

        seats = generate_seating_layout(sections)
        if max_capacity is not None and len(seats) > max_capacity:
            raise InvalidSeatingLayoutError(
                f"Seating layout has {len(seats)} seats but the venue holds at most {max_capacity}"
            )

        event = self.repository.add(
            Event(
                organizer_id=organizer.user_id,
                title=title,
                venue_id=venue_id,
                seats=tuple(seats),
            )
        )
        logger.info(
            "Event created. event_id=%s organizer_id=%s seats=%s",
            event.id,
            event.organizer_id,
            len(event.seats),
        )
        return event

    def get_event(self, event_id: str) -> Event:
        event = self.repository.load(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def list_events(self, organizer_id: str | None = None) -> list[Event]:
        return self.repository.list_events(organizer_id=organizer_id)

    def seat_map(self, event_id: str) -> tuple[Seat, ...]:
        # Display read; no lock, a slightly stale view is acceptable.
        return self.get_event(event_id).seats

    def seats_held_by(self, event_id: str, attendee_id: str) -> list[Seat]:
        return self.get_event(event_id).inventory.occupied_by(attendee_id)

    def delete_event(self, event_id: str, actor: Principal) -> None:
        with self.locks.hold(event_id, self.lock_timeout):
            event = self.get_event(event_id)
            if not actor.can_manage_event(event.organizer_id):
                raise PermissionDeniedError(
                    f"{actor.role.value} {actor.user_id} may not manage event {event_id}"
                )
            self.repository.delete(event_id)

        logger.info("Event deleted. event_id=%s by=%s", event_id, actor.user_id)
