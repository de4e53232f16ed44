# src/application/booking_coordinator.py

from collections import Counter
from dataclasses import dataclass
from typing import Iterable
import logging
import os
import threading

from src.application.event_locks import EventLockRegistry
from src.domain.event import Event
from src.domain.exceptions import (
    BookingCancelledError,
    CapacityExceededError,
    EventNotFoundError,
    InvalidBookingRequestError,
    InvalidSeatError,
    PermissionDeniedError,
    SeatConflictError,
)
from src.domain.roles import Principal
from src.domain.seat_layout import FREE, Seat, SeatState
from src.domain.state_machine import SeatStateMachine
from src.infrastructure.repositories.event_repository import EventRepository


logger = logging.getLogger(__name__)

MAX_SEATS_PER_ATTENDEE = int(os.getenv("MAX_SEATS_PER_ATTENDEE", "6"))
BOOKING_LOCK_TIMEOUT_SECONDS = float(os.getenv("BOOKING_LOCK_TIMEOUT_SECONDS", "5"))


@dataclass(frozen=True)
class BookingConfirmation:
    event_id: str
    attendee_id: str
    seat_ids: tuple[str, ...]


class BookingCoordinator:
    """
    Validates and commits seat bookings for events.

    Every commit path runs under the event's exclusive lock and finishes with
    a compare-and-swap in the repository that also re-counts the attendee's
    seats, so neither a seat nor the cap can be oversold when several
    processes share one database.
    """

    def __init__(
        self,
        repository: EventRepository,
        locks: EventLockRegistry,
        max_seats_per_attendee: int = MAX_SEATS_PER_ATTENDEE,
        lock_timeout: float = BOOKING_LOCK_TIMEOUT_SECONDS,
    ):
        self.repository = repository
        self.locks = locks
        self.max_seats_per_attendee = max_seats_per_attendee
        self.lock_timeout = lock_timeout

    def book_seats(
        self,
        event_id: str,
        attendee_id: str,
        seat_ids: Iterable[str],
        abort_signal: threading.Event | None = None,
    ) -> BookingConfirmation:
        seat_ids = list(seat_ids)

        with self.locks.hold(event_id, self.lock_timeout):
            event = self._load(event_id)
            requested = self._validate_request(seat_ids)
            inventory = event.inventory

            unknown = inventory.missing(requested)
            if unknown:
                raise InvalidSeatError(unknown)

            held = len(inventory.occupied_by(attendee_id))
            if held + len(requested) > self.max_seats_per_attendee:
                raise CapacityExceededError(
                    held=held,
                    requested=len(requested),
                    limit=self.max_seats_per_attendee,
                )

            taken = inventory.occupied(requested)
            if taken:
                raise SeatConflictError(taken)

            target = SeatState.held_by(attendee_id)
            for seat_id in requested:
                SeatStateMachine.validate_transition(
                    inventory.find(seat_id).status,
                    target.status,
                    seat_id=seat_id,
                )

            self._check_not_aborted(abort_signal, event_id)

            # The swap re-checks the cap against the stored seats.
            expected = {seat_id: FREE for seat_id in requested}
            new = {seat_id: target for seat_id in requested}
            if not self.repository.compare_and_swap_seats(
                event_id, expected, new, holder_limit=self.max_seats_per_attendee
            ):
                raise SeatConflictError(self._conflicting_seats(event_id, requested))

        logger.info(
            "Seats booked. event_id=%s attendee_id=%s seats=%s",
            event_id,
            attendee_id,
            ",".join(requested),
        )
        return BookingConfirmation(
            event_id=event_id,
            attendee_id=attendee_id,
            seat_ids=tuple(requested),
        )

    def override_seat_status(
        self,
        event_id: str,
        seat_id: str,
        occupied: bool,
        attendee_id: str | None,
        actor: Principal,
    ) -> Seat:
        """
        Force a seat into a given state on behalf of the event's organizer
        (or an admin). Goes through the same lock and compare-and-swap as
        booking.
        """
        with self.locks.hold(event_id, self.lock_timeout):
            event = self._load(event_id)

            if occupied and not attendee_id:
                raise InvalidBookingRequestError("An occupied seat needs an attendee_id")
            if not occupied and attendee_id is not None:
                raise InvalidBookingRequestError("A free seat cannot carry an attendee_id")
            target = SeatState.held_by(attendee_id) if occupied else FREE

            if not actor.can_manage_event(event.organizer_id):
                raise PermissionDeniedError(
                    f"{actor.role.value} {actor.user_id} may not manage event {event_id}"
                )

            seat = event.inventory.find(seat_id)
            if seat.state == target:
                return seat

            SeatStateMachine.validate_transition(seat.status, target.status, seat_id=seat_id)

            if not self.repository.compare_and_swap_seats(
                event_id, {seat_id: seat.state}, {seat_id: target}
            ):
                raise SeatConflictError([seat_id])

        logger.info(
            "Seat status overridden. event_id=%s seat_id=%s occupied=%s by=%s",
            event_id,
            seat_id,
            occupied,
            actor.user_id,
        )
        return seat.with_state(target)

    def _load(self, event_id: str) -> Event:
        event = self.repository.load(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    @staticmethod
    def _validate_request(seat_ids: list[str]) -> list[str]:
        if not seat_ids:
            raise InvalidBookingRequestError("At least one seat id is required")

        blank = [seat_id for seat_id in seat_ids if not isinstance(seat_id, str) or not seat_id.strip()]
        if blank:
            raise InvalidBookingRequestError("Seat ids must be non-empty strings")

        duplicates = [seat_id for seat_id, count in Counter(seat_ids).items() if count > 1]
        if duplicates:
            raise InvalidBookingRequestError(
                f"Duplicate seat ids in request: {', '.join(duplicates)}",
                offending_ids=duplicates,
            )
        return seat_ids

    @staticmethod
    def _check_not_aborted(abort_signal: threading.Event | None, event_id: str) -> None:
        if abort_signal is not None and abort_signal.is_set():
            logger.info("Booking aborted by caller before commit. event_id=%s", event_id)
            raise BookingCancelledError("Booking request was cancelled before commit")

    def _conflicting_seats(self, event_id: str, requested: list[str]) -> list[str]:
        # The store changed underneath us; report what is taken now.
        inventory = self._load(event_id).inventory
        taken = []
        for seat_id in requested:
            seat = inventory.get(seat_id)
            if seat is None or seat.occupied:
                taken.append(seat_id)
        return taken or requested
