from typing import Iterable


class SeatBookingError(Exception):
    """
    Base exception for all domain-level errors
    inside the seat booking engine.
    """

    reason = "ERROR"
    retryable = False

    def __init__(self, message: str, offending_ids: Iterable[str] = ()):
        self.offending_ids = tuple(offending_ids)
        super().__init__(message)


class EventNotFoundError(SeatBookingError):
    reason = "NOT_FOUND"

    def __init__(self, event_id: str):
        self.event_id = event_id
        super().__init__(f"Event {event_id} not found")


class SeatNotFoundError(SeatBookingError):
    reason = "NOT_FOUND"

    def __init__(self, seat_id: str):
        super().__init__(f"Seat {seat_id} not found", offending_ids=[seat_id])


class InvalidBookingRequestError(SeatBookingError):
    """Raised when a booking request is empty or malformed."""

    reason = "INVALID_INPUT"


class InvalidSeatError(SeatBookingError):
    """Raised when requested seat ids are not part of the event layout."""

    reason = "INVALID_SEAT"

    def __init__(self, offending_ids: Iterable[str]):
        offending_ids = list(offending_ids)
        super().__init__(
            f"Unknown seat ids for this event: {', '.join(offending_ids)}",
            offending_ids=offending_ids,
        )


class CapacityExceededError(SeatBookingError):
    """Raised when a booking would push an attendee over the per-event cap."""

    reason = "CAPACITY_EXCEEDED"

    def __init__(self, held: int, requested: int, limit: int):
        self.held = held
        self.requested = requested
        self.limit = limit
        super().__init__(
            f"Attendee holds {held} seat(s) and requested {requested}; "
            f"at most {limit} seats may be held per event"
        )


class SeatConflictError(SeatBookingError):
    """Raised when requested seats are already occupied."""

    reason = "CONFLICT"

    def __init__(self, offending_ids: Iterable[str]):
        offending_ids = list(offending_ids)
        super().__init__(
            f"Seats already occupied: {', '.join(offending_ids)}",
            offending_ids=offending_ids,
        )


class BookingTimeoutError(SeatBookingError):
    reason = "TIMEOUT"
    retryable = True

    def __init__(self, event_id: str, timeout: float):
        self.event_id = event_id
        self.timeout = timeout
        super().__init__(
            f"Timed out after {timeout:.2f}s waiting for exclusive access to event {event_id}"
        )


class PersistenceFailureError(SeatBookingError):
    reason = "PERSISTENCE_FAILURE"
    retryable = True


class BookingCancelledError(SeatBookingError):
    """Raised when the caller aborts a booking before it is committed."""

    reason = "CANCELLED"


class InvalidSeatingLayoutError(SeatBookingError):
    reason = "INVALID_LAYOUT"


class DuplicateSeatIdError(InvalidSeatingLayoutError):
    def __init__(self, offending_ids: Iterable[str]):
        offending_ids = sorted(set(offending_ids))
        super().__init__(
            f"Seat ids are not unique within the event: {', '.join(offending_ids)}",
            offending_ids=offending_ids,
        )


class InvalidStateTransitionError(SeatBookingError):
    """
    Raised when an illegal seat state transition is attempted.
    """

    reason = "INVALID_TRANSITION"

    def __init__(self, from_state: str, to_state: str, seat_id: str | None = None):
        self.from_state = from_state
        self.to_state = to_state

        message = (
            f"Illegal state transition attempted: "
            f"{from_state} -> {to_state}"
        )
        if seat_id is not None:
            message = f"{message} (seat {seat_id})"
        super().__init__(message, offending_ids=[seat_id] if seat_id else ())


class PermissionDeniedError(SeatBookingError):
    reason = "FORBIDDEN"
