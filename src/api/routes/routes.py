import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from src.api.auth import get_current_principal, require_attendee, require_event_creator
from src.api.dependencies import get_booking_coordinator, get_event_service
from src.api.schemas.schemas import (
    EventCreate,
    EventResponse,
    HeldSeatsResponse,
    SeatBookingRequest,
    SeatBookingResponse,
    SeatMapResponse,
    SeatResponse,
    SeatStatusUpdate,
)
from src.application.booking_coordinator import BookingCoordinator
from src.application.event_service import EventService
from src.domain.event import Event
from src.domain.exceptions import SeatBookingError
from src.domain.roles import Principal
from src.domain.seat_layout import Seat, SectionSpec


router = APIRouter()
logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = "1"

_STATUS_BY_REASON = {
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVALID_INPUT": status.HTTP_400_BAD_REQUEST,
    "INVALID_SEAT": status.HTTP_400_BAD_REQUEST,
    "CAPACITY_EXCEEDED": status.HTTP_400_BAD_REQUEST,
    "CONFLICT": status.HTTP_400_BAD_REQUEST,
    "INVALID_LAYOUT": status.HTTP_400_BAD_REQUEST,
    "INVALID_TRANSITION": status.HTTP_409_CONFLICT,
    "CANCELLED": status.HTTP_409_CONFLICT,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "TIMEOUT": status.HTTP_503_SERVICE_UNAVAILABLE,
    "PERSISTENCE_FAILURE": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _to_http_exception(exc: SeatBookingError) -> HTTPException:
    status_code = _STATUS_BY_REASON.get(exc.reason, status.HTTP_400_BAD_REQUEST)
    headers = {"Retry-After": RETRY_AFTER_SECONDS} if exc.retryable else None
    if exc.retryable:
        logger.warning("Retryable booking failure: %s", exc)
    return HTTPException(
        status_code=status_code,
        detail={
            "reason": exc.reason,
            "message": str(exc),
            "offending_ids": list(exc.offending_ids),
        },
        headers=headers,
    )


def _seat_response(seat: Seat) -> SeatResponse:
    return SeatResponse(
        id=seat.id,
        row=seat.row,
        column=seat.column,
        section_type=seat.section_type,
        occupied=seat.occupied,
        attendee_id=seat.attendee_id,
    )


def _event_response(event: Event) -> EventResponse:
    inventory = event.inventory
    return EventResponse(
        id=event.id,
        organizer_id=event.organizer_id,
        venue_id=event.venue_id,
        title=event.title,
        created_at=event.created_at.isoformat() if event.created_at else None,
        total_seats=len(inventory),
        available_seats=inventory.available_count,
        seats=[_seat_response(seat) for seat in inventory],
    )


@router.get("/health")
def health():
    return {"message": "Seat Booking Engine is running"}


@router.post(
    "/events",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_event(
    request: EventCreate,
    organizer: Principal = Depends(require_event_creator),
    service: EventService = Depends(get_event_service),
):
    sections = [
        SectionSpec(
            section_name=section.section_name,
            rows=section.rows,
            seats_per_row=section.seats_per_row,
        )
        for section in request.sections
    ]
    try:
        event = service.create_event(
            organizer=organizer,
            title=request.title,
            sections=sections,
            venue_id=request.venue_id,
            max_capacity=request.max_capacity,
        )
    except SeatBookingError as exc:
        raise _to_http_exception(exc) from exc

    return _event_response(event)


@router.get("/events", response_model=list[EventResponse])
def list_my_events(
    principal: Principal = Depends(get_current_principal),
    service: EventService = Depends(get_event_service),
):
    try:
        events = service.list_events(organizer_id=principal.user_id)
    except SeatBookingError as exc:
        raise _to_http_exception(exc) from exc
    return [_event_response(event) for event in events]


@router.get("/events/all", response_model=list[EventResponse])
def list_all_events(service: EventService = Depends(get_event_service)):
    try:
        events = service.list_events()
    except SeatBookingError as exc:
        raise _to_http_exception(exc) from exc
    return [_event_response(event) for event in events]


@router.get("/events/{event_id}", response_model=EventResponse)
def get_event(event_id: str, service: EventService = Depends(get_event_service)):
    try:
        event = service.get_event(event_id)
    except SeatBookingError as exc:
        raise _to_http_exception(exc) from exc
    return _event_response(event)


@router.get("/events/{event_id}/seats", response_model=SeatMapResponse)
def get_seat_map(event_id: str, service: EventService = Depends(get_event_service)):
    try:
        seats = service.seat_map(event_id)
    except SeatBookingError as exc:
        raise _to_http_exception(exc) from exc

    occupied = sum(1 for seat in seats if seat.occupied)
    return SeatMapResponse(
        event_id=event_id,
        total_seats=len(seats),
        available_seats=len(seats) - occupied,
        occupied_seats=occupied,
        seats=[_seat_response(seat) for seat in seats],
    )


@router.get("/events/{event_id}/seats/mine", response_model=HeldSeatsResponse)
def get_my_seats(
    event_id: str,
    attendee: Principal = Depends(require_attendee),
    service: EventService = Depends(get_event_service),
):
    try:
        seats = service.seats_held_by(event_id, attendee.user_id)
    except SeatBookingError as exc:
        raise _to_http_exception(exc) from exc

    return HeldSeatsResponse(
        event_id=event_id,
        attendee_id=attendee.user_id,
        seats=[_seat_response(seat) for seat in seats],
    )


@router.post("/events/{event_id}/bookings", response_model=SeatBookingResponse)
def book_seats(
    event_id: str,
    request: SeatBookingRequest,
    attendee: Principal = Depends(require_attendee),
    coordinator: BookingCoordinator = Depends(get_booking_coordinator),
):
    try:
        confirmation = coordinator.book_seats(
            event_id=event_id,
            attendee_id=attendee.user_id,
            seat_ids=request.seat_ids,
        )
    except SeatBookingError as exc:
        logger.info(
            "Booking rejected. event_id=%s attendee_id=%s reason=%s offending=%s",
            event_id,
            attendee.user_id,
            exc.reason,
            ",".join(exc.offending_ids),
        )
        raise _to_http_exception(exc) from exc

    return SeatBookingResponse(
        event_id=confirmation.event_id,
        booked_seats=list(confirmation.seat_ids),
    )


@router.put("/events/{event_id}/seats/{seat_id}", response_model=SeatResponse)
def update_seat_status(
    event_id: str,
    seat_id: str,
    request: SeatStatusUpdate,
    principal: Principal = Depends(get_current_principal),
    coordinator: BookingCoordinator = Depends(get_booking_coordinator),
):
    try:
        seat = coordinator.override_seat_status(
            event_id=event_id,
            seat_id=seat_id,
            occupied=request.occupied,
            attendee_id=request.attendee_id,
            actor=principal,
        )
    except SeatBookingError as exc:
        raise _to_http_exception(exc) from exc
    return _seat_response(seat)


@router.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(
    event_id: str,
    principal: Principal = Depends(get_current_principal),
    service: EventService = Depends(get_event_service),
):
    try:
        service.delete_event(event_id, actor=principal)
    except SeatBookingError as exc:
        raise _to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
