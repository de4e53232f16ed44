# src/domain/event.py

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Mapping
from uuid import uuid4

from src.domain.seat_inventory import SeatInventory
from src.domain.seat_layout import Seat, SeatState


@dataclass(frozen=True)
class Event:
    """
    An event together with the seating layout it owns.

    The layout is generated once at creation; afterwards only booking
    commits and seat overrides produce a new Event value with changed seats.
    """

    organizer_id: str
    title: str
    seats: tuple[Seat, ...] = ()
    venue_id: str | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime | None = None

    @property
    def inventory(self) -> SeatInventory:
        return SeatInventory(self.seats)

    def with_seat_states(self, changes: Mapping[str, SeatState]) -> "Event":
        return replace(self, seats=self.inventory.with_states(changes).seats)
