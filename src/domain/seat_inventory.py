# src/domain/seat_inventory.py

from typing import Iterable, Iterator, Mapping

from src.domain.exceptions import DuplicateSeatIdError, SeatNotFoundError
from src.domain.seat_layout import Seat, SeatState


class SeatInventory:
    """
    Read view over one event's seating layout.

    Keeps the layout order and an id -> position index so lookups stay O(1)
    for venues with thousands of seats. Instances are never mutated;
    ``with_states`` returns a new inventory.
    """

    def __init__(self, seats: Iterable[Seat]):
        self._seats: tuple[Seat, ...] = tuple(seats)
        self._index: dict[str, int] = {}

        duplicates = []
        for position, seat in enumerate(self._seats):
            if seat.id in self._index:
                duplicates.append(seat.id)
                continue
            self._index[seat.id] = position

        if duplicates:
            raise DuplicateSeatIdError(duplicates)

    def __len__(self) -> int:
        return len(self._seats)

    def __iter__(self) -> Iterator[Seat]:
        return iter(self._seats)

    def __contains__(self, seat_id: object) -> bool:
        return seat_id in self._index

    @property
    def seats(self) -> tuple[Seat, ...]:
        return self._seats

    def get(self, seat_id: str) -> Seat | None:
        position = self._index.get(seat_id)
        if position is None:
            return None
        return self._seats[position]

    def find(self, seat_id: str) -> Seat:
        seat = self.get(seat_id)
        if seat is None:
            raise SeatNotFoundError(seat_id)
        return seat

    def missing(self, seat_ids: Iterable[str]) -> list[str]:
        return [seat_id for seat_id in seat_ids if seat_id not in self._index]

    def occupied(self, seat_ids: Iterable[str]) -> list[str]:
        return [seat_id for seat_id in seat_ids if self.find(seat_id).occupied]

    def occupied_by(self, attendee_id: str) -> list[Seat]:
        return [seat for seat in self._seats if seat.attendee_id == attendee_id]

    @property
    def occupied_count(self) -> int:
        return sum(1 for seat in self._seats if seat.occupied)

    @property
    def available_count(self) -> int:
        return len(self._seats) - self.occupied_count

    def states(self, seat_ids: Iterable[str]) -> dict[str, SeatState]:
        return {seat_id: self.find(seat_id).state for seat_id in seat_ids}

    def with_states(self, changes: Mapping[str, SeatState]) -> "SeatInventory":
        for seat_id in changes:
            self.find(seat_id)

        return SeatInventory(
            seat.with_state(changes[seat.id]) if seat.id in changes else seat
            for seat in self._seats
        )
