# src/domain/seat_layout.py

from collections import Counter
from dataclasses import dataclass, replace
from typing import Iterable

from src.domain.exceptions import DuplicateSeatIdError, InvalidSeatingLayoutError
from src.domain.state_machine import SeatStatus


@dataclass(frozen=True)
class SeatState:
    """Occupancy half of a seat; the unit compared and swapped on commit."""

    occupied: bool = False
    attendee_id: str | None = None

    def __post_init__(self) -> None:
        if self.occupied != (self.attendee_id is not None):
            raise ValueError("A seat is occupied if and only if it has an attendee")

    @classmethod
    def held_by(cls, attendee_id: str) -> "SeatState":
        return cls(occupied=True, attendee_id=attendee_id)

    @property
    def status(self) -> SeatStatus:
        return SeatStatus.OCCUPIED if self.occupied else SeatStatus.FREE


FREE = SeatState()


@dataclass(frozen=True)
class Seat:
    id: str
    row: int
    column: int
    section_type: str
    occupied: bool = False
    attendee_id: str | None = None

    def __post_init__(self) -> None:
        if self.row < 1 or self.column < 1:
            raise ValueError(f"Seat {self.id} must have row and column >= 1")
        if self.occupied != (self.attendee_id is not None):
            raise ValueError(
                f"Seat {self.id} is occupied if and only if it has an attendee"
            )

    @property
    def state(self) -> SeatState:
        return SeatState(occupied=self.occupied, attendee_id=self.attendee_id)

    @property
    def status(self) -> SeatStatus:
        return self.state.status

    def with_state(self, state: SeatState) -> "Seat":
        return replace(self, occupied=state.occupied, attendee_id=state.attendee_id)


@dataclass(frozen=True)
class SectionSpec:
    section_name: str
    rows: int
    seats_per_row: int

    @property
    def section_type(self) -> str:
        return self.section_name.strip().lower()

    @property
    def seat_count(self) -> int:
        return self.rows * self.seats_per_row


def row_label(index: int) -> str:
    """
    Spreadsheet-style label for a 1-based row index:
    1 -> A, 26 -> Z, 27 -> AA, 52 -> AZ, 53 -> BA.
    """
    if index < 1:
        raise ValueError(f"Row index must be >= 1, got {index}")

    label = ""
    while index:
        index, remainder = divmod(index - 1, 26)
        label = chr(ord("A") + remainder) + label
    return label


def _validate_section(section: SectionSpec) -> None:
    if not section.section_type:
        raise InvalidSeatingLayoutError("Section name must not be blank")
    if section.rows < 0 or section.seats_per_row < 0:
        raise InvalidSeatingLayoutError(
            f"Section {section.section_name!r} must have rows >= 0 and seats_per_row >= 0"
        )


def generate_seating_layout(sections: Iterable[SectionSpec]) -> list[Seat]:
    """
    Expand organizer section specs into the ordered seat list of an event.

    Seats are emitted section by section, then row by row, then column by
    column. A single-section layout uses bare ``{row}{column}`` ids (``A1``);
    once there is more than one section every id carries the lowercased
    section name as prefix (``gold-A1``) so ids stay unique event-wide.
    """
    sections = list(sections)
    for section in sections:
        _validate_section(section)

    prefixed = len(sections) > 1
    seats: list[Seat] = []

    for section in sections:
        section_type = section.section_type
        for r in range(1, section.rows + 1):
            label = row_label(r)
            for s in range(1, section.seats_per_row + 1):
                seat_id = f"{label}{s}"
                if prefixed:
                    seat_id = f"{section_type}-{seat_id}"
                seats.append(
                    Seat(
                        id=seat_id,
                        row=r,
                        column=s,
                        section_type=section_type,
                    )
                )

    duplicates = [seat_id for seat_id, count in Counter(seat.id for seat in seats).items() if count > 1]
    if duplicates:
        raise DuplicateSeatIdError(duplicates)

    return seats
