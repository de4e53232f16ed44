import pytest

from src.domain.exceptions import DuplicateSeatIdError, InvalidSeatingLayoutError
from src.domain.seat_layout import (
    FREE,
    Seat,
    SeatState,
    SectionSpec,
    generate_seating_layout,
    row_label,
)


def test_single_section_layout():
    seats = generate_seating_layout([SectionSpec(section_name="Gold", rows=2, seats_per_row=3)])

    assert [seat.id for seat in seats] == ["A1", "A2", "A3", "B1", "B2", "B3"]
    assert [seat.row for seat in seats] == [1, 1, 1, 2, 2, 2]
    assert [seat.column for seat in seats] == [1, 2, 3, 1, 2, 3]
    assert {seat.section_type for seat in seats} == {"gold"}
    assert all(not seat.occupied and seat.attendee_id is None for seat in seats)


def test_multi_section_ids_are_prefixed_and_unique():
    sections = [
        SectionSpec(section_name="Gold", rows=2, seats_per_row=3),
        SectionSpec(section_name="Silver", rows=3, seats_per_row=4),
        SectionSpec(section_name="Balcony", rows=1, seats_per_row=2),
    ]

    seats = generate_seating_layout(sections)

    assert len(seats) == sum(section.rows * section.seats_per_row for section in sections)
    assert len({seat.id for seat in seats}) == len(seats)
    assert seats[0].id == "gold-A1"
    assert seats[6].id == "silver-A1"
    assert seats[-1].id == "balcony-A2"
    assert [seat.section_type for seat in seats[5:7]] == ["gold", "silver"]


def test_zero_rows_or_seats_yield_no_seats():
    seats = generate_seating_layout(
        [
            SectionSpec(section_name="Empty", rows=0, seats_per_row=10),
            SectionSpec(section_name="Narrow", rows=4, seats_per_row=0),
            SectionSpec(section_name="Floor", rows=1, seats_per_row=2),
        ]
    )

    assert [seat.id for seat in seats] == ["floor-A1", "floor-A2"]


def test_no_sections_yield_empty_layout():
    assert generate_seating_layout([]) == []


def test_generation_is_deterministic():
    sections = [
        SectionSpec(section_name="Gold", rows=3, seats_per_row=3),
        SectionSpec(section_name="Silver", rows=2, seats_per_row=5),
    ]

    assert generate_seating_layout(sections) == generate_seating_layout(list(sections))


@pytest.mark.parametrize(
    "index, label",
    [(1, "A"), (2, "B"), (26, "Z"), (27, "AA"), (28, "AB"), (52, "AZ"), (53, "BA"), (702, "ZZ"), (703, "AAA")],
)
def test_row_label(index, label):
    assert row_label(index) == label


def test_row_label_rejects_zero():
    with pytest.raises(ValueError):
        row_label(0)


def test_rows_beyond_z_use_double_letters():
    seats = generate_seating_layout([SectionSpec(section_name="Stalls", rows=28, seats_per_row=1)])

    assert [seat.id for seat in seats[25:]] == ["Z1", "AA1", "AB1"]
    assert seats[26].row == 27


def test_sections_differing_only_in_case_collide():
    with pytest.raises(DuplicateSeatIdError) as exc_info:
        generate_seating_layout(
            [
                SectionSpec(section_name="Gold", rows=1, seats_per_row=2),
                SectionSpec(section_name="gold", rows=1, seats_per_row=1),
            ]
        )

    assert exc_info.value.offending_ids == ("gold-A1",)


def test_negative_dimensions_are_rejected():
    with pytest.raises(InvalidSeatingLayoutError):
        generate_seating_layout([SectionSpec(section_name="Gold", rows=-1, seats_per_row=3)])


def test_blank_section_name_is_rejected():
    with pytest.raises(InvalidSeatingLayoutError):
        generate_seating_layout([SectionSpec(section_name="   ", rows=1, seats_per_row=1)])


def test_seat_requires_attendee_iff_occupied():
    with pytest.raises(ValueError):
        Seat(id="A1", row=1, column=1, section_type="gold", occupied=True)
    with pytest.raises(ValueError):
        Seat(id="A1", row=1, column=1, section_type="gold", attendee_id="alice")


def test_seat_state_round_trip():
    seat = Seat(id="A1", row=1, column=1, section_type="gold")

    booked = seat.with_state(SeatState.held_by("alice"))

    assert booked.occupied and booked.attendee_id == "alice"
    assert booked.state.status.value == "OCCUPIED"
    assert seat.state == FREE
