from pydantic import BaseModel, ConfigDict, Field


class SectionSpecCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    section_name: str = Field(min_length=1, alias="sectionName")
    rows: int = Field(ge=0)
    seats_per_row: int = Field(ge=0, alias="seatsPerRow")


class EventCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    venue_id: str | None = Field(default=None, alias="venueId")
    max_capacity: int | None = Field(default=None, ge=0, alias="maxCapacity")
    sections: list[SectionSpecCreate] = Field(default_factory=list)


class SeatResponse(BaseModel):
    id: str
    row: int
    column: int
    section_type: str
    occupied: bool
    attendee_id: str | None = None


class EventResponse(BaseModel):
    id: str
    organizer_id: str
    venue_id: str | None = None
    title: str
    created_at: str | None = None
    total_seats: int
    available_seats: int
    seats: list[SeatResponse]


class SeatMapResponse(BaseModel):
    event_id: str
    total_seats: int
    available_seats: int
    occupied_seats: int
    seats: list[SeatResponse]


class HeldSeatsResponse(BaseModel):
    event_id: str
    attendee_id: str
    seats: list[SeatResponse]


class SeatBookingRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    seat_ids: list[str] = Field(alias="seatIds")


class SeatBookingResponse(BaseModel):
    event_id: str
    booked_seats: list[str]


class SeatStatusUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    occupied: bool
    attendee_id: str | None = Field(default=None, alias="attendeeId")
