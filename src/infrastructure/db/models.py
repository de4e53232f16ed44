# src/infrastructure/db/models.py

from sqlalchemy import (
    Boolean,
    String,
    Integer,
    DateTime,
    UniqueConstraint,
    CheckConstraint,
    ForeignKey,
    Index,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from uuid import uuid4

from src.infrastructure.db.session import Base


class EventRecord(Base):
    """
    Event row. The seating layout lives in event_seats,
    one row per seat, ordered by position.
    """

    __tablename__ = "events"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    organizer_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    venue_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    title: Mapped[str] = mapped_column(String(128), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class SeatRecord(Base):
    __tablename__ = "event_seats"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    event_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
    )
    seat_id: Mapped[str] = mapped_column(String(96), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    row: Mapped[int] = mapped_column("seat_row", Integer, nullable=False)
    column: Mapped[int] = mapped_column("seat_column", Integer, nullable=False)
    section_type: Mapped[str] = mapped_column(String(64), nullable=False)
    occupied: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    attendee_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint(
            "event_id",
            "seat_id",
            name="uq_event_seat_id",
        ),
        UniqueConstraint(
            "event_id",
            "position",
            name="uq_event_seat_position",
        ),
        CheckConstraint("seat_row >= 1", name="ck_seat_row_positive"),
        CheckConstraint("seat_column >= 1", name="ck_seat_column_positive"),
        CheckConstraint(
            "(occupied AND attendee_id IS NOT NULL) OR (NOT occupied AND attendee_id IS NULL)",
            name="ck_seat_occupied_iff_attendee",
        ),
        Index("ix_event_seats_event_attendee", "event_id", "attendee_id"),
    )
