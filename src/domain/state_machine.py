# src/domain/state_machine.py

from enum import Enum
from typing import Dict, Set

from src.domain.exceptions import InvalidStateTransitionError


class SeatStatus(str, Enum):
    FREE = "FREE"
    OCCUPIED = "OCCUPIED"


class SeatStateMachine:
    """
    Central lifecycle controller for seat occupancy.
    Defines the legal state transitions.

    FREE -> OCCUPIED happens through a committed booking (or an explicit
    seat-status override). OCCUPIED -> FREE is only reachable through an
    override.
    """

    _ALLOWED_TRANSITIONS: Dict[SeatStatus, Set[SeatStatus]] = {
        SeatStatus.FREE: {
            SeatStatus.OCCUPIED,
        },
        SeatStatus.OCCUPIED: {
            SeatStatus.FREE,
        },
    }

    @classmethod
    def can_transition(
        cls,
        from_status: SeatStatus,
        to_status: SeatStatus,
    ) -> bool:
        """
        Returns True if transition is allowed.
        """
        cls._ensure_valid_status(from_status)
        cls._ensure_valid_status(to_status)

        return to_status in cls._ALLOWED_TRANSITIONS.get(from_status, set())

    @classmethod
    def validate_transition(
        cls,
        from_status: SeatStatus,
        to_status: SeatStatus,
        seat_id: str | None = None,
    ) -> None:
        """
        Raises InvalidStateTransitionError if transition is illegal.
        """
        if not cls.can_transition(from_status, to_status):
            raise InvalidStateTransitionError(
                from_state=from_status.value,
                to_state=to_status.value,
                seat_id=seat_id,
            )

    @classmethod
    def get_allowed_transitions(
        cls, status: SeatStatus
    ) -> Set[SeatStatus]:
        """
        Returns allowed next states from current state.
        """
        cls._ensure_valid_status(status)
        return cls._ALLOWED_TRANSITIONS.get(status, set())

    @staticmethod
    def _ensure_valid_status(status: SeatStatus) -> None:
        if not isinstance(status, SeatStatus):
            raise TypeError(
                f"Expected SeatStatus, got {type(status)}"
            )
