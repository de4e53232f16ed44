# src/domain/roles.py

from abc import ABC, abstractmethod
from enum import Enum
from typing import ClassVar, Dict, Type


class Role(str, Enum):
    ADMIN = "Admin"
    ATTENDEE = "Attendee"
    EVENT_ORGANIZER = "Event Organizer"
    STAFF = "Staff"


class Principal(ABC):
    """
    A verified caller identity. One subclass per role; permission questions
    are answered by the subclass instead of comparing role strings.
    """

    role: ClassVar[Role]

    def __init__(self, user_id: str):
        if not user_id:
            raise ValueError("Principal requires a user id")
        self.user_id = user_id

    def __repr__(self) -> str:
        return f"{type(self).__name__}(user_id={self.user_id!r})"

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.user_id == other.user_id

    def __hash__(self) -> int:
        return hash((self.role, self.user_id))

    @abstractmethod
    def can_book_seats(self) -> bool:
        ...

    @abstractmethod
    def can_create_events(self) -> bool:
        ...

    @abstractmethod
    def can_manage_event(self, organizer_id: str) -> bool:
        ...


class Attendee(Principal):
    role = Role.ATTENDEE

    def can_book_seats(self) -> bool:
        return True

    def can_create_events(self) -> bool:
        return False

    def can_manage_event(self, organizer_id: str) -> bool:
        return False


class EventOrganizer(Principal):
    role = Role.EVENT_ORGANIZER

    def can_book_seats(self) -> bool:
        return False

    def can_create_events(self) -> bool:
        return True

    def can_manage_event(self, organizer_id: str) -> bool:
        return organizer_id == self.user_id


class Admin(Principal):
    role = Role.ADMIN

    def can_book_seats(self) -> bool:
        return False

    def can_create_events(self) -> bool:
        return True

    def can_manage_event(self, organizer_id: str) -> bool:
        return True


class Staff(Principal):
    role = Role.STAFF

    def can_book_seats(self) -> bool:
        return False

    def can_create_events(self) -> bool:
        return False

    def can_manage_event(self, organizer_id: str) -> bool:
        return False


_PRINCIPAL_TYPES: Dict[Role, Type[Principal]] = {
    principal_type.role: principal_type
    for principal_type in (Admin, Attendee, EventOrganizer, Staff)
}


def principal_for(role: Role | str, user_id: str) -> Principal:
    """Build the principal for a role value; unknown roles raise ValueError."""
    return _PRINCIPAL_TYPES[Role(role)](user_id)
