# src/api/dependencies.py

import logging
import os
import threading

from fastapi import Depends

from src.application.booking_coordinator import BookingCoordinator
from src.application.event_locks import EventLockRegistry
from src.application.event_service import EventService
from src.infrastructure.repositories.event_repository import (
    EventRepository,
    InMemoryEventRepository,
    SqlAlchemyEventRepository,
)


logger = logging.getLogger(__name__)

# Shared by every request in this process; one lock per event.
EVENT_LOCKS = EventLockRegistry()

_repository: EventRepository | None = None
_repository_lock = threading.Lock()


def event_store_backend() -> str:
    return os.getenv("EVENT_STORE_BACKEND", "sql").lower()


def _build_repository() -> EventRepository:
    backend = event_store_backend()
    if backend == "memory":
        return InMemoryEventRepository()
    if backend == "sql":
        return SqlAlchemyEventRepository()
    raise RuntimeError(
        f"Unknown EVENT_STORE_BACKEND {backend!r}; expected 'sql' or 'memory'."
    )


def get_event_repository() -> EventRepository:
    global _repository
    with _repository_lock:
        if _repository is None:
            _repository = _build_repository()
            logger.info("Event store backend: %s", type(_repository).__name__)
        return _repository


def get_booking_coordinator(
    repository: EventRepository = Depends(get_event_repository),
) -> BookingCoordinator:
    return BookingCoordinator(repository=repository, locks=EVENT_LOCKS)


def get_event_service(
    repository: EventRepository = Depends(get_event_repository),
) -> EventService:
    return EventService(repository=repository, locks=EVENT_LOCKS)
