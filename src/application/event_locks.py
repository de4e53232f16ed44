# src/application/event_locks.py

from contextlib import contextmanager
from typing import Iterator
import logging
import threading

from src.domain.exceptions import BookingTimeoutError


logger = logging.getLogger(__name__)


class _EventLock:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class EventLockRegistry:
    """
    One exclusive lock per event id. An entry lives only while some thread
    holds or waits for it, so ids that are never seen again cost nothing.
    Locks of different events are independent.
    """

    def __init__(self):
        self._locks: dict[str, _EventLock] = {}
        self._guard = threading.Lock()

    def _checkout(self, event_id: str) -> _EventLock:
        with self._guard:
            entry = self._locks.get(event_id)
            if entry is None:
                entry = _EventLock()
                self._locks[event_id] = entry
            entry.users += 1
            return entry

    def _checkin(self, event_id: str, entry: _EventLock) -> None:
        with self._guard:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[event_id]

    @contextmanager
    def hold(self, event_id: str, timeout: float) -> Iterator[None]:
        entry = self._checkout(event_id)
        try:
            if timeout > 0:
                acquired = entry.lock.acquire(timeout=timeout)
            else:
                acquired = entry.lock.acquire(blocking=False)

            if not acquired:
                logger.warning(
                    "Event lock busy. event_id=%s timeout=%.2f",
                    event_id,
                    timeout,
                )
                raise BookingTimeoutError(event_id, timeout)

            try:
                yield
            finally:
                entry.lock.release()
        finally:
            self._checkin(event_id, entry)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
