import threading

import pytest

from src.application.event_locks import EventLockRegistry
from src.domain.exceptions import BookingTimeoutError


def test_hold_times_out_when_busy():
    locks = EventLockRegistry()

    with locks.hold("event-1", timeout=1.0):
        with pytest.raises(BookingTimeoutError) as exc_info:
            with locks.hold("event-1", timeout=0.01):
                pass

    assert exc_info.value.event_id == "event-1"
    assert exc_info.value.reason == "TIMEOUT"


def test_zero_timeout_does_not_wait():
    locks = EventLockRegistry()

    with locks.hold("event-1", timeout=1.0):
        with pytest.raises(BookingTimeoutError):
            with locks.hold("event-1", timeout=0):
                pass


def test_lock_is_released_after_error():
    locks = EventLockRegistry()

    with pytest.raises(RuntimeError):
        with locks.hold("event-1", timeout=1.0):
            raise RuntimeError("boom")

    with locks.hold("event-1", timeout=0.01):
        pass


def test_events_have_independent_locks():
    locks = EventLockRegistry()

    with locks.hold("event-1", timeout=1.0):
        with locks.hold("event-2", timeout=0.01):
            assert len(locks) == 2

    assert len(locks) == 0


def test_waiter_gets_lock_once_released():
    locks = EventLockRegistry()
    entered = threading.Event()
    release = threading.Event()

    def holder():
        with locks.hold("event-1", timeout=1.0):
            entered.set()
            release.wait(1.0)

    thread = threading.Thread(target=holder)
    thread.start()
    entered.wait(1.0)
    release.set()

    with locks.hold("event-1", timeout=2.0):
        pass
    thread.join()


def test_idle_locks_are_dropped():
    locks = EventLockRegistry()

    with locks.hold("event-1", timeout=1.0):
        assert len(locks) == 1

    assert len(locks) == 0


def test_timed_out_waiter_leaves_no_lock_behind():
    locks = EventLockRegistry()

    with locks.hold("event-1", timeout=1.0):
        with pytest.raises(BookingTimeoutError):
            with locks.hold("event-1", timeout=0.01):
                pass
        assert len(locks) == 1

    assert len(locks) == 0


def test_lock_survives_while_a_waiter_is_queued():
    locks = EventLockRegistry()
    entered = threading.Event()
    release = threading.Event()
    order = []

    def holder():
        with locks.hold("event-1", timeout=1.0):
            entered.set()
            release.wait(1.0)
            order.append("holder")

    thread = threading.Thread(target=holder)
    thread.start()
    entered.wait(1.0)
    threading.Timer(0.05, release.set).start()

    with locks.hold("event-1", timeout=2.0):
        order.append("waiter")
    thread.join()

    assert order == ["holder", "waiter"]
    assert len(locks) == 0
