from __future__ import annotations

import pytest

from quiz_proctor.core.services.session_clock import SessionClock


def test_clock_counts_down_only_while_running():
    clock = SessionClock(limit_seconds=5)
    clock.tick()
    assert clock.remaining_seconds == 5

    clock.start()
    clock.tick()
    clock.tick(2)
    assert clock.remaining_seconds == 2
    assert clock.elapsed_seconds == 3
    assert not clock.is_expired()


def test_clock_clamps_at_zero_and_expires():
    clock = SessionClock(limit_seconds=2)
    clock.start()
    assert clock.tick(5) == 0
    assert clock.is_expired()
    assert clock.elapsed_seconds == 2


def test_frozen_clock_keeps_its_value():
    clock = SessionClock(limit_seconds=60)
    clock.start()
    clock.tick(10)
    clock.freeze()
    clock.tick(10)

    assert clock.remaining_seconds == 50
    assert clock.is_frozen()
    assert not clock.is_running()
    with pytest.raises(RuntimeError):
        clock.start()


def test_non_positive_limit_is_rejected():
    with pytest.raises(ValueError):
        SessionClock(limit_seconds=0)
