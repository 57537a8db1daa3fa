"""Countdown clock for a single attempt."""

from __future__ import annotations


class SessionClock:
    """Tick-driven countdown. The owner decides how often ``tick`` is called."""

    def __init__(self, limit_seconds: int) -> None:
        if limit_seconds <= 0:
            raise ValueError("Time limit must be a positive number of seconds.")
        self._limit_seconds = int(limit_seconds)
        self._remaining_seconds = self._limit_seconds
        self._running = False
        self._frozen = False

    @property
    def limit_seconds(self) -> int:
        return self._limit_seconds

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    def is_running(self) -> bool:
        return self._running

    def is_frozen(self) -> bool:
        return self._frozen

    def is_expired(self) -> bool:
        return self._remaining_seconds <= 0

    def start(self) -> None:
        if self._frozen:
            raise RuntimeError("A frozen clock cannot be restarted.")
        self._running = True

    def tick(self, seconds: int = 1) -> int:
        """Advance the countdown and return the remaining seconds."""
        if self._running and not self._frozen:
            self._remaining_seconds = max(0, self._remaining_seconds - seconds)
        return self._remaining_seconds

    def freeze(self) -> None:
        self._running = False
        self._frozen = True

    @property
    def elapsed_seconds(self) -> int:
        return max(0, self._limit_seconds - self._remaining_seconds)
