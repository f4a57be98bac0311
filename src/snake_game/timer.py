"""Fixed-interval tick schedule driven by the frame clock."""

from __future__ import annotations


class TickTimer:
    """Accumulates elapsed frame time and reports how many ticks are due.

    The timer is the cancellation handle for the game loop: ``disarm`` stops
    it and throws away any partially elapsed interval, ``arm`` starts a fresh
    interval from zero.
    """

    def __init__(self) -> None:
        self.interval_ms: int = 0
        self.armed: bool = False
        self._accumulator: float = 0.0

    def arm(self, interval_ms: int) -> None:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self.interval_ms = interval_ms
        self.armed = True
        self._accumulator = 0.0

    def disarm(self) -> None:
        self.armed = False
        self._accumulator = 0.0

    @property
    def elapsed_ms(self) -> float:
        """Time accumulated toward the next tick."""
        return self._accumulator

    def advance(self, elapsed_ms: float) -> int:
        """Feed frame time and return the number of ticks that fell due."""
        if not self.armed or elapsed_ms <= 0:
            return 0
        self._accumulator += elapsed_ms
        due = 0
        while self._accumulator >= self.interval_ms:
            self._accumulator -= self.interval_ms
            due += 1
        return due
