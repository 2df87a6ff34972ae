"""
Game timer for MenuMines.

Accumulates active playing time against an injectable monotonic clock,
so it can be paused, resumed and restored without UI dependencies.
"""
import time
from typing import Callable, Optional


Clock = Callable[[], float]


class GameTimer:
    """
    Pausable elapsed-time accumulator.

    ``start``/``resume`` begin accumulating, ``stop``/``pause`` fold the
    running interval into the total. Calling either twice is harmless.
    """

    def __init__(self, clock: Clock = time.monotonic, elapsed: float = 0.0) -> None:
        """
        Initialize the timer.

        Args:
            clock: Monotonic time source in seconds.
            elapsed: Time already accumulated, e.g. from a saved game.
        """
        self._clock = clock
        self._accumulated = float(elapsed)
        self._started_at: Optional[float] = None

    @property
    def is_running(self) -> bool:
        return self._started_at is not None

    @property
    def elapsed(self) -> float:
        """Total accumulated seconds, including the running interval."""
        if self._started_at is None:
            return self._accumulated
        return self._accumulated + (self._clock() - self._started_at)

    def start(self) -> None:
        if self._started_at is None:
            self._started_at = self._clock()

    def stop(self) -> None:
        if self._started_at is not None:
            self._accumulated += self._clock() - self._started_at
            self._started_at = None

    # Semantically distinct aliases used by the session.
    pause = stop
    resume = start
