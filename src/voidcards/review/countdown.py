"""Per-card countdown and completion-message selection.

A Countdown measures elapsed time against a fixed duration and exposes a
clamped completion fraction for the progress bar. Each card gets a fresh
Countdown with a new generation number so timers scheduled for an earlier
card can be recognised and ignored.
"""

from __future__ import annotations

import logging
import secrets
import time
from typing import Callable, Sequence

logger = logging.getLogger(__name__)

DEFAULT_DURATION = 30.0
DEFAULT_INTERVAL = 0.1

Clock = Callable[[], float]


def completion_fraction(elapsed: float, total: float) -> float:
    """Return elapsed/total clamped to [0, 1].

    A non-positive total counts as already complete.
    """
    if total <= 0:
        return 1.0
    fraction = elapsed / total
    if fraction < 0.0:
        return 0.0
    if fraction > 1.0:
        return 1.0
    return fraction


class Countdown:
    """Wall-clock countdown for a single card."""

    def __init__(
        self,
        duration: float = DEFAULT_DURATION,
        interval: float = DEFAULT_INTERVAL,
        generation: int = 0,
        clock: Clock = time.monotonic,
    ) -> None:
        if duration <= 0:
            raise ValueError("duration must be positive")
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.duration = duration
        self.interval = interval
        self.generation = generation
        self._clock = clock
        self.started_at = clock()

    def elapsed(self) -> float:
        return max(0.0, self._clock() - self.started_at)

    def fraction(self) -> float:
        """Fraction of the duration used so far, in [0, 1]."""
        return completion_fraction(self.elapsed(), self.duration)

    def restart(self) -> "Countdown":
        """Return a fresh countdown with the same timing and the next generation."""
        return Countdown(
            duration=self.duration,
            interval=self.interval,
            generation=self.generation + 1,
            clock=self._clock,
        )

    def __repr__(self) -> str:
        return (
            f"Countdown(duration={self.duration}, interval={self.interval}, "
            f"generation={self.generation})"
        )


def pick_completion_message(
    pool: Sequence[str],
    randbelow: Callable[[int], int] = secrets.randbelow,
) -> str:
    """Pick a message uniformly from pool.

    If the random source fails, or returns an index outside the pool, the
    first message is used instead.
    """
    if not pool:
        raise ValueError("message pool is empty")
    try:
        index = randbelow(len(pool))
    except Exception as exc:
        logger.warning("Random source failed, using default message: %s", exc)
        return pool[0]
    if not 0 <= index < len(pool):
        logger.warning("Random index %r out of range, using default message", index)
        return pool[0]
    return pool[index]
