"""Elapsed-time bookkeeping for named timestamps."""

import time
from typing import Callable, NamedTuple, Tuple

from .constants import USEC_PER_SEC


class Timeval(NamedTuple):
    """A wall-clock instant split into whole seconds and microseconds."""
    seconds: int
    microseconds: int

    @classmethod
    def now(cls) -> "Timeval":
        """Sample the system wall clock."""
        usec = time.time_ns() // 1000
        return cls(usec // USEC_PER_SEC, usec % USEC_PER_SEC)

    @classmethod
    def from_seconds(cls, seconds: float) -> "Timeval":
        """Split a float number of seconds, as reported by getrusage."""
        usec = round(seconds * USEC_PER_SEC)
        return cls(usec // USEC_PER_SEC, usec % USEC_PER_SEC)

    def __str__(self) -> str:
        return format_timeval(self)


def timeval_delta(later: Timeval, earlier: Timeval) -> Timeval:
    """Subtract two instants, borrowing a second when microseconds underflow.

    Args:
        later: The current instant.
        earlier: The reference instant.

    Returns:
        The elapsed time as a Timeval.
    """
    seconds = later.seconds - earlier.seconds
    microseconds = later.microseconds - earlier.microseconds
    if later.microseconds < earlier.microseconds:
        seconds -= 1
        microseconds += USEC_PER_SEC
    return Timeval(seconds, microseconds)


def format_timeval(tv: Timeval) -> str:
    """Format as ``seconds.microseconds`` with six fractional digits."""
    return f"{tv.seconds}.{tv.microseconds:06d}"


class TimeTracker:
    """Hold the document creation epoch and the instant of the last mark.

    Both reference points are sampled at construction. ``mark`` measures the
    interval since the previous mark and since creation, then moves the last
    mark forward; the creation epoch never changes.
    """

    def __init__(self, clock: Callable[[], Timeval] = Timeval.now):
        self.clock = clock
        self.epoch = clock()
        self.last_mark = self.epoch

    def mark(self) -> Tuple[Timeval, Timeval]:
        """Take a timestamp.

        Returns:
            Tuple of (delta since the previous mark, total since creation).
        """
        current = self.clock()
        delta = timeval_delta(current, self.last_mark)
        self.last_mark = current
        total = timeval_delta(current, self.epoch)
        return delta, total

    def elapsed(self) -> Timeval:
        """Time since creation, leaving the last mark untouched."""
        return timeval_delta(self.clock(), self.epoch)
