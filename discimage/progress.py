"""Progress tracking with speed and remaining-time estimates."""

from __future__ import annotations

import time
from collections import deque
from typing import Callable, NamedTuple, Optional

HISTORY_SIZE = 10
"""Number of recent updates the current speed is measured over."""

TICKS_PER_SECOND = 1_000_000
"""The clock counts microseconds."""


def _monotonic_us() -> int:
    return time.monotonic_ns() // 1000


def fmt_time(seconds: int) -> str:
    """Format a duration such as ``"2 min, 5 sec"``."""
    if seconds >= 60:
        minutes, rest = divmod(seconds, 60)
        return f"{minutes} min, {rest} sec" if rest else f"{minutes} min"
    if seconds > 0:
        return f"{seconds} sec"
    return "0 sec"


class _Sample(NamedTuple):
    how_much: int
    when: int


class Progress:
    """Tracks how far an operation has got and how long it will take.

    ``callback`` is called with the progress object whenever a visible
    value changes; a true result asks the operation to stop. ``clock``
    returns the current time in microseconds.
    """

    def __init__(
        self,
        callback: Optional[Callable[[Progress], object]] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self._callback = callback
        self._clock = clock or _monotonic_us
        self._clear()

    def _clear(self) -> None:
        self._start = 0
        self._elapsed_us = 0
        self._offset = 0
        self._last_elapsed = 0
        self._history: deque[_Sample] = deque(
            (_Sample(0, 0) for _ in range(HISTORY_SIZE)), maxlen=HISTORY_SIZE)
        self._history_sum = 0
        self._reported = (0, 0, 0, 0)

        self.total = 0
        self.curr = 0
        self.avg_bps = 0
        self.curr_bps = 0
        self.pc_completed = 0
        self.elapsed = 0
        self.estimated = 0
        self.remaining = 0
        self.elapsed_text = ""
        self.estimated_text = ""
        self.remaining_text = ""

    def prepare(self, total: int) -> None:
        """Start tracking an operation of ``total`` bytes."""
        self._clear()
        self._start = self._clock()
        self.total = total
        self.estimated = -1
        self.remaining = -1
        if self._callback is not None:
            self._callback(self)

    def chunk_complete(self) -> None:
        """Make later updates count from the current position."""
        self._offset = self.curr

    def update(self, curr: int) -> bool:
        """Record that ``curr`` bytes of the current chunk are done.

        Returns True if the callback asked to interrupt the operation.
        """
        if self.total <= 0:
            return False

        now = self._clock()
        oldest = self._history[0]
        prev = self.curr
        self.curr = self._offset + curr
        self.pc_completed = self.curr * 100 // self.total

        since = oldest.when if oldest.when > 0 else self._start
        self.curr_bps = self._history_sum * TICKS_PER_SECOND // (now - since + 1)
        delta = self.curr - prev
        self._history_sum += delta - oldest.how_much
        self._history.append(_Sample(delta, now))

        self._elapsed_us = now - self._start
        if self._elapsed_us > 0:
            self.avg_bps = self.curr * TICKS_PER_SECOND // self._elapsed_us
            self.elapsed = self._elapsed_us // TICKS_PER_SECOND
            self.elapsed_text = fmt_time(self.elapsed)

            settled = (self.elapsed > 10 and self.pc_completed > 0) or self.pc_completed > 10
            if settled and self.elapsed > self._last_elapsed:
                self.estimated = (self._elapsed_us * self.total // self.curr) // TICKS_PER_SECOND
                self.remaining = self.estimated - self.elapsed + 1
                self._last_elapsed = self.elapsed
                self.estimated_text = fmt_time(self.estimated)
                self.remaining_text = fmt_time(self.remaining)

        if self._callback is None:
            return False
        state = (self.pc_completed, self.elapsed, self.estimated, self.remaining)
        if state == self._reported:
            return False
        self._reported = state
        return bool(self._callback(self))