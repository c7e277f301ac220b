"""Wall-clock stopwatch with nanosecond resolution."""

from __future__ import annotations

import time
from collections.abc import Callable


class StopWatch:
    """Measures elapsed time; starts implicitly when created."""

    def __init__(self, clock: Callable[[], int] = time.perf_counter_ns) -> None:
        self._clock = clock
        self._start = 0
        self.start()

    def start(self) -> None:
        self._start = self._clock()

    def stop(self) -> int:
        """Return nanoseconds elapsed since the last start()."""
        return max(0, self._clock() - self._start)
