"""
Time source for the TTL cache.

All expiry arithmetic is done in integer milliseconds since the Unix epoch.
"""

import time
from typing import Callable


class WallClock:
    """
    Wall-clock millisecond source that never goes backwards.

    If the system clock is stepped back, the last returned value is
    repeated until real time catches up again.

    Args:
        source: Nanosecond time source (defaults to time.time_ns)
    """

    def __init__(self, source: Callable[[], int] = time.time_ns):
        self._source = source
        self._last = 0

    def now_ms(self) -> int:
        now = self._source() // 1_000_000
        if now < self._last:
            return self._last
        self._last = now
        return now

    def __call__(self) -> int:
        return self.now_ms()


# Shared default clock
wall_clock = WallClock()


def now_ms() -> int:
    """Current wall-clock time in milliseconds."""
    return wall_clock.now_ms()
