"""
Timestamp source for ``createdAt`` and ``updatedAt``.

Timestamps are integers counting nanoseconds since the Unix epoch.  The
wall clock may step backwards (NTP adjustments), so ``SystemClock``
never returns a value lower than the last one it handed out.
"""

import threading
import time


class SystemClock:
    """Monotonically non‑decreasing wall clock in nanoseconds."""

    def __init__(self) -> None:
        self._last = 0
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            current = time.time_ns()
            if current < self._last:
                current = self._last
            self._last = current
            return current
