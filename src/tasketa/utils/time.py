"""Time utilities."""

import time


def now_millis() -> int:
    """Return the current wall-clock time as epoch milliseconds."""
    return time.time_ns() // 1_000_000
