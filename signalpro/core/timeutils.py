"""
Time helpers.

All engine timestamps are integer epoch milliseconds.
"""

import time
from typing import Callable, Optional

Clock = Callable[[], int]

MINUTE_MS = 60 * 1000


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def resolve_now(now: Optional[int], clock: Clock = now_ms) -> int:
    """Use the caller's timestamp when given, else read the clock."""
    return int(now) if now is not None else clock()
