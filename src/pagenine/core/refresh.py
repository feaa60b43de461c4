"""Adaptive refresh policy (core domain)."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Dict, Optional

from pagenine.core.models import ThreadObservation

# Minutes to wait before re-fetching, keyed by the thread's current page.
# Tuned to how fast the catalog churns; pages missing here refresh every tick.
REFRESH_THRESHOLDS: Dict[int, int] = {
    1: 15,
    2: 10,
    3: 10,
    4: 7,
    5: 7,
    6: 5,
    7: 3,
}

# Page 8 threads still in the top half of their page get a short grace period.
PAGE_EIGHT = 8
PAGE_EIGHT_TOP_HALF_RATIO = 0.5
PAGE_EIGHT_TOP_HALF_MINUTES = 2


def elapsed_minutes(observed_at: datetime, now: datetime) -> int:
    """Whole minutes between two instants, rounding to the second first.

    Seconds are rounded half away from zero, then truncated to minutes, so
    299.4s is 4 minutes and 299.5s is 5 minutes.
    """

    seconds = (now - observed_at).total_seconds()
    rounded = math.floor(abs(seconds) + 0.5)
    minutes = rounded // 60
    return minutes if seconds >= 0 else -minutes


def needs_refresh(observation: Optional[ThreadObservation], now: datetime) -> bool:
    """Return True when the catalog should be fetched again."""

    if observation is None:
        return True

    minutes = elapsed_minutes(observation.observed_at, now)
    page = observation.page

    threshold = REFRESH_THRESHOLDS.get(page)
    if threshold is not None:
        return minutes >= threshold

    if page == PAGE_EIGHT:
        ratio = observation.position / observation.page_length
        if ratio < PAGE_EIGHT_TOP_HALF_RATIO:
            return minutes >= PAGE_EIGHT_TOP_HALF_MINUTES

    return True
