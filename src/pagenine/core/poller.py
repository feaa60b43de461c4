"""Fixed-interval poll loop driving the tracker."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable

from pagenine.core.models import TrackingState
from pagenine.core.tracker import ThreadTracker

LOGGER = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


async def run_poll_loop(
    tracker: ThreadTracker,
    interval_seconds: float,
    stop: asyncio.Event,
    clock: Callable[[], datetime] = utc_now,
) -> TrackingState:
    """Tick until ``stop`` is set and return the last state.

    The first tick runs immediately and later ticks start on a fixed period,
    whatever the tick itself took. Between ticks we wait on the stop event
    until the next deadline, so shutdown is only observed at a tick boundary
    and a fetch or notification in flight always completes. A tick that
    overruns the period is followed by the next one right away.
    """

    loop = asyncio.get_running_loop()
    state = TrackingState()
    next_tick = loop.time()
    while not stop.is_set():
        try:
            state = await tracker.tick(state, clock())
        except Exception:
            LOGGER.exception("Unexpected error during poll tick")

        next_tick += interval_seconds
        if next_tick < loop.time():
            next_tick = loop.time()

        try:
            await asyncio.wait_for(stop.wait(), timeout=max(0.0, next_tick - loop.time()))
        except asyncio.TimeoutError:
            continue

    LOGGER.info("Poll loop stopped")
    return state
