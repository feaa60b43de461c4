from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from pagenine.core.models import ThreadObservation, TrackingState
from pagenine.core.poller import run_poll_loop

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


class ScriptedTracker:
    """Stands in for ThreadTracker; records the states it was handed."""

    def __init__(self, stop: asyncio.Event, ticks_before_stop: int, fail_on: int = -1) -> None:
        self.seen: list[TrackingState] = []
        self._stop = stop
        self._ticks_before_stop = ticks_before_stop
        self._fail_on = fail_on

    async def tick(self, state: TrackingState, now: datetime) -> TrackingState:
        self.seen.append(state)
        count = len(self.seen)
        if count >= self._ticks_before_stop:
            self._stop.set()
        if count == self._fail_on:
            raise RuntimeError("unexpected")
        observation = ThreadObservation(
            page=count,
            thread_id=1,
            title="x",
            observed_at=now,
            position=1,
            page_length=1,
        )
        return TrackingState(last_observation=observation, last_notified_page=0)


def test_poll_loop_threads_state_between_ticks() -> None:
    async def scenario() -> tuple[ScriptedTracker, TrackingState]:
        stop = asyncio.Event()
        tracker = ScriptedTracker(stop, ticks_before_stop=3)
        final = await run_poll_loop(tracker, 0.01, stop, clock=lambda: NOW)
        return tracker, final

    tracker, final = asyncio.run(scenario())
    assert tracker.seen[0] == TrackingState()
    assert [s.last_observation.page for s in tracker.seen[1:]] == [1, 2]
    assert final.last_observation.page == 3


def test_poll_loop_keeps_state_after_unexpected_error() -> None:
    async def scenario() -> tuple[ScriptedTracker, TrackingState]:
        stop = asyncio.Event()
        tracker = ScriptedTracker(stop, ticks_before_stop=3, fail_on=2)
        final = await run_poll_loop(tracker, 0.01, stop, clock=lambda: NOW)
        return tracker, final

    tracker, final = asyncio.run(scenario())
    assert tracker.seen[2].last_observation.page == 1
    assert final.last_observation.page == 3


def test_poll_loop_does_not_tick_when_already_stopped() -> None:
    async def scenario() -> tuple[ScriptedTracker, TrackingState]:
        stop = asyncio.Event()
        stop.set()
        tracker = ScriptedTracker(stop, ticks_before_stop=1)
        final = await run_poll_loop(tracker, 60, stop)
        return tracker, final

    tracker, final = asyncio.run(scenario())
    assert tracker.seen == []
    assert final == TrackingState()


def test_stop_interrupts_the_wait_between_ticks() -> None:
    async def scenario() -> ScriptedTracker:
        stop = asyncio.Event()
        tracker = ScriptedTracker(stop, ticks_before_stop=100)
        task = asyncio.create_task(run_poll_loop(tracker, 3600, stop, clock=lambda: NOW))
        await asyncio.sleep(0.05)
        stop.set()
        await asyncio.wait_for(task, timeout=1)
        return tracker

    tracker = asyncio.run(scenario())
    assert len(tracker.seen) == 1


class SlowTracker:
    """Tracker whose tick takes a while; records when each tick started."""

    def __init__(self, stop: asyncio.Event, duration: float, ticks_before_stop: int) -> None:
        self.started: list[float] = []
        self._stop = stop
        self._duration = duration
        self._ticks_before_stop = ticks_before_stop

    async def tick(self, state: TrackingState, now: datetime) -> TrackingState:
        self.started.append(asyncio.get_running_loop().time())
        await asyncio.sleep(self._duration)
        if len(self.started) >= self._ticks_before_stop:
            self._stop.set()
        return state


def _tick_gaps(duration: float, interval: float, ticks: int) -> list[float]:
    async def scenario() -> SlowTracker:
        stop = asyncio.Event()
        tracker = SlowTracker(stop, duration, ticks_before_stop=ticks)
        await run_poll_loop(tracker, interval, stop, clock=lambda: NOW)
        return tracker

    tracker = asyncio.run(scenario())
    return [later - earlier for earlier, later in zip(tracker.started, tracker.started[1:])]


def test_ticks_start_on_a_fixed_period_regardless_of_tick_duration() -> None:
    gaps = _tick_gaps(duration=0.2, interval=0.3, ticks=4)
    assert len(gaps) == 3
    assert all(abs(gap - 0.3) < 0.08 for gap in gaps), gaps


def test_overrunning_tick_is_followed_immediately() -> None:
    gaps = _tick_gaps(duration=0.2, interval=0.1, ticks=3)
    assert len(gaps) == 2
    assert all(abs(gap - 0.2) < 0.08 for gap in gaps), gaps
