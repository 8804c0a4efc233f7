"""Shared fixtures: a fake clock and manually advanced timers."""

from __future__ import annotations

from typing import Callable

import pytest

from zibu.config import SimulationConfig
from zibu.scheduling import Timer
from zibu.simulation import NeedsSimulation
from zibu.storage import MemoryKeyValueStore

START_MS = 1_700_000_000_000


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start_ms: int = START_MS) -> None:
        self.now_ms = start_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


class ManualTimer(Timer):
    """Timer driven by ManualScheduler.advance() instead of the event loop."""

    def __init__(self, interval_ms: float, callback: Callable[[], None], name: str) -> None:
        self.interval_ms = interval_ms
        self.callback = callback
        self.name = name
        self.progress_ms = 0.0
        self.fire_count = 0
        self.start_count = 0
        self._running = False

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self.progress_ms = 0.0
        self.start_count += 1

    def stop(self) -> None:
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def remaining_ms(self) -> float:
        return self.interval_ms - self.progress_ms


class ManualScheduler:
    """
    Deterministic stand-in for asyncio timers.

    advance(ms) moves the clock forward and fires every running timer at
    the moments it would have fired in real time, in order.
    """

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.timers: list[ManualTimer] = []

    def factory(self, interval_ms: float, callback: Callable[[], None], name: str) -> ManualTimer:
        timer = ManualTimer(interval_ms, callback, name)
        self.timers.append(timer)
        return timer

    def get(self, name: str) -> ManualTimer:
        matches = [t for t in self.timers if t.name == name]
        assert len(matches) == 1, f"expected one timer named {name}, got {len(matches)}"
        return matches[0]

    def running(self) -> list[str]:
        return [t.name for t in self.timers if t.is_running]

    def advance(self, ms: float) -> None:
        remaining = ms
        while True:
            active = [t for t in self.timers if t.is_running]
            step = min((t.remaining_ms for t in active), default=None)
            if step is None or step > remaining:
                for timer in active:
                    timer.progress_ms += remaining
                self.clock.advance(int(remaining))
                return

            for timer in active:
                timer.progress_ms += step
            self.clock.advance(int(step))
            remaining -= step

            for timer in active:
                # A callback may have stopped this timer
                if timer.is_running and timer.remaining_ms <= 0:
                    timer.progress_ms = 0.0
                    timer.fire_count += 1
                    timer.callback()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler(clock: FakeClock) -> ManualScheduler:
    return ManualScheduler(clock)


@pytest.fixture
def store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def config() -> SimulationConfig:
    return SimulationConfig()


@pytest.fixture
def make_simulation(store, config, scheduler, clock):
    """Build a simulation wired to the fake clock and manual timers."""

    def _make(**overrides) -> NeedsSimulation:
        kwargs = {
            "store": store,
            "config": config,
            "timer_factory": scheduler.factory,
            "wall_clock": clock,
            "monotonic_clock": clock,
        }
        kwargs.update(overrides)
        return NeedsSimulation(**kwargs)

    return _make
