"""
Zibu - Decay Scheduler
Recurring foreground decay tick.
"""

from __future__ import annotations

import logging
from typing import Callable

from zibu.constants import DECAY_PER_TICK, TICK_INTERVAL_MS
from zibu.needs import decay_per_ms

from .periodic import Timer, TimerFactory, asyncio_timer_factory

logger = logging.getLogger(__name__)


class DecayScheduler:
    """
    Applies one decay step every tick_interval_ms while running.

    The step is delivered as elapsed milliseconds to on_tick, which applies
    apply_decay() with the scheduler's per-ms rate. Decay is unconditional:
    sleeping or feeding does not pause it.
    """

    def __init__(
        self,
        on_tick: Callable[[float], None],
        decay_per_tick: float = DECAY_PER_TICK,
        tick_interval_ms: float = TICK_INTERVAL_MS,
        timer_factory: TimerFactory = asyncio_timer_factory,
    ) -> None:
        self._on_tick = on_tick
        self._decay_per_tick = decay_per_tick
        self._tick_interval_ms = tick_interval_ms
        self._rate_per_ms = decay_per_ms(decay_per_tick, tick_interval_ms)
        self._timer: Timer = timer_factory(tick_interval_ms, self._fire, "decay_tick")
        self._ticks = 0

    @property
    def rate_per_ms(self) -> float:
        return self._rate_per_ms

    @property
    def tick_interval_ms(self) -> float:
        return self._tick_interval_ms

    @property
    def is_running(self) -> bool:
        return self._timer.is_running

    @property
    def tick_count(self) -> int:
        return self._ticks

    def start(self) -> None:
        if not self._timer.is_running:
            logger.info(
                f"Decay scheduler started ({self._decay_per_tick} per {self._tick_interval_ms}ms)"
            )
        self._timer.start()

    def stop(self) -> None:
        if self._timer.is_running:
            logger.info("Decay scheduler stopped")
        self._timer.stop()

    def _fire(self) -> None:
        self._ticks += 1
        self._on_tick(self._tick_interval_ms)
