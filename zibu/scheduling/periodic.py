"""
Zibu - Periodic Tasks
Cancellable recurring timers for decay, feeding, resting and sensor work.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Callable

logger = logging.getLogger(__name__)


class Timer(ABC):
    """
    A recurring timer.

    start() and stop() are idempotent. A stopped timer never calls its
    callback again.
    """

    @abstractmethod
    def start(self) -> None:
        pass

    @abstractmethod
    def stop(self) -> None:
        pass

    @property
    @abstractmethod
    def is_running(self) -> bool:
        pass


TimerFactory = Callable[[float, Callable[[], None], str], Timer]


class PeriodicTask(Timer):
    """
    Runs a synchronous callback every interval_ms on the running event loop.

    The first call happens one full interval after start(), matching a
    setInterval-style timer.
    """

    def __init__(
        self,
        interval_ms: float,
        callback: Callable[[], None],
        name: str = "periodic",
    ) -> None:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self._interval_ms = interval_ms
        self._callback = callback
        self._name = name
        self._task: asyncio.Task[None] | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def interval_ms(self) -> float:
        return self._interval_ms

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run(), name=self._name)
        logger.debug(f"Timer '{self._name}' started ({self._interval_ms}ms)")

    def stop(self) -> None:
        if self._task is None:
            return
        if not self._task.done():
            self._task.cancel()
            logger.debug(f"Timer '{self._name}' stopped")
        self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval_ms / 1000.0)
            try:
                self._callback()
            except Exception as e:
                logger.error(f"Timer '{self._name}' callback failed: {e}")


def asyncio_timer_factory(
    interval_ms: float,
    callback: Callable[[], None],
    name: str,
) -> Timer:
    """Default TimerFactory producing asyncio-backed PeriodicTasks."""
    return PeriodicTask(interval_ms, callback, name)
