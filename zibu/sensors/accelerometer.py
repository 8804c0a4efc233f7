"""
Zibu - Accelerometer
Simulated phone accelerometer feeding the shake-to-play interaction.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Callable

from zibu.messages import AccelSample

from .base import StreamingSensor

logger = logging.getLogger(__name__)

# Phone lying face up: gravity only, in g
RESTING = AccelSample(x=0.0, y=0.0, z=-1.0)


class MockAccelerometer(StreamingSensor):
    """
    Stand-in for the phone accelerometer, for the headless runner and tests.

    At rest it reports gravity plus gaussian noise. simulate_shake() injects
    a burst that swings back and forth along x, the way a hand-held shake
    does, for roughly the requested duration.
    """

    def __init__(self, noise_level: float = 0.02, available: bool = True) -> None:
        """
        Args:
            noise_level: Standard deviation of per-axis noise, in g
            available: False emulates a device without an accelerometer
        """
        self._available = available
        self._noise_level = noise_level
        self._ready = False

        self._interval_ms = 100.0
        self._callback: Callable[[AccelSample], None] | None = None
        self._stream_task: asyncio.Task[None] | None = None

        self._shake_samples_left = 0
        self._shake_strength = 2.5
        self._shake_sign = 1

    @property
    def name(self) -> str:
        return "MockAccelerometer"

    async def initialize(self) -> bool:
        if not self._available:
            logger.warning("No accelerometer on this device, shake-to-play disabled")
            return False
        self._ready = True
        logger.info(f"{self.name} ready (noise={self._noise_level}g)")
        return True

    async def shutdown(self) -> None:
        await self.stop_streaming()
        self._ready = False

    def is_ready(self) -> bool:
        return self._ready

    async def read(self) -> AccelSample:
        return self._next_sample()

    async def start_streaming(
        self,
        callback: Callable[[AccelSample], None],
        interval_ms: float = 100,
    ) -> None:
        if not self._ready:
            logger.debug("Accelerometer not ready, ignoring stream request")
            return
        if self.is_streaming():
            return

        self._callback = callback
        self._interval_ms = interval_ms
        self._stream_task = asyncio.create_task(self._poll(), name="accel_stream")
        logger.debug(f"Polling accelerometer every {interval_ms}ms")

    async def stop_streaming(self) -> None:
        task = self._stream_task
        self._stream_task = None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Accelerometer polling stopped")

    def is_streaming(self) -> bool:
        return self._stream_task is not None and not self._stream_task.done()

    async def _poll(self) -> None:
        while True:
            sample = self._next_sample()
            if self._callback:
                self._callback(sample)
            await asyncio.sleep(self._interval_ms / 1000.0)

    def _next_sample(self) -> AccelSample:
        x, y, z = RESTING.x, RESTING.y, RESTING.z

        if self._shake_samples_left > 0:
            self._shake_samples_left -= 1
            x += self._shake_sign * self._shake_strength
            y += random.uniform(-1.0, 1.0)
            self._shake_sign = -self._shake_sign

        noise = self._noise_level
        return AccelSample(
            x=x + random.gauss(0, noise),
            y=y + random.gauss(0, noise),
            z=z + random.gauss(0, noise),
        )

    def simulate_shake(self, duration: float = 1.0, strength: float = 2.5) -> None:
        """Shake the phone for about duration seconds at the given peak (in g)."""
        samples = round(duration * 1000 / self._interval_ms)
        self._shake_samples_left = max(1, samples)
        self._shake_strength = strength
        logger.debug(f"Simulating shake: {self._shake_samples_left} samples at {strength}g")
