"""
Zibu - Shake Detector
Rate-limited edge trigger over acceleration magnitudes.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from zibu.constants import SHAKE_REFRACTORY_MS, SHAKE_THRESHOLD

logger = logging.getLogger(__name__)


def monotonic_ms() -> float:
    return time.monotonic() * 1000


class ShakeDetector:
    """
    Accepts a shake when the magnitude exceeds the threshold and the
    refractory window since the last accepted shake has passed.

    Samples inside the window are dropped, not deferred.
    """

    def __init__(
        self,
        threshold: float = SHAKE_THRESHOLD,
        refractory_ms: float = SHAKE_REFRACTORY_MS,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._threshold = threshold
        self._refractory_ms = refractory_ms
        self._clock = clock or monotonic_ms
        self._last_accepted_ms: float | None = None
        self._accepted = 0
        self._suppressed = 0

    @property
    def threshold(self) -> float:
        return self._threshold

    @property
    def accepted_count(self) -> int:
        return self._accepted

    @property
    def suppressed_count(self) -> int:
        return self._suppressed

    def process(self, magnitude: float) -> bool:
        """
        Feed one acceleration magnitude.

        Returns:
            True if this sample counts as a new shake.
        """
        if magnitude <= self._threshold:
            return False

        now = self._clock()
        if (
            self._last_accepted_ms is not None
            and now - self._last_accepted_ms < self._refractory_ms
        ):
            self._suppressed += 1
            return False

        self._last_accepted_ms = now
        self._accepted += 1
        logger.debug(f"Shake accepted (magnitude: {magnitude:.2f})")
        return True

    def reset(self) -> None:
        self._last_accepted_ms = None
