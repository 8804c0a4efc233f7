"""
Zibu - Upset Watcher
Latches the upset condition when any need becomes critical.
"""

from __future__ import annotations

import logging

from zibu.constants import UPSET_THRESHOLD
from zibu.needs import NeedsState

logger = logging.getLogger(__name__)


class UpsetWatcher:
    """
    Edge-triggered upset latch with a single threshold.

    The latch sets the first time any channel drops below the threshold and
    clears only once every channel is back at or above it. Staying low does
    not re-trigger; to become upset again the pet must first fully recover.
    """

    def __init__(self, threshold: float = UPSET_THRESHOLD) -> None:
        self._threshold = threshold
        self._upset = False

    @property
    def threshold(self) -> float:
        return self._threshold

    @property
    def is_upset(self) -> bool:
        return self._upset

    def observe(self, state: NeedsState) -> bool:
        """
        Update the latch from a post-mutation state.

        Returns:
            True if the latch changed.
        """
        critical = state.any_below(self._threshold)

        if critical and not self._upset:
            self._upset = True
            channel, value = state.lowest()
            logger.info(f"Zibu is upset ({channel.value}={value:.3f})")
            return True

        if not critical and self._upset:
            self._upset = False
            logger.info("Zibu recovered from being upset")
            return True

        return False

    def reset(self) -> None:
        self._upset = False
