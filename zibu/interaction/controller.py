"""
Zibu - Interaction Controller
Translates tool selection, gestures and shakes into need increments.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable

from zibu.config import SimulationConfig
from zibu.messages import AccelSample
from zibu.needs import NeedChannel
from zibu.scheduling import Timer, TimerFactory, asyncio_timer_factory

from .activity import (
    IDLE,
    ActiveActivity,
    Cleaning,
    Feeding,
    Playing,
    Sleeping,
    activity_for,
    selection,
)
from .shake import ShakeDetector
from .tools import Tool, ToolCategory, get_tool

logger = logging.getLogger(__name__)


class InteractionController:
    """
    Owns the active activity and the timers it drives.

    Only one tool is ever armed: every transition replaces the whole
    ActiveActivity value. Timers are re-synced after each transition so a
    feed or rest loop never outlives the activity that started it.

    Need changes are not applied here; they are reported through
    on_increment so the owner can commit, persist and re-check the upset
    latch.
    """

    def __init__(
        self,
        on_increment: Callable[[NeedChannel, float], None],
        config: SimulationConfig | None = None,
        timer_factory: TimerFactory = asyncio_timer_factory,
        clock: Callable[[], float] | None = None,
        on_activity_change: Callable[[ActiveActivity, ActiveActivity], None] | None = None,
    ) -> None:
        """
        Initialize the controller.

        Args:
            on_increment: Callback applying (channel, amount) to the needs
            config: Amounts, thresholds and intervals
            timer_factory: Creates the feed and rest timers
            clock: Monotonic millisecond clock for shake rate limiting
            on_activity_change: Callback with (previous, current) activity
        """
        self._config = config or SimulationConfig()
        self._on_increment = on_increment
        self._on_activity_change = on_activity_change

        self._activity: ActiveActivity = IDLE
        self._paused = False

        self._feed_timer: Timer = timer_factory(
            self._config.feed_interval_ms, self._feed_step, "feed_hunger"
        )
        self._rest_timer: Timer = timer_factory(
            self._config.rest_interval_ms, self._rest_step, "sleep_rest"
        )
        self._shake_detector = ShakeDetector(
            threshold=self._config.shake_threshold,
            refractory_ms=self._config.shake_refractory_ms,
            clock=clock,
        )

    @property
    def activity(self) -> ActiveActivity:
        return self._activity

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def shake_detector(self) -> ShakeDetector:
        return self._shake_detector

    def selection(self, category: ToolCategory) -> Tool | None:
        """Get the tool armed for a category, or None."""
        return selection(self._activity, category)

    # Tool selection

    def select_tool(self, tool_key: str) -> ActiveActivity:
        """
        Arm a tool, clearing every other selection.

        Raises:
            ValueError: If tool_key is not in the catalog.
        """
        tool = get_tool(tool_key)
        if self._activity.tool == tool:
            return self._activity

        self._transition(activity_for(tool))
        return self._activity

    def open_picker(self, category: ToolCategory) -> None:
        """Clear any tool armed in a different category before its picker opens."""
        current = self._activity.category
        if current is not None and current != category:
            self._transition(IDLE)

    def clear_selection(self) -> None:
        """Disarm the current tool (also wakes a sleeping pet)."""
        self._transition(IDLE)

    # Gestures and sensors

    def press_start(self) -> bool:
        """Start holding the pet. Feeds only while the feed tool is armed."""
        activity = self._activity
        if not isinstance(activity, Feeding):
            logger.debug("Press ignored: no feed tool armed")
            return False
        if self._paused or activity.pressing:
            return False
        self._transition(replace(activity, pressing=True))
        return True

    def press_end(self) -> bool:
        """Stop holding the pet."""
        activity = self._activity
        if not isinstance(activity, Feeding) or not activity.pressing:
            return False
        self._transition(replace(activity, pressing=False))
        return True

    def drag_release(self, dx: float) -> bool:
        """
        Finish a swipe. Washes once per qualifying release.

        Args:
            dx: Net horizontal displacement of the drag

        Returns:
            True if the swipe counted.
        """
        if not isinstance(self._activity, Cleaning):
            logger.debug("Swipe ignored: no cleaning tool armed")
            return False
        if self._paused:
            return False
        if abs(dx) <= self._config.swipe_threshold:
            return False
        self._on_increment(NeedChannel.CLEAN, self._config.clean_amount)
        return True

    def handle_accel_sample(self, sample: AccelSample) -> bool:
        """
        Process one accelerometer sample while playing.

        Returns:
            True if the sample was accepted as a shake.
        """
        if not isinstance(self._activity, Playing) or self._paused:
            return False
        if not self._shake_detector.process(sample.magnitude):
            return False
        self._on_increment(NeedChannel.MOOD, self._config.shake_amount)
        return True

    # Suspension

    def pause(self) -> None:
        """Stop every timer and release any press, keeping the armed tool."""
        self._paused = True
        if isinstance(self._activity, Feeding) and self._activity.pressing:
            self._transition(replace(self._activity, pressing=False))
        self._sync_timers()

    def resume(self) -> None:
        self._paused = False
        self._sync_timers()

    def shutdown(self) -> None:
        """Disarm everything and stop all timers."""
        self._paused = True
        self._activity = IDLE
        self._sync_timers()

    # Internals

    def _transition(self, activity: ActiveActivity) -> None:
        previous = self._activity
        self._activity = activity

        if isinstance(activity, Playing) and not isinstance(previous, Playing):
            self._shake_detector.reset()

        self._sync_timers()

        if previous != activity:
            logger.debug(f"Activity: {type(previous).__name__} -> {type(activity).__name__}")
            if self._on_activity_change:
                self._on_activity_change(previous, activity)

    def _sync_timers(self) -> None:
        activity = self._activity
        feeding = isinstance(activity, Feeding) and activity.pressing and not self._paused
        sleeping = isinstance(activity, Sleeping) and not self._paused

        if feeding:
            self._feed_timer.start()
        else:
            self._feed_timer.stop()

        if sleeping:
            self._rest_timer.start()
        else:
            self._rest_timer.stop()

    def _feed_step(self) -> None:
        self._on_increment(NeedChannel.HUNGER, self._config.feed_amount)

    def _rest_step(self) -> None:
        self._on_increment(NeedChannel.REST, self._config.rest_amount)

    def get_state(self) -> dict:
        """Get current controller state for logging."""
        return {
            "activity": type(self._activity).__name__,
            "tool": self._activity.tool.key if self._activity.tool else None,
            "paused": self._paused,
            "feed_timer": self._feed_timer.is_running,
            "rest_timer": self._rest_timer.is_running,
            "shakes_accepted": self._shake_detector.accepted_count,
        }
