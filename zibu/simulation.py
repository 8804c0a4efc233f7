"""
Zibu - Needs Simulation
The single owned object behind the view: needs state, activity, timers,
persistence and subscriptions.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable

from zibu.config import SimulationConfig
from zibu.interaction import (
    ActiveActivity,
    InteractionController,
    Playing,
    Tool,
    ToolCategory,
    is_feeding,
    is_sleeping,
    selection,
)
from zibu.messages import AccelSample, DragRelease, GestureKind, PressEvent
from zibu.needs import DEFAULT_NEEDS, NeedChannel, NeedsState, apply_decay, increment
from zibu.presentation import ActivityFlags, AnimationClip, select_clip
from zibu.scheduling import DecayScheduler, TimerFactory, UpsetWatcher, asyncio_timer_factory
from zibu.sensors import StreamingSensor
from zibu.storage import (
    KeyValueStore,
    MemoryKeyValueStore,
    NeedsSnapshot,
    PersistenceGateway,
    reconcile_on_load,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationState:
    """Everything the view reads on a render."""

    needs: NeedsState
    activity: ActiveActivity
    flags: ActivityFlags

    @property
    def clip(self) -> AnimationClip:
        return select_clip(self.flags)

    def selection(self, category: ToolCategory) -> Tool | None:
        return selection(self.activity, category)

    def to_dict(self) -> dict[str, Any]:
        return {
            "needs": self.needs.to_dict(),
            "activity": type(self.activity).__name__.lower(),
            "tool": self.activity.tool.key if self.activity.tool else None,
            "is_sleeping": self.flags.is_sleeping,
            "is_feeding": self.flags.is_feeding,
            "is_upset": self.flags.is_upset,
            "animation": self.flags.animation.value,
        }


Subscriber = Callable[[SimulationState], None]


class NeedsSimulation:
    """
    Command interface over Zibu's needs.

    All mutations happen synchronously in memory on the event loop; each
    one re-checks the upset latch, queues a snapshot write and notifies
    subscribers, in that order.

    Usage:
        sim = NeedsSimulation(store)
        await sim.initialize()
        unsubscribe = sim.subscribe(render)
        sim.select_tool("bottle")
        sim.press_start()
        ...
        await sim.shutdown()
    """

    def __init__(
        self,
        store: KeyValueStore | None = None,
        config: SimulationConfig | None = None,
        accelerometer: StreamingSensor | None = None,
        timer_factory: TimerFactory = asyncio_timer_factory,
        wall_clock: Callable[[], int] | None = None,
        monotonic_clock: Callable[[], float] | None = None,
    ) -> None:
        """
        Initialize the simulation (call initialize() before use).

        Args:
            store: Byte store for snapshots (in-memory if None)
            config: Simulation tuning (defaults if None)
            accelerometer: Shake source for the play interaction
            timer_factory: Creates all periodic timers
            wall_clock: Epoch-ms clock for snapshots and offline decay
            monotonic_clock: Millisecond clock for shake rate limiting
        """
        self._config = config or SimulationConfig()
        self._store = store or MemoryKeyValueStore()
        self._gateway = PersistenceGateway(
            self._store, key=self._config.storage_key, clock=wall_clock
        )

        self._needs: NeedsState | None = None
        self._upset = UpsetWatcher(self._config.upset_threshold)
        self._decay = DecayScheduler(
            on_tick=self.tick,
            decay_per_tick=self._config.decay_per_tick,
            tick_interval_ms=self._config.tick_interval_ms,
            timer_factory=timer_factory,
        )
        self._controller = InteractionController(
            on_increment=self._apply_increment,
            config=self._config,
            timer_factory=timer_factory,
            clock=monotonic_clock,
            on_activity_change=self._on_activity_change,
        )

        self._accelerometer = accelerometer
        self._accelerometer_ready = False
        self._sensor_lock = asyncio.Lock()
        self._sensor_tasks: set[asyncio.Task[None]] = set()

        self._subscribers: list[Subscriber] = []
        self._paused = False

    # Properties

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def gateway(self) -> PersistenceGateway:
        return self._gateway

    @property
    def controller(self) -> InteractionController:
        return self._controller

    @property
    def decay_scheduler(self) -> DecayScheduler:
        return self._decay

    @property
    def is_initialized(self) -> bool:
        return self._needs is not None

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def needs(self) -> NeedsState:
        if self._needs is None:
            raise RuntimeError("Simulation not initialized. Call initialize() first.")
        return self._needs

    # Lifecycle

    async def initialize(self) -> NeedsState:
        """
        Load or create the needs state and start the foreground timers.

        Cold start: the stored snapshot is decayed forward to now. With no
        usable snapshot the partially depleted default vector is used.
        """
        if self._needs is not None:
            return self._needs

        try:
            await self._store.initialize()
        except Exception as e:
            logger.error(f"Store initialization failed, continuing without persistence: {e}")

        await self._gateway.start()

        now_ms = self._gateway.now_ms()
        snapshot = await self._gateway.load()
        if snapshot is None:
            needs = DEFAULT_NEEDS
            logger.info(f"First run, starting from defaults: {needs}")
        else:
            needs = reconcile_on_load(snapshot, now_ms, self._decay.rate_per_ms)
            logger.info(f"Restored needs: {needs}")

        self._commit(needs, now_ms)

        if self._accelerometer is not None:
            self._accelerometer_ready = await self._accelerometer.initialize()

        self._paused = False
        self._decay.start()
        await self._sync_sensor()
        logger.info("Needs simulation started")
        return needs

    async def pause(self) -> None:
        """Stop every periodic task (decay, feeding, resting, sensor)."""
        self._paused = True
        self._decay.stop()
        self._controller.pause()
        await self._sync_sensor()

    async def resume(self) -> None:
        """Restart periodic tasks after pause()."""
        if self._needs is None:
            return
        self._paused = False
        self._controller.resume()
        self._decay.start()
        await self._sync_sensor()

    async def shutdown(self) -> None:
        """Stop everything, flush the final snapshot and release the store."""
        logger.info("Stopping needs simulation...")
        self._paused = True
        self._decay.stop()
        self._controller.shutdown()

        sensor_tasks = list(self._sensor_tasks)
        for task in sensor_tasks:
            task.cancel()
        await asyncio.gather(*sensor_tasks, return_exceptions=True)
        if self._accelerometer is not None:
            await self._accelerometer.shutdown()
        self._accelerometer_ready = False

        if self._needs is not None:
            self._gateway.request_save(self.snapshot())
        await self._gateway.stop()

        try:
            await self._store.close()
        except Exception as e:
            logger.warning(f"Store close failed: {e}")

        self._subscribers.clear()
        logger.info("Needs simulation stopped")

    # Commands

    def tick(self, elapsed_ms: float | None = None) -> NeedsState | None:
        """Apply one decay step (a full tick interval unless elapsed_ms is given)."""
        if self._needs is None:
            return None
        if elapsed_ms is None:
            elapsed_ms = self._decay.tick_interval_ms
        return self._commit(apply_decay(self._needs, self._decay.rate_per_ms, elapsed_ms))

    def reconcile(self, snapshot: NeedsSnapshot, now_ms: int | None = None) -> NeedsState:
        """Replace the current needs with a snapshot decayed forward to now."""
        if now_ms is None:
            now_ms = self._gateway.now_ms()
        needs = reconcile_on_load(snapshot, now_ms, self._decay.rate_per_ms)
        return self._commit(needs, now_ms)

    def select_tool(self, tool_key: str) -> ActiveActivity:
        return self._controller.select_tool(tool_key)

    def open_picker(self, category: ToolCategory) -> None:
        self._controller.open_picker(category)

    def clear_selection(self) -> None:
        self._controller.clear_selection()

    def press_start(self) -> bool:
        return self._controller.press_start()

    def press_end(self) -> bool:
        return self._controller.press_end()

    def drag_release(self, dx: float) -> bool:
        return self._controller.drag_release(dx)

    def handle_gesture(self, event: PressEvent | DragRelease) -> bool:
        """Dispatch a gesture event to the matching command."""
        if event.kind == GestureKind.PRESS_START:
            return self.press_start()
        if event.kind == GestureKind.PRESS_END:
            return self.press_end()
        return self.drag_release(event.dx)

    def handle_accel_sample(self, sample: AccelSample) -> bool:
        return self._controller.handle_accel_sample(sample)

    # Queries

    def get_state(self) -> SimulationState:
        activity = self._controller.activity
        return SimulationState(
            needs=self.needs,
            activity=activity,
            flags=ActivityFlags(
                is_sleeping=is_sleeping(activity),
                is_feeding=is_feeding(activity),
                is_upset=self._upset.is_upset,
            ),
        )

    def snapshot(self, now_ms: int | None = None) -> NeedsSnapshot:
        return self._gateway.make_snapshot(self.needs, now_ms)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Call callback with the new state after every change.

        Returns:
            A function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def summary(self) -> dict[str, Any]:
        """Get a summary of current state for logging/debugging."""
        if self._needs is None:
            return {"initialized": False}
        state = self.get_state()
        return {
            "initialized": True,
            "paused": self._paused,
            "needs": {k: round(v, 3) for k, v in state.needs.to_dict().items()},
            "activity": state.to_dict()["activity"],
            "animation": state.flags.animation.value,
            "decay_ticks": self._decay.tick_count,
            "persistence": self._gateway.get_stats(),
        }

    # Internals

    def _apply_increment(self, channel: NeedChannel, amount: float) -> None:
        if self._needs is None:
            logger.debug(f"Ignoring {channel.value} +{amount} before initialization")
            return
        self._commit(increment(self._needs, channel, amount))

    def _commit(self, needs: NeedsState, now_ms: int | None = None) -> NeedsState:
        self._needs = needs
        self._upset.observe(needs)
        self._gateway.request_save(self._gateway.make_snapshot(needs, now_ms))
        self._notify()
        return needs

    def _on_activity_change(self, previous: ActiveActivity, current: ActiveActivity) -> None:
        if isinstance(previous, Playing) != isinstance(current, Playing):
            self._schedule_sensor_sync()
        if self._needs is not None:
            self._notify()

    def _notify(self) -> None:
        if not self._subscribers:
            return
        state = self.get_state()
        for callback in list(self._subscribers):
            try:
                callback(state)
            except Exception as e:
                logger.warning(f"Subscriber callback failed: {e}")

    def _schedule_sensor_sync(self) -> None:
        if self._accelerometer is None or not self._accelerometer_ready:
            return
        task = asyncio.create_task(self._sync_sensor(), name="accel_sync")
        self._sensor_tasks.add(task)
        task.add_done_callback(self._sensor_tasks.discard)

    async def _sync_sensor(self) -> None:
        """Stream the accelerometer only while playing in the foreground."""
        sensor = self._accelerometer
        if sensor is None:
            return

        async with self._sensor_lock:
            wanted = (
                self._accelerometer_ready
                and not self._paused
                and isinstance(self._controller.activity, Playing)
            )
            if wanted and not sensor.is_streaming():
                await sensor.start_streaming(
                    self.handle_accel_sample, interval_ms=self._config.sensor_interval_ms
                )
            elif not wanted and sensor.is_streaming():
                await sensor.stop_streaming()
