"""
Zibu - Lifecycle Bridge
Snapshots the needs when the app leaves the foreground and reconciles the
time spent away when it comes back.
"""

from __future__ import annotations

import logging

from zibu.messages import AppState
from zibu.simulation import NeedsSimulation
from zibu.storage import NeedsSnapshot

logger = logging.getLogger(__name__)


class LifecycleBridge:
    """
    Maps host app-state transitions onto the simulation.

    active -> inactive/background: pause periodic work, save a snapshot.
    inactive/background -> active: load the latest snapshot, decay it by
    the wall-clock time spent away, write it back, resume periodic work.

    Transitions between the two non-active states do nothing. Cold start
    goes through NeedsSimulation.initialize() instead.
    """

    def __init__(
        self,
        simulation: NeedsSimulation,
        initial_state: AppState = AppState.ACTIVE,
    ) -> None:
        self._simulation = simulation
        self._app_state = initial_state
        self._suspend_snapshot: NeedsSnapshot | None = None
        self._suspend_count = 0
        self._resume_count = 0

    @property
    def app_state(self) -> AppState:
        return self._app_state

    async def handle_app_state(self, state: AppState | str) -> None:
        """Handle an app-state change notification from the host."""
        state = AppState(state)
        previous = self._app_state
        self._app_state = state

        if previous.is_foreground and not state.is_foreground:
            await self._on_suspend()
        elif not previous.is_foreground and state.is_foreground:
            await self._on_resume()

    async def _on_suspend(self) -> None:
        sim = self._simulation
        if not sim.is_initialized:
            return

        await sim.pause()

        snapshot = sim.snapshot()
        self._suspend_snapshot = snapshot
        self._suspend_count += 1

        if await sim.gateway.save_now(snapshot):
            logger.info(f"Suspended, snapshot saved at {snapshot.last_updated_ms}")
        else:
            logger.warning("Suspended, snapshot save failed")

    async def _on_resume(self) -> None:
        sim = self._simulation
        if not sim.is_initialized:
            return

        now_ms = sim.gateway.now_ms()
        snapshot = await sim.gateway.load()
        if snapshot is None:
            snapshot = self._suspend_snapshot or sim.snapshot(now_ms)
            logger.info("No stored snapshot on resume, using in-memory state")

        elapsed_ms = now_ms - snapshot.last_updated_ms
        needs = sim.reconcile(snapshot, now_ms)
        await sim.gateway.flush()
        self._resume_count += 1
        logger.info(f"Resumed after {max(elapsed_ms, 0)}ms away: {needs}")

        await sim.resume()

    def get_stats(self) -> dict[str, int | str]:
        return {
            "app_state": self._app_state.value,
            "suspends": self._suspend_count,
            "resumes": self._resume_count,
        }
