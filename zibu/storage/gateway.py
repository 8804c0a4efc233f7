"""
Zibu - Persistence Gateway
Loads and saves the needs snapshot and applies offline decay on rehydration.

Every operation fails soft: a broken store or a corrupt record is logged and
the caller falls back to defaults or simply carries on. Writes go through a
coalescing queue so state mutation never waits on I/O.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

from zibu.constants import STORAGE_KEY
from zibu.needs import NeedsState, apply_decay

from .kv_store import KeyValueStore
from .snapshot import NeedsSnapshot

logger = logging.getLogger(__name__)


def wall_clock_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def reconcile_on_load(
    snapshot: NeedsSnapshot,
    now_ms: int,
    rate_per_ms: float,
) -> NeedsState:
    """
    Decay a snapshot forward to now.

    Decay is never applied backward: if the clock moved backwards or the
    timestamps are identical the stored needs are returned unchanged.
    """
    elapsed_ms = now_ms - snapshot.last_updated_ms
    if elapsed_ms <= 0:
        if elapsed_ms < 0:
            logger.warning(f"Snapshot is {-elapsed_ms}ms in the future, skipping offline decay")
        return snapshot.needs

    reconciled = apply_decay(snapshot.needs, rate_per_ms, elapsed_ms)
    logger.debug(f"Applied {elapsed_ms}ms of offline decay: {reconciled}")
    return reconciled


class PersistenceGateway:
    """
    Best-effort persistence of the needs snapshot.

    Usage:
        gateway = PersistenceGateway(store)
        await gateway.start()             # starts the background writer
        snapshot = await gateway.load()   # None on first run or failure
        gateway.request_save(gateway.make_snapshot(state))
        await gateway.stop()              # flushes pending writes
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = STORAGE_KEY,
        clock: Callable[[], int] | None = None,
    ) -> None:
        """
        Initialize the gateway.

        Args:
            store: Backing byte store
            key: Record key the snapshot lives under
            clock: Wall-clock source in epoch ms (defaults to time.time)
        """
        self._store = store
        self._key = key
        self._clock = clock or wall_clock_ms

        self._last_stamp_ms = 0
        self._pending: NeedsSnapshot | None = None
        self._wake = asyncio.Event()
        self._write_lock = asyncio.Lock()
        self._writer_task: asyncio.Task[None] | None = None
        self._running = False

        # Stats
        self._saves = 0
        self._failures = 0

    @property
    def key(self) -> str:
        return self._key

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def now_ms(self) -> int:
        return int(self._clock())

    def stamp(self, now_ms: int | None = None) -> int:
        """Get a write timestamp that never goes backwards within this process."""
        now = self.now_ms() if now_ms is None else int(now_ms)
        self._last_stamp_ms = max(now, self._last_stamp_ms)
        return self._last_stamp_ms

    def make_snapshot(self, needs: NeedsState, now_ms: int | None = None) -> NeedsSnapshot:
        return NeedsSnapshot(needs=needs, last_updated_ms=self.stamp(now_ms))

    async def load(self) -> NeedsSnapshot | None:
        """
        Load the persisted snapshot.

        Returns:
            The snapshot, or None if absent, unreadable or corrupt.
        """
        try:
            raw = await self._store.get(self._key)
        except Exception as e:
            logger.error(f"Failed to read snapshot '{self._key}': {e}")
            return None

        if raw is None:
            logger.info(f"No snapshot stored under '{self._key}'")
            return None

        try:
            snapshot = NeedsSnapshot.deserialize(raw)
        except (ValueError, OverflowError) as e:
            logger.warning(f"Discarding corrupt snapshot '{self._key}': {e}")
            return None

        logger.debug(f"Loaded snapshot from {snapshot.last_updated_ms}: {snapshot.needs}")
        return snapshot

    async def save(self, snapshot: NeedsSnapshot) -> bool:
        """
        Write a snapshot now.

        Returns:
            True if the write succeeded. Failures are logged, never raised.
        """
        try:
            await self._store.set(self._key, snapshot.serialize())
        except Exception as e:
            self._failures += 1
            logger.error(f"Failed to save snapshot '{self._key}': {e}")
            return False

        self._saves += 1
        return True

    def request_save(self, snapshot: NeedsSnapshot) -> None:
        """Queue a snapshot for the background writer. Newest pending wins."""
        self._pending = snapshot
        self._wake.set()

    async def flush(self) -> bool:
        """
        Write any pending snapshot immediately.

        Returns:
            False if any write failed.
        """
        ok = True
        async with self._write_lock:
            while self._pending is not None:
                snapshot = self._pending
                self._pending = None
                ok = await self.save(snapshot) and ok
        return ok

    async def save_now(self, snapshot: NeedsSnapshot) -> bool:
        """
        Write a snapshot through the queue and wait for it.

        The snapshot replaces any pending one and is written under the write
        lock, so a newer commit made meanwhile is written after it, never
        before.
        """
        self.request_save(snapshot)
        return await self.flush()

    async def start(self) -> None:
        """Start the background writer."""
        if self._running:
            return
        self._running = True
        self._writer_task = asyncio.create_task(
            self._writer_loop(), name="persistence_writer"
        )
        logger.debug("Persistence writer started")

    async def stop(self) -> None:
        """Flush pending writes and stop the background writer."""
        self._running = False
        if self._writer_task and not self._writer_task.done():
            self._writer_task.cancel()
            try:
                await self._writer_task
            except asyncio.CancelledError:
                pass
        self._writer_task = None
        await self.flush()
        logger.debug("Persistence writer stopped")

    async def _writer_loop(self) -> None:
        while self._running:
            await self._wake.wait()
            self._wake.clear()
            await self.flush()

    def get_stats(self) -> dict[str, int | bool]:
        return {
            "saves": self._saves,
            "failures": self._failures,
            "pending": self.has_pending,
            "last_stamp_ms": self._last_stamp_ms,
        }
