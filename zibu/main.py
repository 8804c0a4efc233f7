"""
Zibu - Headless Runner
Runs the needs simulation against the SQLite store without a UI.

Send SIGUSR1 to toggle between foreground and background, SIGINT/SIGTERM
to stop.
"""

import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import Callable

from dotenv import load_dotenv

# Load .env file from project root
load_dotenv(Path(__file__).parent.parent / ".env")

from .config import SimulationConfig
from .lifecycle import LifecycleBridge
from .messages import AppState
from .sensors import MockAccelerometer
from .simulation import NeedsSimulation, SimulationState
from .storage import SQLiteKeyValueStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Quiet down noisy libraries
logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
logging.getLogger("aiosqlite").setLevel(logging.WARNING)

logger = logging.getLogger("zibu.main")


def _log_animation_changes() -> Callable[[SimulationState], None]:
    last_animation: list[str | None] = [None]

    def on_state(state: SimulationState) -> None:
        animation = state.flags.animation.value
        if animation != last_animation[0]:
            last_animation[0] = animation
            logger.info(f"Zibu is now showing '{animation}' ({state.needs})")

    return on_state


def _foreground_toggler(
    bridge: LifecycleBridge, tasks: set[asyncio.Task[None]]
) -> Callable[[], None]:
    """Flip between foreground and background on each call (bound to SIGUSR1)."""

    def toggle() -> None:
        target = AppState.ACTIVE if bridge.app_state != AppState.ACTIVE else AppState.BACKGROUND
        task = asyncio.create_task(bridge.handle_app_state(target), name="app_state_change")
        tasks.add(task)
        task.add_done_callback(tasks.discard)

    return toggle


async def main() -> None:
    """Main entry point for the headless simulation."""
    config = SimulationConfig.from_env()
    issues = config.validate()
    if issues:
        for issue in issues:
            logger.error(f"Config error: {issue}")
        sys.exit(1)

    simulation = NeedsSimulation(
        store=SQLiteKeyValueStore(config.db_path),
        config=config,
        accelerometer=MockAccelerometer(),
    )
    bridge = LifecycleBridge(simulation)

    loop = asyncio.get_running_loop()
    shutdown_event = asyncio.Event()

    def signal_handler() -> None:
        logger.info("Shutdown signal received")
        shutdown_event.set()

    state_tasks: set[asyncio.Task[None]] = set()
    toggle_foreground = _foreground_toggler(bridge, state_tasks)

    if sys.platform == "win32":
        def windows_handler(signum: int, frame: object) -> None:
            loop.call_soon_threadsafe(shutdown_event.set)

        signal.signal(signal.SIGINT, windows_handler)
    else:
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, signal_handler)
        loop.add_signal_handler(signal.SIGUSR1, toggle_foreground)

    try:
        await simulation.initialize()
        simulation.subscribe(_log_animation_changes())
        logger.info(f"Zibu running: {simulation.summary()}")
        logger.info("Waiting for shutdown signal...")

        await shutdown_event.wait()

    finally:
        logger.info("Shutting down...")
        await asyncio.gather(*state_tasks, return_exceptions=True)
        await bridge.handle_app_state(AppState.BACKGROUND)
        await simulation.shutdown()
        logger.info("Zibu stopped")


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
