"""
Zibu - Scheduling Module
Periodic timers, the decay scheduler and the upset latch.
"""

from .decay_scheduler import DecayScheduler
from .periodic import PeriodicTask, Timer, TimerFactory, asyncio_timer_factory
from .upset import UpsetWatcher

__all__ = [
    "DecayScheduler",
    "PeriodicTask",
    "Timer",
    "TimerFactory",
    "UpsetWatcher",
    "asyncio_timer_factory",
]
