"""
Zibu - Simulation Configuration
Tunable simulation parameters with environment variable support.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields

from zibu.constants import (
    CLEAN_AMOUNT,
    DECAY_PER_TICK,
    FEED_AMOUNT,
    FEED_INTERVAL_MS,
    REST_AMOUNT,
    REST_INTERVAL_MS,
    SENSOR_INTERVAL_MS,
    SHAKE_AMOUNT,
    SHAKE_REFRACTORY_MS,
    SHAKE_THRESHOLD,
    STORAGE_KEY,
    SWIPE_THRESHOLD,
    TICK_INTERVAL_MS,
    UPSET_THRESHOLD,
)


@dataclass
class SimulationConfig:
    """Configuration for the needs simulation with sensible defaults."""

    # Decay
    decay_per_tick: float = DECAY_PER_TICK
    tick_interval_ms: int = TICK_INTERVAL_MS
    upset_threshold: float = UPSET_THRESHOLD

    # Feeding
    feed_amount: float = FEED_AMOUNT
    feed_interval_ms: int = FEED_INTERVAL_MS

    # Cleaning
    clean_amount: float = CLEAN_AMOUNT
    swipe_threshold: float = SWIPE_THRESHOLD

    # Playing
    shake_amount: float = SHAKE_AMOUNT
    shake_threshold: float = SHAKE_THRESHOLD
    shake_refractory_ms: int = SHAKE_REFRACTORY_MS
    sensor_interval_ms: int = SENSOR_INTERVAL_MS

    # Sleeping
    rest_amount: float = REST_AMOUNT
    rest_interval_ms: int = REST_INTERVAL_MS

    # Persistence
    storage_key: str = STORAGE_KEY
    db_path: str | None = None  # None = ~/.zibu/zibu.db

    @classmethod
    def from_env(cls) -> SimulationConfig:
        """
        Load configuration from environment variables.

        Environment variables:
            ZIBU_DB_PATH: SQLite database file
            ZIBU_STORAGE_KEY: Record key for the needs snapshot
            ZIBU_DECAY_PER_TICK: Decay step per tick (fraction of full scale)
            ZIBU_TICK_INTERVAL_MS: Foreground decay tick interval
            ZIBU_UPSET_THRESHOLD: Need level below which Zibu gets upset
            ZIBU_SHAKE_THRESHOLD: Acceleration magnitude counted as a shake
            ZIBU_SHAKE_REFRACTORY_MS: Minimum time between accepted shakes
            ZIBU_SENSOR_INTERVAL_MS: Accelerometer polling interval
        """
        return cls(
            db_path=os.getenv("ZIBU_DB_PATH"),
            storage_key=os.getenv("ZIBU_STORAGE_KEY", STORAGE_KEY),
            decay_per_tick=float(os.getenv("ZIBU_DECAY_PER_TICK", str(DECAY_PER_TICK))),
            tick_interval_ms=int(os.getenv("ZIBU_TICK_INTERVAL_MS", str(TICK_INTERVAL_MS))),
            upset_threshold=float(os.getenv("ZIBU_UPSET_THRESHOLD", str(UPSET_THRESHOLD))),
            shake_threshold=float(os.getenv("ZIBU_SHAKE_THRESHOLD", str(SHAKE_THRESHOLD))),
            shake_refractory_ms=int(
                os.getenv("ZIBU_SHAKE_REFRACTORY_MS", str(SHAKE_REFRACTORY_MS))
            ),
            sensor_interval_ms=int(
                os.getenv("ZIBU_SENSOR_INTERVAL_MS", str(SENSOR_INTERVAL_MS))
            ),
        )

    @classmethod
    def from_dict(cls, data: dict) -> SimulationConfig:
        """Create config from dictionary, ignoring unknown keys."""
        valid_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered)

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if self.tick_interval_ms <= 0:
            errors.append("tick_interval_ms must be positive")
        if self.decay_per_tick < 0:
            errors.append("decay_per_tick cannot be negative")
        if not 0.0 <= self.upset_threshold <= 1.0:
            errors.append("upset_threshold must be within [0, 1]")
        if self.feed_interval_ms <= 0:
            errors.append("feed_interval_ms must be positive")
        if self.rest_interval_ms <= 0:
            errors.append("rest_interval_ms must be positive")
        if self.sensor_interval_ms <= 0:
            errors.append("sensor_interval_ms must be positive")
        if self.shake_refractory_ms < 0:
            errors.append("shake_refractory_ms cannot be negative")
        if self.swipe_threshold < 0:
            errors.append("swipe_threshold cannot be negative")
        for name in ("feed_amount", "clean_amount", "shake_amount", "rest_amount"):
            if getattr(self, name) < 0:
                errors.append(f"{name} cannot be negative")
        if not self.storage_key:
            errors.append("storage_key must not be empty")

        return errors

    def is_valid(self) -> bool:
        """Check if configuration is valid."""
        return len(self.validate()) == 0
