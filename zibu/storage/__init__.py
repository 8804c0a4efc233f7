"""
Zibu - Storage Module
Key-value stores and the snapshot persistence gateway.
"""

from .gateway import PersistenceGateway, reconcile_on_load, wall_clock_ms
from .kv_store import (
    DEFAULT_DB_PATH,
    KeyValueStore,
    MemoryKeyValueStore,
    SQLiteKeyValueStore,
)
from .models import Base, KeyValueModel
from .snapshot import NeedsSnapshot, SnapshotDecodeError

__all__ = [
    "Base",
    "DEFAULT_DB_PATH",
    "KeyValueModel",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SQLiteKeyValueStore",
    "NeedsSnapshot",
    "SnapshotDecodeError",
    "PersistenceGateway",
    "reconcile_on_load",
    "wall_clock_ms",
]
