"""
Zibu - Needs Snapshot
The persisted {needs, lastUpdated} record and its wire format.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any

from zibu.needs import NeedsState


class SnapshotDecodeError(ValueError):
    """Raised when a stored record is not a valid needs snapshot."""


@dataclass(frozen=True)
class NeedsSnapshot:
    """Needs state stamped with the wall-clock time it was taken (epoch ms)."""

    needs: NeedsState
    last_updated_ms: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "needs": self.needs.to_dict(),
            "lastUpdated": self.last_updated_ms,
        }

    @classmethod
    def from_dict(cls, data: Any) -> NeedsSnapshot:
        if not isinstance(data, dict):
            raise SnapshotDecodeError(f"snapshot must be an object, got {type(data).__name__}")

        needs = data.get("needs")
        if not isinstance(needs, dict):
            raise SnapshotDecodeError("snapshot has no 'needs' object")

        last_updated = data.get("lastUpdated")
        if isinstance(last_updated, bool) or not isinstance(last_updated, (int, float)):
            raise SnapshotDecodeError(f"invalid lastUpdated: {last_updated!r}")
        if isinstance(last_updated, float) and not math.isfinite(last_updated):
            raise SnapshotDecodeError(f"lastUpdated is not finite: {last_updated!r}")

        try:
            state = NeedsState.from_dict(needs)
        except ValueError as e:
            raise SnapshotDecodeError(str(e)) from e

        return cls(needs=state, last_updated_ms=int(last_updated))

    def serialize(self) -> bytes:
        """Serialize snapshot to bytes for the key-value store."""
        return json.dumps(self.to_dict()).encode("utf-8")

    @classmethod
    def deserialize(cls, data: bytes) -> NeedsSnapshot:
        """Deserialize snapshot from bytes."""
        try:
            decoded = json.loads(data.decode("utf-8"))
        except ValueError as e:
            raise SnapshotDecodeError(f"snapshot is not valid JSON: {e}") from e
        return cls.from_dict(decoded)
