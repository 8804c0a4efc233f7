"""
Zibu - Event Message Types
Python dataclass definitions for the inputs the simulation consumes.

Each type supports to_dict()/from_dict() so events can be logged, replayed
or fed in from a host bridge.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any


# =============================================================================
# ENUMS
# =============================================================================


class AppState(str, Enum):
    """Host application lifecycle state."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    BACKGROUND = "background"

    @property
    def is_foreground(self) -> bool:
        return self is AppState.ACTIVE


class GestureKind(IntEnum):
    """Kind of pointer/touch gesture."""

    PRESS_START = 0
    PRESS_END = 1
    DRAG_RELEASE = 2


# =============================================================================
# SENSOR DATA
# =============================================================================


@dataclass
class AccelSample:
    """Accelerometer sample (3-axis, in g)."""

    x: float = 0.0
    y: float = 0.0
    z: float = -1.0  # Default: 1g downward at rest

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "accel",
            "x": self.x,
            "y": self.y,
            "z": self.z,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AccelSample:
        return cls(
            x=data.get("x", 0.0),
            y=data.get("y", 0.0),
            z=data.get("z", -1.0),
        )

    @property
    def magnitude(self) -> float:
        """Calculate total acceleration magnitude in g."""
        return (self.x**2 + self.y**2 + self.z**2) ** 0.5


# =============================================================================
# GESTURES
# =============================================================================


@dataclass
class PressEvent:
    """Press started or ended on the pet."""

    kind: GestureKind = GestureKind.PRESS_START

    def to_dict(self) -> dict[str, Any]:
        return {"type": "press", "kind": int(self.kind)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PressEvent:
        kind = GestureKind(data.get("kind", GestureKind.PRESS_START))
        if kind == GestureKind.DRAG_RELEASE:
            raise ValueError("PressEvent cannot carry a drag release")
        return cls(kind=kind)


@dataclass
class DragRelease:
    """A drag gesture ended with the given net displacement."""

    dx: float = 0.0
    dy: float = 0.0

    @property
    def kind(self) -> GestureKind:
        return GestureKind.DRAG_RELEASE

    def to_dict(self) -> dict[str, Any]:
        return {"type": "drag", "dx": self.dx, "dy": self.dy}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DragRelease:
        return cls(dx=data.get("dx", 0.0), dy=data.get("dy", 0.0))
