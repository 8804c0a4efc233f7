"""
Zibu - Message Types
Events delivered to the simulation by sensors, gestures and the host app.
"""

from .types import (
    AccelSample,
    AppState,
    DragRelease,
    GestureKind,
    PressEvent,
)

__all__ = [
    "AccelSample",
    "AppState",
    "DragRelease",
    "GestureKind",
    "PressEvent",
]
