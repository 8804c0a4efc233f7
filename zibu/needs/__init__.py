"""
Zibu - Needs Module
Need channels, clamped state and the decay model.
"""

from .model import (
    DEFAULT_NEEDS,
    NeedChannel,
    NeedsState,
    apply_decay,
    clamp_need,
    decay_per_ms,
    increment,
)

__all__ = [
    "NeedChannel",
    "NeedsState",
    "DEFAULT_NEEDS",
    "apply_decay",
    "clamp_need",
    "decay_per_ms",
    "increment",
]
