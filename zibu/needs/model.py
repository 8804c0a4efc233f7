"""
Zibu - Needs Model
The four need channels and the pure functions that decay and replenish them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator

from zibu.constants import (
    DEFAULT_CLEAN,
    DEFAULT_HUNGER,
    DEFAULT_MOOD,
    DEFAULT_REST,
    NEED_MAX,
    NEED_MIN,
)


class NeedChannel(str, Enum):
    """A tracked wellbeing dimension."""

    MOOD = "mood"
    HUNGER = "hunger"
    CLEAN = "clean"
    REST = "rest"


def clamp_need(value: float) -> float:
    """Clamp a need value into [0, 1]."""
    return max(NEED_MIN, min(NEED_MAX, value))


@dataclass(frozen=True)
class NeedsState:
    """
    Total, immutable mapping from every NeedChannel to a value in [0, 1].

    Values are clamped on construction, so no instance can hold an
    out-of-range channel. Mutations return a new instance.
    """

    mood: float = DEFAULT_MOOD
    hunger: float = DEFAULT_HUNGER
    clean: float = DEFAULT_CLEAN
    rest: float = DEFAULT_REST

    def __post_init__(self) -> None:
        for channel in NeedChannel:
            object.__setattr__(
                self, channel.value, clamp_need(float(getattr(self, channel.value)))
            )

    def get(self, channel: NeedChannel) -> float:
        return getattr(self, channel.value)

    def with_value(self, channel: NeedChannel, value: float) -> NeedsState:
        values = self.to_dict()
        values[channel.value] = value
        return NeedsState(**values)

    def items(self) -> Iterator[tuple[NeedChannel, float]]:
        for channel in NeedChannel:
            yield channel, self.get(channel)

    def lowest(self) -> tuple[NeedChannel, float]:
        """Get the most depleted channel."""
        return min(self.items(), key=lambda item: item[1])

    def any_below(self, threshold: float) -> bool:
        return any(value < threshold for _, value in self.items())

    def to_dict(self) -> dict[str, float]:
        return {channel.value: value for channel, value in self.items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NeedsState:
        """
        Build a state from a mapping that must name every channel.

        Raises:
            ValueError: If a channel is missing, not numeric or not finite.
        """
        values: dict[str, float] = {}
        for channel in NeedChannel:
            raw = data.get(channel.value)
            # bool is an int subclass; a flag is never a need value
            if isinstance(raw, bool) or not isinstance(raw, (int, float)):
                raise ValueError(f"need '{channel.value}' missing or not numeric: {raw!r}")
            try:
                value = float(raw)
            except OverflowError as e:
                raise ValueError(f"need '{channel.value}' out of range: {raw!r}") from e
            # NaN would clamp to 1.0 and pass for a full-health pet
            if not math.isfinite(value):
                raise ValueError(f"need '{channel.value}' is not finite: {raw!r}")
            values[channel.value] = value
        return cls(**values)

    @classmethod
    def full(cls) -> NeedsState:
        return cls(mood=NEED_MAX, hunger=NEED_MAX, clean=NEED_MAX, rest=NEED_MAX)

    def __str__(self) -> str:
        return ", ".join(f"{channel.value}={value:.3f}" for channel, value in self.items())


DEFAULT_NEEDS = NeedsState()


def decay_per_ms(decay_per_tick: float, tick_interval_ms: float) -> float:
    """Convert a per-tick decay step into a continuous per-millisecond rate."""
    if tick_interval_ms <= 0:
        raise ValueError("tick_interval_ms must be positive")
    return decay_per_tick / tick_interval_ms


def apply_decay(state: NeedsState, rate_per_ms: float, elapsed_ms: float) -> NeedsState:
    """
    Decay every channel linearly by rate * elapsed time.

    Decay is rate based rather than "ticks missed x step", so catching up
    over a long offline gap gives the same result as dense ticking.
    Non-positive elapsed time leaves the state untouched.
    """
    if elapsed_ms <= 0:
        return state
    amount = rate_per_ms * elapsed_ms
    return NeedsState(**{channel.value: value - amount for channel, value in state.items()})


def increment(state: NeedsState, channel: NeedChannel, amount: float) -> NeedsState:
    """Add amount to a single channel, clamped."""
    return state.with_value(channel, state.get(channel) + amount)
