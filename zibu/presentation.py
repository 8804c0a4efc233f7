"""
Zibu - Presentation State
What the view layer needs to draw Zibu: derived activity flags, the clip to
play for them and the status badge for each need.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from zibu.needs import NeedChannel, NeedsState


class Animation(str, Enum):
    """Sprite clip names, in descending display priority."""

    UPSET = "upset"
    SLEEP = "sleep"
    EAT = "eat"
    BLINK = "blink"


@dataclass(frozen=True)
class ActivityFlags:
    """
    Independently set activity flags.

    Several may be true at once (e.g. sleeping while upset); the view shows
    only the highest priority one: upset > sleeping > feeding > idle.
    """

    is_sleeping: bool = False
    is_feeding: bool = False
    is_upset: bool = False

    @property
    def animation(self) -> Animation:
        if self.is_upset:
            return Animation.UPSET
        if self.is_sleeping:
            return Animation.SLEEP
        if self.is_feeding:
            return Animation.EAT
        return Animation.BLINK


@dataclass(frozen=True)
class AnimationClip:
    """A sprite-sheet clip laid out in a cols x rows grid."""

    name: Animation
    frame_count: int
    cols: int
    rows: int
    fps: int
    loop: bool = True

    @property
    def duration_ms(self) -> float:
        return self.frame_count * 1000.0 / self.fps

    def frame_at(self, elapsed_ms: float) -> int:
        """Get the frame index to show elapsed_ms after the clip started."""
        if elapsed_ms <= 0:
            return 0
        frame = int(elapsed_ms * self.fps // 1000)
        if self.loop:
            return frame % self.frame_count
        # One-shot clips hold their last frame
        return min(frame, self.frame_count - 1)

    def cell(self, frame: int) -> tuple[int, int]:
        """Get the (column, row) of a frame in the sheet."""
        frame = frame % self.frame_count
        return frame % self.cols, frame // self.cols


CLIPS: dict[Animation, AnimationClip] = {
    Animation.BLINK: AnimationClip(Animation.BLINK, frame_count=8, cols=3, rows=3, fps=20),
    Animation.SLEEP: AnimationClip(Animation.SLEEP, frame_count=3, cols=3, rows=1, fps=15),
    Animation.EAT: AnimationClip(Animation.EAT, frame_count=17, cols=6, rows=3, fps=15),
    Animation.UPSET: AnimationClip(
        Animation.UPSET, frame_count=5, cols=5, rows=1, fps=15, loop=False
    ),
}


def select_clip(flags: ActivityFlags) -> AnimationClip:
    return CLIPS[flags.animation]


# Status badges


class StatusBand(str, Enum):
    GOOD = "good"
    FAIR = "fair"
    LOW = "low"
    CRITICAL = "critical"


BAND_COLORS: dict[StatusBand, str] = {
    StatusBand.GOOD: "#6DD19C",  # green
    StatusBand.FAIR: "#F4D35E",  # yellow
    StatusBand.LOW: "#FFA552",  # orange
    StatusBand.CRITICAL: "#E94F37",  # red
}

STATUS_LABELS: dict[NeedChannel, str] = {
    NeedChannel.MOOD: "Mood",
    NeedChannel.HUNGER: "Hunger",
    NeedChannel.CLEAN: "Clean",
    NeedChannel.REST: "Rest",
}


@dataclass(frozen=True)
class StatusLevel:
    """Badge shown on a need's status circle."""

    channel: NeedChannel
    label: str
    percent: int
    band: StatusBand

    @property
    def color(self) -> str:
        return BAND_COLORS[self.band]


def status_band(value: float) -> StatusBand:
    if value >= 0.75:
        return StatusBand.GOOD
    if value >= 0.5:
        return StatusBand.FAIR
    if value >= 0.25:
        return StatusBand.LOW
    return StatusBand.CRITICAL


def status_level(channel: NeedChannel, value: float) -> StatusLevel:
    # Round half up, like the percentage shown on the badge
    percent = int(value * 100 + 0.5)
    return StatusLevel(
        channel=channel,
        label=STATUS_LABELS[channel],
        percent=percent,
        band=status_band(value),
    )


def status_levels(state: NeedsState) -> list[StatusLevel]:
    """Get badges for every need, in channel order."""
    return [status_level(channel, value) for channel, value in state.items()]
