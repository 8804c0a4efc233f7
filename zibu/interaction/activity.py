"""
Zibu - Active Activity
Tagged union of the interaction states. Exactly one variant is current, so
at most one tool can ever be armed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from .tools import Tool, ToolCategory


@dataclass(frozen=True)
class Idle:
    """No tool armed."""

    category: ClassVar[ToolCategory | None] = None

    @property
    def tool(self) -> None:
        return None


@dataclass(frozen=True)
class Feeding:
    """Feed tool armed. pressing is True while the pet is being held."""

    tool: Tool
    pressing: bool = False
    category: ClassVar[ToolCategory] = ToolCategory.FEED


@dataclass(frozen=True)
class Cleaning:
    tool: Tool
    category: ClassVar[ToolCategory] = ToolCategory.CLEAN


@dataclass(frozen=True)
class Playing:
    tool: Tool
    category: ClassVar[ToolCategory] = ToolCategory.PLAY


@dataclass(frozen=True)
class Sleeping:
    tool: Tool
    category: ClassVar[ToolCategory] = ToolCategory.SLEEP


ActiveActivity = Union[Idle, Feeding, Cleaning, Playing, Sleeping]

IDLE = Idle()

_VARIANTS: dict[ToolCategory, type] = {
    ToolCategory.FEED: Feeding,
    ToolCategory.CLEAN: Cleaning,
    ToolCategory.PLAY: Playing,
    ToolCategory.SLEEP: Sleeping,
}


def activity_for(tool: Tool) -> ActiveActivity:
    """Get the freshly armed activity for a tool."""
    return _VARIANTS[tool.category](tool=tool)


def selection(activity: ActiveActivity, category: ToolCategory) -> Tool | None:
    """Get the tool armed for category, or None."""
    if activity.category == category:
        return activity.tool
    return None


def is_sleeping(activity: ActiveActivity) -> bool:
    return isinstance(activity, Sleeping)


def is_feeding(activity: ActiveActivity) -> bool:
    return isinstance(activity, Feeding) and activity.pressing
