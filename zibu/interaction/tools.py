"""
Zibu - Tool Catalog
Selectable items that arm an interaction category.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ToolCategory(str, Enum):
    """Interaction category a tool arms."""

    FEED = "feed"
    CLEAN = "clean"
    PLAY = "play"
    SLEEP = "sleep"


@dataclass(frozen=True)
class Tool:
    """A pickable item shown in a category's picker."""

    key: str
    label: str
    icon: str
    category: ToolCategory
    instructions: str = ""


TOOLS: dict[str, Tool] = {
    "bottle": Tool(
        key="bottle",
        label="Bottle",
        icon="prescription-bottle",
        category=ToolCategory.FEED,
        instructions="Hold Zibu to feed",
    ),
    "sponge": Tool(
        key="sponge",
        label="Sponge",
        icon="soap",
        category=ToolCategory.CLEAN,
        instructions="Swipe across Zibu to wash",
    ),
    "ball": Tool(
        key="ball",
        label="Ball",
        icon="baseball-ball",
        category=ToolCategory.PLAY,
        instructions="Shake your phone to play",
    ),
    "blanket": Tool(
        key="blanket",
        label="Blanket",
        icon="bed",
        category=ToolCategory.SLEEP,
        instructions="Zibu is sleeping",
    ),
}


def get_tool(key: str) -> Tool:
    """
    Look up a tool by key.

    Raises:
        ValueError: If no tool has that key.
    """
    tool = TOOLS.get(key)
    if tool is None:
        raise ValueError(f"Unknown tool '{key}' (expected one of {sorted(TOOLS)})")
    return tool


def tools_for(category: ToolCategory) -> list[Tool]:
    """Get the tools offered by a category's picker."""
    return [tool for tool in TOOLS.values() if tool.category == category]
