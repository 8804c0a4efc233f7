"""
Zibu - Interaction Module
Tool selection, activities and gesture/shake handling.
"""

from .activity import (
    IDLE,
    ActiveActivity,
    Cleaning,
    Feeding,
    Idle,
    Playing,
    Sleeping,
    activity_for,
    is_feeding,
    is_sleeping,
    selection,
)
from .controller import InteractionController
from .shake import ShakeDetector
from .tools import TOOLS, Tool, ToolCategory, get_tool, tools_for

__all__ = [
    "ActiveActivity",
    "Idle",
    "Feeding",
    "Cleaning",
    "Playing",
    "Sleeping",
    "IDLE",
    "activity_for",
    "is_feeding",
    "is_sleeping",
    "selection",
    "InteractionController",
    "ShakeDetector",
    "TOOLS",
    "Tool",
    "ToolCategory",
    "get_tool",
    "tools_for",
]
