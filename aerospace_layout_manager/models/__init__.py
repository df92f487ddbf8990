"""Pydantic models for layouts, displays and windows."""

from .display import DisplayAlias, DisplayInfo
from .layout import (
    GroupItem,
    Layout,
    LayoutConfig,
    LayoutItem,
    LayoutMode,
    Orientation,
    Size,
    WindowItem,
)
from .window import Dimension, Direction, WindowRef

__all__ = [
    "Dimension",
    "Direction",
    "DisplayAlias",
    "DisplayInfo",
    "GroupItem",
    "Layout",
    "LayoutConfig",
    "LayoutItem",
    "LayoutMode",
    "Orientation",
    "Size",
    "WindowItem",
    "WindowRef",
]
