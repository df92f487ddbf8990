"""Window-level value types shared by the aerospace client and the engine."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Direction(str, Enum):
    """Direction argument for join-with and move."""

    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


class Dimension(str, Enum):
    """Window dimension argument for resize."""

    WIDTH = "width"
    HEIGHT = "height"


class WindowRef(BaseModel):
    """One row of `aerospace list-windows --json` output."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    window_id: int = Field(..., alias="window-id", description="AeroSpace window ID")
    app_name: str = Field("", alias="app-name", description="Application name")
    window_title: str = Field("", alias="window-title", description="Window title")
    app_bundle_id: Optional[str] = Field(None, alias="app-bundle-id", description="Bundle identifier")
