"""
Data models for declarative window layouts.

A layout is a tree: WindowItem leaves name an application by bundle id,
GroupItem nodes nest a horizontal or vertical split. The JSON format tells the
two apart structurally (a group has a `windows` list, a window has a
`bundleId`); the models carry an explicit `kind` tag once parsed.
"""

import re
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    field_validator,
)

from ..errors import LayoutNotFoundError
from .window import Dimension


DEFAULT_STASH_WORKSPACE = "S"
DEFAULT_POLL_INTERVAL_MS = 100
DEFAULT_MAX_ATTEMPTS = 30

_SIZE_PATTERN = re.compile(r"^\s*(\d+)\s*/\s*(\d+)\s*$")
_BUNDLE_KEYS = ("bundleId", "applicationId", "bundle_id")


class LayoutMode(str, Enum):
    """Workspace/container layouts understood by `aerospace layout`."""

    H_TILES = "h_tiles"
    V_TILES = "v_tiles"
    H_ACCORDION = "h_accordion"
    V_ACCORDION = "v_accordion"
    TILES = "tiles"
    ACCORDION = "accordion"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    TILING = "tiling"
    FLOATING = "floating"


class Orientation(str, Enum):
    """Split orientation of a layout or group."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    def dimension(self) -> Dimension:
        """Window dimension a size fraction applies to under this orientation."""
        if self == Orientation.HORIZONTAL:
            return Dimension.WIDTH
        return Dimension.HEIGHT


class Size(BaseModel):
    """Positive fraction of a display dimension, written "numerator/denominator"."""

    model_config = ConfigDict(frozen=True)

    numerator: int = Field(..., gt=0)
    denominator: int = Field(..., gt=0)

    @classmethod
    def parse(cls, value: str) -> "Size":
        """Parse a "n/d" string.

        Raises:
            ValueError: If the string is not two positive integers around a slash
        """
        match = _SIZE_PATTERN.match(value)
        if not match:
            raise ValueError(f"Invalid size '{value}': expected 'numerator/denominator'")
        return cls(numerator=int(match.group(1)), denominator=int(match.group(2)))

    def pixels_of(self, extent: int) -> int:
        """floor(extent * numerator / denominator), exact in integer arithmetic."""
        return extent * self.numerator // self.denominator

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"


def _coerce_size(value: Any) -> Any:
    if isinstance(value, str):
        return Size.parse(value)
    return value


class WindowItem(BaseModel):
    """Leaf: every window of one application."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: Literal["window"] = "window"
    bundle_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices(*_BUNDLE_KEYS),
        description="Application bundle identifier",
    )
    size: Optional[Size] = Field(None, description="Fraction of the parent dimension")

    @field_validator("size", mode="before")
    @classmethod
    def parse_size(cls, v: Any) -> Any:
        return _coerce_size(v)

    @field_validator("bundle_id")
    @classmethod
    def validate_bundle_id(cls, v: str) -> str:
        """Validate bundle id is not blank."""
        if not v.strip():
            raise ValueError("Bundle id cannot be empty")
        return v.strip()


class GroupItem(BaseModel):
    """Internal node: a nested split of child items."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: Literal["group"] = "group"
    orientation: Orientation
    layout_mode: Optional[LayoutMode] = Field(
        None,
        validation_alias=AliasChoices("layout", "layout_mode"),
        description="Layout applied to the group's last placed window",
    )
    size: Optional[Size] = Field(None, description="Fraction applied to the group's first window")
    windows: List["LayoutItem"] = Field(..., min_length=1)

    @field_validator("size", mode="before")
    @classmethod
    def parse_size(cls, v: Any) -> Any:
        return _coerce_size(v)


def _item_kind(value: Any) -> Optional[str]:
    """Structural discriminator for raw config objects.

    Returns None (a validation error) when an object looks like both a window
    and a group, or like neither.
    """
    if isinstance(value, dict):
        if "kind" in value:
            return value["kind"]
        is_group = "windows" in value
        is_window = any(key in value for key in _BUNDLE_KEYS)
        if is_group == is_window:
            return None
        return "group" if is_group else "window"
    return getattr(value, "kind", None)


LayoutItem = Annotated[
    Union[
        Annotated[WindowItem, Tag("window")],
        Annotated[GroupItem, Tag("group")],
    ],
    Discriminator(
        _item_kind,
        custom_error_type="layout_item",
        custom_error_message="Layout item needs exactly one of 'bundleId' or 'windows'",
    ),
]

GroupItem.model_rebuild()


class Layout(BaseModel):
    """One named layout: a target workspace and the tree to build in it."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    workspace: str = Field(..., min_length=1, description="Target workspace name")
    layout_mode: LayoutMode = Field(
        ...,
        validation_alias=AliasChoices("layout", "layout_mode"),
        description="Layout applied to the workspace root",
    )
    orientation: Orientation = Field(..., description="Root orientation")
    windows: List[LayoutItem] = Field(default_factory=list)
    display: Optional[Union[int, str]] = Field(
        None, description="Display alias, name pattern, or numeric id"
    )

    @field_validator("workspace", mode="before")
    @classmethod
    def coerce_workspace(cls, v: Any) -> Any:
        """Allow numeric workspace names."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class LayoutConfig(BaseModel):
    """Top-level layout configuration file."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    stash_workspace: str = Field(
        DEFAULT_STASH_WORKSPACE,
        alias="stashWorkspace",
        min_length=1,
        description="Workspace displaced windows are parked on",
    )
    launch_poll_interval_ms: int = Field(
        DEFAULT_POLL_INTERVAL_MS,
        alias="launchPollIntervalMs",
        gt=0,
        description="Delay between window lookups after a launch",
    )
    launch_max_attempts: int = Field(
        DEFAULT_MAX_ATTEMPTS,
        alias="launchMaxAttempts",
        ge=1,
        description="Window lookups before giving up on an application",
    )
    layouts: Dict[str, Layout] = Field(default_factory=dict)

    @field_validator("stash_workspace", mode="before")
    @classmethod
    def coerce_stash_workspace(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    def layout_names(self) -> List[str]:
        return list(self.layouts.keys())

    def get_layout(self, name: str) -> Layout:
        """Look up a layout by name.

        Raises:
            LayoutNotFoundError: If no layout has this name
        """
        try:
            return self.layouts[name]
        except KeyError:
            raise LayoutNotFoundError(name, self.layout_names())
