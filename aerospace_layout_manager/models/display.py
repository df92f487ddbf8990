"""Display inventory models.

A display inventory is fetched once per run and never mutated; the layout
engine only reads the pixel extent of the one display the selector resolved to.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .window import Dimension


class DisplayAlias(str, Enum):
    """Symbolic display selectors accepted in a layout's `display` field."""

    MAIN = "main"
    SECONDARY = "secondary"
    EXTERNAL = "external"
    INTERNAL = "internal"

    @classmethod
    def parse(cls, value: str) -> Optional["DisplayAlias"]:
        """Parse alias from string (case-insensitive).

        Returns:
            DisplayAlias, or None if value is not an alias
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class DisplayInfo(BaseModel):
    """Physical display attached to the system.

    Immutable after creation (frozen).
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[int] = Field(None, description="CoreGraphics display ID")
    name: str = Field(..., min_length=1, description="Display name (e.g. 'Built-in Retina Display')")
    width: int = Field(..., gt=0, description="Width in points")
    height: int = Field(..., gt=0, description="Height in points")
    is_main: bool = Field(False, description="Display holds the menu bar")
    is_internal: bool = Field(False, description="Built-in laptop panel")

    @property
    def resolution(self) -> str:
        return f"{self.width}×{self.height}"

    def extent(self, dimension: Dimension) -> int:
        """Pixel extent of this display along a window dimension."""
        if dimension == Dimension.WIDTH:
            return self.width
        return self.height
