"""
Layout application engine.

Applies one Layout to the live AeroSpace session in five strictly ordered
passes:

1. Stash - park every window of the target workspace on the stash workspace
2. Materialize - launch/locate each application and move its windows in
3. Arrange - flatten, set the root layout, then join/move windows into splits
4. Focus - switch to the target workspace
5. Resize - size windows to their declared fraction of the resolved display

Only the materialize placement move is fatal. Every other window manager
failure is logged, recorded in the run report, and the run continues.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Set, Tuple

from ..errors import WindowManagerError
from ..logging_config import log_timing
from ..models.display import DisplayInfo
from ..models.layout import (
    DEFAULT_STASH_WORKSPACE,
    GroupItem,
    Layout,
    LayoutItem,
    Orientation,
    Size,
    WindowItem,
)
from ..models.window import Dimension, Direction
from .aerospace_client import AeroSpaceClient
from .window_locator import WindowLocator

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    """Progress of a layout run. Transitions are strictly sequential."""

    SELECTED = "selected"
    STASHED = "stashed"
    MATERIALIZED = "materialized"
    ARRANGED = "arranged"
    FOCUSED = "focused"
    RESIZED = "resized"
    DONE = "done"


_STATE_ORDER = list(RunState)


@dataclass
class LayoutRunReport:
    """Outcome of one layout run."""
    workspace: str
    state: RunState = RunState.SELECTED
    stashed: List[int] = field(default_factory=list)
    placed: List[int] = field(default_factory=list)
    unresolved: List[str] = field(default_factory=list)
    failures: List[str] = field(default_factory=list)
    resized: Dict[int, str] = field(default_factory=dict)
    # id() of leaves whose application produced no window during materialize
    skipped_leaves: Set[int] = field(default_factory=set, repr=False)

    def is_skipped(self, item: WindowItem) -> bool:
        return id(item) in self.skipped_leaves

    def advance(self, new_state: RunState) -> None:
        """Move to the next state.

        Raises:
            RuntimeError: If new_state is not the immediate successor
        """
        current = _STATE_ORDER.index(self.state)
        if _STATE_ORDER.index(new_state) != current + 1:
            raise RuntimeError(f"Invalid layout run transition: {self.state.value} → {new_state.value}")
        logger.info(f"Layout run on workspace {self.workspace}: {self.state.value} → {new_state.value}")
        self.state = new_state


def compute_resize(size: Size, orientation: Orientation, display: DisplayInfo) -> Tuple[Dimension, int]:
    """Pixel size for a fraction along the dimension an orientation splits.

    The result is floor(extent * numerator / denominator), clamped to
    [1, extent] so fractions above 1 never exceed the display.
    """
    dimension = orientation.dimension()
    extent = display.extent(dimension)
    pixels = size.pixels_of(extent)

    if pixels > extent:
        logger.warning(f"Size {size} exceeds display {dimension.value} ({extent}px), clamping")
        pixels = extent
    elif pixels < 1:
        logger.warning(f"Size {size} of {extent}px rounds to zero, using 1px")
        pixels = 1

    return dimension, pixels


class LayoutEngine:
    """Applies layouts through an AeroSpaceClient and a WindowLocator."""

    def __init__(
        self,
        client: AeroSpaceClient,
        locator: WindowLocator,
        stash_workspace: str = DEFAULT_STASH_WORKSPACE
    ):
        """
        Initialize layout engine.

        Args:
            client: aerospace client for window manager commands
            locator: Window locator for launching and finding applications
            stash_workspace: Workspace displaced windows are moved to
        """
        self.client = client
        self.locator = locator
        self.stash_workspace = stash_workspace

    async def apply(self, layout: Layout, display: DisplayInfo) -> LayoutRunReport:
        """
        Apply a layout using the pixel extents of one resolved display.

        Args:
            layout: Layout to apply
            display: Display selected for the layout

        Returns:
            LayoutRunReport describing what was placed, skipped and failed

        Raises:
            WindowManagerError: If a window cannot be moved onto the target workspace
        """
        report = LayoutRunReport(workspace=layout.workspace)

        with log_timing("Stash pass", logger):
            await self.stash(layout, report)
        report.advance(RunState.STASHED)

        with log_timing("Materialize pass", logger):
            await self.materialize(layout, report)
        report.advance(RunState.MATERIALIZED)

        with log_timing("Arrange pass", logger):
            await self.arrange(layout, report)
        report.advance(RunState.ARRANGED)

        await self.focus(layout, report)
        report.advance(RunState.FOCUSED)

        with log_timing("Resize pass", logger):
            await self.resize(layout, display, report)
        report.advance(RunState.RESIZED)

        report.advance(RunState.DONE)

        if report.unresolved:
            logger.warning(f"Unresolved applications: {', '.join(report.unresolved)}")
        if report.failures:
            logger.warning(f"{len(report.failures)} window manager command(s) failed")

        return report

    async def _best_effort(self, report: LayoutRunReport, description: str, operation) -> bool:
        try:
            await operation
        except WindowManagerError as e:
            logger.warning(f"{description} failed: {e.message}")
            report.failures.append(f"{description}: {e.message}")
            return False
        return True

    # Pass 1

    async def stash(self, layout: Layout, report: LayoutRunReport) -> None:
        """Move every window of the target workspace to the stash workspace."""
        try:
            windows = await self.client.list_windows(layout.workspace)
        except WindowManagerError as e:
            logger.warning(f"Could not list workspace {layout.workspace}: {e.message}")
            report.failures.append(f"List workspace {layout.workspace}: {e.message}")
            return

        for window in windows:
            moved = await self._best_effort(
                report,
                f"Stash window {window.window_id} ({window.app_name})",
                self.client.move_window_to_workspace(window.window_id, self.stash_workspace),
            )
            if moved:
                report.stashed.append(window.window_id)

        logger.info(f"Stashed {len(report.stashed)} window(s) on workspace {self.stash_workspace}")

    # Pass 2

    async def materialize(self, layout: Layout, report: LayoutRunReport) -> None:
        """Make every application's windows members of the target workspace.

        Leaves are visited in pre-order. A leaf whose application shows no
        window is skipped by the later passes; the application is reported
        unresolved only if none of its leaves produced a window.
        """
        resolved: Set[str] = set()
        missing: List[str] = []
        await self._materialize_items(layout.windows, layout.workspace, report, resolved, missing)
        report.unresolved = [bundle_id for bundle_id in missing if bundle_id not in resolved]

    async def _materialize_items(
        self,
        items: Sequence[LayoutItem],
        workspace: str,
        report: LayoutRunReport,
        resolved: Set[str],
        missing: List[str]
    ) -> None:
        for item in items:
            if isinstance(item, GroupItem):
                await self._materialize_items(item.windows, workspace, report, resolved, missing)
                continue

            window_ids = await self.locator.ensure(item.bundle_id)
            if not window_ids:
                logger.warning(f"Skipping {item.bundle_id}: no window appeared")
                report.skipped_leaves.add(id(item))
                if item.bundle_id not in missing:
                    missing.append(item.bundle_id)
                continue

            resolved.add(item.bundle_id)

            for window_id in window_ids:
                try:
                    await self.client.move_window_to_workspace(window_id, workspace)
                except WindowManagerError as e:
                    raise WindowManagerError(
                        f"Failed to move {item.bundle_id} window {window_id} to workspace {workspace}: {e.message}",
                        suggestion="Check that AeroSpace is running and the window still exists",
                        context={"bundle_id": item.bundle_id, "window_id": window_id},
                    )
                report.placed.append(window_id)
                logger.info(f"Placed {item.bundle_id} window {window_id} on workspace {workspace}")

    # Pass 3

    async def arrange(self, layout: Layout, report: LayoutRunReport) -> Optional[int]:
        """Build the declared tiling topology in the target workspace.

        Returns:
            Id of the last window placed at the root level, if any
        """
        await self._best_effort(
            report,
            f"Flatten workspace {layout.workspace}",
            self.client.flatten_workspace_tree(layout.workspace),
        )
        await self._set_workspace_layout(layout, report)
        return await self._arrange_items(layout.windows, report)

    async def _set_workspace_layout(self, layout: Layout, report: LayoutRunReport) -> None:
        try:
            windows = await self.client.list_windows(layout.workspace)
        except WindowManagerError as e:
            logger.warning(f"Could not list workspace {layout.workspace}: {e.message}")
            report.failures.append(f"List workspace {layout.workspace}: {e.message}")
            return

        if not windows:
            logger.warning(f"Workspace {layout.workspace} is empty, not setting layout")
            return

        await self._best_effort(
            report,
            f"Set layout {layout.layout_mode.value} on workspace {layout.workspace}",
            self.client.set_layout_mode(windows[0].window_id, layout.layout_mode),
        )

    async def _arrange_items(self, items: Sequence[LayoutItem], report: LayoutRunReport) -> Optional[int]:
        """Arrange one sibling list and return the last window placed in it.

        The first sibling anchors the split, the second is joined with it, and
        later siblings are moved left next to the joined pane so declaration
        order is preserved.
        """
        last_placed: Optional[int] = None

        for index, item in enumerate(items):
            if isinstance(item, GroupItem):
                logger.debug(f"Group: {item.orientation.value} with {len(item.windows)} item(s)")
                group_last = await self._arrange_items(item.windows, report)
                if group_last is None:
                    continue
                if item.layout_mode is not None:
                    await self._best_effort(
                        report,
                        f"Set group layout {item.layout_mode.value} on window {group_last}",
                        self.client.set_layout_mode(group_last, item.layout_mode),
                    )
                last_placed = group_last
                continue

            if report.is_skipped(item):
                continue

            window_ids = await self.locator.find(item.bundle_id)
            if not window_ids:
                logger.warning(f"No window for {item.bundle_id} during arrange, skipping")
                continue

            if index == 1:
                for window_id in window_ids:
                    await self._best_effort(report, f"Focus window {window_id}", self.client.focus_window(window_id))
                    await self._best_effort(
                        report,
                        f"Join window {window_id} left",
                        self.client.join_with_neighbor(window_id, Direction.LEFT),
                    )
            elif index >= 2:
                for window_id in window_ids:
                    await self._best_effort(report, f"Focus window {window_id}", self.client.focus_window(window_id))
                    await self._best_effort(
                        report,
                        f"Move window {window_id} left",
                        self.client.move_in_direction(window_id, Direction.LEFT),
                    )

            last_placed = window_ids[-1]

        return last_placed

    # Pass 4

    async def focus(self, layout: Layout, report: LayoutRunReport) -> None:
        await self._best_effort(
            report,
            f"Switch to workspace {layout.workspace}",
            self.client.switch_to_workspace(layout.workspace),
        )

    # Pass 5

    async def resize(self, layout: Layout, display: DisplayInfo, report: LayoutRunReport) -> None:
        """Resize windows with a declared size against the resolved display."""
        await self._resize_items(layout.windows, None, layout.orientation, display, report)

    async def _resize_items(
        self,
        items: Sequence[LayoutItem],
        parent: Optional[GroupItem],
        root_orientation: Orientation,
        display: DisplayInfo,
        report: LayoutRunReport
    ) -> None:
        context = parent.orientation if parent is not None else root_orientation

        for item in items:
            if isinstance(item, WindowItem):
                if item.size is not None:
                    await self._resize_window(item, item.size, context, display, report)
                continue

            # A group's size is applied to its leading window as a stand-in
            first = item.windows[0]
            if item.size is not None and isinstance(first, WindowItem):
                orientation = parent.orientation if parent is not None else item.orientation
                await self._resize_window(first, item.size, orientation, display, report)

            await self._resize_items(item.windows, item, root_orientation, display, report)

    async def _resize_window(
        self,
        item: WindowItem,
        size: Size,
        orientation: Orientation,
        display: DisplayInfo,
        report: LayoutRunReport
    ) -> None:
        if report.is_skipped(item):
            return

        dimension, pixels = compute_resize(size, orientation, display)

        window_ids = await self.locator.find(item.bundle_id)
        if not window_ids:
            logger.warning(f"No window for {item.bundle_id} during resize, skipping")
            return

        for window_id in window_ids:
            resized = await self._best_effort(
                report,
                f"Resize window {window_id} {dimension.value} to {pixels}",
                self.client.resize_window_dimension(window_id, dimension, pixels),
            )
            if resized:
                report.resized[window_id] = f"{dimension.value}={pixels}"
                logger.info(f"Resized {item.bundle_id} window {window_id}: {dimension.value}={pixels}px ({size})")
