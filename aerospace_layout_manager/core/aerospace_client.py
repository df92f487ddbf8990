"""AeroSpace client for querying and commanding the window manager.

This module provides async wrappers around the `aerospace` CLI for:
- Workspace membership (list-windows --workspace)
- Application windows across monitors (list-windows --app-bundle-id)
- Moving, focusing, joining and directional moves
- Layout mode, tree flattening, workspace switch and resize

Each call is independent and non-transactional. Failures raise
WindowManagerError; the layout engine decides which ones are fatal.
"""

import logging
from typing import Any, List, Optional, Union

from ..errors import CommandError, WindowManagerError
from ..models.layout import LayoutMode
from ..models.window import Dimension, Direction, WindowRef
from .runner import CommandRunner

logger = logging.getLogger(__name__)

AEROSPACE_BINARY = "aerospace"
LIST_WINDOWS_FORMAT = "%{window-id} %{app-name} %{window-title} %{app-bundle-id}"


class AeroSpaceClient:
    """Async wrapper for aerospace commands.

    In dry-run mode, read-only queries still run so the layout can be traced
    against the live session, but mutating commands are only logged.
    """

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        binary: str = AEROSPACE_BINARY,
        dry_run: bool = False
    ):
        """Initialize aerospace client.

        Args:
            runner: Command runner (default: new CommandRunner)
            binary: aerospace executable name or path
            dry_run: Log mutating commands instead of running them
        """
        self.runner = runner or CommandRunner()
        self.binary = binary
        self.dry_run = dry_run

    async def _query(self, *args: Any) -> List[WindowRef]:
        try:
            data = await self.runner.run_json(self.binary, *args)
        except CommandError as e:
            raise WindowManagerError(f"aerospace {args[0]} failed: {e.message}", context=e.context)

        if not isinstance(data, list):
            raise WindowManagerError(f"aerospace {args[0]} returned {type(data).__name__}, expected list")

        windows = []
        for row in data:
            try:
                windows.append(WindowRef.model_validate(row))
            except ValueError as e:
                logger.debug(f"Skipping malformed window row {row!r}: {e}")
        return windows

    async def _command(self, *args: Any) -> None:
        cmd = " ".join(str(arg) for arg in args)
        if self.dry_run:
            logger.info(f"[dry-run] aerospace {cmd}")
            return

        logger.debug(f"aerospace command: {cmd}")
        try:
            await self.runner.run(self.binary, *args)
        except CommandError as e:
            raise WindowManagerError(f"aerospace {cmd} failed: {e.message}", context=e.context)

    async def list_windows(self, workspace: str) -> List[WindowRef]:
        """List windows in a workspace, in tree order.

        Raises:
            WindowManagerError: If the query fails
        """
        windows = await self._query(
            "list-windows", "--workspace", workspace, "--json", "--format", LIST_WINDOWS_FORMAT
        )
        logger.debug(f"Workspace {workspace} has {len(windows)} window(s)")
        return windows

    async def list_app_windows(self, bundle_id: str) -> List[WindowRef]:
        """List windows of one application on all monitors.

        Raises:
            WindowManagerError: If the query fails
        """
        return await self._query(
            "list-windows", "--monitor", "all", "--app-bundle-id", bundle_id, "--json"
        )

    async def move_window_to_workspace(self, window_id: int, workspace: str) -> None:
        await self._command(
            "move-node-to-workspace", "--window-id", window_id, workspace, "--focus-follows-window"
        )

    async def switch_to_workspace(self, workspace: str) -> None:
        await self._command("workspace", workspace)

    async def focus_window(self, window_id: int) -> None:
        await self._command("focus", "--window-id", window_id)

    async def join_with_neighbor(self, window_id: int, direction: Direction) -> None:
        """Join the window with its neighbor, creating a new split container."""
        await self._command("join-with", "--window-id", window_id, Direction(direction).value)

    async def move_in_direction(self, window_id: int, direction: Direction) -> None:
        await self._command("move", "--window-id", window_id, Direction(direction).value)

    async def set_layout_mode(self, window_id: int, mode: Union[LayoutMode, str]) -> None:
        """Set the layout of the container holding the window."""
        await self._command("layout", LayoutMode(mode).value, "--window-id", window_id)

    async def flatten_workspace_tree(self, workspace: str) -> None:
        await self._command("flatten-workspace-tree", "--workspace", workspace)

    async def resize_window_dimension(self, window_id: int, dimension: Dimension, pixels: int) -> None:
        """Resize a window along one dimension to an absolute size.

        The window manager may clamp or snap the value; nothing is read back.
        """
        await self._command("resize", "--window-id", window_id, Dimension(dimension).value, pixels)
