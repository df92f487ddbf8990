"""Window lookup and application launch for layout items.

Applications are identified by bundle id. Window ids are never cached: every
lookup re-queries aerospace because ids can change between passes.
"""

import asyncio
import logging
from typing import List, Optional

from ..errors import CommandError, WindowManagerError
from ..models.layout import DEFAULT_MAX_ATTEMPTS, DEFAULT_POLL_INTERVAL_MS
from .aerospace_client import AeroSpaceClient
from .runner import CommandRunner

logger = logging.getLogger(__name__)


class WindowLocator:
    """Finds application windows, launching applications when needed."""

    def __init__(
        self,
        client: AeroSpaceClient,
        runner: Optional[CommandRunner] = None,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        """Initialize window locator.

        Args:
            client: aerospace client used for window queries
            runner: Command runner for osascript/open (default: the client's runner)
            poll_interval_ms: Default delay between lookups in ensure()
            max_attempts: Default lookup ceiling in ensure()
        """
        self.client = client
        self.runner = runner or client.runner
        self.poll_interval_ms = poll_interval_ms
        self.max_attempts = max_attempts

    async def find(self, bundle_id: str) -> List[int]:
        """Return ids of all open windows of an application, on any monitor.

        Never raises; a failed query is logged and yields an empty list.
        """
        try:
            windows = await self.client.list_app_windows(bundle_id)
        except WindowManagerError as e:
            logger.debug(f"Window lookup failed for {bundle_id}: {e.message}")
            return []

        window_ids = [w.window_id for w in windows]
        if not window_ids:
            logger.debug(f"No window found for {bundle_id}")
        return window_ids

    async def is_running(self, bundle_id: str) -> bool:
        """Check whether the application process is active."""
        try:
            result = await self.runner.run(
                "osascript", "-e", f'application id "{bundle_id}" is running', check=False
            )
        except CommandError as e:
            logger.debug(f"Running probe failed for {bundle_id}: {e.message}")
            return False
        return result.returncode == 0 and result.stdout.strip() == "true"

    async def ensure_running(self, bundle_id: str) -> None:
        """Launch the application if it is not running.

        The launch is fire-and-forget: failures are logged, and ensure() will
        simply find no window.
        """
        if await self.is_running(bundle_id):
            logger.debug(f"{bundle_id} is already running")
            return

        if self.client.dry_run:
            logger.info(f"[dry-run] open -b {bundle_id}")
            return

        logger.info(f"Launching {bundle_id}")
        try:
            await self.runner.run("open", "-b", bundle_id)
        except CommandError as e:
            logger.error(f"Failed to launch {bundle_id}: {e.message}")

    async def ensure(
        self,
        bundle_id: str,
        poll_interval_ms: Optional[int] = None,
        max_attempts: Optional[int] = None,
    ) -> List[int]:
        """Make sure an application has at least one window and return its ids.

        Args:
            bundle_id: Application bundle identifier
            poll_interval_ms: Delay between lookups (default: locator setting)
            max_attempts: Lookup ceiling (default: locator setting)

        Returns:
            Window ids, or an empty list if none appeared before the ceiling
        """
        interval = self.poll_interval_ms if poll_interval_ms is None else poll_interval_ms
        attempts = self.max_attempts if max_attempts is None else max_attempts

        await self.ensure_running(bundle_id)

        for attempt in range(1, attempts + 1):
            window_ids = await self.find(bundle_id)
            if window_ids:
                if attempt > 1:
                    logger.info(f"{bundle_id} window appeared after {attempt} lookups")
                return window_ids
            if attempt < attempts:
                await asyncio.sleep(interval / 1000)

        logger.warning(f"No window for {bundle_id} after {attempts} lookups")
        return []
