"""Display inventory and display-selector resolution.

This module enumerates attached displays from `system_profiler` and resolves a
layout's display selector (alias, numeric id, or name pattern) to exactly one
display. The resolved display's extent drives the resize pass.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple, Union

from ..errors import (
    AmbiguousExternal,
    AmbiguousOrMissingMain,
    AmbiguousSecondary,
    CommandError,
    DisplayIdNotFound,
    DisplayNameNotFound,
    NoDisplaysFound,
    NoInternalDisplay,
)
from ..models.display import DisplayAlias, DisplayInfo
from .runner import CommandRunner

logger = logging.getLogger(__name__)

DisplaySelector = Union[int, str, DisplayAlias, None]

_RESOLUTION_PATTERN = re.compile(r"(\d+)\s*x\s*(\d+)")


def _parse_resolution(value: Optional[str]) -> Optional[Tuple[int, int]]:
    """Parse "1512 x 982 @ 120.00Hz" into (1512, 982)."""
    if not value:
        return None
    match = _RESOLUTION_PATTERN.search(value)
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def parse_display_entry(entry: Dict[str, Any]) -> Optional[DisplayInfo]:
    """Convert one `spdisplays_ndrvs` entry into a DisplayInfo.

    Returns None for entries without a usable resolution (e.g. mirrored or
    sleeping displays).
    """
    name = entry.get("_name") or "Unknown Display"
    size = _parse_resolution(entry.get("_spdisplays_resolution")) or _parse_resolution(
        entry.get("_spdisplays_pixels")
    )
    if size is None:
        logger.debug(f"Skipping display without resolution: {name}")
        return None

    display_id: Optional[int] = None
    raw_id = entry.get("_spdisplays_displayID")
    if raw_id is not None:
        try:
            display_id = int(str(raw_id))
        except ValueError:
            logger.debug(f"Ignoring non-numeric display id {raw_id!r} for {name}")

    is_internal = (
        entry.get("spdisplays_connection_type") == "spdisplays_internal"
        or "built-in" in name.lower()
    )

    return DisplayInfo(
        id=display_id,
        name=name,
        width=size[0],
        height=size[1],
        is_main=entry.get("spdisplays_main") == "spdisplays_yes",
        is_internal=is_internal,
    )


class DisplayResolver:
    """Resolves display selectors to physical displays.

    Responsibilities:
    - Enumerate attached displays once per run
    - Map aliases (main/secondary/external/internal) to a display
    - Match numeric ids and name patterns
    - Fall back to the main display where an alias has no candidate
    """

    def __init__(self, runner: Optional[CommandRunner] = None):
        """Initialize display resolver.

        Args:
            runner: Command runner for system_profiler (default: new CommandRunner)
        """
        self.runner = runner or CommandRunner()

    async def enumerate(self) -> List[DisplayInfo]:
        """Return the current display inventory.

        Raises:
            NoDisplaysFound: If the query fails or reports no displays
        """
        try:
            data = await self.runner.run_json("system_profiler", "SPDisplaysDataType", "-json")
        except CommandError as e:
            raise NoDisplaysFound(f"Display query failed: {e.message}")

        displays: List[DisplayInfo] = []
        for gpu in data.get("SPDisplaysDataType", []) if isinstance(data, dict) else []:
            for entry in gpu.get("spdisplays_ndrvs", []):
                display = parse_display_entry(entry)
                if display is not None:
                    displays.append(display)

        if not displays:
            raise NoDisplaysFound()

        logger.info(
            f"Found {len(displays)} display(s): "
            f"{', '.join(f'{d.name} ({d.resolution})' for d in displays)}"
        )
        return displays

    def resolve(self, selector: DisplaySelector, displays: List[DisplayInfo]) -> DisplayInfo:
        """Resolve a display selector to exactly one display.

        Resolution order:
        1. No selector: the main display
        2. Alias: main / secondary / external / internal rules
        3. Integer or numeric string: display id
        4. Any other string: case-insensitive name match

        Args:
            selector: Layout display selector
            displays: Display inventory from enumerate()

        Returns:
            The selected display

        Raises:
            DisplayResolutionError: If the selector does not select exactly one display
        """
        if not displays:
            raise NoDisplaysFound()

        if selector is None:
            display = self._main(displays)
        elif isinstance(selector, bool):
            raise DisplayIdNotFound(f"Invalid display selector: {selector!r}")
        elif isinstance(selector, int):
            display = self._by_id(selector, displays)
        else:
            text = selector.value if isinstance(selector, DisplayAlias) else str(selector).strip()
            alias = DisplayAlias.parse(text)
            if alias is not None:
                display = self._by_alias(alias, displays)
            elif re.fullmatch(r"\d+", text):
                display = self._by_id(int(text), displays)
            else:
                display = self._by_name(text, displays)

        logger.info(f"Display selector {selector!r} → {display.name} ({display.resolution})")
        return display

    def _main(self, displays: List[DisplayInfo]) -> DisplayInfo:
        mains = [d for d in displays if d.is_main]
        if len(mains) != 1:
            raise AmbiguousOrMissingMain(
                f"Expected exactly one main display, found {len(mains)}",
                context={"displays": [d.name for d in displays]},
            )
        return mains[0]

    def _by_alias(self, alias: DisplayAlias, displays: List[DisplayInfo]) -> DisplayInfo:
        if alias == DisplayAlias.MAIN:
            return self._main(displays)

        if alias == DisplayAlias.SECONDARY:
            if len(displays) < 2:
                logger.warning("No secondary display attached, falling back to main display")
                return self._main(displays)
            if len(displays) > 2:
                raise AmbiguousSecondary(
                    f"'secondary' is ambiguous with {len(displays)} displays attached",
                    suggestion="Select the display by name or id instead",
                    context={"displays": [d.name for d in displays]},
                )
            candidates = [d for d in displays if not d.is_main]
            if len(candidates) != 1:
                raise AmbiguousSecondary(
                    f"Expected one non-main display, found {len(candidates)}",
                    context={"displays": [d.name for d in displays]},
                )
            return candidates[0]

        if alias == DisplayAlias.EXTERNAL:
            candidates = [d for d in displays if not d.is_internal]
            if not candidates:
                logger.warning("No external display attached, falling back to main display")
                return self._main(displays)
            if len(candidates) > 1:
                raise AmbiguousExternal(
                    f"'external' is ambiguous with {len(candidates)} external displays attached",
                    suggestion="Select the display by name or id instead",
                    context={"displays": [d.name for d in candidates]},
                )
            return candidates[0]

        for display in displays:
            if display.is_internal:
                return display
        raise NoInternalDisplay(
            "No internal display attached",
            context={"displays": [d.name for d in displays]},
        )

    def _by_id(self, display_id: int, displays: List[DisplayInfo]) -> DisplayInfo:
        for display in displays:
            if display.id == display_id:
                return display
        raise DisplayIdNotFound(
            f"No display with id {display_id}",
            suggestion="Run with --list-displays to see display ids",
            context={"ids": [d.id for d in displays]},
        )

    def _by_name(self, pattern: str, displays: List[DisplayInfo]) -> DisplayInfo:
        needle = pattern.lower()
        matches = [d for d in displays if needle in d.name.lower()]

        if not matches:
            try:
                regex = re.compile(pattern, re.IGNORECASE)
            except re.error:
                regex = None
            if regex is not None:
                matches = [d for d in displays if regex.search(d.name)]

        if not matches:
            raise DisplayNameNotFound(
                f"No display name matches '{pattern}'",
                suggestion="Run with --list-displays to see display names",
                context={"displays": [d.name for d in displays]},
            )

        if len(matches) > 1:
            logger.info(
                f"Display pattern '{pattern}' matches {len(matches)} displays, using {matches[0].name}"
            )
        return matches[0]
