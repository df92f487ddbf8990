"""
AeroSpace Layout Manager CLI

Usage:
    aerospace-layout-manager LAYOUT
    aerospace-layout-manager --layout LAYOUT [--config-file PATH] [--dry-run]
    aerospace-layout-manager --list-layouts
    aerospace-layout-manager --list-displays

Exit codes:
  0 - Layout applied (soft failures are summarised), or listing/help shown
  1 - Fatal error (missing layout, config error, display not resolved)
"""

import asyncio
import logging
import sys
from typing import Optional, Tuple

import click
from rich.console import Console

from ..core.aerospace_client import AeroSpaceClient
from ..core.config import DEFAULT_CONFIG_PATH, load_config
from ..core.display_resolver import DisplayResolver
from ..core.layout_engine import LayoutEngine, LayoutRunReport
from ..core.runner import CommandRunner
from ..core.window_locator import WindowLocator
from ..errors import LayoutManagerError
from ..logging_config import setup_logging
from ..models.display import DisplayInfo
from ..models.layout import LayoutConfig
from . import output

logger = logging.getLogger(__name__)


async def run_layout(
    config: LayoutConfig,
    layout_name: str,
    dry_run: bool = False,
    runner: Optional[CommandRunner] = None
) -> Tuple[LayoutRunReport, DisplayInfo]:
    """
    Resolve the layout's display and apply the layout.

    Args:
        config: Loaded layout configuration
        layout_name: Layout to apply
        dry_run: Log mutating aerospace commands instead of running them
        runner: Command runner (default: new CommandRunner)

    Returns:
        Tuple of (run report, resolved display)

    Raises:
        LayoutNotFoundError: If the layout is not configured
        DisplayResolutionError: If the display selector cannot be resolved
        WindowManagerError: If a window cannot be placed on the workspace
    """
    layout = config.get_layout(layout_name)
    runner = runner or CommandRunner()

    resolver = DisplayResolver(runner)
    displays = await resolver.enumerate()
    display = resolver.resolve(layout.display, displays)

    client = AeroSpaceClient(runner, dry_run=dry_run)
    locator = WindowLocator(
        client,
        runner,
        poll_interval_ms=config.launch_poll_interval_ms,
        max_attempts=config.launch_max_attempts,
    )
    engine = LayoutEngine(client, locator, stash_workspace=config.stash_workspace)

    logger.info(f"Applying layout '{layout_name}' to workspace {layout.workspace}")
    report = await engine.apply(layout, display)
    return report, display


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("layout_arg", metavar="LAYOUT", required=False)
@click.option("-l", "--layout", "layout_name", help="Name of the layout to apply")
@click.option(
    "-c", "--config-file",
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Layout configuration file",
)
@click.option("-L", "--list-layouts", is_flag=True, help="List layout names and exit")
@click.option("-D", "--list-displays", is_flag=True, help="List attached displays and exit")
@click.option("--dry-run", is_flag=True, help="Print aerospace commands instead of running them")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.option("--debug", is_flag=True, help="Debug logging (includes every subprocess call)")
def cli(
    layout_arg: Optional[str],
    layout_name: Optional[str],
    config_file: str,
    list_layouts: bool,
    list_displays: bool,
    dry_run: bool,
    verbose: bool,
    debug: bool,
):
    """
    Apply a declarative window layout to AeroSpace.

    LAYOUT may be given positionally or with --layout; --layout wins.
    """
    setup_logging(verbose=verbose, debug=debug)
    console = Console()
    err_console = Console(stderr=True)

    try:
        if list_displays:
            displays = asyncio.run(DisplayResolver().enumerate())
            output.display_displays(displays, console)
            sys.exit(0)

        config = load_config(config_file)

        if list_layouts:
            output.display_layout_names(config, console)
            sys.exit(0)

        name = layout_name or layout_arg
        if not name:
            raise LayoutManagerError(
                "Layout is required",
                suggestion="Pass a layout name, or use --list-layouts to see available layouts",
            )

        report, display = asyncio.run(run_layout(config, name, dry_run=dry_run))
        output.display_report(report, name, display, console, dry_run=dry_run)
        sys.exit(0)

    except LayoutManagerError as e:
        output.print_error(e, err_console)
        sys.exit(1)
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        err_console.print(f"[red]Unexpected error: {e}[/red]")
        sys.exit(1)
