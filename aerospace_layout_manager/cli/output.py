"""
Rich-formatted terminal output for CLI commands.

Display tables, run summaries and errors with remediation hints.
"""

from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.layout_engine import LayoutRunReport
from ..errors import LayoutManagerError
from ..models.display import DisplayInfo
from ..models.layout import LayoutConfig


def _yes_no(value: bool) -> str:
    return "[green]Yes[/green]" if value else "[dim]No[/dim]"


def display_displays(displays: List[DisplayInfo], console: Optional[Console] = None) -> None:
    """
    Display attached displays in a table.

    Args:
        displays: Display inventory
        console: Rich console (optional, creates new if not provided)
    """
    if console is None:
        console = Console()

    table = Table(title="Displays")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Name")
    table.add_column("Resolution", justify="right")
    table.add_column("Main", justify="center")
    table.add_column("Internal", justify="center")

    for display in displays:
        table.add_row(
            str(display.id) if display.id is not None else "-",
            display.name,
            display.resolution,
            _yes_no(display.is_main),
            _yes_no(display.is_internal),
        )

    console.print(table)


def display_layout_names(config: LayoutConfig, console: Optional[Console] = None) -> None:
    """Print layout names one per line, for scripting and completion."""
    if console is None:
        console = Console()

    for name in config.layout_names():
        console.print(name, markup=False, highlight=False)


def display_report(
    report: LayoutRunReport,
    layout_name: str,
    display: DisplayInfo,
    console: Optional[Console] = None,
    dry_run: bool = False
) -> None:
    """
    Summarise a finished layout run.

    Args:
        report: Run report from LayoutEngine.apply
        layout_name: Name of the applied layout
        display: Display the layout was sized against
        console: Rich console (optional, creates new if not provided)
        dry_run: Whether mutating commands were skipped
    """
    if console is None:
        console = Console()

    prefix = "[yellow]\\[dry-run][/yellow] " if dry_run else ""
    console.print(
        f"{prefix}[green]✓[/green] Applied layout [bold]{layout_name}[/bold] "
        f"to workspace {report.workspace} on {display.name} ({display.resolution})"
    )
    console.print(
        f"  [dim]{len(report.placed)} window(s) placed, "
        f"{len(report.stashed)} stashed, {len(report.resized)} resized[/dim]"
    )

    if report.unresolved:
        console.print(f"  [yellow]⚠ No window for:[/yellow] {', '.join(report.unresolved)}")

    for failure in report.failures:
        console.print(f"  [yellow]⚠[/yellow] {escape(failure)}")


def print_error(error: LayoutManagerError, console: Optional[Console] = None) -> None:
    """Print an error with its remediation hint."""
    if console is None:
        console = Console(stderr=True)

    console.print(f"[red]✗ Error:[/red] {escape(error.message)}", highlight=False)
    if error.suggestion:
        console.print(f"[blue]  Remediation:[/blue] {escape(error.suggestion)}", highlight=False)
