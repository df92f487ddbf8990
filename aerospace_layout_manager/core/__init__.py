"""Core services: command runner, aerospace client, display resolver,
window locator and layout engine."""

from .aerospace_client import AeroSpaceClient
from .config import DEFAULT_CONFIG_PATH, load_config
from .display_resolver import DisplayResolver
from .layout_engine import LayoutEngine, LayoutRunReport, RunState, compute_resize
from .runner import CommandResult, CommandRunner
from .window_locator import WindowLocator

__all__ = [
    "AeroSpaceClient",
    "CommandResult",
    "CommandRunner",
    "DEFAULT_CONFIG_PATH",
    "DisplayResolver",
    "LayoutEngine",
    "LayoutRunReport",
    "RunState",
    "WindowLocator",
    "compute_resize",
    "load_config",
]
