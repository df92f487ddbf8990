"""Pytest configuration and fixtures for layout manager tests."""

import sys
from pathlib import Path
from typing import Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add repository root to Python path BEFORE test collection
package_root = Path(__file__).parent.parent
if str(package_root) not in sys.path:
    sys.path.insert(0, str(package_root))

from aerospace_layout_manager.core.aerospace_client import AeroSpaceClient  # noqa: E402
from aerospace_layout_manager.core.runner import CommandResult, CommandRunner  # noqa: E402
from aerospace_layout_manager.core.window_locator import WindowLocator  # noqa: E402
from aerospace_layout_manager.models.display import DisplayInfo  # noqa: E402
from aerospace_layout_manager.models.layout import Layout  # noqa: E402


@pytest.fixture
def main_display() -> DisplayInfo:
    """Single main display, 1920×1080."""
    return DisplayInfo(id=1, name="Studio Display", width=1920, height=1080, is_main=True)


@pytest.fixture
def laptop_displays() -> List[DisplayInfo]:
    """Built-in panel (main) plus one external monitor."""
    return [
        DisplayInfo(id=1, name="Built-in Retina Display", width=1512, height=982,
                    is_main=True, is_internal=True),
        DisplayInfo(id=2, name="DELL U2720Q", width=2560, height=1440),
    ]


@pytest.fixture
def mock_runner() -> AsyncMock:
    """CommandRunner mock whose commands succeed with empty output."""
    runner = AsyncMock(spec=CommandRunner)
    runner.run.return_value = CommandResult(command=[], returncode=0, stdout="", stderr="")
    runner.run_json.return_value = []
    return runner


@pytest.fixture
def window_registry() -> Dict[str, List[int]]:
    """Bundle id → window ids answered by the mock locator. Tests fill it in."""
    return {}


@pytest.fixture
def session(window_registry):
    """Mock aerospace client and window locator sharing one call log.

    `session.mock_calls` records client and locator calls in order, as
    call.client.<method>(...) and call.locator.<method>(...).
    """
    manager = MagicMock()

    client = AsyncMock(spec=AeroSpaceClient)
    client.list_windows.return_value = []

    locator = AsyncMock(spec=WindowLocator)
    locator.ensure.side_effect = lambda bundle_id, *args, **kwargs: list(window_registry.get(bundle_id, []))
    locator.find.side_effect = lambda bundle_id: list(window_registry.get(bundle_id, []))

    manager.attach_mock(client, "client")
    manager.attach_mock(locator, "locator")
    return manager


@pytest.fixture
def make_layout():
    """Factory building a Layout from config-style dicts."""
    def _make(windows, workspace="1", layout="v_tiles", orientation="horizontal", display=None) -> Layout:
        data = {
            "workspace": workspace,
            "layout": layout,
            "orientation": orientation,
            "windows": windows,
        }
        if display is not None:
            data["display"] = display
        return Layout.model_validate(data)

    return _make
