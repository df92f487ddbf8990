"""Unit tests for display enumeration and selector resolution."""

import pytest

from aerospace_layout_manager.core.display_resolver import DisplayResolver, parse_display_entry
from aerospace_layout_manager.errors import (
    AmbiguousExternal,
    AmbiguousOrMissingMain,
    AmbiguousSecondary,
    CommandError,
    DisplayIdNotFound,
    DisplayNameNotFound,
    NoDisplaysFound,
    NoInternalDisplay,
)
from aerospace_layout_manager.models.display import DisplayAlias, DisplayInfo


SYSTEM_PROFILER_OUTPUT = {
    "SPDisplaysDataType": [
        {
            "_name": "Apple M2 Pro",
            "spdisplays_ndrvs": [
                {
                    "_name": "Color LCD",
                    "_spdisplays_displayID": "1",
                    "_spdisplays_resolution": "1512 x 982 @ 120.00Hz",
                    "spdisplays_connection_type": "spdisplays_internal",
                    "spdisplays_main": "spdisplays_yes",
                },
                {
                    "_name": "LG HDR 4K",
                    "_spdisplays_displayID": "3",
                    "_spdisplays_pixels": "3840 x 2160",
                },
                {
                    "_name": "Sleeping Panel",
                },
            ],
        }
    ]
}


@pytest.fixture
def resolver(mock_runner) -> DisplayResolver:
    return DisplayResolver(mock_runner)


def _display(display_id, name, main=False, internal=False, width=1920, height=1080) -> DisplayInfo:
    return DisplayInfo(id=display_id, name=name, width=width, height=height, is_main=main, is_internal=internal)


class TestEnumerate:
    """Test display inventory parsing."""

    @pytest.mark.asyncio
    async def test_enumerate_parses_profiler_output(self, resolver, mock_runner):
        mock_runner.run_json.return_value = SYSTEM_PROFILER_OUTPUT

        displays = await resolver.enumerate()

        mock_runner.run_json.assert_awaited_once_with("system_profiler", "SPDisplaysDataType", "-json")
        assert [d.name for d in displays] == ["Color LCD", "LG HDR 4K"]

        laptop, external = displays
        assert (laptop.id, laptop.width, laptop.height) == (1, 1512, 982)
        assert laptop.is_main and laptop.is_internal
        assert (external.id, external.width, external.height) == (3, 3840, 2160)
        assert not external.is_main and not external.is_internal

    @pytest.mark.asyncio
    async def test_enumerate_empty_raises(self, resolver, mock_runner):
        mock_runner.run_json.return_value = {"SPDisplaysDataType": []}

        with pytest.raises(NoDisplaysFound):
            await resolver.enumerate()

    @pytest.mark.asyncio
    async def test_enumerate_query_failure_raises(self, resolver, mock_runner):
        mock_runner.run_json.side_effect = CommandError(["system_profiler"], 1, "boom")

        with pytest.raises(NoDisplaysFound):
            await resolver.enumerate()

    def test_builtin_name_marks_internal(self):
        display = parse_display_entry({"_name": "Built-in Retina Display", "_spdisplays_resolution": "1512 x 982"})
        assert display.is_internal
        assert display.id is None

    def test_entry_without_resolution_skipped(self):
        assert parse_display_entry({"_name": "Mirror"}) is None


class TestResolveMain:
    """Test default and 'main' resolution."""

    def test_none_selects_main(self, resolver, laptop_displays):
        assert resolver.resolve(None, laptop_displays).name == "Built-in Retina Display"

    def test_main_alias(self, resolver, laptop_displays):
        assert resolver.resolve("main", laptop_displays).id == 1
        assert resolver.resolve(DisplayAlias.MAIN, laptop_displays).id == 1

    def test_no_main_raises(self, resolver):
        displays = [_display(1, "A"), _display(2, "B")]
        with pytest.raises(AmbiguousOrMissingMain):
            resolver.resolve(None, displays)

    def test_two_mains_raise(self, resolver):
        displays = [_display(1, "A", main=True), _display(2, "B", main=True)]
        with pytest.raises(AmbiguousOrMissingMain):
            resolver.resolve("main", displays)

    def test_empty_inventory_raises(self, resolver):
        with pytest.raises(NoDisplaysFound):
            resolver.resolve(None, [])


class TestResolveAliases:
    """Test secondary, external and internal aliases."""

    def test_secondary_single_display_falls_back_to_main(self, resolver, main_display):
        assert resolver.resolve("secondary", [main_display]) == main_display

    def test_secondary_two_displays(self, resolver, laptop_displays):
        assert resolver.resolve("secondary", laptop_displays).name == "DELL U2720Q"

    def test_secondary_three_displays_ambiguous(self, resolver, laptop_displays):
        displays = laptop_displays + [_display(3, "LG UltraFine")]
        with pytest.raises(AmbiguousSecondary):
            resolver.resolve("secondary", displays)

    def test_external_single(self, resolver, laptop_displays):
        assert resolver.resolve("external", laptop_displays).id == 2

    def test_external_none_falls_back_to_main(self, resolver):
        laptop = _display(1, "Built-in Retina Display", main=True, internal=True)
        assert resolver.resolve("external", [laptop]) == laptop

    def test_external_two_ambiguous(self, resolver, laptop_displays):
        displays = laptop_displays + [_display(3, "LG UltraFine")]
        with pytest.raises(AmbiguousExternal):
            resolver.resolve("external", displays)

    def test_internal(self, resolver, laptop_displays):
        assert resolver.resolve("internal", laptop_displays).is_internal

    def test_internal_missing_raises(self, resolver, main_display):
        with pytest.raises(NoInternalDisplay):
            resolver.resolve("internal", [main_display])

    def test_alias_case_insensitive(self, resolver, laptop_displays):
        assert resolver.resolve("External", laptop_displays).id == 2


class TestResolveIdAndName:
    """Test numeric id and name pattern selectors."""

    def test_integer_id(self, resolver, laptop_displays):
        assert resolver.resolve(2, laptop_displays).name == "DELL U2720Q"

    def test_numeric_string_id(self, resolver, laptop_displays):
        assert resolver.resolve("2", laptop_displays).name == "DELL U2720Q"

    def test_unknown_id_raises(self, resolver, laptop_displays):
        with pytest.raises(DisplayIdNotFound):
            resolver.resolve(9, laptop_displays)

    def test_name_substring_case_insensitive(self, resolver, laptop_displays):
        assert resolver.resolve("dell", laptop_displays).id == 2

    def test_name_regex(self, resolver, laptop_displays):
        assert resolver.resolve(r"U27\d+Q", laptop_displays).id == 2

    def test_first_match_wins(self, resolver):
        displays = [_display(1, "DELL P2419H", main=True), _display(2, "DELL U2720Q")]
        assert resolver.resolve("dell", displays).id == 1

    def test_unknown_name_raises(self, resolver, laptop_displays):
        with pytest.raises(DisplayNameNotFound) as exc_info:
            resolver.resolve("Pro Display XDR", laptop_displays)
        assert "--list-displays" in exc_info.value.suggestion

    def test_invalid_regex_without_substring_match_raises(self, resolver, laptop_displays):
        with pytest.raises(DisplayNameNotFound):
            resolver.resolve("[unclosed", laptop_displays)
