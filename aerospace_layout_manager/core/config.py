"""Layout configuration loading.

Reads the JSON layout file (default ~/.config/aerospace/layouts.json) into a
validated LayoutConfig.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from ..errors import ConfigError
from ..models.layout import LayoutConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "~/.config/aerospace/layouts.json"


def expand_config_path(path: Optional[Union[str, Path]] = None) -> Path:
    """Expand ~ and environment variables in a config path."""
    raw = str(path) if path is not None else DEFAULT_CONFIG_PATH
    return Path(os.path.expanduser(os.path.expandvars(raw.strip())))


def _format_validation_error(error: ValidationError) -> str:
    lines = []
    for err in error.errors():
        location = ".".join(str(part) for part in err["loc"]) or "<root>"
        lines.append(f"  {location}: {err['msg']}")
    return "\n".join(lines)


def load_config(path: Optional[Union[str, Path]] = None) -> LayoutConfig:
    """
    Load and validate the layout configuration file.

    Args:
        path: Config file path (default: ~/.config/aerospace/layouts.json)

    Returns:
        Validated LayoutConfig

    Raises:
        ConfigError: If the file is missing, not JSON, or fails validation
    """
    config_path = expand_config_path(path)

    if not config_path.exists():
        raise ConfigError(
            f"Config file not found: {config_path}",
            suggestion="Create it or pass --config-file",
            context={"path": str(config_path)},
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(
            f"Invalid JSON in {config_path}: {e}",
            context={"path": str(config_path), "line": e.lineno},
        )
    except UnicodeDecodeError as e:
        raise ConfigError(
            f"Config file {config_path} is not valid UTF-8: {e.reason} at byte {e.start}",
            suggestion="Save the layouts file with UTF-8 encoding",
            context={"path": str(config_path)},
        )
    except OSError as e:
        raise ConfigError(f"Cannot read {config_path}: {e}", context={"path": str(config_path)})

    try:
        config = LayoutConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid layout configuration in {config_path}:\n{_format_validation_error(e)}",
            suggestion="Each window needs 'bundleId'; each group needs 'orientation' and 'windows'",
            context={"path": str(config_path), "errors": e.error_count()},
        )

    logger.debug(f"Loaded {len(config.layouts)} layout(s) from {config_path}")
    return config
