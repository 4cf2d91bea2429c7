"""
Workspace configuration — ``toolconf.yml`` into a ToolContext.

The file is optional.  When present, its folder is the workspace root
and relative ``settings`` / ``conf`` / ``software`` entries are taken
relative to it.  Everything else is validated by the ToolContext model.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from toolconf.core.context import ToolContext

logger = logging.getLogger(__name__)

WORKSPACE_CONFIG_FILE = "toolconf.yml"

# YAML key → ToolContext field
_FOLDER_KEYS = {
    "settings": "settings_path",
    "conf": "conf_path",
    "software": "software_path",
}


class ConfigError(Exception):
    """``toolconf.yml`` is missing, unreadable or invalid."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """The nearest ``toolconf.yml`` in ``start_dir`` or one of its parents."""
    start = (start_dir or Path.cwd()).resolve()
    for folder in (start, *start.parents):
        candidate = folder / WORKSPACE_CONFIG_FILE
        if candidate.is_file():
            return candidate
    return None


def load_context(path: Path | None = None, *, search: bool = True) -> ToolContext:
    """Build the ToolContext for a workspace.

    Args:
        path: Explicit ``toolconf.yml``; it must exist.
        search: Without ``path``, look for the file upward from the cwd.
            No file at all means the cwd is the workspace root.

    Raises:
        ConfigError: The explicit file is missing, or a file is invalid.
    """
    if path is None and search:
        path = find_config_file()
    if path is None:
        logger.debug("No %s, workspace is %s", WORKSPACE_CONFIG_FILE, Path.cwd())
        return ToolContext(workspace_root=Path.cwd())

    root = workspace_root(path)
    fields: dict[str, Any] = {"workspace_root": root}
    for key, value in _read_mapping(path).items():
        if key in _FOLDER_KEYS:
            folder = Path(str(value)).expanduser()
            fields[_FOLDER_KEYS[key]] = folder if folder.is_absolute() else root / folder
        else:
            fields[key] = value

    try:
        context = ToolContext.model_validate(fields)
    except ValidationError as e:
        raise ConfigError(f"Invalid workspace configuration in {path}: {e}") from e
    logger.info("Workspace %s (from %s)", root, path)
    return context


def workspace_root(config_path: Path) -> Path:
    """The folder holding ``config_path``."""
    return config_path.parent.resolve()


def _read_mapping(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must hold a YAML mapping, not {type(data).__name__}")
    return data
