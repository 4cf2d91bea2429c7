"""
Tool context — the single value describing "which workspace are we provisioning."

Every core service receives a ToolContext explicitly.  It is built
ONCE by whichever entry point launches the work:

    - CLI:    main.py   → load_context(config_path)
    - Tests:  fixtures  → ToolContext(workspace_root=tmp_path)

Design notes:
    - Paths left unset default to folders below ``workspace_root``
      (``settings/``, ``conf/``, ``software/``).
    - The settings template root is probed, not configured: the
      current ``templates`` folder wins over the legacy ``devon`` one.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, model_validator

from toolconf.core.services.folder_resolver import probe_folders

logger = logging.getLogger(__name__)

# Well-known folder names
FOLDER_SETTINGS = "settings"
FOLDER_CONF = "conf"
FOLDER_SOFTWARE = "software"
FOLDER_TEMPLATES = "templates"
FOLDER_LEGACY_TEMPLATES = "devon"

DEFAULT_SETTINGS_GIT_URL = "https://github.com/devonfw/ide-settings.git"
DOCUMENTATION_PAGE_CONF = "https://github.com/devonfw/IDEasy/blob/main/documentation/conf.adoc"

_DEFAULT_FOLDERS = {
    "settings_path": FOLDER_SETTINGS,
    "conf_path": FOLDER_CONF,
    "software_path": FOLDER_SOFTWARE,
}


class ToolSettings(BaseModel):
    """Per-tool overrides from the workspace configuration."""

    executable: str | None = None


class ToolContext(BaseModel):
    """Explicit workspace configuration passed into each component."""

    workspace_root: Path
    settings_path: Path
    conf_path: Path
    software_path: Path

    default_settings_url: str = DEFAULT_SETTINGS_GIT_URL
    variables: dict[str, str] = Field(default_factory=dict)
    tools: dict[str, ToolSettings] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _fill_default_paths(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("workspace_root") is None:
            return data
        root = Path(data["workspace_root"])
        filled = dict(data)
        for field, folder in _DEFAULT_FOLDERS.items():
            if filled.get(field) is None:
                filled[field] = root / folder
        return filled

    @property
    def settings_template_path(self) -> Path | None:
        """The templates folder of the settings repository, or None."""
        found = probe_folders(
            self.settings_path,
            [FOLDER_TEMPLATES, FOLDER_LEGACY_TEMPLATES],
        )
        if found is None:
            logger.debug("No settings templates below %s", self.settings_path)
            return None
        return found.path

    @property
    def state_dir(self) -> Path:
        """Local, unshared state (audit ledger)."""
        return self.workspace_root / ".state"

    def tool_path(self, tool: str) -> Path:
        """Installation root of a tool below the software folder."""
        return self.software_path / tool

    def tool_executable(self, tool: str) -> str | None:
        """Configured executable override for a tool, if any."""
        settings = self.tools.get(tool)
        return settings.executable if settings else None
