"""
Folder resolver — pick the authoritative configuration folder.

A tool's configuration may live in the current layout (e.g. ``conf/mvn``)
or in a legacy layout (e.g. ``conf/.m2``).  Resolution is a priority
ordered probe over candidate folder names: the first one that exists
as a directory wins.  The current layout is always probed first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Sequence

logger = logging.getLogger(__name__)


class ConfigLayout(str, Enum):
    """Configuration directory layout, in order of preference."""

    CURRENT = "current"
    LEGACY = "legacy"


@dataclass(frozen=True)
class ResolvedFolder:
    """Outcome of a folder probe."""

    path: Path
    layout: ConfigLayout
    created: bool = False

    @property
    def legacy(self) -> bool:
        return self.layout is ConfigLayout.LEGACY


# Layout of each probe position: first candidate is CURRENT, rest are LEGACY.
def _layout_at(index: int) -> ConfigLayout:
    return ConfigLayout.CURRENT if index == 0 else ConfigLayout.LEGACY


def probe_folders(base_path: Path, names: Sequence[str]) -> ResolvedFolder | None:
    """Return the first ``base_path/<name>`` that is a directory.

    Args:
        base_path: Directory holding the candidates.
        names: Candidate folder names, most preferred first.

    Returns:
        The winning folder, or None when no candidate exists.
    """
    for index, name in enumerate(names):
        candidate = base_path / name
        if candidate.is_dir():
            return ResolvedFolder(path=candidate, layout=_layout_at(index))
    return None


def resolve_config_folder(
    base_path: Path,
    preferred_name: str,
    legacy_name: str,
    create_if_missing: bool = True,
    legacy_mode: bool = False,
) -> ResolvedFolder | None:
    """Resolve the configuration folder of a tool below ``base_path``.

    Precedence: existing preferred folder, then existing legacy folder,
    then a newly created folder.  The new folder uses the preferred name
    unless ``legacy_mode`` asks to keep the legacy layout.

    Args:
        base_path: Parent directory (e.g. the ``conf`` folder).
        preferred_name: Folder name of the current layout.
        legacy_name: Folder name of the legacy layout.
        create_if_missing: Create a folder when none exists.
        legacy_mode: Create the legacy folder instead of the preferred one.

    Returns:
        The resolved folder, or None when nothing exists and creation
        was not requested.
    """
    if not create_if_missing:
        return probe_folders(base_path, [preferred_name, legacy_name])
    return ensure_config_folder(base_path, preferred_name, legacy_name, legacy_mode)


def ensure_config_folder(
    base_path: Path,
    preferred_name: str,
    legacy_name: str,
    legacy_mode: bool = False,
) -> ResolvedFolder:
    """Like ``resolve_config_folder`` with creation, never None.

    Raises:
        OSError: If the folder cannot be created.
    """
    found = probe_folders(base_path, [preferred_name, legacy_name])
    if found is not None:
        return found
    return _create_config_folder(base_path, preferred_name, legacy_name, legacy_mode)


def _create_config_folder(
    base_path: Path, preferred_name: str, legacy_name: str, legacy_mode: bool,
) -> ResolvedFolder:
    layout = ConfigLayout.LEGACY if legacy_mode else ConfigLayout.CURRENT
    folder = base_path / (legacy_name if legacy_mode else preferred_name)
    folder.mkdir(parents=True, exist_ok=True)
    logger.info("Created %s configuration folder %s", layout.value, folder)
    return ResolvedFolder(path=folder, layout=layout, created=True)


def find_template_folder(
    base_path: Path,
    preferred_name: str,
    legacy_name: str,
) -> ResolvedFolder | None:
    """Locate a template folder without ever creating one.

    Missing templates are not an error: the caller skips provisioning.
    """
    found = probe_folders(base_path, [preferred_name, legacy_name])
    if found is None:
        logger.warning(
            "No templates found neither in %s nor in %s - configuration broken",
            base_path / preferred_name,
            base_path / legacy_name,
        )
    return found
