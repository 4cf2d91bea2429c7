"""
Plugin installer — drop a plugin artifact into a tool's extension folder.

The download is delegated to FileAccess; no retries happen here.
Whether the step succeeds is decided by the file being present
afterwards.
"""

from __future__ import annotations

import logging
from pathlib import Path

from toolconf.core.engine.step import Step
from toolconf.core.models.plugin import PluginDescriptor
from toolconf.core.models.tool import MAVEN, ToolProfile
from toolconf.core.services.file_access import FileAccess

logger = logging.getLogger(__name__)


def plugin_path(tool_root: Path, descriptor: PluginDescriptor, profile: ToolProfile = MAVEN) -> Path:
    """Where a plugin artifact is placed below the tool installation."""
    return tool_root / profile.extension_dir / f"{descriptor.name}{profile.extension_suffix}"


def install_plugin(
    descriptor: PluginDescriptor,
    tool_root: Path,
    step: Step,
    file_access: FileAccess | None = None,
    profile: ToolProfile = MAVEN,
) -> Path:
    """Download a plugin and record the outcome on ``step``.

    Returns:
        The expected artifact path.
    """
    fa = file_access or FileAccess()
    target = plugin_path(tool_root, descriptor, profile)

    try:
        fa.download(descriptor.url, target)
    except OSError as e:
        logger.warning("Download of plugin %s from %s failed: %s", descriptor.name, descriptor.url, e)

    if fa.exists(target):
        logger.info("Successfully added %s to %s", descriptor.name, target)
        step.success("Successfully added %s to %s", descriptor.name, target)
    else:
        step.error(
            None,
            "Plugin %s has wrong properties\nPlease check the plugin properties file in %s",
            target.name,
            target.absolute(),
        )
    return target
