"""
Plugin model — a downloadable extension of a tool.
"""

from __future__ import annotations

from pydantic import BaseModel


class PluginDescriptor(BaseModel):
    """A plugin to install into a tool's extension directory.

    Attributes:
        name:   Artifact name, used as the file name (``<name>.jar``).
        url:    Download location.
        id:     Optional plugin identifier from the plugin properties.
        active: Whether the plugin should be installed at all.
    """

    name: str
    url: str
    id: str = ""
    active: bool = True
