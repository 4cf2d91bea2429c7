"""
Domain models — Pydantic types for tool provisioning.

All models are re-exported here for convenient access:

    from toolconf.core.models import Action, Receipt, ToolProfile, PluginDescriptor
"""

from toolconf.core.models.action import Action, Receipt
from toolconf.core.models.plugin import PluginDescriptor
from toolconf.core.models.tool import KNOWN_TOOLS, MAVEN, ToolProfile, get_tool_profile

__all__ = [
    # action.py
    "Action",
    "Receipt",
    # plugin.py
    "PluginDescriptor",
    # tool.py
    "KNOWN_TOOLS",
    "MAVEN",
    "ToolProfile",
    "get_tool_profile",
]
