"""
Tool model — how a tool keeps and encrypts its configuration.

A ToolProfile is the static knowledge the provisioner needs about a
tool: where its configuration folder lives (current and legacy
layout), which files it provisions, which placeholder syntax its
templates use, and which of its own sub-commands encrypt secrets.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class ToolProfile(BaseModel):
    """Configuration layout and encryption commands of one tool."""

    name: str
    executable: str = ""            # defaults to ``name``

    # Folder layouts below conf/ and templates/conf/
    config_folder: str
    legacy_config_folder: str

    # Provisioned files
    security_file: str
    settings_file: str
    variable_syntax: Literal["square", "curly"] = "square"

    # Sub-commands of the tool itself
    encrypt_master_password_arg: str
    encrypt_password_arg: str
    security_file_property: str
    settings_file_arg: str = "-s"

    # Extension mechanism
    extension_dir: str = "lib/ext"
    extension_suffix: str = ".jar"

    @property
    def command(self) -> str:
        """The executable to invoke for encryption."""
        return self.executable or self.name


MAVEN = ToolProfile(
    name="mvn",
    config_folder="mvn",
    legacy_config_folder=".m2",
    security_file="settings-security.xml",
    settings_file="settings.xml",
    variable_syntax="square",
    encrypt_master_password_arg="--encrypt-master-password",
    encrypt_password_arg="--encrypt-password",
    security_file_property="-Dsettings.security",
)

KNOWN_TOOLS: dict[str, ToolProfile] = {
    MAVEN.name: MAVEN,
}


def get_tool_profile(name: str, executable: str | None = None) -> ToolProfile:
    """Look up a known tool profile, optionally overriding its executable.

    Raises:
        KeyError: If the tool is unknown.
    """
    profile = KNOWN_TOOLS[name]
    if executable:
        return profile.model_copy(update={"executable": executable})
    return profile
