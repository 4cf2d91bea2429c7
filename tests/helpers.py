"""
Test helpers — scripted input and settings repository builders.
"""

from __future__ import annotations

from pathlib import Path

from toolconf.core.context import ToolContext
from toolconf.core.services.secret_provisioning import InputSource

DEFAULT_URL = "https://github.com/devonfw/ide-settings.git"
CUSTOM_URL = "https://git.example.com/team/settings.git"

SETTINGS_TEMPLATE = """<settings>
  <servers>
    <server>
      <id>repo</id>
      <username>[REPO_USER]</username>
      <password>[REPO_PASSWORD]</password>
    </server>
    <server>
      <id>mirror</id>
      <username>[REPO_USER]</username>
    </server>
  </servers>
</settings>
"""


class ScriptedInput(InputSource):
    """Answers prompts from a fixed list and remembers the prompts."""

    def __init__(self, *answers: str):
        self.answers = list(answers)
        self.prompts: list[str] = []

    def ask_for_input(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.answers.pop(0) if self.answers else "secret"


def write_template(
    context: ToolContext,
    folder: str = "mvn",
    content: str = SETTINGS_TEMPLATE,
    templates: str = "templates",
) -> Path:
    """Place a settings.xml template into the settings repository."""
    assert context.settings_path is not None
    template_dir = context.settings_path / templates / "conf" / folder
    template_dir.mkdir(parents=True, exist_ok=True)
    template = template_dir / "settings.xml"
    template.write_text(content, encoding="utf-8")
    return template


def remote(url: str | None):
    """A remote URL lookup always answering ``url``."""
    def _lookup(path: Path) -> str | None:
        return url
    return _lookup
