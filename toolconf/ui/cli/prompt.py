"""
Terminal input for secret values.
"""

from __future__ import annotations

import click

from toolconf.core.services.secret_provisioning import InputSource


class ClickInput(InputSource):
    """Ask on the terminal without echoing the typed value."""

    def __init__(self, hide_input: bool = True):
        self._hide_input = hide_input

    def ask_for_input(self, prompt: str) -> str:
        return click.prompt(prompt.rstrip(": "), hide_input=self._hide_input, prompt_suffix=": ")
