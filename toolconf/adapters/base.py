"""
Adapter base — how core services reach external executables.

Services never spawn processes themselves.  They build an Action, the
registry wraps it in an ExecutionContext and hands it to the adapter
registered under ``action.adapter``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel

from toolconf.core.models.action import Action, Receipt


class ExecutionContext(BaseModel):
    """An Action plus the workspace it runs in."""

    action: Action
    workspace_root: str = "."

    @property
    def working_dir(self) -> str:
        """``params["cwd"]`` when given, else the workspace root."""
        return self.action.params.get("cwd") or self.workspace_root


class Adapter(ABC):
    """A binding to one kind of external side effect.

    ``execute`` reports every failure as a failed Receipt and does not
    raise.  ``validate`` runs first and can refuse an action before any
    side effect happens.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry key, e.g. ``process``."""

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """Return ``(True, "")`` or ``(False, reason)``."""

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Perform the action."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name}>"
