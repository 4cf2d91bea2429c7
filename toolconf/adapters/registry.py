"""
Adapter registry — name-based dispatch of Actions.

Services hold a registry, not adapters.  Swapping the ``process``
adapter for a MockAdapter is how tests run the provisioner without
the real tool installed.
"""

from __future__ import annotations

import logging
import time

from toolconf.adapters.base import Adapter, ExecutionContext
from toolconf.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Adapters by name, and the single entry point to run an Action."""

    def __init__(self) -> None:
        self._adapters: dict[str, Adapter] = {}

    def register(self, adapter: Adapter) -> None:
        if adapter.name in self._adapters:
            logger.warning("Replacing adapter %s", adapter.name)
        self._adapters[adapter.name] = adapter
        logger.debug("Registered adapter %r", adapter)

    def unregister(self, name: str) -> None:
        self._adapters.pop(name, None)

    def get(self, name: str) -> Adapter | None:
        return self._adapters.get(name)

    def list_adapters(self) -> list[str]:
        return list(self._adapters)

    def execute_action(self, action: Action, workspace_root: str = ".") -> Receipt:
        """Validate and execute ``action`` with its adapter.

        Unknown adapters, refused validation and exceptions escaping an
        adapter all come back as failed receipts.  The receipt's
        ``duration_ms`` covers validation and execution.
        """
        adapter = self._adapters.get(action.adapter)
        if adapter is None:
            return Receipt.failure(
                action.adapter, action.id, f"No adapter registered for '{action.adapter}'",
            )

        context = ExecutionContext(action=action, workspace_root=workspace_root)
        start = time.monotonic()
        receipt = self._run(adapter, context)
        receipt.duration_ms = int((time.monotonic() - start) * 1000)
        if receipt.failed:
            logger.debug("Action %s failed: %s", action.label, receipt.error)
        return receipt

    @staticmethod
    def _run(adapter: Adapter, context: ExecutionContext) -> Receipt:
        action = context.action
        try:
            valid, reason = adapter.validate(context)
        except Exception as e:
            return Receipt.failure(adapter.name, action.id, f"Validation error: {e}")
        if not valid:
            return Receipt.failure(adapter.name, action.id, f"Validation failed: {reason}")

        try:
            return adapter.execute(context)
        except Exception as e:
            logger.error("Adapter %s raised while executing %s: %s", adapter.name, action.label, e)
            return Receipt.failure(adapter.name, action.id, f"Unexpected error: {e}")


def default_registry() -> AdapterRegistry:
    """Registry with the real process adapter."""
    from toolconf.adapters.shell.command import ShellCommandAdapter

    registry = AdapterRegistry()
    registry.register(ShellCommandAdapter())
    return registry
