"""
Mock adapter — stands in for the process adapter in tests.

Answers are configured per action id: a fixed receipt, or a queue of
outputs consumed one call at a time before the fixed receipt applies.
Every ExecutionContext received is kept for assertions.
"""

from __future__ import annotations

from collections import deque

from toolconf.adapters.base import Adapter, ExecutionContext
from toolconf.core.models.action import Receipt


class MockAdapter(Adapter):
    """Scriptable adapter; unconfigured actions succeed with ``default_output``."""

    def __init__(self, adapter_name: str = "mock", default_output: str = "[mock] executed"):
        self._name = adapter_name
        self._default_output = default_output
        self._fixed: dict[str, Receipt] = {}
        self._queued: dict[str, deque[Receipt]] = {}
        self.call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_count(self) -> int:
        return len(self.call_log)

    def calls_for(self, action_id: str) -> list[ExecutionContext]:
        return [c for c in self.call_log if c.action.id == action_id]

    # ── Scripting ───────────────────────────────────────────────

    def set_response(self, action_id: str, receipt: Receipt) -> None:
        self._fixed[action_id] = receipt

    def set_output(self, action_id: str, output: str) -> None:
        self.set_response(action_id, Receipt.success(self._name, action_id, output))

    def set_failure(self, action_id: str, error: str = "Mock failure") -> None:
        self.set_response(action_id, Receipt.failure(self._name, action_id, error, return_code=1))

    def queue_output(self, action_id: str, *outputs: str) -> None:
        """Answer the next calls of ``action_id`` with ``outputs``, in order."""
        queue = self._queued.setdefault(action_id, deque())
        queue.extend(Receipt.success(self._name, action_id, out) for out in outputs)

    def reset(self) -> None:
        self.call_log.clear()
        self._fixed.clear()
        self._queued.clear()

    # ── Adapter ─────────────────────────────────────────────────

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self.call_log.append(context)
        action_id = context.action.id
        queue = self._queued.get(action_id)
        if queue:
            return queue.popleft()
        if action_id in self._fixed:
            return self._fixed[action_id]
        return Receipt.success(
            self._name, action_id, self._default_output, metadata={"mock": True},
        )
