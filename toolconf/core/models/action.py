"""
Action and Receipt models — one external call and what came back.

The encryptor describes each call to the wrapped tool as an Action and
hands it to the adapter registry.  The adapter answers with a Receipt:
exit code, captured stdout lines, error text.  Failures travel inside
the Receipt; deciding whether a failure is fatal is left to the caller.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

ReceiptStatus = Literal["ok", "failed"]


class Action(BaseModel):
    """A single call routed to an adapter.

    ``params`` is adapter specific; the process adapter reads
    ``executable``, ``args``, ``sensitive``, ``timeout`` and ``cwd``.
    """

    id: str                         # e.g. "encrypt-password"
    adapter: str                    # registry name, e.g. "process"
    name: str = ""
    params: dict[str, Any] = Field(default_factory=dict)

    @property
    def label(self) -> str:
        return self.name or self.id


class Receipt(BaseModel):
    """Outcome of one Action."""

    adapter: str
    action_id: str
    status: ReceiptStatus = "ok"

    output: str = ""
    error: str | None = None
    return_code: int | None = None
    stdout_lines: list[str] | None = None

    duration_ms: int = 0
    finished_at: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @property
    def lines(self) -> list[str]:
        """Stdout line by line, as captured by the adapter when it did so."""
        if self.stdout_lines is not None:
            return list(self.stdout_lines)
        return self.output.splitlines()

    @classmethod
    def success(cls, adapter: str, action_id: str, output: str = "", **fields: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, output=output, **fields)

    @classmethod
    def failure(cls, adapter: str, action_id: str, error: str, **fields: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, status="failed", error=error, **fields)
