"""
Audit ledger — one NDJSON line per provisioning run.

The ledger lives at ``<workspace>/.state/audit.ndjson``.  An entry
records which tool was provisioned, what was created or skipped and
the error messages of failed steps.  Secret values never reach it:
entries are built from step messages and paths only.

Lines are only ever appended.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

LEDGER_DIR = ".state"
LEDGER_FILE = "audit.ndjson"


class AuditEntry(BaseModel):
    """One provisioning or plugin-install run."""

    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    operation_id: str = ""
    operation_type: str = ""       # provision | plugin-install
    tool: str = ""

    status: str = ""               # ok | partial | failed
    steps_total: int = 0
    steps_succeeded: int = 0
    steps_failed: int = 0
    duration_ms: int = 0

    created: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)   # "<artifact>:<reason>"
    errors: list[str] = Field(default_factory=list)
    context: dict[str, Any] = Field(default_factory=dict)


class AuditWriter:
    """Appends entries to, and reads them back from, the ledger file."""

    def __init__(self, path: Path | None = None, workspace_root: Path | None = None):
        if path is None:
            path = (workspace_root or Path(".")) / LEDGER_DIR / LEDGER_FILE
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def write(self, entry: AuditEntry) -> None:
        """Append ``entry``.  An unwritable ledger is logged, not raised."""
        record = json.dumps(entry.model_dump(mode="json"), ensure_ascii=False)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as ledger:
                ledger.write(record + "\n")
        except OSError as e:
            logger.error("Cannot append to audit ledger %s: %s", self._path, e)
            return
        logger.debug("Recorded %s %s in %s", entry.operation_type, entry.operation_id, self._path)

    def read_all(self) -> list[AuditEntry]:
        """All readable entries, oldest first."""
        if not self._path.is_file():
            return []
        try:
            return list(self._entries())
        except OSError as e:
            logger.error("Cannot read audit ledger %s: %s", self._path, e)
            return []

    def read_recent(self, n: int = 20) -> list[AuditEntry]:
        return self.read_all()[-n:] if n > 0 else []

    def _entries(self) -> Iterator[AuditEntry]:
        with self._path.open(encoding="utf-8") as ledger:
            for number, raw in enumerate(ledger, start=1):
                if not raw.strip():
                    continue
                try:
                    yield AuditEntry.model_validate(json.loads(raw))
                except (ValueError, ValidationError) as e:
                    logger.warning("Ignoring unreadable ledger line %d in %s: %s", number, self._path, e)
