"""
Provisioning report — steps run and artifacts skipped in one run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from toolconf.core.engine.step import Step, StepRecord, StepStatus


class SkipReason(str, Enum):
    ALREADY_PRESENT = "already-present"
    TEMPLATE_MISSING = "template-missing"
    SECURITY_FILE_MISSING = "security-file-missing"


@dataclass
class Skip:
    """An artifact that was deliberately not provisioned."""

    artifact: str
    reason: SkipReason
    detail: str = ""

    def to_dict(self) -> dict:
        return {"artifact": self.artifact, "reason": self.reason.value, "detail": self.detail}


@dataclass
class ProvisioningReport:
    """Result of provisioning one tool."""

    tool: str = ""
    steps: list[StepRecord] = field(default_factory=list)
    skips: list[Skip] = field(default_factory=list)
    created: list[str] = field(default_factory=list)

    def new_step(self, name: str) -> Step:
        """Open a step whose record lands in this report."""
        return Step(name, records=self.steps)

    def skip(self, artifact: str, reason: SkipReason, detail: str = "") -> None:
        self.skips.append(Skip(artifact=artifact, reason=reason, detail=detail))

    def skip_reason(self, artifact: str) -> SkipReason | None:
        for s in self.skips:
            if s.artifact == artifact:
                return s.reason
        return None

    def step_for(self, prefix: str) -> StepRecord | None:
        """First step whose name starts with ``prefix``."""
        for record in self.steps:
            if record.name.startswith(prefix):
                return record
        return None

    @property
    def succeeded(self) -> int:
        return sum(1 for s in self.steps if s.status is StepStatus.SUCCESS)

    @property
    def failed(self) -> int:
        return sum(1 for s in self.steps if s.status is StepStatus.ERROR)

    @property
    def status(self) -> str:
        """ok | partial | failed"""
        if self.failed == 0:
            return "ok"
        if self.succeeded > 0:
            return "partial"
        return "failed"

    @property
    def errors(self) -> list[str]:
        return [s.message for s in self.steps if s.status is StepStatus.ERROR]

    def to_dict(self) -> dict:
        return {
            "tool": self.tool,
            "status": self.status,
            "steps": [s.model_dump(mode="json") for s in self.steps],
            "skips": [s.to_dict() for s in self.skips],
            "created": list(self.created),
        }
