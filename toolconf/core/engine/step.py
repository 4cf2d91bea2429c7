"""
Step — a scoped, reportable unit of provisioning work.

A step is opened, work is performed, and exactly one terminal
outcome (success or error) is recorded before the scope closes:

    with Step("Create settings file at ...", records=report.steps) as step:
        ...
        step.success()

Closing rules:
    - an exception escaping the block records an error (and propagates)
    - leaving the block without an outcome records an error
    - a second outcome is ignored with a warning
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from enum import Enum
from types import TracebackType
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class StepStatus(str, Enum):
    RUNNING = "running"
    SUCCESS = "success"
    ERROR = "error"


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class StepRecord(BaseModel):
    """What happened in one step."""

    name: str
    status: StepStatus = StepStatus.RUNNING
    message: str = ""
    error: str | None = None
    started_at: str = ""
    ended_at: str = ""
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.status is StepStatus.SUCCESS


def _format(message: str, args: tuple[Any, ...]) -> str:
    if not args:
        return message
    try:
        return message % args
    except (TypeError, ValueError):
        return " ".join([message, *map(str, args)])


class Step:
    """Context manager recording one success or error outcome."""

    def __init__(self, name: str, records: list[StepRecord] | None = None):
        self.record = StepRecord(name=name)
        self._records = records
        self._start = 0.0

    @property
    def name(self) -> str:
        return self.record.name

    @property
    def status(self) -> StepStatus:
        return self.record.status

    @property
    def done(self) -> bool:
        return self.record.status is not StepStatus.RUNNING

    def __enter__(self) -> Step:
        self._start = time.monotonic()
        self.record.started_at = _now_iso()
        logger.info("Start: %s", self.name)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc is not None and not self.done:
            self.error(exc, "Step '%s' failed: %s", self.name, exc)
        elif not self.done:
            logger.warning("Step '%s' ended without success or error - assuming error", self.name)
            self.error(None, "Step '%s' ended without success or error", self.name)

        self.record.ended_at = _now_iso()
        self.record.duration_ms = int((time.monotonic() - self._start) * 1000)
        if self._records is not None:
            self._records.append(self.record)

    def success(self, message: str = "", *args: Any) -> None:
        """Mark the step as successful."""
        if self._already_ended("success"):
            return
        self.record.status = StepStatus.SUCCESS
        self.record.message = _format(message, args)
        if self.record.message:
            logger.info("%s", self.record.message)
        logger.info("Success: %s", self.name)

    def error(self, cause: BaseException | None, message: str = "", *args: Any) -> None:
        """Mark the step as failed.

        Args:
            cause: The exception behind the failure, if any.
            message: ``%s``-style message template.
            args: Template arguments.
        """
        if self._already_ended("error"):
            return
        text = _format(message, args) if message else str(cause or "")
        self.record.status = StepStatus.ERROR
        self.record.message = text
        self.record.error = repr(cause) if cause is not None else text
        logger.error("%s", text)
        if cause is not None:
            logger.debug("Step '%s' cause", self.name, exc_info=cause)

    def _already_ended(self, outcome: str) -> bool:
        if self.done:
            logger.warning(
                "Step '%s' already ended with %s, ignoring %s",
                self.name, self.record.status.value, outcome,
            )
            return True
        return False
