"""
Process adapter — run an executable with arguments and capture its output.

Commands are never run through a shell: the executable and its
arguments go straight to ``subprocess.run``.  Actions flagged as
``sensitive`` carry secrets in their arguments; those arguments are
kept out of logs and receipt metadata.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from pathlib import Path

from toolconf.adapters.base import Adapter, ExecutionContext
from toolconf.core.models.action import Receipt

logger = logging.getLogger(__name__)

REDACTED = "<redacted>"


def display_command(executable: str, args: list[str], sensitive: bool) -> str:
    """The command line as it may appear in logs."""
    if sensitive and args:
        return f"{executable} {REDACTED}"
    return " ".join([executable, *args])


class ShellCommandAdapter(Adapter):
    """Run one process per Action and keep its stdout line by line.

    Action params:
        executable (str): Program name on PATH or absolute path.
        args (list[str]): Arguments, default none.
        sensitive (bool): Redact the arguments in logs and metadata.
        timeout (int | None): Seconds; no limit unless given.
        cwd (str): Working directory, default the workspace root.
    """

    @property
    def name(self) -> str:
        return "process"

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        executable = context.action.params.get("executable")
        if not executable:
            return False, "Missing required param: 'executable'"
        if shutil.which(executable) is None:
            return False, f"Executable not found: {executable}"
        if not Path(context.working_dir).is_dir():
            return False, f"Working directory does not exist: {context.working_dir}"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        action = context.action
        executable = action.params.get("executable", "")
        args = [str(a) for a in action.params.get("args", [])]
        timeout = action.params.get("timeout")
        shown = display_command(executable, args, action.params.get("sensitive", False))

        logger.debug("Running %s in %s", shown, context.working_dir)
        start = time.monotonic()
        try:
            proc = subprocess.run(
                [executable, *args],
                cwd=context.working_dir,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                self.name, action.id, f"Command timed out after {timeout}s",
                metadata={"command": shown},
            )
        except (OSError, ValueError) as e:
            return Receipt.failure(
                self.name, action.id, f"Command execution error: {e}",
                metadata={"command": shown},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        stderr = proc.stderr.strip()
        fields = {
            "return_code": proc.returncode,
            "stdout_lines": proc.stdout.splitlines(),
            "duration_ms": elapsed_ms,
            "metadata": {"command": shown, "stderr": stderr},
        }
        if proc.returncode != 0:
            logger.debug("%s exited with %d", shown, proc.returncode)
            return Receipt.failure(
                self.name, action.id, stderr or f"Command exited with code {proc.returncode}",
                **fields,
            )
        return Receipt.success(self.name, action.id, proc.stdout.strip(), **fields)
