"""
Tests for adapter protocol, registry, mock, and process adapters.
"""

import shutil
import sys
from pathlib import Path

import pytest

from toolconf.adapters.base import ExecutionContext
from toolconf.adapters.mock import MockAdapter
from toolconf.adapters.registry import AdapterRegistry, default_registry
from toolconf.adapters.shell.command import ShellCommandAdapter
from toolconf.core.models.action import Action, Receipt

needs_sh = pytest.mark.skipif(shutil.which("sh") is None, reason="sh not available")


def _process(action_id: str = "run", **params) -> ExecutionContext:
    action = Action(id=action_id, adapter="process", params=params)
    return ExecutionContext(action=action, workspace_root=".")


# ── Protocol Tests ───────────────────────────────────────────────────


class TestExecutionContext:
    def test_working_dir_defaults_to_workspace(self):
        ctx = ExecutionContext(
            action=Action(id="test", adapter="process"),
            workspace_root="/workspace",
        )
        assert ctx.working_dir == "/workspace"

    def test_working_dir_override(self):
        ctx = ExecutionContext(
            action=Action(id="test", adapter="process", params={"cwd": "/elsewhere"}),
            workspace_root="/workspace",
        )
        assert ctx.working_dir == "/elsewhere"


class TestReceipt:
    def test_captured_lines_win(self):
        receipt = Receipt.success(
            adapter="process", action_id="x", output="a\nb",
            stdout_lines=["first", "second"],
        )
        assert receipt.lines == ["first", "second"]

    def test_lines_from_output(self):
        receipt = Receipt.success(adapter="process", action_id="x", output="a\nb")
        assert receipt.lines == ["a", "b"]

    def test_failure(self):
        receipt = Receipt.failure("process", "x", "exit 2", return_code=2)
        assert receipt.failed and not receipt.ok
        assert receipt.return_code == 2


# ── Mock Adapter Tests ───────────────────────────────────────────────


class TestMockAdapter:
    def test_default_success(self):
        mock = MockAdapter(adapter_name="test-mock")
        ctx = ExecutionContext(action=Action(id="op-1", adapter="test-mock"))
        receipt = mock.execute(ctx)
        assert receipt.ok
        assert mock.call_count == 1

    def test_set_output(self):
        mock = MockAdapter()
        mock.set_output("op-1", "custom")
        receipt = mock.execute(ExecutionContext(action=Action(id="op-1", adapter="mock")))
        assert receipt.output == "custom"

    def test_queued_outputs_then_response(self):
        mock = MockAdapter()
        mock.set_output("op", "fallback")
        mock.queue_output("op", "first", "second")
        ctx = ExecutionContext(action=Action(id="op", adapter="mock"))
        outputs = [mock.execute(ctx).output for _ in range(3)]
        assert outputs == ["first", "second", "fallback"]

    def test_set_failure(self):
        mock = MockAdapter()
        mock.set_failure("op-fail", error="Intentional failure")
        receipt = mock.execute(ExecutionContext(action=Action(id="op-fail", adapter="mock")))
        assert receipt.failed
        assert "Intentional failure" in (receipt.error or "")

    def test_calls_for(self):
        mock = MockAdapter()
        for action_id in ("a", "b", "a"):
            mock.execute(ExecutionContext(action=Action(id=action_id, adapter="mock")))
        assert len(mock.calls_for("a")) == 2
        assert mock.call_log[1].action.id == "b"

    def test_reset(self):
        mock = MockAdapter()
        mock.set_failure("op-1")
        mock.queue_output("op-1", "x")
        mock.execute(ExecutionContext(action=Action(id="op-1", adapter="mock")))
        mock.reset()
        assert mock.call_count == 0
        receipt = mock.execute(ExecutionContext(action=Action(id="op-1", adapter="mock")))
        assert receipt.ok and receipt.metadata == {"mock": True}


# ── Registry Tests ──────────────────────────────────────────────────


class TestAdapterRegistry:
    def test_register_and_get(self):
        registry = AdapterRegistry()
        mock = MockAdapter(adapter_name="test")
        registry.register(mock)
        assert registry.get("test") is mock
        assert "test" in registry.list_adapters()

    def test_unregister(self):
        registry = AdapterRegistry()
        registry.register(MockAdapter(adapter_name="temp"))
        registry.unregister("temp")
        assert registry.get("temp") is None

    def test_missing_adapter_fails(self):
        receipt = AdapterRegistry().execute_action(Action(id="x", adapter="nope"))
        assert receipt.failed
        assert "No adapter registered for 'nope'" in (receipt.error or "")

    def test_dispatch(self):
        registry = AdapterRegistry()
        mock = MockAdapter(adapter_name="process")
        mock.set_output("encrypt-password", "{cipher}")
        registry.register(mock)

        receipt = registry.execute_action(
            Action(id="encrypt-password", adapter="process"), workspace_root="/ws",
        )

        assert receipt.output == "{cipher}"
        assert mock.call_log[0].workspace_root == "/ws"

    def test_validation_failure(self):
        registry = AdapterRegistry()
        registry.register(ShellCommandAdapter())
        receipt = registry.execute_action(Action(id="x", adapter="process", params={}))
        assert receipt.failed
        assert "Validation failed" in (receipt.error or "")

    def test_raising_adapter_becomes_failure(self):
        class Exploding(MockAdapter):
            def execute(self, context):
                raise RuntimeError("boom")

        registry = AdapterRegistry()
        registry.register(Exploding(adapter_name="boom"))
        receipt = registry.execute_action(Action(id="x", adapter="boom"))
        assert receipt.failed
        assert "boom" in (receipt.error or "")

    def test_default_registry(self):
        assert default_registry().list_adapters() == ["process"]


# ── Process Adapter Tests ───────────────────────────────────────────


class TestShellCommandAdapter:
    def test_validate_requires_executable(self):
        valid, msg = ShellCommandAdapter().validate(_process())
        assert not valid
        assert "executable" in msg

    def test_validate_unknown_executable(self):
        valid, msg = ShellCommandAdapter().validate(_process(executable="no-such-tool-xyz"))
        assert not valid
        assert "Executable not found" in msg

    def test_validate_missing_cwd(self, tmp_path: Path):
        ctx = _process(executable=sys.executable, cwd=str(tmp_path / "missing"))
        valid, msg = ShellCommandAdapter().validate(ctx)
        assert not valid
        assert "Working directory" in msg

    @needs_sh
    def test_captures_stdout_lines(self, tmp_path: Path):
        ctx = _process(executable="sh", args=["-c", "echo first; echo second"], cwd=str(tmp_path))
        receipt = ShellCommandAdapter().execute(ctx)
        assert receipt.ok
        assert receipt.lines == ["first", "second"]
        assert receipt.return_code == 0

    @needs_sh
    def test_non_zero_exit(self, tmp_path: Path):
        ctx = _process(executable="sh", args=["-c", "echo oops >&2; exit 3"], cwd=str(tmp_path))
        receipt = ShellCommandAdapter().execute(ctx)
        assert receipt.failed
        assert receipt.error == "oops"
        assert receipt.return_code == 3
        assert receipt.metadata["stderr"] == "oops"

    @needs_sh
    def test_sensitive_args_redacted(self, tmp_path: Path):
        ctx = _process(
            executable="sh", args=["-c", "echo ok", "hunter2"], sensitive=True, cwd=str(tmp_path),
        )
        receipt = ShellCommandAdapter().execute(ctx)
        assert receipt.ok
        assert "hunter2" not in receipt.metadata["command"]
        assert receipt.metadata["command"] == "sh <redacted>"

    def test_missing_executable_at_run_time(self, tmp_path: Path):
        ctx = _process(executable=str(tmp_path / "gone"), cwd=str(tmp_path))
        receipt = ShellCommandAdapter().execute(ctx)
        assert receipt.failed
        assert "Command execution error" in (receipt.error or "")
