"""
Provision use case — set up a tool's configuration in a workspace.

This is the top-level orchestrator: it loads the workspace config,
picks the tool profile, wires the encryptor to the adapter registry,
runs the provisioner and records the run in the audit ledger.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from toolconf.adapters.registry import AdapterRegistry, default_registry
from toolconf.core.config.loader import ConfigError, load_context
from toolconf.core.context import ToolContext
from toolconf.core.engine.report import ProvisioningReport
from toolconf.core.models.plugin import PluginDescriptor
from toolconf.core.models.tool import ToolProfile, get_tool_profile
from toolconf.core.persistence.audit import AuditEntry, AuditWriter
from toolconf.core.services.file_access import FileAccess
from toolconf.core.services.plugins import install_plugin
from toolconf.core.services.provisioner import ToolProvisioner
from toolconf.core.services.secret_provisioning import InputSource, ProcessEncryptor

logger = logging.getLogger(__name__)


@dataclass
class ProvisionResult:
    """Result of provisioning one tool."""

    report: ProvisioningReport | None = None
    context: ToolContext | None = None
    operation_id: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.report is not None and self.report.failed == 0

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result

        result["operation_id"] = self.operation_id
        result["workspace_root"] = str(self.context.workspace_root) if self.context else ""
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def generate_operation_id() -> str:
    """Generate a unique operation ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"op-{now}-{short}"


def resolve_tool(context: ToolContext, tool: str) -> ToolProfile:
    """The profile of ``tool`` with workspace overrides applied.

    Raises:
        ConfigError: If the tool is unknown.
    """
    try:
        return get_tool_profile(tool, context.tool_executable(tool))
    except KeyError:
        raise ConfigError(f"Unknown tool '{tool}'") from None


def load_tool(config_path: Path | None, tool: str) -> tuple[ToolContext, ToolProfile]:
    """Load the workspace and the tool profile together."""
    context = load_context(config_path)
    return context, resolve_tool(context, tool)


def write_audit_entry(
    report: ProvisioningReport,
    audit_writer: AuditWriter,
    operation_id: str,
    operation_type: str = "provision",
    duration_ms: int = 0,
) -> None:
    """Write provisioning results to the audit ledger."""
    entry = AuditEntry(
        operation_id=operation_id,
        operation_type=operation_type,
        tool=report.tool,
        status=report.status,
        steps_total=len(report.steps),
        steps_succeeded=report.succeeded,
        steps_failed=report.failed,
        duration_ms=duration_ms,
        created=list(report.created),
        skipped=[f"{s.artifact}:{s.reason.value}" for s in report.skips],
        errors=report.errors,
    )
    audit_writer.write(entry)


def run_provision(
    tool: str,
    input_source: InputSource,
    config_path: Path | None = None,
    context: ToolContext | None = None,
    registry: AdapterRegistry | None = None,
    file_access: FileAccess | None = None,
    audit: bool = True,
    **provisioner_kwargs,
) -> ProvisionResult:
    """Provision the configuration files of ``tool``.

    Args:
        tool: Tool name (e.g. ``mvn``).
        input_source: Where secret values are asked for.
        config_path: Optional explicit path to toolconf.yml.
        context: Pre-built context (skips config loading).
        registry: Optional pre-configured adapter registry.
        file_access: Optional filesystem collaborator.
        audit: Write an entry to the audit ledger.

    Returns:
        ProvisionResult with the provisioning report.
    """
    result = ProvisionResult(operation_id=generate_operation_id())
    start = time.monotonic()

    try:
        if context is None:
            context = load_context(config_path)
        profile = resolve_tool(context, tool)
    except ConfigError as e:
        result.error = str(e)
        return result
    result.context = context

    encryptor = ProcessEncryptor(
        profile,
        registry or default_registry(),
        workspace_root=context.workspace_root,
    )
    provisioner = ToolProvisioner(
        context,
        profile,
        encryptor=encryptor,
        input_source=input_source,
        file_access=file_access,
        **provisioner_kwargs,
    )
    result.report = provisioner.provision()

    logger.info(
        "Provisioned %s: %d created, %d skipped, %d failed",
        profile.name, len(result.report.created), len(result.report.skips), result.report.failed,
    )

    if audit:
        elapsed_ms = int((time.monotonic() - start) * 1000)
        write_audit_entry(
            result.report,
            AuditWriter(workspace_root=context.workspace_root),
            result.operation_id,
            duration_ms=elapsed_ms,
        )

    return result


def run_plugin_install(
    tool: str,
    descriptor: PluginDescriptor,
    config_path: Path | None = None,
    context: ToolContext | None = None,
    file_access: FileAccess | None = None,
    audit: bool = True,
) -> ProvisionResult:
    """Install a plugin into the extension folder of ``tool``."""
    result = ProvisionResult(operation_id=generate_operation_id())

    try:
        if context is None:
            context = load_context(config_path)
        profile = resolve_tool(context, tool)
    except ConfigError as e:
        result.error = str(e)
        return result
    result.context = context

    report = ProvisioningReport(tool=profile.name)
    if not descriptor.active:
        logger.info("Plugin %s is inactive, not installing", descriptor.name)
        result.report = report
        return result

    tool_root = context.tool_path(profile.name)
    with report.new_step(f"Install plugin {descriptor.name}") as step:
        target = install_plugin(descriptor, tool_root, step, file_access, profile)
    if report.failed == 0:
        report.created.append(str(target))
    result.report = report

    if audit:
        write_audit_entry(
            report,
            AuditWriter(workspace_root=context.workspace_root),
            result.operation_id,
            operation_type="plugin-install",
        )
    return result
