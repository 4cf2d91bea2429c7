"""
toolconf — CLI entrypoint.

Usage:
    python -m toolconf.main --help
    python -m toolconf.main provision mvn
    python -m toolconf.main args mvn
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from toolconf import __version__
from toolconf.core.observability.logging_config import (
    ENV_LOG_FILE,
    ENV_LOG_FILE_LEVEL,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="toolconf")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to toolconf.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """toolconf — provision tool configuration and secrets."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_LOG_FILE),
        log_file_level=os.environ.get(ENV_LOG_FILE_LEVEL),
    )


def _load_provisioner(ctx: click.Context, tool: str):
    """Build a provisioner for read-only commands, or exit with the config error."""
    from toolconf.adapters.registry import default_registry
    from toolconf.core.config.loader import ConfigError
    from toolconf.core.services.provisioner import ToolProvisioner
    from toolconf.core.services.secret_provisioning import ProcessEncryptor
    from toolconf.core.use_cases.provision import load_tool
    from toolconf.ui.cli.prompt import ClickInput

    try:
        context, profile = load_tool(ctx.obj.get("config_path"), tool)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    return ToolProvisioner(
        context,
        profile,
        encryptor=ProcessEncryptor(profile, default_registry(), context.workspace_root),
        input_source=ClickInput(),
    )


@cli.command()
@click.argument("tool", default="mvn")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--no-audit", is_flag=True, help="Don't record the run in the audit ledger.")
@click.pass_context
def provision(ctx: click.Context, tool: str, as_json: bool, no_audit: bool) -> None:
    """Create the security and settings files of TOOL where missing."""
    from toolconf.core.use_cases.provision import run_provision
    from toolconf.ui.cli.prompt import ClickInput

    result = run_provision(
        tool,
        ClickInput(),
        config_path=ctx.obj.get("config_path"),
        audit=not no_audit,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    report = result.report
    if result.error or report is None:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    quiet = ctx.obj.get("quiet", False)

    if not quiet:
        click.secho(f"\n🔧 {report.tool}", fg="cyan", bold=True)

    for step in report.steps:
        if step.ok:
            click.secho(f"   ✓ {step.name}", fg="green")
        else:
            click.secho(f"   ✗ {step.name}", fg="red")
            for line in step.message.split("\n"):
                click.echo(f"     │ {line}")

    if not quiet:
        for skip in report.skips:
            detail = f"  → {skip.detail}" if skip.detail else ""
            click.secho(f"   ⊘ {skip.artifact} ({skip.reason.value}){detail}", fg="yellow")

    click.echo()
    status_color = {"ok": "green", "partial": "yellow", "failed": "red"}.get(report.status, "white")
    click.secho(
        f"   Result: {len(report.created)} created, {len(report.skips)} skipped, "
        f"{report.failed} failed",
        fg=status_color,
        bold=True,
    )
    click.echo()

    if report.failed > 0:
        sys.exit(1)


@cli.command()
@click.argument("tool", default="mvn")
@click.pass_context
def args(ctx: click.Context, tool: str) -> None:
    """Print the arguments pointing TOOL at its provisioned settings."""
    provisioner = _load_provisioner(ctx, tool)
    tool_args = provisioner.build_args()
    if tool_args is None:
        click.secho(f"❌ No settings file provisioned for {tool}", fg="red", err=True)
        sys.exit(1)
    click.echo(tool_args)


@cli.command()
@click.argument("tool", default="mvn")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def folders(ctx: click.Context, tool: str, as_json: bool) -> None:
    """Show the template and configuration folders of TOOL."""
    provisioner = _load_provisioner(ctx, tool)
    templates = provisioner.templates_folder()
    conf = provisioner.conf_folder(create=False)

    def _describe(folder) -> dict | None:
        if folder is None:
            return None
        return {"path": str(folder.path), "layout": folder.layout.value}

    data = {"tool": tool, "templates": _describe(templates), "conf": _describe(conf)}

    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    for label, info in (("Templates", data["templates"]), ("Conf", data["conf"])):
        if info is None:
            click.secho(f"   {label}: (not found)", fg="yellow")
        else:
            click.echo(f"   {label}: {info['path']} [{info['layout']}]")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--syntax",
    type=click.Choice(["square", "curly"]),
    default="square",
    show_default=True,
    help="Placeholder syntax.",
)
def variables(file: str, syntax: str) -> None:
    """List the placeholders of a template FILE."""
    from toolconf.core.services.variables import SYNTAXES, find_variables

    text = Path(file).read_text(encoding="utf-8")
    for name in find_variables(text, SYNTAXES[syntax]):
        click.echo(name)


@cli.command()
@click.option("-n", "count", default=10, show_default=True, help="Number of entries.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def audit(ctx: click.Context, count: int, as_json: bool) -> None:
    """Show recent provisioning runs."""
    from toolconf.core.config.loader import ConfigError, load_context
    from toolconf.core.persistence.audit import AuditWriter

    try:
        context = load_context(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    entries = AuditWriter(workspace_root=context.workspace_root).read_recent(count)

    if as_json:
        click.echo(json.dumps([e.model_dump(mode="json") for e in entries], indent=2))
        return

    if not entries:
        click.echo("No provisioning runs recorded.")
        return

    for entry in entries:
        status_color = {"ok": "green", "partial": "yellow", "failed": "red"}.get(entry.status, "white")
        click.echo(f"   {entry.timestamp}  {entry.operation_type} {entry.tool} — ", nl=False)
        click.secho(entry.status, fg=status_color)
        for error in entry.errors:
            click.echo(f"     │ {error.splitlines()[0] if error else ''}")


# ── Register sub-command groups from toolconf/ui/cli/ ─────────────

from toolconf.ui.cli.plugin import plugin  # noqa: E402

cli.add_command(plugin)


if __name__ == "__main__":
    cli()
