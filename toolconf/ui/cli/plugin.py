"""
CLI commands for tool plugins.

Thin wrappers over ``toolconf.core.use_cases.provision.run_plugin_install``.
"""

from __future__ import annotations

import json
import sys

import click


@click.group()
def plugin() -> None:
    """Plugins — install extensions into a tool."""


@plugin.command("install")
@click.argument("name")
@click.argument("url")
@click.option("--tool", "-t", default="mvn", show_default=True, help="Target tool.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(ctx: click.Context, name: str, url: str, tool: str, as_json: bool) -> None:
    """Download plugin NAME from URL into the tool's extension folder."""
    from toolconf.core.models.plugin import PluginDescriptor
    from toolconf.core.use_cases.provision import run_plugin_install

    result = run_plugin_install(
        tool,
        PluginDescriptor(name=name, url=url),
        config_path=ctx.obj.get("config_path"),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.error or result.report is None:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    for step in result.report.steps:
        if step.ok:
            click.secho(f"✅ {step.message}", fg="green")
        else:
            click.secho(f"❌ {step.message}", fg="red")

    if not result.ok:
        sys.exit(1)
