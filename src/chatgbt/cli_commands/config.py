"""``chatgbt config`` — show the resolved settings."""

from __future__ import annotations

import click

from chatgbt.cli_commands._output import console, load_cli_settings


@click.command("config")
@click.pass_context
def config_cmd(ctx: click.Context) -> None:
    """Print the effective settings as JSON (API key redacted)."""
    settings = load_cli_settings(ctx)
    data = settings.model_dump(mode="json")
    if data["model"].get("api_key"):
        data["model"]["api_key"] = "***"
    console.print_json(data=data)
