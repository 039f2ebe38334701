"""CLI subcommand registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all subcommands on the CLI group."""
    from chatgbt.cli_commands.ask import ask
    from chatgbt.cli_commands.chat import chat
    from chatgbt.cli_commands.config import config_cmd

    cli.add_command(chat)
    cli.add_command(ask)
    cli.add_command(config_cmd)
