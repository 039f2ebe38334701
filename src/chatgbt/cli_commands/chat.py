"""``chatgbt chat`` — interactive conversation loop."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import click
from rich.markup import escape

from chatgbt.cli_commands._output import (
    console,
    load_cli_settings,
    print_budget_status,
    print_context_stats,
    print_prompt_types,
    print_session_summary,
    print_warnings,
)
from chatgbt.errors import CompletionError
from chatgbt.factory import build_session

if TYPE_CHECKING:
    from chatgbt.core.session.session import ChatSession

_HELP = """\
Commands:
  /reset [prompt]  start over, optionally with a new system prompt
  /stats           context window usage
  /budget          token and cost budget
  /summary         session metrics
  /types           prompt type breakdown
  /prune           prune the history now
  /help            this help
  /quit            exit
"""


@click.command()
@click.option("--system", "-s", "system_prompt", default=None, help="Override the system prompt.")
@click.pass_context
def chat(ctx: click.Context, system_prompt: str | None) -> None:
    """Start an interactive chat session."""
    settings = load_cli_settings(ctx)
    session = build_session(settings, conversation_type="cli", system_prompt=system_prompt)

    console.print(f"[bold]chatgbt[/bold] ({settings.model.model}). Type /help for commands, /quit to exit")
    try:
        asyncio.run(_loop(session))
    finally:
        print_session_summary(session.close())


async def _loop(session: ChatSession) -> None:
    while True:
        try:
            line = await asyncio.to_thread(_read_line)
        except (EOFError, click.exceptions.Abort):
            return

        line = line.strip()
        if not line:
            continue
        if line.startswith("/"):
            if not handle_command(session, line):
                return
            continue

        try:
            result = await session.process_turn(line)
        except CompletionError as exc:
            console.print(f"[red]Error:[/red] {escape(str(exc))}")
            continue

        console.print(f"\n[bold green]Assistant:[/bold green] {escape(result.content)}\n")
        print_warnings(result.warnings)


def _read_line() -> str:
    return click.prompt("You", prompt_suffix="> ", default="", show_default=False)


def handle_command(session: ChatSession, line: str) -> bool:
    """Run a slash command. Returns ``False`` when the loop should exit."""
    name, _, arg = line.partition(" ")
    arg = arg.strip()

    if name in ("/quit", "/exit"):
        return False
    if name == "/reset":
        session.reset(arg or None)
        console.print("[green]Conversation reset.[/green]")
    elif name == "/stats":
        print_context_stats(session.context_stats())
    elif name == "/budget":
        print_budget_status(session.budget_status())
    elif name == "/summary":
        print_session_summary(session.session_summary())
    elif name == "/types":
        print_prompt_types(session.prompt_type_breakdown())
    elif name == "/prune":
        if session.manual_prune():
            console.print("[green]History pruned.[/green]")
        else:
            console.print("Nothing to prune.")
    elif name == "/help":
        console.print(_HELP, markup=False)
    else:
        console.print(f"[red]Unknown command: {name}[/red] (try /help)")
    return True
