"""``chatgbt ask`` — one-shot query without conversation history."""

from __future__ import annotations

import asyncio
import sys

import click
from rich.markup import escape

from chatgbt.cli_commands._output import console, load_cli_settings, print_warnings
from chatgbt.core.budget.sink import JsonlFileSink
from chatgbt.core.budget.tracker import BudgetTracker
from chatgbt.core.interface.client import ModelClient
from chatgbt.core.session.direct import direct_query
from chatgbt.core.session.manager import generate_session_id
from chatgbt.errors import CompletionError


@click.command()
@click.argument("query", nargs=-1, required=True)
@click.option("--usage/--no-usage", default=True, help="Print token usage after the reply.")
@click.pass_context
def ask(ctx: click.Context, query: tuple[str, ...], usage: bool) -> None:
    """Send QUERY to the model and print the reply."""
    settings = load_cli_settings(ctx)
    session_id = generate_session_id()
    tracker = BudgetTracker(
        session_id,
        settings.budget,
        conversation_type="quick",
        sink=JsonlFileSink.for_session(settings.log_dir, session_id),
    )
    client = ModelClient(settings.model)

    try:
        result = asyncio.run(
            direct_query(client, tracker, " ".join(query), timeout=settings.timeout)
        )
    except CompletionError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)
    finally:
        tracker.close()

    console.print(result.content, markup=False)
    if usage and result.usage is not None:
        console.print(
            f"Tokens: {result.usage.total_tokens} | "
            f"Cost: ${tracker.estimated_cost:.4f} | "
            f"Time: {result.latency:.1f}s"
        )
    print_warnings(result.warnings)
