"""Shared CLI output formatters."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from chatgbt.core.budget.models import BudgetStatus, SessionSummary  # noqa: TC001
from chatgbt.core.context.manager import ContextStats  # noqa: TC001
from chatgbt.errors import ConfigurationError
from chatgbt.settings import AppSettings, load_settings

console = Console()


def load_cli_settings(ctx: click.Context) -> AppSettings:
    """Load settings for the current invocation or exit with an error."""
    config_path = (ctx.obj or {}).get("config_path")
    try:
        return load_settings(Path(config_path) if config_path else None)
    except ConfigurationError as exc:
        console.print(f"[red]Configuration error:[/red] {escape(str(exc))}")
        sys.exit(1)


def print_warnings(warnings: list[str]) -> None:
    for warning in warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")


def print_context_stats(stats: ContextStats) -> None:
    table = Table(title="Context")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Messages", str(stats.total_messages))
    table.add_row("  user", str(stats.user_messages))
    table.add_row("  assistant", str(stats.assistant_messages))
    table.add_row("  system", str(stats.system_messages))
    table.add_row("Estimated tokens", f"{stats.estimated_tokens} / {stats.token_limit}")
    table.add_row("Utilization", f"{stats.utilization_pct:.1f}%")
    table.add_row("Should prune", "yes" if stats.should_prune else "no")

    console.print(table)


def print_budget_status(status: BudgetStatus) -> None:
    console.print("\n[bold]Budget[/bold]")
    console.print(f"  Session tokens: {status.session_tokens} / {status.session_limit}")
    console.print(f"  Daily limit: {status.daily_limit}")
    console.print(f"  Session cost: ${status.session_cost:.4f}")
    if status.over_budget:
        console.print("  [red]Over budget[/red]")
    print_warnings(status.warnings)


def print_session_summary(summary: SessionSummary) -> None:
    console.print("\n[bold]Session Summary[/bold]")
    console.print(f"  Duration: {_format_duration(summary.duration.total_seconds())}")
    console.print(
        f"  Requests: {summary.total_requests} "
        f"({summary.success_rate * 100:.1f}% successful)"
    )
    console.print(f"  Tokens: {summary.total_tokens}")
    console.print(f"  Estimated cost: ${summary.estimated_cost:.4f}")
    console.print(f"  Avg response time: {summary.avg_response_time_ms}ms")


def print_prompt_types(breakdown: dict[str, int]) -> None:
    table = Table(title="Prompt Types")
    table.add_column("Type", style="cyan")
    table.add_column("Count", justify="right")

    for prompt_type, count in sorted(breakdown.items(), key=lambda kv: (-kv[1], kv[0])):
        table.add_row(prompt_type or "-", str(count))

    console.print(table)


def _format_duration(seconds: float) -> str:
    minutes, secs = divmod(int(seconds), 60)
    if minutes:
        return f"{minutes}m{secs:02d}s"
    return f"{secs}s"
