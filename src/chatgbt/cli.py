"""chatgbt CLI entrypoint."""

from __future__ import annotations

import logging

import click

from chatgbt import __version__


@click.group()
@click.version_option(version=__version__, prog_name="chatgbt")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML settings file.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.option(
    "--otlp-endpoint",
    envvar="OTEL_EXPORTER_OTLP_ENDPOINT",
    default=None,
    help="Export trace spans via OTLP/gRPC (requires chatgbt[otel]).",
)
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool, otlp_endpoint: str | None) -> None:
    """chatgbt — chat with an LLM under token and cost budgets."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if otlp_endpoint:
        from chatgbt.utils.telemetry import configure_telemetry

        try:
            configure_telemetry(otlp_endpoint)
        except ImportError as exc:
            raise click.UsageError(str(exc)) from exc

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


# Register subcommands
from chatgbt.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
