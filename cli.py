#!/usr/bin/env python3
"""
Yunxiao CLI (yx).

Command-line client for the Yunxiao OpenAPI.
Built with Typer for type-safe commands and Rich for formatted output.

Usage:
    yx --help                                          # Show help

    # Raw API calls
    yx api get /oapi/v1/platform/user                  # GET (retried on 5xx/timeouts)
    yx api get /oapi/v1/platform/organizations -q page=1
    yx api post /oapi/v1/... --body '{"name": "x"}'    # POST (never retried)
    yx api patch /oapi/v1/... --body '{...}'           # PATCH, falls back to PUT

    # Diagnostics
    yx doctor                                          # Token, base URL, connectivity

    yx version                                         # Show version

Options:
    --verbose, -v     Enable verbose output (INFO level logging)
    --debug, -d       Enable debug mode (DEBUG level logging)
    --help            Show help message

Environment:
    YUNXIAO_ACCESS_TOKEN, YX_CONFIG, YX_BASE_URL, YX_TIMEOUT_MS
"""

import typer
from rich.console import Console
from rich.markup import escape

from yunxiao_cli import __version__
from yunxiao_cli.cli.commands import api_app, doctor
from yunxiao_cli.core.config import get_config
from yunxiao_cli.core.exceptions import CliError
from yunxiao_cli.core.logging import setup_logging

app = typer.Typer(
    name="yx",
    help="Yunxiao CLI - call the Yunxiao OpenAPI with retries and endpoint fallback.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

err_console = Console(stderr=True)

app.add_typer(api_app, name="api")
app.command(name="doctor")(doctor)


@app.command()
def version() -> None:
    """Show the CLI version."""
    typer.echo(f"yx {__version__}")


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
) -> None:
    """
    Yunxiao CLI.

    Raw OpenAPI calls and diagnostics on top of a resilient request layer.
    """
    try:
        logging_config = get_config().logging
    except CliError as e:
        err_console.print(f"[red]Error: {escape(e.message)}[/red]")
        raise typer.Exit(1) from e

    if debug:
        setup_logging(level="DEBUG", format_type=logging_config.format)
        err_console.print("[dim]Debug mode enabled[/dim]")
    elif verbose:
        setup_logging(level="INFO", format_type=logging_config.format)
    else:
        setup_logging(level=logging_config.level, format_type=logging_config.format)


if __name__ == "__main__":
    app()
