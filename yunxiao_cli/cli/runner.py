"""
Command Runner.

Error boundary shared by all commands: runs the async implementation,
renders CliError as a single red line on stderr, and exits with code 1.
"""

import asyncio
from collections.abc import Coroutine
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape

from yunxiao_cli.core.exceptions import CliError
from yunxiao_cli.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

console = Console()
err_console = Console(stderr=True)


def run_command(coro: Coroutine[Any, Any, Any]) -> Any:
    """Run a command coroutine, converting CliError into exit code 1."""
    try:
        return asyncio.run(coro)
    except CliError as e:
        log_with_source(logger, "cli", "debug", "Command failed", code=e.code, error=e.message)
        err_console.print(f"[red]Error: {escape(e.message)}[/red]")
        raise typer.Exit(1) from e


def print_result(result: Any) -> None:
    """Print a decoded API result as JSON (text results verbatim)."""
    if isinstance(result, str):
        typer.echo(result)
        return
    console.print_json(data=result)
