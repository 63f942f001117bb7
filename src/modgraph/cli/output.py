"""Console output helpers shared by CLI commands."""

from typing import Any

import orjson
import typer
from rich.console import Console

console = Console()
err_console = Console(stderr=True)


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    err_console.print(f"[bold red]✗[/bold red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message to stderr."""
    err_console.print(f"[yellow]⚠[/yellow] {message}")


def print_json(data: Any) -> None:
    """Print data as indented JSON, unstyled so it can be piped."""
    if isinstance(data, str):
        typer.echo(data)
    else:
        typer.echo(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode())
