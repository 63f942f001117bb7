"""modgraph command-line entry point."""

import sys

import typer
from loguru import logger

from .. import __version__
from .commands.list_cmd import list_app
from .commands.metrics import metrics_app

app = typer.Typer(
    name="modgraph",
    help="Module dependency graph with coupling, abstractness and distance metrics.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(metrics_app, name="metrics")
app.add_typer(list_app, name="list")


def configure_logging(verbose: bool) -> None:
    """Route loguru output to stderr at the requested level."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"modgraph {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging"
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Module dependency graph with coupling, abstractness and distance metrics."""
    configure_logging(verbose)


def cli_main() -> None:
    app()


if __name__ == "__main__":
    cli_main()
