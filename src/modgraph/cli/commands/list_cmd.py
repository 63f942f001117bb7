"""List command for modgraph CLI."""

from pathlib import Path

import typer
from loguru import logger

from ...analysis.reporters.console import ConsoleReporter
from ...core.exceptions import ModGraphError
from ..output import console, print_error
from .metrics import resolve_config, run_analysis

list_app = typer.Typer(help="📋 List modules with their imports")


@list_app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    project_root: Path | None = typer.Option(
        None,
        "--project-root",
        "-p",
        help="Source root to analyze (current directory if not specified)",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Configuration file", dir_okay=False
    ),
    include_std: bool = typer.Option(
        False, "--std", help="Include standard library modules in the output"
    ),
) -> None:
    """📋 List modules in id order.

    Shows each module's declaration count, the declarations upstream
    (modules importing it) and downstream (its import closure), and its
    direct imports within the analysed set.
    """
    if ctx.invoked_subcommand is not None:
        return

    root = project_root or Path.cwd()
    try:
        config = resolve_config(root, config_path, include_std=include_std)
        result = run_analysis(root, config)
    except ModGraphError as e:
        logger.error(f"Listing failed: {e}")
        print_error(f"Listing failed: {e}")
        raise typer.Exit(1)

    ConsoleReporter(console).print_list(result)
