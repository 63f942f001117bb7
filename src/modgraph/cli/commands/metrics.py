"""Metrics command for modgraph CLI."""

from pathlib import Path

import typer
from loguru import logger

from ...analysis.engine import AnalysisResult, analyze
from ...analysis.reporters.console import ConsoleReporter
from ...analysis.reporters.json_reporter import render_json
from ...config.defaults import CONFIG_FILENAME
from ...config.settings import AnalysisConfig
from ...core.baseline import StandardBaseline
from ...core.exceptions import ModGraphError
from ...core.loader import load_modules
from ..output import console, print_error, print_json, print_warning

metrics_app = typer.Typer(help="📐 Print coupling, abstractness and distance metrics")


def resolve_config(
    root: Path,
    config_path: Path | None,
    *,
    include_std: bool = False,
    structural: bool = False,
    sort_by: str | None = None,
    workers: int | None = None,
) -> AnalysisConfig:
    """Load the configuration file and apply command-line overrides.

    Flags only ever switch features on; values given on the command line
    replace the file's values.

    Raises:
        ConfigError: If the file or an override is invalid
    """
    config = AnalysisConfig.load(config_path or root / CONFIG_FILENAME)
    data = config.to_dict()
    if include_std:
        data["include_std"] = True
    if structural:
        data["structural"] = True
    if sort_by is not None:
        data["sort_by"] = sort_by
    if workers is not None:
        data["workers"] = workers
    return AnalysisConfig.from_dict(data)


def run_analysis(root: Path, config: AnalysisConfig) -> AnalysisResult:
    """Load ``root`` and run the analysis phases.

    The standard baseline loads in the background while the sources are
    parsed, and is resolved before metrics are computed.

    Raises:
        LoaderError: If ``root`` cannot be loaded
    """
    baseline = None
    if not config.include_std:
        baseline = StandardBaseline()
        baseline.start()

    loaded = load_modules(root, exclude=config.exclude)
    if not loaded.modules:
        print_warning(f"No Python modules found under {root}")
    for module_id, error in loaded.errors.items():
        print_warning(f"{module_id}: {error}")

    return analyze(loaded.modules, config=config, baseline=baseline)


@metrics_app.callback(invoke_without_command=True)
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
        rich_help_panel="🔧 Global Options",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help=f"Configuration file (defaults to {CONFIG_FILENAME} in the source root)",
        dir_okay=False,
        rich_help_panel="🔧 Global Options",
    ),
    include_std: bool = typer.Option(
        False,
        "--std",
        help="Include standard library modules in the output",
        rich_help_panel="🔍 Filters",
    ),
    structural: bool = typer.Option(
        False,
        "--types",
        help="Compute structural coupling (SCa/SCe)",
        rich_help_panel="⚡ Analysis Options",
    ),
    workers: int | None = typer.Option(
        None,
        "--workers",
        "-w",
        help="Threads used by the structural coupling search",
        min=1,
        rich_help_panel="⚡ Analysis Options",
    ),
    sort_by: str | None = typer.Option(
        None,
        "--sort",
        help="Sort by: d, ca, ce, a, i, sca, sce, id",
        rich_help_panel="📊 Display Options",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output results in JSON format",
        rich_help_panel="📊 Display Options",
    ),
    show_issues: bool = typer.Option(
        False,
        "--issues",
        help="List non-fatal issues (unresolved imports, missing type info)",
        rich_help_panel="📊 Display Options",
    ),
) -> None:
    """📐 Print Robert Martin's package metrics.

    [bold cyan]Metrics:[/bold cyan]

      Ca   modules that depend on this module
      Ce   modules this module depends on
      A    abstractness: contract types / all types
      I    instability: Ce / (Ce + Ca)
      D    distance from the main sequence: |A + I - 1|

    With [green]--types[/green], structural coupling is added:

      SCa  modules whose types satisfy this module's contracts without importing it
      SCe  modules whose contracts this module's types satisfy without importing them

    [bold cyan]Examples:[/bold cyan]

        $ modgraph metrics -p src
        $ modgraph metrics -p src --types --sort sce
        $ modgraph metrics -p src --json > metrics.json
    """
    if ctx.invoked_subcommand is not None:
        return

    root = project_root or Path.cwd()

    try:
        config = resolve_config(
            root,
            config_path,
            include_std=include_std,
            structural=structural,
            sort_by=sort_by,
            workers=workers,
        )
        result = run_analysis(root, config)
    except ModGraphError as e:
        logger.error(f"Analysis failed: {e}")
        print_error(f"Analysis failed: {e}")
        raise typer.Exit(1)

    if json_output:
        print_json(render_json(result, sort_by=config.sort_by))
        return

    reporter = ConsoleReporter(console, distance_warning=config.distance_warning)
    reporter.print_metrics(result, sort_by=config.sort_by)
    if show_issues:
        reporter.print_issues(result)
