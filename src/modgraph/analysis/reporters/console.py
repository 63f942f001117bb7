"""Console reporter for analysis results."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from ...config.defaults import (
    DEFAULT_COLUMNS,
    DEFAULT_DISTANCE_WARNING,
    STRUCTURAL_COLUMNS,
)
from . import sort_nodes

if TYPE_CHECKING:
    from ..engine import AnalysisResult
    from ..graph import Node

console = Console()


class ConsoleReporter:
    """Console reporter for displaying module metrics in the terminal."""

    def __init__(
        self,
        out: Console | None = None,
        distance_warning: float = DEFAULT_DISTANCE_WARNING,
    ) -> None:
        self.console = out or console
        self.distance_warning = distance_warning

    def _format_cell(self, node: Node, attr: str, spec: str) -> str:
        value = getattr(node, attr)
        text = format(value, spec) if spec else str(value)
        if attr == "d" and value >= self.distance_warning:
            return f"[red]{text}[/red]"
        return text

    def print_metrics(self, result: AnalysisResult, sort_by: str = "d") -> None:
        """Print the per-module metrics table.

        Structural columns are only shown when the structural phase ran.

        Args:
            result: Analysis result
            sort_by: Metric to sort by (descending), or ``id``
        """
        columns = STRUCTURAL_COLUMNS if result.structural else DEFAULT_COLUMNS

        table = Table(show_header=True, header_style="bold cyan", box=None)
        for header, attr, _ in columns:
            table.add_column(header, justify="left" if attr == "id" else "right")

        for node in sort_nodes(result.graph.sorted_nodes, sort_by):
            table.add_row(*(self._format_cell(node, attr, spec) for _, attr, spec in columns))

        self.console.print(table)

    def print_list(self, result: AnalysisResult) -> None:
        """Print modules with their direct imports and aggregate sizes."""
        table = Table(show_header=True, header_style="bold cyan", box=None)
        table.add_column("ID")
        table.add_column("Decls", justify="right")
        table.add_column("Up", justify="right")
        table.add_column("Down", justify="right")
        table.add_column("Imports")

        for node in result.graph.sorted_nodes:
            table.add_row(
                node.id,
                str(node.decl_stat.total),
                str(node.upstream.total),
                str(node.downstream.total),
                ", ".join(node.import_ids),
            )

        self.console.print(table)

    def print_issues(self, result: AnalysisResult) -> None:
        """Print non-fatal issues collected during the run."""
        if not result.issues:
            return

        self.console.print(f"\n[bold yellow]{len(result.issues)} issue(s)[/bold yellow]")
        for issue in result.issues:
            self.console.print(
                f"  [dim]{issue.kind.value}[/dim] {issue.module_id}: {issue.message}"
            )
