"""Display service for command results"""
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from git_dep_keeper.constants import CLI_COLORS
from git_dep_keeper.formatters import (
    format_change,
    format_missing,
    format_operation,
    format_orphan,
    format_repo_status,
    format_summary,
)
from git_dep_keeper.models.repository import OperationResult, RepositoryState, StatusReport

console = Console(highlight=False)

_STATE_COLORS = {
    RepositoryState.PRESENT_DIRTY: CLI_COLORS["dirty"],
    RepositoryState.ABSENT: CLI_COLORS["missing"],
    RepositoryState.UNKNOWN: CLI_COLORS["failed"],
}


class DisplayService:
    """Prints one line per processed item, then any summary."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def _print(self, text: str = "", color: Optional[str] = None) -> None:
        text = escape(text)
        if color:
            text = f"[{color}]{text}[/{color}]"
        console.print(text, soft_wrap=True)

    def message(self, text: str, color: Optional[str] = None) -> None:
        self._print(text, color)

    def display_operations(self, prefix: str, results: List[OperationResult], tag: Optional[str] = None) -> None:
        for result in results:
            color = CLI_COLORS.get(result.outcome.value)
            self._print(format_operation(prefix, result, tag), color)
            if self.verbose:
                for step in result.steps:
                    self._print(f"\t{step.command}", "dim")

    def display_output(self, output: str) -> None:
        """Print raw command output as is."""
        if output:
            console.print(output, markup=False, soft_wrap=True)

    def display_status(self, report: StatusReport) -> None:
        rows = list(report.entries)
        if report.host is not None:
            rows.append(report.host)

        for status in rows:
            self._print(format_repo_status(status), _STATE_COLORS.get(status.state))
            if report.show_changes:
                for change in status.changes:
                    self._print(format_change(change))

        analysis = report.analysis
        if analysis.orphan_dirs:
            self._print()
            for name in sorted(analysis.orphan_dirs):
                self._print(format_orphan(name), CLI_COLORS["orphan"])

        if analysis.unsatisfied_deps:
            self._print()
            for name, dependents in analysis.unsatisfied_deps.items():
                self._print(format_missing(name, dependents), CLI_COLORS["missing"])

        self._print()
        self._print(format_summary(analysis))
