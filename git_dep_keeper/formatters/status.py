"""Status line formatting utilities."""

from typing import Iterable, Optional

from git_dep_keeper.constants import LinePrefix
from git_dep_keeper.models.repository import (
    AnalysisResult,
    Change,
    OperationResult,
    Outcome,
    RepositoryState,
    RepoStatus,
)


def format_repo_status(status: RepoStatus) -> str:
    """
    Format the STATUS line of one repository.

    Args:
        status: Working tree state of the repository

    Returns:
        Line such as "STATUS x 1 change(s) found" or "STATUS x missing"
    """
    if status.state == RepositoryState.ABSENT:
        detail = "missing"
    elif status.state == RepositoryState.PRESENT_DIRTY:
        detail = f"{status.change_count} change(s) found"
    elif status.state == RepositoryState.UNKNOWN:
        detail = f"unknown: {status.error}"
    else:
        detail = "clean"
    return f"{LinePrefix.STATUS} {status.name} {detail}"


def format_change(change: Change) -> str:
    """Format one change as an indented detail line."""
    return f"\t{change}"


def format_operation(prefix: str, result: OperationResult, tag: Optional[str] = None) -> str:
    """
    Format the line reported for a lifecycle operation.

    Args:
        prefix: Command word (GET, UPDATE, TAG, UNTAG)
        result: Outcome of the operation
        tag: Collective tag, shown for TAG and UNTAG

    Returns:
        Line such as "GET x found -> ignored" or "TAG x app-1.0 failed: ..."
    """
    parts = [prefix, result.name]
    if tag:
        parts.append(tag)
    if result.outcome == Outcome.FAILED:
        parts.append(f"FAILED {result.message}")
    elif result.message:
        parts.append(result.message)
    return " ".join(parts)


def format_orphan(name: str) -> str:
    return f"{LinePrefix.ORPHAN} {name}"


def format_missing(name: str, dependents: Iterable[str]) -> str:
    """Format a dependency required by others but absent from the manifest."""
    return f"{LinePrefix.MISSING} {name} used by {', '.join(sorted(dependents))}"


def format_summary(analysis: AnalysisResult) -> str:
    """
    Format the closing summary of a status run.

    Example:
        "repositories: 1 modified, 0 missing, 2 orphans."
    """
    summary = (
        f"repositories: {analysis.modified_count} modified, "
        f"{analysis.missing_count} missing, "
        f"{len(analysis.orphan_dirs)} orphans"
    )
    if analysis.failed_count:
        summary += f", {analysis.failed_count} failed"
    return summary + "."
