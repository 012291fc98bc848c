"""Derived repository state and operation results"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, Union

from git_dep_keeper.exceptions import BackendFailure


class RepositoryState(Enum):
    """State of a dependency checkout, recomputed on every query."""
    PRESENT_CLEAN = "clean"
    PRESENT_DIRTY = "dirty"
    ABSENT = "missing"
    UNKNOWN = "unknown"  # status query failed


class Outcome(Enum):
    """Outcome of a lifecycle operation on one dependency."""
    DONE = "done"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class Change:
    """One entry of a porcelain status listing."""
    status_code: str
    path: str
    original_path: Optional[str] = None  # only set for renames and copies

    def __str__(self) -> str:
        if self.original_path:
            return f"{self.status_code} {self.original_path} -> {self.path}"
        return f"{self.status_code} {self.path}"


@dataclass
class BackendResult:
    """Outcome of a single backend command."""
    command: str
    ok: bool
    output: str = ""
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.ok

    def raise_for_status(self, name: Optional[str] = None) -> None:
        if not self.ok:
            raise BackendFailure(self.command, name, self.error)


@dataclass
class StatusResult(BackendResult):
    """Outcome of a status command with its parsed entries."""
    entries: List[Union[Change, str]] = field(default_factory=list)


@dataclass
class OperationResult:
    """Outcome of a lifecycle operation on one dependency."""
    name: str
    action: str
    outcome: Outcome
    message: str = ""
    steps: List[BackendResult] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.outcome == Outcome.FAILED

    @property
    def failed_step(self) -> Optional[BackendResult]:
        for step in self.steps:
            if not step.ok:
                return step
        return None


@dataclass
class RepoStatus:
    """Working tree state of one repository."""
    name: str
    path: str
    state: RepositoryState
    changes: List[Change] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def change_count(self) -> int:
        return len(self.changes)


@dataclass
class AnalysisResult:
    """Aggregate findings of one status run."""
    modified_count: int = 0
    missing_count: int = 0
    failed_count: int = 0
    orphan_dirs: Set[str] = field(default_factory=set)
    unsatisfied_deps: Dict[str, Set[str]] = field(default_factory=dict)


@dataclass
class StatusReport:
    """Everything a status run found, ready to be displayed."""
    entries: List[RepoStatus]
    host: Optional[RepoStatus]
    analysis: AnalysisResult
    show_changes: bool = False

    @property
    def failed(self) -> bool:
        return self.analysis.failed_count > 0
