"""Data models for git-dep-keeper."""

from .manifest import DependencySpec, HostMetadata, Manifest
from .repository import (
    AnalysisResult,
    BackendResult,
    Change,
    OperationResult,
    Outcome,
    RepositoryState,
    RepoStatus,
    StatusReport,
    StatusResult,
)

__all__ = [
    "AnalysisResult",
    "BackendResult",
    "Change",
    "DependencySpec",
    "HostMetadata",
    "Manifest",
    "OperationResult",
    "Outcome",
    "RepositoryState",
    "RepoStatus",
    "StatusReport",
    "StatusResult",
]
