"""Aggregate working tree state of the dependencies and the host project"""
import os
from typing import Iterable, Optional

from git_dep_keeper.logging_config import get_logger
from git_dep_keeper.models.manifest import HostMetadata, Manifest
from git_dep_keeper.models.repository import (
    AnalysisResult,
    RepositoryState,
    RepoStatus,
    StatusReport,
)
from git_dep_keeper.services.dependency_analyzer import DependencyAnalyzer
from git_dep_keeper.services.git_backend import GitBackend
from git_dep_keeper.services.lifecycle_service import BackendFactory
from git_dep_keeper.services.workspace_service import WorkspaceService

logger = get_logger(__name__)


class StatusService:
    """Builds a StatusReport for a set of dependencies."""

    def __init__(self, manifest: Manifest, host: Optional[HostMetadata] = None,
                 backend_factory: Optional[BackendFactory] = None,
                 analyzer: Optional[DependencyAnalyzer] = None):
        self.manifest = manifest
        self.host = host or HostMetadata()
        self.backend_factory = backend_factory or GitBackend
        self.analyzer = analyzer or DependencyAnalyzer()
        self.workspace = WorkspaceService(manifest)

    def host_label(self) -> str:
        if self.host.name:
            return self.host.name
        return os.path.basename(os.path.abspath(self.manifest.base_dir))

    def repo_status(self, name: str, path: str) -> RepoStatus:
        """Query the working tree at ``path``; nothing is cached."""
        result = self.backend_factory(path).status(porcelain=True)
        if not result.ok:
            return RepoStatus(name, path, RepositoryState.UNKNOWN, error=result.error)
        if result.entries:
            return RepoStatus(name, path, RepositoryState.PRESENT_DIRTY, changes=list(result.entries))
        return RepoStatus(name, path, RepositoryState.PRESENT_CLEAN)

    def dependency_status(self, name: str, present: Optional[bool] = None) -> RepoStatus:
        path = self.manifest.repo_path(name)
        if present is None:
            present = bool(self.workspace.present([name]))
        if not present:
            return RepoStatus(name, path, RepositoryState.ABSENT)
        return self.repo_status(name, os.path.join(self.manifest.base_dir, path))

    def report(self, names: Optional[Iterable[str]] = None) -> StatusReport:
        """Status of ``names`` (default: every dependency) plus workspace findings."""
        names = list(names) if names else self.manifest.dependency_names()
        analysis = AnalysisResult()

        present = set(self.workspace.present(names))
        entries = []
        for name in names:
            status = self.dependency_status(name, name in present)
            if status.state == RepositoryState.PRESENT_DIRTY:
                analysis.modified_count += 1
            elif status.state == RepositoryState.ABSENT:
                analysis.missing_count += 1
            elif status.state == RepositoryState.UNKNOWN:
                analysis.failed_count += 1
            entries.append(status)

        # The host tree counts as modified but a host outside version control is not a failure
        host = self.repo_status(self.host_label(), self.manifest.base_dir)
        if host.state == RepositoryState.PRESENT_DIRTY:
            analysis.modified_count += 1
        elif host.state == RepositoryState.UNKNOWN:
            logger.info(f"Host project status unavailable: {host.error}")

        analysis.orphan_dirs = self.workspace.orphans(names)
        analysis.unsatisfied_deps = self.analyzer.analyze(self.manifest)

        return StatusReport(
            entries=entries,
            host=host,
            analysis=analysis,
            show_changes=len(names) == 1,
        )
