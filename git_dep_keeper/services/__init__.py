"""Services for git-dep-keeper."""

from .dependency_analyzer import DependencyAnalyzer
from .display_service import DisplayService
from .git_backend import GitBackend, RepositoryBackend
from .lifecycle_service import LifecycleService
from .manifest_service import ManifestService
from .status_service import StatusService
from .workspace_service import WorkspaceService

__all__ = [
    "DependencyAnalyzer",
    "DisplayService",
    "GitBackend",
    "LifecycleService",
    "ManifestService",
    "RepositoryBackend",
    "StatusService",
    "WorkspaceService",
]
