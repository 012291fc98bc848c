"""Core functionality for git-dep-keeper"""

import os
from contextlib import contextmanager
from dataclasses import dataclass
from functools import partial
from typing import List, Optional, Sequence, Union

from filelock import FileLock, Timeout

from git_dep_keeper.config import Config
from git_dep_keeper.constants import LOCK_FILE, LinePrefix
from git_dep_keeper.exceptions import PathConflictError, UnknownDependencyError, WorkspaceLockedError
from git_dep_keeper.logging_config import get_logger
from git_dep_keeper.models.manifest import HostMetadata, Manifest
from git_dep_keeper.models.repository import BackendResult, OperationResult
from git_dep_keeper.services.dependency_analyzer import DependencyAnalyzer
from git_dep_keeper.services.display_service import DisplayService
from git_dep_keeper.services.git_backend import GitBackend
from git_dep_keeper.services.lifecycle_service import BackendFactory, LifecycleService
from git_dep_keeper.services.manifest_service import ManifestService
from git_dep_keeper.services.status_service import StatusService

logger = get_logger(__name__)


@dataclass
class Project:
    """Manifest and host metadata loaded from a project directory."""
    manifest: Manifest
    host: HostMetadata


class DepKeeper:
    """Runs the commands of git-dep-keeper against one project directory."""

    def __init__(self, project_dir: str = ".", config: Union[Config, dict, None] = None,
                 backend_factory: Optional[BackendFactory] = None):
        """Initialize DepKeeper.

        Args:
            project_dir: Directory holding the manifest and host descriptor
            config: Configuration dict or Config object
            backend_factory: Builds a repository backend for a working directory
        """
        if config is None:
            config = Config()
        elif isinstance(config, dict):
            config = Config.from_dict(config)
        self.project_dir = project_dir
        self.config = config
        self.backend_factory = backend_factory or partial(GitBackend, timeout=config.git_timeout)
        self.manifest_service = ManifestService(config.manifest_file, config.host_file)
        self.display_service = DisplayService(verbose=config.verbose)

    def load(self) -> Project:
        """Load the project; malformed documents raise ManifestLoadError."""
        manifest, host = self.manifest_service.load(self.project_dir)
        logger.debug(f"Loaded {len(manifest.dependencies)} dependencies from {self.project_dir}")
        return Project(manifest, host)

    @contextmanager
    def workspace_lock(self, project: Project):
        """Hold the lock of the workspace root so two processes never work on it at once."""
        if not self.config.use_lock:
            yield
            return
        root = project.manifest.root_dir()
        os.makedirs(root, exist_ok=True)
        path = os.path.join(root, LOCK_FILE)
        lock = FileLock(path, timeout=self.config.lock_timeout)
        try:
            lock.acquire()
        except Timeout:
            raise WorkspaceLockedError(path)
        logger.debug(f"Acquired workspace lock {path}")
        try:
            yield
        finally:
            lock.release()

    def _lifecycle(self, project: Project) -> LifecycleService:
        return LifecycleService(project.manifest, self.backend_factory, self.config.remote_name)

    @staticmethod
    def _exit_code(results: Sequence[OperationResult]) -> int:
        return 1 if any(result.failed for result in results) else 0

    def init(self) -> int:
        """Create an empty manifest unless one already exists."""
        try:
            path = self.manifest_service.init(self.project_dir)
        except PathConflictError as e:
            self.display_service.message(f"ignored: {e}", "yellow")
            return 0
        self.display_service.message(f"creating {os.path.basename(path)}")
        return 0

    def status(self, project: Project, names: Optional[List[str]] = None) -> int:
        service = StatusService(
            project.manifest,
            project.host,
            backend_factory=self.backend_factory,
            analyzer=DependencyAnalyzer(self.manifest_service),
        )
        report = service.report(names)
        self.display_service.display_status(report)
        return 1 if report.failed else 0

    def get(self, project: Project, names: Optional[List[str]] = None) -> int:
        results = self._lifecycle(project).acquire_all(names)
        self.display_service.display_operations(LinePrefix.GET, results)
        return self._exit_code(results)

    def update(self, project: Project, names: Optional[List[str]] = None) -> int:
        results = self._lifecycle(project).refresh_all(names)
        self.display_service.display_operations(LinePrefix.UPDATE, results)
        return self._exit_code(results)

    def tag(self, project: Project) -> int:
        tag = project.host.collective_tag()
        results = self._lifecycle(project).pin_all(tag)
        self.display_service.display_operations(LinePrefix.TAG, results, tag)
        return self._exit_code(results)

    def untag(self, project: Project) -> int:
        tag = project.host.collective_tag()
        results = self._lifecycle(project).unpin_all(tag)
        self.display_service.display_operations(LinePrefix.UNTAG, results, tag)
        return self._exit_code(results)

    def git(self, project: Project, command: str, name: str, args: Sequence[str] = ()) -> int:
        """Run an arbitrary git command inside one dependency checkout."""
        manifest = project.manifest
        if name not in manifest.dependencies:
            raise UnknownDependencyError(name)
        if not manifest.repo_exists(name):
            self.display_service.message(f"{LinePrefix.GIT} {name} not found -> ignored", "yellow")
            return 1

        path = os.path.join(manifest.base_dir, manifest.repo_path(name))
        result: BackendResult = self.backend_factory(path).raw(command, list(args))
        self.display_service.display_output(result.output)
        if not result.ok:
            self.display_service.message(f"{LinePrefix.GIT} {name} FAILED {result.error}", "red")
            return 1
        return 0
