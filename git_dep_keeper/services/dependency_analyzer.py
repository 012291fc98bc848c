"""One-hop check of the dependencies declared by each dependency"""
import os
from typing import Dict, Optional, Set

from git_dep_keeper.exceptions import ManifestLoadError
from git_dep_keeper.logging_config import get_logger
from git_dep_keeper.models.manifest import Manifest
from git_dep_keeper.services.manifest_service import ManifestService
from git_dep_keeper.services.workspace_service import WorkspaceService

logger = get_logger(__name__)


class DependencyAnalyzer:
    """Finds names required by a dependency's own manifest but absent from ours.

    Only the manifests of direct dependencies are read. The dependency relation
    may contain cycles, so nothing deeper is followed.
    """

    def __init__(self, manifest_service: Optional[ManifestService] = None):
        self.manifest_service = manifest_service or ManifestService()

    def analyze(self, manifest: Manifest) -> Dict[str, Set[str]]:
        """Map each missing name to the set of dependencies that declare it."""
        declared = set(manifest.dependency_names())
        missing: Dict[str, Set[str]] = {}

        for current in WorkspaceService(manifest).present():
            repo_dir = os.path.join(manifest.base_dir, manifest.repo_path(current))
            try:
                nested = self.manifest_service.load_manifest(repo_dir)
            except ManifestLoadError as e:
                logger.warning(f"Skipping dependencies of {current}: {e}")
                continue

            for name in nested.dependency_names():
                if name not in declared:
                    missing.setdefault(name, set()).add(current)

        if missing:
            logger.info(f"{len(missing)} dependencies are required but not declared")
        return missing
