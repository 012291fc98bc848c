"""Read-only view of the workspace directory"""
from typing import Iterable, List, Optional, Set

from git_dep_keeper.models.manifest import Manifest


class WorkspaceService:
    """Compares the directories under the workspace root with the manifest."""

    def __init__(self, manifest: Manifest):
        self.manifest = manifest

    def present(self, names: Optional[Iterable[str]] = None) -> List[str]:
        """Declared names whose checkout directory exists."""
        names = self.manifest.dependency_names() if names is None else names
        return [name for name in names if self.manifest.repo_exists(name)]

    def orphans(self, names: Optional[Iterable[str]] = None) -> Set[str]:
        """Directories under the root that are not in ``names`` (default: the manifest)."""
        known = set(self.manifest.dependency_names() if names is None else names)
        return {entry for entry in self.manifest.root_entries() if entry not in known}
