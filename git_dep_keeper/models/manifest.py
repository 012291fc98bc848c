"""Manifest model: the declared dependency set of a host project"""
import ntpath
import os
import posixpath
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from git_dep_keeper.constants import (
    DEFAULT_BRANCH,
    DEFAULT_PATH_CONVENTION,
    DEFAULT_ROOT,
    PATH_CONVENTIONS,
)
from git_dep_keeper.exceptions import HostMetadataError, ManifestLoadError

_PATH_MODULES = {
    "posix": posixpath,
    "win32": ntpath,
}


@dataclass
class DependencySpec:
    """Remote location and pin policy of one dependency."""
    url: str
    tag: Optional[str] = None
    branch: Optional[str] = None

    @property
    def is_tag_pinned(self) -> bool:
        return self.tag is not None

    @property
    def pin_ref(self) -> str:
        """The ref checked out for this dependency (tag wins over branch)."""
        if self.tag is not None:
            return self.tag
        return self.branch or DEFAULT_BRANCH

    def to_dict(self) -> dict:
        data = {"url": self.url}
        if self.tag is not None:
            data["tag"] = self.tag
        elif self.branch is not None:
            data["branch"] = self.branch
        return data

    @classmethod
    def from_dict(cls, name: str, data, source: str = "manifest") -> "DependencySpec":
        if not isinstance(data, dict):
            raise ManifestLoadError(source, f"dependency '{name}' must be an object")
        url = data.get("url")
        if not isinstance(url, str) or not url:
            raise ManifestLoadError(source, f"dependency '{name}' has no url")
        for key in ("tag", "branch"):
            if data.get(key) is not None and not isinstance(data[key], str):
                raise ManifestLoadError(source, f"dependency '{name}' has a non-string {key}")
        tag = data.get("tag")
        # A tag makes the branch irrelevant, keep only one pin
        branch = None if tag is not None else data.get("branch")
        return cls(url=url, tag=tag, branch=branch)


@dataclass
class Manifest:
    """Workspace root and the dependencies that live under it."""
    root: str = DEFAULT_ROOT
    path_convention: str = DEFAULT_PATH_CONVENTION
    dependencies: Dict[str, DependencySpec] = field(default_factory=dict)
    base_dir: str = "."  # Directory the manifest was loaded from

    def __post_init__(self):
        if self.path_convention not in PATH_CONVENTIONS:
            raise ValueError(
                f"path_convention must be one of {list(PATH_CONVENTIONS)}, got '{self.path_convention}'"
            )

    @property
    def _path(self):
        return _PATH_MODULES[self.path_convention]

    def dependency_names(self) -> List[str]:
        """Dependency names in declaration order."""
        return list(self.dependencies)

    def repo_path(self, name: str) -> str:
        """Path of a dependency checkout, formatted with the manifest's convention."""
        return self._path.join(self.root, name)

    def _resolve(self, path: str) -> str:
        return os.path.join(self.base_dir, path)

    def repo_exists(self, name: str) -> bool:
        return os.path.exists(self._resolve(self.repo_path(name)))

    def root_dir(self) -> str:
        """Filesystem location of the workspace root."""
        return self._resolve(self.root)

    def root_entries(self) -> List[str]:
        """Names of the directories directly under the workspace root."""
        root = self.root_dir()
        if not os.path.isdir(root):
            return []
        return sorted(
            entry for entry in os.listdir(root)
            if os.path.isdir(os.path.join(root, entry))
        )

    def to_dict(self) -> dict:
        return {
            "root": self.root,
            "pathConvention": self.path_convention,
            "deps": {name: dep.to_dict() for name, dep in self.dependencies.items()},
        }

    @classmethod
    def from_dict(cls, data, base_dir: str = ".", source: str = "manifest") -> "Manifest":
        if not isinstance(data, dict):
            raise ManifestLoadError(source, "top level must be an object")

        root = data.get("root", DEFAULT_ROOT)
        if not isinstance(root, str) or not root:
            raise ManifestLoadError(source, "root must be a non-empty string")

        convention = data.get("pathConvention", DEFAULT_PATH_CONVENTION)
        if convention not in PATH_CONVENTIONS:
            raise ManifestLoadError(source, f"unknown pathConvention '{convention}'")

        deps = data.get("deps", {})
        if not isinstance(deps, dict):
            raise ManifestLoadError(source, "deps must be an object")

        dependencies = {
            name: DependencySpec.from_dict(name, spec, source)
            for name, spec in deps.items()
        }
        return cls(
            root=root,
            path_convention=convention,
            dependencies=dependencies,
            base_dir=base_dir,
        )


@dataclass
class HostMetadata:
    """Name and version of the host project, read from its own descriptor."""
    name: Optional[str] = None
    version: Optional[str] = None
    dependencies: dict = field(default_factory=dict)

    def collective_tag(self) -> str:
        """Tag applied to every dependency to snapshot a host release."""
        if not self.name:
            raise HostMetadataError("name")
        if not self.version:
            raise HostMetadataError("version")
        return f"{self.name}-{self.version}"

    @classmethod
    def from_dict(cls, data, source: str = "host descriptor") -> "HostMetadata":
        if not isinstance(data, dict):
            raise ManifestLoadError(source, "top level must be an object")
        name = data.get("name")
        version = data.get("version")
        return cls(
            name=str(name) if name is not None else None,
            version=str(version) if version is not None else None,
            dependencies=data.get("dependencies") or {},
        )
