"""Loading and saving of manifest documents"""
import json
import os
from typing import Tuple

from git_dep_keeper.constants import HOST_DESCRIPTOR_FILE, MANIFEST_FILE
from git_dep_keeper.exceptions import ManifestLoadError, PathConflictError
from git_dep_keeper.logging_config import get_logger
from git_dep_keeper.models.manifest import HostMetadata, Manifest

logger = get_logger(__name__)


class ManifestService:
    """Reads and writes the manifest and host descriptor of a project."""

    def __init__(self, manifest_file: str = MANIFEST_FILE, host_file: str = HOST_DESCRIPTOR_FILE):
        self.manifest_file = manifest_file
        self.host_file = host_file

    def _read_json(self, path: str):
        """Read a JSON document, or None when the file does not exist."""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except FileNotFoundError:
            logger.debug(f"{path} not found, using defaults")
            return None
        except json.JSONDecodeError as e:
            raise ManifestLoadError(path, f"invalid JSON ({e})")
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestLoadError(path, str(e))

    def manifest_path(self, directory: str = ".") -> str:
        return os.path.join(directory, self.manifest_file)

    def load_manifest(self, directory: str = ".") -> Manifest:
        """Load the manifest of ``directory``; an absent file is an empty manifest."""
        path = self.manifest_path(directory)
        data = self._read_json(path)
        if data is None:
            data = {"deps": {}}
        manifest = Manifest.from_dict(data, base_dir=directory, source=path)
        logger.debug(f"Loaded {len(manifest.dependencies)} dependencies from {path}")
        return manifest

    def load_host(self, directory: str = ".") -> HostMetadata:
        """Load the host descriptor of ``directory``; an absent file is empty metadata."""
        path = os.path.join(directory, self.host_file)
        data = self._read_json(path)
        if data is None:
            data = {"dependencies": {}}
        return HostMetadata.from_dict(data, source=path)

    def load(self, directory: str = ".") -> Tuple[Manifest, HostMetadata]:
        """Load the manifest and host descriptor of a project directory.

        Missing files give empty defaults. Malformed ones raise ManifestLoadError.
        """
        return self.load_manifest(directory), self.load_host(directory)

    def save(self, manifest: Manifest, path: str) -> None:
        """Write ``manifest`` to ``path``, replacing any existing file."""
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(manifest.to_dict(), f, indent=2)
            f.write("\n")
        logger.info(f"Saved manifest to {path}")

    def init(self, directory: str = ".") -> str:
        """Create an empty manifest in ``directory``.

        Returns:
            Path of the created manifest

        Raises:
            PathConflictError: a manifest already exists there; it is left untouched
        """
        path = self.manifest_path(directory)
        if os.path.exists(path):
            raise PathConflictError(self.manifest_file)
        self.save(Manifest(base_dir=directory), path)
        return path
