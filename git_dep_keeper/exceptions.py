"""Custom exceptions for git-dep-keeper"""

from typing import Optional


class DepKeeperError(Exception):
    """Base exception for all git-dep-keeper errors."""
    pass


class ManifestLoadError(DepKeeperError):
    """Exception raised when a manifest or host descriptor is malformed."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        self.message = message

        error_msg = f"Cannot load '{path}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class HostMetadataError(DepKeeperError):
    """Exception raised when the host descriptor cannot provide a collective tag."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Host descriptor has no '{field}', cannot build a collective tag")


class BackendFailure(DepKeeperError):
    """Exception raised for a failed repository backend operation."""

    def __init__(self, operation: str, name: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.name = name
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if name:
            error_msg += f" in '{name}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class PathConflictError(DepKeeperError):
    """Exception raised when a file would be overwritten."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"existing {path} file found")


class UnknownDependencyError(DepKeeperError):
    """Exception raised when a name is not declared in the manifest."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"'{name}' is not declared in the manifest")


class WorkspaceLockedError(DepKeeperError):
    """Exception raised when another process holds the workspace lock."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Workspace is locked by another process ({path})")
