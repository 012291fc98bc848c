"""Configuration handling for git-dep-keeper"""

from dataclasses import dataclass, fields
from typing import Optional

from git_dep_keeper.constants import (
    DEFAULT_REMOTE,
    HOST_DESCRIPTOR_FILE,
    MANIFEST_FILE,
)


@dataclass
class Config:
    """Configuration for git-dep-keeper with validation."""

    # Files read from the project directory
    manifest_file: str = MANIFEST_FILE
    host_file: str = HOST_DESCRIPTOR_FILE

    # Remote used by pull, tag push and tag deletion
    remote_name: str = DEFAULT_REMOTE

    # Seconds before a git subprocess is killed (None = wait forever)
    git_timeout: Optional[float] = None

    # Workspace lock held by mutating commands
    use_lock: bool = True
    lock_timeout: float = 0  # 0 = fail immediately when locked

    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_files()
        self._validate_remote_name()
        self._validate_git_timeout()
        self._validate_lock_timeout()

    def _validate_files(self):
        """Validate manifest and host file names are not empty."""
        for key in ("manifest_file", "host_file"):
            value = getattr(self, key)
            if not value or not value.strip():
                raise ValueError(f"{key} cannot be empty")
            setattr(self, key, value.strip())

    def _validate_remote_name(self):
        """Validate remote_name is usable as a git argument."""
        if not self.remote_name or not self.remote_name.strip():
            raise ValueError("remote_name cannot be empty")
        self.remote_name = self.remote_name.strip()
        if self.remote_name.startswith("-"):
            raise ValueError(f"remote_name cannot start with '-', got '{self.remote_name}'")

    def _validate_git_timeout(self):
        """Validate git_timeout is positive when set."""
        if self.git_timeout is not None and self.git_timeout <= 0:
            raise ValueError(f"git_timeout must be positive, got {self.git_timeout}")

    def _validate_lock_timeout(self):
        """Validate lock_timeout is not negative."""
        if self.lock_timeout < 0:
            raise ValueError(f"lock_timeout cannot be negative, got {self.lock_timeout}")

    def to_dict(self) -> dict:
        """Convert config to a plain dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)
