"""Shared constants for git-dep-keeper."""

TOOL_NAME = "git-dep-keeper"

# Files looked up in the project directory
MANIFEST_FILE = "git-dep-keeper.json"
HOST_DESCRIPTOR_FILE = "package.json"
LOCK_FILE = ".git-dep-keeper.lock"

# Manifest defaults
DEFAULT_ROOT = "./deps"
DEFAULT_PATH_CONVENTION = "posix"
DEFAULT_BRANCH = "master"
DEFAULT_REMOTE = "origin"

PATH_CONVENTIONS = ("posix", "win32")


# Prefixes of the per-item status lines
class LinePrefix:
    """Leading words of the lines printed for each command."""

    STATUS = "STATUS"
    GET = "GET"
    UPDATE = "UPDATE"
    TAG = "TAG"
    UNTAG = "UNTAG"
    GIT = "GIT"
    ORPHAN = "ORPHAN!"
    MISSING = "MISSING!"


# CLI colors (Rich color names)
CLI_COLORS = {
    "done": None,
    "skipped": "yellow",
    "failed": "red",
    "dirty": "yellow",
    "missing": "red",
    "orphan": "magenta",
}
