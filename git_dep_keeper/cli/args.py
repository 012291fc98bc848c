"""Command-line argument parsing for git-dep-keeper."""

import argparse
from typing import List, Optional

from git_dep_keeper.__version__ import __version__
from git_dep_keeper.constants import DEFAULT_REMOTE, HOST_DESCRIPTOR_FILE, MANIFEST_FILE, TOOL_NAME

# Global options followed by a value
_VALUE_OPTIONS = {"-C", "--manifest", "--host-file", "--remote", "--timeout", "--lock-timeout"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=TOOL_NAME,
        description="Mirror the dependency repositories declared in a manifest into a local workspace",
        epilog="Any git command can be run inside a dependency with 'git-<cmd> <name> [args...]'.",
    )
    parser.add_argument("--version", action="version", version=f"{TOOL_NAME} {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument(
        "-C", dest="directory", default=".", metavar="DIR",
        help="Run as if started in DIR (default: current directory)",
    )
    parser.add_argument(
        "--manifest", default=MANIFEST_FILE, metavar="FILE",
        help=f"Manifest file name (default: {MANIFEST_FILE})",
    )
    parser.add_argument(
        "--host-file", default=HOST_DESCRIPTOR_FILE, metavar="FILE",
        help=f"Host project descriptor providing name and version (default: {HOST_DESCRIPTOR_FILE})",
    )
    parser.add_argument(
        "--remote", default=DEFAULT_REMOTE,
        help=f"Remote to pull from and push tags to (default: {DEFAULT_REMOTE})",
    )
    parser.add_argument(
        "--timeout", type=float, metavar="SECONDS",
        help="Kill any git command running longer than this",
    )
    parser.add_argument(
        "--lock-timeout", type=float, default=0, metavar="SECONDS",
        help="Wait this long for another run to release the workspace (default: 0)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    subparsers.add_parser("init", help="Create an empty manifest")

    status = subparsers.add_parser("status", help="Show local changes, missing and orphan repositories")
    status.add_argument("names", nargs="*", help="Dependencies to inspect (default: all)")

    get = subparsers.add_parser("get", help="Clone dependencies that are not checked out yet")
    get.add_argument("names", nargs="*", help="Dependencies to clone (default: all)")

    update = subparsers.add_parser("update", help="Fetch dependencies and move them to their pin")
    update.add_argument("names", nargs="*", help="Dependencies to update (default: all)")

    subparsers.add_parser("tag", help="Tag every dependency with <host name>-<host version>")
    subparsers.add_parser("untag", help="Delete the <host name>-<host version> tag from every dependency")

    git = subparsers.add_parser("git", help="Run a git command inside a dependency (also git-<cmd>)")
    git.add_argument("git_command", metavar="cmd", help="git command to run")
    git.add_argument("name", help="Dependency to run it in")
    git.add_argument("git_args", nargs=argparse.REMAINDER, metavar="args", help="Arguments passed to git")

    return parser


def _command_index(argv: List[str]) -> Optional[int]:
    """Position of the first positional argument, skipping global options."""
    i = 0
    while i < len(argv):
        token = argv[i]
        if token in _VALUE_OPTIONS:
            i += 2
        elif token.startswith("-"):
            i += 1
        else:
            return i
    return None


def expand_git_shortcut(argv: List[str]) -> List[str]:
    """Rewrite ``git-<cmd> ...`` into ``git <cmd> ...``."""
    argv = list(argv)
    i = _command_index(argv)
    if i is not None and argv[i].startswith("git-") and len(argv[i]) > 4:
        argv[i:i + 1] = ["git", argv[i][4:]]
    return argv


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Arguments after ``git <cmd> <name>`` are kept exactly as typed, ``--`` included.
    """
    import sys

    if argv is None:
        argv = sys.argv[1:]
    argv = expand_git_shortcut(argv)

    passthrough = None
    i = _command_index(argv)
    if i is not None and argv[i] == "git":
        argv, passthrough = argv[:i + 3], argv[i + 3:]

    args = build_parser().parse_args(argv)
    if passthrough is not None:
        args.git_args = passthrough
    return args
