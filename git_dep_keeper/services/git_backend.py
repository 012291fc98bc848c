"""Repository backend: the only place that talks to git"""
import os
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

import git

from git_dep_keeper.constants import DEFAULT_REMOTE
from git_dep_keeper.logging_config import get_logger
from git_dep_keeper.models.repository import BackendResult, Change, StatusResult

logger = get_logger(__name__)


class RepositoryBackend(ABC):
    """Version control operations on the repository at ``working_dir``.

    Implementations never raise on an ordinary version control failure. Every
    operation returns a result whose ``ok`` flag tells whether the command
    confirmed success; callers treat anything else as "did not happen".
    """

    def __init__(self, working_dir: str):
        self.working_dir = working_dir

    @abstractmethod
    def clone(self, url: str, dest: str, skip_checkout: bool = False) -> BackendResult:
        ...

    @abstractmethod
    def checkout(self, ref: str, quiet: bool = False) -> BackendResult:
        ...

    @abstractmethod
    def fetch_all(self, quiet: bool = False) -> BackendResult:
        ...

    @abstractmethod
    def fetch(self, remote: str, quiet: bool = False) -> BackendResult:
        ...

    @abstractmethod
    def pull(self, remote: str, branch: str, fast_forward_only: bool = False,
             no_rebase: bool = False, quiet: bool = False) -> BackendResult:
        ...

    @abstractmethod
    def tag(self, name: str) -> BackendResult:
        ...

    @abstractmethod
    def push_tag(self, name: str, remote: str = DEFAULT_REMOTE, quiet: bool = True) -> BackendResult:
        ...

    @abstractmethod
    def delete_tag(self, name: str) -> BackendResult:
        ...

    @abstractmethod
    def push_delete_tag(self, name: str, remote: str = DEFAULT_REMOTE, quiet: bool = True) -> BackendResult:
        ...

    @abstractmethod
    def status(self, porcelain: bool = True) -> StatusResult:
        ...

    @abstractmethod
    def raw(self, command: str, args: Sequence[str] = ()) -> BackendResult:
        ...


def parse_porcelain(output: str) -> List[Change]:
    """Parse ``git status --porcelain -z`` output.

    Entries are NUL separated. A rename or copy entry is followed by an extra
    entry holding the original path.
    """
    changes = []
    entries = output.split("\0")
    i = 0
    while i < len(entries):
        entry = entries[i]
        i += 1
        if len(entry) < 4:
            continue
        code = entry[:2]
        path = entry[3:]
        original = None
        if ("R" in code or "C" in code) and i < len(entries):
            original = entries[i]
            i += 1
        changes.append(Change(code.strip(), path, original))
    return changes


def _reason(exc: git.exc.CommandError) -> str:
    """Readable reason out of a GitPython command error."""
    text = (exc.stderr or "").strip()
    if text.startswith("stderr:"):
        text = text[len("stderr:"):].strip().strip("'").strip()
    return text or str(exc)


def _unsafe(value: str) -> bool:
    # An argument git would read as an option
    return not value or value.startswith("-")


class GitBackend(RepositoryBackend):
    """RepositoryBackend running the git binary through GitPython."""

    def __init__(self, working_dir: str, timeout: Optional[float] = None):
        """Initialize the backend.

        Args:
            working_dir: Directory every command runs in
            timeout: Seconds after which a git process is killed (None = no limit)
        """
        super().__init__(working_dir)
        self.timeout = timeout
        self._git = git.Git(working_dir)

    def _execute(self, argv: List[str]) -> str:
        return self._git.execute(argv, kill_after_timeout=self.timeout)

    def _run(self, command: str, *args: str, values: Sequence[str] = ()) -> BackendResult:
        """Run ``git <command> <args>`` and capture its outcome.

        ``values`` lists the user supplied arguments (refs, urls, remotes) that
        must not be readable as options.
        """
        display = " ".join(["git", command, *args])
        for value in values:
            if _unsafe(value):
                logger.warning(f"Refusing argument {value!r} for git {command}")
                return BackendResult(display, False, error=f"refusing argument {value!r}")

        if not os.path.isdir(self.working_dir):
            return BackendResult(display, False, error=f"no such directory: {self.working_dir}")

        logger.debug(f"[{self.working_dir}] {display}")
        try:
            output = self._execute(["git", command, *args])
        except git.exc.CommandError as e:
            reason = _reason(e)
            logger.debug(f"[{self.working_dir}] {display} failed: {reason}")
            return BackendResult(display, False, error=reason)
        return BackendResult(display, True, output=output)

    def clone(self, url: str, dest: str, skip_checkout: bool = False) -> BackendResult:
        args = ["--no-checkout"] if skip_checkout else []
        return self._run("clone", *args, "--", url, dest, values=[url, dest])

    def checkout(self, ref: str, quiet: bool = False) -> BackendResult:
        args = ["--quiet"] if quiet else []
        return self._run("checkout", *args, ref, values=[ref])

    def fetch_all(self, quiet: bool = False) -> BackendResult:
        args = ["--all"]
        if quiet:
            args.append("--quiet")
        return self._run("fetch", *args)

    def fetch(self, remote: str, quiet: bool = False) -> BackendResult:
        args = ["--quiet"] if quiet else []
        return self._run("fetch", *args, remote, values=[remote])

    def pull(self, remote: str, branch: str, fast_forward_only: bool = False,
             no_rebase: bool = False, quiet: bool = False) -> BackendResult:
        args = []
        if fast_forward_only:
            args.append("--ff-only")
        if no_rebase:
            args.append("--no-rebase")
        if quiet:
            args.append("--quiet")
        return self._run("pull", *args, remote, branch, values=[remote, branch])

    def tag(self, name: str) -> BackendResult:
        return self._run("tag", name, values=[name])

    def push_tag(self, name: str, remote: str = DEFAULT_REMOTE, quiet: bool = True) -> BackendResult:
        return self._run("push", remote, "tag", name, "--quiet" if quiet else "--progress",
                         values=[remote, name])

    def delete_tag(self, name: str) -> BackendResult:
        return self._run("tag", "--delete", name, values=[name])

    def push_delete_tag(self, name: str, remote: str = DEFAULT_REMOTE, quiet: bool = True) -> BackendResult:
        return self._run("push", "--delete", remote, "tag", name, "--quiet" if quiet else "--progress",
                         values=[remote, name])

    def status(self, porcelain: bool = True) -> StatusResult:
        args = ["--porcelain", "-z"] if porcelain else []
        result = self._run("status", *args)
        if not result.ok:
            return StatusResult(result.command, False, error=result.error)
        if porcelain:
            entries = parse_porcelain(result.output)
        else:
            entries = [line for line in result.output.split("\n") if line]
        return StatusResult(result.command, True, output=result.output, entries=entries)

    def raw(self, command: str, args: Sequence[str] = ()) -> BackendResult:
        return self._run(command, *args, values=[command])
