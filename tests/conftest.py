"""Pytest fixtures for git-dep-keeper tests"""
import json
import os
import tempfile
from pathlib import Path
from typing import NamedTuple

import git
import pytest

from git_dep_keeper.models.repository import BackendResult, Change, StatusResult
from git_dep_keeper.services.git_backend import RepositoryBackend


def _write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2))
    return path


def configure_identity(repo: git.Repo) -> None:
    """Configure git user for commits."""
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")


def commit_file(repo: git.Repo, name: str, content: str, message: str) -> str:
    path = Path(repo.working_dir) / name
    path.write_text(content)
    repo.index.add([name])
    return repo.index.commit(message).hexsha


class Upstream(NamedTuple):
    """A bare 'origin' repository and the working repository that feeds it."""
    work: git.Repo
    url: str
    tag_sha: str
    main_sha: str
    dev_sha: str


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def project_dir(temp_dir):
    """Empty host project directory."""
    path = temp_dir / "project"
    path.mkdir()
    return path


@pytest.fixture
def upstream(temp_dir):
    """Create a bare remote with a 'main' branch, a 'dev' branch and a 'v1.0' tag.

    The tag points at the first commit; main has one more commit on top of it.
    """
    work_path = temp_dir / "upstream"
    work_path.mkdir()
    work = git.Repo.init(work_path)
    configure_identity(work)

    tag_sha = commit_file(work, "README.md", "# Upstream\n", "Initial commit")
    work.git.branch("-M", "main")
    work.create_tag("v1.0")
    main_sha = commit_file(work, "lib.txt", "lib v2\n", "Second commit")

    work.git.checkout("-b", "dev")
    dev_sha = commit_file(work, "dev.txt", "dev work\n", "Dev commit")
    work.git.checkout("main")

    bare_path = temp_dir / "origin.git"
    work.clone(str(bare_path), bare=True)
    work.create_remote("origin", str(bare_path))

    yield Upstream(work, str(bare_path), tag_sha, main_sha, dev_sha)

    work.close()


class RecordingBackend(RepositoryBackend):
    """Backend double that records every call instead of running git."""

    def __init__(self, working_dir, factory):
        super().__init__(working_dir)
        self.factory = factory

    @property
    def label(self):
        return os.path.basename(os.path.normpath(self.working_dir))

    def _record(self, operation, *args):
        self.factory.log.append((self.label, operation) + args)
        error = self.factory.failures.get(operation)
        if error is not None:
            return BackendResult(f"git {operation}", False, error=error)
        return BackendResult(f"git {operation}", True)

    def clone(self, url, dest, skip_checkout=False):
        return self._record("clone", url, dest, skip_checkout)

    def checkout(self, ref, quiet=False):
        return self._record("checkout", ref, quiet)

    def fetch_all(self, quiet=False):
        return self._record("fetch_all", quiet)

    def fetch(self, remote, quiet=False):
        return self._record("fetch", remote, quiet)

    def pull(self, remote, branch, fast_forward_only=False, no_rebase=False, quiet=False):
        return self._record("pull", remote, branch, fast_forward_only, no_rebase, quiet)

    def tag(self, name):
        return self._record("tag", name)

    def push_tag(self, name, remote="origin", quiet=True):
        return self._record("push_tag", name, remote)

    def delete_tag(self, name):
        return self._record("delete_tag", name)

    def push_delete_tag(self, name, remote="origin", quiet=True):
        return self._record("push_delete_tag", name, remote)

    def status(self, porcelain=True):
        self.factory.log.append((self.label, "status", porcelain))
        if self.label in self.factory.status_failures:
            return StatusResult("git status", False, error=self.factory.status_failures[self.label])
        return StatusResult("git status", True, entries=list(self.factory.changes.get(self.label, [])))

    def raw(self, command, args=()):
        return self._record("raw", command, list(args))


class RecordingBackends:
    """Backend factory handing out RecordingBackend instances sharing one log."""

    def __init__(self):
        self.log = []
        self.failures = {}
        self.changes = {}
        self.status_failures = {}

    def __call__(self, working_dir):
        return RecordingBackend(working_dir, self)

    def operations(self):
        """Logged calls without the working directory label."""
        return [entry[1:] for entry in self.log]


@pytest.fixture
def backends():
    """Backend factory recording the calls made through it."""
    return RecordingBackends()


@pytest.fixture
def two_changes():
    return [Change("M", "README.md"), Change("??", "notes.txt")]


@pytest.fixture
def write_json():
    """Helper writing a JSON document, creating parent directories."""
    return _write_json


@pytest.fixture
def upstream_commit(upstream):
    """Helper committing a file on upstream main and pushing it to the bare remote."""
    def _commit(name: str, content: str = "content\n", message: str = "Upstream commit") -> str:
        sha = commit_file(upstream.work, name, content, message)
        upstream.work.git.push("origin", "main")
        return sha
    return _commit
