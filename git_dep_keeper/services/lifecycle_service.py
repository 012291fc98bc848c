"""Acquire, refresh, pin and unpin dependency checkouts"""
import os
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from git_dep_keeper.constants import DEFAULT_REMOTE
from git_dep_keeper.logging_config import get_logger
from git_dep_keeper.models.manifest import DependencySpec, Manifest
from git_dep_keeper.models.repository import BackendResult, OperationResult, Outcome
from git_dep_keeper.services.git_backend import GitBackend, RepositoryBackend

logger = get_logger(__name__)

BackendFactory = Callable[[str], RepositoryBackend]
Step = Tuple[str, Callable[[], BackendResult]]


class LifecycleService:
    """Runs the backend command sequence of each lifecycle operation.

    Dependencies are processed one at a time. A sequence stops at its first
    failed step; the failure is returned, never raised, so one broken
    repository does not abort a batch.
    """

    def __init__(self, manifest: Manifest, backend_factory: Optional[BackendFactory] = None,
                 remote_name: str = DEFAULT_REMOTE):
        """Initialize the service.

        Args:
            manifest: Loaded manifest of the project
            backend_factory: Builds a backend for a working directory (default GitBackend)
            remote_name: Remote pulled from and pushed to
        """
        self.manifest = manifest
        self.backend_factory = backend_factory or GitBackend
        self.remote_name = remote_name

    def _workdir(self, name: str) -> str:
        return os.path.join(self.manifest.base_dir, self.manifest.repo_path(name))

    def _run_steps(self, name: str, action: str, steps: Sequence[Step], done_message: str) -> OperationResult:
        result = OperationResult(name, action, Outcome.DONE, done_message)
        for description, step in steps:
            logger.info(f"{name}: {description}")
            outcome = step()
            result.steps.append(outcome)
            if not outcome.ok:
                logger.warning(f"{name}: {description} failed: {outcome.error}")
                result.outcome = Outcome.FAILED
                result.message = f"{description} failed: {outcome.error}"
                break
        return result

    def _checkout_steps(self, backend: RepositoryBackend, dep: DependencySpec) -> List[Step]:
        """Steps that move a checkout to its pinned tag, or fast-forward its branch."""
        if dep.is_tag_pinned:
            return [(f"checking out tag {dep.tag}", lambda: backend.checkout(dep.tag, quiet=True))]
        branch = dep.pin_ref
        return [
            (f"checking out branch {branch}", lambda: backend.checkout(branch, quiet=True)),
            (f"pull {self.remote_name} {branch}", lambda: backend.pull(
                self.remote_name, branch,
                fast_forward_only=True,
                no_rebase=True,
                quiet=True,
            )),
        ]

    def _pinned_message(self, dep: DependencySpec) -> str:
        if dep.is_tag_pinned:
            return f"at tag {dep.tag}"
        return f"on branch {dep.pin_ref}"

    def acquire(self, name: str) -> OperationResult:
        """Clone a dependency and check out its pin; an existing checkout is left alone."""
        dep = self.manifest.dependencies.get(name)
        if dep is None:
            return OperationResult(name, "get", Outcome.FAILED, "not declared in the manifest")
        if self.manifest.repo_exists(name):
            return OperationResult(name, "get", Outcome.SKIPPED, "found -> ignored")

        dest = self.manifest.repo_path(name)
        parent = self.backend_factory(self.manifest.base_dir)
        backend = self.backend_factory(self._workdir(name))
        steps = [(f"cloning {dep.url} into {dest}", lambda: parent.clone(dep.url, dest, skip_checkout=True))]
        steps.extend(self._checkout_steps(backend, dep))
        return self._run_steps(name, "get", steps, f"cloned {self._pinned_message(dep)}")

    def refresh(self, name: str) -> OperationResult:
        """Fetch every remote, then re-apply the pin of an existing checkout."""
        dep = self.manifest.dependencies.get(name)
        if dep is None:
            return OperationResult(name, "update", Outcome.FAILED, "not declared in the manifest")
        if not self.manifest.repo_exists(name):
            return OperationResult(name, "update", Outcome.SKIPPED, "not found -> ignored")

        backend = self.backend_factory(self._workdir(name))
        steps = [("fetching from remotes", lambda: backend.fetch_all(quiet=True))]
        steps.extend(self._checkout_steps(backend, dep))
        return self._run_steps(name, "update", steps, f"updated {self._pinned_message(dep)}")

    def pin(self, name: str, tag: str) -> OperationResult:
        """Tag the current HEAD of a checkout and push the tag."""
        if not self.manifest.repo_exists(name):
            return OperationResult(name, "tag", Outcome.SKIPPED, "not found -> ignored")
        backend = self.backend_factory(self._workdir(name))
        steps = [
            ("adding tag", lambda: backend.tag(tag)),
            ("pushing tag to remote", lambda: backend.push_tag(tag, self.remote_name)),
        ]
        return self._run_steps(name, "tag", steps, f"tagged {tag}")

    def unpin(self, name: str, tag: str) -> OperationResult:
        """Delete a tag locally and on the remote."""
        if not self.manifest.repo_exists(name):
            return OperationResult(name, "untag", Outcome.SKIPPED, "not found -> ignored")
        backend = self.backend_factory(self._workdir(name))
        steps = [
            ("deleting tag", lambda: backend.delete_tag(tag)),
            ("deleting tag from remote", lambda: backend.push_delete_tag(tag, self.remote_name)),
        ]
        return self._run_steps(name, "untag", steps, f"untagged {tag}")

    def _names(self, names: Optional[Iterable[str]]) -> List[str]:
        return list(names) if names else self.manifest.dependency_names()

    def acquire_all(self, names: Optional[Iterable[str]] = None) -> List[OperationResult]:
        return [self.acquire(name) for name in self._names(names)]

    def refresh_all(self, names: Optional[Iterable[str]] = None) -> List[OperationResult]:
        return [self.refresh(name) for name in self._names(names)]

    def pin_all(self, tag: str) -> List[OperationResult]:
        """Apply the same tag to every dependency, e.g. to snapshot a host release."""
        return [self.pin(name, tag) for name in self.manifest.dependency_names()]

    def unpin_all(self, tag: str) -> List[OperationResult]:
        return [self.unpin(name, tag) for name in self.manifest.dependency_names()]
