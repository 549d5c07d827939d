"""
In-memory stand-in for Git.

Records every call and can be told to fail a specific operation, so the app
flow can be exercised without repositories or remotes.
"""

from pathlib import Path

from eureka.errors import GitOperationError, NotInitialized
from eureka.git import GitManagement, branch_ref


class FakeGit(GitManagement):
    """Test double for GitManagement."""

    def __init__(self, failures: dict[str, GitOperationError] | None = None):
        self.failures = failures or {}
        self.calls: list[tuple[str, ...]] = []
        self.repo_path: Path | None = None
        self.head: str | None = None
        self.branches: set[str] = set()
        self.staged = False
        self.commits: list[str] = []
        self.pushed: list[str] = []

    def _record(self, name: str, *args: str) -> None:
        self.calls.append((name, *args))
        if name in self.failures:
            raise self.failures[name]

    def _require_open(self) -> None:
        if self.repo_path is None:
            raise NotInitialized("Repository has not been opened")

    def open(self, repo_path: str | Path) -> None:
        self._record("open", str(repo_path))
        self.repo_path = Path(repo_path)

    def checkout_branch(self, branch_name: str) -> None:
        self._record("checkout_branch", branch_name)
        self._require_open()
        self.branches.add(branch_name)
        self.head = branch_ref(branch_name)

    def add(self) -> None:
        self._record("add")
        self._require_open()
        self.staged = True

    def commit(self, subject: str) -> str:
        self._record("commit", subject)
        self._require_open()
        self.commits.append(subject)
        self.staged = False
        return f"{len(self.commits):040x}"

    def push(self, branch_name: str) -> None:
        self._record("push", branch_name)
        self._require_open()
        self.pushed.append(branch_name)
