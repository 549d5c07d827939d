"""
Git operations for Eureka.

Open a repository, check out the ideas branch, stage the ideas file,
commit it and push the branch to origin. Backed by pygit2 (libgit2).
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

import pygit2
from pygit2.enums import RepositoryOpenFlag

from eureka.credentials import (
    CredentialHelper,
    CredentialNegotiator,
    PushCallbacks,
    credential_helper_fill,
)
from eureka.errors import (
    AuthenticationError,
    BranchCreateError,
    GitOperationError,
    IndexUpdateError,
    NotInitialized,
    PushError,
    ReferenceLookupError,
    RemoteNotFound,
    RepoAccessError,
    SignatureError,
)

logger = logging.getLogger(__name__)

# The file every idea lands in. Not configurable.
IDEA_FILE = "README.md"
REMOTE_NAME = "origin"


def branch_ref(branch_name: str) -> str:
    """Full reference name for a local branch."""
    return f"refs/heads/{branch_name}"


class GitManagement(ABC):
    """Everything the app needs from git."""

    @abstractmethod
    def open(self, repo_path: str | Path) -> None:
        """Open an existing repository."""
        ...

    @abstractmethod
    def checkout_branch(self, branch_name: str) -> None:
        """Create the branch if missing, check it out and point HEAD at it."""
        ...

    @abstractmethod
    def add(self) -> None:
        """Stage the ideas file."""
        ...

    @abstractmethod
    def commit(self, subject: str) -> str:
        """Commit the index on top of HEAD. Returns the new commit id."""
        ...

    @abstractmethod
    def push(self, branch_name: str) -> None:
        """Push the branch to origin under the same name."""
        ...


class RepositoryHandle:
    """
    Owns the open pygit2 repository.

    Two states: uninitialized (no repository) and open. Open happens once;
    reaching for the repository before that raises NotInitialized.
    """

    def __init__(self) -> None:
        self._repo: pygit2.Repository | None = None

    @property
    def is_open(self) -> bool:
        return self._repo is not None

    def open(self, repo_path: str | Path) -> None:
        if self._repo is not None:
            raise RepoAccessError(f"Repository already open at {self._repo.path}")

        path = Path(repo_path).expanduser()
        try:
            # NO_SEARCH: the path itself must be the repository, never a parent
            self._repo = pygit2.Repository(str(path), RepositoryOpenFlag.NO_SEARCH)
        except pygit2.GitError as e:
            raise RepoAccessError(f"No git repository at {path}: {e}") from e

        logger.debug("Opened repository %s", self._repo.path)

    @property
    def repo(self) -> pygit2.Repository:
        if self._repo is None:
            raise NotInitialized("Repository has not been opened")
        return self._repo


def head_commit(repo: pygit2.Repository) -> pygit2.Commit:
    """
    Resolve HEAD and peel it to a commit.

    A repository without any commit has nothing to branch from or to use as
    a parent, so this raises ReferenceLookupError instead.
    """
    if repo.head_is_unborn:
        raise ReferenceLookupError("HEAD has no commit; the repository needs an initial commit")
    try:
        return repo.head.resolve().peel(pygit2.Commit)
    except (pygit2.GitError, KeyError, ValueError) as e:
        raise ReferenceLookupError(f"Couldn't find commit for HEAD: {e}") from e


class Git(GitManagement):
    """pygit2-backed implementation."""

    def __init__(
        self,
        ssh_key: str | Path = "",
        credential_helper: CredentialHelper | None = None,
    ):
        self.handle = RepositoryHandle()
        self.ssh_key = ssh_key
        self.credential_helper = credential_helper

    def open(self, repo_path: str | Path) -> None:
        self.handle.open(repo_path)

    def checkout_branch(self, branch_name: str) -> None:
        repo = self.handle.repo
        commit = head_commit(repo)

        try:
            repo.branches.local.create(branch_name, commit)
            logger.debug("Created branch %s at %s", branch_name, commit.id)
        except pygit2.AlreadyExistsError:
            logger.debug("Branch %s already exists", branch_name)
        except (pygit2.GitError, ValueError) as e:
            raise BranchCreateError(f"Couldn't create branch {branch_name}: {e}") from e

        refname = branch_ref(branch_name)
        try:
            target = repo.revparse_single(refname)
        except (KeyError, pygit2.GitError) as e:
            raise ReferenceLookupError(f"Couldn't resolve {refname}: {e}") from e

        try:
            repo.checkout_tree(target)
            repo.set_head(refname)
        except pygit2.GitError as e:
            raise GitOperationError(f"Couldn't check out {refname}: {e}") from e
        logger.debug("HEAD now points at %s", refname)

    def add(self) -> None:
        repo = self.handle.repo
        try:
            index = repo.index
            index.add(IDEA_FILE)
            index.write()
        except (pygit2.GitError, OSError, KeyError) as e:
            raise IndexUpdateError(f"Couldn't stage {IDEA_FILE}: {e}") from e
        logger.debug("Staged %s", IDEA_FILE)

    def commit(self, subject: str) -> str:
        repo = self.handle.repo
        parent = head_commit(repo)

        try:
            tree_id = repo.index.write_tree()
        except (pygit2.GitError, OSError) as e:
            raise IndexUpdateError(f"Couldn't write index tree: {e}") from e

        try:
            signature = repo.default_signature
        except (KeyError, pygit2.GitError) as e:
            raise SignatureError(
                "No commit identity; set user.name and user.email in git config"
            ) from e

        try:
            commit_id = repo.create_commit(
                "HEAD", signature, signature, subject, tree_id, [parent.id]
            )
        except pygit2.GitError as e:
            raise GitOperationError(f"Couldn't create commit: {e}") from e
        logger.debug("Committed %s on top of %s", commit_id, parent.id)
        return str(commit_id)

    def push(self, branch_name: str) -> None:
        repo = self.handle.repo
        try:
            remote = repo.remotes[REMOTE_NAME]
        except KeyError as e:
            raise RemoteNotFound(f"No remote named {REMOTE_NAME!r}") from e

        negotiator = CredentialNegotiator(self.ssh_key, self._bound_credential_helper(repo))
        callbacks = PushCallbacks(negotiator)
        refspec = f"{branch_ref(branch_name)}:{branch_ref(branch_name)}"

        logger.debug("Pushing %s to %s", refspec, remote.url)
        try:
            remote.push([refspec], callbacks=callbacks)
        except TypeError as e:
            # pygit2 refuses a credential whose type the challenge didn't offer
            raise AuthenticationError(f"Unusable credential for {remote.url}: {e}") from e
        except (pygit2.GitError, KeyError, OSError, ValueError) as e:
            # Rejected credentials surface from libgit2 as "authentication
            # required but no callback set" (http), "failed to authenticate
            # SSH session" and "too many redirects or authentication replays".
            if isinstance(e, pygit2.GitError) and "authenticat" in str(e).lower():
                raise AuthenticationError(f"Authentication to {remote.url} failed: {e}") from e
            raise PushError(f"Push to {remote.url} failed: {e}") from e

        if callbacks.rejected:
            details = ", ".join(f"{ref} ({msg})" for ref, msg in callbacks.rejected.items())
            raise PushError(f"Remote rejected {details}")

    def _bound_credential_helper(self, repo: pygit2.Repository) -> CredentialHelper:
        if self.credential_helper is not None:
            return self.credential_helper

        workdir = Path(repo.workdir) if repo.workdir else None
        return lambda url, username: credential_helper_fill(url, username, cwd=workdir)
