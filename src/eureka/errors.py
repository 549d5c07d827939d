"""
Error types for Eureka's git layer.

pygit2 and subprocess failures are translated into these at the boundary,
so callers only ever see eureka exceptions.
"""


class GitOperationError(Exception):
    """Base class for every failure raised by the git layer."""


class RepoAccessError(GitOperationError):
    """The path does not hold a usable repository."""


class NotInitialized(GitOperationError):
    """An operation ran before the repository was opened."""


class ReferenceLookupError(GitOperationError):
    """HEAD (or a branch ref) could not be resolved to a commit."""


class BranchCreateError(GitOperationError):
    """Branch creation failed for a reason other than it already existing."""


class IndexUpdateError(GitOperationError):
    """Staging a file or writing the index failed."""


class SignatureError(GitOperationError):
    """No user.name / user.email configured for the repository."""


class RemoteNotFound(GitOperationError):
    """The repository has no remote with the requested name."""


class PushError(GitOperationError):
    """Transport failure, or the remote rejected the pushed ref."""


class AuthenticationError(GitOperationError):
    """A credential could not be produced or was rejected."""


class MissingUsername(AuthenticationError):
    """The remote asked for a username and the URL carries none."""


class AllAuthMethodsExhausted(AuthenticationError):
    """Every allowed credential method was already tried during this push."""
