"""
Git error kinds and classification of git command failures.
"""

from typing import NoReturn, Optional

from git import GitCommandError

# stderr fragments git prints when the remote repository does not exist
NOT_FOUND_PHRASES = (
    "repository not found",
    "could not be found",
    "does not appear to be a git repository",
)

# stderr fragments git prints when cloning a repository with no commits
EMPTY_PHRASES = (
    "remote head refers to nonexistent ref",
    "you appear to have cloned an empty repository",
    "couldn't find remote ref",
)

GLOB_NO_MATCH_PHRASES = ("did not match any files",)


class GitError(RuntimeError):
    """Base error for repository provisioning and synchronization"""

    default_message = "git operation failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class NilOptionsError(GitError):
    default_message = "options cannot be nil"


class NotParsedError(GitError):
    default_message = "must call parse() before using CloneOptions"


class RemoteNotFoundError(GitError):
    default_message = "git repository not found"


class RemoteEmptyError(GitError):
    default_message = "remote repository is empty"


class ReferenceNotFoundError(GitError):
    default_message = "reference not found"


class NoRemotesError(GitError):
    default_message = "no remotes in repository"


class MissingIdentityError(GitError):
    default_message = (
        "failed to commit. Please make sure your gitconfig contains a name and an email"
    )


class GlobNoMatchesError(GitError):
    default_message = "glob pattern did not match any files"


class ProviderCreationError(GitError):
    default_message = "failed to create repository"


class UnsupportedProviderError(GitError):
    default_message = "unsupported git provider"


class RepositoryInitError(GitError):
    default_message = "failed to initialize repository"


class OperationCancelledError(GitError):
    default_message = "operation cancelled"


class PushError(GitError):
    """Push failed after the commit was created locally"""

    default_message = "failed to push to repository"

    def __init__(self, message: Optional[str] = None, commit_hash: str = ""):
        super().__init__(message)
        self.commit_hash = commit_hash


def _stderr(err: GitCommandError) -> str:
    return f"{err.stderr or ''}\n{err.stdout or ''}".lower()


def classify(err: GitCommandError) -> Exception:
    """
    Map a failed git command to the matching error kind.

    Returns the original error when it matches no known kind.
    """
    output = _stderr(err)
    # git reports "repository '<url>' not found" for missing https remotes
    if any(p in output for p in NOT_FOUND_PHRASES) or (
        "repository '" in output and "' not found" in output
    ):
        return RemoteNotFoundError(f"git repository not found: {err.stderr.strip()}")
    if any(p in output for p in EMPTY_PHRASES):
        return RemoteEmptyError()
    if any(p in output for p in GLOB_NO_MATCH_PHRASES):
        return GlobNoMatchesError(err.stderr.strip())
    return err


def raise_classified(err: GitCommandError) -> NoReturn:
    """Raise the classified form of ``err``, or ``err`` itself when unclassified"""
    classified = classify(err)
    if classified is err:
        raise err
    raise classified from err
