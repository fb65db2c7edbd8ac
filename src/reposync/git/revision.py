"""
Revision resolution and detached checkout.
"""

from git import GitCommandError, Repo

from reposync.git.errors import NoRemotesError, ReferenceNotFoundError, raise_classified
from reposync.logging import get_logger

logger = get_logger("reposync.git.revision")


def resolve_revision(repo: Repo, rev: str) -> str:
    """
    Resolve a revision (branch, tag, hash or other rev syntax) to a commit hash.

    Raises:
        ReferenceNotFoundError: If ``rev`` names nothing in the repository
    """
    try:
        return repo.git.rev_parse("--verify", "--quiet", f"{rev}^{{commit}}")
    except GitCommandError as e:
        # --verify --quiet exits 1 without output for unknown revisions
        if e.status == 1:
            raise ReferenceNotFoundError(f"reference not found: {rev}") from e
        raise_classified(e)


def checkout_ref(repo: Repo, ref: str) -> str:
    """
    Check out ``ref`` detached, falling back to the remote-tracking
    ``<first remote>/<ref>`` when ``ref`` is not known locally.

    Returns:
        str: The checked out commit hash
    """
    try:
        commit_hash = resolve_revision(repo, ref)
    except ReferenceNotFoundError:
        logger.debug(f"failed resolving ref '{ref}', trying to resolve from remote branch")
        remotes = repo.remotes
        if not remotes:
            raise NoRemotesError()

        commit_hash = resolve_revision(repo, f"{remotes[0].name}/{ref}")

    logger.debug(f"checking out commit {commit_hash} (ref: {ref})")
    repo.git.checkout("--detach", commit_hash)
    return commit_hash
