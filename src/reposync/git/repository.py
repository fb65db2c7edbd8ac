"""
Repository handle: commit, push and branch inspection.
"""

import sys
import threading
from typing import Any, List, Optional

from git import GitCommandError, Remote, Repo

from reposync.constants import DEFAULT_ADD_GLOB_PATTERN
from reposync.git.credentials import Auth, get_auth
from reposync.git.errors import (
    GitError,
    GlobNoMatchesError,
    MissingIdentityError,
    NilOptionsError,
    NoRemotesError,
    OperationCancelledError,
    PushError,
    classify,
    raise_classified,
)
from reposync.git.options import PushOptions
from reposync.git.process import output_lines, run_git_process
from reposync.git.progress import as_progress
from reposync.git.retry import retry_on_not_found
from reposync.logging import get_logger

logger = get_logger("reposync.git.repository")

PUSH_REFSPEC = "refs/heads/*:refs/heads/*"

# git push --porcelain flags: fast-forward, forced, deleted, new ref
UPDATE_FLAGS = (" ", "+", "-", "*")


class Repository:
    """
    An open repository with its working tree.

    Holds the credentials and progress sink used for every later network
    operation. Not safe for concurrent use.
    """

    def __init__(self, repo: Repo, auth: Optional[Auth] = None, progress: Any = None):
        self._repo = repo
        self._auth = auth or Auth()
        self._progress = progress if progress is not None else sys.stderr

    @property
    def working_dir(self) -> str:
        return self._repo.working_tree_dir

    def persist(
        self, opts: Optional[PushOptions], cancel: Optional[threading.Event] = None
    ) -> str:
        """
        Stage, commit and push to the repository's remote.

        Returns:
            str: The new commit hash

        Raises:
            NilOptionsError: If ``opts`` is None
            MissingIdentityError: If no committer name/email is configured
            GlobNoMatchesError: If a non-default glob matched nothing
            PushError: If the push failed or updated nothing on the remote
                (e.g. HEAD is detached); carries ``commit_hash``
            OperationCancelledError: If ``cancel`` was set during the push
        """
        if opts is None:
            raise NilOptionsError()

        progress = opts.progress if opts.progress is not None else self._progress
        commit_hash = self.commit(opts)

        if self._repo.head.is_detached:
            raise PushError(
                f"failed to push commit {commit_hash}: HEAD is detached, "
                "check out a branch before persisting",
                commit_hash,
            )

        try:
            ref_updates = retry_on_not_found(
                lambda: self._push(progress, cancel),
                "push to repository",
                cancel=cancel,
            )
        except OperationCancelledError:
            raise
        except (GitError, GitCommandError) as e:
            raise PushError(f"failed to push commit {commit_hash}: {e}", commit_hash) from e

        updated = updated_refs(ref_updates)
        if not updated:
            raise PushError(
                f"failed to push commit {commit_hash}: no ref was updated on the remote",
                commit_hash,
            )

        logger.info(f"Pushed commit {commit_hash} to {', '.join(updated)}")
        return commit_hash

    def current_branch(self) -> str:
        """Short name of the branch HEAD points to"""
        try:
            return self._repo.active_branch.name
        except (TypeError, ValueError) as e:
            raise GitError(f"failed to resolve ref: {e}") from e

    def commit(self, opts: PushOptions) -> str:
        self._validate_identity()

        pattern = opts.add_glob_pattern or DEFAULT_ADD_GLOB_PATTERN
        try:
            self._repo.git.add(pattern)
        except GitCommandError as e:
            # "." may legitimately match nothing, e.g. the initial commit of a new branch
            no_match = isinstance(classify(e), GlobNoMatchesError)
            if pattern != DEFAULT_ADD_GLOB_PATTERN or not no_match:
                raise_classified(e)

        self._repo.git.commit(
            all=True,
            allow_empty=True,
            allow_empty_message=True,
            message=opts.commit_msg,
        )
        commit_hash = self._repo.head.commit.hexsha
        logger.debug(f"Committed {commit_hash}: {opts.commit_msg}")
        return commit_hash

    def _validate_identity(self) -> None:
        reader = self._repo.config_reader()
        name = reader.get_value("user", "name", "")
        email = reader.get_value("user", "email", "")
        if not name or not email:
            raise MissingIdentityError()

    def _remote(self) -> Remote:
        if not self._repo.remotes:
            raise NoRemotesError()
        return self._repo.remotes[0]

    def _push_target(self, remote: Remote) -> str:
        """Credentialed URL of ``remote``, or its name for anonymous access"""
        auth = get_auth(self._auth)
        if auth is None:
            return remote.name
        return auth.secure_url(remote.url)

    def _push(self, progress: Any, cancel: Optional[threading.Event] = None) -> List[str]:
        """
        Push every local branch to the first remote.

        Returns the ref updates git reported, as ``<flag>\\t<from>:<to>\\t<summary>``.
        """
        remote = self._remote()
        lines: List[str] = []
        proc = self._repo.git.push(
            "--",
            self._push_target(remote),
            PUSH_REFSPEC,
            porcelain=True,
            progress=True,
            as_process=True,
            universal_newlines=True,
        )
        run_git_process(proc, as_progress(progress), cancel, stdout_handler=output_lines(lines))
        return [line for line in lines if "\t" in line]


def updated_refs(ref_updates: List[str]) -> List[str]:
    """Destination refs of the ``git push --porcelain`` lines that changed the remote"""
    updated = []
    for line in ref_updates:
        flag, _, rest = line.partition("\t")
        if flag in UPDATE_FLAGS:
            refs = rest.split("\t", 1)[0]
            updated.append(refs.rpartition(":")[2])
    return updated
