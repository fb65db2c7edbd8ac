"""
Cloning an existing remote and initializing a repository for an empty one.
"""

import logging
import shutil
import sys
import threading
from pathlib import Path
from typing import Any, Optional

from git import Repo
from git.cmd import Git

from reposync.constants import DEFAULT_REMOTE_NAME, PUSH_RETRIES
from reposync.git.branches import DefaultBranchProvider, GitConfigDefaultBranch, init_branch
from reposync.git.credentials import get_auth
from reposync.git.errors import NilOptionsError, RemoteEmptyError
from reposync.git.options import CloneOptions
from reposync.git.process import run_git_process
from reposync.git.progress import as_progress
from reposync.git.repository import Repository
from reposync.git.retry import retry_on_not_found
from reposync.git.revision import checkout_ref
from reposync.logging import get_logger

logger = get_logger("reposync.git.clone")


def _clone_once(
    options: CloneOptions, root: Path, progress: Any, cancel: Optional[threading.Event]
) -> Repo:
    auth = get_auth(options.auth)
    source = auth.secure_url(options.url) if auth else options.url
    Git.check_unsafe_protocols(source)

    proc = Git().clone(
        "--",
        source,
        str(root),
        depth=1,
        no_single_branch=True,
        progress=True,
        v=True,
        as_process=True,
        universal_newlines=True,
    )
    run_git_process(proc, as_progress(progress), cancel)

    repo = Repo(str(root))
    if not repo.head.is_valid():
        # cloned a repository without commits
        shutil.rmtree(root / ".git", ignore_errors=True)
        raise RemoteEmptyError()

    # keep credentials out of the stored remote configuration
    repo.remote(DEFAULT_REMOTE_NAME).set_url(options.url)
    return repo


def clone(options: CloneOptions, cancel: Optional[threading.Event] = None) -> Repository:
    """
    Shallow clone ``options.url`` into the working tree and check out the
    requested revision.

    Raises:
        RemoteNotFoundError: The remote does not exist (after retries)
        RemoteEmptyError: The remote exists but has no commits
    """
    if options is None:
        raise NilOptionsError()

    progress = options.progress if options.progress is not None else sys.stderr
    root = options.fs.mkdir_all()
    # a missing remote is expected when it is about to be created
    attempts = 1 if options.create_if_not_exist else PUSH_RETRIES

    logger.debug(f"cloning git repo: {options.url}")
    repo = retry_on_not_found(
        lambda: _clone_once(options, root, progress, cancel),
        "clone repository",
        attempts=attempts,
        cancel=cancel,
        log_level=logging.DEBUG,
    )

    if options.revision:
        checkout_ref(repo, options.revision)

    return Repository(repo, auth=options.auth, progress=progress)


def init_repo(
    options: CloneOptions, default_branch: Optional[DefaultBranchProvider] = None
) -> Repository:
    """
    Create a local repository for an empty remote: add ``origin``, make
    the initial commit and check out the target branch.
    """
    if options is None:
        raise NilOptionsError()

    branch_name = options.revision
    if not branch_name:
        branch_name = (default_branch or GitConfigDefaultBranch()).default_branch_name()

    root = options.fs.mkdir_all()
    repo = Repo.init(str(root), initial_branch=branch_name)
    repo.create_remote(DEFAULT_REMOTE_NAME, options.url)

    repository = Repository(repo, auth=options.auth, progress=options.progress)
    init_branch(repository, repo, branch_name)
    return repository
