"""
Repository commands: provision a working tree and persist changes to it.
"""

from pathlib import Path
from typing import NoReturn, Optional

import typer
from git import GitCommandError

from reposync.constants import (
    DEFAULT_ADD_GLOB_PATTERN,
    DEFAULT_GIT_USERNAME,
    ENV_GIT_REPO,
    ENV_GIT_TOKEN,
    ENV_GIT_USER,
)
from reposync.git import Auth, CloneOptions, GitError, PushError, PushOptions, providers
from reposync.logging import get_logger
from reposync.logging.utils import sanitize_string
from reposync.utils.config_store import ConfigStore
from reposync.utils.console import error, info, print_table, success
from reposync.utils.fs import FS

logger = get_logger("reposync.commands.repo")

RepoOption = typer.Option(
    None, "--repo", "-r", envvar=ENV_GIT_REPO, help=f"Repository URL [{ENV_GIT_REPO}]"
)
TokenOption = typer.Option(
    None, "--git-token", "-t", envvar=ENV_GIT_TOKEN,
    help=f"Your git provider api token [{ENV_GIT_TOKEN}]",
)
UserOption = typer.Option(
    None, "--git-user", "-u", envvar=ENV_GIT_USER,
    help=f"Your git provider user name [{ENV_GIT_USER}] (not required in GitHub)",
)
ProviderOption = typer.Option(
    None, "--provider", help="The git provider, one of: " + "|".join(providers())
)
CreateOption = typer.Option(
    False, "--create-if-not-exist", help="Create the repository if it does not exist"
)
DirOption = typer.Option(
    Path("."), "--dir", "-d", help="Directory for the repository working tree"
)


def build_clone_options(
    repo: Optional[str],
    git_token: Optional[str],
    git_user: Optional[str],
    provider: Optional[str],
    create_if_not_exist: bool,
    directory: Path,
) -> CloneOptions:
    """Build parsed clone options with priority: argument/env > stored settings"""
    if not repo:
        error(f"A repository URL is required (--repo or {ENV_GIT_REPO})")
        raise typer.Exit(1)

    store = ConfigStore()
    username = git_user or store.get_setting("git_user") or ""
    token = git_token or store.get_git_token(username or DEFAULT_GIT_USERNAME) or ""

    opts = CloneOptions(
        repo=repo,
        auth=Auth(username=username, password=token),
        fs=FS(directory.resolve()),
        provider=provider or store.get_setting("provider") or "",
        create_if_not_exist=create_if_not_exist,
    )
    opts.parse()
    return opts


def _fail(action: str, e: Exception) -> NoReturn:
    logger.error(f"{action} failed: {e}")
    if isinstance(e, GitCommandError):
        # git failures carry the command line and raw stderr
        error(f"{action} failed: {sanitize_string(str(e).strip())}")
    else:
        error(str(e))
    raise typer.Exit(1)


def provision(
    repo: Optional[str] = RepoOption,
    git_token: Optional[str] = TokenOption,
    git_user: Optional[str] = UserOption,
    provider: Optional[str] = ProviderOption,
    create_if_not_exist: bool = CreateOption,
    directory: Path = DirOption,
) -> None:
    """Clone, create or initialize a repository working tree"""
    opts = build_clone_options(
        repo, git_token, git_user, provider, create_if_not_exist, directory
    )
    try:
        repository, repo_fs = opts.get_repo()
        branch = repository.current_branch() if not opts.revision else opts.revision
    except (GitError, GitCommandError) as e:
        _fail("Provisioning", e)

    success(f"Repository ready: {repo_fs.root}")
    info(f"🌿 Revision: {branch}")


def persist(
    repo: Optional[str] = RepoOption,
    git_token: Optional[str] = TokenOption,
    git_user: Optional[str] = UserOption,
    provider: Optional[str] = ProviderOption,
    create_if_not_exist: bool = CreateOption,
    directory: Path = DirOption,
    glob: str = typer.Option(
        DEFAULT_ADD_GLOB_PATTERN, "--glob", help="Glob pattern of files to add"
    ),
    message: str = typer.Option(..., "--message", "-m", help="Commit message"),
) -> None:
    """Provision the repository, then commit and push its working tree"""
    opts = build_clone_options(
        repo, git_token, git_user, provider, create_if_not_exist, directory
    )
    try:
        repository, _ = opts.get_repo()
        commit_hash = repository.persist(
            PushOptions(add_glob_pattern=glob, commit_msg=message)
        )
    except PushError as e:
        logger.error(f"Push failed: {e}")
        error(f"Committed {e.commit_hash} locally but failed to push: {e}")
        raise typer.Exit(1)
    except (GitError, GitCommandError) as e:
        _fail("Persist", e)

    success(f"Pushed commit {commit_hash}")


def list_providers() -> None:
    """List the supported git providers"""
    print_table("Git Providers", ["Provider"], [(name,) for name in providers()])
