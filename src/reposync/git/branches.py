"""
Default branch resolution and initial branch setup.
"""

from typing import Protocol

from git import GitCommandError, Repo
from git.config import GitConfigParser, get_config_path

from reposync.constants import DEFAULT_BRANCH, INITIAL_COMMIT_MESSAGE
from reposync.git.errors import GitError
from reposync.git.options import PushOptions
from reposync.git.repository import Repository
from reposync.logging import get_logger

logger = get_logger("reposync.git.branches")


class DefaultBranchProvider(Protocol):
    def default_branch_name(self) -> str:
        ...


class GitConfigDefaultBranch:
    """Reads init.defaultBranch from the global git configuration"""

    def default_branch_name(self) -> str:
        try:
            reader = GitConfigParser(get_config_path("global"), read_only=True)
            branch = reader.get_value("init", "defaultBranch", "")
        except (OSError, ValueError) as e:
            raise GitError(f"failed to load global git config: {e}") from e

        return branch or DEFAULT_BRANCH


class StaticDefaultBranch:
    """A fixed default branch name"""

    def __init__(self, name: str = DEFAULT_BRANCH):
        self.name = name

    def default_branch_name(self) -> str:
        return self.name


def init_branch(repository: Repository, repo: Repo, branch_name: str) -> None:
    """
    Create the base commit and check out ``branch_name``, creating the
    branch if it does not exist yet.
    """
    try:
        repository.commit(PushOptions(commit_msg=INITIAL_COMMIT_MESSAGE))
    except GitCommandError as e:
        raise GitError(
            f"failed to commit while trying to initialize the branch. Error: {e}"
        ) from e

    logger.debug(f"checking out branch: refs/heads/{branch_name}")
    if branch_name in [h.name for h in repo.heads]:
        repo.git.checkout(branch_name)
    else:
        repo.git.checkout("-b", branch_name)
