"""
Provisioning: turn repository options into a checked-out working tree.

The remote can be in one of three states. An existing remote with
history is cloned. A missing remote is created through the git provider
(when allowed), after which it is empty. An empty remote is initialized
locally with an initial commit on the target branch.
"""

import threading
from enum import Enum
from typing import Callable, Optional, Tuple

from git import GitCommandError

from reposync.git.branches import DefaultBranchProvider, GitConfigDefaultBranch
from reposync.git.clone import clone, init_repo
from reposync.git.errors import (
    GitError,
    NilOptionsError,
    NotParsedError,
    OperationCancelledError,
    ProviderCreationError,
    RemoteEmptyError,
    RemoteNotFoundError,
    RepositoryInitError,
)
from reposync.git.options import CloneOptions
from reposync.git.providers import (
    CreateRepoOptions,
    ProviderFactory,
    ProviderOptions,
    new_provider,
    provider_type_for,
    split_org_repo,
)
from reposync.git.repository import Repository
from reposync.git.retry import check_cancelled
from reposync.logging import get_logger
from reposync.utils.fs import FS

logger = get_logger("reposync.git.provisioner")

Cloner = Callable[[CloneOptions, Optional[threading.Event]], Repository]
Initializer = Callable[[CloneOptions, DefaultBranchProvider], Repository]


class RemoteState(Enum):
    FOUND = "found"
    EMPTY = "empty"
    NOT_FOUND = "not_found"


class Provisioner:
    """Resolves the remote state and produces a ready Repository"""

    def __init__(
        self,
        cloner: Cloner = clone,
        initializer: Initializer = init_repo,
        provider_factory: ProviderFactory = new_provider,
        default_branch: Optional[DefaultBranchProvider] = None,
    ):
        self.cloner = cloner
        self.initializer = initializer
        self.provider_factory = provider_factory
        self.default_branch = default_branch or GitConfigDefaultBranch()

    def get_repo(
        self, options: Optional[CloneOptions], cancel: Optional[threading.Event] = None
    ) -> Tuple[Repository, FS]:
        """
        Clone, create or initialize the repository described by ``options``.

        Returns:
            The repository handle and the filesystem rooted at the
            repository sub-path

        Raises:
            NilOptionsError: If ``options`` or its filesystem is missing
            NotParsedError: If ``options.parse()`` was not called
            RemoteNotFoundError: If the remote is missing and creation is disabled
            ProviderCreationError: If the provider failed to create the remote
            RepositoryInitError: If local initialization failed
            OperationCancelledError: If ``cancel`` was set while provisioning
        """
        if options is None:
            raise NilOptionsError()
        if not options.url:
            raise NotParsedError()
        if options.fs is None:
            raise NilOptionsError("filesystem cannot be nil")

        repository, state = self._clone(options, cancel)
        while state is not RemoteState.FOUND:
            check_cancelled(cancel)
            repository, state = self._transition(state, options, cancel)

        return repository, options.fs.chroot(options.path)

    def _clone(
        self, options: CloneOptions, cancel: Optional[threading.Event]
    ) -> Tuple[Optional[Repository], RemoteState]:
        try:
            return self.cloner(options, cancel), RemoteState.FOUND
        except RemoteNotFoundError:
            if not options.create_if_not_exist:
                raise
            return None, RemoteState.NOT_FOUND
        except RemoteEmptyError:
            return None, RemoteState.EMPTY

    def _transition(
        self, state: RemoteState, options: CloneOptions, cancel: Optional[threading.Event]
    ) -> Tuple[Optional[Repository], RemoteState]:
        if state is RemoteState.NOT_FOUND:
            logger.info(f"repository '{options.repo}' was not found, trying to create it...")
            self.create_remote(options, cancel)
            # a new repository always starts empty
            return None, RemoteState.EMPTY

        if state is RemoteState.EMPTY:
            logger.info("empty repository, initializing a new one with specified remote")
            try:
                repository = self.initializer(options, self.default_branch)
            except (GitError, GitCommandError) as e:
                raise RepositoryInitError(f"failed to initialize repository: {e}") from e
            return repository, RemoteState.FOUND

        raise ValueError(f"no transition from state {state}")

    def create_remote(
        self, options: CloneOptions, cancel: Optional[threading.Event] = None
    ) -> str:
        """
        Create the remote repository through the git provider.

        Raises:
            ProviderCreationError: If the provider is unsupported or refused
            OperationCancelledError: If ``cancel`` was set around the API calls
        """
        try:
            provider = self.provider_factory(
                ProviderOptions(
                    type=provider_type_for(options.provider, options.host),
                    auth=options.auth,
                    host=options.host,
                )
            )
            owner, name = split_org_repo(options.org_repo)
            return provider.create_repository(
                CreateRepoOptions(owner=owner, name=name, private=True), cancel
            )
        except OperationCancelledError:
            raise
        except GitError as e:
            raise ProviderCreationError(
                "failed to create the repository, you can try to manually "
                f"create it before trying again: {e}"
            ) from e
