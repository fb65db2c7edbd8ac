"""
Git repository provisioning and synchronization.
"""

from reposync.git.credentials import Auth, BasicAuth, get_auth
from reposync.git.errors import (
    GitError,
    GlobNoMatchesError,
    MissingIdentityError,
    NilOptionsError,
    NoRemotesError,
    NotParsedError,
    OperationCancelledError,
    ProviderCreationError,
    PushError,
    ReferenceNotFoundError,
    RemoteEmptyError,
    RemoteNotFoundError,
    RepositoryInitError,
    UnsupportedProviderError,
)
from reposync.git.options import CloneOptions, PushOptions
from reposync.git.repository import Repository
from reposync.git.provisioner import Provisioner, RemoteState
from reposync.git.providers import providers

__all__ = [
    "Auth",
    "BasicAuth",
    "get_auth",
    "CloneOptions",
    "PushOptions",
    "Repository",
    "Provisioner",
    "RemoteState",
    "providers",
    "GitError",
    "GlobNoMatchesError",
    "MissingIdentityError",
    "NilOptionsError",
    "NoRemotesError",
    "NotParsedError",
    "OperationCancelledError",
    "ProviderCreationError",
    "PushError",
    "ReferenceNotFoundError",
    "RemoteEmptyError",
    "RemoteNotFoundError",
    "RepositoryInitError",
    "UnsupportedProviderError",
]
