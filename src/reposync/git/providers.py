"""
Git providers: remote repository creation through the provider's REST API.
"""

import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

import httpx

from reposync.constants import DEFAULT_HEADERS, PROVIDER_REQUEST_TIMEOUT
from reposync.git.credentials import Auth
from reposync.git.errors import GitError, UnsupportedProviderError
from reposync.git.retry import check_cancelled
from reposync.logging import get_logger, log_api_call
from reposync.utils.url import hostname

logger = get_logger("reposync.git.providers")


@dataclass
class ProviderOptions:
    type: str
    auth: Auth
    host: str


@dataclass
class CreateRepoOptions:
    owner: str
    name: str
    private: bool = True


class GitProvider(ABC):
    """A git hosting service able to create repositories"""

    @abstractmethod
    def create_repository(
        self, opts: CreateRepoOptions, cancel: Optional[threading.Event] = None
    ) -> str:
        """
        Create the repository and return its clone URL.

        ``cancel`` is checked before and after every API request; a request
        in flight is bounded by the client timeout.
        """


class GitHubProvider(GitProvider):
    def __init__(self, opts: ProviderOptions):
        self.auth = opts.auth
        self.api_url = self._api_url(opts.host)

    @staticmethod
    def _api_url(host: str) -> str:
        if hostname(host) == "github.com":
            return "https://api.github.com"
        # GitHub Enterprise Server
        return host.rstrip("/") + "/api/v3"

    def _request(
        self,
        client: httpx.Client,
        method: str,
        path: str,
        cancel: Optional[threading.Event] = None,
        **kwargs,
    ) -> httpx.Response:
        check_cancelled(cancel)
        url = f"{self.api_url}{path}"
        start = time.monotonic()
        try:
            resp = client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            log_api_call(method, url, duration=time.monotonic() - start, error=str(e))
            raise GitError(f"Network error calling {url}: {e}") from e

        log_api_call(method, url, status_code=resp.status_code, duration=time.monotonic() - start)
        check_cancelled(cancel)
        return resp

    @staticmethod
    def _json(resp: httpx.Response) -> dict:
        try:
            data = resp.json()
        except ValueError as e:
            raise GitError(f"Invalid JSON in GitHub API response: {e}") from e
        if not isinstance(data, dict):
            raise GitError(f"Unexpected GitHub API response body: {resp.text}")
        return data

    def create_repository(
        self, opts: CreateRepoOptions, cancel: Optional[threading.Event] = None
    ) -> str:
        headers = dict(DEFAULT_HEADERS)
        if self.auth.password:
            headers["Authorization"] = f"token {self.auth.password}"

        with httpx.Client(headers=headers, timeout=PROVIDER_REQUEST_TIMEOUT) as client:
            resp = self._request(client, "GET", "/user", cancel)
            if resp.status_code == 401:
                raise GitError("Invalid or expired token (401).")
            if resp.status_code != 200:
                raise GitError(f"Unexpected GitHub API response: {resp.status_code}")

            if self._json(resp).get("login") == opts.owner:
                path = "/user/repos"
            else:
                path = f"/orgs/{opts.owner}/repos"

            resp = self._request(
                client, "POST", path, cancel, json={"name": opts.name, "private": opts.private}
            )

        if resp.status_code != 201:
            raise GitError(
                f"GitHub API refused to create '{opts.owner}/{opts.name}' "
                f"({resp.status_code}): {resp.text}"
            )

        clone_url = self._json(resp).get("clone_url")
        if not clone_url:
            raise GitError(f"GitHub API response has no clone_url: {resp.text}")

        logger.info(f"Created repository {opts.owner}/{opts.name}")
        return clone_url


ProviderFactory = Callable[[ProviderOptions], GitProvider]

# populated at import time, read-only afterwards
_PROVIDERS: Dict[str, ProviderFactory] = {
    "github": GitHubProvider,
}


def providers() -> List[str]:
    """Names of the supported provider types"""
    return sorted(_PROVIDERS)


def new_provider(opts: ProviderOptions) -> GitProvider:
    factory = _PROVIDERS.get(opts.type)
    if factory is None:
        raise UnsupportedProviderError(
            f"git provider '{opts.type}' is not supported, "
            f"use one of: {'|'.join(providers())}"
        )
    return factory(opts)


def infer_provider_type(host: str) -> str:
    """Guess the provider type from the host name (``github.com`` -> ``github``)"""
    name = hostname(host)
    if name.endswith(".com"):
        name = name[: -len(".com")]
    return name


def split_org_repo(org_repo: str) -> Tuple[str, str]:
    """Split ``org[/group...]/repo`` into owner and repository name."""
    parts = org_repo.split("/")
    if len(parts) < 2:
        raise GitError(f"failed parsing organization and repo from '{org_repo}'")
    return "/".join(parts[:-1]), parts[-1]


def provider_type_for(provider: Optional[str], host: str) -> str:
    if provider:
        return provider

    provider = infer_provider_type(host)
    logger.warning(f"--provider not specified, assuming provider from url: {provider}")
    return provider
