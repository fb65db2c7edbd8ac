"""
Options for provisioning a repository and persisting changes to it.
"""

import threading
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple, TYPE_CHECKING

from reposync.constants import DEFAULT_ADD_GLOB_PATTERN, DEFAULT_GIT_USERNAME
from reposync.git.credentials import Auth
from reposync.utils.fs import FS
from reposync.utils.url import GitURL, parse_git_url

if TYPE_CHECKING:
    from reposync.git.repository import Repository


@dataclass
class CloneOptions:
    """
    Where to provision a repository and how to reach it.

    ``repo`` is the user-facing repository URL, which may include a path
    inside the repository and a ``?ref=`` revision. ``parse()`` must be
    called once before the options are used.
    """

    repo: str = ""
    auth: Auth = field(default_factory=Auth)
    fs: Optional[FS] = None
    provider: str = ""
    progress: Any = None
    create_if_not_exist: bool = False
    _parsed: Optional[GitURL] = field(default=None, init=False, repr=False)

    def parse(self) -> None:
        self._parsed = parse_git_url(self.repo)
        if not self.auth.username:
            self.auth.username = DEFAULT_GIT_USERNAME

    @property
    def url(self) -> str:
        return self._parsed.clone_url if self._parsed else ""

    @property
    def revision(self) -> str:
        return self._parsed.ref if self._parsed else ""

    @property
    def path(self) -> str:
        return self._parsed.path if self._parsed else ""

    @property
    def host(self) -> str:
        return self._parsed.host if self._parsed else ""

    @property
    def org_repo(self) -> str:
        return self._parsed.org_repo if self._parsed else ""

    def get_repo(
        self, cancel: Optional[threading.Event] = None
    ) -> Tuple["Repository", FS]:
        """Provision the repository with the default collaborators"""
        from reposync.git.provisioner import Provisioner

        return Provisioner().get_repo(self, cancel=cancel)


@dataclass
class PushOptions:
    add_glob_pattern: str = DEFAULT_ADD_GLOB_PATTERN
    commit_msg: str = ""
    progress: Any = None
