"""
Git credentials and transport authentication.
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote, urlparse, urlunparse


@dataclass
class Auth:
    """Username and password (or token) for a git provider"""

    username: str = ""
    password: str = ""


@dataclass(frozen=True)
class BasicAuth:
    """HTTP basic credentials applied to https remotes"""

    username: str
    password: str

    def secure_url(self, repo_url: str) -> str:
        """Build an https URL carrying the credentials; other schemes are unchanged"""
        parsed = urlparse(repo_url)
        if parsed.scheme not in ("http", "https"):
            return repo_url

        netloc = parsed.netloc.rsplit("@", 1)[-1]
        password = quote(self.password, safe="")
        if self.username:
            userinfo = f"{quote(self.username, safe='')}:{password}"
        else:
            userinfo = password
        return urlunparse(parsed._replace(netloc=f"{userinfo}@{netloc}"))


def get_auth(auth: Optional[Auth]) -> Optional[BasicAuth]:
    """Return the transport authenticator for ``auth``, or None for anonymous access"""
    if auth is None or not auth.password:
        return None

    return BasicAuth(username=auth.username, password=auth.password)
