"""
Git repository URL parsing.

A repository URL may carry, besides the clone address, a path inside the
repository and a revision:

    [scheme://][user@]host/org[/group...]/repo[.git][/sub/path][?ref=revision]

Without an explicit ``.git`` marker the first two path segments are taken
as the organization and repository name.
"""

from typing import NamedTuple
from urllib.parse import urlparse, parse_qs

from reposync.constants import GIT_URL_SUFFIX


class GitURL(NamedTuple):
    host: str
    org_repo: str
    path: str
    ref: str
    user: str
    suffix: str

    @property
    def clone_url(self) -> str:
        return f"{self.host}{self.org_repo}{self.suffix}"


def parse_git_url(repo_url: str) -> GitURL:
    """
    Split a repository URL into its components.

    Args:
        repo_url: Repository URL as given by the user

    Returns:
        GitURL: host (with scheme and trailing slash), org/repo, sub-path,
        ref, user and the ``.git`` suffix
    """
    raw = repo_url.strip()
    if "://" not in raw:
        raw = "https://" + raw

    parsed = urlparse(raw)
    netloc = parsed.netloc.rsplit("@", 1)[-1]
    host = f"{parsed.scheme}://{netloc}/"
    ref = parse_qs(parsed.query).get("ref", [""])[0]

    repo_path = parsed.path.strip("/")
    marker = GIT_URL_SUFFIX + "/"
    if marker in repo_path + "/":
        idx = (repo_path + "/").index(marker)
        org_repo = repo_path[:idx]
        path = repo_path[idx + len(marker):]
    else:
        segments = repo_path.split("/")
        org_repo = "/".join(segments[:2])
        path = "/".join(segments[2:])

    return GitURL(
        host=host,
        org_repo=org_repo,
        path=path.strip("/"),
        ref=ref,
        user=parsed.username or "",
        suffix=GIT_URL_SUFFIX,
    )


def hostname(host: str) -> str:
    """Return the bare host name of a parsed host (``https://github.com/`` -> ``github.com``)."""
    return urlparse(host).hostname or ""
