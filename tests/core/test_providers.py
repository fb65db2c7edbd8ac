import json
import threading

import pytest

import httpx

from reposync.git.credentials import Auth
from reposync.git.errors import GitError, OperationCancelledError, UnsupportedProviderError
from reposync.git.providers import (
    CreateRepoOptions,
    GitHubProvider,
    ProviderOptions,
    infer_provider_type,
    new_provider,
    provider_type_for,
    providers,
    split_org_repo,
)


class FakeResponse:
    def __init__(self, status_code, json_data=None, text=None):
        self.status_code = status_code
        self._json = json_data if json_data is not None else {}
        self.text = text if text is not None else str(self._json)
        self.content = self.text.encode()

    def json(self):
        if isinstance(self._json, Exception):
            raise self._json
        return self._json


class FakeClient:
    def __init__(self, responses=None, raise_exc=None, **kwargs):
        self.responses = list(responses or [])
        self.raise_exc = raise_exc
        self.kwargs = kwargs
        self.requests = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def request(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        if self.raise_exc:
            raise self.raise_exc
        return self.responses.pop(0)


def github(host="https://github.com/", token="tok"):
    return GitHubProvider(ProviderOptions(type="github", auth=Auth("bob", token), host=host))


def patch_client(mocker, client):
    def factory(**kwargs):
        client.kwargs = kwargs
        return client

    return mocker.patch("reposync.git.providers.httpx.Client", side_effect=factory)


def test_providers_lists_github():
    assert "github" in providers()


def test_new_provider_github():
    provider = new_provider(ProviderOptions(type="github", auth=Auth(), host="https://github.com/"))
    assert isinstance(provider, GitHubProvider)


def test_new_provider_unsupported():
    with pytest.raises(UnsupportedProviderError, match="bitbucket"):
        new_provider(ProviderOptions(type="bitbucket", auth=Auth(), host="https://bitbucket.org/"))


def test_infer_provider_type():
    assert infer_provider_type("https://github.com/") == "github"
    assert infer_provider_type("https://gitlab.com/") == "gitlab"
    assert infer_provider_type("https://gitea.example.org/") == "gitea.example.org"


def test_provider_type_for_explicit():
    assert provider_type_for("gitlab", "https://github.com/") == "gitlab"


def test_provider_type_for_guess_warns(mocker):
    logger = mocker.patch("reposync.git.providers.logger")

    assert provider_type_for("", "https://github.com/") == "github"
    logger.warning.assert_called_once()


@pytest.mark.parametrize(
    "org_repo, owner, name",
    [
        ("owner/name", "owner", "name"),
        ("owner/group/sub/name", "owner/group/sub", "name"),
    ],
)
def test_split_org_repo(org_repo, owner, name):
    assert split_org_repo(org_repo) == (owner, name)


def test_split_org_repo_too_short():
    with pytest.raises(GitError, match="failed parsing organization and repo"):
        split_org_repo("name")


def test_api_url():
    assert github().api_url == "https://api.github.com"
    assert github("https://ghe.corp.com/").api_url == "https://ghe.corp.com/api/v3"


def test_create_repository_for_user(mocker):
    client = FakeClient(responses=[
        FakeResponse(200, {"login": "bob"}),
        FakeResponse(201, {"clone_url": "https://github.com/bob/name.git"}),
    ])
    patch_client(mocker, client)

    url = github().create_repository(CreateRepoOptions(owner="bob", name="name"))

    assert url == "https://github.com/bob/name.git"
    method, request_url, kwargs = client.requests[1]
    assert (method, request_url) == ("POST", "https://api.github.com/user/repos")
    assert kwargs["json"] == {"name": "name", "private": True}
    assert client.kwargs["headers"]["Authorization"] == "token tok"


def test_create_repository_for_org(mocker):
    client = FakeClient(responses=[
        FakeResponse(200, {"login": "bob"}),
        FakeResponse(201, {"clone_url": "https://github.com/acme/name.git"}),
    ])
    patch_client(mocker, client)

    github().create_repository(CreateRepoOptions(owner="acme", name="name", private=False))

    method, request_url, kwargs = client.requests[1]
    assert request_url == "https://api.github.com/orgs/acme/repos"
    assert kwargs["json"] == {"name": "name", "private": False}


def test_create_repository_anonymous_has_no_auth_header(mocker):
    client = FakeClient(responses=[FakeResponse(401)])
    patch_client(mocker, client)

    with pytest.raises(GitError, match="401"):
        github(token="").create_repository(CreateRepoOptions(owner="bob", name="name"))

    assert "Authorization" not in client.kwargs["headers"]


def test_create_repository_refused(mocker):
    client = FakeClient(responses=[
        FakeResponse(200, {"login": "bob"}),
        FakeResponse(422, {"message": "name already exists on this account"}),
    ])
    patch_client(mocker, client)

    with pytest.raises(GitError, match="422"):
        github().create_repository(CreateRepoOptions(owner="bob", name="name"))


def test_create_repository_unexpected_user_status(mocker):
    patch_client(mocker, FakeClient(responses=[FakeResponse(500)]))

    with pytest.raises(GitError, match="500"):
        github().create_repository(CreateRepoOptions(owner="bob", name="name"))


def test_create_repository_network_error(mocker):
    patch_client(mocker, FakeClient(raise_exc=httpx.ConnectError("boom")))
    log_api_call = mocker.patch("reposync.git.providers.log_api_call")

    with pytest.raises(GitError, match="Network error"):
        github().create_repository(CreateRepoOptions(owner="bob", name="name"))

    assert log_api_call.call_args.kwargs["error"] == "boom"


def test_create_repository_logs_api_calls(mocker):
    client = FakeClient(responses=[
        FakeResponse(200, {"login": "bob"}),
        FakeResponse(201, {"clone_url": "https://github.com/bob/name.git"}),
    ])
    patch_client(mocker, client)
    log_api_call = mocker.patch("reposync.git.providers.log_api_call")

    github().create_repository(CreateRepoOptions(owner="bob", name="name"))

    assert [c.args[:2] for c in log_api_call.call_args_list] == [
        ("GET", "https://api.github.com/user"),
        ("POST", "https://api.github.com/user/repos"),
    ]
    assert log_api_call.call_args.kwargs["status_code"] == 201


def test_create_repository_invalid_json(mocker):
    bad_json = json.JSONDecodeError("Expecting value", "<html>", 0)
    patch_client(mocker, FakeClient(responses=[FakeResponse(200, bad_json, text="<html>")]))

    with pytest.raises(GitError, match="Invalid JSON"):
        github().create_repository(CreateRepoOptions(owner="bob", name="name"))


def test_create_repository_non_object_json(mocker):
    patch_client(mocker, FakeClient(responses=[FakeResponse(200, ["bob"])]))

    with pytest.raises(GitError, match="Unexpected GitHub API response body"):
        github().create_repository(CreateRepoOptions(owner="bob", name="name"))


def test_create_repository_missing_clone_url(mocker):
    patch_client(mocker, FakeClient(responses=[
        FakeResponse(200, {"login": "bob"}),
        FakeResponse(201, {"full_name": "bob/name"}),
    ]))

    with pytest.raises(GitError, match="no clone_url"):
        github().create_repository(CreateRepoOptions(owner="bob", name="name"))


def test_create_repository_cancelled_before_request(mocker):
    client = FakeClient(responses=[FakeResponse(200, {"login": "bob"})])
    patch_client(mocker, client)
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(OperationCancelledError):
        github().create_repository(CreateRepoOptions(owner="bob", name="name"), cancel)

    assert client.requests == []


def test_create_repository_cancelled_between_requests(mocker):
    cancel = threading.Event()

    class CancellingClient(FakeClient):
        def request(self, method, url, **kwargs):
            resp = super().request(method, url, **kwargs)
            cancel.set()
            return resp

    client = CancellingClient(responses=[
        FakeResponse(200, {"login": "bob"}),
        FakeResponse(201, {"clone_url": "https://github.com/bob/name.git"}),
    ])
    patch_client(mocker, client)

    with pytest.raises(OperationCancelledError):
        github().create_repository(CreateRepoOptions(owner="bob", name="name"), cancel)

    assert [r[0] for r in client.requests] == ["GET"]
