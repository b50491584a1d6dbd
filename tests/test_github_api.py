"""
Tests for GitHub API client.

"Mock the API. Trust nothing. Test everything." — schema.cx
"""

import json

import pytest
import responses

from hubshell.config import ShellSettings
from hubshell.github_api import (
    AuthenticationRequiredError,
    GitHubAPIClient,
    GitHubAPIError,
    RateLimitError,
    build_client,
)
from hubshell.models import Credentials, RepoRef

API = "https://api.github.com"


@pytest.fixture
def client() -> GitHubAPIClient:
    """Create an authenticated client bound to a repository."""
    return GitHubAPIClient(owner="testuser", repo="repo1", login="testuser", token="test_token")


@pytest.fixture
def anonymous_client() -> GitHubAPIClient:
    """Create a client bound to a repository without credentials."""
    return GitHubAPIClient(owner="testuser", repo="repo1")


@responses.activate
def test_repos_show_selected_repo(anonymous_client: GitHubAPIClient) -> None:
    """Test showing the selected repository."""
    responses.add(
        responses.GET,
        f"{API}/repos/testuser/repo1",
        json={"name": "repo1", "full_name": "testuser/repo1", "private": False},
        status=200,
    )

    data = anonymous_client.repos.show()

    assert data["full_name"] == "testuser/repo1"
    assert "Authorization" not in responses.calls[0].request.headers


@responses.activate
def test_repos_show_explicit_repo(client: GitHubAPIClient) -> None:
    """Test showing a repository given explicitly."""
    responses.add(responses.GET, f"{API}/repos/other/thing", json={"name": "thing"}, status=200)

    assert client.repos.show("other", "thing") == {"name": "thing"}
    assert responses.calls[0].request.headers["Authorization"] == "token test_token"


@responses.activate
def test_repos_list_own_repos_paginated(client: GitHubAPIClient) -> None:
    """Test that listing your own repos uses /user/repos and follows pages."""
    responses.add(
        responses.GET,
        f"{API}/user/repos",
        json=[{"name": "repo1"}, {"name": "repo2"}],
        status=200,
        headers={"Link": f'<{API}/user/repos?page=2>; rel="next"'},
    )
    responses.add(
        responses.GET,
        f"{API}/user/repos?page=2",
        json=[{"name": "repo3"}],
        status=200,
    )

    repos = client.repos.list()

    assert [r["name"] for r in repos] == ["repo1", "repo2", "repo3"]
    assert "per_page=100" in responses.calls[0].request.url


@responses.activate
def test_repos_list_other_user(client: GitHubAPIClient) -> None:
    """Test listing another user's repositories."""
    responses.add(responses.GET, f"{API}/users/someone/repos", json=[{"name": "x"}], status=200)

    assert client.repos.list("someone") == [{"name": "x"}]


@responses.activate
def test_repos_search_returns_items(client: GitHubAPIClient) -> None:
    """Test that repository search unwraps the items."""
    responses.add(
        responses.GET,
        f"{API}/search/repositories",
        json={"total_count": 1, "items": [{"full_name": "a/b"}]},
        status=200,
    )

    assert client.repos.search("perl") == [{"full_name": "a/b"}]
    assert "q=perl" in responses.calls[0].request.url


@responses.activate
def test_auth_required_without_token(anonymous_client: GitHubAPIClient) -> None:
    """Test that mutations without a token fail before any request."""
    with pytest.raises(AuthenticationRequiredError, match="login and token are required"):
        anonymous_client.repos.watch()

    assert len(responses.calls) == 0


@responses.activate
def test_repos_create(client: GitHubAPIClient) -> None:
    """Test repository creation payload."""
    responses.add(responses.POST, f"{API}/user/repos", json={"name": "new"}, status=201)

    client.repos.create("new", "a description", "https://example.com", True)

    payload = json.loads(responses.calls[0].request.body)
    assert payload == {
        "name": "new",
        "description": "a description",
        "homepage": "https://example.com",
        "private": False,
    }


@responses.activate
def test_repos_delete_returns_none(client: GitHubAPIClient) -> None:
    """Test that a 204 response yields None."""
    responses.add(responses.DELETE, f"{API}/repos/testuser/repo1", status=204)

    assert client.repos.delete() is None


@responses.activate
def test_repos_set_private(client: GitHubAPIClient) -> None:
    """Test the visibility toggle payload."""
    responses.add(responses.PATCH, f"{API}/repos/testuser/repo1", json={"private": True}, status=200)

    client.repos.set_private()

    assert json.loads(responses.calls[0].request.body) == {"private": True}


@responses.activate
def test_issues_list_skips_pull_requests(client: GitHubAPIClient) -> None:
    """Test that pull requests are filtered out of issue listings."""
    responses.add(
        responses.GET,
        f"{API}/repos/testuser/repo1/issues",
        json=[
            {"number": 1, "title": "Bug"},
            {"number": 2, "title": "PR", "pull_request": {"url": "..."}},
        ],
        status=200,
    )

    issues = client.issues.list("closed")

    assert [i["number"] for i in issues] == [1]
    assert "state=closed" in responses.calls[0].request.url


@responses.activate
def test_issues_search_query(client: GitHubAPIClient) -> None:
    """Test that issue search is scoped to the selected repository."""
    responses.add(responses.GET, f"{API}/search/issues", json={"items": []}, status=200)

    assert client.issues.search("open", "crash") == []

    query = responses.calls[0].request.params["q"]
    assert query == "crash repo:testuser/repo1 is:issue state:open"


@responses.activate
def test_issues_open(client: GitHubAPIClient) -> None:
    """Test opening an issue."""
    responses.add(
        responses.POST,
        f"{API}/repos/testuser/repo1/issues",
        json={"number": 7, "title": "Title"},
        status=201,
    )

    data = client.issues.open("Title", "line1\nline2")

    assert data["number"] == 7
    assert json.loads(responses.calls[0].request.body) == {"title": "Title", "body": "line1\nline2"}


@responses.activate
def test_issues_close(client: GitHubAPIClient) -> None:
    """Test closing an issue."""
    responses.add(responses.PATCH, f"{API}/repos/testuser/repo1/issues/3", json={"state": "closed"}, status=200)

    client.issues.close(3)

    assert json.loads(responses.calls[0].request.body) == {"state": "closed"}


@responses.activate
def test_issues_remove_label_quotes_name(client: GitHubAPIClient) -> None:
    """Test that label names are URL-quoted."""
    responses.add(
        responses.DELETE,
        f"{API}/repos/testuser/repo1/issues/3/labels/needs%20review",
        json=[],
        status=200,
    )

    assert client.issues.remove_label(3, "needs review") == []


@responses.activate
def test_issues_comment(client: GitHubAPIClient) -> None:
    """Test commenting on an issue."""
    responses.add(
        responses.POST,
        f"{API}/repos/testuser/repo1/issues/3/comments",
        json={"id": 1, "body": "hi"},
        status=201,
    )

    client.issues.comment(3, "hi")

    assert json.loads(responses.calls[0].request.body) == {"body": "hi"}


@responses.activate
def test_users_show_authenticated(client: GitHubAPIClient) -> None:
    """Test that showing yourself uses /user when authenticated."""
    responses.add(responses.GET, f"{API}/user", json={"login": "testuser"}, status=200)

    assert client.users.show()["login"] == "testuser"


@responses.activate
def test_users_show_defaults_to_owner(anonymous_client: GitHubAPIClient) -> None:
    """Test that without credentials the repo owner is shown."""
    responses.add(responses.GET, f"{API}/users/testuser", json={"login": "testuser"}, status=200)

    assert anonymous_client.users.show()["login"] == "testuser"


@responses.activate
def test_users_follow_no_content(client: GitHubAPIClient) -> None:
    """Test following a user."""
    responses.add(responses.PUT, f"{API}/user/following/octocat", status=204)

    assert client.users.follow("octocat") is None


@responses.activate
def test_users_add_pub_key(client: GitHubAPIClient) -> None:
    """Test adding a public key."""
    responses.add(responses.POST, f"{API}/user/keys", json={"id": 9}, status=201)

    client.users.add_pub_key("laptop", "ssh-rsa AAAA")

    assert json.loads(responses.calls[0].request.body) == {"title": "laptop", "key": "ssh-rsa AAAA"}


@responses.activate
def test_commits_file(client: GitHubAPIClient) -> None:
    """Test listing commits touching a file."""
    responses.add(responses.GET, f"{API}/repos/testuser/repo1/commits", json=[{"sha": "abc"}], status=200)

    assert client.commits.file("dev", "README.md") == [{"sha": "abc"}]

    params = responses.calls[0].request.params
    assert params["sha"] == "dev"
    assert params["path"] == "README.md"


@responses.activate
def test_objects_blob(client: GitHubAPIClient) -> None:
    """Test fetching a blob by tree sha and nested path."""
    responses.add(
        responses.GET,
        f"{API}/repos/testuser/repo1/git/trees/tree123",
        json={
            "sha": "tree123",
            "tree": [
                {"path": "lib", "type": "tree", "sha": "sub456"},
                {"path": "lib/App.pm", "type": "blob", "sha": "blob789"},
            ],
        },
        status=200,
    )
    responses.add(
        responses.GET,
        f"{API}/repos/testuser/repo1/git/blobs/blob789",
        json={"sha": "blob789", "encoding": "base64", "content": "cGFja2FnZSBBcHA7"},
        status=200,
    )

    blob = client.objects.blob("tree123", "/lib/App.pm")

    assert blob["sha"] == "blob789"
    assert responses.calls[0].request.params["recursive"] == "1"
    assert len(responses.calls) == 2


@responses.activate
def test_objects_blob_missing_path(client: GitHubAPIClient) -> None:
    """Test that a path absent from the tree is reported without a blob request."""
    responses.add(
        responses.GET,
        f"{API}/repos/testuser/repo1/git/trees/tree123",
        json={"sha": "tree123", "tree": [{"path": "lib", "type": "tree", "sha": "sub456"}]},
        status=200,
    )

    with pytest.raises(GitHubAPIError, match="lib/App.pm"):
        client.objects.blob("tree123", "lib/App.pm")
    assert len(responses.calls) == 1


@responses.activate
def test_objects_raw_returns_text(client: GitHubAPIClient) -> None:
    """Test that raw objects come back as plain text."""
    responses.add(
        responses.GET,
        f"{API}/repos/testuser/repo1/git/blobs/abc123",
        body="package App::GitHub;\n",
        status=200,
        content_type="text/plain",
    )

    assert client.objects.raw("abc123") == "package App::GitHub;\n"
    assert responses.calls[0].request.headers["Accept"] == "application/vnd.github.raw"


@responses.activate
def test_network_meta_uses_web_host(client: GitHubAPIClient) -> None:
    """Test that network data is fetched from the web host."""
    responses.add(responses.GET, "https://github.com/testuser/repo1/network_meta", json={"nethash": "h"}, status=200)

    assert client.network.meta() == {"nethash": "h"}


@responses.activate
def test_not_found_error(client: GitHubAPIClient) -> None:
    """Test handling of 404 errors."""
    responses.add(responses.GET, f"{API}/repos/testuser/repo1/issues/99", json={"message": "Not Found"}, status=404)

    with pytest.raises(GitHubAPIError, match="Not found"):
        client.issues.view(99)


@responses.activate
def test_unauthorized_maps_to_auth_required(client: GitHubAPIClient) -> None:
    """Test that 401 responses are reported as missing authentication."""
    responses.add(responses.GET, f"{API}/user/keys", json={"message": "Bad credentials"}, status=401)

    with pytest.raises(AuthenticationRequiredError, match="Bad credentials"):
        client.users.pub_keys()


@responses.activate
def test_rate_limit_error(client: GitHubAPIClient) -> None:
    """Test handling of rate limit errors."""
    responses.add(
        responses.GET,
        f"{API}/repos/testuser/repo1",
        json={"message": "API rate limit exceeded"},
        status=403,
        headers={"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "1700000000"},
    )

    with pytest.raises(RateLimitError, match="rate limit exceeded"):
        client.repos.show()


@responses.activate
def test_forbidden_error(client: GitHubAPIClient) -> None:
    """Test handling of 403 errors that are not rate limits."""
    responses.add(responses.DELETE, f"{API}/repos/testuser/repo1", json={"message": "Must have admin rights"}, status=403)

    with pytest.raises(GitHubAPIError, match="Must have admin rights"):
        client.repos.delete()


@responses.activate
def test_validation_error(client: GitHubAPIClient) -> None:
    """Test handling of 422 errors."""
    responses.add(responses.POST, f"{API}/user/repos", json={"message": "name already exists"}, status=422)

    with pytest.raises(GitHubAPIError, match="Validation failed: name already exists"):
        client.repos.create("dup")


@responses.activate
def test_network_error(client: GitHubAPIClient) -> None:
    """Test that connection failures become GitHubAPIError."""
    # Nothing registered: responses raises ConnectionError
    with pytest.raises(GitHubAPIError, match="Network error"):
        client.repos.tags()


def test_repo_required() -> None:
    """Test that repository operations need a selected repository."""
    client = GitHubAPIClient(owner="testuser", login="testuser", token="t")

    with pytest.raises(GitHubAPIError, match="No repository selected"):
        client.issues.list()


def test_enterprise_host() -> None:
    """Test GitHub Enterprise base URLs."""
    client = GitHubAPIClient(github_host="github.example.com")

    assert client.BASE_URL == "https://github.example.com/api/v3"
    assert client.WEB_URL == "https://github.example.com"


def test_build_client_with_repo_and_credentials() -> None:
    """Test building a client for a selected repo with credentials."""
    client = build_client(Credentials("me", "tok"), RepoRef("owner", "repo"), ShellSettings(timeout=5))

    assert (client.owner, client.repo, client.login, client.token) == ("owner", "repo", "me", "tok")
    assert client.timeout == 5
    assert client.session.headers["Authorization"] == "token tok"


def test_build_client_login_only_defaults_owner() -> None:
    """Test that without a repo the owner defaults to the login."""
    client = build_client(Credentials("me", "tok"), None)

    assert client.owner == "me"
    assert client.repo is None


def test_build_client_repo_only() -> None:
    """Test building an anonymous client."""
    client = build_client(None, RepoRef("owner", "repo"))

    assert client.token is None
    assert "Authorization" not in client.session.headers
