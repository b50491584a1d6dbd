"""
GitHub API client exposing the resources the shell drives.

"The API is just a door. Your token is the key. Don't lose it." — schema.cx
"""

from __future__ import annotations

from datetime import datetime
from functools import wraps
from typing import Any, Callable, TypeVar
from urllib.parse import quote

import requests

from . import __version__
from .config import ShellSettings
from .models import Credentials, RepoRef

AUTH_REQUIRED_SIGNAL = "login and token are required"


class GitHubAPIError(Exception):
    """GitHub API error."""

    pass


class RateLimitError(GitHubAPIError):
    """Rate limit exceeded error."""

    pass


class AuthenticationRequiredError(GitHubAPIError):
    """The operation needs credentials the client does not have."""

    def __init__(self, message: str = AUTH_REQUIRED_SIGNAL) -> None:
        super().__init__(message)


T = TypeVar("T")


def requires_auth(func: Callable[..., T]) -> Callable[..., T]:
    """Refuse to call ``func`` unless the owning client carries a token."""

    @wraps(func)
    def wrapper(self: "_Resource", *args, **kwargs) -> T:
        if not self._client.token:
            raise AuthenticationRequiredError()
        return func(self, *args, **kwargs)

    return wrapper


class _Resource:
    """Base for the client's sub-resources."""

    def __init__(self, client: "GitHubAPIClient") -> None:
        self._client = client

    @property
    def _repo(self) -> str:
        return self._client.repo_path


class Repos(_Resource):
    """Repository operations."""

    def show(self, owner: str | None = None, name: str | None = None) -> dict:
        if owner and name:
            return self._client.get(f"/repos/{owner}/{name}")
        return self._client.get(self._repo)

    def list(self, user: str | None = None) -> list[dict]:
        user = user or self._client.owner
        if not user:
            raise GitHubAPIError("No user given and no repository selected")

        # /user/repos is the only listing that includes private repos
        if self._client.token and self._client.login and user.lower() == self._client.login.lower():
            return self._client.get_all("/user/repos", {"type": "all"})
        return self._client.get_all(f"/users/{user}/repos", {"type": "all"})

    def search(self, word: str) -> list[dict]:
        data = self._client.get("/search/repositories", {"q": word})
        return data.get("items", [])

    @requires_auth
    def watch(self) -> dict | None:
        return self._client.put(f"{self._repo}/subscription", {"subscribed": True})

    @requires_auth
    def unwatch(self) -> None:
        return self._client.delete(f"{self._repo}/subscription")

    @requires_auth
    def fork(self) -> dict:
        return self._client.post(f"{self._repo}/forks")

    @requires_auth
    def create(self, name: str, description: str = "", homepage: str = "", public: bool = True) -> dict:
        payload = {
            "name": name,
            "description": description,
            "homepage": homepage,
            "private": not public,
        }
        return self._client.post("/user/repos", payload)

    @requires_auth
    def delete(self) -> None:
        return self._client.delete(self._repo)

    @requires_auth
    def set_private(self) -> dict:
        return self._client.patch(self._repo, {"private": True})

    @requires_auth
    def set_public(self) -> dict:
        return self._client.patch(self._repo, {"private": False})

    def network(self) -> list[dict]:
        return self._client.get_all(f"{self._repo}/forks")

    def tags(self) -> list[dict]:
        return self._client.get_all(f"{self._repo}/tags")

    def branches(self) -> list[dict]:
        return self._client.get_all(f"{self._repo}/branches")


class Issues(_Resource):
    """Issue operations on the selected repository."""

    def list(self, state: str = "open") -> list[dict]:
        issues = self._client.get_all(f"{self._repo}/issues", {"state": state})
        # Pull requests show up in the issues API too
        return [issue for issue in issues if "pull_request" not in issue]

    def view(self, number: int) -> dict:
        return self._client.get(f"{self._repo}/issues/{number}")

    def search(self, state: str, word: str) -> list[dict]:
        repo = self._client.repo_ref
        query = f"{word} repo:{repo.full_name} is:issue state:{state}"
        data = self._client.get("/search/issues", {"q": query})
        return data.get("items", [])

    @requires_auth
    def open(self, title: str, body: str) -> dict:
        return self._client.post(f"{self._repo}/issues", {"title": title, "body": body})

    @requires_auth
    def edit(self, number: int, title: str, body: str) -> dict:
        return self._client.patch(f"{self._repo}/issues/{number}", {"title": title, "body": body})

    @requires_auth
    def close(self, number: int) -> dict:
        return self._client.patch(f"{self._repo}/issues/{number}", {"state": "closed"})

    @requires_auth
    def reopen(self, number: int) -> dict:
        return self._client.patch(f"{self._repo}/issues/{number}", {"state": "open"})

    @requires_auth
    def add_label(self, number: int, label: str) -> list[dict]:
        return self._client.post(f"{self._repo}/issues/{number}/labels", {"labels": [label]})

    @requires_auth
    def remove_label(self, number: int, label: str) -> list[dict] | None:
        return self._client.delete(f"{self._repo}/issues/{number}/labels/{quote(label, safe='')}")

    @requires_auth
    def comment(self, number: int, body: str) -> dict:
        return self._client.post(f"{self._repo}/issues/{number}/comments", {"body": body})


class Users(_Resource):
    """User and profile operations."""

    def search(self, word: str) -> list[dict]:
        data = self._client.get("/search/users", {"q": word})
        return data.get("items", [])

    def show(self, user: str | None = None) -> dict:
        if user:
            return self._client.get(f"/users/{user}")
        if self._client.token:
            return self._client.get("/user")
        if self._client.owner:
            return self._client.get(f"/users/{self._client.owner}")
        raise GitHubAPIError("No user given and no repository selected")

    @requires_auth
    def update(self, key: str, value: str) -> dict:
        return self._client.patch("/user", {key: value})

    @requires_auth
    def followers(self) -> list[dict]:
        return self._client.get_all("/user/followers")

    @requires_auth
    def following(self) -> list[dict]:
        return self._client.get_all("/user/following")

    @requires_auth
    def follow(self, user: str) -> None:
        return self._client.put(f"/user/following/{user}")

    @requires_auth
    def unfollow(self, user: str) -> None:
        return self._client.delete(f"/user/following/{user}")

    @requires_auth
    def pub_keys(self) -> list[dict]:
        return self._client.get_all("/user/keys")

    @requires_auth
    def add_pub_key(self, title: str, key: str) -> dict:
        return self._client.post("/user/keys", {"title": title, "key": key})

    @requires_auth
    def remove_pub_key(self, key_id: int) -> None:
        return self._client.delete(f"/user/keys/{key_id}")


class Commits(_Resource):
    """Commit history operations."""

    def branch(self, branch: str = "master") -> list[dict]:
        return self._client.get(f"{self._repo}/commits", {"sha": branch})

    def file(self, branch: str, path: str) -> list[dict]:
        return self._client.get(f"{self._repo}/commits", {"sha": branch, "path": path})

    def show(self, sha: str) -> dict:
        return self._client.get(f"{self._repo}/commits/{sha}")


class Objects(_Resource):
    """Git object operations."""

    def tree(self, sha: str) -> dict:
        return self._client.get(f"{self._repo}/git/trees/{sha}")

    def blob(self, sha: str, path: str) -> dict:
        """
        Fetch the blob stored at ``path`` inside the tree ``sha``.

        Args:
            sha: Tree SHA to look the path up in
            path: Path relative to that tree, may be nested

        Returns:
            The blob object (base64 ``content``, ``size``, ``sha``)

        Raises:
            GitHubAPIError: If the path is not a blob in the tree
        """
        path = path.strip("/")
        tree = self._client.get(f"{self._repo}/git/trees/{sha}", {"recursive": 1})

        for entry in tree.get("tree", []):
            if entry.get("path") == path and entry.get("type") == "blob":
                return self._client.get(f"{self._repo}/git/blobs/{entry['sha']}")
        raise GitHubAPIError(f"Not found: {path} in tree {sha}")

    def raw(self, sha: str) -> str:
        response = self._client.request(
            "GET",
            f"{self._client.BASE_URL}{self._repo}/git/blobs/{sha}",
            accept="application/vnd.github.raw",
        )
        return response.text


class Network(_Resource):
    """Network graph data, served from the web host rather than the API."""

    def meta(self) -> dict:
        repo = self._client.repo_ref
        return self._client.get_url(f"{self._client.WEB_URL}/{repo.full_name}/network_meta")

    def data_chunk(self, nethash: str) -> dict:
        repo = self._client.repo_ref
        return self._client.get_url(
            f"{self._client.WEB_URL}/{repo.full_name}/network_data_chunk",
            {"nethash": nethash},
        )


class GitHubAPIClient:
    """
    GitHub REST API v3 client bound to an optional repository and credentials.

    "They track everything. Might as well use their API." — schema.cx
    """

    PER_PAGE = 100  # Maximum allowed by GitHub

    def __init__(
        self,
        owner: str | None = None,
        repo: str | None = None,
        login: str | None = None,
        token: str | None = None,
        github_host: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the GitHub API client."""
        self.owner = owner
        self.repo = repo
        self.login = login
        self.token = token
        self.timeout = timeout
        self.session = requests.Session()

        # Support GitHub Enterprise with custom hostname
        if github_host:
            self.BASE_URL = f"https://{github_host}/api/v3"
            self.WEB_URL = f"https://{github_host}"
        else:
            self.BASE_URL = "https://api.github.com"
            self.WEB_URL = "https://github.com"

        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": f"hubshell/{__version__}",
        }

        if token:
            headers["Authorization"] = f"token {token}"

        self.session.headers.update(headers)

        self.repos = Repos(self)
        self.issues = Issues(self)
        self.users = Users(self)
        self.commits = Commits(self)
        self.objects = Objects(self)
        self.network = Network(self)

    def close(self) -> None:
        """Close the HTTP session and release resources."""
        if self.session:
            self.session.close()

    @property
    def repo_ref(self) -> RepoRef:
        """The repository this client is bound to."""
        if not (self.owner and self.repo):
            raise GitHubAPIError("No repository selected. try 'repo :owner :repo' first")
        return RepoRef(owner=self.owner, name=self.repo)

    @property
    def repo_path(self) -> str:
        return f"/repos/{self.repo_ref.full_name}"

    def request(
        self,
        method: str,
        url: str,
        params: dict | None = None,
        json: Any = None,
        accept: str | None = None,
    ) -> requests.Response:
        """
        Make an API request and translate failures into GitHubAPIError.

        "Persistence is key. Even when the API says no." — schema.cx
        """
        headers = {"Accept": accept} if accept else None

        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response
        except requests.exceptions.HTTPError as e:
            raise self._translate_http_error(e.response) from e
        except requests.exceptions.RequestException as e:
            raise GitHubAPIError(f"Network error: {e}") from e

    def _translate_http_error(self, response: requests.Response) -> GitHubAPIError:
        """Map an HTTP error response onto the error taxonomy."""
        status = response.status_code
        message = _error_message(response)

        if status == 401:
            return AuthenticationRequiredError(
                f"{AUTH_REQUIRED_SIGNAL} (GitHub rejected the credentials: {message})"
            )
        if status == 404:
            return GitHubAPIError(f"Not found: {response.url}")
        if status in (403, 429) and response.headers.get("X-RateLimit-Remaining") == "0":
            reset_timestamp = response.headers.get("X-RateLimit-Reset", "0")

            # Format reset time
            try:
                reset_dt = datetime.fromtimestamp(int(reset_timestamp))
                reset_str = reset_dt.strftime("%Y-%m-%d %H:%M:%S")
            except (ValueError, OSError):
                reset_str = "unknown"

            auth_status = "authenticated" if self.token else "unauthenticated"
            return RateLimitError(
                f"GitHub API rate limit exceeded ({auth_status}). Limit resets at: {reset_str}"
            )
        if status == 403:
            return GitHubAPIError(f"Access forbidden: {message}")
        if status == 422:
            return GitHubAPIError(f"Validation failed: {message}")
        return GitHubAPIError(f"GitHub API error: {status} {message}")

    def get_url(self, url: str, params: dict | None = None) -> Any:
        return _decode(self.request("GET", url, params=params))

    def get(self, endpoint: str, params: dict | None = None) -> Any:
        return self.get_url(f"{self.BASE_URL}{endpoint}", params)

    def get_all(self, endpoint: str, params: dict | None = None) -> list:
        """
        Fetch every page of a list endpoint by following the Link header.

        "Pagination is just recursion with extra steps." — schema.cx
        """
        items: list = []
        params = {"per_page": self.PER_PAGE, **(params or {})}
        url: str | None = f"{self.BASE_URL}{endpoint}"

        while url:
            response = self.request("GET", url, params=params)
            items.extend(_decode(response) or [])
            url = response.links.get("next", {}).get("url")
            params = None  # the next URL already carries the query
        return items

    def post(self, endpoint: str, payload: Any = None) -> Any:
        return _decode(self.request("POST", f"{self.BASE_URL}{endpoint}", json=payload))

    def patch(self, endpoint: str, payload: Any = None) -> Any:
        return _decode(self.request("PATCH", f"{self.BASE_URL}{endpoint}", json=payload))

    def put(self, endpoint: str, payload: Any = None) -> Any:
        return _decode(self.request("PUT", f"{self.BASE_URL}{endpoint}", json=payload))

    def delete(self, endpoint: str) -> Any:
        return _decode(self.request("DELETE", f"{self.BASE_URL}{endpoint}"))


def _decode(response: requests.Response) -> Any:
    """Return the JSON body, or None for empty responses."""
    if response.status_code == 204 or not response.content:
        return None
    try:
        return response.json()
    except ValueError as e:
        raise GitHubAPIError(f"Unexpected response from {response.url}: {e}") from e


def _error_message(response: requests.Response) -> str:
    try:
        return response.json().get("message", response.reason)
    except (ValueError, AttributeError):
        return response.reason or ""


def build_client(
    credentials: Credentials | None,
    repo: RepoRef | None,
    settings: ShellSettings | None = None,
) -> GitHubAPIClient:
    """
    Build a fresh client for the given credentials and repository.

    Without a repository the owner defaults to the login name.
    """
    settings = settings or ShellSettings()
    owner = repo.owner if repo else (credentials.login if credentials else None)

    return GitHubAPIClient(
        owner=owner,
        repo=repo.name if repo else None,
        login=credentials.login if credentials else None,
        token=credentials.token if credentials else None,
        github_host=settings.github_host,
        timeout=settings.timeout,
    )
