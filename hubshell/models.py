"""
Data models for hubshell.

"A command is just a wish with a return type." — schema.cx
"""

from dataclasses import dataclass
from enum import Enum, unique


class Resource(str, Enum):
    """Sub-resources exposed by the GitHub API client."""

    REPOS = "repos"
    ISSUES = "issues"
    USERS = "users"
    COMMITS = "commits"
    OBJECTS = "objects"
    NETWORK = "network"


@unique
class ApiOperation(Enum):
    """
    Every (resource, operation) pair the shell is allowed to invoke.

    Call targets are resolved from these members only. The method name never
    comes from user input.
    """

    REPOS_SHOW = (Resource.REPOS, "show")
    REPOS_LIST = (Resource.REPOS, "list")
    REPOS_SEARCH = (Resource.REPOS, "search")
    REPOS_WATCH = (Resource.REPOS, "watch")
    REPOS_UNWATCH = (Resource.REPOS, "unwatch")
    REPOS_FORK = (Resource.REPOS, "fork")
    REPOS_CREATE = (Resource.REPOS, "create")
    REPOS_DELETE = (Resource.REPOS, "delete")
    REPOS_SET_PRIVATE = (Resource.REPOS, "set_private")
    REPOS_SET_PUBLIC = (Resource.REPOS, "set_public")
    REPOS_NETWORK = (Resource.REPOS, "network")
    REPOS_TAGS = (Resource.REPOS, "tags")
    REPOS_BRANCHES = (Resource.REPOS, "branches")

    ISSUES_LIST = (Resource.ISSUES, "list")
    ISSUES_VIEW = (Resource.ISSUES, "view")
    ISSUES_SEARCH = (Resource.ISSUES, "search")
    ISSUES_OPEN = (Resource.ISSUES, "open")
    ISSUES_EDIT = (Resource.ISSUES, "edit")
    ISSUES_CLOSE = (Resource.ISSUES, "close")
    ISSUES_REOPEN = (Resource.ISSUES, "reopen")
    ISSUES_ADD_LABEL = (Resource.ISSUES, "add_label")
    ISSUES_REMOVE_LABEL = (Resource.ISSUES, "remove_label")
    ISSUES_COMMENT = (Resource.ISSUES, "comment")

    USERS_SEARCH = (Resource.USERS, "search")
    USERS_SHOW = (Resource.USERS, "show")
    USERS_UPDATE = (Resource.USERS, "update")
    USERS_FOLLOWERS = (Resource.USERS, "followers")
    USERS_FOLLOWING = (Resource.USERS, "following")
    USERS_FOLLOW = (Resource.USERS, "follow")
    USERS_UNFOLLOW = (Resource.USERS, "unfollow")
    USERS_PUB_KEYS = (Resource.USERS, "pub_keys")
    USERS_ADD_PUB_KEY = (Resource.USERS, "add_pub_key")
    USERS_REMOVE_PUB_KEY = (Resource.USERS, "remove_pub_key")

    COMMITS_BRANCH = (Resource.COMMITS, "branch")
    COMMITS_FILE = (Resource.COMMITS, "file")
    COMMITS_SHOW = (Resource.COMMITS, "show")

    OBJECTS_TREE = (Resource.OBJECTS, "tree")
    OBJECTS_BLOB = (Resource.OBJECTS, "blob")
    OBJECTS_RAW = (Resource.OBJECTS, "raw")

    NETWORK_META = (Resource.NETWORK, "meta")
    NETWORK_DATA_CHUNK = (Resource.NETWORK, "data_chunk")

    @property
    def resource(self) -> Resource:
        return self.value[0]

    @property
    def method(self) -> str:
        return self.value[1]

    @property
    def raw(self) -> bool:
        """Whether the operation returns plain text instead of structured data."""
        return self is ApiOperation.OBJECTS_RAW

    def bind(self, client: object):
        """Resolve the bound facade method for this operation on ``client``."""
        return getattr(getattr(client, self.resource.value), self.method)

    def __str__(self) -> str:
        return f"{self.resource.value}.{self.method}"


class SessionState(str, Enum):
    """Combined repo-selected / authenticated state of a shell session."""

    ANONYMOUS = "anonymous"
    REPO_ONLY = "repo-only"
    AUTH_ONLY = "auth-only"
    AUTH_AND_REPO = "auth-and-repo"


@dataclass(frozen=True)
class Credentials:
    """A GitHub login and its personal access token."""

    login: str
    token: str


@dataclass(frozen=True)
class RepoRef:
    """
    An owner/repository pair.

    "Every repo tells a story. Make sure you're reading the right one." — schema.cx
    """

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"
