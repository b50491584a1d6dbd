"""
Session state: the selected repository, credentials and the derived client.

"State is just history you haven't thrown away yet." — schema.cx
"""

from dataclasses import dataclass, field
from typing import Callable

from .config import ShellSettings
from .github_api import GitHubAPIClient, build_client
from .models import Credentials, RepoRef, SessionState

DEFAULT_PROMPT = "github> "

ClientFactory = Callable[[Credentials | None, RepoRef | None, ShellSettings], GitHubAPIClient]


class PreconditionError(Exception):
    """An API call was requested without the session state it needs."""

    pass


NO_CLIENT_MESSAGE = "unknown repo. try 'repo :owner :repo' or 'login :login :token' first"
NO_REPO_MESSAGE = "no repository selected. try 'repo :owner :repo' first"


@dataclass
class Session:
    """
    The mutable context carried across commands for one process run.

    Only ``select_repo`` and ``authenticate`` change it. Each change builds a
    brand new client; the previous one is closed and dropped.
    """

    settings: ShellSettings = field(default_factory=ShellSettings)
    client_factory: ClientFactory = build_client

    repo: RepoRef | None = None
    credentials: Credentials | None = None
    client: GitHubAPIClient | None = None

    @property
    def owner(self) -> str | None:
        return self.repo.owner if self.repo else None

    @property
    def repo_name(self) -> str | None:
        return self.repo.name if self.repo else None

    @property
    def login(self) -> str | None:
        return self.credentials.login if self.credentials else None

    @property
    def token(self) -> str | None:
        return self.credentials.token if self.credentials else None

    @property
    def is_authenticated(self) -> bool:
        return self.credentials is not None

    @property
    def state(self) -> SessionState:
        if self.repo and self.credentials:
            return SessionState.AUTH_AND_REPO
        if self.repo:
            return SessionState.REPO_ONLY
        if self.credentials:
            return SessionState.AUTH_ONLY
        return SessionState.ANONYMOUS

    @property
    def prompt(self) -> str:
        if self.repo:
            return f"{self.repo.full_name}> "
        return DEFAULT_PROMPT

    def select_repo(self, repo: RepoRef) -> None:
        """Select ``repo``, keeping whatever credentials are already known."""
        self.repo = repo
        self._rebuild_client()

    def authenticate(self, credentials: Credentials) -> None:
        """
        Store credentials and rebuild the client.

        The selected repository is preserved. Without one, the client's owner
        defaults to the login name.
        """
        self.credentials = credentials
        self._rebuild_client()

    def require_client(self) -> GitHubAPIClient:
        """Return the client, or raise if neither a repo nor credentials are set."""
        if self.client is None:
            raise PreconditionError(NO_CLIENT_MESSAGE)
        return self.client

    def require_repo(self) -> RepoRef:
        if self.repo is None:
            raise PreconditionError(NO_REPO_MESSAGE)
        return self.repo

    def close(self) -> None:
        """Release the current client's HTTP session."""
        if self.client is not None:
            self.client.close()
            self.client = None

    def _rebuild_client(self) -> None:
        previous = self.client
        self.client = self.client_factory(self.credentials, self.repo, self.settings)
        if previous is not None:
            previous.close()
