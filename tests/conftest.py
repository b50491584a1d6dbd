"""
Shared fixtures: a scripted line reader and a recording API client.

"Fake it till you test it." — schema.cx
"""

from typing import Any, Callable

import pytest

from hubshell.commands import CommandContext
from hubshell.config import ShellSettings
from hubshell.interaction import LineReader
from hubshell.models import Credentials, RepoRef
from hubshell.render import ResultRenderer
from hubshell.session import Session


class FakeReader(LineReader):
    """Line reader that replays a list of lines, then reports end of input."""

    def __init__(self, lines: list[str] | None = None) -> None:
        self.lines = list(lines or [])
        self.prompts: list[str] = []
        self.history: list[str] = []

    def read(self, prompt: str) -> str | None:
        self.prompts.append(prompt)
        if not self.lines:
            return None
        return self.lines.pop(0)

    def add_history(self, line: str) -> None:
        if line.strip():
            self.history.append(line)


class RecordingResource:
    """Sub-resource whose every operation is recorded on the owning client."""

    def __init__(self, client: "RecordingClient", name: str) -> None:
        self._client = client
        self._name = name

    def __getattr__(self, method: str) -> Callable[..., Any]:
        if method.startswith("_"):
            raise AttributeError(method)

        def call(*args: Any) -> Any:
            key = f"{self._name}.{method}"
            self._client.calls.append((key, args))
            outcome = self._client.results.get(key)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        return call


class RecordingClient:
    """Stand-in for GitHubAPIClient that records calls instead of making them."""

    def __init__(self, credentials: Credentials | None, repo: RepoRef | None) -> None:
        self.credentials = credentials
        self.repo = repo
        self.owner = repo.owner if repo else (credentials.login if credentials else None)
        self.calls: list[tuple[str, tuple]] = []
        self.results: dict[str, Any] = {}
        self.closed = False
        for name in ("repos", "issues", "users", "commits", "objects", "network"):
            setattr(self, name, RecordingResource(self, name))

    def close(self) -> None:
        self.closed = True


class RecordingFactory:
    """Client factory that remembers every client it built."""

    def __init__(self) -> None:
        self.built: list[RecordingClient] = []
        self.results: dict[str, Any] = {}

    def __call__(
        self,
        credentials: Credentials | None,
        repo: RepoRef | None,
        settings: ShellSettings,
    ) -> RecordingClient:
        client = RecordingClient(credentials, repo)
        client.results = self.results
        self.built.append(client)
        return client

    @property
    def calls(self) -> list[tuple[str, tuple]]:
        return [call for client in self.built for call in client.calls]


@pytest.fixture
def factory() -> RecordingFactory:
    return RecordingFactory()


@pytest.fixture
def reader() -> FakeReader:
    return FakeReader()


@pytest.fixture
def session(factory: RecordingFactory) -> Session:
    return Session(client_factory=factory)


@pytest.fixture
def ctx(session: Session, reader: FakeReader) -> CommandContext:
    return CommandContext(session=session, reader=reader, renderer=ResultRenderer("json"))


@pytest.fixture
def read_output(capsys) -> Callable[[], str]:
    """Captured stdout with whitespace collapsed, so console wrapping doesn't matter."""

    def _read() -> str:
        return " ".join(capsys.readouterr().out.split())

    return _read
