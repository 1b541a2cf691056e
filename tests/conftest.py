from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import keyring
import pytest
from keyring.backend import KeyringBackend
from keyring.errors import PasswordDeleteError

from brew_bump.console import reset_console
from brew_bump.github import (
    Branch,
    Commit,
    PullRequest,
    ReleaseAsset,
    Repository,
    RepositoryFile,
)


class MemoryKeyring(KeyringBackend):
    priority = 1

    def __init__(self) -> None:
        self._storage: Dict[tuple, str] = {}

    def get_password(self, service: str, username: str) -> Optional[str]:
        return self._storage.get((service, username))

    def set_password(self, service: str, username: str, password: str) -> None:
        self._storage[(service, username)] = password

    def delete_password(self, service: str, username: str) -> None:
        try:
            del self._storage[(service, username)]
        except KeyError as exc:
            raise PasswordDeleteError(str(exc)) from exc


@pytest.fixture(autouse=True)
def memory_keyring() -> None:
    original = keyring.get_keyring()
    keyring.set_keyring(MemoryKeyring())
    try:
        yield
    finally:
        keyring.set_keyring(original)


@pytest.fixture(autouse=True)
def quiet_console() -> None:
    reset_console()
    yield
    reset_console()


class FakeHasher:
    def __init__(self, digests: Optional[Dict[str, str]] = None) -> None:
        self.digests = digests or {}
        self.calls: List[str] = []

    @property
    def invocations(self) -> int:
        return len(self.calls)

    async def digest(self, url: str) -> str:
        self.calls.append(url)
        return self.digests.get(url, f"digest-of-{url}")


class FakeGitHubClient:
    """In-memory stand-in for GitHubClient that records every call."""

    def __init__(
        self,
        *,
        repositories: Optional[List[Repository]] = None,
        branches: Optional[Dict[str, Branch]] = None,
        files: Optional[Dict[str, RepositoryFile]] = None,
        assets: Optional[List[ReleaseAsset]] = None,
        fork: Optional[Repository] = None,
        pull_request_error: Optional[Exception] = None,
    ) -> None:
        self.repositories = {repo.full_name: repo for repo in repositories or []}
        self.branches = branches or {}
        self.files = files or {}
        self.assets = assets or []
        self.fork = fork
        self.pull_request_error = pull_request_error
        self.calls: List[Tuple[str, Any]] = []
        self.commits: List[Dict[str, Any]] = []
        self.pull_requests: List[Dict[str, Any]] = []

    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]

    async def get_repository(self, owner: str, name: str) -> Repository:
        self.calls.append(("get_repository", f"{owner}/{name}"))
        return self.repositories[f"{owner}/{name}"]

    async def get_branch(self, repository: Repository, branch: str) -> Branch:
        self.calls.append(("get_branch", branch))
        return self.branches[branch]

    async def create_branch(self, repository: Repository, name: str, sha: str) -> Branch:
        self.calls.append(("create_branch", (repository.full_name, name, sha)))
        return Branch(name=name, sha=sha)

    async def create_fork(
        self, repository: Repository, organization: Optional[str] = None
    ) -> Repository:
        self.calls.append(("create_fork", organization))
        assert self.fork is not None
        return self.fork

    async def get_file(self, repository: Repository, path: str, ref: str) -> RepositoryFile:
        self.calls.append(("get_file", (path, ref)))
        return self.files[path]

    async def get_release_assets(self, repository: Repository, tag: str) -> List[ReleaseAsset]:
        self.calls.append(("get_release_assets", (repository.full_name, tag)))
        return list(self.assets)

    async def commit_file(
        self,
        repository: Repository,
        branch: str,
        path: str,
        content: str,
        message: str,
        blob_sha: Optional[str] = None,
    ) -> Commit:
        self.calls.append(("commit_file", (repository.full_name, branch, path)))
        self.commits.append(
            {
                "repository": repository.full_name,
                "branch": branch,
                "path": path,
                "content": content,
                "message": message,
                "blob_sha": blob_sha,
            }
        )
        return Commit(sha="c0ffee", url="https://github.com/commit/c0ffee")

    async def create_pull_request(
        self,
        repository: Repository,
        *,
        base: str,
        head: str,
        title: str,
        body: str,
        head_owner: str,
    ) -> PullRequest:
        self.calls.append(("create_pull_request", repository.full_name))
        if self.pull_request_error is not None:
            raise self.pull_request_error
        self.pull_requests.append(
            {"base": base, "head": head, "title": title, "body": body, "head_owner": head_owner}
        )
        return PullRequest(number=42, url="https://github.com/pull/42")


@pytest.fixture
def fake_hasher() -> type[FakeHasher]:
    return FakeHasher


@pytest.fixture
def fake_github() -> type[FakeGitHubClient]:
    return FakeGitHubClient


@pytest.fixture
def mock_client_factory() -> Callable[..., Callable[[httpx.Timeout], httpx.AsyncClient]]:
    def _make(handler: Callable[[httpx.Request], httpx.Response]):
        def factory(timeout: httpx.Timeout) -> httpx.AsyncClient:
            return httpx.AsyncClient(
                transport=httpx.MockTransport(handler),
                timeout=timeout,
                follow_redirects=True,
            )

        return factory

    return _make
