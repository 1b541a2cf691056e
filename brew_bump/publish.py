"""Publishing an updated manifest as a commit or a pull request."""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Literal, Optional, Tuple

from .console import log_debug
from .constants import UPDATE_BRANCH_PREFIX
from .github import Branch, GitHubClient, Repository
from .manifest import ManifestDocument


class Strategy(str, Enum):
    DIRECT_COMMIT = "direct_commit"
    BRANCH_PULL_REQUEST = "branch_pull_request"
    FORK_PULL_REQUEST = "fork_pull_request"


@dataclass(frozen=True)
class PublishTarget:
    repository: Repository
    branch: str
    requires_pull_request: bool


@dataclass(frozen=True)
class PublishResult:
    """Outcome of a publish, discriminated by ``kind``."""

    kind: Literal["commit", "pull_request"]
    identifier: str
    url: str

    def describe(self) -> str:
        if self.kind == "commit":
            return f"Created commit '{self.identifier}': {self.url}"
        return f"Created pull request '{self.identifier}': {self.url}"


def decide_strategy(
    can_push: bool, protected: bool, force_pull_request: bool
) -> Strategy:
    if not can_push:
        return Strategy.FORK_PULL_REQUEST
    if protected or force_pull_request:
        return Strategy.BRANCH_PULL_REQUEST
    return Strategy.DIRECT_COMMIT


def split_commit_message(message: str, fallback_title: str = "") -> Tuple[str, str]:
    """Split a commit message into a pull request title and body.

    The first line is the title and everything after the first newline is the
    body, verbatim. A message without a newline has an empty body.
    """
    if not message:
        return fallback_title, ""
    title, newline, body = message.partition("\n")
    if not newline:
        return message, ""
    return title, body


def default_branch_name() -> str:
    return f"{UPDATE_BRANCH_PREFIX}{int(time.time() * 1000)}"


class PublishDecisionEngine:
    """Commits a manifest to a tap, going through a pull request when needed.

    Nothing is rolled back: if opening the pull request fails, the branch
    (or fork) and the commit already created stay in place.
    """

    def __init__(
        self,
        client: GitHubClient,
        repository: Repository,
        branch: Branch,
        *,
        force_pull_request: bool = False,
        fork_owner: Optional[str] = None,
        branch_namer: Callable[[], str] = default_branch_name,
    ) -> None:
        self.client = client
        self.repository = repository
        self.branch = branch
        self.force_pull_request = force_pull_request
        self.fork_owner = fork_owner
        self.branch_namer = branch_namer

    @property
    def strategy(self) -> Strategy:
        return decide_strategy(
            self.repository.can_push, self.branch.protected, self.force_pull_request
        )

    async def select_target(self) -> PublishTarget:
        strategy = self.strategy
        log_debug(
            f"canPush={self.repository.can_push}, isProtected={self.branch.protected}, "
            f"forcePullRequest={self.force_pull_request} -> {strategy.value}"
        )
        if strategy is Strategy.DIRECT_COMMIT:
            return PublishTarget(self.repository, self.branch.name, requires_pull_request=False)
        if strategy is Strategy.BRANCH_PULL_REQUEST:
            new_branch = await self.client.create_branch(
                self.repository, self.branch_namer(), self.branch.sha
            )
            return PublishTarget(self.repository, new_branch.name, requires_pull_request=True)

        fork = await self.client.create_fork(self.repository, self.fork_owner)
        return PublishTarget(fork, fork.default_branch, requires_pull_request=True)

    async def publish(self, document: ManifestDocument, message: str) -> PublishResult:
        target = await self.select_target()

        log_debug(f"creating commit on {target.repository.full_name}@{target.branch}...")
        commit = await self.client.commit_file(
            target.repository,
            target.branch,
            document.file_path,
            document.content,
            message,
            document.blob_sha,
        )
        if not target.requires_pull_request:
            return PublishResult(kind="commit", identifier=commit.sha, url=commit.url)

        title, body = split_commit_message(message, f"Update {document.file_path}")
        log_debug(f"PR message is: {title}\n{body}")
        pull = await self.client.create_pull_request(
            self.repository,
            base=self.branch.name,
            head=target.branch,
            title=title,
            body=body,
            head_owner=target.repository.owner,
        )
        return PublishResult(kind="pull_request", identifier=str(pull.number), url=pull.url)
