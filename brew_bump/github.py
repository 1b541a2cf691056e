"""GitHub REST API client used to read and update tap repositories."""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from .console import log_debug
from .constants import DEFAULT_API_URL
from .errors import GitHubAPIError
from .http import describe_http_error, request_headers
from .utils import as_dict, pick, safe_str

ASSET_PAGE_SIZE = 100
MAX_ASSET_PAGES = 50


@dataclass(frozen=True)
class Repository:
    owner: str
    name: str
    default_branch: str
    can_push: bool = False

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class Branch:
    name: str
    sha: str
    protected: bool = False


@dataclass(frozen=True)
class RepositoryFile:
    """File content fetched at a ref together with its blob sha."""

    path: str
    content: str
    blob_sha: Optional[str] = None


@dataclass(frozen=True)
class ReleaseAsset:
    name: str
    download_url: str
    label: Optional[str] = None


@dataclass(frozen=True)
class Commit:
    sha: str
    url: str


@dataclass(frozen=True)
class PullRequest:
    number: int
    url: str


def api_url(base_url: str, path: str) -> httpx.URL:
    normalized_base = base_url.rstrip("/") + "/"
    return httpx.URL(normalized_base).join(path.lstrip("/"))


def _quote_segment(value: str) -> str:
    return quote(value, safe="")


def _parse_repository(payload: Dict[str, Any]) -> Repository:
    owner = safe_str(pick(as_dict(payload.get("owner")), "login")) or ""
    name = safe_str(payload.get("name")) or ""
    if not owner or not name:
        raise GitHubAPIError("unexpected repository payload structure")
    permissions = as_dict(payload.get("permissions"))
    return Repository(
        owner=owner,
        name=name,
        default_branch=safe_str(payload.get("default_branch")) or "main",
        can_push=bool(permissions.get("push") or permissions.get("admin")),
    )


class GitHubClient:
    """Thin async wrapper over the endpoints a tap update needs.

    Every failure is raised as :class:`GitHubAPIError`; nothing is retried.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        token: str = "",
        *,
        base_url: str = DEFAULT_API_URL,
    ) -> None:
        self._http = http_client
        self._token = token
        self.base_url = base_url

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Any = None,
        json_body: Any = None,
    ) -> Any:
        url = api_url(self.base_url, path)
        log_debug(f"{method} {url}")
        try:
            response = await self._http.request(
                method,
                url,
                headers=request_headers(self._token),
                params=params,
                json=json_body,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            detail = describe_http_error(exc)
            raise GitHubAPIError(
                f"GitHub API request {method} {url} failed: {detail}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            detail = describe_http_error(exc)
            raise GitHubAPIError(f"GitHub API request {method} {url} failed: {detail}") from exc
        if not response.content:
            return {}
        try:
            return response.json()
        except json.JSONDecodeError as exc:
            raise GitHubAPIError(f"GitHub API response for {url} was not valid JSON") from exc

    async def get_repository(self, owner: str, name: str) -> Repository:
        payload = await self._request(
            "GET", f"repos/{_quote_segment(owner)}/{_quote_segment(name)}"
        )
        return _parse_repository(as_dict(payload))

    async def get_branch(self, repository: Repository, branch: str) -> Branch:
        payload = as_dict(
            await self._request(
                "GET",
                f"repos/{repository.full_name}/branches/{_quote_segment(branch)}",
            )
        )
        sha = safe_str(pick(as_dict(payload.get("commit")), "sha"))
        if not sha:
            raise GitHubAPIError(f"unexpected branch payload for '{branch}'")
        return Branch(
            name=safe_str(payload.get("name")) or branch,
            sha=sha,
            protected=bool(payload.get("protected")),
        )

    async def create_branch(self, repository: Repository, name: str, sha: str) -> Branch:
        await self._request(
            "POST",
            f"repos/{repository.full_name}/git/refs",
            json_body={"ref": f"refs/heads/{name}", "sha": sha},
        )
        return Branch(name=name, sha=sha, protected=False)

    async def create_fork(
        self, repository: Repository, organization: Optional[str] = None
    ) -> Repository:
        body: Dict[str, Any] = {}
        if organization:
            body["organization"] = organization
        payload = await self._request(
            "POST", f"repos/{repository.full_name}/forks", json_body=body
        )
        fork = _parse_repository(as_dict(payload))
        # A fork always belongs to the caller, even when the payload omits permissions.
        return Repository(
            owner=fork.owner,
            name=fork.name,
            default_branch=fork.default_branch,
            can_push=True,
        )

    async def get_file(self, repository: Repository, path: str, ref: str) -> RepositoryFile:
        payload = as_dict(
            await self._request(
                "GET",
                f"repos/{repository.full_name}/contents/{quote(path)}",
                params={"ref": ref},
            )
        )
        if payload.get("type", "file") != "file":
            raise GitHubAPIError(f"'{path}' in {repository.full_name} is not a file")
        raw = safe_str(payload.get("content")) or ""
        try:
            content = base64.b64decode(raw).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise GitHubAPIError(f"failed to decode '{path}' from {repository.full_name}") from exc
        return RepositoryFile(
            path=safe_str(payload.get("path")) or path,
            content=content,
            blob_sha=safe_str(payload.get("sha")),
        )

    async def get_release_assets(self, repository: Repository, tag: str) -> List[ReleaseAsset]:
        release = as_dict(
            await self._request(
                "GET",
                f"repos/{repository.full_name}/releases/tags/{_quote_segment(tag)}",
            )
        )
        release_id = release.get("id")
        if release_id is None:
            raise GitHubAPIError(f"unexpected release payload for tag '{tag}'")

        assets: List[ReleaseAsset] = []
        page = 1
        while True:
            items = await self._request(
                "GET",
                f"repos/{repository.full_name}/releases/{release_id}/assets",
                params={"per_page": ASSET_PAGE_SIZE, "page": page},
            )
            if not isinstance(items, list):
                raise GitHubAPIError("unexpected release asset payload structure")
            for entry in items:
                record = as_dict(entry)
                name = safe_str(record.get("name"))
                url = safe_str(record.get("browser_download_url"))
                if not name or not url:
                    continue
                assets.append(
                    ReleaseAsset(name=name, download_url=url, label=safe_str(record.get("label")))
                )
            if len(items) < ASSET_PAGE_SIZE:
                break
            page += 1
            if page > MAX_ASSET_PAGES:
                break
        return assets

    async def commit_file(
        self,
        repository: Repository,
        branch: str,
        path: str,
        content: str,
        message: str,
        blob_sha: Optional[str] = None,
    ) -> Commit:
        body: Dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": branch,
        }
        if blob_sha:
            body["sha"] = blob_sha
        payload = as_dict(
            await self._request(
                "PUT",
                f"repos/{repository.full_name}/contents/{quote(path)}",
                json_body=body,
            )
        )
        commit = as_dict(payload.get("commit"))
        sha = safe_str(commit.get("sha"))
        if not sha:
            raise GitHubAPIError("unexpected commit payload structure")
        return Commit(sha=sha, url=safe_str(commit.get("html_url")) or "")

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
        payload = as_dict(
            await self._request(
                "POST",
                f"repos/{repository.full_name}/pulls",
                json_body={
                    "title": title,
                    "body": body,
                    "base": base,
                    "head": f"{head_owner}:{head}",
                },
            )
        )
        number = payload.get("number")
        if not isinstance(number, int):
            raise GitHubAPIError("unexpected pull request payload structure")
        return PullRequest(number=number, url=safe_str(payload.get("html_url")) or "")
