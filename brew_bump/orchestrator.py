"""End-to-end tap update workflow."""

from __future__ import annotations

from typing import List, Optional, Tuple

from .assets import AssetResolver
from .checksums import ChecksumResolver, ChecksumSet, Hasher
from .config import BumpConfig
from .console import log_debug, log_warning
from .constants import (
    FIELD_SHA256,
    FIELD_URL,
    FIELD_VERSION,
    FILE_PLACEHOLDER,
    NAME_PLACEHOLDER,
    TYPE_PLACEHOLDER,
)
from .errors import InvalidInputError
from .github import Branch, GitHubClient, ReleaseAsset, Repository
from .manifest import ManifestDocument
from .publish import PublishDecisionEngine, PublishResult
from .version import Version


def format_message(
    template: str, name: str, file_path: str, package_type: str, version: Version
) -> str:
    return (
        version.render(template)
        .replace(NAME_PLACEHOLDER, name)
        .replace(FILE_PLACEHOLDER, file_path)
        .replace(TYPE_PLACEHOLDER, package_type)
    )


def apply_checksums(document: ManifestDocument, checksums: ChecksumSet) -> None:
    """Write the i-th resolved checksum (and its URL) into the i-th slot."""
    for index, (name, checksum) in enumerate(checksums.items()):
        source = checksums.source_for(name)
        if source:
            document.set_field(FIELD_URL, source, index)
        document.set_field(FIELD_SHA256, checksum, index)

    slots = document.field_count(FIELD_SHA256)
    if len(checksums) > slots:
        log_warning(
            f"{document.file_path} has {slots} sha256 field(s) but {len(checksums)} "
            "checksum(s) were resolved; extra checksums were not written"
        )


class Orchestrator:
    """Runs one tap update from configuration to commit or pull request."""

    def __init__(self, config: BumpConfig, client: GitHubClient, hasher: Hasher) -> None:
        self.config = config
        self.client = client
        self.hasher = hasher

    async def _load_tap(self) -> Tuple[Repository, Branch]:
        tap = self.config.tap
        repository = await self.client.get_repository(tap.owner, tap.repo)
        branch = await self.client.get_branch(
            repository, tap.branch or repository.default_branch
        )
        return repository, branch

    async def _resolve_assets(self) -> Tuple[List[ReleaseAsset], Optional[Version]]:
        config = self.config
        if not config.asset_patterns:
            # The manifest's primary url/sha256 pair, with nothing to download.
            return [ReleaseAsset(name=config.name, download_url="")], None

        if config.release_repository is None or not config.release_tag:
            raise InvalidInputError("asset patterns need a release repository and tag")
        owner, name = config.release_repository
        release_repository = await self.client.get_repository(owner, name)
        resolution = await AssetResolver(self.client).resolve(
            release_repository,
            config.release_tag,
            config.asset_patterns,
            derive_version=not config.version,
        )
        return resolution.ordered_assets, resolution.version

    async def run(self) -> Optional[PublishResult]:
        config = self.config
        log_debug(f"tap={config.tap.full_name}")
        log_debug(f"name={config.name}")
        log_debug(f"type={config.package_type}")

        repository, branch = await self._load_tap()
        log_debug("getting package...")
        fetched = await self.client.get_file(repository, config.manifest_path, branch.name)
        document = ManifestDocument.from_fetched_file(fetched)

        assets, derived_version = await self._resolve_assets()
        if config.version:
            version = Version.parse(config.version)
        elif derived_version is not None:
            version = derived_version
        else:
            raise InvalidInputError("must specify a version or at least one asset pattern")
        log_debug(f"version={version}")

        checksums = await ChecksumResolver(self.hasher).resolve(
            assets, version, checksum=config.sha256, url=config.url
        )
        log_debug("updating url and sha256...")
        apply_checksums(document, checksums)
        log_debug("updating version...")
        document.set_field(FIELD_VERSION, str(version))

        if not document.is_dirty():
            log_warning("no changes were made to the package file")
            return None

        message = format_message(
            config.message, config.name, document.file_path, config.package_type, version
        )
        log_debug("publishing updated package...")
        engine = PublishDecisionEngine(
            self.client,
            repository,
            branch,
            force_pull_request=config.force_pull_request,
            fork_owner=config.fork_owner,
        )
        return await engine.publish(document, message)
