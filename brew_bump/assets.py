"""Release asset matching and version extraction."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .console import log_debug
from .errors import (
    AmbiguousAssetError,
    AssetNotFoundError,
    InvalidInputError,
    NoAssetsResolvedError,
    VersionExtractionError,
)
from .github import GitHubClient, ReleaseAsset, Repository
from .version import Version

VERSION_GROUP = "version"

# `(?<name>` (but not the `(?<=` / `(?<!` lookbehinds) is the named-group
# spelling used by most non-Python regex engines.
_FOREIGN_NAMED_GROUP = re.compile(r"\(\?<(?![=!])")


def compile_asset_pattern(pattern: str) -> re.Pattern[str]:
    translated = _FOREIGN_NAMED_GROUP.sub("(?P<", pattern)
    try:
        return re.compile(translated)
    except re.error as exc:
        raise InvalidInputError(f"invalid asset pattern '{pattern}': {exc}") from exc


@dataclass(frozen=True)
class AssetResolution:
    """Pattern to asset mapping in the order the patterns were supplied."""

    assets: Dict[str, ReleaseAsset]
    version: Optional[Version] = None

    @property
    def ordered_assets(self) -> List[ReleaseAsset]:
        return list(self.assets.values())


def extract_version(compiled: re.Pattern[str], pattern: str, asset_name: str) -> Version:
    match = compiled.search(asset_name)
    if match is None:
        raise VersionExtractionError(asset_name, pattern)

    value: Optional[str] = None
    if VERSION_GROUP in compiled.groupindex:
        value = match.group(VERSION_GROUP)
    else:
        named = set(compiled.groupindex.values())
        for index in range(1, compiled.groups + 1):
            if index not in named:
                value = match.group(index)
                break

    if not value:
        raise VersionExtractionError(asset_name, pattern)
    return Version.parse(value)


def match_assets(
    patterns: Sequence[str], assets: Sequence[ReleaseAsset]
) -> Dict[str, ReleaseAsset]:
    """Pair each pattern with the single asset whose name it matches."""
    mapping: Dict[str, ReleaseAsset] = {}
    unmatched: List[str] = []
    for pattern in patterns:
        compiled = compile_asset_pattern(pattern)
        candidates = [asset for asset in assets if compiled.search(asset.name)]
        if not candidates:
            unmatched.append(pattern)
            continue
        if len(candidates) > 1:
            raise AmbiguousAssetError(pattern, [asset.name for asset in candidates])
        mapping[pattern] = candidates[0]
        log_debug(f"pattern '{pattern}' matched asset '{candidates[0].name}'")

    if unmatched:
        raise AssetNotFoundError(unmatched, [asset.name for asset in assets])
    if not mapping:
        raise NoAssetsResolvedError()
    return mapping


class AssetResolver:
    def __init__(self, client: GitHubClient) -> None:
        self.client = client

    async def resolve(
        self,
        repository: Repository,
        tag: str,
        patterns: Sequence[str],
        *,
        derive_version: bool = True,
    ) -> AssetResolution:
        if not patterns:
            raise NoAssetsResolvedError()
        assets = await self.client.get_release_assets(repository, tag)
        log_debug(f"release {tag} in {repository.full_name} has {len(assets)} asset(s)")
        mapping = match_assets(patterns, assets)
        if not derive_version:
            return AssetResolution(assets=mapping)

        # Only the first pattern decides the version.
        designated = patterns[0]
        version = extract_version(
            compile_asset_pattern(designated), designated, mapping[designated].name
        )
        return AssetResolution(assets=mapping, version=version)
