"""Checksum resolution for resolved release assets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Protocol, Sequence, Tuple

from .console import log_debug
from .errors import ChecksumResolutionError
from .github import ReleaseAsset
from .version import Version


class Hasher(Protocol):
    async def digest(self, url: str) -> str: ...


@dataclass
class ChecksumSet:
    """Asset name to checksum, in the order checksums were resolved.

    ``sources`` records the download URL each checksum belongs to. A checksum
    supplied verbatim only has one when an explicit URL came with it.
    """

    checksums: Dict[str, str] = field(default_factory=dict)
    sources: Dict[str, str] = field(default_factory=dict)

    def add(self, name: str, checksum: str, source: Optional[str] = None) -> None:
        self.checksums[name] = checksum
        if source:
            self.sources[name] = source

    def items(self) -> Iterator[Tuple[str, str]]:
        return iter(self.checksums.items())

    def source_for(self, name: str) -> Optional[str]:
        return self.sources.get(name)

    def __len__(self) -> int:
        return len(self.checksums)

    def __bool__(self) -> bool:
        return bool(self.checksums)


class ChecksumResolver:
    def __init__(self, hasher: Hasher) -> None:
        self.hasher = hasher

    async def resolve(
        self,
        assets: Sequence[ReleaseAsset],
        version: Version,
        *,
        checksum: Optional[str] = None,
        url: Optional[str] = None,
    ) -> ChecksumSet:
        """Resolve one checksum per asset.

        An explicit checksum beats an explicit URL, which beats each asset's
        own download URL. The explicit inputs only apply when exactly one
        asset is being resolved.
        """
        result = ChecksumSet()
        only = assets[0] if len(assets) == 1 else None

        if only is not None and checksum:
            log_debug(f"using supplied checksum for '{only.name}'")
            result.add(only.name, checksum, version.render(url) if url else None)
        elif only is not None and url:
            full_url = version.render(url)
            log_debug(f"computing SHA256 hash of data from '{full_url}'...")
            result.add(only.name, await self.hasher.digest(full_url), full_url)
        else:
            for asset in assets:
                if not asset.download_url:
                    continue
                log_debug(f"computing SHA256 hash of asset '{asset.name}'...")
                digest = await self.hasher.digest(asset.download_url)
                result.add(asset.name, digest, asset.download_url)

        if not result:
            raise ChecksumResolutionError()
        return result
