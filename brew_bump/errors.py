"""Error types for brew_bump."""

from __future__ import annotations

from typing import List, Optional, Sequence


class CLIError(Exception):
    """Raised for user-facing CLI errors."""


class InvalidInputError(CLIError):
    """A required parameter is missing or parameters contradict each other."""


class InvalidVersionError(InvalidInputError):
    pass


class UnsupportedSchemeError(CLIError):
    def __init__(self, url: str) -> None:
        super().__init__(f"unknown scheme type in URL '{url}'")
        self.url = url


class DownloadError(CLIError):
    def __init__(self, url: str, status_code: Optional[int] = None, detail: str = "") -> None:
        if status_code is not None:
            message = f"download failed {status_code} for {url}"
        else:
            message = f"download failed for {url}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class AssetResolutionError(CLIError):
    """Base class for failures while matching release assets."""


class AssetNotFoundError(AssetResolutionError):
    def __init__(self, patterns: Sequence[str], available: Sequence[str] = ()) -> None:
        self.patterns: List[str] = list(patterns)
        self.available: List[str] = list(available)
        listed = ", ".join(f"'{pattern}'" for pattern in self.patterns)
        message = f"no release asset matched pattern(s): {listed}"
        if self.available:
            message = f"{message} (available: {', '.join(self.available)})"
        super().__init__(message)


class AmbiguousAssetError(AssetResolutionError):
    def __init__(self, pattern: str, names: Sequence[str]) -> None:
        self.pattern = pattern
        self.names: List[str] = list(names)
        super().__init__(
            f"pattern '{pattern}' matched {len(self.names)} release assets "
            f"({', '.join(self.names)}); it must match exactly one"
        )


class NoAssetsResolvedError(AssetResolutionError):
    def __init__(self) -> None:
        super().__init__("no release assets were resolved; supply at least one asset pattern")


class VersionExtractionError(AssetResolutionError):
    def __init__(self, asset_name: str, pattern: str) -> None:
        self.asset_name = asset_name
        self.pattern = pattern
        super().__init__(
            f"could not extract a version from asset '{asset_name}' using pattern "
            f"'{pattern}'; add a 'version' named group or a capture group"
        )


class ChecksumResolutionError(CLIError):
    def __init__(self) -> None:
        super().__init__(
            "unable to resolve a checksum; supply either an explicit checksum with "
            "exactly one asset, an explicit URL with exactly one asset, or one or "
            "more release assets without an override"
        )


class GitHubAPIError(CLIError):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
