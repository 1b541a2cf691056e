"""Configuration for brew_bump runs.

Precedence (highest to lowest): CLI flags, environment variables, the TOML
config file, built-in defaults. Everything a run needs ends up in one
:class:`BumpConfig`; nothing below the CLI reads the environment itself.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple

from platformdirs import PlatformDirs

from .args import BumpArgs
from .console import log_warning
from .constants import (
    API_URL_ENV_VAR,
    CONFIG_ENV_VAR,
    DEFAULT_API_URL,
    DEFAULT_CONFIG_DIR_NAME,
    DEFAULT_MESSAGE,
    DEFAULT_PACKAGE_TYPE,
    GITHUB_API_URL_ENV_VAR,
    GITHUB_REF_ENV_VAR,
    GITHUB_REPOSITORY_ENV_VAR,
    PACKAGE_TYPE_PATHS,
    TAP_REPO_PREFIX,
)
from .errors import CLIError, InvalidInputError
from .utils import pick, safe_str

_TAG_REF_PREFIX = "refs/tags/"


@dataclass(frozen=True)
class TapRef:
    owner: str
    repo: str
    branch: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class ConfigFile:
    tap: Optional[str] = None
    package_type: Optional[str] = None
    message: Optional[str] = None
    pull_request: Optional[bool] = None
    fork_owner: Optional[str] = None
    api_url: Optional[str] = None


@dataclass(frozen=True)
class BumpConfig:
    tap: TapRef
    name: str
    package_type: str
    token: str
    message: str = DEFAULT_MESSAGE
    version: Optional[str] = None
    sha256: Optional[str] = None
    url: Optional[str] = None
    asset_patterns: List[str] = field(default_factory=list)
    release_repository: Optional[Tuple[str, str]] = None
    release_tag: Optional[str] = None
    force_pull_request: bool = False
    fork_owner: Optional[str] = None
    api_url: str = DEFAULT_API_URL

    @property
    def manifest_path(self) -> str:
        return PACKAGE_TYPE_PATHS[self.package_type].format(name=self.name)


def default_config_path() -> Path:
    dirs = PlatformDirs(appname=DEFAULT_CONFIG_DIR_NAME, appauthor=False, roaming=True)
    return Path(dirs.user_config_path) / "config.toml"


def resolve_config_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if environ is None else environ
    env_value = safe_str(env.get(CONFIG_ENV_VAR))
    if env_value:
        return Path(env_value).expanduser()
    return default_config_path()


def _safe_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    return None


def load_config(
    path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None
) -> ConfigFile:
    config_path = path or resolve_config_path(environ)
    if not config_path.exists():
        return ConfigFile()
    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise CLIError(f"failed to read config file {config_path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise CLIError(f"failed to parse config file {config_path}: {exc}") from exc
    return ConfigFile(
        tap=safe_str(data.get("tap")),
        package_type=safe_str(pick(data, "type", "package_type")),
        message=safe_str(data.get("message")),
        pull_request=_safe_bool(pick(data, "pull_request", "pullRequest")),
        fork_owner=safe_str(pick(data, "fork_owner", "forkOwner")),
        api_url=safe_str(pick(data, "api_url", "apiUrl")),
    )


def config_template() -> str:
    return (
        "# brew_bump configuration (TOML)\n"
        "#\n"
        "# Precedence (highest -> lowest):\n"
        "#   CLI flags > environment variables > this file > built-in defaults\n"
        "\n"
        "# tap = \"acme/homebrew-tools\"  # owner/repo[:branch]\n"
        "# type = \"formula\"  # or \"cask\"\n"
        "# message = \"Update {{name}} to {{version}}\"\n"
        "# pull_request = false  # always open a pull request\n"
        "# fork_owner = \"my-org\"  # where forks are created when push is denied\n"
        "# api_url = \"https://api.github.com\"\n"
    )


def write_default_config(
    path: Optional[Path] = None,
    *,
    force: bool,
    environ: Optional[Mapping[str, str]] = None,
) -> Path:
    config_path = path or resolve_config_path(environ)
    if config_path.exists() and not force:
        raise CLIError(f"config file already exists: {config_path} (use --force to overwrite)")
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(config_template(), encoding="utf-8")
    except OSError as exc:
        raise CLIError(f"failed to write config file {config_path}: {exc}") from exc
    return config_path


def parse_repository_name(value: str) -> Tuple[str, str]:
    parts = [part.strip() for part in value.strip().split("/")]
    if len(parts) != 2 or not all(parts):
        raise InvalidInputError(f"invalid repository '{value}'; expected owner/name")
    return parts[0], parts[1]


def parse_tap(value: str, branch: Optional[str] = None) -> TapRef:
    """Parse ``owner/repo[:branch]``; ``repo`` gains the ``homebrew-`` prefix if missing."""
    name, _, tap_branch = value.strip().partition(":")
    owner, repo = parse_repository_name(name)
    if not repo.startswith(TAP_REPO_PREFIX):
        repo = f"{TAP_REPO_PREFIX}{repo}"
    return TapRef(owner=owner, repo=repo, branch=safe_str(branch) or safe_str(tap_branch))


def release_tag_from_ref(ref: Optional[str]) -> Optional[str]:
    normalized = safe_str(ref)
    if not normalized:
        return None
    if normalized.startswith(_TAG_REF_PREFIX):
        return normalized[len(_TAG_REF_PREFIX):]
    if normalized.startswith("refs/"):
        return None
    return normalized


def build_bump_config(
    args: BumpArgs,
    config: ConfigFile,
    environ: Mapping[str, str],
    *,
    token: Optional[str],
) -> BumpConfig:
    tap_value = safe_str(args.tap) or config.tap
    if not tap_value:
        raise InvalidInputError("missing required input: tap (owner/repo[:branch])")
    name = safe_str(args.name)
    if not name:
        raise InvalidInputError("missing required input: name")

    package_type = (
        safe_str(args.package_type) or config.package_type or DEFAULT_PACKAGE_TYPE
    ).lower()
    if package_type not in PACKAGE_TYPE_PATHS:
        raise InvalidInputError(
            f"unknown type '{package_type}'; expected one of: {', '.join(PACKAGE_TYPE_PATHS)}"
        )

    version = args.version or None
    patterns = [pattern for pattern in args.assets if pattern]
    if not version and not patterns:
        raise InvalidInputError("must specify a version or at least one asset pattern")

    sha256 = safe_str(args.sha256)
    url = safe_str(args.url)
    if len(patterns) > 1 and (sha256 or url):
        log_warning("sha256 and url are ignored when more than one asset pattern is given")

    release_repository: Optional[Tuple[str, str]] = None
    release_tag: Optional[str] = None
    if patterns:
        repo_value = safe_str(args.release_repo) or safe_str(
            environ.get(GITHUB_REPOSITORY_ENV_VAR)
        )
        if not repo_value:
            raise InvalidInputError(
                f"asset patterns need a release repository (--release-repo or {GITHUB_REPOSITORY_ENV_VAR})"
            )
        release_repository = parse_repository_name(repo_value)
        release_tag = safe_str(args.release_tag) or release_tag_from_ref(
            environ.get(GITHUB_REF_ENV_VAR)
        )
        if not release_tag:
            raise InvalidInputError(
                f"asset patterns need a release tag (--release-tag or a tag {GITHUB_REF_ENV_VAR})"
            )

    if not token:
        raise InvalidInputError("a GitHub token is required; pass --token or run 'brew_bump auth login'")

    force_pull_request = args.pull_request
    if force_pull_request is None:
        force_pull_request = bool(config.pull_request)

    api_url = (
        safe_str(environ.get(API_URL_ENV_VAR))
        or safe_str(environ.get(GITHUB_API_URL_ENV_VAR))
        or config.api_url
        or DEFAULT_API_URL
    )

    return BumpConfig(
        tap=parse_tap(tap_value, args.branch),
        name=name,
        package_type=package_type,
        token=token,
        message=safe_str(args.message) or config.message or DEFAULT_MESSAGE,
        version=version,
        sha256=sha256,
        url=url,
        asset_patterns=patterns,
        release_repository=release_repository,
        release_tag=release_tag,
        force_pull_request=force_pull_request,
        fork_owner=safe_str(args.fork_owner) or config.fork_owner,
        api_url=api_url,
    )
