"""Shared constants for brew_bump."""

from __future__ import annotations

from typing import Dict

PACKAGE_NAME = "brew_bump"
DEFAULT_CONFIG_DIR_NAME = "brew_bump"

CONFIG_ENV_VAR = "BREW_BUMP_CONFIG"
TOKEN_ENV_VAR = "BREW_BUMP_TOKEN"
GITHUB_TOKEN_ENV_VAR = "GITHUB_TOKEN"
API_URL_ENV_VAR = "BREW_BUMP_API_URL"
GITHUB_API_URL_ENV_VAR = "GITHUB_API_URL"
GITHUB_REPOSITORY_ENV_VAR = "GITHUB_REPOSITORY"
GITHUB_REF_ENV_VAR = "GITHUB_REF"

KEYRING_SERVICE = "brew_bump"
KEYRING_USERNAME = "github_token"

DEFAULT_API_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"

TAP_REPO_PREFIX = "homebrew-"
PACKAGE_TYPE_PATHS: Dict[str, str] = {
    "formula": "Formula/{name}.rb",
    "cask": "Casks/{name}.rb",
}
DEFAULT_PACKAGE_TYPE = "formula"
DEFAULT_MESSAGE = "Update {{name}} to {{version}}"
UPDATE_BRANCH_PREFIX = "update-"

VERSION_PLACEHOLDER = "{{version}}"
NAME_PLACEHOLDER = "{{name}}"
FILE_PLACEHOLDER = "{{file}}"
TYPE_PLACEHOLDER = "{{type}}"

FIELD_VERSION = "version"
FIELD_URL = "url"
FIELD_SHA256 = "sha256"

EXIT_CODE_FAILURE = 1
EXIT_CODE_USAGE = 2
EXIT_CODE_INTERRUPT = 130

HTTP_TIMEOUT_SECONDS = 30.0
DOWNLOAD_CHUNK_SIZE = 1024 * 64
