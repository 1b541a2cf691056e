"""GitHub token storage and resolution for brew_bump."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

import keyring
from keyring.errors import (
    KeyringError,
    NoKeyringError,
    PasswordDeleteError,
    PasswordSetError,
)

from .console import log, log_error
from .constants import (
    GITHUB_TOKEN_ENV_VAR,
    KEYRING_SERVICE,
    KEYRING_USERNAME,
    TOKEN_ENV_VAR,
)
from .errors import CLIError
from .utils import mask_token


@dataclass(frozen=True)
class ResolvedToken:
    token: Optional[str]
    source: str


def load_stored_token() -> Optional[str]:
    try:
        secret = keyring.get_password(KEYRING_SERVICE, KEYRING_USERNAME)
    except NoKeyringError:
        return None
    except KeyringError as exc:
        log_error(f"failed to read stored token from keyring: {exc}")
        return None
    if not secret:
        return None
    return secret.strip() or None


def persist_token(token: str) -> None:
    normalized = token.strip()
    if not normalized:
        raise CLIError("attempted to persist empty GitHub token")
    try:
        keyring.set_password(KEYRING_SERVICE, KEYRING_USERNAME, normalized)
    except NoKeyringError as exc:
        raise CLIError(
            f"no keyring backend available; set {TOKEN_ENV_VAR} for this session"
        ) from exc
    except PasswordSetError as exc:
        raise CLIError(f"failed to persist GitHub token in keyring: {exc}") from exc
    log(f"stored GitHub token ({mask_token(normalized)}) in system keyring")


def clear_stored_token() -> bool:
    try:
        keyring.delete_password(KEYRING_SERVICE, KEYRING_USERNAME)
    except (NoKeyringError, PasswordDeleteError):
        return False
    return True


def resolve_token(explicit: Optional[str], environ: Mapping[str, str]) -> ResolvedToken:
    """Pick the token from the flag, then the environment, then the keyring."""
    if explicit and explicit.strip():
        return ResolvedToken(explicit.strip(), "flag")
    for name in (TOKEN_ENV_VAR, GITHUB_TOKEN_ENV_VAR):
        value = (environ.get(name) or "").strip()
        if value:
            return ResolvedToken(value, f"env:{name}")
    stored = load_stored_token()
    if stored:
        return ResolvedToken(stored, "keyring")
    return ResolvedToken(None, "none")
