"""Console helpers for brew_bump."""

from __future__ import annotations

import sys

_LOG_SILENCED = False
_LOG_VERBOSE = False


def configure_console(*, quiet: bool = False, verbose: bool = False) -> None:
    global _LOG_SILENCED, _LOG_VERBOSE
    if quiet:
        _LOG_SILENCED = True
    if verbose:
        _LOG_VERBOSE = True


def reset_console() -> None:
    global _LOG_SILENCED, _LOG_VERBOSE
    _LOG_SILENCED = False
    _LOG_VERBOSE = False


def log(message: str) -> None:
    if _LOG_SILENCED:
        return
    print(f"[brew_bump] {message}")


def log_debug(message: str) -> None:
    if not _LOG_VERBOSE:
        return
    log(f"debug: {message}")


def log_warning(message: str) -> None:
    if _LOG_SILENCED:
        return
    print(f"[brew_bump] warning: {message}", file=sys.stderr)


def log_error(message: str) -> None:
    print(f"[brew_bump] {message}", file=sys.stderr)
