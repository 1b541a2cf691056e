"""Argument models shared across brew_bump modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class BumpArgs:
    """Raw arguments for `brew_bump bump`, before defaults are applied."""

    name: Optional[str] = None
    tap: Optional[str] = None
    branch: Optional[str] = None
    package_type: Optional[str] = None
    version: Optional[str] = None
    sha256: Optional[str] = None
    url: Optional[str] = None
    assets: List[str] = field(default_factory=list)
    release_repo: Optional[str] = None
    release_tag: Optional[str] = None
    message: Optional[str] = None
    pull_request: Optional[bool] = None
    fork_owner: Optional[str] = None
    token: Optional[str] = None
    verbose: bool = False
