"""Version helpers for brew_bump."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as metadata_version
from typing import Dict, Optional

from .constants import PACKAGE_NAME, VERSION_PLACEHOLDER
from .errors import InvalidVersionError


@lru_cache()
def cli_version() -> str:
    try:
        from . import __version__
    except ImportError:
        __version__ = ""

    if isinstance(__version__, str) and __version__.strip():
        return __version__

    try:
        return metadata_version(PACKAGE_NAME)
    except PackageNotFoundError:
        return "0.0.0"


USER_AGENT = f"{PACKAGE_NAME}/{cli_version()}"

_DOTTED_PARTS = re.compile(r"^v?(\d+)(?:\.(\d+))?(?:\.(\d+))?")


@dataclass(frozen=True)
class Version:
    """A release version kept exactly as supplied.

    The raw string is never normalized. Numeric ``major``/``minor``/``patch``
    parts are picked out of a dotted prefix when one exists and are only used
    for the ``{{version.<part>}}`` template placeholders.
    """

    raw: str
    major: Optional[str] = None
    minor: Optional[str] = None
    patch: Optional[str] = None

    @classmethod
    def parse(cls, raw: Optional[str]) -> "Version":
        if not raw:
            raise InvalidVersionError("version must not be empty")
        match = _DOTTED_PARTS.match(raw)
        if not match:
            return cls(raw)
        major, minor, patch = match.groups()
        return cls(raw, major=major, minor=minor, patch=patch)

    def placeholders(self) -> Dict[str, str]:
        values = {VERSION_PLACEHOLDER: self.raw}
        for part in ("major", "minor", "patch"):
            value = getattr(self, part)
            if value is not None:
                values[f"{{{{version.{part}}}}}"] = value
        return values

    def render(self, template: str) -> str:
        rendered = template
        for token, value in self.placeholders().items():
            rendered = rendered.replace(token, value)
        return rendered

    def __str__(self) -> str:
        return self.raw
