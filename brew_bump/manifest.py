"""In-memory package manifest with quoted-field patching."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional

from .github import RepositoryFile


def field_pattern(name: str) -> re.Pattern[str]:
    # indent, field name, spaces, opening quote, value, same closing quote
    return re.compile(
        rf"^(?P<indent>[ \t]*){re.escape(name)} +(?P<quote>['\"])(?P<value>[^'\"]+)(?P=quote)",
        re.MULTILINE,
    )


@dataclass
class ManifestDocument:
    """Manifest text loaded from a tap, edited one quoted field at a time.

    Only lines of the form ``<name> "<value>"`` (or single-quoted) are
    understood; everything else is opaque and left untouched.
    """

    file_path: str
    original_content: str
    blob_sha: Optional[str] = None
    content: str = field(init=False)

    def __post_init__(self) -> None:
        self.content = self.original_content

    @classmethod
    def from_path(cls, file_path: str, content: str) -> "ManifestDocument":
        return cls(file_path=file_path, original_content=content)

    @classmethod
    def from_fetched_file(cls, fetched: RepositoryFile) -> "ManifestDocument":
        return cls(
            file_path=fetched.path,
            original_content=fetched.content,
            blob_sha=fetched.blob_sha,
        )

    def _matches(self, name: str) -> List[re.Match[str]]:
        return list(field_pattern(name).finditer(self.content))

    def get_field(self, name: str) -> str:
        match = field_pattern(name).search(self.content)
        return match.group("value") if match else ""

    def field_count(self, name: str) -> int:
        return len(self._matches(name))

    def set_field(self, name: str, value: str, occurrence: int = 0) -> None:
        if occurrence < 0:
            return
        matches = self._matches(name)
        if occurrence >= len(matches):
            return
        target = matches[occurrence]
        start, end = target.span("value")
        self.content = f"{self.content[:start]}{value}{self.content[end:]}"

    def is_dirty(self) -> bool:
        return self.content != self.original_content
