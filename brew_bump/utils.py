"""Shared utility helpers for brew_bump."""

from __future__ import annotations

import re
from typing import Any, Dict, Optional

_SENSITIVE_KV_PATTERN = re.compile(
    r"(?i)\b(token|access_token|password|secret)\b\s*([:=])\s*([^\s]+)"
)
_AUTH_HEADER_PATTERN = re.compile(r"(?i)\bAuthorization:\s*Bearer\s+([^\s]+)")
_GITHUB_TOKEN_PATTERN = re.compile(r"\b(?:gh[pousr]_[A-Za-z0-9]{20,}|github_pat_[A-Za-z0-9_]{20,})\b")


def redact(text: str) -> str:
    """Best-effort redaction for common secret patterns in logs."""
    value = str(text)
    value = _AUTH_HEADER_PATTERN.sub("Authorization: Bearer ***", value)
    value = _SENSITIVE_KV_PATTERN.sub(lambda m: f"{m.group(1)}{m.group(2)}***", value)
    value = _GITHUB_TOKEN_PATTERN.sub("***", value)
    return value


def mask_token(token: str) -> str:
    if len(token) <= 8:
        return "*" * len(token)
    return f"{token[:4]}...{token[-4:]}"


def safe_str(value: Any) -> Optional[str]:
    """Stringify and strip ``value``; ``None`` and blank strings become ``None``."""
    if value is None:
        return None
    text = value if isinstance(value, str) else str(value)
    return text.strip() or None


def as_dict(value: Any) -> Dict[str, Any]:
    if isinstance(value, dict):
        return value
    return {}


def pick(mapping: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in mapping:
            return mapping[key]
    return None
