"""Application context for injectable dependencies."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping, Optional

import httpx

from .http import http_timeout

HttpClientFactory = Callable[[httpx.Timeout], httpx.AsyncClient]


def default_http_client_factory(timeout: httpx.Timeout) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=timeout, follow_redirects=True)


@dataclass(frozen=True)
class AppContext:
    """Shared dependencies for CLI flows (HTTP, environment, config path)."""

    environ: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))
    config_path: Optional[Path] = None
    http_client_factory: HttpClientFactory = default_http_client_factory

    def new_http_client(self, timeout: Optional[httpx.Timeout] = None) -> httpx.AsyncClient:
        return self.http_client_factory(timeout or http_timeout())
