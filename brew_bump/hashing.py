"""Streaming SHA-256 digests of remote resources."""

from __future__ import annotations

import base64
import hashlib
from typing import Optional

import httpx

from .console import log_debug
from .constants import DOWNLOAD_CHUNK_SIZE
from .context import HttpClientFactory, default_http_client_factory
from .errors import DownloadError, UnsupportedSchemeError
from .http import describe_http_error, http_timeout, request_headers

SUPPORTED_SCHEMES = ("http://", "https://")


def check_scheme(url: str) -> None:
    if not url.lower().startswith(SUPPORTED_SCHEMES):
        raise UnsupportedSchemeError(url)


def encode_digest(digest: bytes) -> str:
    return base64.b64encode(digest).decode("ascii")


class ContentHasher:
    """Computes the SHA-256 of a URL's body chunk by chunk.

    The body is never held in memory as a whole. The result is the base64
    encoding of the raw digest, which is the textual form written into the
    manifest's ``sha256`` field. There is no retry; any failure is raised.
    """

    def __init__(
        self,
        *,
        client_factory: Optional[HttpClientFactory] = None,
        chunk_size: int = DOWNLOAD_CHUNK_SIZE,
    ) -> None:
        self.client_factory = client_factory or default_http_client_factory
        self.chunk_size = chunk_size
        self.invocations = 0

    async def digest(self, url: str) -> str:
        check_scheme(url)
        self.invocations += 1
        hasher = hashlib.sha256()
        received = 0
        try:
            async with self.client_factory(http_timeout()) as client:
                async with client.stream(
                    "GET", url, headers=request_headers(accept="*/*")
                ) as response:
                    if not 200 <= response.status_code <= 299:
                        raise DownloadError(url, response.status_code)
                    async for chunk in response.aiter_bytes(chunk_size=self.chunk_size):
                        hasher.update(chunk)
                        received += len(chunk)
        except httpx.HTTPError as exc:
            raise DownloadError(url, detail=describe_http_error(exc)) from exc
        log_debug(f"hashed {received} bytes from {url}")
        return encode_digest(hasher.digest())
