"""Retrieval of the base image a label is composited onto."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass

import httpx

# Default timeout (in seconds) for image downloads.
DEFAULT_TIMEOUT = 30


class ImageFetchError(RuntimeError):
    """The base image could not be downloaded."""


class ImageFetcher(ABC):
    """Source of base images keyed by URL."""

    @abstractmethod
    async def fetch(self, url: str) -> bytes:
        """Return the raw bytes of the image at ``url``."""


@dataclass
class RemoteImageFetcher(ImageFetcher):
    """Download images over HTTP(S)."""

    timeout: float = DEFAULT_TIMEOUT
    transport: httpx.AsyncBaseTransport | None = None

    @classmethod
    def from_env(cls) -> RemoteImageFetcher:
        raw = os.getenv("CREDIT_OVERLAY_FETCH_TIMEOUT", "").strip()
        try:
            timeout = float(raw) if raw else DEFAULT_TIMEOUT
        except ValueError as exc:
            raise RuntimeError(
                f"Invalid CREDIT_OVERLAY_FETCH_TIMEOUT '{raw}': {exc}"
            ) from exc
        return cls(timeout=timeout)

    async def fetch(self, url: str) -> bytes:
        """Return the body of ``url``; raises ``ImageFetchError`` on failure."""

        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            try:
                response = await client.get(url)
            except httpx.HTTPError as exc:
                raise ImageFetchError(f"Image download failed: {exc}") from exc

        if not response.is_success:
            raise ImageFetchError(
                f"Image download failed ({response.status_code}): {url}"
            )
        return response.content


__all__ = [
    "DEFAULT_TIMEOUT",
    "ImageFetchError",
    "ImageFetcher",
    "RemoteImageFetcher",
]
