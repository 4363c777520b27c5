"""
Attachment refetching for follow-up messages.

Discord does not let a bot re-post an attachment by URL; the bytes have to be
downloaded and uploaded again. For deleted messages this only works while the
CDN still serves the file.
"""

from __future__ import annotations

import io
from typing import Optional, Protocol
from urllib.parse import unquote, urlsplit

import aiohttp
import discord

from logcord.pipeline.errors import AttachmentFetchFailed
from logcord.util.logger import get_logger

logger = get_logger("attachments")

DEFAULT_FETCH_TIMEOUT = 60.0
CONNECT_TIMEOUT = 10.0


def filename_from_url(url: str) -> str:
    """Last path segment of ``url`` without the query string."""
    name = unquote(urlsplit(url).path.rsplit("/", 1)[-1])
    return name or "attachment"


class AttachmentFetcher(Protocol):
    async def fetch(self, url: str, filename: Optional[str] = None) -> discord.File: ...


class HttpAttachmentFetcher:
    """Downloads attachments over a lazily created shared aiohttp session."""

    def __init__(self, total_timeout: float = DEFAULT_FETCH_TIMEOUT) -> None:
        self._timeout = aiohttp.ClientTimeout(total=total_timeout, connect=CONNECT_TIMEOUT)
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def fetch(self, url: str, filename: Optional[str] = None) -> discord.File:
        """Download ``url`` and wrap the bytes in a ``discord.File``.

        Raises:
            AttachmentFetchFailed: on a non-2xx response, a client error or a timeout.
        """
        try:
            async with self.session.get(url) as response:
                if response.status >= 300:
                    raise AttachmentFetchFailed(url, f"HTTP {response.status}")
                data = await response.read()
        except AttachmentFetchFailed:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise AttachmentFetchFailed(url, str(exc) or type(exc).__name__, exc) from exc

        logger.debug("[ATTACHMENTS] Fetched %d bytes from %s", len(data), url)
        return discord.File(io.BytesIO(data), filename=filename or filename_from_url(url))

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
