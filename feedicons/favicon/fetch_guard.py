"""Guarded favicon downloads: one bounded, validated GET per candidate URL"""

import asyncio
import logging

import httpx

from feedicons.constants import (
    DEFAULT_ICON_CONTENT_TYPE,
    EXTENSION_CONTENT_TYPES,
    ICON_CONTENT_TYPE_MARKERS,
)
from feedicons.models import FetchFailure, FetchResult
from feedicons.utils.urls import url_path_suffix

logger = logging.getLogger(__name__)


async def read_capped(response: httpx.Response, limit: int) -> tuple[bytes, bool]:
    """Read a streamed response body, keeping at most `limit` bytes.

    Returns the body and whether anything past `limit` was dropped.
    """
    buffer = bytearray()
    async for chunk in response.aiter_bytes():
        remaining = limit - len(buffer)
        if len(chunk) > remaining:
            buffer.extend(chunk[:remaining])
            return bytes(buffer), True
        buffer.extend(chunk)
    return bytes(buffer), False


def is_acceptable_icon_type(content_type: str) -> bool:
    """Check a declared Content-Type against what an icon may be served as."""
    content_type = content_type.lower()
    return content_type.startswith("image/") or any(
        marker in content_type for marker in ICON_CONTENT_TYPE_MARKERS
    )


def guess_icon_content_type(url: str) -> str:
    """Infer the content type of an icon from the extension of its URL."""
    return EXTENSION_CONTENT_TYPES.get(url_path_suffix(url), DEFAULT_ICON_CONTENT_TYPE)


class FaviconDownloader:
    """Download favicon candidates through a shared async HTTP client.

    Every download is a single GET bounded by `timeout` seconds and `max_bytes` of body.
    Failures are reported through `FetchResult.failure` and never raised.
    """

    def __init__(self, client: httpx.AsyncClient, timeout: float, max_bytes: int) -> None:
        self.client = client
        self.timeout = timeout
        self.max_bytes = max_bytes

    async def download_favicon(self, url: str) -> FetchResult:
        """Download an icon candidate and validate status, type and size."""
        try:
            async with asyncio.timeout(self.timeout):
                return await self._download(url)
        except (TimeoutError, httpx.TimeoutException):
            failure = FetchFailure.TIMEOUT
        except httpx.InvalidURL:
            failure = FetchFailure.INVALID_URL
        except httpx.HTTPError as e:
            logger.debug(f"Failed to download favicon from {url}: {e}")
            failure = FetchFailure.NETWORK_ERROR
        return FetchResult.failed(url, failure)

    async def _download(self, url: str) -> FetchResult:
        async with self.client.stream("GET", url) as response:
            if not response.is_success:
                return FetchResult.failed(url, FetchFailure.BAD_STATUS)

            content_type = response.headers.get("Content-Type", "")
            if content_type and not is_acceptable_icon_type(content_type):
                return FetchResult.failed(url, FetchFailure.CONTENT_TYPE_REJECTED)

            content, truncated = await read_capped(response, self.max_bytes)

        if not content:
            return FetchResult.failed(url, FetchFailure.EMPTY_BODY)

        if truncated:
            logger.debug(f"Favicon from {url} truncated at {self.max_bytes} bytes")

        return FetchResult(
            url=url,
            content=content,
            content_type=content_type or guess_icon_content_type(url),
            truncated=truncated,
        )

    async def download_page(self, url: str, max_bytes: int) -> tuple[int, bytes]:
        """Download a page body, keeping at most `max_bytes` of it.

        Returns the status code and the body.

        Raises:
            - `httpx.HTTPError`, `httpx.InvalidURL` or `TimeoutError` if the page couldn't
              be fetched.
        """
        async with asyncio.timeout(self.timeout):
            async with self.client.stream("GET", url) as response:
                if not response.is_success:
                    return response.status_code, b""
                content, _ = await read_capped(response, max_bytes)
                return response.status_code, content
