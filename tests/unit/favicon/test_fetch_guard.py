# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""Unit tests for fetch_guard module."""

import asyncio
import base64

import httpx
import pytest

from feedicons.favicon.fetch_guard import (
    FaviconDownloader,
    guess_icon_content_type,
    is_acceptable_icon_type,
)
from feedicons.models import FetchFailure
from feedicons.utils.http_client import create_http_client

ICON_URL = "https://example.com/favicon.ico"
MAX_BYTES = 1024 * 1024


def make_downloader(transport: httpx.AsyncBaseTransport, timeout: float = 5.0):
    """Create a client and downloader on top of the given transport."""
    client = create_http_client(transport=transport)
    return client, FaviconDownloader(client, timeout=timeout, max_bytes=MAX_BYTES)


async def download(fake_web, routes, url=ICON_URL, timeout=5.0):
    """Download `url` through a fake web built from `routes`."""
    web = fake_web(routes)
    client, downloader = make_downloader(web.transport, timeout)
    async with client:
        return await downloader.download_favicon(url)


class TestDownloadFavicon:
    """Tests for FaviconDownloader.download_favicon."""

    @pytest.mark.asyncio
    async def test_accepts_image(self, fake_web):
        """Test that an image response is returned with its declared type."""
        result = await download(fake_web, {ICON_URL: (200, {"Content-Type": "image/png"}, b"png")})

        assert result.ok
        assert result.content == b"png"
        assert result.content_type == "image/png"
        assert result.to_data_url() == "data:image/png;base64," + base64.b64encode(b"png").decode()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "content_type",
        ["image/x-icon", "image/svg+xml", "text/x-icon", "application/octet-stream"],
    )
    async def test_accepts_icon_like_types(self, fake_web, content_type):
        """Test the content types accepted besides image/*."""
        result = await download(
            fake_web, {ICON_URL: (200, {"Content-Type": content_type}, b"icon")}
        )

        assert result.ok
        assert result.content_type == content_type

    @pytest.mark.asyncio
    async def test_rejects_html_with_success_status(self, fake_web):
        """Test that a 2xx text/html response is not accepted as an icon."""
        result = await download(
            fake_web, {ICON_URL: (200, {"Content-Type": "text/html"}, b"<html></html>")}
        )

        assert not result.ok
        assert result.failure is FetchFailure.CONTENT_TYPE_REJECTED

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [301, 404, 500])
    async def test_rejects_non_success_status(self, fake_web, status):
        """Test that any status outside 2xx fails."""
        result = await download(
            fake_web, {ICON_URL: (status, {"Content-Type": "image/png"}, b"png")}
        )

        assert result.failure is FetchFailure.BAD_STATUS

    @pytest.mark.asyncio
    async def test_follows_redirects(self, fake_web):
        """Test that a redirect to an image is followed."""
        routes = {
            ICON_URL: (302, {"Location": "https://cdn.example.com/icon.png"}, b""),
            "https://cdn.example.com/icon.png": (200, {"Content-Type": "image/png"}, b"png"),
        }

        result = await download(fake_web, routes)

        assert result.ok
        assert result.content == b"png"

    @pytest.mark.asyncio
    async def test_rejects_empty_body(self, fake_web):
        """Test that an empty body fails."""
        result = await download(fake_web, {ICON_URL: (200, {"Content-Type": "image/png"}, b"")})

        assert result.failure is FetchFailure.EMPTY_BODY

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ["url", "expected"],
        [
            ("https://example.com/icon.png", "image/png"),
            ("https://example.com/favicon.ico", "image/x-icon"),
            ("https://example.com/icon.gif", "image/x-icon"),
        ],
    )
    async def test_infers_missing_content_type(self, fake_web, url, expected):
        """Test that a missing Content-Type is inferred from the URL extension."""
        result = await download(fake_web, {url: (200, {}, b"data")}, url=url)

        assert result.ok
        assert result.content_type == expected

    @pytest.mark.asyncio
    async def test_body_at_ceiling_is_accepted(self, fake_web):
        """Test that a body of exactly the ceiling is kept whole."""
        body = b"x" * MAX_BYTES

        result = await download(fake_web, {ICON_URL: (200, {"Content-Type": "image/png"}, body)})

        assert result.ok
        assert len(result.content) == MAX_BYTES
        assert not result.truncated

    @pytest.mark.asyncio
    async def test_body_over_ceiling_is_truncated(self, fake_web):
        """Test that a larger body is truncated to the ceiling rather than rejected."""
        body = b"x" * (MAX_BYTES + 4096)

        result = await download(fake_web, {ICON_URL: (200, {"Content-Type": "image/png"}, body)})

        assert result.ok
        assert len(result.content) == MAX_BYTES
        assert result.truncated

    @pytest.mark.asyncio
    async def test_network_error(self, fake_web):
        """Test that transport errors are reported as network errors."""
        result = await download(fake_web, {ICON_URL: httpx.ConnectError("connection refused")})

        assert result.failure is FetchFailure.NETWORK_ERROR

    @pytest.mark.asyncio
    async def test_transport_timeout(self, fake_web):
        """Test that httpx timeouts are reported as timeouts."""
        result = await download(fake_web, {ICON_URL: httpx.ReadTimeout("read timed out")})

        assert result.failure is FetchFailure.TIMEOUT

    @pytest.mark.asyncio
    async def test_overall_deadline(self):
        """Test that a response slower than the timeout is abandoned."""

        async def slow_handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(1)
            return httpx.Response(200, headers={"Content-Type": "image/png"}, content=b"png")

        client, downloader = make_downloader(httpx.MockTransport(slow_handler), timeout=0.05)
        async with client:
            result = await downloader.download_favicon(ICON_URL)

        assert result.failure is FetchFailure.TIMEOUT

    @pytest.mark.asyncio
    async def test_invalid_url(self, fake_web):
        """Test that a URL httpx can't request is reported as invalid."""
        result = await download(fake_web, {}, url="https://exa mple.com/favicon.ico")

        assert not result.ok
        assert result.failure in (FetchFailure.INVALID_URL, FetchFailure.NETWORK_ERROR)


class TestDownloadPage:
    """Tests for FaviconDownloader.download_page."""

    @pytest.mark.asyncio
    async def test_returns_status_and_capped_body(self, fake_web):
        """Test that the page body is read up to the given limit."""
        web = fake_web({"https://example.com/": (200, {"Content-Type": "text/html"}, b"a" * 100)})
        client, downloader = make_downloader(web.transport)

        async with client:
            status, content = await downloader.download_page("https://example.com/", 10)

        assert status == 200
        assert content == b"a" * 10

    @pytest.mark.asyncio
    async def test_error_status_has_no_body(self, fake_web):
        """Test that an error status is reported without reading the body."""
        web = fake_web({})
        client, downloader = make_downloader(web.transport)

        async with client:
            status, content = await downloader.download_page("https://example.com/", 10)

        assert status == 404
        assert content == b""


@pytest.mark.parametrize(
    ["content_type", "expected"],
    [
        ("image/png", True),
        ("IMAGE/PNG", True),
        ("image/vnd.microsoft.icon", True),
        ("application/octet-stream", True),
        ("text/html; charset=utf-8", False),
        ("application/json", False),
    ],
)
def test_is_acceptable_icon_type(content_type, expected):
    """Test the content type gate."""
    assert is_acceptable_icon_type(content_type) is expected


def test_guess_icon_content_type_ignores_query():
    """Test that the query string doesn't hide the extension."""
    assert guess_icon_content_type("https://example.com/icon.png?v=2") == "image/png"
