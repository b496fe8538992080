# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""Module for test configurations for the unit test directory."""

import io
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Callable, Iterator, Union

import httpx
import pytest
import requests


# A route is either a response tuple `(status, headers, content)` or an exception to raise.
Route = Union[tuple[int, dict[str, str], bytes], Exception]


class FakeWeb:
    """A tiny fake internet served through `httpx.MockTransport`.

    Unknown URLs answer 404. Every requested URL is recorded in `requests`.
    """

    def __init__(self, routes: dict[str, Route]) -> None:
        self.routes = routes
        self.requests: list[str] = []
        self.transport = httpx.MockTransport(self.handler)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        """Answer a request from the routes table."""
        url = str(request.url)
        self.requests.append(url)
        route = self.routes.get(url)
        if route is None:
            return httpx.Response(404, content=b"not found")
        if isinstance(route, Exception):
            raise route
        status, headers, content = route
        return httpx.Response(status, headers=headers, content=content)


FakeWebFixture = Callable[[dict[str, Route]], FakeWeb]


@pytest.fixture(name="fake_web")
def fixture_fake_web() -> FakeWebFixture:
    """Return a factory building a `FakeWeb` from a routes table."""

    def _create_fake_web(routes: dict[str, Route]) -> FakeWeb:
        return FakeWeb(routes)

    return _create_fake_web


@pytest.fixture(name="html_page")
def fixture_html_page() -> Callable[[str], tuple[int, dict[str, str], bytes]]:
    """Return a function wrapping a `<head>` body into an HTML response route."""

    def _html_page(head: str) -> tuple[int, dict[str, str], bytes]:
        html = f"<!DOCTYPE html><html><head>{head}</head><body><p>hi</p></body></html>"
        return 200, {"Content-Type": "text/html; charset=utf-8"}, html.encode()

    return _html_page


PageResponseFixture = Callable[..., requests.Response]


@pytest.fixture(name="page_response")
def fixture_page_response() -> PageResponseFixture:
    """Return a factory building a streamable `requests.Response` for a page body."""

    def _page_response(
        body: bytes,
        status_code: int = 200,
        content_type: str = "text/html",
        url: str = "https://example.com/",
    ) -> requests.Response:
        response = requests.Response()
        response.status_code = status_code
        response.reason = "OK" if status_code < 400 else "Not Found"
        response.headers["Content-Type"] = content_type
        response.raw = io.BytesIO(body)
        response.url = url
        return response

    return _page_response


class TricklingHandler(BaseHTTPRequestHandler):
    """Send a 200 page a few bytes at a time, taking about two seconds overall."""

    def do_GET(self) -> None:
        """Write the body in small delayed pieces."""
        self.send_response(200)
        self.send_header("Content-Type", "text/html")
        self.end_headers()
        try:
            for _ in range(20):
                self.wfile.write(b"<p>hi ")
                self.wfile.flush()
                time.sleep(0.1)
        except (BrokenPipeError, ConnectionResetError):
            pass

    def log_message(self, format, *args) -> None:
        """Keep the test output clean."""


@pytest.fixture(name="trickling_server_url")
def fixture_trickling_server_url() -> Iterator[str]:
    """Serve `TricklingHandler` on a local port and yield its URL."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), TricklingHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}/"
    server.shutdown()
    server.server_close()
