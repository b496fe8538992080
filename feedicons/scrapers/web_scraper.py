"""Web scraper for fetching and parsing a single page"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional, cast

import requests
from bs4 import BeautifulSoup
from mechanicalsoup import StatefulBrowser

from feedicons.configs import settings
from feedicons.constants import ALLOW_REDIRECTS, PAGE_CHUNK_BYTES, PARSER

logger = logging.getLogger(__name__)


class WebScraper:
    """Website scraper using MechanicalSoup. Use as context manager."""

    def __init__(
        self,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        max_bytes: Optional[int] = None,
    ) -> None:
        session: requests.Session = requests.Session()
        self.timeout = timeout or settings.feed_discovery.request_timeout_sec
        self.max_bytes = max_bytes or settings.feed_discovery.max_page_bytes
        self.browser = StatefulBrowser(
            session=session,
            soup_config={"features": PARSER},
            raise_on_404=False,
            user_agent=user_agent or settings.feed_discovery.user_agent,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def open(self, url: str) -> requests.Response:
        """Open URL and return the response, all within `timeout` seconds.

        At most `max_bytes` of the body are kept. The body of a 2xx response is parsed as
        HTML whatever its declared content type.

        Raises:
            - `requests.Timeout` if the page isn't received within `timeout` seconds.
            - `requests.RequestException` if the page couldn't be fetched.
            - `bs4.builder.ParserRejectedMarkup` if the parser refuses the body.
        """
        deadline = time.monotonic() + self.timeout
        executor = ThreadPoolExecutor(max_workers=1)
        try:
            future = executor.submit(self._download, url, deadline)
            response, body = future.result(timeout=self.timeout)
        except TimeoutError as e:
            raise requests.Timeout(f"{url} not received within {self.timeout}s") from e
        finally:
            # A download past its deadline stops at its next chunk, nobody waits for it.
            executor.shutdown(wait=False, cancel_futures=True)

        if 200 <= response.status_code < 300:
            self.browser.open_fake_page(
                body, url=response.url, soup_config=self._soup_config(response)
            )
        return response

    def _download(self, url: str, deadline: float) -> tuple[requests.Response, bytes]:
        with self.browser.session.get(
            url, timeout=self.timeout, allow_redirects=ALLOW_REDIRECTS, stream=True
        ) as response:
            body = bytearray()
            for chunk in response.iter_content(chunk_size=PAGE_CHUNK_BYTES):
                if time.monotonic() > deadline:
                    raise requests.Timeout(f"{url} not received within {self.timeout}s")
                body.extend(chunk)
                if len(body) >= self.max_bytes:
                    logger.debug(f"Page {url} truncated at {self.max_bytes} bytes")
                    break
            return response, bytes(body[: self.max_bytes])

    def _soup_config(self, response: requests.Response) -> dict[str, Any]:
        """Parse with the charset of the Content-Type header if there is one.

        Otherwise BeautifulSoup sniffs the encoding from the document itself.
        """
        soup_config: dict[str, Any] = dict(self.browser.soup_config)
        if "charset" in response.headers.get("Content-Type", "") and response.encoding:
            soup_config["from_encoding"] = response.encoding
        return soup_config

    def get_page(self) -> Optional[BeautifulSoup]:
        """Get the current page's BeautifulSoup object, None if nothing was parsed."""
        return cast(Optional[BeautifulSoup], self.browser.page)

    def close(self) -> None:
        """Close browser session and clean up resources."""
        try:
            self.browser.close()
        except Exception as ex:
            logger.warning(f"Error occurred when closing scraper session: {ex}")
