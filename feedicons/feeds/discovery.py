"""Discovery of the RSS and Atom feeds advertised by a web page"""

import logging
from typing import Callable, Optional

import requests
from bs4.builder import ParserRejectedMarkup

from feedicons.exceptions import (
    InvalidPageURLError,
    PageFetchError,
    PageParseError,
    PageStatusError,
)
from feedicons.scrapers.link_scanner import FEED_LINK_MATCHER, scan_links
from feedicons.scrapers.web_scraper import WebScraper
from feedicons.utils.urls import is_http_url

logger = logging.getLogger(__name__)


class FeedLinkDiscoverer:
    """Fetch a single page and list the feeds it links to.

    Unlike favicons, nothing is cached and nothing is retried: the caller gets either the
    list of feed URLs (possibly empty) or a `FeedDiscoveryError` naming the failed stage.
    """

    def __init__(self, scraper_factory: Optional[Callable[[], WebScraper]] = None) -> None:
        self.scraper_factory = scraper_factory or WebScraper

    def discover_feed_links(self, page_url: str) -> list[str]:
        """Return the absolute URLs of the feeds linked from `page_url`, in document order.

        Raises:
            - `InvalidPageURLError` if the URL is empty or not http(s).
            - `PageFetchError` if the page couldn't be fetched within the timeout.
            - `PageStatusError` if the page responded with a non-2xx status.
            - `PageParseError` if the parser rejects the response body.
        """
        page_url = page_url.strip()
        if not page_url:
            raise InvalidPageURLError("Please provide a URL.")
        if not is_http_url(page_url):
            raise InvalidPageURLError("Invalid URL (only http/https allowed).")

        with self.scraper_factory() as scraper:
            try:
                response = scraper.open(page_url)
            except requests.RequestException as e:
                raise PageFetchError(f"failed to fetch URL: {e}") from e
            except ParserRejectedMarkup as e:
                raise PageParseError(f"failed to parse HTML: {e}") from e

            if not 200 <= response.status_code < 300:
                raise PageStatusError(response.status_code, response.reason or "")

            page = scraper.get_page()
            if page is None:
                raise PageParseError("failed to parse HTML: response has no document")

        feeds = scan_links(page, page_url, FEED_LINK_MATCHER)
        logger.info(f"Discovered {len(feeds)} feeds on {page_url}")
        return feeds
