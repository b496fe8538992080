"""Per-domain favicon resolution: HTML hints first, conventional paths second"""

import logging

import httpx
from bs4 import BeautifulSoup

from feedicons.constants import FALLBACK_FAVICON_PATHS, PARSER
from feedicons.favicon.cache import FaviconCache
from feedicons.favicon.fetch_guard import FaviconDownloader
from feedicons.models import DomainResolution, ResolutionState
from feedicons.scrapers.link_scanner import FAVICON_LINK_MATCHER, scan_links

logger = logging.getLogger(__name__)


class FaviconResolver:
    """Find a working favicon for a domain and cache it as a `data:` URL.

    The home page is scanned for icon links, then every candidate is downloaded in order
    until one passes the download checks. Nothing is cached when all candidates fail.
    """

    def __init__(
        self,
        downloader: FaviconDownloader,
        cache: FaviconCache,
        max_page_bytes: int,
    ) -> None:
        self.downloader = downloader
        self.cache = cache
        self.max_page_bytes = max_page_bytes

    async def resolve(self, domain: str) -> DomainResolution:
        """Resolve the favicon of `domain`, writing it to the cache on success."""
        resolution = DomainResolution(domain=domain)

        resolution.state = ResolutionState.HTML_DISCOVERY
        candidates = await self.discover_favicons_from_html(domain)
        candidates.extend(self.fallback_candidates(domain))

        resolution.state = ResolutionState.CANDIDATE_CASCADE
        for candidate in candidates:
            resolution.attempts += 1
            result = await self.downloader.download_favicon(candidate)
            if not result.ok:
                logger.debug(f"Favicon candidate {candidate} rejected: {result.failure}")
                continue

            data_url = result.to_data_url()
            self.cache.put(domain, data_url)
            resolution.state = ResolutionState.RESOLVED
            resolution.icon_url = candidate
            resolution.data_url = data_url
            return resolution

        resolution.state = ResolutionState.EXHAUSTED
        logger.info(f"No favicon found for domain {domain}")
        return resolution

    async def discover_favicons_from_html(self, domain: str) -> list[str]:
        """Fetch the home page of `domain` and return its favicon links, best first.

        Any failure results in an empty list.
        """
        base_url = f"https://{domain}/"
        try:
            status_code, content = await self.downloader.download_page(
                base_url, self.max_page_bytes
            )
        except (TimeoutError, httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug(f"Failed to fetch home page of {domain}: {e}")
            return []

        if not 200 <= status_code < 300:
            logger.debug(f"Home page of {domain} returned status {status_code}")
            return []

        try:
            page = BeautifulSoup(content, PARSER)
        except Exception as e:
            logger.debug(f"Failed to parse home page of {domain}: {e}")
            return []

        return scan_links(page, base_url, FAVICON_LINK_MATCHER)

    @staticmethod
    def fallback_candidates(domain: str) -> list[str]:
        """Return the conventional favicon locations of `domain`."""
        return [f"https://{domain}{path}" for path in FALLBACK_FAVICON_PATHS]
