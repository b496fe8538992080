"""Batch favicon fetching for the domains of a set of feeds"""

import asyncio
import logging
from typing import Iterable, Optional

import httpx

from feedicons.configs import settings
from feedicons.favicon.cache import FaviconCache
from feedicons.favicon.fetch_guard import FaviconDownloader
from feedicons.favicon.resolver import FaviconResolver
from feedicons.models import DomainResolution
from feedicons.utils.http_client import create_http_client
from feedicons.utils.urls import extract_unique_domains

logger = logging.getLogger(__name__)

job_settings = settings.favicons


class FaviconFetcher:
    """Resolve favicons for many domains with a fixed pool of workers.

    The fetcher owns the cache its workers write to; renders read it through
    `get_favicon_data_url`, which never touches the network. A batch blocks its caller
    until every domain has been processed.
    """

    def __init__(
        self,
        cache: Optional[FaviconCache] = None,
        max_workers: Optional[int] = None,
        request_timeout: Optional[float] = None,
        max_icon_bytes: Optional[int] = None,
        max_page_bytes: Optional[int] = None,
        user_agent: Optional[str] = None,
        retry_failed_domains: Optional[bool] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.cache = cache if cache is not None else FaviconCache()
        self.max_workers = max_workers if max_workers is not None else job_settings.max_workers
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")
        self.request_timeout = request_timeout or job_settings.request_timeout_sec
        self.max_icon_bytes = max_icon_bytes or job_settings.max_icon_bytes
        self.max_page_bytes = max_page_bytes or job_settings.max_page_bytes
        self.user_agent = user_agent or job_settings.user_agent
        self.retry_failed_domains = (
            retry_failed_domains
            if retry_failed_domains is not None
            else job_settings.get("retry_failed_domains", False)
        )
        self.transport = transport
        self.failed_domains: set[str] = set()

    def get_favicon_data_url(self, domain: str) -> str:
        """Return the cached favicon `data:` URL of `domain`, or "" if there is none.

        Hostnames are cached lower-cased, so the lookup is case-insensitive.
        """
        return self.cache.get(domain.lower()) or ""

    def fetch_favicons_for_domains(self, urls: Iterable[str]) -> None:
        """Resolve and cache favicons for the domains of `urls`. Blocks until done."""
        asyncio.run(self.afetch_favicons_for_domains(urls))

    async def afetch_favicons_for_domains(self, urls: Iterable[str]) -> None:
        """Resolve and cache favicons for the domains of `urls` on the running loop."""
        domains = self.pending_domains(extract_unique_domains(urls))
        logger.info(f"Starting to fetch favicons for {len(domains)} unique domains")
        if not domains:
            return

        queue: asyncio.Queue[str] = asyncio.Queue(maxsize=len(domains))
        for domain in domains:
            queue.put_nowait(domain)

        async with create_http_client(
            connect_timeout=self.request_timeout,
            request_timeout=self.request_timeout,
            pool_timeout=self.request_timeout,
            headers={"User-Agent": self.user_agent},
            transport=self.transport,
        ) as client:
            resolver = FaviconResolver(
                FaviconDownloader(client, self.request_timeout, self.max_icon_bytes),
                self.cache,
                self.max_page_bytes,
            )
            workers = [
                asyncio.create_task(self._worker(queue, resolver)) for _ in range(self.max_workers)
            ]
            results = await asyncio.gather(*workers)

        resolutions = [resolution for worker_results in results for resolution in worker_results]
        for resolution in resolutions:
            if resolution.resolved:
                self.failed_domains.discard(resolution.domain)
            else:
                self.failed_domains.add(resolution.domain)

        resolved = sum(1 for resolution in resolutions if resolution.resolved)
        logger.info(
            f"Finished fetching favicons: {resolved} of {len(domains)} domains resolved, "
            f"{len(self.cache)} cached in total"
        )

    def pending_domains(self, domains: list[str]) -> list[str]:
        """Drop domains that are cached, or that failed before unless retries are enabled."""
        return [
            domain
            for domain in domains
            if domain not in self.cache
            and (self.retry_failed_domains or domain not in self.failed_domains)
        ]

    async def _worker(
        self, queue: asyncio.Queue[str], resolver: FaviconResolver
    ) -> list[DomainResolution]:
        """Resolve domains from the queue until it is drained."""
        resolutions: list[DomainResolution] = []
        while True:
            try:
                domain = queue.get_nowait()
            except asyncio.QueueEmpty:
                return resolutions

            try:
                resolutions.append(await resolver.resolve(domain))
            except Exception as e:
                logger.error(f"Error resolving favicon for {domain}: {e}")
                resolutions.append(DomainResolution(domain=domain))
            finally:
                queue.task_done()
