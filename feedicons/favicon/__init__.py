"""Favicon resolution and caching for feed domains"""

from feedicons.favicon.cache import FaviconCache
from feedicons.favicon.fetch_guard import FaviconDownloader
from feedicons.favicon.fetcher import FaviconFetcher
from feedicons.favicon.resolver import FaviconResolver

__all__ = ["FaviconCache", "FaviconDownloader", "FaviconFetcher", "FaviconResolver"]
