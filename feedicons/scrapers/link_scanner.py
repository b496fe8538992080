"""Scanner for extracting `<link>` targets from a parsed HTML document.

The same traversal serves both favicon hints and syndication feed links; what counts as a
match, and whether a match jumps the queue, is decided by a pluggable `LinkMatcher`.
"""

from typing import Iterator, Mapping, Protocol

from bs4 import BeautifulSoup, Tag

from feedicons.constants import (
    FAVICON_RELS,
    FEED_LINK_REL,
    FEED_LINK_TYPES,
    PRIORITY_ICON_SIZES,
)
from feedicons.utils.urls import resolve_url


def _attr(attrs: Mapping[str, str | list[str]], name: str) -> str:
    """Return an attribute as a plain string. BeautifulSoup splits `rel` into tokens."""
    value = attrs.get(name, "")
    if isinstance(value, list):
        return " ".join(value)
    return value


class LinkMatcher(Protocol):
    """Decides which `<link>` elements are collected and which are prioritized."""

    def matches(self, attrs: Mapping[str, str | list[str]]) -> bool:  # pragma: no cover
        """Return True if the link should be collected."""
        ...

    def is_priority(self, attrs: Mapping[str, str | list[str]]) -> bool:  # pragma: no cover
        """Return True if the link should be put in front of the ones found so far."""
        ...


class FaviconLinkMatcher:
    """Match favicon links and prioritize the ones declaring a larger size."""

    def matches(self, attrs: Mapping[str, str | list[str]]) -> bool:
        """Match on a known favicon `rel`, case-insensitively."""
        return _attr(attrs, "rel").lower() in FAVICON_RELS

    def is_priority(self, attrs: Mapping[str, str | list[str]]) -> bool:
        """Prioritize links whose `sizes` mentions one of the larger icon sizes."""
        sizes = _attr(attrs, "sizes")
        return any(size in sizes for size in PRIORITY_ICON_SIZES)


class FeedLinkMatcher:
    """Match `<link rel="alternate">` elements that point at an RSS or Atom feed."""

    def matches(self, attrs: Mapping[str, str | list[str]]) -> bool:
        """Match on the exact `rel` and `type` values."""
        return _attr(attrs, "rel") == FEED_LINK_REL and _attr(attrs, "type") in FEED_LINK_TYPES

    def is_priority(self, attrs: Mapping[str, str | list[str]]) -> bool:
        """Feeds are reported in document order."""
        return False


FAVICON_LINK_MATCHER = FaviconLinkMatcher()
FEED_LINK_MATCHER = FeedLinkMatcher()


def iter_elements(page: BeautifulSoup | Tag) -> Iterator[Tag]:
    """Yield every element below `page` depth-first, in document order.

    Uses an explicit stack so deeply nested documents can't exhaust the interpreter stack.
    """
    stack: list[Tag] = [child for child in reversed(page.contents) if isinstance(child, Tag)]
    while stack:
        element = stack.pop()
        yield element
        stack.extend(child for child in reversed(element.contents) if isinstance(child, Tag))


def scan_links(page: BeautifulSoup | Tag, base_url: str, matcher: LinkMatcher) -> list[str]:
    """Collect the absolute `href` of every `<link>` element accepted by `matcher`.

    Prioritized links are inserted at the front of the result as they are found, so a
    later prioritized link ends up ahead of an earlier one.
    """
    urls: list[str] = []
    for element in iter_elements(page):
        if element.name != "link" or not matcher.matches(element.attrs):
            continue

        href = _attr(element.attrs, "href")
        if not href:
            continue

        url = resolve_url(href, base_url)
        if url is None:
            continue

        if matcher.is_priority(element.attrs):
            urls.insert(0, url)
        else:
            urls.append(url)
    return urls
