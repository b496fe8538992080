"""URL manipulation utilities for favicon and feed discovery"""

from typing import Iterable, Optional
from urllib.parse import urljoin, urlparse

from feedicons.constants import ALLOWED_PAGE_SCHEMES


def extract_unique_domains(urls: Iterable[str]) -> list[str]:
    """Return the unique hostnames of `urls`, skipping entries that don't parse.

    URLs come from upstream feed subscriptions and are expected to be imperfect, so
    malformed entries and entries without a host are dropped silently.
    """
    domains: dict[str, None] = {}
    for raw_url in urls:
        try:
            hostname = urlparse(raw_url).hostname
        except ValueError:
            continue
        if hostname:
            domains.setdefault(hostname, None)
    return list(domains)


def resolve_url(href: str, base_url: str) -> Optional[str]:
    """Resolve `href` against `base_url`, returning None if it can't be resolved."""
    try:
        resolved = urljoin(base_url, href.strip())
        # urljoin is lazy about validation, parsing again surfaces bad netlocs.
        urlparse(resolved).port
    except ValueError:
        return None
    return resolved or None


def is_http_url(url: str) -> bool:
    """Check that `url` is absolute and uses the http or https scheme."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme.lower() in ALLOWED_PAGE_SCHEMES and bool(parsed.netloc)


def url_path_suffix(url: str) -> str:
    """Return the lower-cased extension of the path of `url` (e.g. ".png"), or ""."""
    try:
        path = urlparse(url).path
    except ValueError:
        return ""
    last_segment = path.rsplit("/", 1)[-1]
    if "." not in last_segment:
        return ""
    return "." + last_segment.rsplit(".", 1)[-1].lower()
