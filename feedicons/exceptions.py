"""feedicons specific exceptions."""


class FeedDiscoveryError(Exception):
    """Base class for failures while discovering the feeds advertised by a page.

    The message of every subclass names the stage that failed so it can be shown to the
    user as is.
    """


class InvalidPageURLError(FeedDiscoveryError):
    """Raised when the page URL is empty, malformed, or uses a scheme other than http(s)."""


class PageFetchError(FeedDiscoveryError):
    """Raised when the page could not be fetched at all (DNS, connect, TLS, timeout)."""


class PageStatusError(FeedDiscoveryError):
    """Raised when the page responded with a non-2xx status."""

    def __init__(self, status_code: int, reason: str = "") -> None:
        self.status_code = status_code
        status = f"{status_code} {reason}".strip()
        super().__init__(f"non-2xx status from site: {status}")


class PageParseError(FeedDiscoveryError):
    """Raised when the response can't be parsed as an HTML document."""
