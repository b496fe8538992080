"""Constants for favicon and feed link discovery"""

# `rel` values (lower-cased, tokens joined by a single space) that mark a favicon link.
FAVICON_RELS: frozenset[str] = frozenset(
    {
        "icon",
        "shortcut icon",
        "apple-touch-icon",
        "apple-touch-icon-precomposed",
        "mask-icon",
    }
)

# A favicon link declaring any of these sizes jumps to the front of the candidate list.
PRIORITY_ICON_SIZES: tuple[str, ...] = ("32x32", "64x64", "128x128", "192x192")

# Conventional icon locations tried after the hints found in the home page, in this order.
FALLBACK_FAVICON_PATHS: tuple[str, ...] = (
    "/favicon.ico",
    "/favicon.png",
    "/apple-touch-icon.png",
    "/apple-touch-icon-precomposed.png",
)

FEED_LINK_REL: str = "alternate"

FEED_LINK_TYPES: frozenset[str] = frozenset({"application/rss+xml", "application/atom+xml"})

ALLOWED_PAGE_SCHEMES: frozenset[str] = frozenset({"http", "https"})

ALLOW_REDIRECTS: bool = True

PARSER: str = "html.parser"

# Pages are read in chunks this size so the download deadline is checked regularly.
PAGE_CHUNK_BYTES: int = 1024

# Substrings of a Content-Type header that are accepted for an icon besides `image/*`.
ICON_CONTENT_TYPE_MARKERS: tuple[str, ...] = ("icon", "octet-stream")

# Used when an icon response doesn't declare a Content-Type.
EXTENSION_CONTENT_TYPES: dict[str, str] = {
    ".png": "image/png",
    ".ico": "image/x-icon",
}
DEFAULT_ICON_CONTENT_TYPE: str = "image/x-icon"
