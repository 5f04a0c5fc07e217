"""URL normalisation and internal-link resolution.

Crawlers record some links as absolute and some as page-relative, and the
same page may be referenced with or without a trailing slash.  Every graph
lookup goes through :func:`normalize_url` so those variants compare equal.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional
from urllib.parse import urljoin, urlsplit

from sitegraph.graph.models import CrawledPage

logger = logging.getLogger(__name__)

_DEFAULT_PORTS = {"http": 80, "https": 443}


def _origin(url: str) -> Optional[str]:
    """Return ``scheme://host[:port]`` for an absolute URL, else ``None``."""
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError:
        return None
    if not parts.scheme or not parts.hostname:
        return None
    scheme = parts.scheme.lower()
    host = parts.hostname
    if ":" in host:
        host = f"[{host}]"
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        host = f"{host}:{port}"
    return f"{scheme}://{host}"


def normalize_url(url: str) -> str:
    """Canonicalise *url* for equality comparison.

    Absolute URLs reduce to origin + path (query, fragment and credentials
    dropped).  Anything that does not parse as absolute is kept verbatim.
    Trailing slashes are stripped in both cases.  Never raises.
    """
    origin = _origin(url)
    if origin is None:
        return url.rstrip("/")
    return (origin + urlsplit(url).path).rstrip("/")


def build_url_index(pages: Iterable[CrawledPage]) -> dict[str, str]:
    """Map each page's normalised URL to its canonical (as-crawled) URL.

    When two crawled URLs normalise to the same key the first one wins.
    """
    index: dict[str, str] = {}
    for page in pages:
        key = normalize_url(page.url)
        if key in index:
            logger.debug("Duplicate page %r normalises onto %r", page.url, index[key])
            continue
        index[key] = page.url
    return index


def resolve_internal_url(
    href: str, origin_page: str, index: dict[str, str]
) -> Optional[str]:
    """Return the canonical URL of the crawled page *href* points at.

    Tries a direct lookup first.  If that misses and *href* carries no
    scheme, it is joined against the origin of *origin_page* and looked up
    again.  External links and links to pages that were never fetched both
    resolve to ``None``.
    """
    target = index.get(normalize_url(href))
    if target is not None:
        return target

    base = _origin(origin_page)
    if base is None:
        return None
    try:
        if urlsplit(href).scheme:
            return None
        joined = urljoin(base + "/", href)
    except ValueError:
        logger.debug("Dropping unparseable link %r on %r", href, origin_page)
        return None
    return index.get(normalize_url(joined))
