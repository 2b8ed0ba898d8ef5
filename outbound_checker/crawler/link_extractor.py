"""
Link extraction, URL normalization and internal/external classification.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import List, Optional
from urllib.parse import urldefrag, urljoin, urlsplit, urlunsplit

from bs4 import BeautifulSoup, SoupStrainer

from outbound_checker.crawler.models import PageData
from outbound_checker.logger import logger

__all__ = ("LinkKind", "extract_links", "normalize_url", "classify_url", "is_internal")

# Raw-text anchor match; deliberately not a full HTML parser.
_ANCHOR_HREF_RE = re.compile(r"<a.*?href=(.*?)[\s>]", re.IGNORECASE)
_ANCHOR_STRAINER = SoupStrainer("a", href=True)
_CRAWLABLE_SCHEMES = ("http", "https")
BOOKMARK_PREFIX = "#"


class LinkKind(str, Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"


def _clean_href(value: str) -> str:
    return value.strip().strip('"').strip("'").strip()


def extract_links(page: PageData, mode: str = "regex") -> List[str]:
    """
    Extract raw href values from anchor tags of *page*.

    ``regex`` mode pattern-matches the raw body, ``html`` mode walks anchors
    with BeautifulSoup. In-page bookmarks (``#...``) and empty values are dropped.
    Values are returned unresolved and in document order, duplicates included.
    """
    if mode == "html":
        soup = BeautifulSoup(page.text, "html.parser", parse_only=_ANCHOR_STRAINER)
        raw = [tag.get("href") for tag in soup.find_all("a", href=True)]
        candidates = [v for v in raw if isinstance(v, str)]
    elif mode == "regex":
        candidates = _ANCHOR_HREF_RE.findall(page.text)
    else:
        raise ValueError(f"unknown extractor mode: {mode!r}")

    links: List[str] = []
    for value in candidates:
        href = _clean_href(value)
        if not href or href.startswith(BOOKMARK_PREFIX):
            continue
        links.append(href)
    return links


def normalize_url(raw: str, base: str) -> Optional[str]:
    """
    Resolve *raw* against the referring page *base* and strip the fragment.

    Returns ``None`` for links that must be dropped: unparsable values,
    bookmarks and self-references (no host and no path, e.g. ``?page=2``), and non-HTTP
    schemes such as ``mailto:`` or ``javascript:``.
    Normalizing an already normalized URL returns it unchanged.
    """
    raw = raw.strip()
    if not raw or raw.startswith(BOOKMARK_PREFIX):
        return None
    try:
        parts = urlsplit(raw)
        if not parts.netloc and not parts.path:
            return None
        if parts.scheme and parts.scheme not in _CRAWLABLE_SCHEMES:
            logger.debug("Skipping non-http link %s", raw)
            return None
        absolute, _fragment = urldefrag(urljoin(base, raw))
        resolved = urlsplit(absolute)
        _ = resolved.port  # raises ValueError on a malformed port
    except ValueError as exc:
        logger.warning("Dropping unparsable link %r found on %s: %s", raw, base, exc)
        return None

    if resolved.netloc and not resolved.path:
        resolved = resolved._replace(path="/")
    return urlunsplit(resolved)


def classify_url(url: str, domain: str) -> LinkKind:
    """
    Internal iff the host equals *domain* or ``www.`` + *domain*, or is empty.

    Comparison is plain case-sensitive string equality: any other subdomain is external.
    """
    host = urlsplit(url).netloc
    if host in ("", domain, f"www.{domain}"):
        return LinkKind.INTERNAL
    return LinkKind.EXTERNAL


def is_internal(url: str, domain: str) -> bool:
    return classify_url(url, domain) is LinkKind.INTERNAL
