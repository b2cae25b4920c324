"""
External link classification.

A link is external when it navigates to a hostname other than the one the
page is served from. `mailto:`, `javascript:` and empty hrefs never count,
and neither does anything that does not resolve to a hostname at all.
Scheme and port are ignored: `http://example.com:8080/` is internal to a
page on `https://example.com/`.

External anchors get `target="_blank"` so that they open in a new tab.
Nothing else on the anchor is touched, and nothing at all on internal
anchors, so running the pass twice leaves the page as it was after once.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional
from urllib.parse import urljoin, urlsplit

from .config import EMPTY_HREF, JAVASCRIPT_HREF, MAILTO_HREF, NEW_TAB_TARGET


def _host_from_netloc(netloc: str) -> str:
    host = netloc.rpartition("@")[2]
    if host.startswith("["):
        end = host.find("]")
        return host[1:end] if end != -1 else ""
    return host.partition(":")[0]


def normalize_hostname(hostname: str) -> str:
    return hostname.lower().rstrip(".")


def resolve_hostname(href: str, page_url: str) -> str:
    """
    Resolve `href` against `page_url` and return the hostname as written.

    Unlike `urlsplit().hostname` the case is kept, so the comparison in
    `is_external` stays exact unless normalisation is asked for.
    Returns "" when the URL cannot be parsed or carries no host.
    """
    try:
        resolved = urljoin(page_url, href)
        netloc = urlsplit(resolved).netloc
    except ValueError:
        return ""
    return _host_from_netloc(netloc)


def is_external(
    href: Optional[str],
    page_hostname: str,
    page_url: Optional[str] = None,
    normalize: bool = False,
) -> bool:
    if href is None:
        return False
    href = href.strip()
    if MAILTO_HREF.match(href):
        return False
    if JAVASCRIPT_HREF.match(href):
        return False
    if EMPTY_HREF.match(href):
        return False

    base = page_url or f"https://{page_hostname}/"
    hostname = resolve_hostname(href, base)
    if not hostname:
        return False

    if normalize:
        return normalize_hostname(hostname) != normalize_hostname(page_hostname)
    return hostname != page_hostname


def external_anchors(
    anchors: Iterable,
    page_hostname: str,
    page_url: Optional[str] = None,
    normalize: bool = False,
) -> Iterator:
    """Yield the anchors (bs4 tags or dicts) that point off-site."""
    for anchor in anchors:
        href = anchor.get("href")
        if isinstance(href, list):
            href = " ".join(href)
        if is_external(href, page_hostname, page_url, normalize):
            yield anchor


def mark_external_links(
    anchors: Iterable,
    page_hostname: str,
    page_url: Optional[str] = None,
    normalize: bool = False,
) -> int:
    marked = 0
    for anchor in external_anchors(anchors, page_hostname, page_url, normalize):
        anchor["target"] = NEW_TAB_TARGET
        marked += 1
    return marked
