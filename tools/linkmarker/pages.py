from __future__ import annotations

import pathlib
from typing import Any, Dict, Optional, Tuple

from bs4 import BeautifulSoup

from .classifier import mark_external_links
from .site import site_root_url
from .utils import write_if_changed


def page_url_for(
    path: pathlib.Path,
    site_dir: pathlib.Path,
    settings: Dict[str, Any],
) -> str:
    rel = path.relative_to(site_dir).as_posix()
    if rel == "index.html":
        rel = ""
    elif rel.endswith("/index.html"):
        rel = rel[: -len("index.html")]
    return site_root_url(settings) + rel


def mark_html(
    html: str,
    page_hostname: str,
    page_url: Optional[str] = None,
    normalize: bool = False,
) -> Tuple[str, int]:
    """
    Set target="_blank" on every external anchor of a rendered page.

    Returns the page and the number of external anchors. A page without
    external anchors comes back as the very same string, so re-serialising
    through BeautifulSoup never reformats pages that need no change.
    """
    soup = BeautifulSoup(html, "html.parser")
    marked = mark_external_links(
        soup.find_all("a"), page_hostname, page_url, normalize
    )
    if not marked:
        return html, 0
    return str(soup), marked


def mark_page(
    path: pathlib.Path,
    site_dir: pathlib.Path,
    settings: Dict[str, Any],
) -> Dict[str, Any]:
    url = page_url_for(path, site_dir, settings)
    html = path.read_text(encoding="utf-8")
    new_html, marked = mark_html(
        html,
        settings["hostname"],
        url,
        settings.get("normalize_hostnames", False),
    )
    changed = write_if_changed(path, html, new_html)

    rel = path.relative_to(site_dir).as_posix()
    if changed:
        print(f"✓ marked {marked} external link(s) in {rel}")
    else:
        print(f"= {rel} unchanged, skip")
    return {"path": path, "url": url, "marked": marked, "changed": changed}
