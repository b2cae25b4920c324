#!/usr/bin/env python3
"""
Build-time external link marker for the Jekyll blog.

Runs after the site is generated and does what the page-ready script used
to do in the browser: every anchor pointing to another hostname gets
target="_blank" so it opens in a new tab.

- Pages -> <site>/**/*.html, rewritten in place
- Posts -> <posts>/*.md, kramdown `{:target="_blank"}` on external links

Skipped on purpose:
- mailto:, javascript: and empty hrefs
- links to the site's own hostname, whatever the scheme or port
- fenced code blocks and inline code in posts
- posts with `newTabLinks: false` in their front matter
"""

from __future__ import annotations

import argparse
import pathlib
import sys
from typing import Any, Dict, List, Optional

from .config import (
    HTML_SUFFIXES,
    MARKDOWN_SUFFIXES,
    POSTS_DIR,
    SITE_CONFIG,
    SITE_OUT,
)
from .markdown_processing import mark_post
from .pages import mark_page
from .site import SiteConfigError, is_excluded, load_site_settings
from .utils import natural_key


def _collect(base: pathlib.Path, suffixes, exclude) -> List[pathlib.Path]:
    found = []
    for p in base.rglob("*"):
        if not p.is_file() or p.suffix.lower() not in suffixes:
            continue
        if is_excluded(p.relative_to(base).as_posix(), exclude):
            print(f"- {p.relative_to(base).as_posix()} excluded")
            continue
        found.append(p)
    found.sort(key=lambda p: natural_key(p.relative_to(base).as_posix()))
    return found


def process_site(
    site_dir: pathlib.Path, settings: Dict[str, Any]
) -> List[Dict[str, Any]]:
    if not site_dir.exists():
        print(f"- no {site_dir.name}/ at {site_dir.parent}, skip pages")
        return []
    return [
        mark_page(p, site_dir, settings)
        for p in _collect(site_dir, HTML_SUFFIXES, settings["exclude"])
    ]


def process_posts(
    posts_dir: pathlib.Path, settings: Dict[str, Any]
) -> List[Dict[str, Any]]:
    if not settings.get("markdown", True):
        return []
    if not posts_dir.exists():
        print(f"- no {posts_dir.name}/ at {posts_dir.parent}, skip posts")
        return []
    return [
        mark_post(p, settings)
        for p in _collect(posts_dir, MARKDOWN_SUFFIXES, settings["exclude"])
    ]


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Make external links in the blog open in a new tab."
    )
    parser.add_argument("--config", type=pathlib.Path, default=SITE_CONFIG)
    parser.add_argument("--site-dir", type=pathlib.Path, default=SITE_OUT)
    parser.add_argument("--posts-dir", type=pathlib.Path, default=POSTS_DIR)
    parser.add_argument(
        "--no-markdown",
        action="store_true",
        help="leave post sources alone, only mark generated pages",
    )
    args = parser.parse_args(argv)

    try:
        settings = load_site_settings(args.config)
    except SiteConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)
    if args.no_markdown:
        settings["markdown"] = False

    results = process_site(args.site_dir, settings)
    results += process_posts(args.posts_dir, settings)

    changed = sum(1 for r in results if r["changed"])
    marked = sum(r["marked"] for r in results)
    print(
        f"✓ {marked} external link(s) across {len(results)} file(s),"
        f" {changed} rewritten"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
