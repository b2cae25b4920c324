from __future__ import annotations

import pathlib
from typing import Any, Dict, Optional, Tuple

from .classifier import is_external
from .config import (
    AUTOLINK,
    FENCE,
    HTML_ANCHOR,
    HTML_ATTR,
    IAL_TARGET,
    INLINE_CODE,
    LIQUID_BLOCK,
    MD_LINK,
    NEW_TAB_TARGET,
    OPT_OUT_KEY,
    REF_DEF,
    REF_LINK,
)
from .site import site_root_url
from .utils import _norm_text, split_frontmatter, write_if_changed


def _map_outside(md: str, regex, fn):
    parts, last = [], 0
    for m in regex.finditer(md):
        pre = md[last : m.start()]
        parts.append(fn(pre))
        parts.append(md[m.start() : m.end()])
        last = m.end()
    parts.append(fn(md[last:]))
    return "".join(parts)


def map_noncode(md: str, fn):
    """Apply `fn` outside fenced blocks and Liquid highlight/raw blocks."""
    return _map_outside(md, FENCE, lambda s: _map_outside(s, LIQUID_BLOCK, fn))


def map_noncode_noninline(md: str, fn):
    def _strip_inline(s):
        spans, tokens = [], []

        def repl(m):
            token = f"\x00C{len(spans)}\x00"
            spans.append(m.group(0))
            tokens.append(token)
            return token

        t = INLINE_CODE.sub(repl, s)
        t = fn(t)
        for token, span in zip(tokens, spans):
            t = t.replace(token, span, 1)
        return t

    return map_noncode(md, _strip_inline)


def _ref_key(ref: str) -> str:
    return " ".join(ref.lower().split())


def collect_reference_urls(md: str) -> Dict[str, str]:
    """Map kramdown link ids to their URLs, ignoring definitions in code."""
    refs: Dict[str, str] = {}

    def _collect(s):
        for m in REF_DEF.finditer(s):
            refs.setdefault(_ref_key(m.group("id")), m.group("url"))
        return s

    map_noncode_noninline(md, _collect)
    return refs


def _unquote(value: Optional[str]) -> Optional[str]:
    if value and value[0] in "\"'" and value[-1] == value[0]:
        return value[1:-1]
    return value


def _anchor_attrs(attrs: str) -> Tuple[Dict[str, Any], int]:
    """
    Tokenise the inside of an `<a ...>` tag.

    Returns the first match per lowercased attribute name and the offset
    just past the last attribute, where a new one can be inserted.
    """
    found: Dict[str, Any] = {}
    last_end = 0
    for m in HTML_ATTR.finditer(attrs):
        found.setdefault(m.group("name").lower(), m)
        last_end = m.end()
    return found, last_end


def _with_target(link: str, ial: Optional[str], target_attr: str) -> str:
    if not ial:
        return f"{link}{{:{target_attr}}}"
    if IAL_TARGET.search(ial):
        return link + IAL_TARGET.sub(target_attr, ial, count=1)
    return f"{link}{ial[:-1].rstrip()} {target_attr}}}"


def mark_markdown(
    md: str,
    page_hostname: str,
    page_url: Optional[str] = None,
    normalize: bool = False,
) -> Tuple[str, int]:
    """
    Mark external links in a kramdown post body.

    Inline, reference-style and autolinks get a `{:target="_blank"}`
    attribute list, raw `<a>` tags get a target attribute. Fenced blocks,
    `{% highlight %}`/`{% raw %}` blocks and inline code are left alone.
    Indented code blocks are not recognised.
    """
    marked = 0
    target_attr = f'target="{NEW_TAB_TARGET}"'
    refs = collect_reference_urls(md)

    def _external(url):
        return is_external(url, page_hostname, page_url, normalize)

    def _md_repl(m):
        nonlocal marked
        if not _external(m.group("url")):
            return m.group(0)
        marked += 1
        return _with_target(m.group("link"), m.group("ial"), target_attr)

    def _ref_repl(m):
        nonlocal marked
        url = refs.get(_ref_key(m.group("id") or m.group("text")))
        if not _external(url):
            return m.group(0)
        marked += 1
        return _with_target(m.group("link"), m.group("ial"), target_attr)

    def _html_repl(m):
        nonlocal marked
        attrs = m.group("attrs")
        found, last_end = _anchor_attrs(attrs)
        href = found.get("href")
        if href is None or not _external(_unquote(href.group("value"))):
            return m.group(0)
        marked += 1
        target = found.get("target")
        if target is not None:
            attrs = attrs[: target.start()] + target_attr + attrs[target.end() :]
            return f"<a{attrs}>"
        # anything past the last attribute is whitespace or a self-closing "/"
        return f"<a{attrs[:last_end]} {target_attr}{attrs[last_end:]}>"

    def _md_repl_autolink(m):
        nonlocal marked
        if not _external(m.group("url")):
            return m.group(0)
        marked += 1
        return _with_target(f"<{m.group('url')}>", m.group("ial"), target_attr)

    def _mark(s):
        s = MD_LINK.sub(_md_repl, s)
        s = REF_LINK.sub(_ref_repl, s)
        s = _map_outside(s, REF_DEF, lambda t: AUTOLINK.sub(_md_repl_autolink, t))
        return HTML_ANCHOR.sub(_html_repl, s)

    return map_noncode_noninline(md, _mark), marked


def mark_post(
    path: pathlib.Path,
    settings: Dict[str, Any],
) -> Dict[str, Any]:
    # Relative hrefs in a post resolve against the site root, the place
    # Jekyll permalinks hang off.
    url = site_root_url(settings)
    text = _norm_text(path.read_text(encoding="utf-8"))
    fm, fm_raw, body = split_frontmatter(text)

    if fm is not None and fm.get(OPT_OUT_KEY) is False:
        print(f"- {path.name} opts out of new-tab links, skip")
        return {"path": path, "url": url, "marked": 0, "changed": False}

    new_body, marked = mark_markdown(
        body,
        settings["hostname"],
        url,
        settings.get("normalize_hostnames", False),
    )
    changed = False
    if marked:
        changed = write_if_changed(path, text, fm_raw + new_body)

    if changed:
        print(f"✓ marked {marked} external link(s) in {path.name}")
    else:
        print(f"= {path.name} unchanged, skip")
    return {"path": path, "url": url, "marked": marked, "changed": changed}
