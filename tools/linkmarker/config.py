#!/usr/bin/env python3
from __future__ import annotations

import pathlib
import re

# ---------- Paths

# This assumes config.py sits in tools/linkmarker/ at the repo root.
ROOT = pathlib.Path(__file__).resolve().parents[2]
SITE_CONFIG = ROOT / "_config.yml"
SITE_OUT = ROOT / "_site"
POSTS_DIR = ROOT / "_posts"

# ---------- Config

NEW_TAB_TARGET = "_blank"
SETTINGS_KEY = "external_links"
OPT_OUT_KEY = "newTabLinks"
HTML_SUFFIXES = (".html", ".htm")
MARKDOWN_SUFFIXES = (".md", ".markdown")

# Hrefs that never navigate to another host

MAILTO_HREF = re.compile(r"^mailto:", re.IGNORECASE)
JAVASCRIPT_HREF = re.compile(r"^javascript:", re.IGNORECASE)
EMPTY_HREF = re.compile(r"^$")

# Some shared regexes

MD_LINK = re.compile(
    r'(?P<link>(?<![!\\])\[(?P<text>[^\]]*)\]\((?P<url>[^)\s]+)(?:\s+"[^"]*")?\))'
    r'(?P<ial>\{:[^}\n]*\})?'
)
HTML_ANCHOR = re.compile(r'<a\b(?P<attrs>[^>]*)>', re.IGNORECASE)
HTML_ATTR = re.compile(
    r'(?P<name>[^\s"\'>/=]+)'
    r'(?:\s*=\s*(?P<value>"[^"]*"|\'[^\']*\'|[^\s"\'>]+))?'
)
IAL_TARGET = re.compile(r'(?<=[\s:])target\s*=\s*(?:"[^"]*"|\'[^\']*\'|[^\s}]+)')
REF_LINK = re.compile(
    r'(?P<link>(?<![!\\\]])\[(?P<text>[^\]]*)\]\[(?P<id>[^\]]*)\])'
    r'(?P<ial>\{:[^}\n]*\})?'
)
REF_DEF = re.compile(
    r'^ {0,3}\[(?P<id>[^\]]+)\]:[ \t]*<?(?P<url>[^\s>]+)>?', re.MULTILINE
)
AUTOLINK = re.compile(
    r'(?<![(\w])<(?P<url>https?://[^>\s]+)>(?P<ial>\{:[^}\n]*\})?',
    re.IGNORECASE,
)
LIQUID_BLOCK = re.compile(
    r"\{%-?\s*(?P<tag>highlight|raw)\b.*?%\}.*?\{%-?\s*end(?P=tag)\s*-?%\}",
    re.DOTALL,
)
FENCE = re.compile(r"(^(?:```|~~~).*?$)(.*?)(^(?:```|~~~)[ \t]*$)",
                   re.MULTILINE | re.DOTALL)
INLINE_CODE = re.compile(r'(`+)(?!`).+?(?<!`)\1(?!`)', re.DOTALL)
