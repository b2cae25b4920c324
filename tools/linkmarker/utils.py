from __future__ import annotations

import pathlib
import re
from typing import Any, Dict, Optional, Tuple

import yaml


def natural_key(s: str):
    return [int(t) if t.isdigit() else t for t in re.split(r'(\d+)', s.lower())]


def read_yaml(path: pathlib.Path) -> Dict[str, Any]:
    if path.exists():
        return yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return {}


def _norm_text(s: str) -> str:
    return s.replace('\r\n', '\n').replace('\r', '\n').lstrip('\ufeff')


def split_frontmatter(
    text: str,
) -> Tuple[Optional[Dict[str, Any]], str, str]:
    """
    Split a Jekyll post into (frontmatter, raw frontmatter block, body).

    The raw block is returned verbatim (fences included) so it can be
    written back without a YAML round trip.
    """
    if not text.startswith("---\n"):
        return None, "", text

    lines = text.splitlines(keepends=True)
    for i in range(1, len(lines)):
        if lines[i].strip() == "---":
            fm_text = "".join(lines[1:i])
            raw = "".join(lines[: i + 1])
            body = "".join(lines[i + 1 :])
            fm = yaml.safe_load(fm_text) or {}
            if not isinstance(fm, dict):
                fm = {}
            return fm, raw, body
    return None, "", text


def write_if_changed(path: pathlib.Path, old: str, new: str) -> bool:
    if new == old:
        return False
    path.write_text(new, encoding="utf-8")
    return True
