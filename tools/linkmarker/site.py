from __future__ import annotations

import fnmatch
import pathlib
from typing import Any, Dict, Iterable
from urllib.parse import urlsplit

from .classifier import _host_from_netloc
from .config import SETTINGS_KEY
from .utils import read_yaml


class SiteConfigError(ValueError):
    pass


def load_site_settings(path: pathlib.Path) -> Dict[str, Any]:
    """
    Read the site hostname and tool options from a Jekyll `_config.yml`.

        url: https://example.com
        baseurl: /blog
        external_links:
          normalize_hostnames: false
          markdown: true
          exclude:
            - "drafts/**"
    """
    if not path.exists():
        raise SiteConfigError(f"{path.name} missing at {path.parent}")

    cfg = read_yaml(path)
    if not isinstance(cfg, dict):
        raise SiteConfigError(f"{path.name} is not a mapping")

    url = str(cfg.get("url") or "").strip()
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise SiteConfigError(f"bad url in {path.name}: {url!r}") from e
    hostname = _host_from_netloc(parts.netloc)
    if not hostname:
        raise SiteConfigError(
            f"url in {path.name} must carry a hostname, got {url!r}"
        )

    baseurl = str(cfg.get("baseurl") or "").strip().strip("/")
    opts = cfg.get(SETTINGS_KEY) or {}
    if not isinstance(opts, dict):
        raise SiteConfigError(f"{SETTINGS_KEY} in {path.name} is not a mapping")

    exclude = opts.get("exclude") or []
    if isinstance(exclude, str):
        exclude = [exclude]

    return {
        "hostname": hostname,
        "base_url": f"{parts.scheme or 'https'}://{parts.netloc}",
        "baseurl": baseurl,
        "normalize_hostnames": bool(opts.get("normalize_hostnames", False)),
        "markdown": bool(opts.get("markdown", True)),
        "exclude": [str(p) for p in exclude],
    }


def is_excluded(rel_path: str, patterns: Iterable[str]) -> bool:
    return any(fnmatch.fnmatch(rel_path, pat) for pat in patterns)


def site_root_url(settings: Dict[str, Any]) -> str:
    prefix = f"{settings['base_url'].rstrip('/')}/"
    if settings.get("baseurl"):
        prefix += f"{settings['baseurl'].strip('/')}/"
    return prefix
