# feedcrawl/sources.py
# Feed source configuration: one FeedSource per watched page, loaded from YAML.
#
# feeds.yaml:
#   feeds:
#     - name: example-news
#       url: https://example.com/news
#       feed_sel: ul.news li
#       title_sel: h2
#       description_sel: p.summary   # optional
#       url_sel: a                   # optional
#       full_compare: false          # optional
#       skip_first: true             # optional
#
# Only the presence of the mandatory keys is checked here. The base URL is
# validated lazily by the fetcher on every poll.

from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError

LOG = logging.getLogger("feedcrawl")

REQUIRED_KEYS = ("url", "feed_sel", "title_sel")


@dataclass(frozen=True)
class FeedSource:
    name: str
    url: str
    feed_sel: str
    title_sel: str
    description_sel: Optional[str] = None
    url_sel: Optional[str] = None
    full_compare: bool = False
    skip_first: bool = False

    @classmethod
    def from_options(cls, options: Dict[str, Any]) -> "FeedSource":
        missing = [k for k in REQUIRED_KEYS if not str(options.get(k) or "").strip()]
        if missing:
            raise ConfigError(f"feed {options.get('name') or options.get('url')!r}: missing {', '.join(missing)}")
        url = str(options["url"]).strip()
        return cls(
            name=str(options.get("name") or url),
            url=url,
            feed_sel=str(options["feed_sel"]),
            title_sel=str(options["title_sel"]),
            description_sel=_opt_str(options.get("description_sel")),
            url_sel=_opt_str(options.get("url_sel")),
            full_compare=_opt_bool(options.get("full_compare")),
            skip_first=_opt_bool(options.get("skip_first")),
        )


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def _opt_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def load_sources(path: str | Path) -> List[FeedSource]:
    """Read the feeds file and return its sources in file order."""
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"feeds file not found: {p}")
    try:
        with open(p, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"feeds file {p} is not valid YAML: {e}") from e

    entries = data.get("feeds") if isinstance(data, dict) else data
    if not isinstance(entries, list):
        raise ConfigError(f"feeds file {p}: expected a list under 'feeds'")

    sources: List[FeedSource] = []
    for idx, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ConfigError(f"feeds file {p}: entry {idx} is not a mapping")
        sources.append(FeedSource.from_options(entry))
    LOG.info("Loaded %d feed source(s) from %s", len(sources), p)
    return sources
