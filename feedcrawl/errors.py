# feedcrawl/errors.py
# Exception hierarchy for one poll cycle. Every error raised while fetching,
# extracting or tracking a feed is a CrawlError; the scheduler logs it and
# moves on to the next interval.

from __future__ import annotations
from typing import Optional


class CrawlError(Exception):
    """Base class for per-poll failures."""


class ConfigError(CrawlError):
    """Malformed feed configuration (bad base URL, bad feeds file)."""


class FetchError(CrawlError):
    """Network, timeout or HTTP status failure while fetching a page."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        self.url = url
        self.message = message
        self.status_code = status_code
        super().__init__(f"{url}: {message}")


# Selector stage -> the feed option that configures it
_OPTION_NAMES = {
    "container": "feed_sel",
    "title": "title_sel",
    "url": "url_sel",
    "description": "description_sel",
}


class SelectorError(CrawlError):
    """A selector matched nothing, matched something unusable, or failed to parse.

    ``stage`` is one of ``container``, ``title``, ``url`` or ``description``.
    """

    def __init__(self, stage: str, count: Optional[int] = None, detail: str = ""):
        self.stage = stage
        self.count = count
        self.detail = detail
        parts = [_OPTION_NAMES.get(stage, stage)]
        if count is not None:
            parts.append(f"length {count}")
        if detail:
            parts.append(detail)
        super().__init__(": ".join(parts))
