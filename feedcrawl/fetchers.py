# feedcrawl/fetchers.py
# Document fetcher: GET a feed page and hand back a parsed, query-able DOM.
# Owns all HTTP specifics (headers, redirects, TLS, timeouts). No retries:
# a failed fetch waits for the next poll.

from __future__ import annotations
from typing import Optional, Tuple
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup

from .config import BROWSER_UA, CONNECT_TIMEOUT, READ_TIMEOUT
from .errors import ConfigError, FetchError

DEFAULT_TIMEOUT = (CONNECT_TIMEOUT, READ_TIMEOUT)  # (connect, read) seconds

HEADERS = {
    "User-Agent": BROWSER_UA,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


# -------------------------------
# Session Factory
# -------------------------------
def make_session() -> requests.Session:
    """Create a requests session with browser-like default headers."""
    s = requests.Session()
    s.headers.update(HEADERS)
    return s


# -------------------------------
# Helpers
# -------------------------------
def validate_base_url(url: str) -> str:
    """Return ``url`` if it is an absolute http(s) URL, else raise ConfigError."""
    try:
        parsed = urlparse(url or "")
    except ValueError as e:
        raise ConfigError(f'url: "{url}" invalid ({e})') from e
    if not parsed.scheme or not parsed.netloc:
        raise ConfigError(f'url: "{url}" invalid, not absolute')
    if parsed.scheme.lower() not in ("http", "https"):
        raise ConfigError(f'url: "{url}" invalid, unsupported scheme {parsed.scheme!r}')
    return url


def parse_document(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


# -------------------------------
# Fetchers
# -------------------------------
def http_get(url: str, timeout: Tuple[float, float] = DEFAULT_TIMEOUT,
             session: Optional[requests.Session] = None) -> requests.Response:
    """GET ``url`` and return the response, raising FetchError on any failure.

    A session created here is closed before returning.
    """
    if session is None:
        with make_session() as s:
            return _get(s, url, timeout)
    return _get(session, url, timeout)


def _get(s: requests.Session, url: str, timeout: Tuple[float, float]) -> requests.Response:
    try:
        r = s.get(url, timeout=timeout, allow_redirects=True)
    except requests.RequestException as e:
        raise FetchError(url, str(e) or e.__class__.__name__) from e
    try:
        r.raise_for_status()
    except requests.HTTPError as e:
        raise FetchError(url, f"HTTP {r.status_code}", status_code=r.status_code) from e
    return r


def fetch_document(url: str, timeout: Tuple[float, float] = DEFAULT_TIMEOUT,
                   session: Optional[requests.Session] = None) -> BeautifulSoup:
    """Validate ``url``, fetch it and return the lxml-parsed document."""
    validate_base_url(url)
    r = http_get(url, timeout=timeout, session=session)
    return parse_document(r.text)
