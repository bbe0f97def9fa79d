# feedcrawl/parsers/extract.py
# Selector extraction engine: apply a feed's container / title / link /
# description selectors to a parsed page and build ordered Candidates.
#
# Public API:
#   extract(document, source) -> List[Candidate]
#
# All-or-nothing: the first selector that matches nothing (or matches
# something unusable) raises SelectorError and no candidates are returned.

from __future__ import annotations
import logging
from typing import List, Optional, Union
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag
from soupsieve import SelectorSyntaxError

from ..errors import SelectorError
from ..fetchers import parse_document
from ..sources import FeedSource
from ..watchers.base import Candidate

LOG = logging.getLogger("feedcrawl")

Document = Union[BeautifulSoup, Tag, str]


# ------------------------------ Query --------------------------------

def select_all(node: Tag, selector: str, stage: str) -> List[Tag]:
    """Matches of ``selector`` below ``node`` in document order."""
    try:
        return node.select(selector)
    except SelectorSyntaxError as e:
        raise SelectorError(stage, detail=f"invalid selector {selector!r} ({e})") from e


def _first(node: Tag, selector: str, stage: str) -> Tag:
    found = select_all(node, selector, stage)
    if not found:
        raise SelectorError(stage, count=0)
    return found[0]


# ------------------------------ Fields -------------------------------

def resolve_url(base_url: str, href: str) -> str:
    """Absolute links pass through untouched; relative ones resolve against base_url."""
    try:
        u = urlparse(href)
    except ValueError as e:
        raise SelectorError("url", detail=f"invalid link {href!r} ({e})") from e
    if u.scheme:
        return href
    try:
        return urljoin(base_url, href)
    except ValueError as e:
        raise SelectorError("url", detail=f"cannot resolve {href!r} against {base_url} ({e})") from e


def _title(container: Tag, source: FeedSource) -> str:
    title = _first(container, source.title_sel, "title").get_text()
    if len(title) == 0:
        raise SelectorError("title", detail="invalid, title is empty")
    return title


def _link(container: Tag, source: FeedSource) -> Optional[str]:
    if not source.url_sel:
        return None
    el = _first(container, source.url_sel, "url")
    href = el.get("href")
    if href is None:
        raise SelectorError("url", detail=f"<{el.name}> has no href")
    if isinstance(href, list):
        href = " ".join(href)
    href = href.strip()
    if not href:
        raise SelectorError("url", detail="href is empty")
    return resolve_url(source.url, href)


def _description(container: Tag, source: FeedSource) -> Optional[str]:
    if not source.description_sel:
        return None
    return _first(container, source.description_sel, "description").get_text()


# ------------------------------ Engine -------------------------------

def extract(document: Document, source: FeedSource) -> List[Candidate]:
    """Return one Candidate per container, in document order."""
    if isinstance(document, str):
        document = parse_document(document)

    containers = select_all(document, source.feed_sel, "container")
    if not containers:
        raise SelectorError("container", count=0)

    out: List[Candidate] = []
    for container in containers:
        title = _title(container, source)
        url = _link(container, source)
        description = _description(container, source)
        out.append(Candidate(title=title, description=description, url=url))

    LOG.debug("Extracted %d candidate(s) from %s", len(out), source.url)
    return out
