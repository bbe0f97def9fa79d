#!/usr/bin/env python3
# Smoke test: fetch each configured feed once and print what the selectors
# extract. Nothing is emitted and no novelty memory is kept.

from __future__ import annotations
import os
import sys
import textwrap
from typing import List, Optional

from .config import FEEDS_FILE
from .errors import CrawlError
from .sources import FeedSource, load_sources
from .utils.log import get_logger
from .utils.text import shorten
from .watchers.page_watcher import PageWatcher

log = get_logger("smoke")

MAX_PREVIEW = int(os.getenv("SMOKE_MAX_PREVIEW", "10"))


def preview(source: FeedSource, watcher: Optional[PageWatcher] = None) -> List[str]:
    """Return printable lines for one feed's current candidates."""
    w = watcher or PageWatcher(source)
    candidates = w.extract(w.fetch())
    lines = [f"{source.name}: {len(candidates)} item(s) at {source.url}"]
    for c in candidates[:MAX_PREVIEW]:
        lines.append(f"- {shorten(c.title)} -> {c.url or '(no url)'}")
        if c.description:
            lines.append(textwrap.indent(shorten(c.description, 160), prefix="    "))
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    feeds_file = args[0] if args else FEEDS_FILE
    log.info("Starting smoke test (no events will be emitted)")

    failed = 0
    for source in load_sources(feeds_file):
        try:
            lines = preview(source)
        except CrawlError as e:
            log.error("%s: %s", source.url, e)
            failed += 1
            continue
        print("\n".join(lines))
        print("-" * 72)

    print("Done. If this looks good, run `feedcrawl` to start polling.")
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
