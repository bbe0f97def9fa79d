from typing import Callable, List, Optional

from bs4 import BeautifulSoup

from .base import Watcher, Candidate, NewItemEvent
from ..fetchers import fetch_document, DEFAULT_TIMEOUT
from ..parsers.extract import extract
from ..sources import FeedSource
from ..utils.log import get_logger
from ..utils.state import NoveltyMemory, PollOutcome, filter_new, memory_for

logger = get_logger("page_watcher")

Fetcher = Callable[..., BeautifulSoup]


# --------------------------------------------------------------------
# Page Watcher
# --------------------------------------------------------------------
class PageWatcher(Watcher):
    """Watches one HTML page for new items.

    Owns the page's novelty memory and its one-shot skip_first flag. Both
    change only in commit(), i.e. after a fetch, extract and track all
    succeeded.
    """

    name = "page"

    def __init__(self, source: FeedSource, fetcher: Optional[Fetcher] = None, timeout=DEFAULT_TIMEOUT):
        self.source = source
        self.fetcher = fetcher or fetch_document
        self.timeout = timeout
        self.memory: NoveltyMemory = memory_for(source.full_compare)
        self.skip_first = source.skip_first

    def fetch(self) -> BeautifulSoup:
        logger.debug("Fetching %s", self.source.url)
        return self.fetcher(self.source.url, timeout=self.timeout)

    def extract(self, document) -> List[Candidate]:
        return extract(document, self.source)

    def track(self, candidates: List[Candidate]) -> PollOutcome:
        return filter_new(candidates, self.memory, skip_initial=self.skip_first)

    def commit(self, outcome: PollOutcome) -> None:
        self.memory = outcome.memory
        if outcome.skip_consumed:
            self.skip_first = False
            logger.info("%s: skip_first consumed, baseline %r", self.source.name, outcome.suppressed.title)

    def poll(self) -> PollOutcome:
        outcome = self.track(self.extract(self.fetch()))
        self.commit(outcome)
        return outcome

    def events(self, outcome: PollOutcome) -> List[NewItemEvent]:
        return [NewItemEvent.from_candidate(self.source.name, c) for c in outcome.new_items]
