# feedcrawl/scheduler.py
# Poll loop: one worker thread per feed source, one fetch -> extract ->
# track -> emit cycle per interval.
#
# - Per-poll failures are logged with the source URL and the cycle is dropped;
#   the watcher's memory is left at the last good poll.
# - The stop event interrupts the waits between cycles only; a fetch that is
#   already in flight runs to completion (bounded by its timeout).
# - sink.put() may block indefinitely when the consumer stalls. That is the
#   only backpressure in the system and no timeout is applied to it.

from __future__ import annotations
import enum
import queue
import threading
from typing import Iterable, List, Optional

from .config import INITIAL_DELAY_SECONDS, POLL_SECONDS
from .errors import CrawlError
from .utils.log import get_logger
from .utils.state import PollOutcome
from .watchers.page_watcher import PageWatcher

logger = get_logger("scheduler")


class PollState(enum.Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    EXTRACTING = "extracting"
    TRACKING = "tracking"
    EMITTING = "emitting"
    CANCELLED = "cancelled"


class Poller:
    def __init__(
        self,
        watcher: PageWatcher,
        sink: "queue.Queue",
        interval: float = POLL_SECONDS,
        initial_delay: float = INITIAL_DELAY_SECONDS,
        stop_event: Optional[threading.Event] = None,
    ):
        self.watcher = watcher
        self.sink = sink
        self.interval = interval
        self.initial_delay = initial_delay
        self.stop_event = stop_event or threading.Event()
        self.state = PollState.IDLE
        self.polls = 0
        self.failures = 0

    @property
    def url(self) -> str:
        return self.watcher.source.url

    def _set_state(self, state: PollState) -> None:
        logger.debug("%s: %s -> %s", self.url, self.state.value, state.value)
        self.state = state

    def run_once(self) -> Optional[PollOutcome]:
        """One full cycle. Returns the outcome, or None if the poll failed."""
        self.polls += 1
        try:
            self._set_state(PollState.FETCHING)
            document = self.watcher.fetch()
            self._set_state(PollState.EXTRACTING)
            candidates = self.watcher.extract(document)
            self._set_state(PollState.TRACKING)
            outcome = self.watcher.track(candidates)
        except CrawlError as e:
            self.failures += 1
            logger.error("%s: %s", self.url, e)
            self._set_state(PollState.IDLE)
            return None
        except Exception:
            self.failures += 1
            logger.exception("%s: poll raised", self.url)
            self._set_state(PollState.IDLE)
            return None

        self.watcher.commit(outcome)

        self._set_state(PollState.EMITTING)
        for event in self.watcher.events(outcome):
            self.sink.put(event)

        if outcome.count:
            logger.info("%d new item(s) in %s, %s", outcome.count, self.url, outcome.memory.describe())
        else:
            logger.debug("No new items in %s", self.url)
        self._set_state(PollState.IDLE)
        return outcome

    def run(self) -> None:
        """Poll until the stop event is set."""
        wait = self.initial_delay
        while not self.stop_event.wait(wait):
            self.run_once()
            wait = self.interval
        self._set_state(PollState.CANCELLED)
        logger.info("Stopped polling %s after %d poll(s)", self.url, self.polls)

    def stop(self) -> None:
        self.stop_event.set()


def run_pollers(
    watchers: Iterable[PageWatcher],
    sink: "queue.Queue",
    stop_event: threading.Event,
    interval: float = POLL_SECONDS,
    initial_delay: float = INITIAL_DELAY_SECONDS,
) -> List[threading.Thread]:
    """Start one independent poller thread per watcher and return the threads."""
    threads: List[threading.Thread] = []
    for w in watchers:
        p = Poller(w, sink, interval=interval, initial_delay=initial_delay, stop_event=stop_event)
        t = threading.Thread(target=p.run, name=f"poll-{w.source.name}", daemon=True)
        t.start()
        threads.append(t)
    logger.info("Started %d poller(s)", len(threads))
    return threads
