# feedcrawl/main.py
# Entrypoint: load feeds -> start one poller per feed -> forward new_item
# events downstream until SIGINT/SIGTERM.

from __future__ import annotations
import json
import queue
import signal
import sys
import threading
import time
from typing import List, Optional

from dotenv import load_dotenv, find_dotenv

# Load .env before anything reads settings from the environment
dotenv_path = find_dotenv(usecwd=True)
if dotenv_path:
    load_dotenv(dotenv_path, override=False)

from . import config  # noqa: E402
from .errors import ConfigError  # noqa: E402
from .scheduler import run_pollers  # noqa: E402
from .sources import load_sources  # noqa: E402
from .utils.log import get_logger  # noqa: E402
from .watchers.base import NewItemEvent  # noqa: E402
from .watchers.page_watcher import PageWatcher  # noqa: E402

logger = get_logger("feedcrawl")
DIV = "-" * 72


def _deliver(event: NewItemEvent, to_stdout: bool) -> None:
    logger.info("new_item [%s] %s %s", event.source, event.title, event.url)
    if to_stdout:
        sys.stdout.write(json.dumps(event.to_dict(), ensure_ascii=False) + "\n")
        sys.stdout.flush()


def consume(sink: "queue.Queue", stop_event: threading.Event, to_stdout: bool = True) -> int:
    """Drain events until stopped and the queue is empty; returns how many were delivered."""
    delivered = 0
    while not stop_event.is_set() or not sink.empty():
        try:
            event = sink.get(timeout=0.5)
        except queue.Empty:
            continue
        try:
            _deliver(event, to_stdout)
            delivered += 1
        except Exception:
            logger.exception("Delivery failed for %r", event)
        finally:
            sink.task_done()
    return delivered


def drain_and_join(sink: "queue.Queue", threads: List[threading.Thread], stop_event: threading.Event,
                   to_stdout: bool = True, timeout: float = 60.0) -> int:
    """After stop: keep delivering while pollers finish their last cycle, then drain once more."""
    deadline = time.monotonic() + timeout
    delivered = 0
    for t in threads:
        while t.is_alive() and time.monotonic() < deadline:
            t.join(timeout=0.5)
            delivered += consume(sink, stop_event, to_stdout)
        if t.is_alive():
            logger.warning("Poller %s still running at shutdown", t.name)
    delivered += consume(sink, stop_event, to_stdout)
    return delivered


def _install_signal_handlers(stop_event: threading.Event) -> None:
    def handler(signum, frame):
        logger.info("Received signal %s, stopping pollers...", signum)
        stop_event.set()

    signal.signal(signal.SIGINT, handler)
    signal.signal(signal.SIGTERM, handler)


def main(argv: Optional[List[str]] = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    feeds_file = args[0] if args else config.FEEDS_FILE

    try:
        sources = load_sources(feeds_file)
    except ConfigError as e:
        logger.error("%s", e)
        return 2
    if not sources:
        logger.warning("No feeds configured in %s.", feeds_file)
        return 0

    for s in sources:
        logger.info(DIV)
        logger.info(
            "Feed %s: %s (mode=%s, skip_first=%s)",
            s.name, s.url, "full" if s.full_compare else "simple", s.skip_first,
        )

    stop_event = threading.Event()
    _install_signal_handlers(stop_event)
    sink: "queue.Queue" = queue.Queue(maxsize=config.QUEUE_MAXSIZE)
    threads = run_pollers(
        [PageWatcher(s) for s in sources], sink, stop_event,
        interval=config.POLL_SECONDS, initial_delay=config.INITIAL_DELAY_SECONDS,
    )

    consume(sink, stop_event, to_stdout=config.EVENTS_TO_STDOUT)
    drain_and_join(sink, threads, stop_event, to_stdout=config.EVENTS_TO_STDOUT,
                   timeout=config.CONNECT_TIMEOUT + config.READ_TIMEOUT)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
