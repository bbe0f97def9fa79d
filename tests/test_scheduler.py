"""Unit tests for the poll loop."""

import logging
import queue
import threading

from feedcrawl.scheduler import Poller, PollState, run_pollers
from feedcrawl.utils.state import FullMemory, SimpleMemory
from feedcrawl.watchers.page_watcher import PageWatcher

from conftest import FakePage, titles_page


def drain(q):
    out = []
    while True:
        try:
            out.append(q.get_nowait())
        except queue.Empty:
            return out


class TestRunOnce:
    def test_emits_new_items_in_document_order(self, make_source, fake_page):
        fake_page.html = titles_page("A", "B", "C")
        sink = queue.Queue()
        p = Poller(PageWatcher(make_source(), fetcher=fake_page), sink)
        out = p.run_once()
        assert out.count == 3
        assert [e.title for e in drain(sink)] == ["A", "B", "C"]
        assert p.state is PollState.IDLE

    def test_second_poll_of_same_page_emits_nothing(self, make_source, fake_page):
        fake_page.html = titles_page("A", "B")
        sink = queue.Queue()
        p = Poller(PageWatcher(make_source(), fetcher=fake_page), sink)
        p.run_once()
        drain(sink)
        p.run_once()
        assert drain(sink) == []

    def test_failure_is_contained_and_logged(self, make_source, fake_page, caplog):
        sink = queue.Queue()
        w = PageWatcher(make_source(), fetcher=fake_page)
        p = Poller(w, sink)
        fake_page.html = titles_page("A", "B")
        p.run_once()
        drain(sink)

        fake_page.html = "<html><body></body></html>"
        with caplog.at_level(logging.ERROR, logger="scheduler"):
            assert p.run_once() is None
        assert "feed_sel: length 0" in caplog.text
        assert "https://example.com/news/" in caplog.text
        assert w.memory == SimpleMemory("A")
        assert p.failures == 1
        assert p.state is PollState.IDLE

        fake_page.html = titles_page("N", "A", "B")
        p.run_once()
        assert [e.title for e in drain(sink)] == ["N"]

    def test_failure_leaves_full_memory_unchanged(self, make_source, fake_page):
        sink = queue.Queue()
        w = PageWatcher(make_source(full_compare=True), fetcher=fake_page)
        p = Poller(w, sink)
        fake_page.html = titles_page("A", "B", "C")
        p.run_once()
        drain(sink)
        before = FullMemory(frozenset({"A", "B", "C"}))
        assert w.memory == before

        fake_page.html = "<html><body><ul class=\"news\"><li class=\"item\"><p>no title</p></li></ul></body></html>"
        assert p.run_once() is None
        assert w.memory == before

        fake_page.html = titles_page("B", "D", "A")
        p.run_once()
        assert [e.title for e in drain(sink)] == ["D"]
        assert w.memory == FullMemory(frozenset({"A", "B", "D"}))

    def test_unexpected_exception_is_contained(self, make_source, fake_page):
        fake_page.error = RuntimeError("parser exploded")
        p = Poller(PageWatcher(make_source(), fetcher=fake_page), queue.Queue())
        assert p.run_once() is None
        assert p.failures == 1

    def test_invalid_base_url_is_a_poll_failure(self, make_source):
        p = Poller(PageWatcher(make_source(url="/relative")), queue.Queue())
        assert p.run_once() is None
        assert p.failures == 1


class TestRun:
    def test_stop_before_start_skips_polling(self, make_source, fake_page):
        stop = threading.Event()
        stop.set()
        p = Poller(PageWatcher(make_source(), fetcher=fake_page), queue.Queue(), stop_event=stop)
        p.run()
        assert p.polls == 0
        assert fake_page.calls == []
        assert p.state is PollState.CANCELLED

    def test_stop_interrupts_interval_wait(self, make_source, fake_page):
        fake_page.html = titles_page("A")
        sink = queue.Queue()
        p = Poller(PageWatcher(make_source(), fetcher=fake_page), sink, interval=3600, initial_delay=0)
        t = threading.Thread(target=p.run)
        t.start()
        assert sink.get(timeout=5).title == "A"
        p.stop()
        t.join(timeout=5)
        assert not t.is_alive()
        assert p.polls == 1
        assert p.state is PollState.CANCELLED


class TestRunPollers:
    def test_one_independent_worker_per_source(self, make_source):
        pages = {"one": FakePage(titles_page("A1")), "two": FakePage(titles_page("B1"))}
        watchers = [PageWatcher(make_source(name=n), fetcher=page) for n, page in pages.items()]
        pages["two"].error = RuntimeError("down")
        sink = queue.Queue()
        stop = threading.Event()

        threads = run_pollers(watchers, sink, stop, interval=3600, initial_delay=0)
        event = sink.get(timeout=5)
        stop.set()
        for t in threads:
            t.join(timeout=5)

        assert (event.source, event.title) == ("one", "A1")
        assert all(not t.is_alive() for t in threads)
        assert watchers[1].memory == SimpleMemory()


class TestBackpressure:
    def test_full_sink_blocks_emission_until_consumed(self, make_source, fake_page):
        fake_page.html = titles_page("A", "B")
        sink = queue.Queue(maxsize=1)
        p = Poller(PageWatcher(make_source(), fetcher=fake_page), sink)
        t = threading.Thread(target=p.run_once)
        t.start()

        t.join(timeout=0.5)
        assert t.is_alive()
        assert sink.full()
        assert p.state is PollState.EMITTING

        assert sink.get(timeout=5).title == "A"
        t.join(timeout=5)
        assert not t.is_alive()
        assert sink.get_nowait().title == "B"
        assert p.state is PollState.IDLE
