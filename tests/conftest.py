"""Shared fixtures for feedcrawl tests."""

import pytest

from feedcrawl.fetchers import parse_document
from feedcrawl.sources import FeedSource

BASE_URL = "https://example.com/news/"


def news_page(*items):
    """Render a listing page; each item is (title, href, summary)."""
    rows = []
    for title, href, summary in items:
        rows.append(
            f"""
            <li class="item">
                <h2>{title}</h2>
                <a class="more" href="{href}">read more</a>
                <p class="summary">{summary}</p>
            </li>"""
        )
    return f"""
    <html>
        <head><title>News</title></head>
        <body>
            <nav><a href="/">Home</a></nav>
            <ul class="news">{''.join(rows)}
            </ul>
        </body>
    </html>
    """


def titles_page(*titles):
    return news_page(*[(t, f"/news/{t.lower()}", f"About {t}") for t in titles])


@pytest.fixture
def make_source():
    def _make(**overrides):
        options = {
            "name": "example",
            "url": BASE_URL,
            "feed_sel": "ul.news > li.item",
            "title_sel": "h2",
            "description_sel": "p.summary",
            "url_sel": "a.more",
        }
        options.update(overrides)
        return FeedSource.from_options(options)

    return _make


class FakePage:
    """Stands in for fetch_document; serves whatever HTML is currently set."""

    def __init__(self, html=""):
        self.html = html
        self.error = None
        self.calls = []

    def __call__(self, url, timeout=None):
        self.calls.append((url, timeout))
        if self.error is not None:
            raise self.error
        return parse_document(self.html)


@pytest.fixture
def fake_page():
    return FakePage()
