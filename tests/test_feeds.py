import pytest
import requests

from steam_news import feeds
from steam_news.articles import normalize_item
from steam_news.exceptions import FetchError, ParseError
from steam_news.models import RawFeedItem


class FakeResponse:
    def __init__(self, content=b"<rss/>", status_code=200, error=None):
        self.content = content
        self.status_code = status_code
        self.headers = {"Content-Type": "application/rss+xml"}
        self._error = error

    def raise_for_status(self):
        if self._error:
            raise self._error


def test_fetch_feed_returns_body_and_sends_accept_header(monkeypatch):
    captured = {}

    def fake_get(url, headers=None, timeout=None):
        captured.update(url=url, headers=headers, timeout=timeout)
        return FakeResponse(content=b"<rss>feed</rss>")

    monkeypatch.setattr(feeds.requests, "get", fake_get)

    body = feeds.fetch_feed("https://feed.example.com/rss", timeout=5)

    assert body == b"<rss>feed</rss>"
    assert captured["url"] == "https://feed.example.com/rss"
    assert captured["headers"]["Accept"] == "application/rss+xml,application/xml,text/xml"
    assert captured["timeout"] == 5


def test_fetch_feed_raises_on_http_error(monkeypatch):
    error = requests.HTTPError("503 Server Error: Service Unavailable")
    monkeypatch.setattr(
        feeds.requests,
        "get",
        lambda url, headers=None, timeout=None: FakeResponse(status_code=503, error=error),
    )

    with pytest.raises(FetchError, match="503"):
        feeds.fetch_feed("https://feed.example.com/rss")


def test_fetch_feed_raises_on_timeout(monkeypatch):
    def fake_get(url, headers=None, timeout=None):
        raise requests.Timeout("read timed out")

    monkeypatch.setattr(feeds.requests, "get", fake_get)

    with pytest.raises(FetchError, match="timed out"):
        feeds.fetch_feed("https://feed.example.com/rss")


def test_load_feed_file_reads_bytes(tmp_path):
    path = tmp_path / "feed.xml"
    path.write_bytes(b"<rss/>")

    assert feeds.load_feed_file(str(path)) == b"<rss/>"


def test_load_feed_file_missing_raises_fetch_error(tmp_path):
    with pytest.raises(FetchError):
        feeds.load_feed_file(str(tmp_path / "missing.xml"))


def test_parse_feed_items_prefers_full_content(make_feed):
    document = make_feed(
        [
            {
                "title": "Full",
                "link": "https://example.com/1",
                "pubDate": "Mon, 01 Jan 2024 00:00:00 +0000",
                "description": "<p>Short</p>",
                "content": "<p>Long body</p>",
            },
            {"title": "Short only", "description": "<p>Only short</p>"},
        ]
    )

    items = feeds.parse_feed_items(document)

    assert len(items) == 2
    assert items[0].title == "Full"
    assert items[0].link == "https://example.com/1"
    assert items[0].pub_date == "Mon, 01 Jan 2024 00:00:00 +0000"
    assert "Long body" in items[0].body
    assert "Short" not in items[0].body
    assert "Only short" in items[1].body


def test_parse_feed_items_leaves_missing_fields_empty(make_feed):
    items = feeds.parse_feed_items(make_feed([{}]))

    assert items == [RawFeedItem()]


def test_parse_feed_items_keeps_document_order(make_feed):
    document = make_feed([{"title": f"Item {index}"} for index in range(5)])

    assert [item.title for item in feeds.parse_feed_items(document)] == [
        f"Item {index}" for index in range(5)
    ]


def test_parse_feed_items_accepts_text(make_feed):
    document = make_feed([{"title": "Text"}]).decode("utf-8")

    assert [item.title for item in feeds.parse_feed_items(document)] == ["Text"]


def test_parse_feed_items_empty_channel(make_feed):
    assert feeds.parse_feed_items(make_feed([])) == []


def test_parse_feed_items_rejects_malformed_xml():
    with pytest.raises(ParseError):
        feeds.parse_feed_items(b'<?xml version="1.0"?><rss version="2.0"><channel><item><title>x</channel>')


def test_parse_feed_items_rejects_non_rss_documents():
    with pytest.raises(ParseError):
        feeds.parse_feed_items(b"<?xml version=\"1.0\"?><html><body>Not a feed</body></html>")


def test_parse_feed_items_ignores_link_copied_from_guid(make_feed):
    document = make_feed(
        [{"title": "No link", "guid": "https://store.steampowered.com/news/app/696220/view/1"}]
    )

    items = feeds.parse_feed_items(document)

    assert items[0].link is None
    assert normalize_item(items[0]).url == "#"


def test_parse_feed_items_keeps_real_link_alongside_guid(make_feed):
    document = make_feed(
        [
            {
                "title": "Both",
                "link": "https://example.com/post",
                "guid": "https://store.steampowered.com/news/app/696220/view/2",
            }
        ]
    )

    assert feeds.parse_feed_items(document)[0].link == "https://example.com/post"


def test_parse_feed_items_empty_link_normalizes_to_default(make_feed):
    items = feeds.parse_feed_items(make_feed([{"title": "A", "link": ""}]))

    assert normalize_item(items[0]).url == "#"
