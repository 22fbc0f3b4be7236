import pytest

_RSS_HEAD = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">\n'
    "<channel>\n"
    "<title>Folklore Hunter</title>\n"
    "<link>https://steamcommunity.com/games/696220</link>\n"
    "<description>News</description>\n"
)
_RSS_TAIL = "</channel>\n</rss>\n"


def _render_item(item):
    parts = ["<item>"]
    if "title" in item:
        parts.append(f"<title>{item['title']}</title>")
    if "link" in item:
        parts.append(f"<link>{item['link']}</link>")
    if "guid" in item:
        parts.append(f"<guid isPermaLink=\"true\">{item['guid']}</guid>")
    if "pubDate" in item:
        parts.append(f"<pubDate>{item['pubDate']}</pubDate>")
    if "description" in item:
        parts.append(f"<description><![CDATA[{item['description']}]]></description>")
    if "content" in item:
        parts.append(f"<content:encoded><![CDATA[{item['content']}]]></content:encoded>")
    parts.append("</item>")
    return "".join(parts)


@pytest.fixture
def make_feed():
    """Return a builder producing RSS 2.0 bytes from a list of item dicts."""

    def build(items):
        body = "\n".join(_render_item(item) for item in items)
        return (_RSS_HEAD + body + "\n" + _RSS_TAIL).encode("utf-8")

    return build
