"""Feed download and parsing helpers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Optional, Union

import feedparser
import requests

from .exceptions import FetchError, ParseError
from .models import RawFeedItem

logger = logging.getLogger(__name__)

ACCEPT_HEADER = "application/rss+xml,application/xml,text/xml"
USER_AGENT = "steam-news/0.1 (+RSS to static pages)"


def fetch_feed(url: str, timeout: float = 10.0) -> bytes:
    """Download the feed at ``url`` and return the raw response body."""
    logger.info("Fetching feed %s", url)
    try:
        response = requests.get(
            url,
            headers={"Accept": ACCEPT_HEADER, "User-Agent": USER_AGENT},
            timeout=timeout,
        )
        response.raise_for_status()
    except requests.RequestException as exc:
        raise FetchError(f"Failed to fetch RSS from {url}: {exc}") from exc

    logger.debug(
        "Feed responded with %s (%s, %d bytes)",
        response.status_code,
        response.headers.get("Content-Type", "unknown type"),
        len(response.content),
    )
    return response.content


def load_feed_file(path: str) -> bytes:
    """Read feed XML from disk instead of the network."""
    location = Path(path)
    logger.info("Loading feed from %s", location)
    try:
        return location.read_bytes()
    except OSError as exc:
        raise FetchError(f"Cannot read feed file {location}: {exc}") from exc


def _entry_link(entry: Any) -> Optional[str]:
    """Return the item's own ``<link>``, ignoring one copied from ``<guid>``."""
    link = entry.get("link")
    if entry.get("guidislink") and link == entry.get("id"):
        return None
    return link


def _entry_body(entry: Any) -> Optional[str]:
    """Prefer ``content:encoded`` over ``description``."""
    content = entry.get("content")
    if content:
        try:
            value = content[0].get("value")
        except (TypeError, KeyError, IndexError, AttributeError):
            value = None
        if value:
            return value
    return entry.get("summary")


def parse_feed_items(text: Union[str, bytes]) -> List[RawFeedItem]:
    """Parse RSS 2.0 text into raw items, in document order."""
    if isinstance(text, str):
        # feedparser treats some strings as URLs or file names.
        text = text.encode("utf-8")
    parsed = feedparser.parse(text, sanitize_html=False, resolve_relative_uris=False)

    if parsed.get("bozo"):
        exc = parsed.get("bozo_exception")
        if isinstance(exc, feedparser.CharacterEncodingOverride):
            logger.warning("Feed encoding was overridden while parsing: %s", exc)
        else:
            raise ParseError(f"Feed is not well-formed XML: {exc}")

    version = parsed.get("version") or ""
    if not version.startswith("rss"):
        raise ParseError(
            "Feed is not an RSS document with a channel "
            f"(detected {version or 'nothing'!r})"
        )

    items = [
        RawFeedItem(
            title=entry.get("title"),
            link=_entry_link(entry),
            pub_date=entry.get("published"),
            body=_entry_body(entry),
        )
        for entry in parsed.entries
    ]
    logger.info("Parsed %d items from feed", len(items))
    return items
