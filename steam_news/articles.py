"""Normalization of raw feed items into publishable articles."""

from __future__ import annotations

import logging
from itertools import islice
from typing import Iterable, List, Optional

from .content import (
    DEFAULT_ALLOWED_ATTRIBUTES,
    DEFAULT_ALLOWED_TAGS,
    sanitize_html,
    strip_empty_paragraphs,
    unwrap_linkfilter,
)
from .models import Article, RawFeedItem

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled"
DEFAULT_URL = "#"


def _field(value: Optional[object], default: str, name: str) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        logger.debug("Feed item has no %s; using %r", name, default)
        return default
    return value if isinstance(value, str) else str(value)


def normalize_item(
    raw: RawFeedItem,
    allowed_tags: Iterable[str] = DEFAULT_ALLOWED_TAGS,
    allowed_attributes: Iterable[str] = DEFAULT_ALLOWED_ATTRIBUTES,
) -> Article:
    """Turn one feed item into an :class:`Article`.

    Missing fields fall back to their defaults instead of failing the item.
    The body goes through linkfilter unwrapping, empty paragraph removal and
    sanitization, in that order.
    """
    title = _field(raw.title, DEFAULT_TITLE, "title").strip()
    if not title:
        logger.debug("Feed item has a blank title; using %r", DEFAULT_TITLE)
        title = DEFAULT_TITLE

    body = _field(raw.body, "", "body")
    html = sanitize_html(
        strip_empty_paragraphs(unwrap_linkfilter(body)),
        allowed_tags=allowed_tags,
        allowed_attributes=allowed_attributes,
    )
    # Removing disallowed markup can leave a paragraph empty, and Steam bodies
    # carry empty <p class="bb_paragraph"> spacers.
    html = strip_empty_paragraphs(html, include_attributes=True)

    return Article(
        title=title,
        url=_field(raw.link, DEFAULT_URL, "link"),
        date=_field(raw.pub_date, "", "pubDate"),
        html=html,
    )


def validate_limit(limit: object) -> int:
    """Return ``limit`` if it is a positive integer, else raise ``ValueError``."""
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise ValueError(f"Article limit must be a positive integer, got {limit!r}")
    return limit


def build_articles(
    items: Iterable[RawFeedItem],
    limit: int,
    allowed_tags: Iterable[str] = DEFAULT_ALLOWED_TAGS,
    allowed_attributes: Iterable[str] = DEFAULT_ALLOWED_ATTRIBUTES,
) -> List[Article]:
    """Normalize the first ``limit`` items, keeping feed order."""
    validate_limit(limit)
    tags = frozenset(allowed_tags)
    attributes = frozenset(allowed_attributes)
    articles = [
        normalize_item(item, allowed_tags=tags, allowed_attributes=attributes)
        for item in islice(items, limit)
    ]
    logger.info("Built %d articles (limit %d)", len(articles), limit)
    return articles
