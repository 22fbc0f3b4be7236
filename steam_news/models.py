"""Shared data models for steam_news."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Optional


@dataclass
class RawFeedItem:
    """A single RSS ``<item>`` as read from the feed, before normalization."""

    title: Optional[str] = None
    link: Optional[str] = None
    pub_date: Optional[str] = None
    body: Optional[str] = None


@dataclass(frozen=True)
class Article:
    """Normalized article with a sanitized HTML body."""

    title: str
    url: str
    date: str
    html: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)
