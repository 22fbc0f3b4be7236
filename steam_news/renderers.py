"""Rendering of the embed and index pages.

Both pages build their cards from the ``card`` macro in ``_card.html.j2``.
The macro is rendered once with placeholder tokens, and the placeholders
are filled either here (embed page) or in the browser (index page) using
the same escape tables.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping

from .escaping import ATTR_ESCAPES, TEXT_ESCAPES, escape_attr, escape_text
from .models import Article
from .templating import get_environment

logger = logging.getLogger(__name__)

CARD_TOKEN_PATTERN = r"__(INDEX|CHECKED|TITLE|DATE|URL|HTML)__"
_CARD_TOKEN_RE = re.compile(CARD_TOKEN_PATTERN)


@dataclass(frozen=True)
class PageSettings:
    """Presentation options shared by both pages."""

    site_title: str = "Folklore Hunter — News"
    button_label: str = "View on Steam"
    data_file: str = "news.json"


def build_card_template(settings: PageSettings) -> str:
    """Render the card macro with placeholder tokens in every slot."""
    macro = get_environment().get_template("_card.html.j2").module.card
    return str(
        macro(
            index="__INDEX__",
            checked="__CHECKED__",
            title="__TITLE__",
            date="__DATE__",
            url="__URL__",
            html="__HTML__",
            button_label=escape_text(settings.button_label),
        )
    )


def card_values(article: Article, index: int) -> Dict[str, str]:
    """Return the escaped token values for one article."""
    return {
        "INDEX": str(index),
        "CHECKED": "checked" if index == 0 else "",
        "TITLE": escape_text(article.title),
        "DATE": escape_text(article.date),
        "URL": escape_attr(article.url),
        # Already sanitized; escaping again would corrupt entities.
        "HTML": article.html,
    }


def fill_card_template(template: str, values: Mapping[str, str]) -> str:
    """Substitute every placeholder in a single pass."""
    return _CARD_TOKEN_RE.sub(lambda match: values[match.group(1)], template)


def render_card(
    article: Article, index: int, settings: PageSettings = PageSettings()
) -> str:
    """Render the markup of one article card."""
    return fill_card_template(build_card_template(settings), card_values(article, index))


def render_embed(
    articles: Iterable[Article], settings: PageSettings = PageSettings()
) -> str:
    """Render the self-contained, script-free page."""
    template = build_card_template(settings)
    cards = [
        fill_card_template(template, card_values(article, index))
        for index, article in enumerate(articles)
    ]
    logger.debug("Rendering embed page with %d cards", len(cards))
    return (
        get_environment()
        .get_template("embed.html.j2")
        .render(site_title=settings.site_title, cards=cards)
    )


def render_index(settings: PageSettings = PageSettings()) -> str:
    """Render the page shell that renders ``settings.data_file`` client-side."""
    return (
        get_environment()
        .get_template("index.html.j2")
        .render(
            site_title=settings.site_title,
            card_template=build_card_template(settings),
            token_pattern=CARD_TOKEN_PATTERN,
            text_escapes=TEXT_ESCAPES,
            attr_escapes=ATTR_ESCAPES,
            data_file=settings.data_file,
        )
    )
