"""HTML clean-up applied to feed bodies before they are published."""

from __future__ import annotations

import logging
import re
from typing import Iterable
from urllib.parse import unquote

import bleach
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

LINKFILTER_PREFIX = "https://steamcommunity.com/linkfilter/?u="

DEFAULT_ALLOWED_TAGS = frozenset(
    [
        "p",
        "b",
        "strong",
        "i",
        "em",
        "ul",
        "ol",
        "li",
        "h2",
        "h3",
        "img",
        "a",
        "hr",
        "code",
        "blockquote",
        "span",
        "div",
        "br",
    ]
)
DEFAULT_ALLOWED_ATTRIBUTES = frozenset(["src", "href", "target", "rel", "class", "alt"])

# Removed together with their content, whatever the allow-lists say.
BASELINE_STRIPPED_ELEMENTS = ("script", "style", "iframe", "object", "embed", "noscript")
ALLOWED_PROTOCOLS = frozenset(["http", "https", "mailto"])

# The target parameter ends at the first quote, apostrophe or ampersand.
_LINKFILTER_RE = re.compile(re.escape(LINKFILTER_PREFIX) + r"""([^"'&]+)""")
_MALFORMED_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_EMPTY_PARAGRAPH_RE = re.compile(r"<p>\s*</p>", re.IGNORECASE)
_EMPTY_ATTRIBUTED_PARAGRAPH_RE = re.compile(r"<p\b[^>]*>\s*</p>", re.IGNORECASE)


def _decode_component(value: str) -> str:
    """Percent-decode ``value``, raising ``ValueError`` on malformed input."""
    if _MALFORMED_ESCAPE_RE.search(value):
        raise ValueError(f"Malformed percent-escape in {value!r}")
    # UnicodeDecodeError is a ValueError too.
    return unquote(value, errors="strict")


def _unwrap_match(match: re.Match) -> str:
    encoded = match.group(1)
    try:
        return _decode_component(encoded)
    except ValueError as exc:
        logger.debug("Keeping encoded linkfilter target: %s", exc)
        return encoded


def unwrap_linkfilter(html: str) -> str:
    """Replace Steam linkfilter redirect URLs with the link they point to.

    A target that cannot be decoded is kept in its encoded form, without the
    redirect prefix. Substitution repeats until no prefix is left, so nested
    redirects are unwrapped too and a second call is a no-op.
    """
    result = html or ""
    count = 1
    while count:
        result, count = _LINKFILTER_RE.subn(_unwrap_match, result)
    return result


def strip_empty_paragraphs(html: str, include_attributes: bool = False) -> str:
    """Drop ``<p>`` elements that hold nothing but whitespace.

    Only bare ``<p>`` tags match unless ``include_attributes`` is set, in which
    case ``<p class="...">`` and the like are removed too.
    """
    pattern = _EMPTY_ATTRIBUTED_PARAGRAPH_RE if include_attributes else _EMPTY_PARAGRAPH_RE
    result = html or ""
    count = 1
    while count:
        result, count = pattern.subn("", result)
    return result


def sanitize_html(
    html: str,
    allowed_tags: Iterable[str] = DEFAULT_ALLOWED_TAGS,
    allowed_attributes: Iterable[str] = DEFAULT_ALLOWED_ATTRIBUTES,
) -> str:
    """Return ``html`` with only allow-listed tags and attributes left.

    Disallowed markup is stripped while its text is kept. Script-like
    elements are dropped with their content first, inline event handlers are
    never permitted and URLs are limited to ``ALLOWED_PROTOCOLS``.
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")
    for element in soup(list(BASELINE_STRIPPED_ELEMENTS)):
        element.decompose()

    tags = {tag.lower() for tag in allowed_tags} - set(BASELINE_STRIPPED_ELEMENTS)
    attributes = [
        name.lower() for name in allowed_attributes if not name.lower().startswith("on")
    ]

    return bleach.clean(
        str(soup),
        tags=tags,
        attributes=attributes,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
        strip_comments=True,
    )
