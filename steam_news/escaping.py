"""Escaping for values interpolated into the generated pages.

The tables are also shipped to the browser by the index page so the client
renderer escapes exactly like the server does.
"""

from __future__ import annotations

from typing import Dict, Optional

TEXT_ESCAPES: Dict[str, str] = {"&": "&amp;", "<": "&lt;", ">": "&gt;"}
ATTR_ESCAPES: Dict[str, str] = {'"': "&quot;"}

_TEXT_TABLE = str.maketrans(TEXT_ESCAPES)
_ATTR_TABLE = str.maketrans(ATTR_ESCAPES)


def escape_text(value: Optional[str]) -> str:
    """Escape ``&``, ``<`` and ``>`` for use in a text node."""
    return (value or "").translate(_TEXT_TABLE)


def escape_attr(value: Optional[str]) -> str:
    """Escape double quotes for use inside a double-quoted attribute."""
    return (value or "").translate(_ATTR_TABLE)
