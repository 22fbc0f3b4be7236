"""Jinja2 environment for steam_news templates."""

from __future__ import annotations

from importlib import resources

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .escaping import escape_attr, escape_text

_ENV: Environment | None = None


def get_environment() -> Environment:
    """Return a cached Jinja environment configured for package templates."""
    global _ENV
    if _ENV is None:
        template_dir = resources.files(__package__) / "templates"
        loader = FileSystemLoader(str(template_dir))
        # Values are escaped explicitly with the ``text``/``attr`` filters so
        # the sanitized article HTML can be interpolated as-is.
        _ENV = Environment(
            loader=loader,
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        _ENV.filters["text"] = escape_text
        _ENV.filters["attr"] = escape_attr
    return _ENV
