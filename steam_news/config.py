"""Configuration loading for the news job."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Optional
from xml.etree import ElementTree as ET

from .articles import validate_limit
from .content import DEFAULT_ALLOWED_ATTRIBUTES, DEFAULT_ALLOWED_TAGS

logger = logging.getLogger(__name__)

DEFAULT_FEED_URL = "https://steamcommunity.com/games/696220/rss/"


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class AppConfig:
    feed_url: str = DEFAULT_FEED_URL
    limit: int = 10
    timeout: float = 10.0
    output_dir: str = "docs"
    site_title: str = "Folklore Hunter — News"
    button_label: str = "View on Steam"
    allowed_tags: FrozenSet[str] = DEFAULT_ALLOWED_TAGS
    allowed_attributes: FrozenSet[str] = DEFAULT_ALLOWED_ATTRIBUTES
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> "AppConfig":
        """Raise ``ValueError`` if any option is unusable."""
        validate_limit(self.limit)
        if self.timeout <= 0:
            raise ValueError(f"Timeout must be positive, got {self.timeout!r}")
        if not self.feed_url:
            raise ValueError("Feed URL must not be empty.")
        if not self.allowed_tags:
            raise ValueError("At least one allowed tag is required.")
        if not self.allowed_attributes:
            raise ValueError("At least one allowed attribute is required.")
        return self


def _resolve_path(base_path: Path, target_path: str) -> str:
    """Resolve a path relative to the base config file if it's not absolute."""
    target = Path(target_path)
    if target.is_absolute():
        return str(target)
    return str((base_path.parent / target).resolve())


def _parse_name_list(value: str) -> FrozenSet[str]:
    return frozenset(name.lower() for name in re.split(r"[\s,]+", value) if name)


def _parse_int(value: str, name: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"<{name}> must be an integer, got {value!r}") from None


def _parse_float(value: str, name: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"<{name}> must be a number, got {value!r}") from None


def parse_app_config(path: str) -> AppConfig:
    """Parse the main application configuration XML."""
    config_path = Path(path).resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    logger.info("Loading application configuration from %s", config_path)
    try:
        tree = ET.parse(config_path)
    except ET.ParseError as exc:
        raise ValueError(f"Config file is not valid XML: {exc}") from exc
    root = tree.getroot()

    config = AppConfig()

    feed_url = root.findtext("feed-url")
    if feed_url is not None:
        config.feed_url = feed_url.strip()

    limit = root.findtext("limit")
    if limit is not None:
        config.limit = _parse_int(limit.strip(), "limit")

    timeout = root.findtext("timeout")
    if timeout is not None:
        config.timeout = _parse_float(timeout.strip(), "timeout")

    output_dir = root.findtext("output-dir")
    if output_dir and output_dir.strip():
        config.output_dir = _resolve_path(config_path, output_dir.strip())

    site_title = root.findtext("site-title")
    if site_title is not None:
        config.site_title = site_title.strip()

    button_label = root.findtext("button-label")
    if button_label is not None:
        config.button_label = button_label.strip()

    tags = root.findtext("allowed-tags")
    if tags is not None:
        config.allowed_tags = _parse_name_list(tags)

    attributes = root.findtext("allowed-attributes")
    if attributes is not None:
        config.allowed_attributes = _parse_name_list(attributes)

    # Logging
    log_node = root.find("logging")
    if log_node is not None:
        config.logging.level = log_node.findtext("level", "INFO").strip()
        log_file = log_node.findtext("file")
        if log_file and log_file.strip():
            config.logging.file = _resolve_path(config_path, log_file.strip())

    return config.validate()
