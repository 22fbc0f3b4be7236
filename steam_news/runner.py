"""High-level orchestration for a single news build."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .articles import build_articles
from .config import AppConfig
from .feeds import fetch_feed, load_feed_file, parse_feed_items
from .models import Article
from .renderers import PageSettings, render_embed, render_index

logger = logging.getLogger(__name__)

JSON_FILE = "news.json"
EMBED_FILE = "embed.html"
INDEX_FILE = "index.html"


@dataclass
class RunResult:
    """Returned data after executing a build."""

    articles: List[Article]
    written: List[Path]


def serialize_articles(articles: Sequence[Article]) -> str:
    return json.dumps(
        [article.to_dict() for article in articles], indent=2, ensure_ascii=False
    )


def render_artifacts(articles: Sequence[Article], config: AppConfig) -> Dict[str, str]:
    """Render every output document in memory, keyed by file name."""
    settings = PageSettings(
        site_title=config.site_title,
        button_label=config.button_label,
        data_file=JSON_FILE,
    )
    return {
        JSON_FILE: serialize_articles(articles),
        EMBED_FILE: render_embed(articles, settings),
        INDEX_FILE: render_index(settings),
    }


def _rollback(committed: List[Tuple[Path, Optional[Path]]]) -> None:
    """Put back the files that existed before a partial publish."""
    for destination, backup in reversed(committed):
        if backup is None:
            destination.unlink(missing_ok=True)
        else:
            os.replace(backup, destination)


def write_artifacts(output_dir: str, artifacts: Mapping[str, str]) -> List[Path]:
    """Write all artifacts or none of them.

    Every document is staged in a temporary file next to its destination
    first. Existing files are only replaced once all of them are staged, and
    are restored if any replacement fails.
    """
    target = Path(output_dir)
    target.mkdir(parents=True, exist_ok=True)

    staged: List[Tuple[Path, Path]] = []
    committed: List[Tuple[Path, Optional[Path]]] = []
    try:
        for name, content in artifacts.items():
            fd, tmp_name = tempfile.mkstemp(prefix=f".{name}.", suffix=".tmp", dir=target)
            tmp_path = Path(tmp_name)
            staged.append((tmp_path, target / name))
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(content)
            os.chmod(tmp_path, 0o644)

        for tmp_path, destination in staged:
            backup = None
            if destination.exists():
                backup = destination.with_name(f".{destination.name}.bak")
                os.replace(destination, backup)
            committed.append((destination, backup))
            os.replace(tmp_path, destination)
    except BaseException:
        logger.error("Failed to publish artifacts in %s; keeping previous files", target)
        _rollback(committed)
        raise
    finally:
        for tmp_path, _ in staged:
            tmp_path.unlink(missing_ok=True)

    for _, backup in committed:
        if backup is not None:
            backup.unlink(missing_ok=True)

    written = [destination for _, destination in staged]
    logger.info("Wrote %d artifacts to %s", len(written), target)
    return written


def execute(config: AppConfig, load_feed_path: Optional[str] = None) -> RunResult:
    """Fetch, normalize, render and publish the feed."""
    if load_feed_path:
        raw = load_feed_file(load_feed_path)
    else:
        raw = fetch_feed(config.feed_url, timeout=config.timeout)

    items = parse_feed_items(raw)
    articles = build_articles(
        items,
        config.limit,
        allowed_tags=config.allowed_tags,
        allowed_attributes=config.allowed_attributes,
    )
    artifacts = render_artifacts(articles, config)
    written = write_artifacts(config.output_dir, artifacts)
    return RunResult(articles=articles, written=written)
