"""High-level orchestration for a site build."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .content import load_posts
from .feeds import build_feed, render_rss
from .models import SiteConfig
from .og_images import render_social_image, social_image_targets

logger = logging.getLogger(__name__)


@dataclass
class BuildConfig:
    """Runtime options for a build invocation."""

    content_file: str
    output_dir: str
    production: bool = True
    site: SiteConfig = field(default_factory=SiteConfig)
    feed_filename: str = "feed.xml"
    og_dirname: str = "og"
    font_path: Optional[str] = None


@dataclass
class BuildResult:
    """Returned data after a build."""

    feed_path: str
    feed_items: int
    images: List[str] = field(default_factory=list)

    @property
    def output_text(self) -> str:
        return (
            f"Wrote {self.feed_items} feed items to {self.feed_path} "
            f"and {len(self.images)} social images."
        )


def _write_bytes(path: Path, data: bytes) -> None:
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


def execute(config: BuildConfig) -> BuildResult:
    """Build the RSS feed and the social preview images."""
    posts = load_posts(config.content_file)
    if not posts:
        logger.warning("Content snapshot %s has no posts", config.content_file)

    output = Path(config.output_dir)

    items = build_feed(posts, config.production, config.site)
    feed_path = output / config.feed_filename
    _write_bytes(feed_path, render_rss(items, config.site).encode("utf-8"))
    logger.info("Saved feed with %d items to %s", len(items), feed_path)

    # Images only exist for posts that are live, regardless of build mode.
    images: List[str] = []
    for relative, title, category in social_image_targets(posts, config.site):
        target = output / config.og_dirname / relative
        _write_bytes(
            target,
            render_social_image(title, category, config.site, config.font_path),
        )
        logger.debug("Rendered social image %s", target)
        images.append(str(target))

    logger.info("Rendered %d social images into %s", len(images), output)
    return BuildResult(feed_path=str(feed_path), feed_items=len(items), images=images)
