"""RSS feed building for the blog collection."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from .models import DEFAULT_AUTHOR, FeedItem, PostRecord, SiteConfig, as_utc
from .templating import get_environment

logger = logging.getLogger(__name__)

FEED_LANGUAGE = "en-us"
FEED_GENERATOR = "bizsite"
FEED_STYLESHEET = "/rss/styles.xsl"


def post_link(slug: str) -> str:
    """Site-relative URL of a blog post."""
    return f"/blog/{slug}/"


def join_url(base: str, path: str) -> str:
    base = base.rstrip("/")
    path = path.lstrip("/")
    if not path:
        return f"{base}/"
    return f"{base}/{path}"


def to_feed_item(post: PostRecord, fallback_author: str = DEFAULT_AUTHOR) -> FeedItem:
    """Project a post into the shape used by the RSS item."""
    if post.excerpt is not None:
        description = post.excerpt
    elif post.description is not None:
        description = post.description
    else:
        description = ""

    return FeedItem(
        title=post.title,
        pub_date=as_utc(post.date),
        description=description,
        link=post_link(post.slug),
        categories=list(post.categories or []),
        author=post.author if post.author is not None else fallback_author,
    )


def build_feed(
    posts: Iterable[PostRecord],
    is_production: bool,
    site: Optional[SiteConfig] = None,
) -> List[FeedItem]:
    """Filter drafts in production, sort newest first and map to feed items."""
    fallback_author = site.author if site else DEFAULT_AUTHOR

    candidates = list(posts)
    if is_production:
        visible = [post for post in candidates if not post.draft]
        skipped = len(candidates) - len(visible)
        if skipped:
            logger.debug("Excluded %d draft posts from the feed", skipped)
    else:
        visible = candidates

    # sorted() is stable, so posts sharing a date keep their input order.
    ordered = sorted(visible, key=lambda post: as_utc(post.date), reverse=True)
    items = [to_feed_item(post, fallback_author) for post in ordered]

    logger.info("Built feed with %d items (production=%s)", len(items), is_production)
    return items


def render_rss(
    items: Iterable[FeedItem],
    site: SiteConfig,
    build_date: Optional[datetime] = None,
    stylesheet: Optional[str] = FEED_STYLESHEET,
) -> str:
    """Serialise feed items as an RSS 2.0 document."""
    env = get_environment()
    template = env.get_template("feed.xml.j2")
    entries = [{"item": item, "url": join_url(site.url, item.link)} for item in items]
    return template.render(
        site=site,
        site_link=join_url(site.url, ""),
        entries=entries,
        language=FEED_LANGUAGE,
        generator=FEED_GENERATOR,
        stylesheet=stylesheet,
        build_date=build_date or datetime.now(timezone.utc),
    )
