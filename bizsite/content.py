"""Blog content collection snapshot loading."""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, List, Optional

from .models import PostRecord, as_utc

logger = logging.getLogger(__name__)


class ContentError(RuntimeError):
    """Raised when the content snapshot does not match the blog schema."""


def published(post: PostRecord) -> bool:
    """Draft predicate used for production builds."""
    return not post.draft


def _coerce_date(value: Any, slug: str) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as exc:
            raise ContentError(f"Post '{slug}' has an invalid date: {value!r}") from exc
    else:
        raise ContentError(f"Post '{slug}' has an invalid date: {value!r}")

    return as_utc(parsed)


def _optional_str(item: dict, key: str, slug: str) -> Optional[str]:
    value = item.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ContentError(f"Post '{slug}' field '{key}' must be a string.")
    return value


def parse_post(item: Any) -> PostRecord:
    """Validate one front matter object and build a PostRecord."""
    if not isinstance(item, dict):
        raise ContentError("Content snapshot must contain objects only.")

    slug = item.get("slug")
    title = item.get("title")
    if not isinstance(slug, str) or not slug.strip():
        raise ContentError("Every post requires a non-empty 'slug'.")
    if not isinstance(title, str):
        raise ContentError(f"Post '{slug}' requires a 'title'.")
    if "date" not in item:
        raise ContentError(f"Post '{slug}' requires a 'date'.")

    categories = item.get("categories") or []
    if not isinstance(categories, list) or not all(
        isinstance(category, str) for category in categories
    ):
        raise ContentError(f"Post '{slug}' categories must be a list of strings.")

    draft = item.get("draft", False)
    if not isinstance(draft, bool):
        raise ContentError(f"Post '{slug}' draft flag must be a boolean.")

    return PostRecord(
        slug=slug.strip(),
        title=title,
        date=_coerce_date(item["date"], slug),
        excerpt=_optional_str(item, "excerpt", slug),
        description=_optional_str(item, "description", slug),
        categories=list(categories),
        author=_optional_str(item, "author", slug),
        draft=draft,
    )


def load_posts(
    path: str, include: Optional[Callable[[PostRecord], bool]] = None
) -> List[PostRecord]:
    """Load blog posts from a JSON snapshot, optionally filtered by a predicate."""
    location = Path(path)
    try:
        payload = json.loads(location.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ContentError(f"Content snapshot not found: {location}") from exc
    except json.JSONDecodeError as exc:
        raise ContentError(f"Content snapshot is not valid JSON: {location}") from exc

    if not isinstance(payload, list):
        raise ContentError("Content snapshot must contain a JSON array.")

    posts = [parse_post(item) for item in payload]
    if include is not None:
        posts = [post for post in posts if include(post)]

    logger.info("Loaded %d posts from %s", len(posts), location)
    return posts
