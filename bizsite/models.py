"""Shared data models for bizsite."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

DEFAULT_AUTHOR = "Your Name"


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so mixed inputs compare and format alike."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass
class SiteConfig:
    """Site-wide metadata used by feeds and social images."""

    title: str = "YOUR BUSINESS NAME"
    description: str = "A brief description of your business and what you do."
    url: str = "https://yourdomain.com"
    author: str = DEFAULT_AUTHOR
    tagline: str = "Your compelling tagline goes here."


@dataclass(frozen=True)
class PostRecord:
    """A blog post from the content collection."""

    slug: str
    title: str
    date: datetime
    excerpt: Optional[str] = None
    description: Optional[str] = None
    categories: List[str] = field(default_factory=list)
    author: Optional[str] = None
    draft: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", as_utc(self.date))


@dataclass(frozen=True)
class FeedItem:
    """Projection of a post as it appears in the RSS feed."""

    title: str
    pub_date: datetime
    description: str
    link: str
    categories: List[str]
    author: str


@dataclass(frozen=True)
class StaticPage:
    """A non-blog page that gets its own social preview image."""

    slug: str
    title: str
    category: str
