"""Social preview (Open Graph) image rendering."""

from __future__ import annotations

import io
import logging
from typing import Iterable, Iterator, List, Optional, Tuple
from urllib.parse import urlsplit

from PIL import Image, ImageDraw, ImageFont

from .models import PostRecord, SiteConfig, StaticPage

logger = logging.getLogger(__name__)

WIDTH = 1200
HEIGHT = 630
PADDING = 60

COLORS = {
    "background": "#0a0e14",
    "primary": "#059669",
    "text": "#ffffff",
    "text_muted": "#a1a1aa",
    "accent": "#1a1f2e",
}

STATIC_PAGES: Tuple[StaticPage, ...] = (
    StaticPage(slug="home", title="Home", category=""),
    StaticPage(slug="about", title="About Us", category="Company"),
    StaticPage(slug="services", title="Our Services", category="Services"),
    StaticPage(slug="contact", title="Contact Us", category="Contact"),
    StaticPage(slug="pricing", title="Pricing", category="Plans"),
    StaticPage(slug="blog", title="Blog", category="Insights"),
    StaticPage(slug="privacy", title="Privacy Policy", category="Legal"),
)

DEFAULT_POST_CATEGORY = "Blog"
MAX_TITLE_LINES = 4
ELLIPSIS = "..."
TITLE_MAX_WIDTH = WIDTH - 2 * PADDING - 40


def title_font_size(title: str) -> int:
    """Step the headline size down for longer titles."""
    if len(title) > 60:
        return 48
    if len(title) > 40:
        return 56
    return 64


def _load_font(size: int, font_path: Optional[str] = None) -> ImageFont.ImageFont:
    if font_path:
        return ImageFont.truetype(font_path, size)
    return ImageFont.load_default(size=size)


def _split_word(
    draw: ImageDraw.ImageDraw, word: str, font: ImageFont.ImageFont, max_width: int
) -> List[str]:
    """Break a word that cannot fit on one line into line-sized pieces."""
    pieces: List[str] = []
    current = ""
    for char in word:
        if current and draw.textlength(current + char, font=font) > max_width:
            pieces.append(current)
            current = char
        else:
            current += char
    if current:
        pieces.append(current)
    return pieces


def _wrap(
    draw: ImageDraw.ImageDraw,
    text: str,
    font: ImageFont.ImageFont,
    max_width: int,
    max_lines: int = MAX_TITLE_LINES,
) -> List[str]:
    """Greedy word wrap measured with the actual font, capped at max_lines."""
    lines: List[str] = []
    current = ""
    for word in text.split():
        if draw.textlength(word, font=font) > max_width:
            if current:
                lines.append(current)
            *head, current = _split_word(draw, word, font, max_width)
            lines.extend(head)
            continue
        candidate = f"{current} {word}".strip()
        if current and draw.textlength(candidate, font=font) > max_width:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)

    if len(lines) > max_lines:
        lines = lines[:max_lines]
        last = lines[-1]
        while last and draw.textlength(last + ELLIPSIS, font=font) > max_width:
            last = last[:-1]
        lines[-1] = last.rstrip() + ELLIPSIS
    return lines


def render_social_image(
    title: str,
    category: str,
    site: Optional[SiteConfig] = None,
    font_path: Optional[str] = None,
) -> bytes:
    """Render the 1200x630 preview card and return PNG bytes."""
    site = site or SiteConfig()
    image = Image.new("RGB", (WIDTH, HEIGHT), COLORS["background"])
    draw = ImageDraw.Draw(image)

    # Category badge
    badge_font = _load_font(20, font_path)
    badge_text = category.upper()
    if badge_text:
        left, top, right, bottom = draw.textbbox((0, 0), badge_text, font=badge_font)
        badge_box = (
            PADDING,
            PADDING,
            PADDING + (right - left) + 32,
            PADDING + (bottom - top) + 16,
        )
        draw.rounded_rectangle(badge_box, radius=8, fill=COLORS["accent"])
        draw.text(
            (PADDING + 16 - left, PADDING + 8 - top),
            badge_text,
            font=badge_font,
            fill=COLORS["primary"],
        )

    # Title, vertically centred between badge and footer
    size = title_font_size(title)
    title_font = _load_font(size, font_path)
    lines = _wrap(draw, title, title_font, TITLE_MAX_WIDTH)
    line_height = int(size * 1.2)
    block_height = line_height * len(lines)
    region_top = PADDING + 60
    region_bottom = HEIGHT - PADDING - 60
    y = region_top + max(0, (region_bottom - region_top - block_height) // 2)
    for line in lines:
        draw.text((PADDING, y), line, font=title_font, fill=COLORS["text"])
        y += line_height

    # Branding footer
    footer_top = HEIGHT - PADDING - 40
    draw.rounded_rectangle(
        (PADDING, footer_top, PADDING + 4, footer_top + 40),
        radius=2,
        fill=COLORS["primary"],
    )
    draw.text(
        (PADDING + 16, footer_top - 2),
        site.title,
        font=_load_font(24, font_path),
        fill=COLORS["text"],
    )
    draw.text(
        (PADDING + 16, footer_top + 24),
        site.tagline,
        font=_load_font(16, font_path),
        fill=COLORS["text_muted"],
    )

    hostname = urlsplit(site.url).hostname or site.url
    host_font = _load_font(18, font_path)
    host_width = draw.textlength(hostname, font=host_font)
    draw.text(
        (WIDTH - PADDING - host_width, footer_top + 12),
        hostname,
        font=host_font,
        fill=COLORS["text_muted"],
    )

    logger.debug(
        "Rendered social card for '%s' (%d title lines at %dpx)",
        title,
        len(lines),
        size,
    )

    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def social_image_targets(
    posts: Iterable[PostRecord], site: Optional[SiteConfig] = None
) -> Iterator[Tuple[str, str, str]]:
    """Yield (relative path, title, category) for every page needing a card."""
    site = site or SiteConfig()
    for post in posts:
        if post.draft:
            continue
        category = post.categories[0] if post.categories else DEFAULT_POST_CATEGORY
        yield f"blog/{post.slug}.png", post.title, category

    for page in STATIC_PAGES:
        # The home card carries the tagline instead of a section label.
        category = page.category or site.tagline
        yield f"{page.slug}.png", page.title, category
