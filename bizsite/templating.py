"""Jinja2 environment for bizsite templates."""

from __future__ import annotations

import re
from datetime import datetime
from email.utils import format_datetime
from importlib import resources

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .models import as_utc

_ENV: Environment | None = None

# Anything outside the XML 1.0 Char production.
_XML_INVALID = re.compile(
    "[^\u0009\u000a\u000d\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)


def _rfc822(value: datetime | None) -> str:
    """Format a datetime the way RSS readers expect in pubDate."""
    if value is None:
        return ""
    return format_datetime(as_utc(value))


def _xml_text(value: object) -> str:
    """Drop control characters that would make the document ill-formed."""
    if value is None:
        return ""
    return _XML_INVALID.sub("", str(value))


def get_environment() -> Environment:
    """Return a cached Jinja environment configured for package templates."""
    global _ENV
    if _ENV is None:
        template_dir = resources.files(__package__) / "templates"
        loader = FileSystemLoader(str(template_dir))
        _ENV = Environment(
            loader=loader,
            autoescape=select_autoescape(["html", "xml", "xml.j2"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        _ENV.filters["rfc822"] = _rfc822
        _ENV.filters["xml_text"] = _xml_text
    return _ENV
