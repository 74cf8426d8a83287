from datetime import datetime, timezone

import pytest

from bizsite.models import PostRecord, SiteConfig


@pytest.fixture
def site():
    return SiteConfig(
        title="Acme Plumbing",
        description="Local plumbing done right.",
        url="https://acme.example.com",
        author="Acme Team",
        tagline="Fast fixes, fair prices.",
    )


@pytest.fixture
def make_post():
    def _make(slug="test-post", **overrides):
        data = {
            "slug": slug,
            "title": "Test Post",
            "date": datetime(2024, 6, 15, tzinfo=timezone.utc),
            "excerpt": "Test excerpt",
            "description": "Test description",
            "categories": ["data"],
            "author": "Test Author",
            "draft": False,
        }
        data.update(overrides)
        return PostRecord(**data)

    return _make
