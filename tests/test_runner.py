import io
import json
from pathlib import Path

from PIL import Image

import bizsite.runner as runner
from bizsite.og_images import STATIC_PAGES
from bizsite.runner import BuildConfig, execute


def _snapshot(tmp_path):
    path = tmp_path / "blog.json"
    path.write_text(
        json.dumps(
            [
                {"slug": "old", "title": "Old", "date": "2024-01-01"},
                {"slug": "new", "title": "New", "date": "2024-06-15", "categories": ["news"]},
                {"slug": "wip", "title": "WIP", "date": "2024-07-01", "draft": True},
            ]
        ),
        encoding="utf-8",
    )
    return str(path)


def test_execute_writes_feed_and_images(tmp_path, site):
    output = tmp_path / "dist"
    config = BuildConfig(
        content_file=_snapshot(tmp_path), output_dir=str(output), site=site
    )

    result = execute(config)

    feed = (output / "feed.xml").read_text(encoding="utf-8")
    assert result.feed_items == 2
    assert feed.index("/blog/new/") < feed.index("/blog/old/")
    assert "/blog/wip/" not in feed

    assert (output / "og" / "blog" / "new.png").exists()
    assert not (output / "og" / "blog" / "wip.png").exists()
    assert len(result.images) == 2 + len(STATIC_PAGES)
    with Image.open(io.BytesIO(Path(result.images[0]).read_bytes())) as image:
        assert image.size == (1200, 630)
    assert "2 feed items" in result.output_text


def test_execute_preview_mode_keeps_drafts_in_feed(tmp_path, site, monkeypatch):
    monkeypatch.setattr(runner, "render_social_image", lambda *args: b"png")
    config = BuildConfig(
        content_file=_snapshot(tmp_path),
        output_dir=str(tmp_path / "dist"),
        production=False,
        site=site,
    )

    result = execute(config)

    assert result.feed_items == 3
    assert "/blog/wip/" in (tmp_path / "dist" / "feed.xml").read_text(encoding="utf-8")
    assert not (tmp_path / "dist" / "og" / "blog" / "wip.png").exists()
