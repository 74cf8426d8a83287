"""Command-line interface for building the feed and social images."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import pprint
from pathlib import Path
from typing import List, Optional

from .config import parse_app_config, parse_env_config
from .runner import BuildConfig, execute

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Build the RSS feed and social preview images for the site."
    )
    parser.add_argument(
        "--config",
        default="configs/site.xml",
        help="Path to the main configuration XML file.",
    )

    # Overrides for logging/debugging
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (e.g. DEBUG, INFO, WARNING). Overrides config.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Optional path to a log file. Overrides config.",
    )

    parser.add_argument(
        "--output",
        metavar="DIR",
        help="Write build artefacts to DIR instead of the configured output.",
    )
    parser.add_argument(
        "--drafts",
        action="store_true",
        help="Build in preview mode and keep draft posts in the feed.",
    )
    parser.add_argument(
        "--font",
        metavar="PATH",
        help="TrueType font used for social images (defaults to Pillow's font).",
    )

    return parser


def configure_logging(level_name: str, log_file: Optional[str] = None) -> None:
    """Route build logs to the console and, optionally, a log file."""
    log_level = getattr(logging, level_name.upper(), None)
    if not isinstance(log_level, int):
        raise ValueError(f"Unsupported log level: {level_name}")

    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.setLevel(log_level)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    if log_file:
        log_path = Path(log_file)
        if log_path.parent and not log_path.parent.exists():
            log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        logger.debug(
            "Build logging at %s, also writing to %s",
            level_name.upper(),
            log_path,
        )
    else:
        logger.debug(
            "Build logging at %s to the console only", level_name.upper()
        )


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        app_config = parse_app_config(args.config)

        if app_config.env_file:
            os.environ.update(parse_env_config(app_config.env_file))

        # CLI overrides config
        log_level = args.log_level or app_config.logging.level
        log_file = args.log_file or app_config.logging.file

        configure_logging(log_level, log_file)

        config = BuildConfig(
            content_file=app_config.content_file,
            output_dir=args.output or app_config.output_dir,
            production=app_config.production and not args.drafts,
            site=app_config.site,
            font_path=args.font,
        )

        logger.info(
            "Active Configuration:\n%s", pprint.pformat(dataclasses.asdict(config))
        )

        result = execute(config)
    except ValueError as exc:
        parser.error(str(exc))
    except (RuntimeError, FileNotFoundError) as exc:
        logger.error("%s", exc)
        return 1
    except Exception:  # noqa: BLE001
        logger.exception("Unexpected error during build.")
        return 1

    print(result.output_text)
    return 0
