"""CLI for sending a contact form submission to the configured relay."""

from __future__ import annotations

import argparse
import logging
import os
from typing import List, Optional

from .config import (
    FormConfig,
    parse_app_config,
    parse_env_config,
    resolve_form_endpoint,
)
from .forms import REQUIRED_FIELDS, SERVICE_OPTIONS
from .submission import ContactFormController, FormStatus, HttpFormSubmitter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate and submit the contact form from the terminal."
    )
    parser.add_argument("--name", default="", help="Sender name.")
    parser.add_argument("--email", default="", help="Sender email address.")
    parser.add_argument("--message", default="", help="Message body.")
    parser.add_argument(
        "--service",
        default="",
        choices=list(SERVICE_OPTIONS),
        help="Optional service of interest.",
    )
    parser.add_argument(
        "--landing-url",
        help="Page URL the visitor arrived on; utm_* parameters are forwarded.",
    )
    parser.add_argument(
        "--config",
        help="Optional site configuration XML providing the <form> settings.",
    )
    parser.add_argument(
        "--endpoint",
        help="Form relay endpoint. Overrides config and environment.",
    )
    return parser


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def load_form_config(path: Optional[str]) -> FormConfig:
    if not path:
        return FormConfig()
    app_config = parse_app_config(path)
    if app_config.env_file:
        os.environ.update(parse_env_config(app_config.env_file))
    return app_config.form


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging()

    try:
        form_config = load_form_config(args.config)
    except (ValueError, FileNotFoundError) as exc:
        parser.error(str(exc))

    endpoint = args.endpoint or resolve_form_endpoint(form_config)
    controller = ContactFormController(
        HttpFormSubmitter(endpoint, timeout=form_config.timeout),
        landing_url=args.landing_url,
        redirect_url=form_config.redirect_url,
        redirect_delay=form_config.redirect_delay,
    )
    controller.change("name", args.name)
    controller.change("email", args.email)
    controller.change("service", args.service)
    controller.change("message", args.message)

    result = controller.submit()

    if not result.sent:
        print(result.message)
        for field_name in REQUIRED_FIELDS:
            error = controller.visible_error(field_name)
            if error:
                print(f"  {field_name}: {error}")
        return 1

    print(result.message)
    if result.status is not FormStatus.SUCCESS:
        return 1

    print(f"Next: {result.redirect_url}")
    return 0


if __name__ == "__main__":
    import sys

    sys.exit(main())
