"""Configuration loading for site builds and the contact form."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional
from xml.etree import ElementTree as ET

from .models import DEFAULT_AUTHOR, SiteConfig

logger = logging.getLogger(__name__)

FORM_ENDPOINT_ENV = "BIZSITE_FORM_ENDPOINT"
DEFAULT_FORM_ENDPOINT = "https://formspree.io/f/YOUR_FORM_ID"


@dataclass
class FormConfig:
    endpoint: str = DEFAULT_FORM_ENDPOINT
    redirect_url: str = "/success/"
    redirect_delay: float = 1.5
    timeout: float = 10.0


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class AppConfig:
    content_file: str
    output_dir: str = "dist"
    env_file: Optional[str] = None
    production: bool = True
    site: SiteConfig = field(default_factory=SiteConfig)
    form: FormConfig = field(default_factory=FormConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _resolve_path(base_path: Path, target_path: str) -> str:
    """Resolve content, output and log paths against the site config file."""
    target = Path(target_path)
    if target.is_absolute():
        return str(target)
    return str((base_path.parent / target).resolve())


def _parse_bool(value: str) -> bool:
    return value.strip().lower() == "true"


def parse_env_config(path: str) -> Dict[str, str]:
    """Read <variable> entries (e.g. the form endpoint) from an env XML file."""
    env_vars = {}
    if not path:
        return env_vars

    logger.info("Loading build environment variables from %s", path)
    try:
        tree = ET.parse(path)
        root = tree.getroot()
        for var in root.findall("variable"):
            name = var.attrib.get("name")
            value = var.text
            if name and value:
                env_vars[name] = value.strip()
    except Exception as exc:
        logger.warning("Could not read build environment file %s: %s", path, exc)
        raise

    return env_vars


def parse_site_config(node: Optional[ET.Element]) -> SiteConfig:
    """Read the <site> block, keeping defaults for anything left out."""
    site = SiteConfig()
    if node is None:
        return site

    site.title = (node.findtext("title") or site.title).strip()
    site.description = (node.findtext("description") or site.description).strip()
    site.url = (node.findtext("url") or site.url).strip()
    site.author = (node.findtext("author") or DEFAULT_AUTHOR).strip()
    site.tagline = (node.findtext("tagline") or site.tagline).strip()

    if not site.url.startswith(("http://", "https://")):
        raise ValueError(f"Site url must be absolute, got: {site.url}")
    return site


def parse_form_config(node: Optional[ET.Element]) -> FormConfig:
    form = FormConfig()
    if node is not None:
        form.endpoint = node.findtext("endpoint", form.endpoint).strip()
        form.redirect_url = node.findtext("redirect-url", form.redirect_url).strip()
        form.redirect_delay = float(node.findtext("redirect-delay", "1.5"))
        form.timeout = float(node.findtext("timeout", "10"))

    return form


def resolve_form_endpoint(form: FormConfig) -> str:
    """Return the relay endpoint, preferring the environment over the config."""
    override = os.environ.get(FORM_ENDPOINT_ENV)
    if override:
        logger.debug("Form endpoint overridden by %s", FORM_ENDPOINT_ENV)
        return override.strip()
    return form.endpoint


def parse_app_config(path: str) -> AppConfig:
    """Parse the main application configuration XML."""
    config_path = Path(path).resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    logger.info("Loading application configuration from %s", config_path)
    tree = ET.parse(config_path)
    root = tree.getroot()

    # Content snapshot
    content_node = root.find("content")
    if content_node is None or not content_node.text:
        raise ValueError("Config missing <content> path")
    content_file = _resolve_path(config_path, content_node.text.strip())

    output_dir = _resolve_path(config_path, root.findtext("output", "dist").strip())

    # Env
    env_node = root.find("env")
    env_file = (
        _resolve_path(config_path, env_node.text.strip())
        if env_node is not None and env_node.text
        else None
    )

    production = _parse_bool(root.findtext("production", "true"))

    site = parse_site_config(root.find("site"))

    # Logging
    log_node = root.find("logging")
    logging_config = LoggingConfig()
    if log_node is not None:
        logging_config.level = log_node.findtext("level", "INFO")
        log_file = log_node.findtext("file")
        if log_file:
            logging_config.file = _resolve_path(config_path, log_file)

    return AppConfig(
        content_file=content_file,
        output_dir=output_dir,
        env_file=env_file,
        production=production,
        site=site,
        form=parse_form_config(root.find("form")),
        logging=logging_config,
    )
