import logging
import os
from types import SimpleNamespace

import pytest

from bizsite import cli
from bizsite.config import AppConfig, LoggingConfig
from bizsite.content import ContentError


@pytest.fixture
def restore_root_logging():
    original_handlers = list(logging.getLogger().handlers)
    for handler in logging.getLogger().handlers[:]:
        logging.getLogger().removeHandler(handler)
    try:
        yield
    finally:
        for handler in logging.getLogger().handlers[:]:
            logging.getLogger().removeHandler(handler)
            handler.close()
        for handler in original_handlers:
            logging.getLogger().addHandler(handler)


def test_configure_logging_defaults_to_console_only(restore_root_logging):
    cli.configure_logging("INFO")

    handlers = logging.getLogger().handlers
    assert any(isinstance(handler, logging.StreamHandler) for handler in handlers)
    assert not any(isinstance(handler, logging.FileHandler) for handler in handlers)


def test_configure_logging_with_log_file_creates_file_handler(
    restore_root_logging, tmp_path
):
    log_path = tmp_path / "nested" / "build.log"
    cli.configure_logging("INFO", str(log_path))

    assert log_path.exists()
    handlers = logging.getLogger().handlers
    assert any(isinstance(handler, logging.FileHandler) for handler in handlers)


def test_configure_logging_rejects_unknown_level(restore_root_logging):
    with pytest.raises(ValueError):
        cli.configure_logging("LOUD")


def _patch_config(monkeypatch, app_config):
    monkeypatch.setattr(cli, "configure_logging", lambda level, log_file=None: None)
    monkeypatch.setattr(cli, "parse_app_config", lambda path: app_config)
    monkeypatch.setattr(cli, "parse_env_config", lambda path: {})


def test_main_loads_config_and_runs(monkeypatch, capsys):
    _patch_config(
        monkeypatch,
        AppConfig(content_file="blog.json", output_dir="dist", production=True),
    )
    captured = {}

    def fake_execute(config):
        captured["config"] = config
        return SimpleNamespace(output_text="built")

    monkeypatch.setattr(cli, "execute", fake_execute)

    exit_code = cli.main(["--config", "configs/test.xml"])

    assert exit_code == 0
    assert captured["config"].content_file == "blog.json"
    assert captured["config"].output_dir == "dist"
    assert captured["config"].production is True
    assert "built" in capsys.readouterr().out


def test_main_flags_override_config(monkeypatch):
    _patch_config(
        monkeypatch,
        AppConfig(content_file="blog.json", output_dir="dist", production=True),
    )
    captured = {}
    monkeypatch.setattr(
        cli,
        "execute",
        lambda config: captured.update(config=config) or SimpleNamespace(output_text=""),
    )

    cli.main(["--output", "preview", "--drafts", "--font", "Inter.ttf"])

    assert captured["config"].output_dir == "preview"
    assert captured["config"].production is False
    assert captured["config"].font_path == "Inter.ttf"


def test_main_cli_overrides_logging(monkeypatch):
    captured_log_config = {}

    def fake_configure(level, log_file=None):
        captured_log_config["level"] = level
        captured_log_config["file"] = log_file

    monkeypatch.setattr(cli, "configure_logging", fake_configure)
    monkeypatch.setattr(
        cli,
        "parse_app_config",
        lambda path: AppConfig(
            content_file="blog.json",
            logging=LoggingConfig(level="INFO", file="config.log"),
        ),
    )
    monkeypatch.setattr(cli, "execute", lambda config: SimpleNamespace(output_text=""))

    cli.main(["--log-level", "DEBUG", "--log-file", "cli.log"])

    assert captured_log_config == {"level": "DEBUG", "file": "cli.log"}


def test_main_loads_env_file(monkeypatch):
    _patch_config(
        monkeypatch, AppConfig(content_file="blog.json", env_file="env.xml")
    )
    monkeypatch.setattr(
        cli, "parse_env_config", lambda path: {"BIZSITE_TEST_VAR": "from-env"}
    )
    monkeypatch.setattr(cli, "execute", lambda config: SimpleNamespace(output_text=""))
    monkeypatch.setenv("BIZSITE_TEST_VAR", "placeholder")

    cli.main([])

    assert os.environ["BIZSITE_TEST_VAR"] == "from-env"


def test_main_returns_error_code_on_content_failure(monkeypatch, caplog):
    _patch_config(monkeypatch, AppConfig(content_file="blog.json"))

    def failing_execute(config):
        raise ContentError("Content snapshot not found: blog.json")

    monkeypatch.setattr(cli, "execute", failing_execute)

    assert cli.main([]) == 1
    assert "Content snapshot not found" in caplog.text


def test_main_reports_config_errors_through_parser(monkeypatch):
    def bad_config(path):
        raise ValueError("Config missing <content> path")

    monkeypatch.setattr(cli, "parse_app_config", bad_config)

    with pytest.raises(SystemExit) as excinfo:
        cli.main([])

    assert excinfo.value.code == 2
