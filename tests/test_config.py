"""Tests for configuration loading and logging setup."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

from wordharvest.utils.config import (
    Config,
    ConfigError,
    LoggingConfig,
    load_config,
    merge_overrides,
    validate_config,
)
from wordharvest.utils.logger import setup_logging


class TestLoadConfig:
    def test_defaults_without_file(self) -> None:
        config = load_config()
        assert config.crawler.depth == 2
        assert config.crawler.min_word_length == 3
        assert config.crawler.max_word_length == 24
        assert config.crawler.scope == []
        assert config.crawler.respect_robots_txt is False
        assert config.output.path is None
        assert config.logging.level == "INFO"

    def test_yaml_overrides_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(
            "crawler:\n"
            "  depth: 0\n"
            "  scope: [blog.example.com]\n"
            "output:\n"
            "  json: true\n"
        )
        config = load_config(str(path))
        assert config.crawler.depth == 0
        assert config.crawler.scope == ["blog.example.com"]
        assert config.crawler.max_word_length == 24
        assert config.output.json is True

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(str(path)) == Config()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(str(tmp_path / "absent.yaml"))

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("crawler: [unclosed\n")
        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_unknown_key(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("crawler:\n  speed: 11\n")
        with pytest.raises(ConfigError, match="speed"):
            load_config(str(path))

    def test_invalid_value(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("crawler:\n  depth: -1\n")
        with pytest.raises(ConfigError, match="depth"):
            load_config(str(path))


class TestValidateConfig:
    def test_non_integer_rejected(self) -> None:
        config = Config()
        config.crawler.max_concurrent_requests = "many"
        with pytest.raises(ConfigError):
            validate_config(config)

    def test_unknown_log_level_rejected(self) -> None:
        config = Config()
        config.logging.level = "CHATTY"
        with pytest.raises(ConfigError):
            validate_config(config)


class TestMergeOverrides:
    def test_none_values_keep_existing(self) -> None:
        config = merge_overrides(Config(), "crawler", depth=None, min_word_length=5)
        assert config.crawler.depth == 2
        assert config.crawler.min_word_length == 5

    def test_original_untouched(self) -> None:
        original = Config()
        merge_overrides(original, "output", path="words.txt")
        assert original.output.path is None


class TestSetupLogging:
    def test_stderr_handler_with_time_stamps(self) -> None:
        root = setup_logging(LoggingConfig())
        handler = root.handlers[0]
        assert handler.stream is sys.stderr
        assert handler.formatter.datefmt == "%H:%M:%S"
        assert root.level == logging.INFO

    def test_debug_flag(self) -> None:
        root = setup_logging(LoggingConfig(), debug=True)
        assert root.level == logging.DEBUG

    def test_log_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "wordharvest.log"
        root = setup_logging(LoggingConfig(file=str(log_file)))
        logging.getLogger("wordharvest.test").info("to the file")
        for handler in root.handlers:
            handler.flush()
        assert "to the file" in log_file.read_text(encoding="utf-8")
