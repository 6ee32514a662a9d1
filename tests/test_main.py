"""Tests for the command-line entry point.

The crawl itself is replaced by a stub scheduler; these tests cover flag
handling, configuration precedence and output.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List

import pytest

import main as cli
from wordharvest.utils.config import Config


class _StubScheduler:
    """Pretends to crawl and records how it was built."""

    instances: List["_StubScheduler"] = []

    def __init__(self, config, cache, scope, fetcher=None):
        self.config = config
        self.cache = cache
        self.scope = scope
        self.targets = None
        _StubScheduler.instances.append(self)

    async def run(self, targets):
        self.targets = list(targets)
        self.cache.update(["alpha", "beta", "alpha"])


@pytest.fixture
def stub_scheduler(monkeypatch: pytest.MonkeyPatch):
    _StubScheduler.instances = []
    monkeypatch.setattr(cli, "CrawlerScheduler", _StubScheduler)
    return _StubScheduler


def _config(*argv: str) -> Config:
    return cli.build_config(cli.build_parser().parse_args(list(argv)))


# ---------------------------------------------------------------------------
# Flag parsing
# ---------------------------------------------------------------------------

class TestBuildConfig:
    def test_defaults(self) -> None:
        config = _config("example.com")
        assert config.crawler.depth == 2
        assert config.crawler.min_word_length == 3
        assert config.crawler.max_word_length == 24
        assert config.crawler.no_filter is False
        assert config.output.json is False

    def test_short_flags(self) -> None:
        config = _config("example.com", "-d", "0", "-m", "4", "-n", "10", "-o", "out.txt", "-u", "docs")
        assert config.crawler.depth == 0
        assert config.crawler.min_word_length == 4
        assert config.crawler.max_word_length == 10
        assert config.crawler.url_filter == "docs"
        assert config.output.path == "out.txt"

    def test_bad_integer_falls_back_to_default(self, capsys: pytest.CaptureFixture) -> None:
        config = _config("example.com", "--depth", "deep")
        assert config.crawler.depth == 2
        assert "--depth" in capsys.readouterr().err

    def test_negative_integer_falls_back_to_default(self, capsys: pytest.CaptureFixture) -> None:
        config = _config("example.com", "--min-word-length", "-5")
        assert config.crawler.min_word_length == 3
        assert "--min-word-length" in capsys.readouterr().err

    def test_scope_is_comma_separated_and_repeatable(self) -> None:
        config = _config("example.com", "--scope", "a.example.com, b.example.com", "--scope", "c.example.com")
        assert config.crawler.scope == ["a.example.com", "b.example.com", "c.example.com"]

    def test_flags_override_config_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("crawler:\n  depth: 5\n  min_word_length: 6\noutput:\n  json: true\n")
        config = _config("example.com", "-c", str(path), "--depth", "1")
        assert config.crawler.depth == 1
        assert config.crawler.min_word_length == 6
        assert config.output.json is True

    def test_broken_config_file_falls_back_to_defaults(self, tmp_path: Path,
                                                       capsys: pytest.CaptureFixture) -> None:
        config = _config("example.com", "-c", str(tmp_path / "absent.yaml"))
        assert config == Config()
        assert "using defaults" in capsys.readouterr().err

    def test_targets_required(self) -> None:
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])


# ---------------------------------------------------------------------------
# Scope handling
# ---------------------------------------------------------------------------

class TestBuildScope:
    def test_invalid_url_filter_falls_back_to_domain_scope(self) -> None:
        config = _config("example.com", "-u", "(unclosed")
        app = cli.WordHarvestApp(config, ["example.com"])
        scope = app.build_scope()
        assert scope.url_filter is None
        assert scope.domains == ("example.com",)

    def test_url_filter_wins_over_scope(self) -> None:
        config = _config("example.com", "--scope", "blog.example.com", "-u", "example")
        scope = cli.WordHarvestApp(config, ["example.com"]).build_scope()
        assert scope.domains == ()
        assert scope.url_filter.pattern == "example"


# ---------------------------------------------------------------------------
# main()
# ---------------------------------------------------------------------------

class TestMain:
    def test_prints_wordlist(self, stub_scheduler, capsys: pytest.CaptureFixture) -> None:
        assert cli.main(["example.com"]) == 0
        assert sorted(capsys.readouterr().out.splitlines()) == ["alpha", "beta"]
        assert stub_scheduler.instances[0].targets == ["example.com"]

    def test_prints_json(self, stub_scheduler, capsys: pytest.CaptureFixture) -> None:
        assert cli.main(["example.com", "--json"]) == 0
        assert json.loads(capsys.readouterr().out) == {"alpha": 2, "beta": 1}

    def test_writes_output_file(self, stub_scheduler, tmp_path: Path,
                                capsys: pytest.CaptureFixture) -> None:
        target = tmp_path / "words.txt"
        assert cli.main(["example.com", "-o", str(target)]) == 0
        assert sorted(target.read_text(encoding="utf-8").splitlines()) == ["alpha", "beta"]
        assert capsys.readouterr().out == ""

    def test_unwritable_output_is_fatal(self, stub_scheduler, tmp_path: Path) -> None:
        target = tmp_path / "missing" / "words.txt"
        assert cli.main(["example.com", "-o", str(target)]) == 1
        assert not target.exists()

    def test_scope_passed_to_scheduler(self, stub_scheduler) -> None:
        cli.main(["https://example.com/start", "--scope", "*"])
        assert stub_scheduler.instances[0].scope.unrestricted
