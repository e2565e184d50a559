"""Tests for configuration loading."""

from pathlib import Path

import pytest

from shelflog.config import Config, get_config, reset_config


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Clear shelflog variables and the cached config."""
    for name in (
        "SHELFLOG_DB_PATH",
        "SHELFLOG_DB_TIMEOUT",
        "SHELFLOG_ACTIVITY_WINDOW_DAYS",
        "SHELFLOG_RECOMMENDATION_LIMIT",
        "SHELFLOG_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


class TestConfig:
    """Tests for Config."""

    def test_defaults(self):
        config = Config.from_env()

        assert config.db_path == Path.home() / ".shelflog" / "shelflog.db"
        assert config.db_timeout == 5.0
        assert config.activity_window_days == 365
        assert config.recommendation_limit == 10
        assert config.log_level == "warning"

    def test_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SHELFLOG_DB_PATH", str(tmp_path / "books.db"))
        monkeypatch.setenv("SHELFLOG_DB_TIMEOUT", "2.5")
        monkeypatch.setenv("SHELFLOG_ACTIVITY_WINDOW_DAYS", "30")
        monkeypatch.setenv("SHELFLOG_RECOMMENDATION_LIMIT", "5")
        monkeypatch.setenv("SHELFLOG_LOG_LEVEL", "DEBUG")

        config = Config.from_env()

        assert config.db_path == tmp_path / "books.db"
        assert config.db_timeout == 2.5
        assert config.activity_window_days == 30
        assert config.recommendation_limit == 5
        assert config.log_level == "debug"
        assert config.validate() == []

    def test_validate_reports_bad_values(self, tmp_path):
        config = Config(
            db_path=tmp_path / "books.db",
            db_timeout=0,
            activity_window_days=-1,
            recommendation_limit=0,
            log_level="loud",
        )

        errors = config.validate()

        assert len(errors) == 4

    def test_global_config_cached(self, monkeypatch):
        first = get_config()
        monkeypatch.setenv("SHELFLOG_RECOMMENDATION_LIMIT", "3")
        assert get_config() is first

        reset_config()
        assert get_config().recommendation_limit == 3
