"""Tests pour la configuration pydantic-settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from videostore.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("DATABASE_URL", "DEFAULT_PAGE_LIMIT", "LOG_LEVEL"):
            monkeypatch.delenv(f"VIDEOSTORE_{name}", raising=False)

        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite:///videostore.db"
        assert settings.default_page_limit == 10
        assert settings.log_level == "INFO"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("VIDEOSTORE_DATABASE_URL", "sqlite://")
        monkeypatch.setenv("VIDEOSTORE_LOG_LEVEL", "debug")
        monkeypatch.setenv("VIDEOSTORE_DEFAULT_PAGE_LIMIT", "25")

        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite://"
        assert settings.log_level == "DEBUG"
        assert settings.default_page_limit == 25

    def test_page_limit_is_capped(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, default_page_limit=101)

    def test_log_file_is_expanded(self):
        settings = Settings(_env_file=None, log_file="~/videostore.log")

        assert settings.log_file == Path.home() / "videostore.log"
