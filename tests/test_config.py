"""
tests/test_config.py

Unit tests for environment-driven settings and startup validation.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest

from app.config import (
    _load_env_once,
    get_stats_api_settings,
    get_stats_query_settings,
    load_env_files,
)
from app.main import _validate_env

_ENV_NAMES = (
    "STATS_API_BASE_URL",
    "STATS_API_TOKEN",
    "STATS_API_TIMEOUT_SECONDS",
    "STATS_QUERY_STALE_SECONDS",
    "STATS_QUERY_MAX_WORKERS",
    "STATS_LIST_PAGE_SIZE",
    "STATS_LATEST_LIMIT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    get_stats_api_settings.cache_clear()
    get_stats_query_settings.cache_clear()
    _load_env_once.cache_clear()
    yield
    get_stats_api_settings.cache_clear()
    get_stats_query_settings.cache_clear()


class TestStatsAPISettings:
    def test_defaults(self) -> None:
        settings = get_stats_api_settings()
        assert settings.base_url == "http://localhost:8000/api"
        assert settings.api_token is None
        assert settings.timeout_seconds == 15.0

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STATS_API_BASE_URL", "https://stats.example.org/api")
        monkeypatch.setenv("STATS_API_TOKEN", " secret ")
        monkeypatch.setenv("STATS_API_TIMEOUT_SECONDS", "3.5")
        settings = get_stats_api_settings()
        assert settings.base_url == "https://stats.example.org/api"
        assert settings.api_token == "secret"
        assert settings.timeout_seconds == 3.5

    def test_invalid_and_blank_values_fall_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STATS_API_TIMEOUT_SECONDS", "soon")
        monkeypatch.setenv("STATS_API_TOKEN", "   ")
        settings = get_stats_api_settings()
        assert settings.timeout_seconds == 15.0
        assert settings.api_token is None

    def test_settings_are_cached(self) -> None:
        assert get_stats_api_settings() is get_stats_api_settings()


class TestStatsQuerySettings:
    def test_defaults(self) -> None:
        settings = get_stats_query_settings()
        assert settings.stale_seconds == 30.0
        assert settings.max_workers == 4
        assert settings.list_page_size == 20
        assert settings.latest_limit == 10

    def test_values_are_clamped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STATS_QUERY_STALE_SECONDS", "-1")
        monkeypatch.setenv("STATS_QUERY_MAX_WORKERS", "0")
        monkeypatch.setenv("STATS_LATEST_LIMIT", "25")
        settings = get_stats_query_settings()
        assert settings.stale_seconds == 0.0
        assert settings.max_workers == 1
        assert settings.latest_limit == 25


class TestEnvFiles:
    def test_env_files_do_not_override_process_env(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        (tmp_path / ".env").write_text(
            "# comment\nSTATS_API_TOKEN='from-file'\nSTATS_LIST_PAGE_SIZE=50\nnot a pair\n",
            encoding="utf-8",
        )
        monkeypatch.setattr(os, "environ", {**os.environ, "STATS_LIST_PAGE_SIZE": "5"})

        load_env_files(tmp_path)

        assert os.environ["STATS_API_TOKEN"] == "from-file"
        assert os.environ["STATS_LIST_PAGE_SIZE"] == "5"

    def test_local_file_only_fills_missing_keys(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        (tmp_path / ".env").write_text('STATS_LATEST_LIMIT="7"\n=orphan\n', encoding="utf-8")
        (tmp_path / ".env.local").write_text("STATS_LATEST_LIMIT=9\nSTATS_QUERY_MAX_WORKERS=2\n", encoding="utf-8")
        monkeypatch.setattr(os, "environ", {})

        load_env_files(tmp_path)

        assert os.environ == {"STATS_LATEST_LIMIT": "7", "STATS_QUERY_MAX_WORKERS": "2"}

    def test_blank_numeric_value_uses_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STATS_QUERY_STALE_SECONDS", "  ")
        assert get_stats_query_settings().stale_seconds == 30.0


class TestStartupValidation:
    def test_defaults_are_valid(self) -> None:
        _validate_env()

    def test_invalid_values_are_all_reported(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STATS_API_BASE_URL", "localhost:8000")
        monkeypatch.setenv("STATS_QUERY_MAX_WORKERS", "many")
        with pytest.raises(RuntimeError) as excinfo:
            _validate_env()
        message = str(excinfo.value)
        assert "STATS_API_BASE_URL" in message
        assert "STATS_QUERY_MAX_WORKERS" in message
