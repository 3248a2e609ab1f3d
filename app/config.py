"""
app/config.py

Environment-driven settings for the statistics client and query lifecycle.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Callable, TypeVar

_PROJECT_ROOT = Path(__file__).resolve().parents[1]
_ENV_FILENAMES = (".env", ".env.local")

N = TypeVar("N", int, float)


def _parse_env_line(raw_line: str) -> tuple[str, str] | None:
    line = raw_line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    key, value = line.split("=", 1)
    key = key.strip()
    if not key:
        return None
    return key, value.strip().strip('"').strip("'")


def load_env_files(project_root: Path | None = None) -> None:
    """
    Load KEY=VALUE pairs from `.env` and `.env.local` under *project_root*.
    Variables already set in the process environment win.
    """

    root = project_root or _PROJECT_ROOT
    for env_path in (root / name for name in _ENV_FILENAMES):
        if not env_path.is_file():
            continue
        pairs = filter(None, map(_parse_env_line, env_path.read_text(encoding="utf-8").splitlines()))
        for key, value in pairs:
            os.environ.setdefault(key, value)


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    load_env_files()


def _env_text(name: str) -> str | None:
    """
    Stripped value of *name*, or ``None`` when unset or blank.
    """

    _load_env_once()
    stripped = (os.getenv(name) or "").strip()
    return stripped or None


def _env_number(name: str, parse: Callable[[str], N], default: N) -> N:
    raw_value = _env_text(name)
    if raw_value is None:
        return default
    try:
        return parse(raw_value)
    except ValueError:
        return default


@dataclass(frozen=True)
class StatsAPISettings:
    """
    Connection settings for the backend statistics API.
    """

    base_url: str = "http://localhost:8000/api"
    api_token: str | None = None
    timeout_seconds: float = 15.0


@dataclass(frozen=True)
class StatsQuerySettings:
    """
    Runtime settings for query lifecycles and list endpoints.
    """

    stale_seconds: float = 30.0
    max_workers: int = 4
    list_page_size: int = 20
    latest_limit: int = 10


@lru_cache(maxsize=1)
def get_stats_api_settings() -> StatsAPISettings:
    """
    Return cached statistics API settings from environment variables.
    """

    return StatsAPISettings(
        base_url=_env_text("STATS_API_BASE_URL") or "http://localhost:8000/api",
        api_token=_env_text("STATS_API_TOKEN"),
        timeout_seconds=max(1.0, _env_number("STATS_API_TIMEOUT_SECONDS", float, 15.0)),
    )


@lru_cache(maxsize=1)
def get_stats_query_settings() -> StatsQuerySettings:
    """
    Return cached query lifecycle settings from environment variables.
    """

    return StatsQuerySettings(
        stale_seconds=max(0.0, _env_number("STATS_QUERY_STALE_SECONDS", float, 30.0)),
        max_workers=max(1, _env_number("STATS_QUERY_MAX_WORKERS", int, 4)),
        list_page_size=max(1, _env_number("STATS_LIST_PAGE_SIZE", int, 20)),
        latest_limit=max(1, _env_number("STATS_LATEST_LIMIT", int, 10)),
    )
