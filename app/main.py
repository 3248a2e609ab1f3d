from __future__ import annotations

import logging
import os
from urllib.parse import urlparse

from fastapi import FastAPI

from app.config import load_env_files
from app.schemas.stats import HealthResponse
from stats.registry import DOMAIN_REGISTRY


def _validate_env() -> None:
    """
    Validate environment variables at startup.

    Raises RuntimeError listing every invalid variable so the operator can
    fix all problems in one restart cycle.  Unset variables fall back to
    their defaults; only values that are set but unusable are rejected.
    """

    load_env_files()

    errors: list[str] = []

    base_url = os.getenv("STATS_API_BASE_URL")
    if base_url is not None and base_url.strip():
        parsed = urlparse(base_url.strip())
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            errors.append(
                f"STATS_API_BASE_URL='{base_url}' is not a valid http(s) URL."
            )

    for name in ("STATS_API_TIMEOUT_SECONDS", "STATS_QUERY_STALE_SECONDS"):
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            continue
        try:
            float(raw)
        except ValueError:
            errors.append(f"{name}='{raw}' is not a number.")

    for name in ("STATS_QUERY_MAX_WORKERS", "STATS_LIST_PAGE_SIZE", "STATS_LATEST_LIMIT"):
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            continue
        try:
            int(raw)
        except ValueError:
            errors.append(f"{name}='{raw}' is not an integer.")

    if errors:
        raise RuntimeError(
            "Startup validation failed, invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Training Statistics API",
        version="1.0.0",
    )

    from app.api.routers import stats_router

    application.include_router(stats_router)

    @application.get("/health", response_model=HealthResponse)
    def healthcheck() -> HealthResponse:
        return HealthResponse(status="ok", domains=sorted(DOMAIN_REGISTRY))

    logging.getLogger(__name__).info("Statistics API ready domains=%d", len(DOMAIN_REGISTRY))
    return application


app = create_app()
