"""
app/connectors/stats_api.py

HTTP client for the backend statistics API.

Only transport concerns live here: URL building, authentication header,
timeouts, status checking and JSON decoding.  Every transport failure is
raised as :class:`StatsRequestError`; payload shape is not inspected.
Requests are never retried automatically.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping

import requests

from app.config import StatsAPISettings
from stats.logging_utils import log_event

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "Unknown error"

_ABSOLUTE_URL = re.compile(r"^https?://", re.IGNORECASE)
_API_PREFIX = re.compile(r"^/api(/|$)", re.IGNORECASE)


class StatsRequestError(RuntimeError):
    """
    Raised when a statistics request fails at the transport level.
    """

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code


def normalize_endpoint(endpoint: str) -> str:
    """
    Normalize an endpoint path relative to the API base URL.

    A duplicated ``/api/`` prefix is stripped, a leading slash is forced and
    accidental ``//`` are collapsed.  Absolute URLs are returned untouched.
    The transformation is idempotent.
    """

    trimmed = (endpoint or "").strip()
    if _ABSOLUTE_URL.match(trimmed):
        return trimmed

    path = trimmed if trimmed.startswith("/") else f"/{trimmed}"
    path = _API_PREFIX.sub("/", path)
    return re.sub(r"/{2,}", "/", path)


def _first_field_error(data: Mapping[str, Any]) -> str | None:
    for value in data.values():
        if isinstance(value, str):
            return value
        if isinstance(value, list) and value and isinstance(value[0], str):
            return value[0]
    return None


def extract_error_message(data: Any) -> str | None:
    """
    Pull a human-readable message out of an error response body.

    Order: plain string body, ``detail``, ``message``, first field error.
    """

    if isinstance(data, str):
        return data or None
    if isinstance(data, Mapping):
        for key in ("detail", "message"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
        return _first_field_error(data)
    return None


def _response_body(response: requests.Response | None) -> Any:
    if response is None:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text or None


class StatsAPIClient:
    """
    Thin synchronous client for ``GET`` calls against the statistics API.
    """

    def __init__(
        self,
        *,
        settings: StatsAPISettings,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = settings.base_url.rstrip("/")
        self._timeout_seconds = settings.timeout_seconds
        self._session = session or requests.Session()
        self._headers = {"Accept": "application/json"}
        if settings.api_token:
            self._headers["Authorization"] = f"Bearer {settings.api_token}"

    def url_for(self, endpoint: str) -> str:
        path = normalize_endpoint(endpoint)
        if _ABSOLUTE_URL.match(path):
            return path
        return f"{self._base_url}{path}"

    def get_json(self, endpoint: str, params: Mapping[str, Any] | None = None) -> Any:
        """
        Execute a GET request and return the decoded JSON body.

        Raises
        ------
        StatsRequestError
            On network failure, timeout, non-2xx status or a non-JSON body.
        """

        url = self.url_for(endpoint)
        try:
            response = self._session.request(
                method="GET",
                url=url,
                params=dict(params or {}),
                headers=self._headers,
                timeout=self._timeout_seconds,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise self._http_error(url, exc) from exc
        except requests.RequestException as exc:
            log_event(logger, logging.ERROR, "stats_request_failed", url=url, error=str(exc))
            raise StatsRequestError(str(exc) or UNKNOWN_ERROR_MESSAGE) from exc

        try:
            return response.json()
        except ValueError as exc:
            log_event(logger, logging.ERROR, "stats_response_not_json", url=url)
            raise StatsRequestError(
                "Statistics response was not valid JSON.",
                status=response.status_code,
            ) from exc

    @staticmethod
    def _http_error(url: str, exc: requests.HTTPError) -> StatsRequestError:
        response = exc.response
        status = response.status_code if response is not None else None
        body = _response_body(response)
        message = extract_error_message(body) or str(exc) or UNKNOWN_ERROR_MESSAGE
        code = body.get("code") if isinstance(body, Mapping) else None
        log_event(
            logger,
            logging.ERROR,
            "stats_request_failed",
            url=url,
            status=status,
            error=message,
        )
        return StatsRequestError(
            message,
            status=status,
            code=code if isinstance(code, str) else None,
        )
