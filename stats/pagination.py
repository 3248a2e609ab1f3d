"""
stats/pagination.py

Normalization of "list" endpoint payloads into one paginated structure.

The backend has gone through several envelope conventions.  Detection is an
ordered tuple of ``(predicate, extractor)`` rules; the first predicate that
matches wins and the final fallback always matches, so detection is total.
New envelope shapes are added as new rules; the order of existing rules
never changes, so historical payloads keep their classification.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from stats.base import coerce_number
from stats.logging_utils import log_event

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaginatedResult:
    """
    Canonical paginated list: ``len(results) <= count``.
    """

    count: int = 0
    next: str | None = None
    previous: str | None = None
    results: list[Any] = field(default_factory=list)


def _cursor(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _from_envelope(envelope: Mapping[str, Any], items: list[Any]) -> PaginatedResult:
    results = list(items)
    explicit = coerce_number(envelope.get("count"))
    count = int(explicit) if explicit is not None and explicit >= 0 else len(results)
    return PaginatedResult(
        count=max(count, len(results)),
        next=_cursor(envelope.get("next")),
        previous=_cursor(envelope.get("previous")),
        results=results,
    )


def _has_list(payload: Any, key: str) -> bool:
    return isinstance(payload, Mapping) and isinstance(payload.get(key), list)


def _is_flat_envelope(payload: Any) -> bool:
    return _has_list(payload, "results") or _has_list(payload, "data")


def _extract_flat(payload: Mapping[str, Any]) -> PaginatedResult:
    key = "results" if _has_list(payload, "results") else "data"
    return _from_envelope(payload, payload[key])


_Rule = tuple[Callable[[Any], bool], Callable[[Any], PaginatedResult]]

_ENVELOPE_RULES: tuple[_Rule, ...] = (
    # 1. bare array
    (
        lambda payload: isinstance(payload, list),
        lambda payload: PaginatedResult(count=len(payload), results=list(payload)),
    ),
    # 2. {results: [...], count?, next?, previous?}
    (
        lambda payload: _has_list(payload, "results"),
        lambda payload: _from_envelope(payload, payload["results"]),
    ),
    # 3. {data: [...], count?, ...}
    (
        lambda payload: _has_list(payload, "data"),
        lambda payload: _from_envelope(payload, payload["data"]),
    ),
    # 4. {data: {results|data: [...]}} -- one level of nesting only
    (
        lambda payload: isinstance(payload, Mapping) and _is_flat_envelope(payload.get("data")),
        lambda payload: _extract_flat(payload["data"]),
    ),
)


def normalize_list(payload: Any) -> PaginatedResult:
    """
    Convert any list-endpoint payload into a :class:`PaginatedResult`.

    Unrecognised shapes (including ``None``, scalars and malformed objects)
    degrade to the empty result; this function never raises.
    """

    for matches, extract in _ENVELOPE_RULES:
        if matches(payload):
            return extract(payload)

    log_event(
        logger,
        logging.DEBUG,
        "list_payload_unrecognized",
        payload_type=type(payload).__name__,
    )
    return PaginatedResult()
