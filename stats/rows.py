"""
stats/rows.py

Grouped-row normalization.

A "grouped" statistics endpoint returns one loosely-typed row per value of
the grouping dimension.  :func:`normalize_row` coerces such a row into a
strict :class:`GroupedRow` using the domain's descriptor:

* every declared metric is present and is a finite, non-negative number;
* rate fields are taken from the backend when usable, otherwise derived as
  ``numerator / max(denominator, 1) * 100``;
* join/identity fields used for labelling are kept as attributes.

Nothing here raises on malformed input; anomalies degrade to defaults.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from stats.base import (
    TOTAL_KEY,
    DomainDescriptor,
    RateSpec,
    coerce_count,
    coerce_number,
    safe_rate,
)
from stats.logging_utils import log_event

logger = logging.getLogger(__name__)

GroupKey = str | int | float | None

_RESERVED_FIELDS = frozenset({"group_key", "group_label", "id"})


@dataclass(frozen=True)
class GroupedRow:
    """
    One aggregate for a single value of a grouping dimension.
    """

    group_key: GroupKey = None
    group_label: str | None = None
    attributes: dict[str, Any] = field(default_factory=dict)
    metrics: dict[str, float | int] = field(default_factory=dict)

    @property
    def is_total(self) -> bool:
        return str(self.group_key).strip().lower() == TOTAL_KEY


@dataclass(frozen=True)
class GroupedResult:
    """
    A grouped statistics response: rows in backend order.
    """

    group_by: str
    results: list[GroupedRow] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def attribute_fields(descriptor: DomainDescriptor) -> tuple[str, ...]:
    """
    Declared attributes plus every field a label rule reads.
    """

    names: list[str] = list(descriptor.attributes)
    for rule in descriptor.labels.values():
        for entry in rule.name_fields:
            names.extend(entry if isinstance(entry, tuple) else (entry,))
        names.extend(rule.id_fields)
    return tuple(dict.fromkeys(names))


def _group_key(raw: Mapping[str, Any]) -> GroupKey:
    for candidate in (raw.get("group_key"), raw.get("id")):
        if candidate is None or isinstance(candidate, bool):
            continue
        if isinstance(candidate, (str, int, float)):
            return candidate
    return None


def _is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, float, bool))


def derive_rate(rate: RateSpec, values: Mapping[str, Any]) -> float:
    numerator = coerce_count(values.get(rate.numerator))
    denominator = sum(coerce_count(values.get(name)) for name in rate.denominator)
    return safe_rate(numerator, denominator, rate.scale)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def normalize_row(raw: Any, descriptor: DomainDescriptor) -> GroupedRow:
    """
    Coerce one raw grouped row into a :class:`GroupedRow`.
    """

    source: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}

    metrics: dict[str, float | int] = {
        name: coerce_count(source.get(name)) for name in descriptor.metrics
    }

    for rate in descriptor.rates:
        supplied = coerce_number(source.get(rate.output))
        metrics[rate.output] = supplied if supplied is not None else derive_rate(rate, metrics)

    attribute_names = attribute_fields(descriptor)
    attributes = {
        name: source[name]
        for name in attribute_names
        if name in source and _is_scalar(source[name])
    }

    if descriptor.collect_extra_metrics:
        reserved = _RESERVED_FIELDS | set(attribute_names) | set(metrics)
        for name, value in source.items():
            if name in reserved or not isinstance(name, str):
                continue
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                metrics[name] = coerce_count(value)

    label = source.get("group_label")
    return GroupedRow(
        group_key=_group_key(source),
        group_label=label if isinstance(label, str) else None,
        attributes=attributes,
        metrics=metrics,
    )


def normalize_grouped(payload: Any, descriptor: DomainDescriptor, by: str) -> GroupedResult:
    """
    Normalize a full grouped response.

    Rows sharing a non-null ``group_key`` after the first are dropped so the
    grouping key stays unique within the result.
    """

    source: Mapping[str, Any] = payload if isinstance(payload, Mapping) else {}
    echoed = source.get("group_by", source.get("by"))
    group_by = echoed if isinstance(echoed, str) and echoed else by

    raw_rows = source.get("results")
    if not isinstance(raw_rows, list):
        if payload is not None:
            log_event(
                logger,
                logging.DEBUG,
                "grouped_payload_without_results",
                domain=descriptor.name,
                group_by=group_by,
            )
        raw_rows = []

    rows: list[GroupedRow] = []
    seen: set[str] = set()
    for raw in raw_rows:
        row = normalize_row(raw, descriptor)
        if row.group_key is not None:
            marker = str(row.group_key)
            if marker in seen:
                log_event(
                    logger,
                    logging.DEBUG,
                    "grouped_row_duplicate_key",
                    domain=descriptor.name,
                    group_key=marker,
                )
                continue
            seen.add(marker)
        rows.append(row)

    return GroupedResult(group_by=group_by, results=rows)
