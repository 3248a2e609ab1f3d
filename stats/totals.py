"""
stats/totals.py

Client-side totals and derived rates across grouped rows.

Formulas
--------
metric total  = fsum(row.metric for row in rows)
rate total    = fsum(numerator) / max(fsum(denominator), 1) * 100

Rates are always re-derived from summed numerators and denominators.
Averaging per-row percentages is wrong as soon as group sizes differ.
``math.fsum`` keeps every sum exact-rounded and therefore independent of
row order.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Iterable

from stats.base import TOTAL_KEY, TOTAL_LABEL, DomainDescriptor, safe_rate
from stats.rows import GroupedResult, GroupedRow


def _as_count(value: float) -> float | int:
    return int(value) if float(value).is_integer() else value


def compute_totals(rows: Iterable[GroupedRow], descriptor: DomainDescriptor) -> GroupedRow:
    """
    Build the synthetic ``"total"`` row for *rows*.

    Returns a row with every metric and rate at ``0`` for empty input.
    """

    rate_outputs = set(descriptor.rate_fields)
    columns: dict[str, list[float]] = {name: [] for name in descriptor.metrics}

    for row in rows:
        for name, value in row.metrics.items():
            if name in rate_outputs:
                continue
            columns.setdefault(name, []).append(value)

    metrics: dict[str, float | int] = {
        name: _as_count(math.fsum(values)) for name, values in columns.items()
    }
    for rate in descriptor.rates:
        numerator = metrics.get(rate.numerator, 0)
        denominator = math.fsum(metrics.get(name, 0) for name in rate.denominator)
        metrics[rate.output] = safe_rate(numerator, denominator, rate.scale)

    return GroupedRow(group_key=TOTAL_KEY, group_label=TOTAL_LABEL, metrics=metrics)


def with_totals(result: GroupedResult, descriptor: DomainDescriptor) -> GroupedResult:
    """
    Return a copy of *result* with a totals row appended.

    When the backend already supplied a row keyed ``"total"`` (any case),
    the result is returned unchanged in content so totals never duplicate.
    """

    if any(row.is_total for row in result.results):
        return replace(result, results=list(result.results))
    totals = compute_totals(result.results, descriptor)
    return replace(result, results=[*result.results, totals])


def percentage(numerator: float, denominator: float) -> float:
    """
    Share of *numerator* in *denominator* as a percentage; ``0.0`` when the
    denominator is zero or negative.
    """

    if denominator <= 0:
        return 0.0
    return numerator / denominator * 100.0


def clamp_percent(value: float | None) -> int | None:
    """
    Round a percentage for display and clamp it to ``0..100``.
    """

    if value is None or not math.isfinite(value):
        return None
    return max(0, min(100, round(value)))
