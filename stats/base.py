"""
stats/base.py

Declarative descriptors for statistical domains and the shared numeric
coercion rules used by every normalizer.

One :class:`DomainDescriptor` instance exists per statistics endpoint family
(formation, candidat, prospection, appairage, atelier_tre).  The generic
normalizers in :mod:`stats.rows`, :mod:`stats.labels`, :mod:`stats.totals`
and :mod:`stats.overview` are parameterised entirely by these descriptors;
no domain-specific branching lives in the engine itself.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Mapping

EM_DASH = "—"
TOTAL_KEY = "total"
TOTAL_LABEL = "Total"


# ---------------------------------------------------------------------------
# Numeric coercion
# ---------------------------------------------------------------------------


def _is_real_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def coerce_number(value: Any) -> float | int | None:
    """
    Coerce a loosely-typed payload value into a finite number.

    Returns ``None`` when the value is absent, not number-like, or coerces
    to NaN / infinity.  Integral floats parsed from strings come back as
    ``int`` so counts stay counts.
    """

    if _is_real_number(value):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        try:
            parsed = float(stripped)
        except ValueError:
            return None
        if not math.isfinite(parsed):
            return None
        return int(parsed) if parsed.is_integer() else parsed
    return None


def coerce_count(value: Any) -> float | int:
    """
    Coerce a metric count: unusable or negative values become ``0``.
    """

    number = coerce_number(value)
    if number is None or number < 0:
        return 0
    return number


def safe_rate(numerator: float, denominator: float, scale: float = 100.0) -> float:
    """
    ``numerator / max(denominator, 1) * scale``.

    An empty group therefore yields ``0.0`` instead of NaN or infinity.
    """

    return numerator / max(denominator, 1) * scale


# ---------------------------------------------------------------------------
# Descriptor building blocks
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RateSpec:
    """
    A derived percentage: ``output = numerator / sum(denominator) * scale``.

    Field names may be dotted paths (``"statuts.appairage_ok"``) when the
    rate is applied to overview payloads with nested sections.
    """

    output: str
    numerator: str
    denominator: tuple[str, ...]
    scale: float = 100.0

    def fields(self) -> tuple[str, ...]:
        return (self.numerator, *self.denominator)


@dataclass(frozen=True)
class LabelRule:
    """
    How a grouped row is labelled for one grouping dimension.

    ``name_fields`` entries are tried in order; a tuple entry is a composite
    name whose non-blank parts are joined with a space.  ``id_fields`` feed
    the ``placeholder`` template (``"Centre #{id}"``) and fall back to the
    row's ``group_key``.  ``value_labels`` translates coded values.
    """

    name_fields: tuple[str | tuple[str, ...], ...] = ()
    id_fields: tuple[str, ...] = ()
    placeholder: str | None = None
    value_labels: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class FilterRules:
    """
    Domain-specific filter encoding rules layered on the uniform codec.
    """

    integer_fields: tuple[str, ...] = ()
    departement_width: int | None = None


@dataclass(frozen=True)
class DomainDescriptor:
    """
    Everything the generic engine needs to know about one statistics domain.
    """

    name: str
    endpoint: str
    dimensions: tuple[str, ...]
    metrics: tuple[str, ...]
    rates: tuple[RateSpec, ...] = ()
    labels: Mapping[str, LabelRule] = field(default_factory=dict)
    attributes: tuple[str, ...] = ()
    collect_extra_metrics: bool = False
    overview_metrics: tuple[str, ...] = ()
    overview_sections: tuple[str, ...] = ()
    overview_rates: tuple[RateSpec, ...] = ()
    repartition_keys: Mapping[str, str] = field(default_factory=dict)
    tops_keys: tuple[str, ...] = ()
    latest_endpoint: str | None = None
    filter_rules: FilterRules = field(default_factory=FilterRules)

    @property
    def rate_fields(self) -> tuple[str, ...]:
        return tuple(rate.output for rate in self.rates)

    @property
    def grouped_endpoint(self) -> str:
        return f"{self.endpoint}grouped/"

    @property
    def tops_endpoint(self) -> str | None:
        return f"{self.endpoint}tops/" if self.tops_keys else None

    def supports_dimension(self, dimension: str) -> bool:
        return dimension in self.dimensions
