"""
stats/overview.py

Normalization of overview (``kpis``) and top-N payloads.

Overview payloads carry a ``kpis`` object of scalar metrics plus nested
numeric sections (``candidats``, ``presences``, ``statuts``...) and, for
some domains, ``repartition`` breakdown lists.  Every declared piece is
always present after normalization; missing or malformed pieces default.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from stats.base import DomainDescriptor, RateSpec, coerce_count, coerce_number, safe_rate


@dataclass(frozen=True)
class KeyCount:
    """
    One entry of a repartition breakdown.
    """

    key: str | None
    count: float | int
    label: str | None = None


@dataclass(frozen=True)
class OverviewResult:
    kpis: dict[str, float | int] = field(default_factory=dict)
    sections: dict[str, dict[str, float | int]] = field(default_factory=dict)
    repartition: dict[str, list[KeyCount]] = field(default_factory=dict)
    filters_echo: dict[str, str] = field(default_factory=dict)


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _walk(source: Mapping[str, Any], path: str) -> Any:
    current: Any = source
    for segment in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(segment)
    return current


def _numeric_section(value: Any) -> dict[str, float | int]:
    section: dict[str, float | int] = {}
    for name, raw in _mapping(value).items():
        if isinstance(raw, Mapping):
            continue
        section[str(name)] = coerce_count(raw)
    return section


def _key_counts(items: Any, key_field: str) -> list[KeyCount]:
    if not isinstance(items, list):
        return []
    entries: list[KeyCount] = []
    for item in items:
        source = _mapping(item)
        raw_key = source.get(key_field)
        key = None if raw_key is None else str(raw_key)
        label = source.get("label")
        entries.append(
            KeyCount(
                key=key,
                count=coerce_count(source.get("count")),
                label=label if isinstance(label, str) and label.strip() else None,
            )
        )
    return entries


def _resolve_path(
    kpis: Mapping[str, Any],
    sections: Mapping[str, Mapping[str, Any]],
    path: str,
) -> Any:
    if "." not in path:
        return kpis.get(path)
    section_name, _, name = path.rpartition(".")
    return sections.get(section_name, {}).get(name)


def _overview_rate(
    rate: RateSpec,
    raw_kpis: Mapping[str, Any],
    kpis: Mapping[str, Any],
    sections: Mapping[str, Mapping[str, Any]],
) -> float:
    supplied = coerce_number(raw_kpis.get(rate.output))
    if supplied is not None:
        return supplied
    numerator = coerce_count(_resolve_path(kpis, sections, rate.numerator))
    denominator = sum(
        coerce_count(_resolve_path(kpis, sections, name)) for name in rate.denominator
    )
    return safe_rate(numerator, denominator, rate.scale)


def normalize_overview(payload: Any, descriptor: DomainDescriptor) -> OverviewResult:
    """
    Normalize an overview response for *descriptor*'s domain.
    """

    source = _mapping(payload)
    raw_kpis = _mapping(source.get("kpis"))

    kpis: dict[str, float | int] = {
        name: coerce_count(raw_kpis.get(name)) for name in descriptor.overview_metrics
    }

    sections: dict[str, dict[str, float | int]] = {}
    for name in descriptor.overview_sections:
        raw_section = _walk(raw_kpis, name)
        if not isinstance(raw_section, Mapping):
            raw_section = _walk(source, name)
        sections[name] = _numeric_section(raw_section)

    for rate in descriptor.overview_rates:
        kpis[rate.output] = _overview_rate(rate, raw_kpis, kpis, sections)

    raw_repartition = _mapping(source.get("repartition"))
    repartition = {
        name: _key_counts(raw_repartition.get(name), key_field)
        for name, key_field in descriptor.repartition_keys.items()
    }

    filters_echo = {
        str(key): str(value)
        for key, value in _mapping(source.get("filters_echo")).items()
        if value is not None
    }

    return OverviewResult(
        kpis=kpis,
        sections=sections,
        repartition=repartition,
        filters_echo=filters_echo,
    )


def normalize_tops(payload: Any, descriptor: DomainDescriptor) -> dict[str, list[dict[str, Any]]]:
    """
    Return every declared top-N list of *descriptor*, defaulting to ``[]``.
    """

    source = _mapping(payload)
    tops: dict[str, list[dict[str, Any]]] = {}
    for key in descriptor.tops_keys:
        items = source.get(key)
        if not isinstance(items, list):
            tops[key] = []
            continue
        tops[key] = [dict(item) for item in items if isinstance(item, Mapping)]
    return tops
