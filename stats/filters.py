"""
stats/filters.py

Filter codec: turns a UI-level filter mapping into the query-parameter map
sent to the statistics API.

Encoding rules
--------------
bool                  -> "true" / "false"
None, "" or blanks    -> key omitted
str                   -> stripped
list / tuple / set    -> empty members dropped, rest joined with "," under
                         ``<key>__in``; omitted when nothing remains
date / datetime       -> ISO date string
``*_min`` / ``*_max`` -> ``*__gte`` / ``*__lte``
anything else         -> passed through unchanged (validation is the
                         caller's job)

The codec is pure and idempotent: ``encode_filters(encode_filters(f)) ==
encode_filters(f)``.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping

from stats.base import FilterRules

WireValue = str | int | float

IN_SUFFIX = "__in"
RANGE_SUFFIXES: dict[str, str] = {
    "_min": "__gte",
    "_max": "__lte",
}


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _wire_name(key: str) -> str:
    for suffix, wire_suffix in RANGE_SUFFIXES.items():
        if key.endswith(suffix) and len(key) > len(suffix):
            return key[: -len(suffix)] + wire_suffix
    return key


def _scalar(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        return value.strip()
    return value


def _join_multi(values: Any) -> str | None:
    members = [str(_scalar(item)) for item in values if not _is_blank(item)]
    members = [member for member in members if member]
    if not members:
        return None
    return ",".join(members)


def _apply_domain_rules(key: str, value: Any, rules: FilterRules) -> Any:
    if key in rules.integer_fields and isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return value
    if key == "departement" and rules.departement_width and isinstance(value, (str, int)):
        width = rules.departement_width
        return str(value).strip().rjust(width, "0")[:width]
    return value


def encode_filters(
    filters: Mapping[str, Any] | None,
    rules: FilterRules | None = None,
) -> dict[str, WireValue]:
    """
    Encode *filters* into a sanitized wire parameter map.

    Never raises; keys with empty values never appear in the output.
    """

    effective_rules = rules or FilterRules()
    encoded: dict[str, WireValue] = {}
    if not filters:
        return encoded

    for key, value in filters.items():
        if _is_blank(value):
            continue

        if isinstance(value, (list, tuple, set, frozenset)):
            joined = _join_multi(sorted(value, key=str) if isinstance(value, (set, frozenset)) else value)
            if joined is None:
                continue
            name = key if key.endswith(IN_SUFFIX) else f"{key}{IN_SUFFIX}"
            encoded[name] = joined
            continue

        wire_value = _apply_domain_rules(key, _scalar(value), effective_rules)
        if _is_blank(wire_value):
            continue
        encoded[_wire_name(key)] = wire_value

    return encoded


def filters_cache_key(params: Mapping[str, Any]) -> tuple[tuple[str, str], ...]:
    """
    Hashable, order-independent key for an encoded parameter map.
    """

    return tuple(sorted((str(key), repr(value)) for key, value in params.items()))
