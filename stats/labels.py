"""
stats/labels.py

Display-label resolution for grouped rows.

Fallback order (first non-blank wins):

1. ``group_label`` supplied by the backend
2. the dimension's denormalized name fields (e.g. ``centre__nom``)
3. an optional ``{dimension: {id: name}}`` dictionary lookup
4. ``"<Entity> #<id>"`` built from the dimension's id field or ``group_key``
5. ``"—"``

A friendly name anywhere in the row always beats an id placeholder, even
when the backend's ``group_label`` is blank.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from stats.base import EM_DASH, TOTAL_LABEL, DomainDescriptor, LabelRule
from stats.rows import GroupedRow

LabelDictionaries = Mapping[str, Mapping[Any, str]]

OPTION_LABEL_FIELDS: tuple[str, ...] = ("nom", "name", "label", "libelle", "titre")


def _text(value: Any) -> str | None:
    """
    Return a non-blank display string for *value*, or ``None``.
    """

    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        return value if value.strip() else None
    if isinstance(value, (int, float)):
        return str(value)
    return None


def _name_from_fields(row: GroupedRow, rule: LabelRule) -> str | None:
    for entry in rule.name_fields:
        if isinstance(entry, tuple):
            parts = [_text(row.attributes.get(name)) for name in entry]
            joined = " ".join(part.strip() for part in parts if part)
            if joined:
                return joined
            continue
        value = _text(row.attributes.get(entry))
        if value is None:
            continue
        return rule.value_labels.get(value, value)
    return None


def _row_id(row: GroupedRow, rule: LabelRule) -> Any:
    for name in rule.id_fields:
        value = row.attributes.get(name)
        if _text(value) is not None:
            return value
    if _text(row.group_key) is not None:
        return row.group_key
    return None


def _key_variants(key: Any) -> list[Any]:
    """
    Equivalent dictionary keys for *key*: ``7``, ``"7"`` and ``" 7 "`` all match.
    """

    text = str(key).strip()
    variants: list[Any] = [key, text]
    try:
        variants.append(int(text))
    except ValueError:
        pass
    return variants


def _lookup(dictionaries: LabelDictionaries | None, dimension: str, key: Any) -> str | None:
    if not dictionaries or key is None:
        return None
    by_id = dictionaries.get(dimension)
    if not by_id:
        return None
    for variant in _key_variants(key):
        label = _text(by_id.get(variant))
        if label is not None:
            return label
    return None


def resolve_label(
    row: GroupedRow,
    dimension: str,
    descriptor: DomainDescriptor,
    dictionaries: LabelDictionaries | None = None,
) -> str:
    """
    Resolve the display label of *row* grouped by *dimension*.
    """

    explicit = _text(row.group_label)
    if explicit is not None:
        return explicit
    if row.is_total:
        return TOTAL_LABEL

    rule = descriptor.labels.get(dimension)
    if rule is None:
        return EM_DASH

    name = _name_from_fields(row, rule)
    if name is not None:
        return name

    row_id = _row_id(row, rule)
    looked_up = _lookup(dictionaries, dimension, row_id)
    if looked_up is not None:
        return looked_up

    if rule.placeholder and row_id is not None:
        return rule.placeholder.format(id=row_id)
    return EM_DASH


def build_label_map(options: Iterable[Any] | None) -> dict[str, str]:
    """
    Build ``{id: label}`` from option objects such as ``{"id": 3, "nom": "Paris"}``.

    Ids are keyed as strings so a row id of ``7`` or ``"7"`` finds the same
    entry.  Options without an ``id`` are skipped; options without a usable
    label map to the id itself.
    """

    mapping: dict[str, str] = {}
    for option in options or ():
        if not isinstance(option, Mapping) or option.get("id") is None:
            continue
        label = next(
            (text for text in (_text(option.get(name)) for name in OPTION_LABEL_FIELDS) if text),
            None,
        )
        key = str(option["id"]).strip()
        mapping[key] = label or key
    return mapping
