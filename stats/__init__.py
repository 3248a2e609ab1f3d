"""
stats package marker.

Pure normalization and aggregation core for the statistics dashboards.
"""

from stats.base import DomainDescriptor, FilterRules, LabelRule, RateSpec
from stats.filters import encode_filters, filters_cache_key
from stats.labels import build_label_map, resolve_label
from stats.overview import KeyCount, OverviewResult, normalize_overview, normalize_tops
from stats.pagination import PaginatedResult, normalize_list
from stats.registry import (
    DOMAIN_REGISTRY,
    UnknownDimensionError,
    UnknownDomainError,
    get_domain,
)
from stats.rows import GroupedResult, GroupedRow, normalize_grouped, normalize_row
from stats.totals import clamp_percent, compute_totals, percentage, with_totals

__all__ = [
    "DomainDescriptor",
    "FilterRules",
    "LabelRule",
    "RateSpec",
    "encode_filters",
    "filters_cache_key",
    "build_label_map",
    "resolve_label",
    "KeyCount",
    "OverviewResult",
    "normalize_overview",
    "normalize_tops",
    "PaginatedResult",
    "normalize_list",
    "DOMAIN_REGISTRY",
    "UnknownDimensionError",
    "UnknownDomainError",
    "get_domain",
    "GroupedResult",
    "GroupedRow",
    "normalize_grouped",
    "normalize_row",
    "clamp_percent",
    "compute_totals",
    "percentage",
    "with_totals",
]
