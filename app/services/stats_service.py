"""
app/services/stats_service.py

Statistics service: composes the filter codec, the HTTP client and the
normalizers for every statistics domain.

Data flow
---------
filters -> encode_filters -> GET -> raw JSON -> normalize_* -> typed result

Failure contract
----------------
- Unknown domain / dimension     -> UnknownDomainError / UnknownDimensionError
- Endpoint the domain lacks      -> UnsupportedEndpointError
- Transport failure              -> StatsRequestError (propagated as-is)
- Unexpected payload shape       -> never an error; normalizers default
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Mapping

from app.config import get_stats_api_settings, get_stats_query_settings
from app.connectors.stats_api import StatsAPIClient
from stats.base import DomainDescriptor
from stats.filters import encode_filters
from stats.labels import LabelDictionaries, build_label_map, resolve_label
from stats.overview import OverviewResult, normalize_overview, normalize_tops
from stats.pagination import PaginatedResult, normalize_list
from stats.registry import get_domain, require_dimension
from stats.rows import GroupedResult, GroupedRow, normalize_grouped
from stats.totals import with_totals

logger = logging.getLogger(__name__)

FORMATION_FILTERS_ENDPOINT = "/formations/filtres/"

# option list in the filters payload -> grouping dimension it labels
_DICTIONARY_SOURCES: dict[str, str] = {
    "centres": "centre",
    "type_offres": "type_offre",
    "statuts": "statut",
}


class UnsupportedEndpointError(ValueError):
    """
    Raised when a domain does not expose the requested endpoint family.
    """


@dataclass(frozen=True)
class LabeledRow:
    label: str
    row: GroupedRow


@dataclass(frozen=True)
class GroupedTable:
    """
    A grouped result ready for presentation: labelled rows plus totals.
    """

    domain: str
    group_by: str
    rows: list[LabeledRow] = field(default_factory=list)
    totals: GroupedRow | None = None


class StatsService:
    """
    Fetch and normalize statistics for any registered domain.
    """

    def __init__(
        self,
        *,
        client: StatsAPIClient,
        latest_limit: int = 10,
    ) -> None:
        self._client = client
        self._latest_limit = max(1, latest_limit)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def encode(descriptor: DomainDescriptor, filters: Mapping[str, Any] | None) -> dict[str, Any]:
        return encode_filters(filters, descriptor.filter_rules)

    # ------------------------------------------------------------------
    # Endpoint families
    # ------------------------------------------------------------------

    def overview(self, domain: str, filters: Mapping[str, Any] | None = None) -> OverviewResult:
        descriptor = get_domain(domain)
        payload = self._client.get_json(descriptor.endpoint, self.encode(descriptor, filters))
        return normalize_overview(payload, descriptor)

    def grouped(
        self,
        domain: str,
        by: str,
        filters: Mapping[str, Any] | None = None,
    ) -> GroupedResult:
        descriptor = get_domain(domain)
        require_dimension(descriptor, by)
        params = {**self.encode(descriptor, filters), "by": by}
        payload = self._client.get_json(descriptor.grouped_endpoint, params)
        result = normalize_grouped(payload, descriptor, by)
        logger.debug(
            "Grouped stats domain=%s by=%s rows=%d",
            descriptor.name,
            by,
            len(result.results),
        )
        return result

    def grouped_table(
        self,
        domain: str,
        by: str,
        filters: Mapping[str, Any] | None = None,
        *,
        dictionaries: LabelDictionaries | None = None,
    ) -> GroupedTable:
        """
        Grouped rows with resolved labels and a single totals row.
        """

        descriptor = get_domain(domain)
        result = with_totals(self.grouped(domain, by, filters), descriptor)

        rows: list[LabeledRow] = []
        totals: GroupedRow | None = None
        for row in result.results:
            if row.is_total and totals is None:
                totals = row
                continue
            label = resolve_label(row, by, descriptor, dictionaries)
            rows.append(LabeledRow(label=label, row=row))

        return GroupedTable(domain=descriptor.name, group_by=result.group_by, rows=rows, totals=totals)

    def latest(
        self,
        domain: str,
        filters: Mapping[str, Any] | None = None,
        *,
        limit: int | None = None,
    ) -> PaginatedResult:
        descriptor = get_domain(domain)
        if descriptor.latest_endpoint is None:
            raise UnsupportedEndpointError(f"Domain '{descriptor.name}' has no latest-items endpoint.")
        params = {**self.encode(descriptor, filters), "limit": limit or self._latest_limit}
        payload = self._client.get_json(descriptor.latest_endpoint, params)
        return normalize_list(payload)

    def tops(self, domain: str, filters: Mapping[str, Any] | None = None) -> dict[str, list[dict[str, Any]]]:
        descriptor = get_domain(domain)
        if descriptor.tops_endpoint is None:
            raise UnsupportedEndpointError(f"Domain '{descriptor.name}' has no top-N endpoint.")
        payload = self._client.get_json(descriptor.tops_endpoint, self.encode(descriptor, filters))
        return normalize_tops(payload, descriptor)

    def label_dictionaries(self) -> dict[str, dict[Any, str]]:
        """
        ``{dimension: {id: label}}`` built from the formation filter options.
        """

        payload = self._client.get_json(FORMATION_FILTERS_ENDPOINT)
        source: Mapping[str, Any] = payload if isinstance(payload, Mapping) else {}
        return {
            dimension: build_label_map(source.get(option_key) if isinstance(source.get(option_key), list) else None)
            for option_key, dimension in _DICTIONARY_SOURCES.items()
        }


def require_grouping(domain: str, by: str) -> DomainDescriptor:
    """
    Validate *domain* and *by* without issuing a request.
    """

    descriptor = get_domain(domain)
    require_dimension(descriptor, by)
    return descriptor


@lru_cache(maxsize=1)
def get_stats_service() -> StatsService:
    """
    Build and cache the statistics service.
    """

    return StatsService(
        client=StatsAPIClient(settings=get_stats_api_settings()),
        latest_limit=get_stats_query_settings().latest_limit,
    )
