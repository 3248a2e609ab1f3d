"""
app/queries/stats_queries.py

Concrete queries for each statistics endpoint family, plus ``use_*``
factories that build and start them.
"""

from __future__ import annotations

from typing import Any, Mapping

from app.queries.base import StatsQuery
from app.services.stats_service import (
    GroupedTable,
    StatsService,
    UnsupportedEndpointError,
    get_stats_service,
)
from stats.labels import LabelDictionaries
from stats.overview import OverviewResult
from stats.pagination import PaginatedResult
from stats.registry import get_domain, require_dimension


class DomainQuery(StatsQuery[Any]):
    """
    Query bound to one registered domain.
    """

    def __init__(
        self,
        domain: str,
        *,
        service: StatsService | None = None,
        **options: Any,
    ) -> None:
        self.descriptor = get_domain(domain)
        self._service = service or get_stats_service()
        super().__init__(**options)

    def encode(self, filters: Mapping[str, Any]) -> Mapping[str, Any]:
        return self._service.encode(self.descriptor, filters)


class OverviewQuery(DomainQuery):
    def fetch(self, filters: Mapping[str, Any]) -> OverviewResult:
        return self._service.overview(self.descriptor.name, filters)


class GroupedQuery(DomainQuery):
    """
    Grouped rows for one dimension, labelled and with a totals row.
    """

    def __init__(
        self,
        domain: str,
        dimension: str,
        *,
        dictionaries: LabelDictionaries | None = None,
        **options: Any,
    ) -> None:
        self.dimension = require_dimension(get_domain(domain), dimension)
        self._dictionaries = dictionaries
        super().__init__(domain, **options)

    def encode(self, filters: Mapping[str, Any]) -> Mapping[str, Any]:
        return {**super().encode(filters), "by": self.dimension}

    def fetch(self, filters: Mapping[str, Any]) -> GroupedTable:
        return self._service.grouped_table(
            self.descriptor.name,
            self.dimension,
            filters,
            dictionaries=self._dictionaries,
        )


class LatestQuery(DomainQuery):
    def __init__(self, domain: str, *, limit: int | None = None, **options: Any) -> None:
        if get_domain(domain).latest_endpoint is None:
            raise UnsupportedEndpointError(f"Domain '{domain}' has no latest-items endpoint.")
        self.limit = limit
        super().__init__(domain, **options)

    def encode(self, filters: Mapping[str, Any]) -> Mapping[str, Any]:
        return {**super().encode(filters), "limit": self.limit}

    def fetch(self, filters: Mapping[str, Any]) -> PaginatedResult:
        return self._service.latest(self.descriptor.name, filters, limit=self.limit)


class TopsQuery(DomainQuery):
    def __init__(self, domain: str, **options: Any) -> None:
        if get_domain(domain).tops_endpoint is None:
            raise UnsupportedEndpointError(f"Domain '{domain}' has no top-N endpoint.")
        super().__init__(domain, **options)

    def fetch(self, filters: Mapping[str, Any]) -> dict[str, list[dict[str, Any]]]:
        return self._service.tops(self.descriptor.name, filters)


def use_overview(domain: str, filters: Mapping[str, Any] | None = None, **options: Any) -> OverviewQuery:
    query = OverviewQuery(domain, filters=filters, **options)
    query.start()
    return query


def use_grouped(
    domain: str,
    dimension: str,
    filters: Mapping[str, Any] | None = None,
    **options: Any,
) -> GroupedQuery:
    query = GroupedQuery(domain, dimension, filters=filters, **options)
    query.start()
    return query


def use_latest(
    domain: str,
    filters: Mapping[str, Any] | None = None,
    *,
    limit: int | None = None,
    **options: Any,
) -> LatestQuery:
    query = LatestQuery(domain, limit=limit, filters=filters, **options)
    query.start()
    return query


def use_tops(domain: str, filters: Mapping[str, Any] | None = None, **options: Any) -> TopsQuery:
    query = TopsQuery(domain, filters=filters, **options)
    query.start()
    return query
