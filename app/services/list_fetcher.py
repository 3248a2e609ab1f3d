"""
app/services/list_fetcher.py

Paginated list retrieval for plain (non-statistics) list endpoints.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Mapping

from app.config import get_stats_query_settings
from app.connectors.stats_api import StatsAPIClient
from stats.filters import encode_filters
from stats.pagination import normalize_list


@dataclass(frozen=True)
class ListQuery:
    page: int = 1
    page_size: int = 20
    search: str | None = None
    sort_key: str | None = None
    sort_descending: bool = False
    filters: Mapping[str, Any] = field(default_factory=dict)

    def ordering(self) -> str | None:
        key = (self.sort_key or "").strip()
        if not key:
            return None
        return f"-{key}" if self.sort_descending else key

    def to_params(self) -> dict[str, Any]:
        """
        Query-string parameters for this page; blank values are pruned.
        """

        params: dict[str, Any] = dict(encode_filters(self.filters))
        params["page"] = max(1, self.page)
        params["page_size"] = max(1, self.page_size)

        search = (self.search or "").strip()
        if search:
            params["search"] = search

        ordering = self.ordering()
        if ordering:
            params["ordering"] = ordering
        return params


@dataclass(frozen=True)
class ListResult:
    items: list[Any]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.page_size)


def total_pages(total: int, page_size: int) -> int:
    """
    Number of pages for *total* items, never below one.
    """

    return max(1, math.ceil(max(total, 1) / max(page_size, 1)))


def fetch_list(client: StatsAPIClient, endpoint: str, query: ListQuery | None = None) -> ListResult:
    """
    Fetch one page of *endpoint* and normalize whatever envelope it returns.

    Transport failures propagate as ``StatsRequestError``.
    """

    query = query or ListQuery(page_size=get_stats_query_settings().list_page_size)
    payload = client.get_json(endpoint, query.to_params())
    page = normalize_list(payload)
    return ListResult(
        items=page.results,
        total=page.count,
        page=max(1, query.page),
        page_size=max(1, query.page_size),
    )
