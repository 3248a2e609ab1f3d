"""
app/services package marker.
"""

from app.services.list_fetcher import ListQuery, ListResult, fetch_list
from app.services.stats_service import (
    GroupedTable,
    LabeledRow,
    StatsService,
    UnsupportedEndpointError,
    get_stats_service,
)

__all__ = [
    "ListQuery",
    "ListResult",
    "fetch_list",
    "GroupedTable",
    "LabeledRow",
    "StatsService",
    "UnsupportedEndpointError",
    "get_stats_service",
]
